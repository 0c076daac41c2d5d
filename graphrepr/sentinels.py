"""
Sentinel objects for distinguishing between unset values, None, and other states.

All sentinels use identity checks (using 'is') rather than equality checks.

Sentinels:
    UNSET: Represents an unprovided optional argument (distinguishes from None)

Helper Functions:
    ifunset: Return default if value is UNSET, otherwise return value

Example:
    >>> def merge(max_str: int | UnsetType = UNSET) -> int:
    ...     return ifunset(max_str, default=400)
"""

from typing import Any, Callable

__all__ = [
    'UNSET',
    'UnsetType',
    'ifunset',
]


# Base Sentinel --------------------------------------------------------------------------------------------------------

class _SentinelBase:
    """
    Base class for all sentinel objects.

    Sentinels are singleton objects optimized for identity checks.
    They provide clean representations and consistent behavior.
    """
    __slots__ = ('_name',)

    def __init__(self, name: str) -> None:
        self._name = name

    def __repr__(self) -> str:
        """Returns a clean string representation for debugging."""
        return f'<{self._name}>'

    def __eq__(self, other: Any) -> bool:
        """Ensures identity-based comparison."""
        return self is other

    def __hash__(self) -> int:
        """Returns a hash based on object identity."""
        return id(self)

    def __bool__(self) -> bool:
        """Returns False by default (sentinels are typically falsy)."""
        return False

    def __reduce__(self) -> tuple:
        """Ensures proper behavior during pickling."""
        return (self.__class__, (self._name,))


# Sentinel Types -----------------------------------------------------------------------------------------------------

class UnsetType(_SentinelBase):
    """
    Sentinel type for UNSET.

    Marks a keyword argument that was not provided, so that None stays
    available as a meaningful value.
    """
    _instance: 'UnsetType | None' = None

    def __new__(cls) -> 'UnsetType':
        """Ensures singleton behavior."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if not hasattr(self, '_name'):
            super().__init__("UNSET")

    def __reduce__(self) -> tuple:
        """Ensure pickling returns the singleton instance."""
        return (self.__class__, ())


# Singleton Instances --------------------------------------------------------------------------------------------------

UNSET = UnsetType()


# Helper Functions -----------------------------------------------------------------------------------------------------

def ifunset(value: Any, *, default: Any = None, default_factory: Callable[[], Any] | None = None) -> Any:
    """
    Return default if value is UNSET, otherwise return value.

    Args:
        value: The value to check.
        default: Value returned when value is UNSET.
        default_factory: Callable producing the default; takes precedence over default.

    Returns:
        The original value, or the default when value is UNSET.
    """
    if value is UNSET:
        return default_factory() if default_factory is not None else default
    return value
