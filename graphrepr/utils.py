"""
Graphrepr utilities shared across the package.

Contains functions used by multiple modules to avoid circular imports.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import dataclasses
import functools
import inspect
import types
import typing
from typing import Any


# Methods --------------------------------------------------------------------------------------------------------------


def class_name(
    obj: Any,
    fully_qualified: bool = False,
    fully_qualified_builtins: bool = False,
) -> str:
    """
    Get the class name of an object or a class.

    Returns class name whether given an instance or the class itself.
    For example, both `class_name(10)` and `class_name(int)` return 'int'.
    Parameterized generics are unfolded with their arguments.

    Parameters:
        obj (Any): An object, a class or a generic alias.
        fully_qualified (bool): If true, returns the fully qualified name for user objects or classes.
        fully_qualified_builtins (bool): If true, returns the fully qualified name for builtin objects or classes.

    Returns:
        str: The class name.

    Examples:
        >>> class_name(10)
        'int'

        >>> class_name(10, fully_qualified_builtins=True)
        'builtins.int'

        >>> class_name(dict[str, list[int]])
        'dict[str, list[int]]'

        >>> class Point: ...
        >>> class_name(Point(), fully_qualified=True)
        'graphrepr.utils.Point'
    """
    if isinstance(obj, types.UnionType):
        return " | ".join(_arg_name(a, fully_qualified, fully_qualified_builtins) for a in typing.get_args(obj))

    if is_generic_alias(obj):
        origin = typing.get_origin(obj)
        if not isinstance(origin, type):
            return repr(obj)
        args = typing.get_args(obj)
        head = class_name(origin, fully_qualified, fully_qualified_builtins)
        if not args:
            return head
        return head + "[" + ", ".join(_arg_name(a, fully_qualified, fully_qualified_builtins) for a in args) + "]"

    # Check if the obj is an instance or a class
    cls = obj if isinstance(obj, type) else type(obj)

    module = getattr(cls, "__module__", None)

    if module == "builtins":
        return f"{module}.{cls.__name__}" if fully_qualified_builtins else cls.__name__

    if fully_qualified and module:
        return f"{module}.{cls.__name__}"
    return cls.__name__


@functools.cache
def class_members(tp: type) -> tuple[str, ...]:
    """
    Public readable member names declared by a class, sorted.

    Collects __slots__, class annotations, dataclass fields and readable properties
    across the MRO. Properties marked deprecated (``__deprecated__`` set by
    ``warnings.deprecated``) are left out, as are private and dunder names.
    Exceptions always expose ``args``.

    Examples:
        >>> class Point:
        ...     __slots__ = ("x", "y")
        ...     @property
        ...     def norm(self): ...
        >>> class_members(Point)
        ('norm', 'x', 'y')
    """
    names = set()
    for klass in reversed(tp.__mro__):
        if klass is object:
            continue
        slots = klass.__dict__.get("__slots__", ())
        names.update((slots,) if isinstance(slots, str) else slots)
        names.update(_annotation_names(klass))
        for name, attr in klass.__dict__.items():
            if isinstance(attr, property):
                if attr.fget is not None and not _is_deprecated(attr):
                    names.add(name)
                else:
                    names.discard(name)

    if dataclasses.is_dataclass(tp):
        names.update(f.name for f in dataclasses.fields(tp))
    if issubclass(tp, BaseException):
        names.add("args")

    return tuple(sorted(n for n in names if _is_public(n)))


def instance_members(obj: Any) -> list[str]:
    """Public names in the instance __dict__, empty if the instance has none."""
    try:
        attrs = vars(obj)
    except TypeError:
        return []
    return [k for k in attrs if isinstance(k, str) and _is_public(k)]


def public_members(obj: Any) -> list[str]:
    """
    Public member names of an instance: its class members merged with its own __dict__ keys, sorted.
    """
    return sorted(set(class_members(type(obj))).union(instance_members(obj)))


def is_generic_alias(obj: Any) -> bool:
    """Return True for parameterized generics such as list[int] or typing.Dict[str, int]."""
    return isinstance(obj, (types.GenericAlias, type(typing.List[int]))) and typing.get_origin(obj) is not None


# Private Methods ------------------------------------------------------------------------------------------------------


def _arg_name(arg: Any, fully_qualified: bool, fully_qualified_builtins: bool) -> str:
    if arg is Ellipsis:
        return "..."
    if arg is type(None):
        return "None"
    if isinstance(arg, type) or is_generic_alias(arg):
        return class_name(arg, fully_qualified, fully_qualified_builtins)
    return repr(arg)


def _annotation_names(klass: type) -> list[str]:
    try:
        return list(inspect.get_annotations(klass))
    except NameError:
        return []


def _is_deprecated(attr: property) -> bool:
    return (getattr(attr, "__deprecated__", None) is not None
            or getattr(attr.fget, "__deprecated__", None) is not None)


def _is_public(name: str) -> bool:
    return not name.startswith("_")
