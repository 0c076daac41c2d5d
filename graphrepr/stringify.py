"""
Graphrepr Stringify

Front API: bounded, cycle-safe text for arbitrary values, with process-wide
options that presets and incremental configuration adjust.
"""

# Standard library -----------------------------------------------------------------------------------------------------

import dataclasses
from dataclasses import dataclass
from typing import Any, Literal

# Local ----------------------------------------------------------------------------------------------------------------

from graphrepr.render import render
from graphrepr.sentinels import UNSET, UnsetType, ifunset
from graphrepr.text import prettify
from graphrepr.typed import fmt_typed
from graphrepr.walker import to_graph

__all__ = [
    "Preset",
    "StringifyOptions",
    "configure",
    "fmt_any",
    "get_options",
    "stringify",
]

# Classes --------------------------------------------------------------------------------------------------------------

Preset = Literal["compact", "debug", "default", "logging"]


@dataclass(frozen=True)
class StringifyOptions:
    """
    Options shared by stringify() and fmt_any().

    Budgets:
        max_visits: Elements and members collected in total by stringify() (default: 80)
        max_str: Characters per scalar before truncation (default: 400)
        max_layers: Layers expanded below the root by stringify() (default: 20)
        max_items: Elements per collection in fmt_any() (default: 32)

        Negative budgets are unbounded.

    Formatting:
        depth: Levels fmt_any() descends into, non-negative (default: 3)
        use_quotes: Quote and escape str and bytes values (default: False)
        pretty: Spread the output over indented lines, see prettify() (default: False)

    Examples:
        >>> StringifyOptions().merge(max_visits=8).max_visits
        8
        >>> StringifyOptions.compact().depth
        1
    """
    max_visits: int = 80
    max_str: int = 400
    max_layers: int = 20
    depth: int = 3
    use_quotes: bool = False
    max_items: int = 32
    pretty: bool = False

    def __post_init__(self):
        for name in ("max_visits", "max_str", "max_layers", "depth", "max_items"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(f"{name} must be int, but got {type(value).__name__}")
        for name in ("use_quotes", "pretty"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise TypeError(f"{name} must be bool, but got {type(value).__name__}")
        if self.depth < 0:
            raise ValueError(f"depth must be non-negative, but got {self.depth}")

    # Class Methods ------------------------------------

    @classmethod
    def compact(cls) -> "StringifyOptions":
        """Short single-line output: small budgets, one level of members."""
        return cls(max_visits=16, max_str=64, max_layers=3, depth=1, max_items=8)

    @classmethod
    def debug(cls) -> "StringifyOptions":
        """
        Generous budgets with quoted text, spread over indented lines.

        Returns:
            StringifyOptions: Configuration for interactive inspection of large structures.
        """
        return cls(max_visits=1024, max_str=4096, max_layers=64, depth=6, use_quotes=True, max_items=256,
                   pretty=True)

    @classmethod
    def logging(cls) -> "StringifyOptions":
        """Single-line quoted output sized for log records."""
        return cls(max_visits=32, max_str=120, max_layers=4, depth=2, use_quotes=True, max_items=16)

    # Methods ------------------------------------------

    def merge(
        self,
        *,
        max_visits: int | UnsetType = UNSET,
        max_str: int | UnsetType = UNSET,
        max_layers: int | UnsetType = UNSET,
        depth: int | UnsetType = UNSET,
        use_quotes: bool | UnsetType = UNSET,
        max_items: int | UnsetType = UNSET,
        pretty: bool | UnsetType = UNSET,
    ) -> "StringifyOptions":
        """
        Return a copy with the given fields replaced; UNSET arguments keep the current values.

        Raises:
            TypeError, ValueError: If a replaced field is invalid.
        """
        changes = {
            "max_visits": max_visits,
            "max_str": max_str,
            "max_layers": max_layers,
            "depth": depth,
            "use_quotes": use_quotes,
            "max_items": max_items,
            "pretty": pretty,
        }
        return dataclasses.replace(self, **{k: ifunset(v, default=getattr(self, k)) for k, v in changes.items()})


_PRESETS = {
    "compact": StringifyOptions.compact,
    "debug": StringifyOptions.debug,
    "default": StringifyOptions,
    "logging": StringifyOptions.logging,
}

_options = StringifyOptions()


# Methods --------------------------------------------------------------------------------------------------------------

def configure(preset: Preset | None = None, **kwargs: Any) -> StringifyOptions:
    """
    Set the process-wide options used when no explicit options are passed.

    A preset replaces the current options before the keyword overrides are merged;
    without a preset, the overrides are merged into the current options.

    Args:
        preset: One of "compact", "debug", "default" or "logging", or None to keep the current options.
        **kwargs: Fields to override, see StringifyOptions.merge().

    Returns:
        StringifyOptions: The new process-wide options.

    Raises:
        ValueError: If preset is unknown.

    Examples:
        >>> configure(preset="logging", max_str=60).max_str
        60
        >>> configure(preset="default").max_str
        400
    """
    global _options
    if preset is None:
        base = _options
    elif preset in _PRESETS:
        base = _PRESETS[preset]()
    else:
        raise ValueError(f"preset must be one of {sorted(_PRESETS)}, but got {preset!r}")
    _options = base.merge(**kwargs)
    return _options


def get_options() -> StringifyOptions:
    """Return the process-wide options."""
    return _options


def stringify(value: Any, *, opts: StringifyOptions | None = None) -> str:
    """
    Render any value as bounded, deterministic, cycle-safe text.

    Walks the value breadth-first within the visit, string and layer budgets of
    the options, then renders the resulting tree. Self-references and shared
    references show as ``…``, collections cut short by the budget end with
    ``…N more``.

    Args:
        value: Any object.
        opts: Options to use, the process-wide options if None.

    Returns:
        str: The rendered value.

    Examples:
        >>> items = [1, 2]
        >>> items.append(items)
        >>> stringify(items)
        '[1, 2, …]'
        >>> stringify(list(range(10)), opts=StringifyOptions(max_visits=4))
        '[0, 1, 2, 3, …6 more]'
    """
    opts = opts or get_options()
    node = to_graph(value, max_visits=opts.max_visits, max_str=opts.max_str, max_layers=opts.max_layers,
                    use_quotes=opts.use_quotes)
    text = render(node)
    return prettify(text) if opts.pretty else text


def fmt_any(value: Any, *, opts: StringifyOptions | None = None) -> str:
    """
    Format any value by its public members, descending at most opts.depth levels.

    See graphrepr.typed.fmt_typed() for the output format.

    Examples:
        >>> class Point:
        ...     def __init__(self):
        ...         self.X, self.Y = 1, 2
        >>> fmt_any(Point())
        'Point { X: 1, Y: 2 }'
    """
    opts = opts or get_options()
    text = fmt_typed(value, opts.depth, use_quotes=opts.use_quotes, max_items=opts.max_items)
    return prettify(text) if opts.pretty else text
