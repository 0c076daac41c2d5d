"""
Graphrepr Scalar Classifier

Decides which values are atomic (rendered as a single token) and which are
composite (walked into), and renders atomic values to text.
"""

# Standard library -----------------------------------------------------------------------------------------------------

import collections.abc as abc
import ctypes
import dataclasses
import datetime as dt
import enum
import functools
import ipaddress
import types
import uuid
from decimal import Decimal
from fractions import Fraction
from typing import Any

# Local ----------------------------------------------------------------------------------------------------------------

from graphrepr.errors import UnsupportedShapeError
from graphrepr.text import fmt_duration, fmt_hex, truncate
from graphrepr.utils import class_name, is_generic_alias

__all__ = [
    "fmt_scalar",
    "has_custom_text",
    "is_scalar",
    "text_form",
    "truncate",
]

# Constants ------------------------------------------------------------------------------------------------------------

ATOMIC_TYPES = (
    type(None),
    bool,
    int,
    float,
    complex,
    Decimal,
    Fraction,
    str,
    bytes,
    bytearray,
    enum.Enum,
    type,
    dt.date,  # datetime is a date subclass
    dt.time,
    dt.timedelta,
    uuid.UUID,
    ipaddress.IPv4Address,
    ipaddress.IPv6Address,
    ipaddress.IPv4Network,  # Networks iterate over their hosts
    ipaddress.IPv6Network,
    ipaddress.IPv4Interface,
    ipaddress.IPv6Interface,
    ctypes._SimpleCData,
    ctypes._Pointer,
    type(Ellipsis),
    type(NotImplemented),
)

CALLABLE_TYPES = (
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    types.MethodWrapperType,
    types.WrapperDescriptorType,
    types.MethodDescriptorType,
    types.ClassMethodDescriptorType,
    types.ModuleType,
)


# Methods --------------------------------------------------------------------------------------------------------------


def is_scalar(value: Any) -> bool:
    """
    Check whether a value is rendered as a single token instead of being walked.

    Atomic values are primitives and text, enum members, type handles, dates and
    durations, UUIDs and IP addresses, ctypes scalars and pointers, one-shot
    iterators and generators (never advanced), functions, methods and modules,
    and any non-container whose type defines its own __str__ or __repr__.

    Args:
        value: Any object.

    Returns:
        bool: True for atomic values, False for values that should be decomposed.

    Examples:
        >>> is_scalar(42), is_scalar("text"), is_scalar(int)
        (True, True, True)
        >>> is_scalar([1, 2]), is_scalar(ValueError("bad"))
        (False, False)
        >>> is_scalar(iter([1, 2]))
        True
    """
    if isinstance(value, ATOMIC_TYPES):
        return True
    if isinstance(value, (abc.Iterator, abc.AsyncIterator)):
        return True
    if isinstance(value, CALLABLE_TYPES):
        return True
    if _is_type_handle(value):
        return True
    if _is_container(value):
        return False
    return has_custom_text(type(value))


@functools.cache
def has_custom_text(tp: type) -> bool:
    """
    Check whether a type defines its own text form.

    Exceptions and dataclasses always answer False, since their generated
    text hides the members worth showing.

    Examples:
        >>> from pathlib import PurePosixPath
        >>> has_custom_text(PurePosixPath)
        True
        >>> class Plain: ...
        >>> has_custom_text(Plain)
        False
    """
    if issubclass(tp, BaseException) or dataclasses.is_dataclass(tp):
        return False
    return tp.__str__ is not object.__str__ or tp.__repr__ is not object.__repr__


def fmt_scalar(value: Any, *, use_quotes: bool = False) -> str:
    """
    Render an atomic value to text.

    Args:
        value: An atomic value, see is_scalar().
        use_quotes: If True, str and bytes values are rendered quoted and escaped via repr().

    Returns:
        str: The rendered value:
            - None, True and False as literal tokens
            - text as-is, or quoted when use_quotes is set
            - flag enums as ``TypeName(0xHEX) = Name1 | Name2``
            - other enums as ``TypeName(value) = Name``
            - durations in compact form, see fmt_duration()
            - classes and typing aliases by qualified name
            - ctypes scalars by value, ctypes pointers as hex address
            - everything else via str(), then repr(), then a ``<TypeName object>`` token

    Raises:
        UnsupportedShapeError: For ctypes pointers to pointers.

    Examples:
        >>> fmt_scalar(None), fmt_scalar("abc"), fmt_scalar("abc", use_quotes=True)
        ('None', 'abc', "'abc'")
        >>> class Perm(enum.Flag):
        ...     Read = 1
        ...     Write = 2
        >>> fmt_scalar(Perm.Read | Perm.Write)
        'Perm(0x3) = Read | Write'
        >>> fmt_scalar(dt.timedelta(seconds=90))
        '1m30s'
    """
    if value is None or isinstance(value, bool):
        return str(value)

    if isinstance(value, str):
        return repr(value) if use_quotes else value

    if isinstance(value, (bytes, bytearray)):
        return repr(bytes(value)) if use_quotes else bytes(value).decode("ascii", "backslashreplace")

    if isinstance(value, enum.Flag):
        return _fmt_flag(value)

    if isinstance(value, enum.Enum):
        return f"{type(value).__name__}({value.value!r}) = {value.name}"

    if isinstance(value, dt.timedelta):
        return fmt_duration(value)

    if _is_type_handle(value):
        return class_name(value, fully_qualified=True)

    if isinstance(value, (ctypes._Pointer, ctypes.c_void_p)):
        return _fmt_pointer(value)

    if isinstance(value, ctypes._SimpleCData):
        return fmt_scalar(value.value, use_quotes=use_quotes)

    return text_form(value)


def text_form(value: Any) -> str:
    """
    Return str(value), falling back to repr() and then to a ``<TypeName object>`` token.

    Never raises for ordinary objects.
    """
    try:
        return str(value)
    except Exception:
        try:
            return repr(value)
        except Exception:
            return f"<{class_name(value)} object>"


# Private Methods ------------------------------------------------------------------------------------------------------


def _fmt_flag(value: enum.Flag) -> str:
    tp = type(value)
    bits = value.value

    if bits == 0:
        zero = next((m for m in tp.__members__.values() if m.value == 0), None)
        return f"{tp.__name__}({fmt_hex(0)}) = {zero.name if zero is not None else 0}"

    names = []
    covered = 0
    for member in tp:
        if member.value and bits & member.value == member.value:
            names.append(member.name)
            covered |= member.value

    uncovered = bits & ~covered
    if uncovered:
        names.append(fmt_hex(uncovered))

    return f"{tp.__name__}({fmt_hex(bits)}) = {' | '.join(names)}"


def _fmt_pointer(value: Any) -> str:
    if isinstance(value, ctypes._Pointer) and issubclass(value._type_, (ctypes._Pointer, ctypes.c_void_p)):
        raise UnsupportedShapeError(f"cannot render pointer to pointer {class_name(value)}")
    address = ctypes.cast(value, ctypes.c_void_p).value
    return fmt_hex(address or 0)


def _is_container(value: Any) -> bool:
    tp = type(value)
    if isinstance(value, (abc.Iterable, abc.Mapping)):
        return True
    if callable(getattr(tp, "items", None)):
        return True
    return hasattr(tp, "__len__") and hasattr(tp, "__getitem__")


def _is_type_handle(value: Any) -> bool:
    return isinstance(value, type) or isinstance(value, types.UnionType) or is_generic_alias(value)
