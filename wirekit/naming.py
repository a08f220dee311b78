"""Identifier helpers for generated code."""

from __future__ import annotations

from typing import Callable, Optional

from .types import (
    ArrayType,
    BasicType,
    ChanType,
    GoType,
    InterfaceType,
    MapType,
    NamedType,
    PointerType,
    Qualifier,
    Signature,
    SliceType,
    StructType,
    type_string,
    underlying,
)


def unexport(name: str) -> str:
    """Convert a possibly exported name to an unexported one."""
    if not name:
        return ""
    first = name[0]
    if not first.isupper():
        return name
    if len(name) == 1 or not name[1].isupper():
        return first.lower() + name[1:]
    # UPPERWord -> upperWord
    out = [first.lower()]
    i = 1
    current: Optional[str] = name[1]
    while current is not None and current.isupper():
        following = name[i + 1] if i + 1 < len(name) else None
        if following is not None and following.islower():
            break
        i += 1
        out.append(current.lower())
        current = following
    out.append(name[i:])
    return "".join(out)


def export(name: str) -> str:
    """Convert a possibly unexported name to an exported one."""
    if not name:
        return ""
    if name[0].isupper():
        return name
    return name[0].upper() + name[1:]


def disambiguate(name: str, collides: Callable[[str], bool]) -> str:
    """Pick a unique name, preferring ``name`` itself."""
    if not collides(name):
        return name
    base = name
    if base and base[-1] in "0123456789":
        base += "_"
    n = 2
    while True:
        candidate = f"{base}{n}"
        if not collides(candidate):
            return candidate
        n += 1


def type_variable_name(t: GoType) -> str:
    """Invent a variable name from a type name, or return ""."""
    if isinstance(t, PointerType):
        t = t.elem
    if isinstance(t, (BasicType, NamedType)):
        return t.name
    return ""


def zero_value(t: GoType, qualifier: Optional[Qualifier] = None) -> str:
    """Return the shortest expression for the zero value of ``t``."""
    u = underlying(t)
    if isinstance(u, (ArrayType, StructType)):
        return type_string(t, qualifier) + "{}"
    if isinstance(u, BasicType):
        if u.is_boolean:
            return "false"
        if u.is_numeric:
            return "0"
        if u.is_string:
            return '""'
        raise ValueError(f"no zero value for {type_string(t)}")
    if isinstance(u, (ChanType, InterfaceType, MapType, PointerType, Signature, SliceType)):
        return "nil"
    raise ValueError(f"no zero value for {type_string(t)}")