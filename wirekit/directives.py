"""Directives that declare provider sets, interface bindings and values."""

from __future__ import annotations

import dataclasses
from typing import List, Optional, Sequence, Tuple

from .analyze import build_provider_map, verify_acyclic
from .errors import Position, WireError, WireErrors, note_position_all
from .model import IfaceBinding, Provider, ProviderSet, Value, struct_provider
from .types import (
    GoType,
    InterfaceType,
    NamedType,
    PointerType,
    StructType,
    identical,
    implements,
    type_string,
    underlying,
)


def _underlying_or_none(t: GoType) -> Optional[GoType]:
    try:
        return underlying(t)
    except ValueError:
        return None


def _add_item(pset: ProviderSet, item: object, pos: Position) -> None:
    if isinstance(item, Provider):
        pset.providers.append(item)
    elif isinstance(item, ProviderSet):
        pset.imports.append(item)
    elif isinstance(item, IfaceBinding):
        pset.bindings.append(item)
    elif isinstance(item, Value):
        pset.values.append(item)
    elif isinstance(item, NamedType) and isinstance(_underlying_or_none(item), StructType):
        plain = struct_provider(item.pkg_path, item.name, item, pos)
        pointer = dataclasses.replace(plain, out=PointerType(item))
        pset.providers.extend((plain, pointer))
    else:
        raise WireError("unknown pattern", pos)


def new_set(
    *args: object,
    pkg_path: str = "",
    var_name: str = "",
    pos: Optional[Position] = None,
) -> ProviderSet:
    """Create an analysed provider set from providers, sets, bindings, values
    and named struct types.

    Raises WireErrors if any argument is invalid, two entries provide the same
    type, or the providers form a cycle.
    """
    pos = pos if pos is not None else Position()
    pset = ProviderSet(pos=pos, pkg_path=pkg_path, var_name=var_name)
    errors: List[BaseException] = []
    for item in args:
        try:
            _add_item(pset, item, pos)
        except WireError as e:
            errors.append(e)
    if errors:
        raise WireErrors(note_position_all(pos, errors))
    pset.provider_map, pset.src_map = build_provider_map(pset)
    cycles = verify_acyclic(pset.provider_map)
    if cycles:
        raise WireErrors(cycles)
    return pset


def build(*args: object, pkg_path: str = "", pos: Optional[Position] = None) -> ProviderSet:
    """Create the unnamed provider set an injector is built from."""
    return new_set(*args, pkg_path=pkg_path, var_name="", pos=pos)


def bind(iface: GoType, provided: GoType, pos: Optional[Position] = None) -> IfaceBinding:
    """Declare that ``provided`` satisfies the interface ``iface`` points to."""
    pos = pos if pos is not None else Position()
    if not isinstance(iface, GoType) or not isinstance(provided, GoType):
        raise TypeError("bind takes two Go types")
    if not isinstance(iface, PointerType) or not isinstance(
        _underlying_or_none(iface.elem), InterfaceType
    ):
        raise WireError(
            "first argument to bind must be a pointer to an interface type; "
            f"found {type_string(iface)}",
            pos,
        )
    if identical(iface.elem, provided):
        raise WireError("cannot bind interface to itself", pos)
    if not implements(provided, iface.elem):
        raise WireError(
            f"{type_string(provided)} does not implement {type_string(iface)}", pos
        )
    return IfaceBinding(iface=iface.elem, provided=provided, pos=pos)


def value(
    out: GoType,
    expr: str,
    pos: Optional[Position] = None,
    refs: Sequence[Tuple[str, str]] = (),
) -> Value:
    """Declare an expression of type ``out`` to be copied into injectors."""
    pos = pos if pos is not None else Position()
    if not isinstance(out, GoType):
        raise TypeError("value type must be a Go type")
    if not isinstance(expr, str) or not expr.strip():
        raise WireError("call to Value takes exactly one argument", pos)
    return Value(out=out, expr=expr, pos=pos, refs=tuple(refs))