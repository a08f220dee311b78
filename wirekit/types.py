"""A small model of Go types: identity, printing and method sets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Mapping, Optional, Tuple, Union

Qualifier = Callable[[str], str]

_BASIC_KINDS = {
    "bool": "bool",
    "string": "string",
    "int": "int",
    "int8": "int8",
    "int16": "int16",
    "int32": "int32",
    "int64": "int64",
    "uint": "uint",
    "uint8": "uint8",
    "uint16": "uint16",
    "uint32": "uint32",
    "uint64": "uint64",
    "uintptr": "uintptr",
    "float32": "float32",
    "float64": "float64",
    "complex64": "complex64",
    "complex128": "complex128",
    "byte": "uint8",
    "rune": "int32",
}

_NUMERIC_KINDS = frozenset(_BASIC_KINDS.values()) - {"bool", "string"}

_CHAN_DIRECTIONS = ("both", "send", "recv")


class GoType:
    """Base class of all Go type descriptions."""

    def __str__(self) -> str:
        return type_string(self)


MethodsArg = Union[Mapping[str, "Signature"], Iterable[Tuple[str, "Signature"]]]


def _methods(value: MethodsArg) -> Tuple[Tuple[str, "Signature"], ...]:
    items = value.items() if isinstance(value, Mapping) else value
    pairs = sorted(((str(name), sig) for name, sig in items), key=lambda p: p[0])
    seen = set()
    for name, sig in pairs:
        if name in seen:
            raise ValueError(f"duplicate method {name}")
        if not isinstance(sig, Signature):
            raise TypeError(f"method {name} must have a Signature")
        seen.add(name)
    return tuple(pairs)


@dataclass(frozen=True)
class BasicType(GoType):
    """A predeclared type such as int or string; aliases are identical."""

    name: str = field(compare=False)
    kind: str = field(init=False)

    def __post_init__(self) -> None:
        try:
            kind = _BASIC_KINDS[self.name]
        except KeyError:
            raise ValueError(f"unknown basic type {self.name!r}") from None
        object.__setattr__(self, "kind", kind)

    @property
    def is_boolean(self) -> bool:
        return self.kind == "bool"

    @property
    def is_numeric(self) -> bool:
        return self.kind in _NUMERIC_KINDS

    @property
    def is_string(self) -> bool:
        return self.kind == "string"


@dataclass(frozen=True)
class NamedType(GoType):
    """A declared type, identified by its package path and name."""

    pkg_path: str
    name: str
    underlying: Optional[GoType] = field(default=None, compare=False, repr=False)
    methods: MethodsArg = field(default=(), compare=False, repr=False)
    pointer_methods: MethodsArg = field(default=(), compare=False, repr=False)

    def __post_init__(self) -> None:
        if isinstance(self.underlying, NamedType):
            object.__setattr__(self, "underlying", self.underlying.underlying)
        object.__setattr__(self, "methods", _methods(self.methods))
        object.__setattr__(self, "pointer_methods", _methods(self.pointer_methods))


@dataclass(frozen=True)
class PointerType(GoType):
    elem: GoType


@dataclass(frozen=True)
class SliceType(GoType):
    elem: GoType


@dataclass(frozen=True)
class ArrayType(GoType):
    length: int
    elem: GoType


@dataclass(frozen=True)
class MapType(GoType):
    key: GoType
    value: GoType


@dataclass(frozen=True)
class ChanType(GoType):
    """A channel; direction is "both", "send" or "recv"."""

    elem: GoType
    direction: str = "both"

    def __post_init__(self) -> None:
        if self.direction not in _CHAN_DIRECTIONS:
            raise ValueError(f"invalid channel direction {self.direction!r}")


@dataclass(frozen=True)
class InterfaceType(GoType):
    """An interface; methods are kept sorted by name."""

    methods: MethodsArg = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "methods", _methods(self.methods))


@dataclass(frozen=True)
class StructField:
    name: str
    type: GoType


@dataclass(frozen=True)
class StructType(GoType):
    fields: Tuple[StructField, ...] = ()

    def __post_init__(self) -> None:
        fields = tuple(self.fields)
        names = [f.name for f in fields]
        if len(set(names)) != len(names):
            raise ValueError("duplicate struct field name")
        object.__setattr__(self, "fields", fields)


@dataclass(frozen=True)
class Signature(GoType):
    """A function type; parameter names are not part of its identity."""

    params: Tuple[GoType, ...] = ()
    results: Tuple[GoType, ...] = ()
    variadic: bool = False

    def __post_init__(self) -> None:
        params = tuple(self.params)
        object.__setattr__(self, "params", params)
        object.__setattr__(self, "results", tuple(self.results))
        if self.variadic and (not params or not isinstance(params[-1], SliceType)):
            raise ValueError("variadic signature must end in a slice parameter")


ERROR_TYPE = NamedType(
    "",
    "error",
    InterfaceType({"Error": Signature((), (BasicType("string"),))}),
)
CLEANUP_TYPE = Signature()


def underlying(t: GoType) -> GoType:
    """Return the underlying type of ``t``."""
    if isinstance(t, NamedType):
        if t.underlying is None:
            raise ValueError(f"named type {t.name} has no underlying type")
        return t.underlying
    return t


def _signature_body(sig: Signature, qualifier: Optional[Qualifier]) -> str:
    params = []
    for i, p in enumerate(sig.params):
        if sig.variadic and i == len(sig.params) - 1:
            params.append("..." + type_string(p.elem, qualifier))
        else:
            params.append(type_string(p, qualifier))
    text = "(" + ", ".join(params) + ")"
    if len(sig.results) == 1:
        text += " " + type_string(sig.results[0], qualifier)
    elif sig.results:
        text += " (" + ", ".join(type_string(r, qualifier) for r in sig.results) + ")"
    return text


def type_string(t: GoType, qualifier: Optional[Qualifier] = None) -> str:
    """Render ``t`` as Go source; ``qualifier`` maps package paths to names."""
    if isinstance(t, BasicType):
        return t.name
    if isinstance(t, NamedType):
        if t.pkg_path:
            prefix = qualifier(t.pkg_path) if qualifier is not None else t.pkg_path
            if prefix:
                return f"{prefix}.{t.name}"
        return t.name
    if isinstance(t, PointerType):
        return "*" + type_string(t.elem, qualifier)
    if isinstance(t, SliceType):
        return "[]" + type_string(t.elem, qualifier)
    if isinstance(t, ArrayType):
        return f"[{t.length}]" + type_string(t.elem, qualifier)
    if isinstance(t, MapType):
        return f"map[{type_string(t.key, qualifier)}]{type_string(t.value, qualifier)}"
    if isinstance(t, ChanType):
        elem = type_string(t.elem, qualifier)
        if t.direction == "send":
            return "chan<- " + elem
        if t.direction == "recv":
            return "<-chan " + elem
        if isinstance(t.elem, ChanType) and t.elem.direction == "recv":
            return f"chan ({elem})"
        return "chan " + elem
    if isinstance(t, InterfaceType):
        body = "; ".join(name + _signature_body(sig, qualifier) for name, sig in t.methods)
        return "interface{" + body + "}"
    if isinstance(t, StructType):
        body = "; ".join(f"{f.name} {type_string(f.type, qualifier)}" for f in t.fields)
        return "struct{" + body + "}"
    if isinstance(t, Signature):
        return "func" + _signature_body(t, qualifier)
    raise TypeError(f"not a Go type: {t!r}")


def identical(a: GoType, b: GoType) -> bool:
    """Report whether ``a`` and ``b`` are the same Go type."""
    return a == b


def _method_set(t: GoType) -> dict:
    if isinstance(t, PointerType) and isinstance(t.elem, NamedType):
        if not isinstance(underlying(t.elem), InterfaceType):
            return {**dict(t.elem.methods), **dict(t.elem.pointer_methods)}
        return {}
    u = underlying(t)
    if isinstance(u, InterfaceType):
        return dict(u.methods)
    if isinstance(t, NamedType):
        return dict(t.methods)
    return {}


def implements(t: GoType, iface: GoType) -> bool:
    """Report whether the method set of ``t`` satisfies interface ``iface``."""
    target = underlying(iface)
    if not isinstance(target, InterfaceType):
        raise TypeError(f"{type_string(iface)} is not an interface type")
    available = _method_set(t)
    return all(name in available and available[name] == sig for name, sig in target.methods)