"""Provider graph records: providers, values, bindings and provider sets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .errors import Position, WireError
from .types import (
    CLEANUP_TYPE,
    ERROR_TYPE,
    GoType,
    NamedType,
    StructType,
    identical,
    type_string,
    underlying,
)

WIRE_IMPORT_PATH = "wirekit"

_ESCAPES = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    "\\": "\\\\",
    '"': '\\"',
}


def _go_quote(text: str) -> str:
    """Quote ``text`` as a double-quoted literal with escapes."""
    out = ['"']
    for ch in text:
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ch.isprintable():
            out.append(ch)
        elif ord(ch) < 0x10000:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(f"\\U{ord(ch):08x}")
    out.append('"')
    return "".join(out)


@dataclass(frozen=True)
class ProviderInput:
    """An incoming edge in the provider graph."""

    type: GoType


@dataclass(eq=False)
class Provider:
    """The signature of a provider: a function or a named struct type."""

    import_path: str
    name: str
    out: GoType
    pos: Position = field(default_factory=Position)
    args: Tuple[ProviderInput, ...] = ()
    is_struct: bool = False
    fields: Tuple[str, ...] = ()
    has_cleanup: bool = False
    has_err: bool = False

    def __post_init__(self) -> None:
        self.args = tuple(self.args)
        self.fields = tuple(self.fields)


@dataclass(eq=False)
class Value:
    """A value expression copied into generated injectors.

    ``refs`` lists the ``(package path, identifier)`` pairs the expression
    refers to.
    """

    out: GoType
    expr: str
    pos: Position = field(default_factory=Position)
    refs: Tuple[Tuple[str, str], ...] = ()

    def __post_init__(self) -> None:
        self.refs = tuple(tuple(r) for r in self.refs)


@dataclass(eq=False)
class IfaceBinding:
    """Declares that ``provided`` satisfies inputs of interface ``iface``."""

    iface: GoType
    provided: GoType
    pos: Position = field(default_factory=Position)


class ProviderOrValue:
    """Either a Provider, a Value, or nothing."""

    __slots__ = ("_provider", "_value")

    def __init__(self, item: Union[Provider, Value, None] = None):
        self._provider: Optional[Provider] = None
        self._value: Optional[Value] = None
        if isinstance(item, Provider):
            self._provider = item
        elif isinstance(item, Value):
            self._value = item
        elif item is not None:
            raise TypeError(f"expected a Provider or a Value, got {type(item).__name__}")

    def is_nil(self) -> bool:
        return self._provider is None and self._value is None

    def is_provider(self) -> bool:
        return self._provider is not None

    def is_value(self) -> bool:
        return self._value is not None

    def provider(self) -> Optional[Provider]:
        if self._value is not None:
            raise TypeError("Value pointer converted to a Provider")
        return self._provider

    def value(self) -> Optional[Value]:
        if self._provider is not None:
            raise TypeError("Provider pointer converted to a Value")
        return self._value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ProviderOrValue):
            return NotImplemented
        return self._provider is other._provider and self._value is other._value

    def __hash__(self) -> int:
        return hash((id(self._provider), id(self._value)))

    def __repr__(self) -> str:
        item = self._provider or self._value
        return f"ProviderOrValue({item!r})"


@dataclass(eq=False)
class ProviderSet:
    """A set of providers, bindings, values and imported sets.

    ``provider_map`` maps each provided type to its Provider or Value and
    ``src_map`` maps it to the entry that contributed it; both are filled in
    once the set is analysed.
    """

    pos: Position = field(default_factory=Position)
    pkg_path: str = ""
    var_name: str = ""
    providers: List[Provider] = field(default_factory=list)
    bindings: List[IfaceBinding] = field(default_factory=list)
    values: List[Value] = field(default_factory=list)
    imports: List["ProviderSet"] = field(default_factory=list)
    provider_map: Dict[GoType, Union[Provider, Value]] = field(default_factory=dict)
    src_map: Dict[GoType, object] = field(default_factory=dict)

    def outputs(self) -> List[GoType]:
        """Return the types the set can produce, in no particular order."""
        return list(self.provider_map)

    def for_type(self, t: GoType) -> ProviderOrValue:
        """Return the provider or value for ``t``, or an empty ProviderOrValue."""
        item = self.provider_map.get(t)
        if item is not None and not isinstance(item, (Provider, Value)):
            raise TypeError("invalid value in provider map")
        return ProviderOrValue(item)


@dataclass(frozen=True, order=True)
class ProviderSetID:
    """Identifies a named provider set."""

    import_path: str
    var_name: str

    def __str__(self) -> str:
        return _go_quote(self.import_path) + "." + self.var_name


@dataclass(frozen=True, order=True)
class Injector:
    """An injector function."""

    import_path: str
    func_name: str

    def __str__(self) -> str:
        return _go_quote(self.import_path) + "." + self.func_name


@dataclass
class Info:
    """The result of loading packages."""

    sets: Dict[ProviderSetID, ProviderSet] = field(default_factory=dict)
    injectors: List[Injector] = field(default_factory=list)


@dataclass(frozen=True)
class OutputSignature:
    """The validated result types of a provider or injector."""

    out: GoType
    cleanup: bool = False
    err: bool = False


def func_output(results: Sequence[GoType]) -> OutputSignature:
    """Validate a function's result types; raise ValueError if they are wrong."""
    results = tuple(results)
    if not results:
        raise ValueError("no return values")
    if len(results) == 1:
        return OutputSignature(results[0])
    if len(results) == 2:
        second = results[1]
        if identical(second, ERROR_TYPE):
            return OutputSignature(results[0], err=True)
        if identical(second, CLEANUP_TYPE):
            return OutputSignature(results[0], cleanup=True)
        raise ValueError(
            f"second return type is {type_string(second)}; must be error or func()"
        )
    if len(results) == 3:
        if not identical(results[1], CLEANUP_TYPE):
            raise ValueError(f"second return type is {type_string(results[1])}; must be func()")
        if not identical(results[2], ERROR_TYPE):
            raise ValueError(f"third return type is {type_string(results[2])}; must be error")
        return OutputSignature(results[0], cleanup=True, err=True)
    raise ValueError("too many return values")


def _check_distinct(types: Sequence[GoType], what: str, pos: Position) -> None:
    for i, t in enumerate(types):
        for earlier in types[:i]:
            if identical(t, earlier):
                raise WireError(f"{what} of type {type_string(earlier)}", pos)


def func_provider(
    import_path: str,
    name: str,
    params: Sequence[GoType],
    results: Sequence[GoType],
    pos: Optional[Position] = None,
) -> Provider:
    """Create a provider for a function; raise WireError on a bad signature."""
    pos = pos if pos is not None else Position()
    try:
        sig = func_output(results)
    except ValueError as e:
        raise WireError(f"wrong signature for provider {name}: {e}", pos) from None
    params = tuple(params)
    _check_distinct(params, "provider has multiple parameters", pos)
    return Provider(
        import_path=import_path,
        name=name,
        pos=pos,
        args=tuple(ProviderInput(p) for p in params),
        out=sig.out,
        has_cleanup=sig.cleanup,
        has_err=sig.err,
    )


def struct_provider(
    import_path: str,
    name: str,
    struct_type: NamedType,
    pos: Optional[Position] = None,
) -> Provider:
    """Create the non-pointer provider for a named struct type."""
    pos = pos if pos is not None else Position()
    st = underlying(struct_type) if isinstance(struct_type, NamedType) else None
    if not isinstance(st, StructType):
        raise WireError(f"{import_path}.{name} does not name a struct")
    field_types = tuple(f.type for f in st.fields)
    _check_distinct(field_types, "provider struct has multiple fields", pos)
    return Provider(
        import_path=import_path,
        name=name,
        pos=pos,
        args=tuple(ProviderInput(t) for t in field_types),
        fields=tuple(f.name for f in st.fields),
        is_struct=True,
        out=struct_type,
    )


def is_wire_import(path: str) -> bool:
    """Report whether ``path`` names the directive package, vendored or not."""
    vendor = "vendor/"
    i = path.rfind(vendor)
    if i != -1 and (i == 0 or path[i - 1] == "/"):
        path = path[i + len(vendor):]
    return path == WIRE_IMPORT_PATH