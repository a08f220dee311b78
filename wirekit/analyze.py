"""Provider graph analysis: solving injectors and validating provider sets."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .errors import Position, WireError, WireErrors, note_position
from .model import IfaceBinding, Provider, ProviderSet, Value
from .types import GoType, identical, type_string

_ABORT = object()


def _quote_identifier(name: str) -> str:
    # Identifiers never need escaping.
    return f'"{name}"'


class CallKind(enum.Enum):
    """The code pattern a step of an injector uses."""

    FUNC_PROVIDER = enum.auto()
    STRUCT_PROVIDER = enum.auto()
    VALUE_EXPR = enum.auto()


@dataclass
class Call:
    """One step of an injector: a function call, a struct literal or a value.

    Each entry of ``args`` is either the index of an injector input
    (less than the number of inputs) or the number of inputs plus the index
    of an earlier call.
    """

    kind: CallKind
    out: GoType
    import_path: str = ""
    name: str = ""
    args: Tuple[int, ...] = ()
    field_names: Tuple[str, ...] = ()
    ins: Tuple[GoType, ...] = ()
    has_cleanup: bool = False
    has_err: bool = False
    value: Optional[Value] = None


@dataclass(frozen=True, eq=False)
class ProviderSetSrc:
    """The entry of a provider set that contributed a type; exactly one is set."""

    provider: Optional[Provider] = None
    binding: Optional[IfaceBinding] = None
    value: Optional[Value] = None
    imported: Optional[ProviderSet] = None

    def __post_init__(self) -> None:
        present = [
            x for x in (self.provider, self.binding, self.value, self.imported) if x is not None
        ]
        if len(present) != 1:
            raise ValueError("exactly one source must be given")


def solve(out: GoType, given: Sequence[GoType], provider_set: ProviderSet) -> List[Call]:
    """Find the calls that produce ``out`` from the ``given`` inputs.

    Raises WireErrors describing every problem found.
    """
    given = tuple(given)
    errors: List[BaseException] = []
    for i, g in enumerate(given):
        for h in given[:i]:
            if identical(g, h):
                errors.append(ValueError(f"multiple inputs of the same type {type_string(g)}"))

    index: Dict[GoType, object] = {}
    for i, g in enumerate(given):
        pv = provider_set.for_type(g)
        if pv.is_provider():
            p = pv.provider()
            errors.append(
                ValueError(
                    f"input of {type_string(g)} conflicts with provider {p.name} at {p.pos}"
                )
            )
        elif pv.is_value():
            errors.append(
                ValueError(f"input of {type_string(g)} conflicts with value at {pv.value().pos}")
            )
        else:
            index[g] = i
    if errors:
        raise WireErrors(errors)

    used: List[ProviderSetSrc] = []
    calls: List[Call] = []
    stack: List[Tuple[GoType, Optional[GoType]]] = [(out, None)]
    while stack:
        t, from_t = stack.pop()
        if t in index:
            continue
        pv = provider_set.for_type(t)
        if pv.is_nil():
            if from_t is None:
                msg = f"no provider found for {type_string(t)} (output of injector)"
            else:
                msg = (
                    f"no provider found for {type_string(t)} "
                    f"(required by provider of {type_string(from_t)})"
                )
            errors.append(ValueError(msg))
            index[t] = _ABORT
            continue
        if pv.is_provider():
            p = pv.provider()
            used.append(provider_set.src_map[t])
            if not identical(p.out, t):
                # Interface binding: reuse the concrete type's variable.
                if p.out not in index:
                    stack.append((t, from_t))
                    stack.append((p.out, t))
                    continue
                index[t] = index[p.out]
                continue
            # Push unvisited arguments in reverse so calls come out in argument order.
            missing = [a.type for a in reversed(p.args) if a.type not in index]
            if missing:
                stack.append((t, from_t))
                stack.extend((a, t) for a in missing)
                continue
            arg_indices = [index[a.type] for a in p.args]
            if any(i is _ABORT for i in arg_indices):
                index[t] = _ABORT
                continue
            index[t] = len(given) + len(calls)
            calls.append(
                Call(
                    kind=CallKind.STRUCT_PROVIDER if p.is_struct else CallKind.FUNC_PROVIDER,
                    out=t,
                    import_path=p.import_path,
                    name=p.name,
                    args=tuple(arg_indices),
                    field_names=p.fields,
                    ins=tuple(a.type for a in p.args),
                    has_cleanup=p.has_cleanup,
                    has_err=p.has_err,
                )
            )
            continue
        v = pv.value()
        if not identical(v.out, t):
            if v.out not in index:
                stack.append((t, from_t))
                stack.append((v.out, t))
                continue
            index[t] = index[v.out]
            continue
        used.append(provider_set.src_map[t])
        index[t] = len(given) + len(calls)
        calls.append(Call(kind=CallKind.VALUE_EXPR, out=t, value=v))

    if errors:
        raise WireErrors(errors)
    unused = verify_args_used(provider_set, used)
    if unused:
        raise WireErrors(unused)
    return calls


def verify_args_used(
    provider_set: ProviderSet, used: Sequence[ProviderSetSrc]
) -> List[BaseException]:
    """Return an error for every entry of the set that ``used`` never mentions."""
    errors: List[BaseException] = []
    for imp in provider_set.imports:
        if not any(u.imported is imp for u in used):
            if imp.var_name:
                errors.append(ValueError(f"unused provider set {_quote_identifier(imp.var_name)}"))
            else:
                errors.append(ValueError("unused provider set"))
    for p in provider_set.providers:
        if not any(u.provider is p for u in used):
            errors.append(ValueError(f"unused provider {_quote_identifier(p.name)}"))
    for v in provider_set.values:
        if not any(u.value is v for u in used):
            errors.append(ValueError(f"unused value of type {type_string(v.out)}"))
    for b in provider_set.bindings:
        if not any(u.binding is b for u in used):
            errors.append(
                ValueError(f"unused interface binding to type {type_string(b.iface)}")
            )
    return errors


def build_provider_map(
    provider_set: ProviderSet,
) -> Tuple[Dict[GoType, Union[Provider, Value]], Dict[GoType, ProviderSetSrc]]:
    """Compute the provider and source maps of a set; raise WireErrors on conflicts.

    The set's own ``provider_map`` and ``src_map`` are ignored.
    """
    provider_map: Dict[GoType, Union[Provider, Value]] = {}
    src_map: Dict[GoType, ProviderSetSrc] = {}
    set_map: Dict[GoType, ProviderSet] = {}
    errors: List[BaseException] = []

    for imp in provider_set.imports:
        for k, v in imp.provider_map.items():
            if k in provider_map:
                errors.append(binding_conflict_error(imp.pos, k, set_map[k]))
                continue
            provider_map[k] = v
            src_map[k] = ProviderSetSrc(imported=imp)
            set_map[k] = imp
    if errors:
        raise WireErrors(errors)

    for p in provider_set.providers:
        if p.out in provider_map:
            errors.append(binding_conflict_error(p.pos, p.out, set_map[p.out]))
            continue
        provider_map[p.out] = p
        src_map[p.out] = ProviderSetSrc(provider=p)
        set_map[p.out] = provider_set
    for v in provider_set.values:
        if v.out in provider_map:
            errors.append(binding_conflict_error(v.pos, v.out, set_map[v.out]))
            continue
        provider_map[v.out] = v
        src_map[v.out] = ProviderSetSrc(value=v)
        set_map[v.out] = provider_set
    if errors:
        raise WireErrors(errors)

    # Bindings come last so the concrete type is already provided.
    for b in provider_set.bindings:
        if b.iface in provider_map:
            errors.append(binding_conflict_error(b.pos, b.iface, set_map[b.iface]))
            continue
        concrete = provider_map.get(b.provided)
        if concrete is None:
            errors.append(
                note_position(b.pos, ValueError(f"no binding for {type_string(b.provided)}"))
            )
            continue
        provider_map[b.iface] = concrete
        src_map[b.iface] = ProviderSetSrc(binding=b)
        set_map[b.iface] = provider_set
    if errors:
        raise WireErrors(errors)
    return provider_map, src_map


def verify_acyclic(provider_map: Dict[GoType, Union[Provider, Value]]) -> List[BaseException]:
    """Return an error for every dependency cycle in ``provider_map``."""
    visited = set()
    errors: List[BaseException] = []
    for root in list(provider_map):
        stack: List[Tuple[GoType, ...]] = [(root,)]
        while stack:
            trail = stack.pop()
            head = trail[-1]
            if head in visited:
                continue
            visited.add(head)
            item = provider_map.get(head)
            if item is None or isinstance(item, Value):
                continue
            if not isinstance(item, Provider):
                raise TypeError("invalid provider map value")
            for arg in item.args:
                a = arg.type
                for i, b in enumerate(trail):
                    if identical(a, b):
                        lines = [f"cycle for {type_string(a)}:\n"]
                        for t in trail[i:]:
                            p = provider_map[t]
                            lines.append(f"{type_string(t)} ({p.import_path}.{p.name}) ->\n")
                        lines.append(f"{type_string(a)}\n")
                        errors.append(ValueError("".join(lines)))
                        break
                else:
                    stack.append(trail + (a,))
    return errors


def binding_conflict_error(position: Position, t: GoType, prev_set: ProviderSet) -> WireError:
    """Describe a second binding for ``t`` declared at ``position``."""
    text = type_string(t)
    if prev_set.var_name:
        msg = (
            f"multiple bindings for {text} (previous binding in "
            f"{_quote_identifier(prev_set.pkg_path)}.{prev_set.var_name})"
        )
    else:
        msg = f"multiple bindings for {text} (previous binding at {prev_set.pos})"
    return note_position(position, ValueError(msg))