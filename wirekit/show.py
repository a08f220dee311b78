"""Summaries of provider sets: what they import and what they can produce."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple, Union

from .model import Info, Provider, ProviderSet, ProviderSetID, Value
from .types import GoType, type_string

_RESET = "\x1b[0m"
_RED_BOLD = "\x1b[0;1;31m"
_BLUE = "\x1b[0;34m"
_GREEN = "\x1b[0;32m"


@dataclass
class OutGroup:
    """Outputs of a provider set that need the same set of inputs."""

    name: str = ""
    inputs: Set[GoType] = field(default_factory=set)
    outputs: Dict[GoType, Union[Provider, Value]] = field(default_factory=dict)


def format_provider_set_name(import_path: str, var_name: str) -> str:
    """Return ``"import/path".Name``."""
    return str(ProviderSetID(import_path, var_name))


def gather(info: Info, key: ProviderSetID) -> Tuple[List[OutGroup], Set[str]]:
    """Flatten a provider set into output groups keyed by required inputs.

    Also returns the names of the named provider sets it imports.
    """
    pset = info.sets[key]

    imports: Set[str] = set()
    visited: Set[int] = set()
    pending: List[ProviderSet] = [pset]
    while pending:
        curr = pending.pop()
        if id(curr) in visited:
            continue
        visited.add(id(curr))
        if curr.var_name and not (
            curr.pkg_path == key.import_path and curr.var_name == key.var_name
        ):
            imports.add(format_provider_set_name(curr.pkg_path, curr.var_name))
        pending.extend(curr.imports)

    groups: List[OutGroup] = []
    seen: Dict[GoType, int] = {}  # group index, or -1 for an input
    stack: List[GoType] = []
    for k in pset.outputs():
        if k not in seen:
            stack.append(k)
        while stack:
            curr = stack.pop()
            if curr in seen:
                continue
            pv = pset.for_type(curr)
            if pv.is_nil():
                seen[curr] = -1
                continue
            if pv.is_provider():
                p = pv.provider()
                missing = [a.type for a in p.args if a.type not in seen]
                if missing:
                    stack.append(curr)
                    stack.extend(missing)
                    continue
                inputs: Set[GoType] = set()
                for arg in p.args:
                    i = seen[arg.type]
                    if i == -1:
                        inputs.add(arg.type)
                    else:
                        inputs |= groups[i].inputs
                item: Union[Provider, Value] = p
            else:
                item = pv.value()
                inputs = set()
            for i, g in enumerate(groups):
                if g.inputs == inputs:
                    g.outputs[curr] = item
                    seen[curr] = i
                    break
            else:
                seen[curr] = len(groups)
                groups.append(OutGroup(inputs=inputs, outputs={curr: item}))

    for g in groups:
        g.name = ", ".join(sorted(type_string(t) for t in g.inputs)) or "no inputs"
    groups.sort(key=lambda g: (len(g.inputs), g.name))
    return groups, imports


def format_show(info: Info) -> str:
    """Render the provider sets and injectors of ``info`` as colored text."""
    lines: List[str] = []
    for i, key in enumerate(sorted(info.sets)):
        if i:
            lines.append("")
        groups, imports = gather(info, key)
        lines.append(f"{_RED_BOLD}{key}{_RESET}")
        lines.extend(f"\t{imp}" for imp in sorted(imports))
        for g in groups:
            lines.append(f"{_BLUE}Outputs given {g.name}:{_RESET}")
            outs = {type_string(t): item.pos for t, item in g.outputs.items()}
            for t in sorted(outs):
                lines.append(f"\t{_GREEN}{t}{_RESET}")
                lines.append(f"\t\tat {outs[t]}")
    if info.injectors:
        lines.append(f"{_RED_BOLD}Injectors:{_RESET}")
        lines.extend(f"\t{inj}" for inj in sorted(info.injectors))
    return "".join(line + "\n" for line in lines)