from __future__ import annotations

from typing import Dict, Iterable, Optional

from .type_system import TypeSystem, is_class_name, match_generic, split_generic_args, strip_wildcards

# Ordered set: insertion order is discovery order, values unused
DependencySet = Dict[str, None]


def collect_type_dependencies(type_text: str, deps: DependencySet, types: TypeSystem) -> None:
    """
    Walk a (Java or TypeScript) type expression and record every custom
    type name it references. Mirrors the structural cases of map_type.
    """
    if not type_text:
        return
    t = strip_wildcards(type_text).strip()
    if not t or types.is_built_in(t):
        return

    if t.endswith("[]"):
        collect_type_dependencies(t[:-2], deps, types)
        return

    if "<" in t:
        generic = match_generic(t)
        if generic:
            container, raw_args = generic
            if not types.is_built_in(container) and is_class_name(container):
                deps.setdefault(container, None)
            for arg in split_generic_args(raw_args):
                collect_type_dependencies(arg, deps, types)
        return

    if "," in t:
        for part in t.split(","):
            collect_type_dependencies(part, deps, types)
        return

    if is_class_name(t):
        deps.setdefault(t, None)


def collect_declaration_dependencies(
    field_types: Iterable[tuple[str, str]],
    supertype: Optional[str],
    types: TypeSystem,
) -> list[str]:
    """
    field_types: (mapped_type, declared_type) per field, in field order.
    Both forms are walked so a custom type spelled like a built-in in the
    source is still tracked. The supertype is appended last.
    """
    deps: DependencySet = {}
    for mapped, declared in field_types:
        collect_type_dependencies(mapped, deps, types)
        collect_type_dependencies(declared, deps, types)

    if supertype and not types.is_built_in(supertype):
        deps.setdefault(supertype, None)

    return list(deps)
