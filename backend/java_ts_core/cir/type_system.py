"""
backend/java_ts_core/cir/type_system.py

Java → TypeScript type system.

Holds the three static tables the engine works from and the recursive
type mapper built on top of them:

  - TYPE_MAPPING      built-in Java type name -> TypeScript type name
  - BUILT_IN_TYPES    names that never produce an import
  - CUSTOM_TYPE_REGISTRY  known custom type -> logical location

The tables are wrapped into an immutable `TypeSystem` value so the engine
can be constructed with an alternate registry (tests, JAVA_TS_REGISTRY_FILE).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import FrozenSet, List, Mapping, Optional

# ---------------------------------------------------------------------------
# Static tables
# ---------------------------------------------------------------------------

TYPE_MAPPING: Mapping[str, str] = MappingProxyType({
    "String": "string",
    "int": "number",
    "Integer": "number",
    "long": "number",
    "Long": "number",
    "double": "number",
    "Double": "number",
    "float": "number",
    "Float": "number",
    "boolean": "boolean",
    "Boolean": "boolean",
    "char": "string",
    "Character": "string",
    "byte": "number",
    "Byte": "number",
    "short": "number",
    "Short": "number",
    "Object": "any",
    "void": "void",
    "Date": "Date",
    "LocalDate": "Date",
    "LocalDateTime": "Date",
    "BigDecimal": "number",
    "BigInteger": "number",
    "UUID": "string",
})

# TypeScript names plus Java containers that map onto built-in shapes
_EXTRA_BUILT_INS = {
    "string", "number", "boolean", "Date", "any", "void", "undefined", "null",
    "List", "ArrayList", "LinkedList", "Set", "HashSet", "Map", "HashMap",
    "Collection", "Optional",
    "Object", "Class",
}

BUILT_IN_TYPES: FrozenSet[str] = frozenset(
    set(TYPE_MAPPING) | set(TYPE_MAPPING.values()) | _EXTRA_BUILT_INS
)

CUSTOM_TYPE_REGISTRY: Mapping[str, str] = MappingProxyType({
    # Base types in utils/base
    "AbstractEntity": "utils/base/AbstractEntity",
    "AbstractEntityRef": "utils/base/AbstractEntityRef",
    "AbstractCatalogEntity": "utils/base/AbstractCatalogEntity",
    "EntityRef": "utils/base/EntityRef",
    "TimePeriod": "utils/base/TimePeriod",
    "Money": "utils/base/Money",
    "Quantity": "utils/base/Quantity",
    "Duration": "utils/base/Duration",
    "Note": "utils/base/Note",
    "RelatedParty": "utils/base/RelatedParty",
    "Attachment": "utils/base/Attachment",
    "Event": "utils/base/Event",

    # Shared types in entity/common
    "Characteristic": "entity/common/Characteristic",
    "CharacteristicSpecification": "entity/common/CharacteristicSpecification",
    "CharacteristicValueSpecification": "entity/common/CharacteristicValueSpecification",
    "Association": "entity/common/Association",
    "AssociationRole": "entity/common/AssociationRole",
    "EntitySpecification": "entity/common/EntitySpecification",
    "EntityRelationship": "entity/common/EntityRelationship",
    "EntityCategory": "entity/common/EntityCategory",
    "ExternalReference": "entity/common/ExternalReference",
    "ApplicableTimePeriod": "entity/common/ApplicableTimePeriod",
    "ContactMedium": "entity/common/ContactMedium",
    "GeographicAddress": "entity/common/GeographicAddress",
    "Addressable": "entity/common/Addressable",
})

# Guards against modifier-like words being picked up as declaration names
RESERVED_NAMES: FrozenSet[str] = frozenset({
    "Class", "Interface", "Abstract", "Final", "Public", "Private",
    "Protected", "Static", "Controller",
})

LIST_CONTAINERS = frozenset({"List", "ArrayList", "Set", "Collection"})
MAP_CONTAINERS = frozenset({"Map", "HashMap"})

CLASS_NAME_RE = re.compile(r"^[A-Z][A-Za-z0-9_]*$")
_GENERIC_RE = re.compile(r"^([A-Za-z0-9_]+)\s*<(.+)>$", re.S)
_WILDCARD_BOUND_RE = re.compile(r"\?\s*(?:extends|super)\s+")
_BARE_WILDCARD_RE = re.compile(r"\?")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def split_generic_args(text: str) -> List[str]:
    """
    Split a generic argument list on top-level commas.

      "String, Map<String, Integer>" -> ["String", "Map<String, Integer>"]
    """
    parts: List[str] = []
    depth = 0
    current: List[str] = []

    for ch in text:
        if ch == "<":
            depth += 1
        elif ch == ">":
            depth -= 1
        elif ch == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(ch)

    tail = "".join(current).strip()
    if tail:
        parts.append(tail)
    return parts


def match_generic(type_text: str) -> Optional[tuple[str, str]]:
    """Return (container, raw_args) for `Name<Args>`, else None."""
    m = _GENERIC_RE.match(type_text.strip())
    if not m:
        return None
    return m.group(1), m.group(2).strip()


def is_class_name(name: str) -> bool:
    return bool(CLASS_NAME_RE.match(name))


def strip_wildcards(type_text: str) -> str:
    """
    `? extends X` and `? super X` -> X, a bare `?` -> Object.

      "List<? extends Item>" -> "List<Item>"
    """
    if "?" not in type_text:
        return type_text
    return _BARE_WILDCARD_RE.sub("Object", _WILDCARD_BOUND_RE.sub("", type_text))


# ---------------------------------------------------------------------------
# TypeSystem
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TypeSystem:
    type_mapping: Mapping[str, str] = field(default_factory=lambda: TYPE_MAPPING)
    registry: Mapping[str, str] = field(default_factory=lambda: CUSTOM_TYPE_REGISTRY)
    reserved_names: FrozenSet[str] = RESERVED_NAMES
    extra_built_ins: FrozenSet[str] = field(default_factory=lambda: frozenset(_EXTRA_BUILT_INS))

    def with_registry(self, extra: Mapping[str, str]) -> "TypeSystem":
        merged = dict(self.registry)
        merged.update(extra)
        return TypeSystem(
            type_mapping=self.type_mapping,
            registry=MappingProxyType(merged),
            reserved_names=self.reserved_names,
            extra_built_ins=self.extra_built_ins,
        )

    def is_built_in(self, name: str) -> bool:
        return (
            name in self.extra_built_ins
            or name in self.type_mapping
            or name in self.type_mapping.values()
        )

    def location_of(self, name: str) -> Optional[str]:
        return self.registry.get(name)

    def is_valid_declaration_name(self, name: str) -> bool:
        return is_class_name(name) and name not in self.reserved_names

    def map_type(self, java_type: str) -> str:
        """
        Java type text -> TypeScript type text.

        Precedence: array suffix, single outer generic, exact built-in,
        otherwise unchanged (custom type).
        """
        t = strip_wildcards(java_type).strip()
        if not t:
            return "any"

        if t.endswith("[]"):
            return f"{self.map_type(t[:-2])}[]"

        generic = match_generic(t)
        if generic:
            container, raw_args = generic
            args = split_generic_args(raw_args)

            if container in LIST_CONTAINERS and len(args) == 1:
                return f"{self.map_type(args[0])}[]"

            if container in MAP_CONTAINERS and len(args) == 2:
                key_type = self.map_type(args[0])
                value_type = self.map_type(args[1])
                return f"{{ [key: {key_type}]: {value_type} }}"

            if container == "Optional" and len(args) == 1:
                return f"{self.map_type(args[0])} | undefined"

            return f"{container}<{', '.join(self.map_type(a) for a in args)}>"

        mapped = self.type_mapping.get(t)
        if mapped:
            return mapped

        return t


DEFAULT_TYPE_SYSTEM = TypeSystem()
