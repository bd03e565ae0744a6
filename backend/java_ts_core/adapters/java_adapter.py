from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from ..cache import ResultCache, fingerprint
from ..cir.deps import collect_declaration_dependencies
from ..cir.imports import ImportResolver
from ..cir.model import (
    ClassDescriptor,
    Conversion,
    EnumDescriptor,
    ImportStatement,
    Matched,
)
from ..cir.type_system import DEFAULT_TYPE_SYSTEM, TypeSystem
from ..emit.ts_emitter import emit_enum, emit_interface, emit_sentinel
from .java_source import (
    extract_enum_constants,
    extract_fields,
    extract_signature,
    normalize_source,
    strip_comments,
)

MIN_SOURCE_LENGTH = 20


class JavaAdapter:
    """
    Java declaration → TypeScript declaration engine.
    Converts one POJO class into an `export interface` and one enum into an
    `export enum`, with imports for every custom type it references.

    Entry points:
      - convert(code, location)       full path, cached, None when nothing to convert
      - convert_fast(code, location)  always text, sentinel comment on unsupported input,
                                      imports only when a location is given
      - resolve_imports(deps, location)

    Includes:
      - @JsonProperty renaming (quoted when not a bare identifier)
      - Generics & collections (List/Set -> T[], Map -> index signature, Optional -> T | undefined)
      - Relative import paths from a static type-location registry
      - Two process-lifetime caches (conversions, import lists)

    Never raises on malformed input: every failure is reported through the
    returned value, so batch callers can keep going.
    """

    language = "java"

    # sources that are never data containers
    SKIP_MARKERS = ("public static void main", "@Test", "extends Exception")

    def __init__(
        self,
        type_system: Optional[TypeSystem] = None,
        min_source_length: int = MIN_SOURCE_LENGTH,
    ) -> None:
        self.types = type_system or DEFAULT_TYPE_SYSTEM
        self.min_source_length = min_source_length
        self.interface_cache = ResultCache("interfaces")
        self.import_resolver = ImportResolver(self.types, ResultCache("imports"))

    # ---------------- Helpers ----------------

    def _too_small(self, code: Optional[str]) -> bool:
        return not code or len(code.strip()) < self.min_source_length

    def _should_skip(self, code: str) -> bool:
        return any(marker in code for marker in self.SKIP_MARKERS)

    def map_type(self, java_type: str) -> str:
        return self.types.map_type(java_type)

    # ---------------- Core processing ----------------

    def explain(self, code: Optional[str], location: Optional[str] = None, with_imports: bool = True) -> Conversion:
        """
        Run the whole pipeline once (no caching) and report the tagged outcome.
        """
        if self._too_small(code):
            return Conversion("too_small", reason="Input too small")

        normalized = normalize_source(code)
        signature = extract_signature(normalized, self.types)
        if not isinstance(signature, Matched):
            return Conversion("unsupported", reason=signature.reason)
        sig = signature.value

        if sig.kind == "enum":
            constants = extract_enum_constants(normalized, sig.name)
            if not isinstance(constants, Matched):
                return Conversion("unsupported", reason=constants.reason)
            return Conversion("converted", output=emit_enum(EnumDescriptor(sig.name, constants.value)))

        fields = extract_fields(strip_comments(code), self.types)
        decl = ClassDescriptor(name=sig.name, supertype=sig.supertype, fields=fields)

        deps = collect_declaration_dependencies(
            ((f.mapped_type, f.declared_type) for f in fields),
            decl.supertype,
            self.types,
        )

        imports: List[ImportStatement] = []
        if with_imports and deps:
            imports = self.resolve_imports(deps, location)

        return Conversion(
            "converted",
            output=emit_interface(decl, imports),
            dependencies=tuple(deps),
        )

    # ---------------- Entry points ----------------

    def convert(self, code: Optional[str], location: Optional[str] = None) -> Optional[str]:
        if self._too_small(code):
            return None

        key = fingerprint(code + "\0" + (location or ""))
        cached = self.interface_cache.get(key)
        if cached is not None:
            return cached

        result = self.explain(code, location)
        if not result.ok:
            return None
        return self.interface_cache.put(key, result.output)

    def convert_fast(self, code: Optional[str], location: Optional[str] = None) -> str:
        if self._too_small(code):
            return emit_sentinel("Skipped: Input too small")
        if self._should_skip(code):
            return emit_sentinel("Skipped: Not suitable for interface conversion")

        result = self.explain(code, location, with_imports=location is not None)
        if not result.ok:
            return emit_sentinel(result.reason or "Unsupported input")
        return result.output

    def resolve_imports(
        self,
        dependencies: Sequence[str],
        location: Optional[str] = None,
    ) -> List[ImportStatement]:
        return self.import_resolver.resolve(list(dependencies), location)

    def cache_stats(self) -> Dict[str, Any]:
        return {
            "interfaces": self.interface_cache.stats(),
            "imports": self.import_resolver.cache.stats(),
        }
