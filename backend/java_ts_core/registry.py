from __future__ import annotations

from typing import Optional

from .adapters.java_adapter import JavaAdapter
from .config import MIN_SOURCE_LENGTH, SOURCE_EXTENSION, build_type_system

# shared engine: caches are append-only and safe across threads
java_adapter = JavaAdapter(type_system=build_type_system(), min_source_length=MIN_SOURCE_LENGTH)


def try_convert_best(code: str, filename: str | None, location: Optional[str] = None):
    if filename and filename.endswith(SOURCE_EXTENSION):
        return java_adapter.convert_fast(code, location)
    else:
        return {"error": "Unsupported file type for Java converter"}
