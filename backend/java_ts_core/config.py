from __future__ import annotations

import json
import os
from pathlib import Path

from dotenv import load_dotenv  # type: ignore

from .cir.type_system import DEFAULT_TYPE_SYSTEM, TypeSystem

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent
REPO_ROOT = BASE_DIR.parent.parent

INPUT_DIR = Path(os.getenv("JAVA_TS_INPUT_DIR") or REPO_ROOT / "examples")
OUTPUT_DIR = Path(os.getenv("JAVA_TS_OUTPUT_DIR") or REPO_ROOT / "outputs")

MIN_SOURCE_LENGTH = int(os.getenv("JAVA_TS_MIN_SOURCE_LENGTH", "20"))
BATCH_SIZE = int(os.getenv("JAVA_TS_BATCH_SIZE", "25"))
WORKERS = int(os.getenv("JAVA_TS_WORKERS", "8"))

# optional JSON object {TypeName: "logical/path/TypeName"} merged over the built-in registry
REGISTRY_FILE = (os.getenv("JAVA_TS_REGISTRY_FILE") or "").strip()

SOURCE_EXTENSION = ".java"
TARGET_EXTENSION = ".ts"

BATCH_MODES = ("fast", "smart", "full")


def load_registry_overrides(path: str | Path) -> dict[str, str]:
    p = Path(path)
    if not p.exists():
        print(f"[CONFIG] Registry file not found, ignoring: {p}")
        return {}
    data = json.loads(p.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Registry file must hold a JSON object: {p}")
    return {str(k): str(v) for k, v in data.items()}


def build_type_system() -> TypeSystem:
    if not REGISTRY_FILE:
        return DEFAULT_TYPE_SYSTEM
    overrides = load_registry_overrides(REGISTRY_FILE)
    print(f"[CONFIG] Loaded {len(overrides)} registry entries from {REGISTRY_FILE}")
    return DEFAULT_TYPE_SYSTEM.with_registry(overrides)
