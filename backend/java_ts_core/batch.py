"""
backend/java_ts_core/batch.py

Directory-level glue around the engine:

  - find_source_files   recursive walk yielding SourceFile records
  - convert_tree        batch conversion (fast | smart | full), mirrored output tree
  - update_imports      second pass over emitted .ts files that adds missing
                        imports for `extends` parents declared elsewhere in the tree

One bad file never aborts a run: read/write errors are recorded per file.
"""

from __future__ import annotations

import re
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .adapters.java_adapter import JavaAdapter
from .cir.graph import DeclarationGraph
from .cir.imports import relative_import_path
from .config import BATCH_MODES, BATCH_SIZE, SOURCE_EXTENSION, TARGET_EXTENSION, WORKERS

_INTERFACE_HEADER_RE = re.compile(r"^export interface (\w+)(?:\s+extends\s+(\w+))?", re.M)


@dataclass(frozen=True)
class SourceFile:
    full_path: Path
    relative_path: str      # posix, relative to the walked root
    file_name: str
    directory: str          # posix, "" for the root itself

    @property
    def base_name(self) -> str:
        return Path(self.file_name).stem

    @property
    def location(self) -> str:
        """Logical location used for import arithmetic: <directory>/<BaseName>."""
        return f"{self.directory}/{self.base_name}" if self.directory else self.base_name


@dataclass
class FileResult:
    input_file: str
    success: bool
    output_file: Optional[str] = None
    output_path: Optional[str] = None
    directory: str = ""
    error: Optional[str] = None


@dataclass
class BatchReport:
    mode: str
    total_files: int
    success_count: int
    processing_time_ms: int
    results: List[FileResult] = field(default_factory=list)

    @property
    def speed(self) -> str:
        seconds = max(self.processing_time_ms, 1) / 1000.0
        return f"{self.total_files / seconds:.1f} files/s"

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["speed"] = self.speed
        return data


@dataclass
class UpdateReport:
    total_files: int
    updated_files: int
    interfaces: int
    processing_time_ms: int
    updated: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ---------------- Walker ----------------

def find_source_files(root: str | Path, extension: str = SOURCE_EXTENSION) -> List[SourceFile]:
    root = Path(root)
    files: List[SourceFile] = []
    for p in sorted(root.rglob(f"*{extension}")):
        if not p.is_file():
            continue
        rel = p.relative_to(root)
        directory = rel.parent.as_posix()
        files.append(
            SourceFile(
                full_path=p,
                relative_path=rel.as_posix(),
                file_name=p.name,
                directory="" if directory == "." else directory,
            )
        )
    return files


def is_test_source(sf: SourceFile) -> bool:
    return "test" in sf.file_name.lower()


# ---------------- Batch conversion ----------------

def _is_sentinel(output: Optional[str]) -> bool:
    return not output or not output.strip() or output.lstrip().startswith("//")


def convert_file(sf: SourceFile, output_root: Path, adapter: JavaAdapter, mode: str = "fast") -> FileResult:
    try:
        code = sf.full_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"[BATCH] Error reading {sf.full_path}: {e}")
        return FileResult(input_file=sf.relative_path, success=False, directory=sf.directory, error=str(e))

    if len(code.strip()) < adapter.min_source_length:
        return FileResult(input_file=sf.relative_path, success=False, directory=sf.directory, error="Too small")

    if mode == "full":
        output = adapter.convert(code, sf.location)
    elif mode == "smart":
        output = adapter.convert_fast(code, sf.location)
    else:
        output = adapter.convert_fast(code)

    if _is_sentinel(output):
        reason = output.strip().lstrip("/").strip() if output else "nothing to convert"
        return FileResult(
            input_file=sf.relative_path,
            success=False,
            directory=sf.directory,
            error=f"No content: {reason}",
        )

    out_name = sf.base_name + TARGET_EXTENSION
    out_dir = output_root / sf.directory if sf.directory else output_root
    out_path = out_dir / out_name
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
        out_path.write_text(output, encoding="utf-8")
    except OSError as e:
        print(f"[BATCH] Error writing {out_path}: {e}")
        return FileResult(input_file=sf.relative_path, success=False, directory=sf.directory, error=str(e))

    return FileResult(
        input_file=sf.relative_path,
        success=True,
        output_file=f"{sf.directory}/{out_name}" if sf.directory else out_name,
        output_path=str(out_path),
        directory=sf.directory,
    )


def convert_tree(
    input_dir: str | Path,
    output_dir: str | Path,
    mode: str = "fast",
    adapter: Optional[JavaAdapter] = None,
    batch_size: int = BATCH_SIZE,
    workers: int = WORKERS,
) -> BatchReport:
    """
    Convert every non-test .java file under input_dir into output_dir,
    mirroring the directory structure. Files run in batches; inside a batch
    a thread pool shares the one engine.
    """
    if mode not in BATCH_MODES:
        raise ValueError(f"Unsupported batch mode: {mode}")

    input_dir = Path(input_dir)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    adapter = adapter or JavaAdapter()
    batch_size = max(1, batch_size)

    files = [sf for sf in find_source_files(input_dir) if not is_test_source(sf)]
    total = len(files)
    print(f"[BATCH] Convert ({mode}): {total} files from {input_dir}")

    start = time.monotonic()
    results: List[FileResult] = []
    total_batches = (total + batch_size - 1) // batch_size

    with ThreadPoolExecutor(max_workers=max(1, workers)) as pool:
        for i in range(0, total, batch_size):
            batch = files[i : i + batch_size]
            batch_num = i // batch_size + 1
            print(f"[BATCH] Processing batch {batch_num}/{total_batches} ({len(batch)} files)...")

            results.extend(pool.map(lambda sf: convert_file(sf, output_dir, adapter, mode), batch))

            processed = min(i + batch_size, total)
            ok = sum(1 for r in results if r.success)
            elapsed = time.monotonic() - start
            speed = processed / elapsed if elapsed > 0 else float(processed)
            eta = (elapsed / processed) * (total - processed) if processed else 0.0
            print(
                f"[BATCH] Completed {processed}/{total} ({ok} OK) - "
                f"Speed: {speed:.1f} files/s - ETA: {eta:.0f}s"
            )

    elapsed_ms = int((time.monotonic() - start) * 1000)
    success = sum(1 for r in results if r.success)
    print(f"[BATCH] Done ({mode}): {success}/{total} files in {elapsed_ms}ms")

    return BatchReport(
        mode=mode,
        total_files=total,
        success_count=success,
        processing_time_ms=elapsed_ms,
        results=results,
    )


# ---------------- Import fix-up pass ----------------

def parent_import_path(child_location: str, parent_location: str) -> str:
    child_dir = child_location.rpartition("/")[0]
    parent_dir, _, parent_file = parent_location.rpartition("/")
    if child_dir == parent_dir:
        return f"./{parent_file}"
    path = relative_import_path(child_location, parent_location)
    return path if path.startswith("../") else f"./{path}"


def build_declaration_graph(files: List[SourceFile]) -> DeclarationGraph:
    graph = DeclarationGraph()
    for sf in files:
        try:
            content = sf.full_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            print(f"[IMPORTS] Error reading {sf.full_path}: {e}")
            continue
        m = _INTERFACE_HEADER_RE.search(content)
        if not m:
            continue
        name, parent = m.group(1), m.group(2)
        graph.add_declaration(name, sf.location, sf.full_path)
        if parent:
            graph.add_extends(name, parent)
    return graph


def update_imports(output_dir: str | Path) -> UpdateReport:
    """
    Prepend `import { Parent } from '...';` to every emitted interface whose
    `extends` parent is declared in another output file and is not imported yet.
    """
    start = time.monotonic()
    files = find_source_files(output_dir, TARGET_EXTENSION)
    print(f"[IMPORTS] Updating imports for {len(files)} TypeScript files...")

    graph = build_declaration_graph(files)
    interfaces = sum(1 for _, data in graph.g.nodes(data=True) if data.get("location"))
    print(f"[IMPORTS] Found {interfaces} interfaces")

    updated: List[str] = []
    for child, parent in graph.extends_edges():
        path = graph.g.nodes[child]["path"]
        try:
            content = path.read_text(encoding="utf-8")
            if f"import {{ {parent} }}" in content:
                continue
            import_path = parent_import_path(graph.location_of(child), graph.location_of(parent))
            path.write_text(f"import {{ {parent} }} from '{import_path}';\n\n" + content, encoding="utf-8")
            updated.append(graph.location_of(child))
        except (OSError, UnicodeDecodeError) as e:
            print(f"[IMPORTS] Error updating {path}: {e}")

    elapsed_ms = int((time.monotonic() - start) * 1000)
    print(f"[IMPORTS] Import update completed: {len(updated)} files updated in {elapsed_ms}ms")

    return UpdateReport(
        total_files=len(files),
        updated_files=len(updated),
        interfaces=interfaces,
        processing_time_ms=elapsed_ms,
        updated=updated,
    )
