# backend/java_ts_core/main.py

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from fastapi import FastAPI, HTTPException  # type: ignore
from fastapi.middleware.cors import CORSMiddleware  # type: ignore
from pydantic import BaseModel, Field  # type: ignore

from .batch import convert_tree, update_imports
from .config import BATCH_MODES, INPUT_DIR, OUTPUT_DIR, TARGET_EXTENSION
from .registry import java_adapter, try_convert_best

app = FastAPI(title="Java to TypeScript Interface Converter", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ==============================================================================
# Models
# ==============================================================================
class ConvertRequest(BaseModel):
    code: str
    location: Optional[str] = None      # e.g. "entity/customize/Product"


class ConvertFileRequest(BaseModel):
    code: str
    filename: str
    location: Optional[str] = None


class ConvertResponse(BaseModel):
    ok: bool
    output: Optional[str] = None
    reason: Optional[str] = None


class ResolveImportsRequest(BaseModel):
    dependencies: List[str] = Field(default_factory=list)
    location: Optional[str] = None


class ImportOut(BaseModel):
    name: str
    path: str
    statement: str


class ResolveImportsResponse(BaseModel):
    imports: List[ImportOut]


class BatchRequest(BaseModel):
    mode: str = "fast"                  # fast | smart | full
    input_dir: Optional[str] = None
    output_dir: Optional[str] = None


class UpdateImportsRequest(BaseModel):
    output_dir: Optional[str] = None


# ==============================================================================
# Routes
# ==============================================================================
@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/cache/stats")
def cache_stats():
    return java_adapter.cache_stats()


@app.post("/convert", response_model=ConvertResponse)
def convert(req: ConvertRequest) -> ConvertResponse:
    output = java_adapter.convert(req.code, req.location)
    if output is not None:
        return ConvertResponse(ok=True, output=output)

    # nothing cached for failures: ask the engine why
    outcome = java_adapter.explain(req.code, req.location)
    return ConvertResponse(ok=False, reason=outcome.reason)


@app.post("/convert/fast", response_model=ConvertResponse)
def convert_fast(req: ConvertRequest) -> ConvertResponse:
    output = java_adapter.convert_fast(req.code, req.location)
    if output.lstrip().startswith("//"):
        return ConvertResponse(ok=False, output=output, reason=output.strip()[2:].strip())
    return ConvertResponse(ok=True, output=output)


@app.post("/convert/file", response_model=ConvertResponse)
def convert_file(req: ConvertFileRequest) -> ConvertResponse:
    result = try_convert_best(req.code, req.filename, req.location)
    if isinstance(result, dict):
        raise HTTPException(status_code=400, detail=result["error"])
    if result.lstrip().startswith("//"):
        return ConvertResponse(ok=False, output=result, reason=result.strip()[2:].strip())
    return ConvertResponse(ok=True, output=result)


@app.post("/imports/resolve", response_model=ResolveImportsResponse)
def resolve_imports(req: ResolveImportsRequest) -> ResolveImportsResponse:
    statements = java_adapter.resolve_imports(req.dependencies, req.location)
    return ResolveImportsResponse(
        imports=[ImportOut(name=s.name, path=s.path, statement=s.render()) for s in statements]
    )


@app.post("/convert-all")
def convert_all(req: BatchRequest):
    if req.mode not in BATCH_MODES:
        raise HTTPException(status_code=400, detail=f"Unsupported mode: {req.mode}. Use one of {list(BATCH_MODES)}")

    input_dir = Path(req.input_dir) if req.input_dir else INPUT_DIR
    output_dir = Path(req.output_dir) if req.output_dir else OUTPUT_DIR

    if not input_dir.is_dir():
        raise HTTPException(status_code=400, detail=f"Input directory not found: {input_dir}")

    try:
        report = convert_tree(input_dir, output_dir, mode=req.mode, adapter=java_adapter)
    except OSError as e:
        print(f"[CONVERT] Convert all error: {e}")
        raise HTTPException(status_code=500, detail=f"Convert all failed: {type(e).__name__}: {e}") from e

    return {
        "success": True,
        "message": f"Convert ({req.mode}): {report.success_count}/{report.total_files} files converted",
        **report.to_dict(),
    }


@app.post("/update-imports")
def update_imports_route(req: UpdateImportsRequest):
    output_dir = Path(req.output_dir) if req.output_dir else OUTPUT_DIR

    if not output_dir.is_dir() or not any(output_dir.rglob(f"*{TARGET_EXTENSION}")):
        raise HTTPException(status_code=404, detail=f"No {TARGET_EXTENSION} files found to update in {output_dir}")

    report = update_imports(output_dir)
    return {
        "success": True,
        "message": f"Updated imports for {report.updated_files}/{report.total_files} TypeScript files",
        **report.to_dict(),
    }
