from __future__ import annotations

from typing import List, Sequence

from ..cir.model import ClassDescriptor, EnumDescriptor, ImportStatement


def _import_prologue(imports: Sequence[ImportStatement]) -> List[str]:
    if not imports:
        return []
    lines = [imp.render() for imp in imports]
    lines.append("")
    return lines


def emit_interface(decl: ClassDescriptor, imports: Sequence[ImportStatement] = ()) -> str:
    """
    ClassDescriptor -> `export interface` block.
    Every property carries the optional marker.
    """
    lines: List[str] = _import_prologue(imports)

    extends_clause = f" extends {decl.supertype}" if decl.supertype else ""
    lines.append(f"export interface {decl.name}{extends_clause} {{")

    for f in decl.fields:
        optional = "?" if f.is_optional else ""
        lines.append(f"  {f.external_name}{optional}: {f.mapped_type};")

    lines.append("}")
    return "\n".join(lines) + "\n"


def emit_enum(decl: EnumDescriptor) -> str:
    lines: List[str] = [f"export enum {decl.name} {{"]

    if not decl.constants:
        lines.append("  // No enum values found")
    else:
        last = len(decl.constants) - 1
        for i, c in enumerate(decl.constants):
            sep = "" if i == last else ","
            lines.append(f'  {c.name} = "{c.literal}"{sep}')

    lines.append("}")
    return "\n".join(lines) + "\n"


def emit_sentinel(reason: str) -> str:
    """One-line comment used by the fast path to report unsupported input."""
    return f"// {reason}\n"
