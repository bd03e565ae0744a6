"""
backend/java_ts_core/adapters/java_source.py

Regex-based Java source readers.

No AST is built: each reader recovers one structural fact from the
declaration text and returns a tagged result (Matched / NoMatch / Malformed):

  - strip_comments / normalize_source   line + block comments, static constants
  - extract_signature                   class|enum, name, supertype
  - extract_fields                      @JsonProperty fields first, then plain private fields
  - extract_enum_constants              NAME / NAME("literal") entries
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from ..cir.model import (
    ConstantDescriptor,
    ExtractResult,
    FieldDescriptor,
    Malformed,
    Matched,
    NoMatch,
    Signature,
)
from ..cir.type_system import TypeSystem, is_class_name, strip_wildcards

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

# string / char literals are matched first so "//" inside them survives
_COMMENT_RE = re.compile(
    r"(\"(?:\\.|[^\"\\\n])*\"|'(?:\\.|[^'\\\n])*')|//[^\n]*|/\*.*?\*/",
    re.S,
)

_CONSTANT_RE = re.compile(r"private\s+(?:static\s+final|final\s+static)\s+[^;]+;")

_DECLARATION_RE = re.compile(
    r"(?:\b(?:public|private|protected)\s+)?"
    r"(?:\b(?:abstract|static)\s+)?"
    r"(?:\bfinal\s+)?"
    r"\b(class|enum)\s+([A-Z][A-Za-z0-9_]*)"
    r"(?:\s*<[^{]*?>)?"
    r"(?:\s+extends\s+([A-Za-z_][A-Za-z0-9_.]*))?"
)

_FIELD_MODIFIERS = r"(?!static\s+final\b|final\s+static\b)(?:(?:static|final|transient|volatile)\s+)*"
_FIELD_TYPE = r"([A-Za-z_][A-Za-z0-9_<>\[\],.?\s]*?)"
_FIELD_TAIL = r"\s+([A-Za-z_][A-Za-z0-9_]*)\s*(?:=[^;]*)?;"
# `private int a, b;` declares several fields sharing one type
_FIELD_TAIL_MULTI = r"\s+([A-Za-z_][A-Za-z0-9_]*(?:\s*,\s*[A-Za-z_][A-Za-z0-9_]*)*)\s*(?:=[^;]*)?;"

_ANNOTATED_FIELD_RE = re.compile(
    r"@JsonProperty\s*\(\s*(?:value\s*=\s*)?\"((?:\\.|[^\"\\])+)\"[^)]*\)\s*"
    r"(?:@\w+(?:\s*\([^)]*\))?\s*)*"
    r"private\s+" + _FIELD_MODIFIERS + _FIELD_TYPE + _FIELD_TAIL
)

_PLAIN_FIELD_RE = re.compile(r"\bprivate\s+" + _FIELD_MODIFIERS + _FIELD_TYPE + _FIELD_TAIL_MULTI)

_FIELD_NAME_RE = re.compile(r"^[a-z][A-Za-z0-9_]*$")
_BARE_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_QUALIFIER_RE = re.compile(r"\b(?:[a-z_][A-Za-z0-9_]*\.)+(?=[A-Za-z_])")
_PLAIN_TYPE_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(?:\[\])*$")

_CONSTANT_NAME_RE = re.compile(r"^[A-Z_][A-Z0-9_]*$")
_ENUM_ENTRY_RE = re.compile(r"^([A-Z_][A-Z0-9_]*)\s*(?:\((.*)\))?\s*(?:\{.*\})?$", re.S)
_LEADING_ANNOTATIONS_RE = re.compile(r"^(?:@\w+(?:\s*\([^)]*\))?\s*)+")
_STRING_ARG_RE = re.compile(r"^\s*\"((?:\\.|[^\"\\])+)\"")
_STRING_LITERAL_RE = re.compile(r"\"(?:\\.|[^\"\\\n])*\"")

_VERSION_MARKER = "serialVersionUID"


# ---------------------------------------------------------------------------
# Normalizer
# ---------------------------------------------------------------------------

def strip_comments(code: str) -> str:
    def _replace(m: re.Match) -> str:
        if m.group(1):
            return m.group(1)
        # keep tokens on either side of a block comment apart
        return " " if m.group(0).startswith("/*") else ""

    return _COMMENT_RE.sub(_replace, code)


def strip_constants(code: str) -> str:
    return _CONSTANT_RE.sub("", code)


def normalize_source(code: str) -> str:
    """Comments and `private static final` declarations removed."""
    return strip_constants(strip_comments(code))


# ---------------------------------------------------------------------------
# Signature extractor
# ---------------------------------------------------------------------------

def _simple_name(qualified: Optional[str]) -> Optional[str]:
    if not qualified:
        return None
    name = qualified.split(".")[-1]
    return name if is_class_name(name) else None


def blank_string_literals(code: str) -> str:
    """Replace literal contents with spaces; offsets into the text stay valid."""
    return _STRING_LITERAL_RE.sub(lambda m: '"' + " " * (len(m.group(0)) - 2) + '"', code)


def find_declarations(normalized: str) -> List[re.Match]:
    return list(_DECLARATION_RE.finditer(blank_string_literals(normalized)))


def extract_signature(normalized: str, types: TypeSystem) -> ExtractResult[Signature]:
    """
    Every class/enum header in the text is a candidate; the LAST valid one
    wins. Nested or multiple declarations are not really supported, this
    only keeps the observable behaviour deterministic.
    """
    last_valid: Optional[Signature] = None
    last_invalid: Optional[Tuple[str, str]] = None

    for m in find_declarations(normalized):
        kind, name, supertype = m.group(1), m.group(2), m.group(3)
        if not types.is_valid_declaration_name(name):
            last_invalid = (kind, name)
            continue
        last_valid = Signature(
            kind=kind,
            name=name,
            supertype=_simple_name(supertype) if kind == "class" else None,
        )

    if last_valid:
        return Matched(last_valid)
    if last_invalid:
        kind, name = last_invalid
        return Malformed(f"Invalid {kind} name: {name}")
    return NoMatch("No valid class or enum found")


# ---------------------------------------------------------------------------
# Field extractor
# ---------------------------------------------------------------------------

def clean_declared_type(raw: str) -> str:
    """Collapse whitespace, drop package qualifiers (java.util.List -> List) and wildcards."""
    t = re.sub(r"\s+", " ", raw).strip()
    t = re.sub(r"\s*([<>,\[\]])\s*", r"\1", t)
    t = t.replace(",", ", ")
    return strip_wildcards(_QUALIFIER_RE.sub("", t))


def _is_plausible_type(declared: str) -> bool:
    # strip generic arguments, whatever is left must be one plain name
    depth = 0
    outer: List[str] = []
    for ch in declared:
        if ch == "<":
            depth += 1
        elif ch == ">":
            depth -= 1
            if depth < 0:
                return False
        elif depth == 0:
            outer.append(ch)
    return depth == 0 and bool(_PLAIN_TYPE_RE.match("".join(outer)))


def external_field_name(literal: str) -> str:
    if _BARE_IDENTIFIER_RE.match(literal):
        return literal
    return f'"{literal}"'


def extract_fields(code: str, types: TypeSystem) -> Tuple[FieldDescriptor, ...]:
    """
    Two passes over comment-stripped class text:
      1) @JsonProperty("...") fields, renamed to the literal (priority)
      2) remaining private fields, named as declared

    Irregular names (not lowerCamel) are skipped silently. The result is
    de-duplicated on (external name, mapped type), first occurrence wins.
    """
    used: Dict[str, None] = {}
    fields: List[FieldDescriptor] = []

    def _add(external: Optional[str], raw_type: str, name: str) -> None:
        if name == _VERSION_MARKER or name in used:
            return
        if not _FIELD_NAME_RE.match(name):
            return
        declared = clean_declared_type(raw_type)
        if not _is_plausible_type(declared):
            return
        used[name] = None
        fields.append(
            FieldDescriptor(
                external_name=external_field_name(external) if external else name,
                declared_type=declared,
                mapped_type=types.map_type(declared),
                original_name=name,
            )
        )

    for m in _ANNOTATED_FIELD_RE.finditer(code):
        _add(m.group(1), m.group(2), m.group(3))

    for m in _PLAIN_FIELD_RE.finditer(code):
        for name in re.split(r"\s*,\s*", m.group(2)):
            _add(None, m.group(1), name)

    seen: set[Tuple[str, str]] = set()
    unique: List[FieldDescriptor] = []
    for f in fields:
        key = (f.external_name, f.mapped_type)
        if key in seen:
            continue
        seen.add(key)
        unique.append(f)
    return tuple(unique)


# ---------------------------------------------------------------------------
# Enum constant extractor
# ---------------------------------------------------------------------------

def _split_top_level(text: str, stop_at_semicolon: bool = False) -> List[str]:
    parts: List[str] = []
    depth = 0
    current: List[str] = []
    in_string = False

    for i, ch in enumerate(text):
        if ch == '"' and (i == 0 or text[i - 1] != "\\"):
            in_string = not in_string
        elif not in_string:
            if ch in "({":
                depth += 1
            elif ch in ")}":
                depth -= 1
            elif ch == ";" and depth == 0 and stop_at_semicolon:
                break
            elif ch == "," and depth == 0:
                parts.append("".join(current).strip())
                current = []
                continue
        current.append(ch)

    tail = "".join(current).strip()
    if tail:
        parts.append(tail)
    return parts


def enum_body(normalized: str, header_end: int) -> Optional[str]:
    """Text between the `{` following the enum header and its matching `}`."""
    scan = blank_string_literals(normalized)
    open_at = scan.find("{", header_end)
    if open_at < 0:
        return None

    depth = 0
    for i in range(open_at, len(scan)):
        ch = scan[i]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return normalized[open_at + 1 : i]
    return None


def extract_enum_constants(
    normalized: str, enum_name: str
) -> ExtractResult[Tuple[ConstantDescriptor, ...]]:
    header = None
    for m in find_declarations(normalized):
        if m.group(1) == "enum" and m.group(2) == enum_name:
            header = m
    if header is None:
        return NoMatch(f"No enum named {enum_name}")

    body = enum_body(normalized, header.end())
    if body is None:
        return Malformed("Could not parse enum body")

    constants: List[ConstantDescriptor] = []
    for entry in _split_top_level(body, stop_at_semicolon=True):
        entry = _LEADING_ANNOTATIONS_RE.sub("", entry).strip()
        m = _ENUM_ENTRY_RE.match(entry)
        if not m or not _CONSTANT_NAME_RE.match(m.group(1)):
            continue
        name = m.group(1)
        literal_match = _STRING_ARG_RE.match(m.group(2) or "")
        literal = literal_match.group(1) if literal_match else name.lower()
        constants.append(ConstantDescriptor(name=name, literal=literal))

    return Matched(tuple(constants))
