from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Literal, Optional, Tuple, TypeVar, Union

DeclarationKind = Literal["class", "enum"]

T = TypeVar("T")


@dataclass(frozen=True)
class FieldDescriptor:
    external_name: str        # bare identifier or quoted literal ("@type")
    declared_type: str        # source type text (e.g. List<Item>)
    mapped_type: str          # target type text (e.g. Item[])
    original_name: str        # source field name
    is_optional: bool = True


@dataclass(frozen=True)
class ConstantDescriptor:
    name: str
    literal: str


@dataclass(frozen=True)
class Signature:
    kind: DeclarationKind
    name: str
    supertype: Optional[str] = None


@dataclass(frozen=True)
class ClassDescriptor:
    name: str
    supertype: Optional[str] = None
    fields: Tuple[FieldDescriptor, ...] = ()


@dataclass(frozen=True)
class EnumDescriptor:
    name: str
    constants: Tuple[ConstantDescriptor, ...] = ()


@dataclass(frozen=True)
class ImportStatement:
    name: str
    path: str

    def render(self) -> str:
        return f"import {{ {self.name} }} from '{self.path}';"


# ---------------- Tagged extraction results ----------------

@dataclass(frozen=True)
class Matched(Generic[T]):
    value: T


@dataclass(frozen=True)
class NoMatch:
    reason: str = "no match"


@dataclass(frozen=True)
class Malformed:
    reason: str


ExtractResult = Union[Matched[T], NoMatch, Malformed]


@dataclass(frozen=True)
class Conversion:
    """
    Outcome of one engine run, before it is flattened into the
    `convert` (None) / `convert_fast` (sentinel comment) conventions.

    status:
      - "converted"   -> output holds the emitted declaration
      - "too_small"   -> input below the minimum length, nothing to convert
      - "unsupported" -> no declaration / invalid name / unparseable enum body
    """
    status: Literal["converted", "too_small", "unsupported"]
    output: Optional[str] = None
    reason: Optional[str] = None
    dependencies: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.status == "converted"
