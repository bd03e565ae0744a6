from .adapters.java_adapter import JavaAdapter
from .cir.model import ClassDescriptor, Conversion, EnumDescriptor, FieldDescriptor, ImportStatement
from .cir.type_system import DEFAULT_TYPE_SYSTEM, TypeSystem

__all__ = [
    "JavaAdapter",
    "TypeSystem",
    "DEFAULT_TYPE_SYSTEM",
    "ClassDescriptor",
    "EnumDescriptor",
    "FieldDescriptor",
    "ImportStatement",
    "Conversion",
]
