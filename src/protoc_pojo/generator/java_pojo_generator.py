from __future__ import annotations

import posixpath
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from jinja2 import Environment, FileSystemLoader

from protoc_pojo.models import (
    EnumType,
    FieldType,
    MessageType,
    Reference,
    ScalarType,
    Schema,
    simple_name,
)
from protoc_pojo.parser.proto_parser import parse_proto_file

# Proto scalar type -> Java primitive type
PRIMITIVE_TYPE_MAP: Dict[ScalarType, str] = {
    ScalarType.INT32: "int",
    ScalarType.SINT32: "int",
    ScalarType.SFIXED32: "int",
    ScalarType.UINT32: "int",
    ScalarType.FIXED32: "int",
    ScalarType.INT64: "long",
    ScalarType.SINT64: "long",
    ScalarType.SFIXED64: "long",
    ScalarType.UINT64: "long",
    ScalarType.FIXED64: "long",
    ScalarType.FLOAT: "float",
    ScalarType.DOUBLE: "double",
    ScalarType.BOOL: "boolean",
    ScalarType.STRING: "String",
    ScalarType.BYTES: "byte[]",
}

JAVA_EXTENSION = ".java"


def _get_java_type(field_type: FieldType) -> str:
    """Determine the Java type for a field.

    Message and enum references use the simple name of the referenced type,
    whether or not that type is declared anywhere.
    """
    if isinstance(field_type, Reference):
        return simple_name(field_type.name)
    return PRIMITIVE_TYPE_MAP[field_type.kind]


def _accessor_suffix(field_name: str) -> str:
    """Uppercase the first character only: shipping_address -> Shipping_address."""
    return field_name[:1].upper() + field_name[1:]


def _get_template_env() -> Environment:
    template_dir = Path(__file__).parent.parent / "templates"
    return Environment(
        loader=FileSystemLoader(str(template_dir)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render_message(java_package: Optional[str], message: MessageType) -> str:
    """Generate the Java class source for a message."""
    env = _get_template_env()
    template = env.get_template("message.java.j2")

    fields = []
    for f in message.fields:
        fields.append({
            "java_type": _get_java_type(f.type),
            "name": f.name,
            "accessor": _accessor_suffix(f.name),
        })

    return template.render(
        java_package=java_package,
        class_name=message.simple_name,
        fields=fields,
    )


def render_enum(java_package: Optional[str], enum: EnumType) -> str:
    """Generate the Java enum source for an enum."""
    env = _get_template_env()
    template = env.get_template("enum.java.j2")
    return template.render(
        java_package=java_package,
        enum_name=enum.simple_name,
        values=[{"name": v.name, "number": v.number} for v in enum.values],
    )


def output_path(java_package: Optional[str], type_name: str) -> str:
    """Relative '/'-separated path of the file generated for a declaration."""
    file_name = f"{simple_name(type_name)}{JAVA_EXTENSION}"
    if java_package:
        return posixpath.join(java_package.replace(".", "/"), file_name)
    return file_name


def generate_java_from_model(schema: Schema) -> List[Tuple[str, str]]:
    """Generate one Java source file per message and enum of the schema.

    Returns (relative_path, source) pairs in declaration order.
    """
    generated: List[Tuple[str, str]] = []
    for decl in schema.types:
        if isinstance(decl, MessageType):
            source = render_message(schema.package, decl)
        else:
            source = render_enum(schema.package, decl)
        generated.append((output_path(schema.package, decl.name), source))
    return generated


def generate_java_from_proto(file_path: str) -> List[Tuple[str, str]]:
    """Parse a .proto file and generate its Java sources."""
    return generate_java_from_model(parse_proto_file(file_path))
