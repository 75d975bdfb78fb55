"""Transform the proto syntax tree into the application's Schema model."""

from __future__ import annotations

from typing import Iterator, List, Optional, Set

from lark import Token, Tree

from protoc_pojo.models import (
    EnumType,
    EnumValue,
    Field,
    FieldType,
    MessageType,
    Reference,
    Scalar,
    ScalarType,
    Schema,
    TypeDeclaration,
)

from .literals import decode_enum_number, decode_tag


def transform_proto(tree: Tree) -> Schema:
    """Transform a ``proto`` syntax tree into a Schema.

    Messages and enums are flattened into a single list in depth-first
    order. A nested declaration is emitted before the message that encloses
    it and is named after its ancestors (``Order.Address``).
    """
    package: Optional[str] = None
    types: List[TypeDeclaration] = []

    for node in _subtrees(tree):
        if node.data == "package_statement":
            # Only the first package statement counts.
            if package is None:
                package = _full_ident(_child(node, "full_ident"))
        elif node.data == "message_block":
            _transform_message(node, None, types)
        elif node.data == "enum_block":
            _transform_enum(node, None, types)

    return Schema(package=package, types=tuple(types))


def _transform_message(
    block: Tree, parent: Optional[str], types: List[TypeDeclaration]
) -> None:
    name = _qualify(parent, _text(_child(block, "message_name")) or "")
    body = _child(block, "message_body")
    elements = list(_subtrees(body)) if body is not None else []

    # Pass 1: names of the declarations nested directly in this message.
    nested_names: Set[str] = set()
    for element in elements:
        if element.data == "message_block":
            nested_name = _text(_child(element, "message_name"))
        elif element.data == "enum_block":
            nested_name = _text(_child(element, "enum_name"))
        else:
            continue
        if nested_name is not None:
            nested_names.add(nested_name)

    # Pass 2: fields (oneof members included) and nested declarations.
    fields: List[Field] = []
    for element in elements:
        if element.data == "field":
            field_nodes = [element]
        elif element.data == "oneof":
            field_nodes = [n for n in _subtrees(element) if n.data == "field"]
        elif element.data == "message_block":
            _transform_message(element, name, types)
            continue
        elif element.data == "enum_block":
            _transform_enum(element, name, types)
            continue
        else:
            continue

        for field_node in field_nodes:
            field = _transform_field(field_node, name, nested_names)
            if field is not None:
                fields.append(field)

    types.append(MessageType(name=name, fields=tuple(fields)))


def _transform_field(node: Tree, scope: str, nested_names: Set[str]) -> Optional[Field]:
    """Build a Field, or None when the type, name or tag is missing."""
    field_type: Optional[FieldType] = None
    name: Optional[str] = None
    tag: Optional[int] = None

    for part in _subtrees(node):
        if part.data == "type_reference":
            field_type = _resolve_type(part, scope, nested_names)
        elif part.data == "field_name":
            name = _text(part)
        elif part.data == "tag":
            literal = _text(part)
            if literal is not None:
                tag = decode_tag(literal)

    if field_type is None or name is None or tag is None:
        return None
    return Field(name=name, type=field_type, tag=tag)


def _resolve_type(
    node: Tree, scope: str, nested_names: Set[str]
) -> Optional[FieldType]:
    inner = next(_subtrees(node), None)
    if inner is None:
        return None

    if inner.data == "scalar_type":
        keyword = _text(inner)
        return Scalar(ScalarType(keyword)) if keyword is not None else None

    if inner.data == "fully_qualified_type":
        type_name = _full_ident(_child(inner, "full_ident"))
        return Reference(type_name) if type_name else None

    if inner.data == "full_ident":
        type_name = _full_ident(inner)
        if not type_name:
            return None
        if "." not in type_name and type_name in nested_names:
            type_name = _qualify(scope, type_name)
        return Reference(type_name)

    return None


def _transform_enum(
    block: Tree, parent: Optional[str], types: List[TypeDeclaration]
) -> None:
    name = _qualify(parent, _text(_child(block, "enum_name")) or "")
    body = _child(block, "enum_body")

    values: List[EnumValue] = []
    if body is not None:
        for element in _subtrees(body):
            if element.data != "enum_field":
                continue
            value_name = _text(_child(element, "enum_field_name"))
            literal = _text(_child(element, "enum_field_value"))
            if value_name is not None and literal is not None:
                values.append(EnumValue(name=value_name, number=decode_enum_number(literal)))

    types.append(EnumType(name=name, values=tuple(values)))


# -- tree helpers --


def _qualify(parent: Optional[str], name: str) -> str:
    return f"{parent}.{name}" if parent else name


def _subtrees(node: Tree) -> Iterator[Tree]:
    return (child for child in node.children if isinstance(child, Tree))


def _child(node: Tree, data: str) -> Optional[Tree]:
    return next((c for c in _subtrees(node) if c.data == data), None)


def _text(node: Optional[Tree]) -> Optional[str]:
    """Return the value of the first token directly under ``node``."""
    if node is None:
        return None
    token = next((c for c in node.children if isinstance(c, Token)), None)
    return str(token) if token is not None else None


def _full_ident(node: Optional[Tree]) -> Optional[str]:
    if node is None:
        return None
    return ".".join(str(c) for c in node.children if isinstance(c, Token))
