from __future__ import annotations

from protoc_pojo.models import Schema

from .proto_grammar import parse_proto_text, read_proto_source
from .proto_transform import transform_proto


def parse_proto(text: str) -> Schema:
    """Parse protobuf source text into a Schema."""
    return transform_proto(parse_proto_text(text))


def parse_proto_file(file_path: str) -> Schema:
    """Parse a .proto file and extract its package, messages and enums."""
    return parse_proto(read_proto_source(file_path))
