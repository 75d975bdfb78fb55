"""Grammar engine for protobuf (.proto) files.

Compiles the declarative grammar in ``proto.lark`` once and turns source text
into a concrete syntax tree rooted at a ``proto`` node.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from lark import Lark, Tree
from lark.exceptions import UnexpectedInput

_GRAMMAR_PATH = Path(__file__).with_name("proto.lark")

_PARSER = Lark(
    _GRAMMAR_PATH.read_text(encoding="utf-8"),
    start="proto",
    parser="lalr",
    propagate_positions=True,
    maybe_placeholders=False,
)


class ProtoError(Exception):
    """Base class for every failure raised while loading a .proto file."""


class ProtoReadError(ProtoError):
    """Raised when the source file is missing, unreadable or not UTF-8 text."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Cannot read {path}: {reason}")
        self.path = path


class ProtoSyntaxError(ProtoError):
    """Raised when the source text does not conform to the grammar."""

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        context: str = "",
    ):
        if line is not None and line > 0:
            super().__init__(f"Line {line}:{column}: {message}")
        else:
            super().__init__(message)
        self.line = line
        self.column = column
        self.context = context


class ProtoInternalError(ProtoError):
    """Raised when the grammar matched but did not yield a usable root."""


def read_proto_source(file_path: str) -> str:
    """Read a .proto file as UTF-8 text."""
    try:
        return Path(file_path).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ProtoReadError(str(file_path), "not valid UTF-8 text") from e
    except OSError as e:
        raise ProtoReadError(str(file_path), e.strerror or str(e)) from e


def parse_proto_text(text: str) -> Tree:
    """Parse protobuf source text into its concrete syntax tree."""
    try:
        tree = _PARSER.parse(text)
    except UnexpectedInput as e:
        raise ProtoSyntaxError(
            _describe(e),
            line=getattr(e, "line", None),
            column=getattr(e, "column", None),
            context=_safe_context(e, text),
        ) from e

    if not isinstance(tree, Tree) or tree.data != "proto":
        raise ProtoInternalError("expected proto root")
    return tree


def _describe(error: UnexpectedInput) -> str:
    token = getattr(error, "token", None)
    if token is not None:
        if token.type == "$END":
            return "Unexpected end of input"
        return f"Unexpected token {token.value!r}"
    char = getattr(error, "char", None)
    if char is not None:
        return f"Unexpected character {char!r}"
    return "Invalid syntax"


def _safe_context(error: UnexpectedInput, text: str) -> str:
    if getattr(error, "pos_in_stream", None) is None:
        return ""
    return error.get_context(text)
