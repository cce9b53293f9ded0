import os
import threading
from typing import Optional

from tree_sitter_language_pack import get_parser

from entitytraverse.errors import ParseError
from entitytraverse.syntax.node import SyntaxNode

EXT_LANGUAGE = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
}

SUPPORTED_LANGUAGES = ("javascript", "typescript", "tsx")


def language_for_path(file_path: str) -> Optional[str]:
    _, ext = os.path.splitext(file_path)
    return EXT_LANGUAGE.get(ext.lower())


_local = threading.local()


def _parser_for(language: str):
    # parsers are not shared between threads
    parsers = getattr(_local, "parsers", None)
    if parsers is None:
        parsers = _local.parsers = {}
    if language not in parsers:
        parsers[language] = get_parser(language)
    return parsers[language]


def _text(ts_node, source: bytes) -> str:
    return source[ts_node.start_byte:ts_node.end_byte].decode("utf-8", errors="replace")


def _shallow(ts_node, source: bytes) -> SyntaxNode:
    row, col = ts_node.start_point
    return SyntaxNode(
        type=ts_node.type,
        text=_text(ts_node, source),
        line=row,
        column=col,
        is_named=ts_node.is_named,
    )


def from_tree_sitter(ts_root, source: bytes) -> SyntaxNode:
    root = _shallow(ts_root, source)
    stack = [(ts_root, root)]
    while stack:
        ts_node, node = stack.pop()
        for i, ts_child in enumerate(ts_node.children):
            child = _shallow(ts_child, source)
            node.add_child(child, ts_node.field_name_for_child(i))
            if ts_child.child_count:
                stack.append((ts_child, child))
    return root


def parse_source(content: str, language: str = "typescript", strict: bool = False) -> SyntaxNode:
    if language not in SUPPORTED_LANGUAGES:
        raise ValueError(f"Unsupported language: {language}")
    source = content.encode("utf-8")
    tree = _parser_for(language).parse(source)
    if strict and tree.root_node.has_error:
        raise ParseError(f"syntax errors while parsing {language} source")
    return from_tree_sitter(tree.root_node, source)


def parse_file_content(file_path: str, content: str, strict: bool = False) -> SyntaxNode:
    language = language_for_path(file_path)
    if language is None:
        raise ParseError(f"No grammar for {file_path}")
    return parse_source(content, language, strict=strict)
