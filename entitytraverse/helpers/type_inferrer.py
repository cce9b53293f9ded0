import re
from typing import Optional

from entitytraverse.helpers.ast_helpers import FUNCTION_VALUE_TYPES
from entitytraverse.syntax.node import SyntaxNode

_HOOK_RE = re.compile(r"^use[A-Z]")

FUNCTION_NODE_TYPES = ("function_declaration", "generator_function_declaration") + FUNCTION_VALUE_TYPES
CLASS_NODE_TYPES = ("class_declaration", "abstract_class_declaration", "class")


def infer_from_name(name: Optional[str]) -> str:
    if not name:
        return "other"
    if _HOOK_RE.match(name):
        return "function"
    if name[0].isupper():
        return "component"
    return "other"


def infer_from_node(node: Optional[SyntaxNode]) -> str:
    if node is None:
        return "other"
    if node.type in FUNCTION_NODE_TYPES:
        return "function"
    if node.type in CLASS_NODE_TYPES:
        return "class"
    if node.type == "identifier" and node.text[:1].isupper():
        return "component"
    return "other"
