"""
Best-effort detection of ``import(...)`` and ``require(...)`` sources.

Anything that cannot be read statically yields ``None``; the resolver never
raises.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from entitytraverse.helpers.ast_helpers import call_arguments, string_literal_value, template_static_prefix
from entitytraverse.syntax.node import SyntaxNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DynamicSource:
    value: str
    method: str  # "import" | "require"
    is_pattern: bool = False


def dynamic_method(call: SyntaxNode) -> Optional[str]:
    if call.type != "call_expression":
        return None
    callee = call.child_by_field_name("function")
    if callee is None:
        return None
    if callee.type == "import":
        return "import"
    if callee.type == "identifier" and callee.text == "require":
        return "require"
    if callee.type == "member_expression":
        prop = callee.child_by_field_name("property")
        if prop is not None and prop.text == "require":
            return "require"
    return None


def _source_from_argument(arg: SyntaxNode):
    literal = string_literal_value(arg)
    if literal is not None:
        return literal, False
    prefix = template_static_prefix(arg)
    if prefix:
        return f"{prefix}*", True
    return None, False


def resolve_dynamic_source(call: SyntaxNode) -> Optional[DynamicSource]:
    try:
        method = dynamic_method(call)
        if method is None:
            return None
        args = call_arguments(call)
        if not args:
            return None
        value, is_pattern = _source_from_argument(args[0])
        if not value:
            return None
        return DynamicSource(value=value, method=method, is_pattern=is_pattern)
    except Exception as e:
        logger.debug("dynamic import sniffing failed at line %s: %s", call.line + 1, e)
        return None
