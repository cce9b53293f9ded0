from typing import Optional

from entitytraverse.helpers.ast_helpers import extract_entity_name, has_type_annotation, is_identifier_like
from entitytraverse.models import ExtractionContext
from entitytraverse.syntax.node import SyntaxNode

BASE_SCORE = 0.5
NAME_WEIGHT = 0.15
ANNOTATION_WEIGHT = 0.15
EXPORT_WEIGHT = 0.1
DECLARATION_WEIGHT = 0.05

DECLARED_TYPES = ("import", "function", "class", "interface", "type")


def clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def calculate_confidence(
    node: Optional[SyntaxNode],
    entity_type: str,
    context: ExtractionContext,
    name: Optional[str] = None,
) -> float:
    """Additive score over structural evidence; every signal only ever adds."""
    name = name or extract_entity_name(node)
    score = BASE_SCORE
    if is_identifier_like(name):
        score += NAME_WEIGHT
    if has_type_annotation(node):
        score += ANNOTATION_WEIGHT
    if entity_type == "import" or context.is_exported(name):
        score += EXPORT_WEIGHT
    if entity_type in DECLARED_TYPES:
        score += DECLARATION_WEIGHT
    return clamp(score)
