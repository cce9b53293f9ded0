from typing import Any, Dict, List, Optional

from entitytraverse.models import Entity, Relationship

BASE_SCORE = 0.5
JSDOC_WEIGHT = 0.15
TYPES_WEIGHT = 0.10
TESTS_WEIGHT = 0.10
RELATIONSHIP_WEIGHT, RELATIONSHIP_CAP = 0.05, 0.15
USAGE_WEIGHT, USAGE_CAP = 0.03, 0.10
EXPORT_WEIGHT = 0.05
KNOWN_SEMANTIC_FACTOR = 0.9
UNKNOWN_SEMANTIC_FACTOR = 0.5


def _has_type_annotations(entity: Entity, jsdoc: Optional[Dict[str, Any]]) -> bool:
    if jsdoc and (any(p.get("type") for p in jsdoc["params"]) or (jsdoc.get("returns") or {}).get("type")):
        return True
    metadata = entity.metadata
    if metadata.get("return_type") or metadata.get("declared_type"):
        return True
    return any(p.get("type") for p in metadata.get("parameters") or [])


def _has_tests(entity: Entity, all_entities: List[Entity]) -> bool:
    name = entity.name.lower()
    if not name:
        return False
    for other in all_entities:
        other_name = other.name.lower()
        if other is not entity and name in other_name and ("test" in other_name or "spec" in other_name):
            return True
    return False


def calculate_static_confidence(
    entity: Entity,
    jsdoc: Optional[Dict[str, Any]],
    semantic_type: str,
    relationships: List[Relationship],
    all_entities: List[Entity],
) -> float:
    score = BASE_SCORE
    if jsdoc and len(jsdoc.get("description", "")) > 10:
        score += JSDOC_WEIGHT
    if _has_type_annotations(entity, jsdoc):
        score += TYPES_WEIGHT
    if _has_tests(entity, all_entities):
        score += TESTS_WEIGHT
    score += min(len(relationships) * RELATIONSHIP_WEIGHT, RELATIONSHIP_CAP)
    targets = {r.target for r in relationships}
    usages = sum(1 for e in all_entities if e.name in targets)
    score += min(usages * USAGE_WEIGHT, USAGE_CAP)
    if entity.is_exported and entity.category == "internal":
        score += EXPORT_WEIGHT
    score *= UNKNOWN_SEMANTIC_FACTOR if semantic_type == "unknown" else KNOWN_SEMANTIC_FACTOR
    return max(0.0, min(1.0, score))
