"""
Facts derivable from the file alone: semantic type, tags, co-location,
static relationships and a static confidence score.
"""

from dataclasses import asdict
from typing import List, Optional

from entitytraverse.enrichers.jsdoc import extract_jsdoc
from entitytraverse.enrichers.relationships import DECLARATION_KINDS, declared_names, infer_static_relationships
from entitytraverse.enrichers.semantic_types import infer_semantic_type
from entitytraverse.enrichers.static_confidence import calculate_static_confidence
from entitytraverse.models import Entity

JSDOC_KINDS = DECLARATION_KINDS + ("export",)


def entity_tags(entity: Entity, semantic_type: str) -> List[str]:
    tags = [f"kind:{entity.kind}", f"category:{entity.category}", f"scope:{entity.scope}"]
    if semantic_type != "unknown":
        tags.append(f"semantic:{semantic_type}")
    if entity.is_exported:
        tags.append("exported")
    if entity.metadata.get("is_async"):
        tags.append("async")
    if entity.metadata.get("type_only"):
        tags.append("type-only")
    if entity.metadata.get("is_node_builtin"):
        tags.append("node-builtin")
    return tags


def apply_static_enrichment(entities: List[Entity], content: Optional[str] = None) -> List[Entity]:
    declared = declared_names(entities)
    out = []
    for entity in entities:
        jsdoc = extract_jsdoc(content, entity.line) if content and entity.kind in JSDOC_KINDS else None
        semantic_type = infer_semantic_type(entity, jsdoc, content)
        relationships = infer_static_relationships(entity, entities)
        updates = {
            "semantic_type": semantic_type,
            "tags": entity_tags(entity, semantic_type),
            "location": {"file": entity.source, "line": entity.line, "column": entity.column},
            "static_relationships": [asdict(r) for r in relationships],
            "static_confidence": calculate_static_confidence(entity, jsdoc, semantic_type, relationships, entities),
            "declared_in_file": entity.kind in DECLARATION_KINDS or entity.name.split(".", 1)[0] in declared,
        }
        if jsdoc:
            updates["jsdoc"] = jsdoc
        out.append(entity.evolve(metadata_updates=updates))
    return out
