"""
Merging of entities that share ``(name, category, source)``.

The merged entity takes its identity from a declaration, import or export
when the group has one, and otherwise from the first occurrence. It carries
the highest confidence seen, the union of relationships, the export status
of any member and an ``occurrences`` count in its metadata. Running the
stage on its own output changes nothing.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Tuple

from entitytraverse.adapters.entity_adapter import derive_scope
from entitytraverse.filtering.config import FilterPipelineConfig
from entitytraverse.models import Entity, merge_relationships

logger = logging.getLogger(__name__)

REFERENCE_KINDS = ("call", "jsx", "log", "error")


def _occurrences(entity: Entity) -> int:
    return entity.metadata.get("occurrences", 1)


def _is_reference(entity: Entity) -> bool:
    return entity.kind in REFERENCE_KINDS


def _absorb(target: Entity, other: Entity) -> None:
    target.confidence = max(target.confidence, other.confidence)
    target.relationships = merge_relationships(target.relationships, other.relationships)
    target.metadata["occurrences"] = _occurrences(target) + _occurrences(other)
    merged_from = list(target.metadata.get("merged_from", []))
    merged_from.append({"kind": other.kind, "line": other.line})
    merged_from.extend(other.metadata.get("merged_from", []))
    target.metadata["merged_from"] = merged_from
    if other.is_exported and not target.is_exported:
        target.is_exported = True
        target.export_type = other.export_type
    elif target.is_exported and target.export_type is None:
        target.export_type = other.export_type
    target.scope = derive_scope(target.category, target.is_exported)


def merge_identical(entities: List[Entity]) -> List[Entity]:
    merged: Dict[Tuple[str, str, str], Entity] = {}
    for entity in entities:
        existing = merged.get(entity.dedup_key)
        if existing is None:
            merged[entity.dedup_key] = entity.evolve(metadata_updates={"occurrences": _occurrences(entity)})
            continue
        if _is_reference(existing) and not _is_reference(entity):
            # a call or JSX use seen before the declaration it refers to
            primary = entity.evolve(metadata_updates={"occurrences": _occurrences(entity)})
            _absorb(primary, existing)
            merged[entity.dedup_key] = primary
        else:
            _absorb(existing, entity)
        logger.debug("merged duplicate %s (%s) from line %d", entity.name, entity.kind, entity.line)
    return list(merged.values())


def group_imports_by_source(entities: List[Entity]) -> List[Entity]:
    by_module = defaultdict(set)
    for entity in entities:
        if entity.kind == "import" and entity.original_module and not entity.metadata.get("side_effect"):
            by_module[entity.original_module].add(entity.name)
    out = []
    for entity in entities:
        if entity.kind == "import" and entity.original_module in by_module:
            entity = entity.evolve(metadata_updates={"specifiers": sorted(by_module[entity.original_module])})
        out.append(entity)
    return out


def deduplicate(entities: List[Entity], config: FilterPipelineConfig) -> List[Entity]:
    if not config.merge_identical_entities:
        return [e.evolve() for e in entities]
    result = merge_identical(entities)
    if config.merge_imports_by_source:
        result = group_imports_by_source(result)
    return result
