import asyncio
import logging
import math
from typing import Dict, List, Optional

from entitytraverse.enrichers.package_resolver import PackageResolver
from entitytraverse.enrichers.relationships import package_name
from entitytraverse.errors import ResolutionError
from entitytraverse.filtering.config import FilterPipelineConfig
from entitytraverse.filtering.normalization import is_node_builtin
from entitytraverse.models import Entity, Relationship, merge_relationships

logger = logging.getLogger(__name__)

CALL_RELATIONSHIP_FACTOR = 0.8
OCCURRENCE_BOOST = 0.1


async def resolve_package_infos(entities: List[Entity], file_path: str, resolver: PackageResolver) -> Dict[str, dict]:
    """Package metadata keyed by package name; failed lookups are left out."""
    names = sorted({
        package_name(e.original_module)
        for e in entities
        if e.category == "external" and e.original_module and not is_node_builtin(e.original_module)
    })
    results = await asyncio.gather(*(resolver.resolve(n, file_path) for n in names), return_exceptions=True)
    infos = {}
    for name, result in zip(names, results):
        if isinstance(result, BaseException):
            err = result if isinstance(result, ResolutionError) else ResolutionError(name, result)
            logger.warning("%s", err)
            continue
        if result:
            infos[name] = result
    return infos


def final_confidence(entity: Entity) -> float:
    base = max(entity.confidence, entity.metadata.get("static_confidence", 0.0))
    occurrences = entity.metadata.get("occurrences", 1)
    if occurrences > 1:
        base *= 1 + math.log10(occurrences) * OCCURRENCE_BOOST
    return max(0.0, min(1.0, base))


def explicit_relationships(entity: Entity, confidence: float) -> List[Relationship]:
    if entity.kind == "import" and entity.original_module:
        return [Relationship(entity.original_module, "imports", confidence)]
    if entity.kind == "export":
        local = entity.metadata.get("local_name")
        if local and local not in (entity.name, "*"):
            return [Relationship(local, "exports", confidence)]
        return []
    if entity.kind == "call":
        return [Relationship(entity.name, "calls", confidence * CALL_RELATIONSHIP_FACTOR)]
    return []


async def apply_enrichment(
    entities: List[Entity],
    file_path: str,
    config: FilterPipelineConfig,
    resolver: Optional[PackageResolver] = None,
) -> List[Entity]:
    infos = {}
    if config.resolve_package_info:
        infos = await resolve_package_infos(entities, file_path, resolver or PackageResolver())

    out = []
    for entity in entities:
        updates = {}
        package_info = infos.get(package_name(entity.original_module)) if entity.category == "external" else None
        if package_info:
            updates["package_info"] = package_info

        confidence = final_confidence(entity) if config.calculate_confidence else entity.confidence

        relationships = entity.relationships
        if config.infer_relationships:
            static = [Relationship(**r) for r in entity.metadata.get("static_relationships", [])]
            packaged = [Relationship(package_info["name"], "depends-on")] if package_info else []
            relationships = merge_relationships(
                relationships, explicit_relationships(entity, confidence), static, packaged,
            )

        jsdoc = entity.metadata.get("jsdoc")
        if config.extract_documentation and jsdoc and jsdoc.get("description"):
            updates["documentation"] = jsdoc["description"]

        out.append(entity.evolve(metadata_updates=updates, confidence=confidence, relationships=relationships))
    return out
