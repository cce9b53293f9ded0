import logging
import re
from typing import List, Optional

from entitytraverse.filtering.config import FilterPipelineConfig
from entitytraverse.models import Entity

logger = logging.getLogger(__name__)

PRIMITIVE_TYPES = frozenset({
    "string", "number", "boolean", "any", "unknown", "void", "null", "undefined",
    "never", "object", "symbol", "bigint",
    "String", "Number", "Boolean", "Object", "Symbol", "BigInt",
})
ASSET_RE = re.compile(r"\.(css|scss|sass|less|png|jpg|jpeg|svg|gif|webp|ico|woff|woff2|ttf|eot)$", re.IGNORECASE)
NON_MEMBER_KINDS = ("import", "call", "jsx")


def is_private_name(name: str) -> bool:
    name = name.rsplit(".", 1)[-1]
    if name.startswith("#"):
        return True
    return name.startswith("_") and not name.startswith("__")


def is_asset_module(module: Optional[str]) -> bool:
    if not module:
        return False
    return bool(ASSET_RE.search(module.split("?", 1)[0]))


def discard_reason(entity: Entity, config: FilterPipelineConfig) -> Optional[str]:
    if config.skip_local_variables and entity.kind == "variable" and entity.type == "variable" and entity.scope == "local":
        return "local-variable"
    if config.skip_primitive_types and entity.type == "typeRef" and entity.name in PRIMITIVE_TYPES:
        return "primitive-type"
    if config.skip_asset_imports and entity.kind == "import" and is_asset_module(entity.original_module):
        return "asset-import"
    if config.skip_private_members and entity.kind not in NON_MEMBER_KINDS and is_private_name(entity.name):
        return "private-member"
    return None


def apply_relevance_filter(entities: List[Entity], config: FilterPipelineConfig) -> List[Entity]:
    kept = []
    for entity in entities:
        reason = discard_reason(entity, config)
        if reason is not None:
            logger.debug("discarding %s (%s) at line %d: %s", entity.name, entity.kind, entity.line, reason)
            continue
        kept.append(entity.evolve())
    return kept
