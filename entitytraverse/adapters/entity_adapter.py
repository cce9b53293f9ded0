"""
Maps raw extractor output onto the canonical ``Entity`` shape.

``derive_scope`` is the single scope rule (deduplication reapplies it to merged
entities):

* external -> module, builtin -> global, whatever the export status
* internal (and jsx) exported -> module, otherwise local
"""

from typing import Iterable, List

from entitytraverse.models import AstEntity, Entity

TYPE_MAP = {
    "import": "import",
    "export": "export",
    "class": "class",
    "function": "function",
    "variable": "variable",
    "interface": "typeRef",
    "type": "typeRef",
    "jsx": "variable",
    "call": "call",
    "package": "package",
    "other": "other",
}
DEFAULT_TYPE = "variable"


def canonical_type(raw_type: str) -> str:
    return TYPE_MAP.get(raw_type, DEFAULT_TYPE)


def derive_scope(category: str, is_exported: bool) -> str:
    if category == "external":
        return "module"
    if category == "builtin":
        return "global"
    return "module" if is_exported else "local"


def adapt_ast_entity(raw: AstEntity) -> Entity:
    metadata = dict(raw.metadata)
    entity_type = canonical_type(raw.type)
    if entity_type != raw.type:
        metadata["inferred_type"] = raw.type
    return Entity(
        name=raw.name,
        type=entity_type,
        kind=raw.kind,
        category=raw.category,
        source=raw.source,
        line=raw.line,
        column=raw.column,
        confidence=max(0.0, min(1.0, raw.confidence)),
        scope=derive_scope(raw.category, raw.is_exported),
        is_exported=raw.is_exported,
        export_type=raw.export_type,
        is_imported=raw.is_imported,
        original_module=raw.original_module,
        metadata=metadata,
    )


def adapt_ast_entities(raw_entities: Iterable[AstEntity]) -> List[Entity]:
    return [adapt_ast_entity(raw) for raw in raw_entities]
