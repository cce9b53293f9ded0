from typing import Dict, List, Optional

from entitytraverse.models import Entity, Relationship

DECLARATION_KINDS = ("function", "class", "interface", "type", "variable")


def package_name(module: Optional[str]) -> Optional[str]:
    """``@scope/pkg/sub`` -> ``@scope/pkg``, ``pkg/sub`` -> ``pkg``."""
    if not module:
        return None
    if module.startswith("node:"):
        return module
    parts = module.split("/")
    if module.startswith("@"):
        return "/".join(parts[:2])
    return parts[0]


def declared_names(entities: List[Entity]) -> Dict[str, Entity]:
    declared: Dict[str, Entity] = {}
    for entity in entities:
        if entity.kind in DECLARATION_KINDS and entity.category == "internal":
            declared.setdefault(entity.name, entity)
    return declared


def _inheritance(entity: Entity) -> List[Relationship]:
    rels = []
    superclass = entity.metadata.get("superclass")
    if superclass:
        rels.append(Relationship(superclass, "extends"))
    for name in entity.metadata.get("implements") or []:
        rels.append(Relationship(name, "implements"))
    if entity.kind == "interface":
        for name in entity.metadata.get("extends") or []:
            rels.append(Relationship(name, "extends"))
    return rels


def _import_dependencies(entity: Entity, all_entities: List[Entity]) -> List[Relationship]:
    rels = [Relationship(entity.original_module, "imports")]
    for other in all_entities:
        if other.kind == "export" and other is not entity and other.original_module == entity.original_module:
            rels.append(Relationship(other.name, "depends-on", 0.8))
    if entity.category == "external":
        pkg = package_name(entity.original_module)
        if pkg and pkg != entity.name:
            rels.append(Relationship(pkg, "depends-on", 0.9))
    return rels


def infer_static_relationships(entity: Entity, all_entities: List[Entity]) -> List[Relationship]:
    """Edges that can be read off the extracted entities alone."""
    if entity.kind == "import" and entity.original_module:
        return _import_dependencies(entity, all_entities)

    rels = _inheritance(entity)
    declared = declared_names(all_entities)
    root = entity.name.split(".", 1)[0]
    if entity.kind == "call" and root in declared and declared[root] is not entity:
        rels.append(Relationship(root, "calls", 0.9))
    elif entity.kind == "jsx" and root in declared:
        rels.append(Relationship(root, "uses", 0.9))
    elif entity.kind == "export" and entity.export_type == "named":
        local = entity.metadata.get("local_name", entity.name)
        if local in declared:
            rels.append(Relationship(local, "exports"))
    return rels
