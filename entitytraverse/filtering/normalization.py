import posixpath
from typing import List, Optional

from entitytraverse.filtering.config import FilterPipelineConfig
from entitytraverse.models import Entity

NODE_BUILTINS = frozenset({
    "fs", "path", "crypto", "http", "https", "os", "util", "events",
    "stream", "url", "child_process", "buffer", "zlib", "net", "assert",
})


def is_node_builtin(module: Optional[str]) -> bool:
    if not module:
        return False
    if module.startswith("node:"):
        return True
    return module.split("/", 1)[0] in NODE_BUILTINS


def _to_posix(path: Optional[str]) -> Optional[str]:
    return path.replace("\\", "/") if path else path


def normalized_name(entity: Entity) -> str:
    module = entity.original_module
    if entity.kind == "import" and module and module.startswith(".") and entity.category == "internal":
        # relative import resolved against the importing file
        target = posixpath.normpath(posixpath.join(posixpath.dirname(entity.source), module))
        return f"{target}#{entity.name}" if not entity.metadata.get("side_effect") else target
    return entity.name


def normalize(entities: List[Entity], config: FilterPipelineConfig) -> List[Entity]:
    """Canonical names and paths plus defaults for optional fields.

    The entity count is unchanged, and so are ``category`` and ``scope``.
    """
    out = []
    for entity in entities:
        changes = {"name": entity.name.strip()}
        if config.normalize_path_separators:
            changes["source"] = _to_posix(entity.source)
            changes["original_module"] = _to_posix(entity.original_module)
        updated = entity.evolve(**changes)
        metadata = updated.metadata
        metadata.setdefault("occurrences", 1)
        metadata["normalized_name"] = normalized_name(updated)
        if updated.kind == "import":
            metadata["is_node_builtin"] = is_node_builtin(updated.original_module)
        if updated.is_exported and updated.export_type is None:
            updated.export_type = "named"
        out.append(updated)
    return out
