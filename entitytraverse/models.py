"""
Data models shared by the extraction and filtering stages.
"""

from dataclasses import dataclass, field, asdict, replace
from typing import Any, Dict, List, Optional, Set

ENTITY_TYPES = ("import", "export", "class", "function", "variable", "typeRef", "call", "package", "other")
CATEGORIES = ("internal", "external", "builtin", "jsx")
SCOPES = ("local", "module", "global")
EXPORT_TYPES = ("default", "named", "re-export")


@dataclass
class ImportInfo:
    source: str
    is_external: bool
    is_dynamic: bool = False
    method: Optional[str] = None  # "import" | "require"


@dataclass
class ExtractionContext:
    """Per-file state handed to every extractor.

    Attributes:
        file_path: Absolute (or caller supplied) path of the file.
        rel_file_path: Forward-slashed path relative to the project root.
        exported_names: Every identifier the file exports.
        imported_symbols: Local name (or synthetic dynamic key) -> ImportInfo.
        content: Raw source text.
        default_export_name: Name bound by ``export default``, if any.
        current_scope: Optional enclosing scope name.
    """

    file_path: str
    rel_file_path: str
    content: str = ""
    exported_names: Set[str] = field(default_factory=set)
    imported_symbols: Dict[str, ImportInfo] = field(default_factory=dict)
    default_export_name: Optional[str] = None
    current_scope: Optional[str] = None

    def is_exported(self, name: Optional[str]) -> bool:
        return bool(name) and name in self.exported_names

    def import_info(self, name: Optional[str]) -> Optional[ImportInfo]:
        if not name:
            return None
        return self.imported_symbols.get(name)


@dataclass
class AstEntity:
    """Raw extractor output, before scope is derived."""

    name: str
    type: str
    kind: str
    category: str
    source: str
    line: int
    column: int
    confidence: float
    is_exported: bool = False
    export_type: Optional[str] = None
    is_imported: bool = False
    original_module: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Relationship:
    target: str
    type: str
    confidence: float = 1.0

    @property
    def key(self):
        return (self.target, self.type)


@dataclass
class Entity:
    """Canonical entity flowing through the filter pipeline."""

    name: str
    type: str
    kind: str
    category: str
    source: str
    line: int
    column: int
    confidence: float
    scope: str
    is_exported: bool = False
    export_type: Optional[str] = None
    is_imported: bool = False
    original_module: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    relationships: List[Relationship] = field(default_factory=list)

    @property
    def dedup_key(self):
        return (self.name, self.category, self.source)

    def evolve(self, metadata_updates: Optional[Dict[str, Any]] = None, **changes) -> "Entity":
        """Copy with ``changes`` applied; metadata and relationships are never shared."""
        metadata = dict(changes.pop("metadata", self.metadata))
        metadata.update(metadata_updates or {})
        relationships = list(changes.pop("relationships", self.relationships))
        return replace(self, metadata=metadata, relationships=relationships, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def merge_relationships(*groups: List[Relationship]) -> List[Relationship]:
    """Union keyed on (target, type), first-seen order, highest confidence wins."""
    merged: Dict[Any, Relationship] = {}
    for group in groups:
        for rel in group:
            existing = merged.get(rel.key)
            if existing is None:
                merged[rel.key] = Relationship(rel.target, rel.type, rel.confidence)
            elif rel.confidence > existing.confidence:
                existing.confidence = rel.confidence
    return list(merged.values())


@dataclass
class FilterStats:
    total_raw: int
    total_filtered: int
    discarded_count: int
    deduplicated_count: int
    final_count: int
    processing_time_ms: float

    @property
    def compression_rate(self) -> float:
        if not self.total_raw:
            return 0.0
        return 1 - self.final_count / self.total_raw

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["compression_rate"] = self.compression_rate
        return data


@dataclass
class FilterResult:
    original: List[Entity]
    filtered: List[Entity]
    deduplicated: List[Entity]
    normalized: List[Entity]
    static_enriched: List[Entity]
    enriched: List[Entity]
    stats: FilterStats

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entities": [e.to_dict() for e in self.enriched],
            "stats": self.stats.to_dict(),
        }
