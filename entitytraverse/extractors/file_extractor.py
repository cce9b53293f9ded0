import asyncio
import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import chardet

from entitytraverse.adapters.entity_adapter import adapt_ast_entities
from entitytraverse.base.entity_extractor import EntityExtractor
from entitytraverse.context import build_context, relative_file_path
from entitytraverse.enrichers.package_resolver import PackageResolver
from entitytraverse.errors import ParseError
from entitytraverse.filtering.config import FilterPipelineConfig
from entitytraverse.filtering.pipeline import FilterPipeline
from entitytraverse.models import Entity, FilterResult
from entitytraverse.registry.extractor_registry import ExtractorRegistry
from entitytraverse.syntax.node import SyntaxNode
from entitytraverse.syntax.tree_sitter_adapter import parse_file_content, parse_source
from entitytraverse.traversal.traverser import Traverser
from entitytraverse.utils.logging_setup import file_scope

logger = logging.getLogger(__name__)


def read_source(file_path: str) -> str:
    with open(file_path, "rb") as f:
        raw = f.read()
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        guess = chardet.detect(raw)
        encoding = guess["encoding"] or "utf-8"
        return raw.decode(encoding, errors="replace")


@dataclass
class EntityExtractionResult:
    file_path: str
    rel_file_path: str
    entities: List[Entity] = field(default_factory=list)
    raw_entities: List[Entity] = field(default_factory=list)
    filter_result: Optional[FilterResult] = None
    node_errors: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file_path": self.rel_file_path,
            "entities": [e.to_dict() for e in self.entities],
            "stats": self.filter_result.stats.to_dict() if self.filter_result else None,
            "node_errors": self.node_errors,
            "error": self.error,
        }


class TypeScriptEntityExtractor(EntityExtractor):
    """Runs context building, traversal, adaptation and the filter pipeline
    for one JavaScript/TypeScript file at a time.

    ``extract`` and ``extract_source`` keep no per-call state on the
    instance; only ``process_file`` remembers its result for
    ``write_to_file``.
    """

    def __init__(
        self,
        language: Optional[str] = None,
        config: Optional[FilterPipelineConfig] = None,
        registry: Optional[ExtractorRegistry] = None,
        root_dir: Optional[str] = None,
        package_resolver: Optional[PackageResolver] = None,
        strict: bool = False,
    ):
        self.language = language
        self.pipeline = FilterPipeline(config, package_resolver=package_resolver)
        self.traverser = Traverser(registry)
        self.root_dir = root_dir
        self.strict = strict
        self.result: Optional[EntityExtractionResult] = None

    @property
    def config(self) -> FilterPipelineConfig:
        return self.pipeline.config

    def _failed(self, file_path: str, rel_path: str, cause: str) -> EntityExtractionResult:
        logger.warning("no entities for %s: %s", rel_path, cause)
        return EntityExtractionResult(file_path=file_path, rel_file_path=rel_path, error=cause)

    async def extract_async(self, file_path: str, content: str, tree: Optional[SyntaxNode]) -> EntityExtractionResult:
        rel_path = relative_file_path(file_path, self.root_dir)
        with file_scope(rel_path):
            if tree is None:
                return self._failed(file_path, rel_path, "no syntax tree")
            try:
                context = build_context(tree, file_path, content, self.root_dir)
                traversal = self.traverser.run(tree, context)
                raw_entities = adapt_ast_entities(traversal.entities)
                filter_result = await self.pipeline.process(raw_entities, file_path, content)
            except Exception as e:
                logger.exception("extraction failed for %s", rel_path)
                return self._failed(file_path, rel_path, f"{type(e).__name__}: {e}")
            return EntityExtractionResult(
                file_path=file_path,
                rel_file_path=context.rel_file_path,
                entities=filter_result.enriched,
                raw_entities=raw_entities,
                filter_result=filter_result,
                node_errors=len(traversal.node_errors),
            )

    def extract(self, file_path: str, content: str, tree: Optional[SyntaxNode]) -> EntityExtractionResult:
        return asyncio.run(self.extract_async(file_path, content, tree))

    def extract_source(self, file_path: str, content: str) -> EntityExtractionResult:
        """Parse ``content`` with the grammar matching ``file_path`` and extract."""
        try:
            if self.language:
                tree = parse_source(content, self.language, strict=self.strict)
            else:
                tree = parse_file_content(file_path, content, strict=self.strict)
        except ParseError as e:
            return self._failed(file_path, relative_file_path(file_path, self.root_dir), str(e))
        return self.extract(file_path, content, tree)

    def process_file(self, file_path: str):
        self.result = self.extract_source(file_path, read_source(file_path))
        return self.result

    def extract_all_components(self):
        if self.result is None:
            return []
        return [e.to_dict() for e in self.result.entities]

    def write_to_file(self, output_path: str):
        if self.result is None:
            raise RuntimeError("process_file must run before write_to_file")
        directory = os.path.dirname(output_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(self.result.to_dict(), f, indent=2, ensure_ascii=False)
