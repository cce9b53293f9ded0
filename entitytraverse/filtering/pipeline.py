"""
Filter -> deduplicate -> normalize -> static-enrich -> enrich.

Every intermediate list is kept on the ``FilterResult`` so the stage counts
can be audited. Stages never mutate their input list.
"""

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional, Union

from entitytraverse.enrichers.package_resolver import PackageResolver
from entitytraverse.filtering.config import FilterPipelineConfig
from entitytraverse.filtering.deduplication import deduplicate
from entitytraverse.filtering.enrichment import apply_enrichment
from entitytraverse.filtering.normalization import normalize
from entitytraverse.filtering.relevance import apply_relevance_filter
from entitytraverse.filtering.static_enrichment import apply_static_enrichment
from entitytraverse.models import Entity, FilterResult, FilterStats
from entitytraverse.utils.logging_setup import stage_scope

logger = logging.getLogger(__name__)


class FilterPipeline:
    def __init__(
        self,
        config: Union[FilterPipelineConfig, Dict[str, Any], None] = None,
        package_resolver: Optional[PackageResolver] = None,
    ):
        if config is None:
            config = FilterPipelineConfig()
        elif not isinstance(config, FilterPipelineConfig):
            config = FilterPipelineConfig.from_dict(config)
        config.validate()
        self.config = config
        self.package_resolver = package_resolver

    async def process(self, raw_entities: List[Entity], file_path: str, content: Optional[str] = None) -> FilterResult:
        started = time.perf_counter()
        original = [e.evolve() for e in raw_entities]

        with stage_scope("filter"):
            filtered = apply_relevance_filter(original, self.config)
            logger.info("filter: %d -> %d entities", len(original), len(filtered))
        with stage_scope("deduplicate"):
            deduplicated = deduplicate(filtered, self.config)
            logger.info("deduplicate: %d -> %d entities", len(filtered), len(deduplicated))
        with stage_scope("normalize"):
            normalized = normalize(deduplicated, self.config)
        with stage_scope("static-enrich"):
            static_enriched = apply_static_enrichment(normalized, content)
        with stage_scope("enrich"):
            resolver = self.package_resolver or PackageResolver()
            enriched = await apply_enrichment(static_enriched, file_path, self.config, resolver)

        stats = FilterStats(
            total_raw=len(original),
            total_filtered=len(filtered),
            discarded_count=len(original) - len(filtered),
            deduplicated_count=len(filtered) - len(deduplicated),
            final_count=len(enriched),
            processing_time_ms=(time.perf_counter() - started) * 1000,
        )
        logger.info(
            "pipeline done: %d raw, %d discarded, %d merged, %d final (%.1f ms)",
            stats.total_raw, stats.discarded_count, stats.deduplicated_count,
            stats.final_count, stats.processing_time_ms,
        )
        return FilterResult(
            original=original,
            filtered=filtered,
            deduplicated=deduplicated,
            normalized=normalized,
            static_enriched=static_enriched,
            enriched=enriched,
            stats=stats,
        )

    def run(self, raw_entities: List[Entity], file_path: str, content: Optional[str] = None) -> FilterResult:
        return asyncio.run(self.process(raw_entities, file_path, content))
