from entitytraverse.errors import ConfigError, EntityTraverseError, ExtractionNodeError, ParseError, ResolutionError
from entitytraverse.extractors.file_extractor import EntityExtractionResult, TypeScriptEntityExtractor
from entitytraverse.filtering.config import FilterPipelineConfig
from entitytraverse.filtering.pipeline import FilterPipeline
from entitytraverse.models import Entity, FilterResult, FilterStats
from entitytraverse.registry.extractor_registry import get_extractor

__version__ = "0.1.0"
