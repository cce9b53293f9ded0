import logging
from dataclasses import dataclass, field
from typing import List, Optional

from entitytraverse.errors import ExtractionNodeError
from entitytraverse.helpers.ast_helpers import line_of
from entitytraverse.models import AstEntity, ExtractionContext
from entitytraverse.registry.extractor_registry import ExtractorRegistry, build_default_registry, categorize
from entitytraverse.syntax.node import SyntaxNode, walk

logger = logging.getLogger(__name__)


@dataclass
class TraversalResult:
    entities: List[AstEntity] = field(default_factory=list)
    node_errors: List[ExtractionNodeError] = field(default_factory=list)


class Traverser:
    """Pre-order walk that hands every node to the extractors registered for it.

    A failing extractor only loses that node's contribution; the failure is
    logged and reported in ``TraversalResult.node_errors``.
    """

    def __init__(self, registry: Optional[ExtractorRegistry] = None):
        self.registry = registry or build_default_registry()

    def run(self, root: Optional[SyntaxNode], context: ExtractionContext) -> TraversalResult:
        result = TraversalResult()
        for node in walk(root):
            for extractor in self.registry.extractors_for(categorize(node)):
                try:
                    produced = extractor(node, context)
                except Exception as e:
                    err = ExtractionNodeError(
                        node_type=node.type,
                        line=line_of(node),
                        extractor=getattr(extractor, "__name__", repr(extractor)),
                        cause=e,
                    )
                    logger.warning("%s", err)
                    result.node_errors.append(err)
                    continue
                if produced is None:
                    continue
                if isinstance(produced, AstEntity):
                    result.entities.append(produced)
                else:
                    result.entities.extend(produced)
        return result

    def traverse(self, root: Optional[SyntaxNode], context: ExtractionContext) -> List[AstEntity]:
        return self.run(root, context).entities
