"""
Node-type dispatch table for the traverser.

Every syntax node type the extractors understand maps to one
``NodeCategory``; anything else is ``NodeCategory.UNKNOWN`` and yields no
entities. Extractors are registered per category, so tests can inject fakes
and new extractors never touch the traverser.
"""

from collections import defaultdict
from enum import Enum
from typing import Callable, Dict, List, Optional, Union

from entitytraverse.extractors.declarations import extract_class, extract_function, extract_interface, extract_type_alias, extract_variables
from entitytraverse.extractors.expressions import extract_call, extract_jsx
from entitytraverse.extractors.modules import extract_export, extract_import
from entitytraverse.models import AstEntity, ExtractionContext
from entitytraverse.syntax.node import SyntaxNode

ExtractorResult = Union[AstEntity, List[AstEntity], None]
Extractor = Callable[[SyntaxNode, ExtractionContext], ExtractorResult]


class NodeCategory(Enum):
    IMPORT = "import"
    EXPORT = "export"
    FUNCTION = "function"
    VARIABLE = "variable"
    CLASS = "class"
    INTERFACE = "interface"
    TYPE_ALIAS = "type_alias"
    JSX = "jsx"
    CALL = "call"
    UNKNOWN = "unknown"


NODE_CATEGORIES = {
    "import_statement": NodeCategory.IMPORT,
    "export_statement": NodeCategory.EXPORT,
    "function_declaration": NodeCategory.FUNCTION,
    "generator_function_declaration": NodeCategory.FUNCTION,
    "lexical_declaration": NodeCategory.VARIABLE,
    "variable_declaration": NodeCategory.VARIABLE,
    "class_declaration": NodeCategory.CLASS,
    "abstract_class_declaration": NodeCategory.CLASS,
    "interface_declaration": NodeCategory.INTERFACE,
    "type_alias_declaration": NodeCategory.TYPE_ALIAS,
    "jsx_opening_element": NodeCategory.JSX,
    "jsx_self_closing_element": NodeCategory.JSX,
    "call_expression": NodeCategory.CALL,
}


def categorize(node: SyntaxNode) -> NodeCategory:
    return NODE_CATEGORIES.get(node.type, NodeCategory.UNKNOWN)


class ExtractorRegistry:
    def __init__(self):
        self._extractors: Dict[NodeCategory, List[Extractor]] = defaultdict(list)

    def register(self, category: NodeCategory, extractor: Extractor) -> "ExtractorRegistry":
        if category is NodeCategory.UNKNOWN:
            raise ValueError("cannot register an extractor for unknown nodes")
        self._extractors[category].append(extractor)
        return self

    def extractors_for(self, category: NodeCategory) -> List[Extractor]:
        if category is NodeCategory.UNKNOWN:
            return []
        return list(self._extractors.get(category, ()))

    def categories(self) -> List[NodeCategory]:
        return [c for c in NodeCategory if self._extractors.get(c)]


def build_default_registry() -> ExtractorRegistry:
    return (
        ExtractorRegistry()
        .register(NodeCategory.IMPORT, extract_import)
        .register(NodeCategory.EXPORT, extract_export)
        .register(NodeCategory.FUNCTION, extract_function)
        .register(NodeCategory.VARIABLE, extract_variables)
        .register(NodeCategory.CLASS, extract_class)
        .register(NodeCategory.INTERFACE, extract_interface)
        .register(NodeCategory.TYPE_ALIAS, extract_type_alias)
        .register(NodeCategory.JSX, extract_jsx)
        .register(NodeCategory.CALL, extract_call)
    )


def get_extractor(language: str, config: Optional[object] = None, root_dir: Optional[str] = None):
    from entitytraverse.extractors.file_extractor import TypeScriptEntityExtractor

    lang = language.lower()
    if lang in ("typescript", "tsx", "javascript"):
        return TypeScriptEntityExtractor(language=lang, config=config, root_dir=root_dir)
    raise ValueError(f"No extractor for language: {language}")
