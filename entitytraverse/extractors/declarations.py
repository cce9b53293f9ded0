"""
Extractors for named declarations: functions, classes, interfaces, type
aliases and ``const``/``let``/``var`` declarators.
"""

from typing import Any, Dict, List, Optional

from entitytraverse.helpers.ast_helpers import (
    FUNCTION_VALUE_TYPES,
    declaration_kind,
    extract_entity_name,
    extract_initial_value,
    extract_parameters,
    extract_return_type,
    extract_type_annotation,
    function_parameters_node,
    line_of,
    pattern_identifiers,
)
from entitytraverse.helpers.confidence import calculate_confidence
from entitytraverse.models import AstEntity, ExtractionContext
from entitytraverse.syntax.node import SyntaxNode

TYPE_TEXT_LIMIT = 120


def _export_type(name: str, context: ExtractionContext) -> Optional[str]:
    if not context.is_exported(name):
        return None
    if name == context.default_export_name:
        return "default"
    return "named"


def _declaration_entity(
    node: SyntaxNode,
    name: str,
    entity_type: str,
    kind: str,
    context: ExtractionContext,
    metadata: Dict[str, Any],
    name_node: Optional[SyntaxNode] = None,
) -> AstEntity:
    anchor = name_node or node
    return AstEntity(
        name=name,
        type=entity_type,
        kind=kind,
        category="internal",
        source=context.rel_file_path,
        line=line_of(anchor),
        column=anchor.column,
        confidence=calculate_confidence(node, entity_type, context, name=name),
        is_exported=context.is_exported(name),
        export_type=_export_type(name, context),
        metadata=metadata,
    )


def _has_keyword(node: SyntaxNode, keyword: str) -> bool:
    return any(not c.is_named and c.type == keyword for c in node.children)


def _function_metadata(fn: SyntaxNode) -> Dict[str, Any]:
    return {
        "parameters": extract_parameters(function_parameters_node(fn)),
        "return_type": extract_return_type(fn),
        "is_async": _has_keyword(fn, "async"),
        "is_generator": "generator" in fn.type or _has_keyword(fn, "*"),
    }


def extract_function(node: SyntaxNode, context: ExtractionContext) -> Optional[AstEntity]:
    name = extract_entity_name(node.child_by_field_name("name"))
    if not name:
        return None
    return _declaration_entity(
        node, name, "function", "function", context, _function_metadata(node),
        name_node=node.child_by_field_name("name"),
    )


def _heritage(node: SyntaxNode):
    superclass = None
    implements: List[str] = []
    direct = node.child_by_field_name("superclass")
    if direct is not None:
        superclass = direct.text
    heritage = node.first_child_of_type("class_heritage")
    if heritage is not None:
        extends_clause = heritage.first_child_of_type("extends_clause")
        if extends_clause is not None:
            values = extends_clause.children_by_field_name("value") or extends_clause.named_children
            if values:
                superclass = values[0].text
        implements_clause = heritage.first_child_of_type("implements_clause")
        if implements_clause is not None:
            implements = [c.text for c in implements_clause.named_children]
        if superclass is None and extends_clause is None:
            # javascript grammar: class_heritage holds the expression directly
            plain = [c for c in heritage.named_children if c.type != "implements_clause"]
            if plain:
                superclass = plain[0].text
    return superclass, implements


def _class_members(body: Optional[SyntaxNode]) -> Dict[str, List[str]]:
    methods, properties = [], []
    if body is None:
        return {"methods": methods, "properties": properties}
    for member in body.named_children:
        name = extract_entity_name(member)
        if not name:
            continue
        if member.type in ("method_definition", "method_signature", "abstract_method_signature"):
            methods.append(name)
        elif member.type in ("public_field_definition", "field_definition", "property_signature"):
            properties.append(name)
    return {"methods": methods, "properties": properties}


def extract_class(node: SyntaxNode, context: ExtractionContext) -> Optional[AstEntity]:
    name_node = node.child_by_field_name("name")
    name = extract_entity_name(name_node)
    if not name:
        return None
    superclass, implements = _heritage(node)
    metadata: Dict[str, Any] = {
        "superclass": superclass,
        "implements": implements,
        "is_abstract": node.type == "abstract_class_declaration",
    }
    metadata.update(_class_members(node.child_by_field_name("body")))
    return _declaration_entity(node, name, "class", "class", context, metadata, name_node=name_node)


def extract_interface(node: SyntaxNode, context: ExtractionContext) -> Optional[AstEntity]:
    name_node = node.child_by_field_name("name")
    name = extract_entity_name(name_node)
    if not name:
        return None
    extends: List[str] = []
    clause = node.first_child_of_type("extends_type_clause", "extends_clause")
    if clause is not None:
        extends = [c.text for c in clause.named_children]
    members = _class_members(node.child_by_field_name("body"))
    metadata = {"extends": extends, "members": members["properties"] + members["methods"]}
    return _declaration_entity(node, name, "interface", "interface", context, metadata, name_node=name_node)


def extract_type_alias(node: SyntaxNode, context: ExtractionContext) -> Optional[AstEntity]:
    name_node = node.child_by_field_name("name")
    name = extract_entity_name(name_node)
    if not name:
        return None
    value = node.child_by_field_name("value")
    metadata = {"value": value.text[:TYPE_TEXT_LIMIT] if value is not None else None}
    return _declaration_entity(node, name, "type", "type", context, metadata, name_node=name_node)


def extract_variables(node: SyntaxNode, context: ExtractionContext) -> List[AstEntity]:
    """One entity per bound identifier of a lexical or ``var`` declaration.

    A plain identifier initialized with a function or arrow expression is
    reported as a function, carrying its parameters and return type.
    """
    kind = declaration_kind(node)
    entities = []
    for declarator in node.named_children:
        if declarator.type != "variable_declarator":
            continue
        name_node = declarator.child_by_field_name("name")
        value = declarator.child_by_field_name("value")
        if name_node is None:
            continue

        if name_node.type == "identifier" and value is not None and value.type in FUNCTION_VALUE_TYPES:
            metadata = _function_metadata(value)
            metadata["declaration_kind"] = kind
            metadata["is_arrow"] = value.type == "arrow_function"
            entities.append(_declaration_entity(
                declarator, name_node.text, "function", "variable", context, metadata, name_node=name_node,
            ))
            continue

        destructured = name_node.type != "identifier"
        for ident in pattern_identifiers(name_node):
            metadata = {
                "declaration_kind": kind,
                "declared_type": extract_type_annotation(declarator.child_by_field_name("type")),
                "initial_value": None if destructured else extract_initial_value(value),
            }
            if destructured:
                metadata["destructured"] = True
            entities.append(_declaration_entity(
                declarator, ident.text, "variable", "variable", context, metadata, name_node=ident,
            ))
    return entities
