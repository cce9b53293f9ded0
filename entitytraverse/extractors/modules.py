"""
Extractors for ``import`` and ``export`` statements.
"""

from typing import List

from entitytraverse.context.export_collector import default_export_name
from entitytraverse.helpers.ast_helpers import import_source, import_specifiers, is_default_export, is_external_import, line_of, string_literal_value
from entitytraverse.helpers.confidence import calculate_confidence
from entitytraverse.helpers.type_inferrer import infer_from_name, infer_from_node
from entitytraverse.models import AstEntity, ExtractionContext
from entitytraverse.syntax.node import SyntaxNode

DEFAULT_EXPORT_CONFIDENCE = 0.95
NAMED_EXPORT_CONFIDENCE = 0.95
RE_EXPORT_CONFIDENCE = 0.9


def _is_type_only(node: SyntaxNode) -> bool:
    return any(not c.is_named and c.type in ("type", "typeof") for c in node.children)


def extract_import(node: SyntaxNode, context: ExtractionContext) -> List[AstEntity]:
    source = import_source(node)
    if not source:
        return []
    external = is_external_import(source)
    category = "external" if external else "internal"
    entity_source = source if external else context.rel_file_path
    type_only = _is_type_only(node)

    specs = import_specifiers(node)
    if not specs:
        # import './polyfills'
        return [AstEntity(
            name=source,
            type="import",
            kind="import",
            category=category,
            source=entity_source,
            line=line_of(node),
            column=node.column,
            confidence=calculate_confidence(node, "import", context, name=source),
            is_imported=True,
            original_module=source,
            metadata={"side_effect": True},
        )]

    entities = []
    for spec in specs:
        local = spec["local"]
        spec_node = spec["node"]
        metadata = {"import_style": spec["style"]}
        if spec["imported"] != local:
            metadata["imported_name"] = spec["imported"]
        if type_only:
            metadata["type_only"] = True
        exported = context.is_exported(local)
        entities.append(AstEntity(
            name=local,
            type=infer_from_name(local),
            kind="import",
            category=category,
            source=entity_source,
            line=line_of(spec_node),
            column=spec_node.column,
            confidence=calculate_confidence(spec_node, "import", context, name=local),
            is_exported=exported,
            export_type="named" if exported else None,
            is_imported=True,
            original_module=source,
            metadata=metadata,
        ))
    return entities


def _export_pairs(node: SyntaxNode):
    """(local, exported) name pairs of an export clause, ``*`` for star exports."""
    clause = node.first_child_of_type("export_clause")
    if clause is not None:
        pairs = []
        for spec in clause.named_children:
            if spec.type != "export_specifier":
                continue
            name_node = spec.child_by_field_name("name") or (spec.named_children or [None])[0]
            if name_node is None:
                continue
            local = string_literal_value(name_node) or name_node.text
            alias_node = spec.child_by_field_name("alias")
            exported = (string_literal_value(alias_node) or alias_node.text) if alias_node is not None else local
            pairs.append((local, exported))
        return pairs
    namespace = node.first_child_of_type("namespace_export")
    if namespace is not None:
        ident = namespace.first_child_of_type("identifier", "string")
        if ident is not None:
            name = string_literal_value(ident) or ident.text
            return [("*", name)]
    if any(not c.is_named and c.type == "*" for c in node.children):
        return [("*", "*")]
    return []


def extract_export(node: SyntaxNode, context: ExtractionContext) -> List[AstEntity]:
    """Entities for default exports, re-exports and bare export lists.

    ``export function f() {}`` and friends produce nothing here; the
    declaration extractors see the declaration and mark it exported.
    """
    if is_default_export(node):
        target = node.child_by_field_name("declaration") or node.child_by_field_name("value")
        return [AstEntity(
            name=default_export_name(node),
            type=infer_from_node(target),
            kind="export",
            category="internal",
            source=context.rel_file_path,
            line=line_of(node),
            column=node.column,
            confidence=DEFAULT_EXPORT_CONFIDENCE,
            is_exported=True,
            export_type="default",
            metadata={"anonymous": default_export_name(node) == "default"},
        )]

    if node.child_by_field_name("declaration") is not None:
        return []

    source = string_literal_value(node.child_by_field_name("source"))
    entities = []
    for local, exported in _export_pairs(node):
        if source:
            external = is_external_import(source)
            entities.append(AstEntity(
                name=exported,
                type="export",
                kind="export",
                category="external" if external else "internal",
                source=source if external else context.rel_file_path,
                line=line_of(node),
                column=node.column,
                confidence=RE_EXPORT_CONFIDENCE,
                is_exported=True,
                export_type="re-export",
                original_module=source,
                metadata={"local_name": local},
            ))
        else:
            entities.append(AstEntity(
                name=exported,
                type="export",
                kind="export",
                category="internal",
                source=context.rel_file_path,
                line=line_of(node),
                column=node.column,
                confidence=NAMED_EXPORT_CONFIDENCE,
                is_exported=True,
                export_type="named",
                metadata={"local_name": local},
            ))
    return entities
