from typing import List, Optional, Set

from entitytraverse.helpers.ast_helpers import extract_entity_name, is_default_export, pattern_identifiers
from entitytraverse.syntax.node import SyntaxNode, walk

VARIABLE_DECLARATIONS = ("lexical_declaration", "variable_declaration")


def default_export_name(export_node: SyntaxNode) -> str:
    """Name bound by an ``export default`` statement, ``"default"`` when anonymous."""
    declaration = export_node.child_by_field_name("declaration")
    if declaration is not None:
        return extract_entity_name(declaration) or "default"
    value = export_node.child_by_field_name("value")
    if value is not None:
        if value.type == "identifier":
            return value.text
        return extract_entity_name(value) or "default"
    return "default"


def declared_names(declaration: Optional[SyntaxNode]) -> List[str]:
    if declaration is None:
        return []
    if declaration.type in VARIABLE_DECLARATIONS:
        names = []
        for declarator in declaration.named_children:
            if declarator.type == "variable_declarator":
                names.extend(n.text for n in pattern_identifiers(declarator.child_by_field_name("name")))
        return names
    name = extract_entity_name(declaration)
    return [name] if name else []


def specifier_names(export_node: SyntaxNode) -> List[str]:
    names = []
    clause = export_node.first_child_of_type("export_clause")
    if clause is not None:
        for spec in clause.named_children:
            if spec.type != "export_specifier":
                continue
            for field_name in ("name", "alias"):
                child = spec.child_by_field_name(field_name)
                if child is not None:
                    names.append(child.text)
    namespace = export_node.first_child_of_type("namespace_export")
    if namespace is not None:
        ident = namespace.first_child_of_type("identifier")
        if ident is not None:
            names.append(ident.text)
    return names


def collect_exported_names(root: Optional[SyntaxNode]) -> Set[str]:
    exported: Set[str] = set()
    for node in walk(root):
        if node.type != "export_statement":
            continue
        if is_default_export(node):
            exported.add(default_export_name(node))
            continue
        exported.update(declared_names(node.child_by_field_name("declaration")))
        exported.update(specifier_names(node))
    return exported


def find_default_export_name(root: Optional[SyntaxNode]) -> Optional[str]:
    for node in walk(root):
        if node.type == "export_statement" and is_default_export(node):
            return default_export_name(node)
    return None
