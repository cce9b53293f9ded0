import re
from typing import Dict, List, Optional

from entitytraverse.syntax.node import SyntaxNode

IDENTIFIER_TYPES = (
    "identifier",
    "type_identifier",
    "property_identifier",
    "shorthand_property_identifier_pattern",
    "private_property_identifier",
)
FUNCTION_VALUE_TYPES = (
    "arrow_function",
    "function_expression",
    "function",
    "generator_function",
)

_IDENT_RE = re.compile(r"^[A-Za-z_$#][A-Za-z0-9_$]*$")


def line_of(node: SyntaxNode) -> int:
    return node.line + 1


def is_identifier_like(name: Optional[str]) -> bool:
    return bool(name) and bool(_IDENT_RE.match(name))


def is_external_import(source: str) -> bool:
    return not source.startswith(".") and not source.startswith("/")


def extract_entity_name(node: Optional[SyntaxNode]) -> Optional[str]:
    if node is None:
        return None
    if node.type in IDENTIFIER_TYPES:
        return node.text
    for field_name in ("name", "key"):
        child = node.child_by_field_name(field_name)
        if child is not None and child.type in IDENTIFIER_TYPES:
            return child.text
    return None


def string_literal_value(node: Optional[SyntaxNode]) -> Optional[str]:
    """Value of a quoted string or of a template string without substitutions."""
    if node is None:
        return None
    if node.type == "string":
        text = node.text
        if len(text) >= 2 and text[0] in "'\"" and text[-1] == text[0]:
            return text[1:-1]
        return text
    if node.type == "template_string":
        if node.has_child_of_type("template_substitution"):
            return None
        return node.text[1:-1] if node.text.startswith("`") else node.text
    return None


def template_static_prefix(node: SyntaxNode) -> Optional[str]:
    """Leading literal segment of a template string that has substitutions."""
    if node.type != "template_string" or not node.has_child_of_type("template_substitution"):
        return None
    body = node.text[1:] if node.text.startswith("`") else node.text
    prefix = body.split("${", 1)[0]
    return prefix or None


def extract_type_annotation(node: Optional[SyntaxNode]) -> Optional[str]:
    if node is None:
        return None
    annotation = node
    if node.type == "type_annotation":
        named = node.named_children
        if not named:
            return "any"
        annotation = named[0]
    if annotation.type == "predefined_type":
        return annotation.text
    if annotation.type in ("type_identifier", "nested_type_identifier"):
        return annotation.text
    if annotation.type == "generic_type":
        name = annotation.child_by_field_name("name") or annotation.first_child_of_type(
            "type_identifier", "nested_type_identifier"
        )
        if name is not None:
            return name.text
    return "any"


def _parameter_name(param: SyntaxNode) -> str:
    if param.type in IDENTIFIER_TYPES:
        return param.text
    for field_name in ("pattern", "left", "name"):
        child = param.child_by_field_name(field_name)
        if child is not None:
            return child.text
    if param.type == "rest_pattern":
        return param.text
    return "unknown"


def extract_parameters(params: Optional[SyntaxNode]) -> List[Dict[str, Optional[str]]]:
    if params is None:
        return []
    if params.type in IDENTIFIER_TYPES:
        # single unparenthesized arrow parameter
        return [{"name": params.text, "type": None}]
    out = []
    for param in params.named_children:
        if param.type == "comment":
            continue
        out.append({
            "name": _parameter_name(param),
            "type": extract_type_annotation(param.child_by_field_name("type")),
        })
    return out


def function_parameters_node(fn: SyntaxNode) -> Optional[SyntaxNode]:
    return fn.child_by_field_name("parameters") or fn.child_by_field_name("parameter")


def extract_return_type(fn: SyntaxNode) -> Optional[str]:
    return extract_type_annotation(fn.child_by_field_name("return_type"))


def has_type_annotation(node: Optional[SyntaxNode]) -> bool:
    if node is None:
        return False
    if node.child_by_field_name("return_type") is not None:
        return True
    if node.child_by_field_name("type") is not None:
        return True
    name = node.child_by_field_name("name")
    if name is not None and name.child_by_field_name("type") is not None:
        return True
    params = function_parameters_node(node)
    if params is not None:
        return any(p.child_by_field_name("type") is not None for p in params.named_children)
    return False


def extract_initial_value(value: Optional[SyntaxNode]) -> Optional[str]:
    if value is None:
        return None
    if value.type in ("number", "true", "false", "null", "undefined"):
        return value.text
    if value.type in ("string", "template_string"):
        return string_literal_value(value)
    if value.type == "arrow_function":
        return "(arrow function)"
    if value.type in ("function_expression", "function", "generator_function"):
        return "(function)"
    if value.type == "call_expression":
        return "(function call)"
    if value.type == "object":
        return "(object)"
    if value.type == "array":
        return "(array)"
    return None


def extract_jsx_props(element: Optional[SyntaxNode]) -> List[str]:
    if element is None:
        return []
    attributes = element.children_by_field_name("attribute") or [
        c for c in element.children if c.type == "jsx_attribute"
    ]
    props = []
    for attr in attributes:
        if attr.type != "jsx_attribute":
            continue
        named = attr.named_children
        if named and named[0].type in ("property_identifier", "jsx_namespace_name", "identifier"):
            props.append(named[0].text)
    return props


def extract_call_name(callee: Optional[SyntaxNode]) -> Optional[str]:
    """Flatten a callee into ``a.b.c`` form; None when it is not a plain name chain."""
    if callee is None:
        return None
    if callee.type in ("identifier", "this", "super"):
        return callee.text
    if callee.type == "member_expression":
        obj = extract_call_name(callee.child_by_field_name("object"))
        prop_node = callee.child_by_field_name("property")
        prop = prop_node.text if prop_node is not None else None
        if obj and prop:
            return f"{obj}.{prop}"
        return prop
    return None


def call_arguments(call: SyntaxNode) -> List[SyntaxNode]:
    args = call.child_by_field_name("arguments")
    if args is None:
        return []
    return [a for a in args.named_children if a.type != "comment"]


def declaration_kind(declaration: SyntaxNode) -> Optional[str]:
    kind = declaration.child_by_field_name("kind")
    if kind is not None:
        return kind.text
    for child in declaration.children:
        if not child.is_named and child.type in ("const", "let", "var"):
            return child.type
    return None


def pattern_identifiers(pattern: Optional[SyntaxNode]) -> List[SyntaxNode]:
    """Identifier nodes bound by a declarator name (plain or destructuring)."""
    if pattern is None:
        return []
    if pattern.type in ("identifier", "shorthand_property_identifier_pattern"):
        return [pattern]
    if pattern.type == "pair_pattern":
        return pattern_identifiers(pattern.child_by_field_name("value"))
    if pattern.type in ("assignment_pattern", "object_assignment_pattern"):
        return pattern_identifiers(pattern.child_by_field_name("left") or (pattern.named_children or [None])[0])
    if pattern.type in ("object_pattern", "array_pattern", "rest_pattern"):
        out = []
        for child in pattern.named_children:
            out.extend(pattern_identifiers(child))
        return out
    return []


def is_default_export(export_node: SyntaxNode) -> bool:
    return any(not c.is_named and c.type == "default" for c in export_node.children)


def import_source(import_node: SyntaxNode) -> Optional[str]:
    source = import_node.child_by_field_name("source")
    if source is None:
        clause = import_node.first_child_of_type("import_require_clause")
        if clause is not None:
            source = clause.child_by_field_name("source") or clause.first_child_of_type("string")
    if source is None:
        source = import_node.first_child_of_type("string")
    return string_literal_value(source)


def import_specifiers(import_node: SyntaxNode) -> List[Dict[str, object]]:
    """Local/imported name pairs declared by an import statement.

    Each entry is ``{"local", "imported", "style", "node"}`` where style is
    one of default, namespace, named or require.
    """
    specs: List[Dict[str, object]] = []
    require_clause = import_node.first_child_of_type("import_require_clause")
    if require_clause is not None:
        ident = require_clause.first_child_of_type("identifier")
        if ident is not None:
            specs.append({"local": ident.text, "imported": ident.text, "style": "require", "node": ident})
        return specs
    clause = import_node.first_child_of_type("import_clause")
    if clause is None:
        return specs
    for child in clause.named_children:
        if child.type == "identifier":
            specs.append({"local": child.text, "imported": "default", "style": "default", "node": child})
        elif child.type == "namespace_import":
            ident = child.first_child_of_type("identifier")
            if ident is not None:
                specs.append({"local": ident.text, "imported": "*", "style": "namespace", "node": ident})
        elif child.type == "named_imports":
            for spec in child.named_children:
                if spec.type != "import_specifier":
                    continue
                name_node = spec.child_by_field_name("name") or spec.first_child_of_type("identifier")
                if name_node is None:
                    continue
                alias_node = spec.child_by_field_name("alias")
                imported = string_literal_value(name_node) or name_node.text
                local = alias_node.text if alias_node is not None else imported
                specs.append({"local": local, "imported": imported, "style": "named", "node": spec})
    return specs
