import pytest

from entitytraverse.helpers.type_inferrer import infer_from_name, infer_from_node
from entitytraverse.syntax.node import SyntaxNode


@pytest.mark.parametrize("name,expected", [
    ("useState", "function"),
    ("useEffect", "function"),
    ("user", "other"),
    ("username", "other"),
    ("Widget", "component"),
    ("", "other"),
    (None, "other"),
])
def test_infer_from_name(name, expected):
    assert infer_from_name(name) == expected


@pytest.mark.parametrize("node_type,text,expected", [
    ("function_declaration", "function f() {}", "function"),
    ("arrow_function", "() => 1", "function"),
    ("class_declaration", "class A {}", "class"),
    ("identifier", "Widget", "component"),
    ("identifier", "widget", "other"),
    ("object", "{}", "other"),
])
def test_infer_from_node(node_type, text, expected):
    assert infer_from_node(SyntaxNode.create(node_type, text)) == expected


def test_infer_from_missing_node():
    assert infer_from_node(None) == "other"
