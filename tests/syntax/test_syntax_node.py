from entitytraverse.syntax.node import SyntaxNode, walk


def make_tree():
    name = SyntaxNode.create("identifier", "greet", line=2, column=9)
    params = SyntaxNode.create("formal_parameters", "()")
    body = SyntaxNode.create("statement_block", "{}")
    keyword = SyntaxNode.create("function", "function", is_named=False)
    fn = SyntaxNode.create(
        "function_declaration",
        "function greet() {}",
        children=[keyword],
        fields={"name": name, "parameters": params, "body": body},
        line=2,
    )
    return SyntaxNode.create("program", children=[fn])


def test_field_lookup():
    fn = make_tree().children[0]
    assert fn.child_by_field_name("name").text == "greet"
    assert fn.child_by_field_name("return_type") is None
    assert fn.children_by_field_name("body")[0].type == "statement_block"


def test_named_children_skip_anonymous_tokens():
    fn = make_tree().children[0]
    assert [c.type for c in fn.named_children] == ["identifier", "formal_parameters", "statement_block"]
    assert len(fn.children) == 4


def test_first_child_of_type():
    fn = make_tree().children[0]
    assert fn.first_child_of_type("statement_block", "identifier").type == "identifier"
    assert fn.has_child_of_type("function")
    assert not fn.has_child_of_type("class_body")


def test_walk_is_preorder():
    types = [n.type for n in walk(make_tree())]
    # create() attaches field children before positional ones
    assert types == ["program", "function_declaration", "identifier", "formal_parameters", "statement_block", "function"]


def test_walk_none_yields_nothing():
    assert list(walk(None)) == []


def test_start_point():
    name = make_tree().children[0].child_by_field_name("name")
    assert name.start_point == (2, 9)
