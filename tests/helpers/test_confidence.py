from entitytraverse.helpers.confidence import calculate_confidence, clamp
from entitytraverse.models import ExtractionContext
from entitytraverse.syntax import parse_source, walk


def function_node(source):
    return next(n for n in walk(parse_source(source, "typescript")) if n.type == "function_declaration")


def context(exported=()):
    return ExtractionContext(file_path="a.ts", rel_file_path="a.ts", exported_names=set(exported))


def test_bounds():
    assert clamp(1.7) == 1.0
    assert clamp(-0.2) == 0.0
    node = function_node("function f(a: string): number { return 1; }")
    assert 0.0 <= calculate_confidence(node, "function", context({"f"})) <= 1.0


def test_more_evidence_never_lowers_the_score():
    bare = function_node("function f(a) { return 1; }")
    typed = function_node("function f(a: string): number { return 1; }")
    plain = calculate_confidence(bare, "function", context())
    annotated = calculate_confidence(typed, "function", context())
    exported = calculate_confidence(typed, "function", context({"f"}))
    assert plain < annotated < exported


def test_ill_formed_name_scores_lower():
    node = function_node("function f() {}")
    assert calculate_confidence(node, "call", context(), name="a-b") < calculate_confidence(node, "call", context(), name="ab")
