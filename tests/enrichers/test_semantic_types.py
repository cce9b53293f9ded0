import pytest

from entitytraverse.enrichers.semantic_types import infer_semantic_type
from entitytraverse.models import Entity


def make(name, type="function", kind="function", category="internal"):
    return Entity(name=name, type=type, kind=kind, category=category, source="src/a.tsx",
                  line=1, column=0, confidence=0.8, scope="module")


@pytest.mark.parametrize("entity,expected", [
    (make("UserPage"), "react-component"),
    (make("Button", type="variable", kind="jsx", category="internal"), "react-component"),
    (make("div", type="variable", kind="jsx", category="jsx"), "unknown"),
    (make("useAuth"), "react-hook"),
    (make("ThemeContext", type="variable", kind="variable"), "react-context"),
    (make("handleSubmit"), "api-handler"),
    (make("userRoutes", type="variable", kind="variable"), "api-route"),
    (make("authMiddleware"), "api-middleware"),
    (make("UserService", type="class", kind="class"), "service"),
    (make("UserRepository", type="typeRef", kind="interface"), "repository"),
    (make("Account", type="class", kind="class"), "entity"),
    (make("CreateUserRequest", type="typeRef", kind="interface"), "dto"),
    (make("stringUtils", type="variable", kind="variable"), "utility"),
    (make("MAX_RETRIES", type="variable", kind="variable"), "constant"),
    (make("mockUser", type="variable", kind="variable"), "test-helper"),
    (make("UserId", type="typeRef", kind="type"), "type-definition"),
    (make("log:hello", type="other", kind="log"), "unknown"),
    (make("compute"), "unknown"),
])
def test_name_rules(entity, expected):
    assert infer_semantic_type(entity) == expected


def test_jsdoc_tags_win():
    jsdoc = {"tags": [{"tag": "service"}]}
    assert infer_semantic_type(make("useAuth"), jsdoc) == "service"


def test_function_returning_jsx():
    content = "export function Card(props) {\n  return (<div>{props.title}</div>);\n}\n"
    assert infer_semantic_type(make("Card"), content=content) == "react-component"
    assert infer_semantic_type(make("Card")) == "unknown"
    arrow = "export const Tile = ({ title }) => <span>{title}</span>;\n"
    assert infer_semantic_type(make("Tile"), content=arrow) == "react-component"
