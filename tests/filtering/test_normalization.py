import pytest

from entitytraverse.filtering.config import FilterPipelineConfig
from entitytraverse.filtering.normalization import is_node_builtin, normalize, normalized_name
from entitytraverse.models import Entity


def make(name, kind="import", category="internal", source="src/app.ts", module=None, **kwargs):
    return Entity(name=name, type="import", kind=kind, category=category, source=source, line=1, column=0,
                  confidence=0.8, scope=kwargs.pop("scope", "local"), original_module=module, **kwargs)


@pytest.mark.parametrize("module,builtin", [
    ("fs", True),
    ("fs/promises", True),
    ("node:test", True),
    ("react", False),
    ("./fs", False),
    (None, False),
])
def test_node_builtins(module, builtin):
    assert is_node_builtin(module) is builtin


def test_relative_imports_get_a_resolved_name():
    assert normalized_name(make("User", module="../types")) == "types#User"
    assert normalized_name(make("useState", category="external", module="react")) == "useState"


def test_side_effect_imports_resolve_to_the_module():
    entity = make("./polyfills", module="./polyfills", metadata={"side_effect": True})
    assert normalized_name(entity) == "src/polyfills"


def test_paths_are_posix_and_fields_unchanged():
    entities = [
        make(" padded ", source="src\\win\\file.ts", module=".\\helpers"),
        make("y", kind="variable", scope="module", is_exported=True),
    ]
    out = normalize(entities, FilterPipelineConfig())
    assert len(out) == len(entities)
    assert out[0].name == "padded"
    assert out[0].source == "src/win/file.ts"
    assert out[0].original_module == "./helpers"
    assert out[0].metadata["is_node_builtin"] is False
    assert out[1].export_type == "named"
    for before, after in zip(entities, out):
        assert (before.category, before.scope) == (after.category, after.scope)
        assert after.metadata["occurrences"] == 1


def test_separators_left_alone_when_disabled():
    [entity] = normalize([make("a", source="src\\a.ts")], FilterPipelineConfig(normalize_path_separators=False))
    assert entity.source == "src\\a.ts"
