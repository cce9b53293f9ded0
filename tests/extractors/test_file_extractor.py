import json
from pathlib import Path

import pytest

from entitytraverse import get_extractor
from entitytraverse.extractors.file_extractor import TypeScriptEntityExtractor, read_source

SAMPLE_ROOT = Path(__file__).resolve().parents[2] / "sample_code_repo_test" / "typescript"


@pytest.fixture(scope="module")
def results():
    extractor = TypeScriptEntityExtractor(root_dir=str(SAMPLE_ROOT))
    out = {}
    for path in sorted(SAMPLE_ROOT.rglob("*")):
        if path.suffix in (".ts", ".tsx", ".js"):
            result = extractor.process_file(str(path))
            out[result.rel_file_path] = result
    return out


def find(result, name, kind=None):
    matches = [e for e in result.entities if e.name == name and (kind is None or e.kind == kind)]
    assert matches, f"{name} not found in {result.rel_file_path}"
    return matches[0]


def test_every_sample_file_is_extracted(results):
    assert set(results) == {
        "src/index.ts",
        "src/types.ts",
        "src/components/Button.tsx",
        "src/components/Widget.tsx",
        "src/services/userService.ts",
        "src/utils/format.js",
    }
    for result in results.values():
        assert result.ok
        assert result.node_errors == 0


def test_widget(results):
    result = results["src/components/Widget.tsx"]
    widget = find(result, "Widget")
    assert widget.export_type == "default"
    assert widget.metadata["semantic_type"] == "react-component"
    assert len([e for e in result.entities if e.name == "Widget"]) == 1

    react = find(result, "useState", "import")
    assert react.metadata["package_info"] == {
        "name": "react", "version": "18.2.0", "manager": "yarn", "is_dev_dependency": False,
    }
    assert find(result, "console.log").category == "builtin"
    assert find(result, "log:rendering widget").kind == "log"
    assert find(result, "Button", "import").category == "internal"
    assert not [e for e in result.entities if e.original_module == "./widget.css"]


def test_user_service(results):
    result = results["src/services/userService.ts"]
    service = find(result, "UserService", "class")
    assert service.metadata["implements"] == ["UserRepository"]
    assert ("UserRepository", "implements") in {r.key for r in service.relationships}
    assert service.metadata["jsdoc"]["summary"] == "Loads users from the HTTP API."
    assert find(result, "readFile", "import").metadata["is_node_builtin"] is True
    assert "package_info" not in find(result, "readFile", "import").metadata
    assert find(result, "error:missing user id").kind == "error"
    assert find(result, "UserId").type == "typeRef"
    assert not [e for e in result.entities if e.name == "_cache"]


def test_reexports(results):
    result = results["src/index.ts"]
    assert find(result, "api").export_type == "re-export"
    assert find(result, "api").category == "external"
    fmt = find(result, "format")
    assert fmt.metadata["local_name"] == "formatName"
    assert fmt.original_module == "./utils/format"


def test_commonjs_sample(results):
    result = results["src/utils/format.js"]
    assert find(result, "formatName").is_exported
    assert find(result, "joinAll").type == "function"


def test_write_to_file(tmp_path):
    extractor = TypeScriptEntityExtractor(root_dir=str(SAMPLE_ROOT), config={"resolve_package_info": False})
    extractor.process_file(str(SAMPLE_ROOT / "src" / "types.ts"))
    out = tmp_path / "nested" / "types.json"
    extractor.write_to_file(str(out))
    data = json.loads(out.read_text())
    assert data["file_path"] == "src/types.ts"
    assert [e["name"] for e in data["entities"]] == ["User"]
    assert data["stats"]["total_raw"] >= 1
    assert extractor.extract_all_components()[0]["name"] == "User"


def test_write_before_process_fails():
    with pytest.raises(RuntimeError):
        TypeScriptEntityExtractor().write_to_file("/tmp/never.json")
    assert TypeScriptEntityExtractor().extract_all_components() == []


def test_missing_tree_is_a_failed_file():
    result = TypeScriptEntityExtractor().extract("src/a.ts", "", None)
    assert not result.ok
    assert result.entities == []


def test_syntax_errors_tolerated_unless_strict():
    broken = "export function ok() {}\nconst = ;\n"
    lenient = TypeScriptEntityExtractor(config={"resolve_package_info": False}).extract_source("a.ts", broken)
    assert lenient.ok
    assert [e.name for e in lenient.entities if e.kind == "function"] == ["ok"]
    strict = TypeScriptEntityExtractor(strict=True).extract_source("a.ts", broken)
    assert not strict.ok


def test_unsupported_extension_fails_softly():
    result = TypeScriptEntityExtractor().extract_source("notes.md", "# hi")
    assert not result.ok


def test_read_source_falls_back_on_other_encodings(tmp_path):
    path = tmp_path / "latin.js"
    path.write_bytes("const name = 'José Müller café';\n".encode("latin-1"))
    assert "Jos" in read_source(str(path))


def test_get_extractor():
    extractor = get_extractor("tsx", config={"resolve_package_info": False})
    assert isinstance(extractor, TypeScriptEntityExtractor)
    assert extractor.language == "tsx"
    with pytest.raises(ValueError):
        get_extractor("python")
