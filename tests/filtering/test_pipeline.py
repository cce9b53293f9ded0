import pytest

from entitytraverse.errors import ConfigError
from entitytraverse.extractors.file_extractor import TypeScriptEntityExtractor
from entitytraverse.filtering.config import FilterPipelineConfig
from entitytraverse.filtering.pipeline import FilterPipeline
from entitytraverse.models import Entity

FILE_PATH = "/project/src/app.tsx"


def extract(content, **flags):
    flags.setdefault("resolve_package_info", False)
    extractor = TypeScriptEntityExtractor(config=FilterPipelineConfig(**flags), root_dir="/project")
    result = extractor.extract_source(FILE_PATH, content)
    assert result.ok, result.error
    return result


def named(entities, name):
    return [e for e in entities if e.name == name]


def test_hook_import():
    result = extract("import { useState } from 'react';\n")
    [entity] = named(result.entities, "useState")
    assert entity.category == "external"
    assert entity.type == "function"
    assert entity.original_module == "react"
    assert entity.scope == "module"


def test_default_export_function_is_one_entity():
    result = extract("export default function Widget() {}\n")
    [widget] = named(result.entities, "Widget")
    assert widget.export_type == "default"
    assert widget.is_exported
    assert widget.confidence == pytest.approx(0.95, abs=0.05)
    assert result.filter_result.stats.deduplicated_count >= 1


def test_local_and_exported_variables():
    result = extract("const x = 5;\nexport const y = 5;\n")
    [x] = named(result.raw_entities, "x")
    [y] = named(result.raw_entities, "y")
    assert x.type == "variable" and x.scope == "local"
    assert y.type == "variable" and y.scope == "module"
    assert not named(result.entities, "x")
    assert named(result.entities, "y")


def test_console_log_call():
    result = extract('console.log("hello world");\n')
    [call] = named(result.entities, "console.log")
    assert call.category == "builtin"
    assert call.scope == "global"
    assert named(result.entities, "log:hello world")


def test_local_variable_discarded():
    result = extract("const a = 1;\nexport const b = 2;\n")
    stats = result.filter_result.stats
    assert [e.name for e in result.filter_result.filtered] == ["b"]
    assert stats.discarded_count >= 1

    kept = extract("const a = 1;\nexport const b = 2;\n", skip_local_variables=False)
    assert {e.name for e in kept.entities} == {"a", "b"}


SAMPLE = """\
import React, { useState } from 'react';
import { helper } from './helper';
import './styles.css';

/**
 * Renders the thing.
 * @param {string} label shown text
 */
export function Thing({ label }: { label: string }) {
  const [open, setOpen] = useState(false);
  helper(label);
  helper(label);
  console.log("render");
  return <div onClick={() => setOpen(!open)}>{label}</div>;
}

const _secret = 1;
export default Thing;
"""


def all_stages(result):
    fr = result.filter_result
    return [fr.original, fr.filtered, fr.deduplicated, fr.normalized, fr.static_enriched, fr.enriched]


def test_stage_arithmetic():
    result = extract(SAMPLE)
    fr = result.filter_result
    stats = fr.stats
    assert stats.total_raw == len(fr.original)
    assert stats.total_filtered == len(fr.filtered)
    assert stats.total_raw == stats.total_filtered + stats.discarded_count
    assert stats.total_filtered == len(fr.deduplicated) + stats.deduplicated_count
    assert stats.final_count == len(fr.enriched) == len(fr.normalized) == len(fr.deduplicated)
    assert stats.compression_rate == pytest.approx(1 - stats.final_count / stats.total_raw)
    assert 0.0 <= stats.compression_rate <= 1.0
    assert stats.processing_time_ms >= 0


def test_invariants_hold_in_every_stage():
    result = extract(SAMPLE)
    for stage in all_stages(result):
        for entity in stage:
            assert 0.0 <= entity.confidence <= 1.0
            if entity.category == "external":
                assert entity.scope == "module"
            elif entity.category == "builtin":
                assert entity.scope == "global"
            else:
                assert entity.scope == ("module" if entity.is_exported else "local")
    for entity in result.entities:
        assert entity.dedup_key in {e.dedup_key for e in result.raw_entities}


def test_relevance_rules_on_sample():
    result = extract(SAMPLE)
    names = {e.name for e in result.entities}
    assert "_secret" not in names
    assert "./styles.css" not in names
    assert "open" not in names
    assert {"Thing", "useState", "React", "helper"} <= names


def test_documentation_and_relationships():
    result = extract(SAMPLE, extract_documentation=True)
    [thing] = [e for e in result.entities if e.name == "Thing"]
    assert thing.metadata["documentation"] == "Renders the thing."
    assert thing.metadata["jsdoc"]["params"][0]["name"] == "label"
    [helper_import] = [e for e in result.entities if e.name == "helper" and e.kind == "import"]
    assert ("./helper", "imports") in {r.key for r in helper_import.relationships}


def test_deterministic():
    first = extract(SAMPLE)
    second = extract(SAMPLE)
    assert [e.to_dict() for e in first.entities] == [e.to_dict() for e in second.entities]
    assert first.filter_result.stats.final_count == second.filter_result.stats.final_count


def test_stages_do_not_mutate_their_input():
    raw = [
        Entity(name="f", type="function", kind="function", category="internal", source="a.ts",
               line=1, column=0, confidence=0.5, scope="local"),
        Entity(name="f", type="call", kind="call", category="internal", source="a.ts",
               line=3, column=0, confidence=0.9, scope="local"),
    ]
    snapshot = [e.to_dict() for e in raw]
    result = FilterPipeline({"resolve_package_info": False}).run(raw, "/project/a.ts")
    assert [e.to_dict() for e in raw] == snapshot
    assert [e.to_dict() for e in result.original] == snapshot
    assert result.deduplicated[0].metadata["occurrences"] == 2
    assert "occurrences" not in result.filtered[0].metadata


def test_empty_input():
    result = FilterPipeline({"resolve_package_info": False}).run([], "/project/a.ts")
    assert result.enriched == []
    assert result.stats.compression_rate == 0.0


def test_contradictory_config_raises_before_any_stage():
    with pytest.raises(ConfigError):
        TypeScriptEntityExtractor(config={"merge_imports_by_source": True, "merge_identical_entities": False})


def test_call_before_its_exported_declaration():
    result = extract("main();\nexport function main() {}\n")
    [main] = named(result.entities, "main")
    assert main.kind == "function"
    assert main.is_exported
    assert main.export_type == "named"
    assert main.scope == "module"


def test_nested_call_before_exported_declaration():
    result = extract("function a() { b(); }\nexport function b() {}\n")
    [b] = named(result.entities, "b")
    assert (b.kind, b.is_exported, b.scope) == ("function", True, "module")


def test_lodash_underscore_survives():
    result = extract("import _ from 'lodash';\n_.debounce(save, 100);\n")
    assert {(e.name, e.kind) for e in result.entities} >= {("_", "import"), ("_.debounce", "call")}
