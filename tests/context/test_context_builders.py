import pytest

from entitytraverse.context import build_context, relative_file_path
from entitytraverse.context.export_collector import collect_exported_names, find_default_export_name
from entitytraverse.context.import_map_builder import dynamic_key
from entitytraverse.syntax import parse_source

SOURCE = """
import React, { useState as useLocalState } from 'react';
import * as utils from './utils';
import './styles.css';

export const a = 1, { b, c: d } = obj;
export function helper() {}
export class Store {}
export interface Shape {}
export type Id = string;
const hidden = 2;
export { hidden as visible };
export * as ns from './ns';
export { x } from './x';
export default function Widget() {}

const lazy = import('./lazy');
const legacy = require('lodash');
const page = import(`./pages/${name}`);
"""


@pytest.fixture(scope="module")
def context():
    return build_context(parse_source(SOURCE, "typescript"), "/repo/src/app.ts", SOURCE, root_dir="/repo")


def test_exported_names(context):
    expected = {"a", "b", "d", "helper", "Store", "Shape", "Id", "hidden", "visible", "ns", "x", "Widget"}
    assert expected <= context.exported_names
    assert "obj" not in context.exported_names
    assert "c" not in context.exported_names


def test_default_export_name(context):
    assert context.default_export_name == "Widget"


def test_anonymous_default_export():
    root = parse_source("export default () => 1;", "javascript")
    assert collect_exported_names(root) == {"default"}
    assert find_default_export_name(root) == "default"


def test_static_imports_keyed_by_local_name(context):
    assert context.imported_symbols["React"].source == "react"
    assert context.imported_symbols["useLocalState"].is_external
    assert "useState" not in context.imported_symbols
    utils = context.imported_symbols["utils"]
    assert utils.source == "./utils" and not utils.is_external
    assert not utils.is_dynamic


def test_dynamic_imports_use_synthetic_keys(context):
    lazy = context.imported_symbols[dynamic_key("import", "./lazy")]
    assert lazy.is_dynamic and lazy.method == "import" and not lazy.is_external
    legacy = context.imported_symbols[dynamic_key("require", "lodash")]
    assert legacy.method == "require" and legacy.is_external
    pattern = context.imported_symbols[dynamic_key("import", "./pages/*")]
    assert pattern.source == "./pages/*"
    assert "lodash" not in context.imported_symbols


def test_dynamic_keys_never_shadow_static_names():
    source = "import lodash from 'lodash';\nconst again = require('lodash');"
    ctx = build_context(parse_source(source, "javascript"), "a.js", source)
    assert ctx.imported_symbols["lodash"].is_dynamic is False
    assert ctx.imported_symbols[dynamic_key("require", "lodash")].is_dynamic is True


def test_relative_file_path(context, monkeypatch):
    assert context.rel_file_path == "src/app.ts"
    monkeypatch.setenv("ROOT_DIR", "/repo")
    assert relative_file_path("/repo/lib/x.ts") == "lib/x.ts"
    monkeypatch.delenv("ROOT_DIR")
    assert relative_file_path("lib/x.ts") == "lib/x.ts"
    # files outside the root keep their own path
    assert relative_file_path("/elsewhere/y.ts", "/repo") == "/elsewhere/y.ts"
