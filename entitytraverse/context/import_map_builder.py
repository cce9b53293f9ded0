from typing import Optional

from entitytraverse.context.dynamic_imports import resolve_dynamic_source
from entitytraverse.helpers.ast_helpers import import_source, import_specifiers, is_external_import
from entitytraverse.models import ExtractionContext, ImportInfo
from entitytraverse.syntax.node import SyntaxNode, walk

DYNAMIC_KEY_PREFIX = {"import": "__dynamic__", "require": "__require__"}


def dynamic_key(method: str, source: str) -> str:
    return f"{DYNAMIC_KEY_PREFIX[method]}{source}"


def build_import_map(root: Optional[SyntaxNode], context: ExtractionContext) -> None:
    """Fill ``context.imported_symbols`` from static and dynamic imports.

    Static specifiers are keyed by their local name. Dynamic ``import()`` and
    ``require()`` sources go under synthetic keys so they never shadow a
    static binding of the same name.
    """
    for node in walk(root):
        if node.type == "import_statement":
            source = import_source(node)
            if not source:
                continue
            external = is_external_import(source)
            for spec in import_specifiers(node):
                context.imported_symbols[spec["local"]] = ImportInfo(source=source, is_external=external)
        elif node.type == "call_expression":
            found = resolve_dynamic_source(node)
            if found is None:
                continue
            context.imported_symbols[dynamic_key(found.method, found.value)] = ImportInfo(
                source=found.value,
                is_external=is_external_import(found.value),
                is_dynamic=True,
                method=found.method,
            )
