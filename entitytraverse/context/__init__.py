import os
from typing import Optional

from entitytraverse.context.export_collector import collect_exported_names, find_default_export_name
from entitytraverse.context.import_map_builder import build_import_map
from entitytraverse.models import ExtractionContext
from entitytraverse.syntax.node import SyntaxNode


def relative_file_path(file_path: str, root_dir: Optional[str] = None) -> str:
    root = root_dir or os.environ.get("ROOT_DIR", "")
    if root:
        try:
            rel = os.path.relpath(file_path, root)
        except ValueError:
            rel = file_path
        if not rel.startswith(".."):
            return rel.replace("\\", "/")
    return file_path.replace("\\", "/")


def build_context(
    root: SyntaxNode,
    file_path: str,
    content: str = "",
    root_dir: Optional[str] = None,
) -> ExtractionContext:
    context = ExtractionContext(
        file_path=file_path,
        rel_file_path=relative_file_path(file_path, root_dir),
        content=content,
    )
    context.exported_names = collect_exported_names(root)
    context.default_export_name = find_default_export_name(root)
    build_import_map(root, context)
    return context
