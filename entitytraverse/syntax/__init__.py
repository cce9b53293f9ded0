from entitytraverse.syntax.node import SyntaxNode, walk
from entitytraverse.syntax.tree_sitter_adapter import language_for_path, parse_file_content, parse_source
