from typing import List, Optional

from entitytraverse.helpers.ast_helpers import call_arguments, extract_call_name, extract_jsx_props, line_of, string_literal_value
from entitytraverse.helpers.confidence import calculate_confidence
from entitytraverse.models import AstEntity, ExtractionContext
from entitytraverse.syntax.node import SyntaxNode

MESSAGE_PREFIX_LENGTH = 50
MESSAGE_CONFIDENCE = 0.7


def _jsx_tag_name(node: SyntaxNode) -> Optional[str]:
    name = node.child_by_field_name("name")
    if name is None:
        name = node.first_child_of_type("identifier", "member_expression", "nested_identifier", "jsx_namespace_name")
    return name.text if name is not None else None


def extract_jsx(node: SyntaxNode, context: ExtractionContext) -> Optional[AstEntity]:
    tag = _jsx_tag_name(node)
    if not tag:
        # fragment
        return None
    root = tag.split(".", 1)[0]
    info = context.import_info(root)
    if info is None:
        category = "jsx"
        source = context.rel_file_path
    else:
        category = "external" if info.is_external else "internal"
        source = info.source if info.is_external else context.rel_file_path
    return AstEntity(
        name=tag,
        type="jsx",
        kind="jsx",
        category=category,
        source=source,
        line=line_of(node),
        column=node.column,
        confidence=calculate_confidence(node, "jsx", context, name=root),
        is_imported=info is not None,
        original_module=info.source if info is not None else None,
        metadata={
            "props": extract_jsx_props(node),
            "is_intrinsic": root[:1].islower(),
            "self_closing": node.type == "jsx_self_closing_element",
        },
    )


def _message_entities(prefix: str, call_name: str, call: AstEntity, args: List[SyntaxNode]) -> List[AstEntity]:
    out = []
    for arg in args:
        value = string_literal_value(arg)
        if value is None:
            continue
        out.append(AstEntity(
            name=f"{prefix}:{value[:MESSAGE_PREFIX_LENGTH]}",
            type="other",
            kind=prefix,
            category=call.category,
            source=call.source,
            line=line_of(arg),
            column=arg.column,
            confidence=MESSAGE_CONFIDENCE,
            metadata={"message": value, "callee": call_name},
        ))
    return out


def extract_call(node: SyntaxNode, context: ExtractionContext) -> List[AstEntity]:
    """A call entity for the callee, plus log/error message entities.

    Message entities are emitted for every string literal argument when the
    callee name mentions ``log``/``console`` (log) or ``Error``/``throw``
    (error).
    """
    name = extract_call_name(node.child_by_field_name("function"))
    if not name:
        return []
    args = call_arguments(node)
    metadata = {"argument_count": len(args)}
    info = context.import_info(name.split(".", 1)[0])
    if info is not None:
        metadata["imported_from"] = info.source
    call = AstEntity(
        name=name,
        type="call",
        kind="call",
        category="builtin" if name.startswith("console.") else "internal",
        source=context.rel_file_path,
        line=line_of(node),
        column=node.column,
        confidence=calculate_confidence(node, "call", context, name=name.split(".")[-1]),
        metadata=metadata,
    )
    entities = [call]
    if "log" in name or "console" in name:
        entities.extend(_message_entities("log", name, call, args))
    if "Error" in name or "throw" in name:
        entities.extend(_message_entities("error", name, call, args))
    return entities
