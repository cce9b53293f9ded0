"""
JSDoc lookup for entities.

The block must end on the last non-blank line above the entity and start
with ``/**``. Parsing is line based: free text before the first tag is the
description, every ``@tag`` starts a new tag that runs until the next one.
"""

import re
from typing import Any, Dict, Iterable, List, Optional

TAG_RE = re.compile(r"^@(\w+)\s*(.*)$")
TYPED_RE = re.compile(r"^\{([^}]*)\}\s*(.*)$", re.DOTALL)
NAMED_RE = re.compile(r"^(\[[^\]]+\]|[\w$.]+)\s*(?:-\s*)?(.*)$", re.DOTALL)

PARAM_TAGS = ("param", "arg", "argument")
RETURN_TAGS = ("returns", "return")
THROW_TAGS = ("throws", "throw", "exception")
SPECIAL_TAGS = PARAM_TAGS + RETURN_TAGS + THROW_TAGS + ("example", "deprecated", "since", "author", "async")


def find_jsdoc_block(source: str, entity_line: int) -> Optional[str]:
    """Raw ``/** ... */`` text directly above 1-based ``entity_line``."""
    lines = source.split("\n")
    end = entity_line - 2
    if end >= len(lines):
        return None
    while end >= 0 and not lines[end].strip():
        end -= 1
    if end < 0 or not lines[end].strip().endswith("*/"):
        return None
    start = end
    while True:
        stripped = lines[start].strip()
        if stripped.startswith("/**"):
            return "\n".join(lines[start:end + 1])
        if stripped.startswith("/*"):
            # plain block comment
            return None
        if start != end and not stripped.startswith("*"):
            return None
        start -= 1
        if start < 0:
            return None


def _clean_lines(block: str) -> List[str]:
    body = block.strip()
    body = body[3:] if body.startswith("/**") else body
    body = body[:-2] if body.endswith("*/") else body
    out = []
    for line in body.split("\n"):
        line = line.strip()
        if line.startswith("*"):
            line = line[1:]
            if line.startswith(" "):
                line = line[1:]
        out.append(line.rstrip())
    return out


def _split_tag(tag: str, rest: str) -> Dict[str, Any]:
    parsed: Dict[str, Any] = {"tag": tag}
    typed = TYPED_RE.match(rest)
    if typed:
        parsed["type"] = typed.group(1).strip()
        rest = typed.group(2)
    if tag in PARAM_TAGS:
        named = NAMED_RE.match(rest)
        if named:
            name = named.group(1)
            rest = named.group(2)
            if name.startswith("["):
                parsed["optional"] = True
                name = name[1:-1]
                if "=" in name:
                    name, default = name.split("=", 1)
                    parsed["default"] = default.strip()
            parsed["name"] = name.strip()
    parsed["description"] = rest.strip()
    return parsed


def parse_jsdoc(block: str) -> Optional[Dict[str, Any]]:
    description: List[str] = []
    tags: List[Dict[str, Any]] = []
    current = None
    for line in _clean_lines(block):
        match = TAG_RE.match(line)
        if match:
            current = [match.group(1), [match.group(2)]]
            tags.append(current)
        elif current is not None:
            current[1].append(line)
        else:
            description.append(line)

    parsed_tags = [_split_tag(tag, "\n".join(body).strip()) for tag, body in tags]
    text = "\n".join(description).strip()
    if not text and not parsed_tags:
        return None

    def first(names: Iterable[str]):
        return next((t for t in parsed_tags if t["tag"] in names), None)

    returns = first(RETURN_TAGS)
    throws = [{"type": t.get("type"), "description": t["description"]} for t in parsed_tags if t["tag"] in THROW_TAGS]
    examples = [t["description"] for t in parsed_tags if t["tag"] == "example"]
    return {
        "description": text,
        "summary": text.split("\n")[0] if text else "",
        "params": [
            {
                "name": t.get("name"),
                "type": t.get("type"),
                "description": t["description"],
                "optional": t.get("optional", False),
                "default": t.get("default"),
            }
            for t in parsed_tags if t["tag"] in PARAM_TAGS
        ],
        "returns": {"type": returns.get("type"), "description": returns["description"]} if returns else None,
        "throws": throws or None,
        "tags": [t for t in parsed_tags if t["tag"] not in SPECIAL_TAGS],
        "examples": examples or None,
        "deprecated": (first(("deprecated",)) or {}).get("description"),
        "since": (first(("since",)) or {}).get("description"),
        "author": (first(("author",)) or {}).get("description"),
        "is_async": first(("async",)) is not None,
    }


def extract_jsdoc(source: str, entity_line: int) -> Optional[Dict[str, Any]]:
    block = find_jsdoc_block(source, entity_line)
    if block is None:
        return None
    return parse_jsdoc(block)
