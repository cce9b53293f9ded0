"""
Name and tag based guess at what an entity is for.

Rules are checked in order and the first hit wins: JSDoc tags, React
conventions, API layer, domain layer, utilities and config, tests, then
plain type definitions.
"""

import re
from typing import Any, Dict, Optional

from entitytraverse.models import Entity

UNKNOWN = "unknown"

JSDOC_TAG_TYPES = (
    (("component", "react"), "react-component"),
    (("hook",), "react-hook"),
    (("api", "endpoint"), "api-handler"),
    (("service",), "service"),
    (("repository", "repo"), "repository"),
    (("model", "entity"), "entity"),
    (("dto",), "dto"),
    (("util", "utility"), "utility"),
    (("helper",), "helper"),
    (("config", "configuration"), "config"),
    (("test", "spec"), "test-suite"),
)
BUILTIN_API_PREFIXES = (
    "console", "document", "window", "navigator", "location", "localstorage",
    "sessionstorage", "fetch", "xmlhttprequest", "process", "buffer", "require",
    "module", "exports", "__dirname", "__filename",
)
_CONSTANT_RE = re.compile(r"^[A-Z_][A-Z0-9_]*$")
_HOOK_RE = re.compile(r"^use[A-Z]")


def _returns_jsx(name: str, content: Optional[str]) -> bool:
    if not content:
        return False
    escaped = re.escape(name)
    function_form = re.compile(rf"function\s+{escaped}\s*\([^)]*\)[^{{]*\{{[^}}]*return\s+\(?\s*<", re.DOTALL)
    arrow_form = re.compile(rf"(?:const|let|var)\s+{escaped}\s*(?::[^=]+)?=\s*(?:async\s*)?\([^)]*\)[^=]*=>\s*[^{{]*?<", re.DOTALL)
    return bool(function_form.search(content) or arrow_form.search(content))


def _is_react_component(entity: Entity, content: Optional[str]) -> bool:
    name = entity.name
    if not name[:1].isupper():
        return False
    if name.endswith(("Component", "Page", "View")):
        return True
    if entity.kind == "jsx" and entity.category != "jsx":
        return True
    return entity.type == "function" and _returns_jsx(name, content)


def _name_rules(entity: Entity) -> Optional[str]:
    name = entity.name.lower()
    is_function = entity.type == "function"
    if "context" in name or name.endswith("provider"):
        return "react-context"
    if "handler" in name or "controller" in name or name.startswith("handle") or (name.startswith("on") and is_function):
        return "api-handler"
    if "route" in name or "endpoint" in name:
        return "api-route"
    if "middleware" in name or name.endswith("mw") or (name.startswith("auth") and is_function):
        return "api-middleware"
    if "service" in name or name.endswith("svc"):
        return "service"
    if "repository" in name or name.endswith("repo"):
        return "repository"
    if "model" in name:
        return "model"
    if "dto" in name or name.endswith(("request", "response")):
        return "dto"
    if name.endswith("entity") or entity.type == "class":
        return "entity"
    if name.endswith(("util", "utils")) or "utility" in name:
        return "utility"
    if "helper" in name:
        return "helper"
    if "config" in name or name.endswith("configuration") or name in ("settings", "options"):
        return "config"
    if _CONSTANT_RE.match(entity.name) and entity.type == "variable":
        return "constant"
    if name.endswith("enum") or (name.endswith("type") and entity.category == "internal" and entity.type != "typeRef"):
        return "enum"
    if name.endswith(("test", "spec")) or ".test" in name or ".spec" in name:
        return "test-suite"
    if "mock" in name or "fixture" in name or "stub" in name or (name.startswith("create") and "test" in name):
        return "test-helper"
    if name.startswith(BUILTIN_API_PREFIXES):
        return "utility"
    return None


def infer_semantic_type(entity: Entity, jsdoc: Optional[Dict[str, Any]] = None, content: Optional[str] = None) -> str:
    if jsdoc and jsdoc.get("tags"):
        tag_names = {t["tag"].lower() for t in jsdoc["tags"]}
        for tags, semantic_type in JSDOC_TAG_TYPES:
            if tag_names.intersection(tags):
                return semantic_type
    if entity.kind in ("log", "error"):
        return UNKNOWN
    if _is_react_component(entity, content):
        return "react-component"
    if _HOOK_RE.match(entity.name):
        return "react-hook"
    semantic_type = _name_rules(entity)
    if semantic_type:
        return semantic_type
    if entity.type == "typeRef":
        return "type-definition"
    return UNKNOWN
