"""
Looks up an external package in the nearest ``package.json`` that lists it.
"""

import asyncio
import json
import logging
import os
from typing import Any, Dict, Optional

from entitytraverse.errors import ResolutionError

logger = logging.getLogger(__name__)

MAX_DEPTH = 10
LOCKFILES = (("pnpm-lock.yaml", "pnpm"), ("yarn.lock", "yarn"))


def detect_package_manager(project_dir: str) -> str:
    for lockfile, manager in LOCKFILES:
        if os.path.exists(os.path.join(project_dir, lockfile)):
            return manager
    return "npm"


class PackageResolver:
    """Resolves package metadata relative to a source file.

    Manifests are read once per resolver; a resolver is meant to live for a
    single pipeline run.
    """

    def __init__(self, max_depth: int = MAX_DEPTH):
        self.max_depth = max_depth
        self._manifests: Dict[str, Optional[Dict[str, Any]]] = {}

    def _load_manifest(self, directory: str) -> Optional[Dict[str, Any]]:
        if directory in self._manifests:
            return self._manifests[directory]
        path = os.path.join(directory, "package.json")
        manifest = None
        if os.path.isfile(path):
            with open(path, "r", encoding="utf-8") as f:
                manifest = json.load(f)
        self._manifests[directory] = manifest
        return manifest

    def resolve_sync(self, package: str, file_path: str) -> Optional[Dict[str, Any]]:
        current = os.path.dirname(os.path.abspath(file_path))
        for _ in range(self.max_depth):
            try:
                manifest = self._load_manifest(current)
            except (OSError, ValueError) as e:
                raise ResolutionError(package, e) from e
            if manifest:
                deps = manifest.get("dependencies") or {}
                dev_deps = manifest.get("devDependencies") or {}
                version = deps.get(package) or dev_deps.get(package)
                if version:
                    return {
                        "name": package,
                        "version": str(version).lstrip("^~"),
                        "manager": detect_package_manager(current),
                        "is_dev_dependency": package in dev_deps,
                    }
            parent = os.path.dirname(current)
            if parent == current:
                break
            current = parent
        logger.debug("package %s not listed in any package.json above %s", package, file_path)
        return None

    async def resolve(self, package: str, file_path: str) -> Optional[Dict[str, Any]]:
        return await asyncio.to_thread(self.resolve_sync, package, file_path)
