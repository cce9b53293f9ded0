from typing import Optional


class EntityTraverseError(Exception):
    pass


class ParseError(EntityTraverseError):
    """Source could not be turned into a usable syntax tree."""


class ConfigError(EntityTraverseError):
    """Invalid or contradictory pipeline configuration."""


class ResolutionError(EntityTraverseError):
    """An enrichment lookup (package metadata, ...) failed for one entity."""

    def __init__(self, target: str, cause: Optional[BaseException] = None):
        self.target = target
        self.cause = cause
        msg = f"could not resolve {target!r}"
        if cause is not None:
            msg += f": {cause}"
        super().__init__(msg)


class ExtractionNodeError(EntityTraverseError):
    """A single extractor failed on an unexpected node shape."""

    def __init__(self, node_type: str, line: int, extractor: str, cause: BaseException):
        self.node_type = node_type
        self.line = line
        self.extractor = extractor
        self.cause = cause
        super().__init__(
            f"{extractor} failed on {node_type} at line {line}: {type(cause).__name__}: {cause}"
        )
