import json
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping

from entitytraverse.errors import ConfigError


@dataclass(frozen=True)
class FilterPipelineConfig:
    """Stage toggles for ``FilterPipeline``.

    Invalid combinations raise ``ConfigError`` on construction, so a bad
    config never reaches the first stage.
    """

    skip_local_variables: bool = True
    skip_primitive_types: bool = True
    skip_asset_imports: bool = True
    skip_private_members: bool = True
    merge_identical_entities: bool = True
    merge_imports_by_source: bool = False
    normalize_path_separators: bool = True
    resolve_package_info: bool = True
    infer_relationships: bool = True
    calculate_confidence: bool = True
    extract_documentation: bool = False

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, bool):
                raise ConfigError(f"{f.name} must be a boolean, got {type(value).__name__}: {value!r}")
        if self.merge_imports_by_source and not self.merge_identical_entities:
            raise ConfigError("merge_imports_by_source requires merge_identical_entities")

    @classmethod
    def field_names(cls):
        return [f.name for f in fields(cls)]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FilterPipelineConfig":
        if not isinstance(data, Mapping):
            raise ConfigError(f"pipeline config must be a mapping, got {type(data).__name__}")
        known = set(cls.field_names())
        unknown = sorted(k for k in data if k not in known)
        if unknown:
            raise ConfigError(f"unknown pipeline config keys: {', '.join(unknown)}")
        return cls(**dict(data))

    @classmethod
    def from_file(cls, path: str) -> "FilterPipelineConfig":
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"cannot read pipeline config {path}: {e}") from e
        return cls.from_dict(data)

    def with_overrides(self, **overrides) -> "FilterPipelineConfig":
        return self.from_dict({**self.to_dict(), **overrides})

    def to_dict(self) -> Dict[str, bool]:
        return {name: getattr(self, name) for name in self.field_names()}
