"""Run configuration: CLI flags merged with an optional YAML file."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

import yaml

from .errors import ConfigError
from .models import TagFilter

DEFAULT_CONFIG_NAME = ".obsidian-copy.yml"

CONFIG_KEYS = {"include", "exclude", "tag_field", "ignore", "prune_excluded"}


@dataclass
class CopyConfig:
    """Everything one run needs."""

    vault: Path
    destination: Path
    include_tags: list[str] = field(default_factory=list)
    exclude_tags: list[str] = field(default_factory=list)
    tag_field: str = "tags"
    ignore: list[str] = field(default_factory=list)
    prune_excluded: bool = False

    @property
    def tag_filter(self) -> TagFilter:
        return TagFilter.from_lists(self.include_tags, self.exclude_tags)


def split_tags(values: Iterable[str] | str | None) -> list[str]:
    """Flatten repeated and comma-delimited tag values, dropping a leading `#`.

    Order is preserved and duplicates removed.
    """
    if values is None:
        return []
    if isinstance(values, str):
        values = [values]
    result: list[str] = []
    for value in values:
        for part in str(value).split(","):
            tag = part.strip().removeprefix("#")
            if tag and tag not in result:
                result.append(tag)
    return result


def _as_list(data: dict[str, Any], key: str, path: Path) -> list[str]:
    value = data.get(key)
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, list) and all(isinstance(v, (str, int, float)) for v in value):
        return [str(v) for v in value]
    raise ConfigError(f"{path}: '{key}' must be a string or a list of strings")


def load_config_file(path: Path) -> dict[str, Any]:
    """Read and validate a YAML config file.

    Raises:
        ConfigError: if the file can't be read or has the wrong shape
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"failed to read config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"failed to parse config {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")

    unknown = set(data) - CONFIG_KEYS
    if unknown:
        raise ConfigError(f"{path}: unknown keys: {', '.join(sorted(unknown))}")

    result: dict[str, Any] = {
        "include": split_tags(_as_list(data, "include", path)),
        "exclude": split_tags(_as_list(data, "exclude", path)),
        "ignore": _as_list(data, "ignore", path),
    }
    if "tag_field" in data:
        if not isinstance(data["tag_field"], str) or not data["tag_field"].strip():
            raise ConfigError(f"{path}: 'tag_field' must be a non-empty string")
        result["tag_field"] = data["tag_field"].strip()
    if "prune_excluded" in data:
        if not isinstance(data["prune_excluded"], bool):
            raise ConfigError(f"{path}: 'prune_excluded' must be true or false")
        result["prune_excluded"] = data["prune_excluded"]
    return result


def resolve_config(
    vault: Path,
    destination: Path,
    include_tags: Iterable[str] = (),
    exclude_tags: Iterable[str] = (),
    config_path: Path | None = None,
    tag_field: str | None = None,
    prune_excluded: bool | None = None,
) -> CopyConfig:
    """Build a `CopyConfig` from CLI values and a config file.

    The file is `config_path` if given, else `<vault>/.obsidian-copy.yml` when
    present. CLI tags extend the file's tags; other CLI values override it.
    """
    if config_path is None:
        default = vault / DEFAULT_CONFIG_NAME
        config_path = default if default.is_file() else None
    file_data = load_config_file(config_path) if config_path else {}

    config = CopyConfig(
        vault=vault,
        destination=destination,
        include_tags=split_tags([*file_data.get("include", []), *include_tags]),
        exclude_tags=split_tags([*file_data.get("exclude", []), *exclude_tags]),
        tag_field=file_data.get("tag_field", "tags"),
        ignore=list(file_data.get("ignore", [])),
        prune_excluded=file_data.get("prune_excluded", False),
    )
    if tag_field:
        config.tag_field = tag_field
    if prune_excluded is not None:
        config.prune_excluded = prune_excluded
    return config
