"""Layered YAML configuration source."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from platformdirs import user_config_dir
from pydantic_settings import BaseSettings, YamlConfigSettingsSource

DEFAULTS_FILE = Path(__file__).parent.parent / "defaults" / "default.yaml"


class LayeredYamlSettingsSource(YamlConfigSettingsSource):
    """YAML settings source that deep-merges several files.

    Files are merged in this order, later ones winning:
        package defaults < user config < project config (yaml_file)

    Missing files are skipped. Only the package defaults are
    guaranteed to exist.
    """

    def __init__(
        self, settings_cls: type[BaseSettings], yaml_file=None
    ):
        super().__init__(
            settings_cls,
            yaml_file or settings_cls.model_config.get("yaml_file"),
        )

    def _read_files(self, files, *args, **kwargs):  # noqa: ARG002
        files_to_load = [
            DEFAULTS_FILE,
            Path(user_config_dir("unitybuild", appauthor=False))
            / "unitybuild.yaml",
        ]
        if files:
            if isinstance(files, (str, os.PathLike)):
                files = [files]
            files_to_load.extend(Path(f).expanduser() for f in files)

        result = {}
        for file_path in files_to_load:
            if not file_path.is_file():
                continue
            with open(file_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            result = deep_merge(result, data)
        return result


def deep_merge(base: dict, override: dict) -> dict:
    """Return base with override merged in recursively (override wins)."""
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result
