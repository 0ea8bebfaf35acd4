"""settings.json and output.json in the root directory."""

import os
from pathlib import Path

from pydantic import ValidationError

from unitybuild.build.model import BuildSettings, UnityOutput
from unitybuild.core.errors import ConfigError, ResultError

SETTINGS_FILE = "settings.json"
OUTPUT_FILE = "output.json"


def load_settings(root_dir: Path) -> BuildSettings:
    """Read settings.json from root_dir.

    Raises:
        ConfigError: If the file is missing, unreadable or does not
            match the BuildSettings shape
    """
    path = Path(root_dir) / SETTINGS_FILE
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    try:
        return BuildSettings.model_validate_json(text)
    except ValidationError as e:
        raise ConfigError(f"Invalid {path}: {e}") from e


def write_settings(root_dir: Path, settings: BuildSettings) -> Path:
    """Write settings.json into root_dir, creating the directory."""
    root_dir = Path(root_dir)
    root_dir.mkdir(parents=True, exist_ok=True)
    path = root_dir / SETTINGS_FILE
    path.write_text(settings.model_dump_json(), encoding="utf-8")
    return path


def write_result(root_dir: Path, output: UnityOutput) -> Path:
    """Write output.json into root_dir, replacing any previous one.

    The file is fsynced before returning so the process can exit with
    the result on disk. OSError propagates if root_dir is not writable.
    """
    path = Path(root_dir) / OUTPUT_FILE
    with open(path, "w", encoding="utf-8") as f:
        f.write(output.model_dump_json())
        f.flush()
        os.fsync(f.fileno())
    return path


def read_result(root_dir: Path) -> UnityOutput:
    """Read output.json back from root_dir.

    Raises:
        ResultError: If the file is missing or malformed
    """
    path = Path(root_dir) / OUTPUT_FILE
    try:
        return UnityOutput.model_validate_json(
            path.read_text(encoding="utf-8")
        )
    except (OSError, UnicodeDecodeError, ValidationError) as e:
        raise ResultError(f"Cannot load {path}: {e}") from e
