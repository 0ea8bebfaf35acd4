"""Read scene lists and application identity from a Unity project."""

from __future__ import annotations

from pathlib import Path

import yaml

from unitybuild.build.model import AppIdentity, SceneEntry
from unitybuild.core.errors import ConfigError
from unitybuild.core.log import logger

EDITOR_BUILD_SETTINGS = Path("ProjectSettings") / "EditorBuildSettings.asset"
PROJECT_SETTINGS = Path("ProjectSettings") / "ProjectSettings.asset"


def load_asset(path: Path, section: str) -> dict:
    """Return the named top-level section of a Unity YAML asset.

    Unity serializes assets as YAML 1.1 with a ``%TAG !u!`` directive
    and ``!u!<classID>`` tags on every document. BaseLoader ignores the
    tags and keeps every scalar a string, so versions such as "1.10"
    are not turned into floats.

    Raises:
        ConfigError: If the file is missing, is not YAML or lacks the
            section
    """
    try:
        with open(path, encoding="utf-8") as f:
            documents = list(yaml.load_all(f, Loader=yaml.BaseLoader))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    for document in documents:
        if isinstance(document, dict) and isinstance(
            document.get(section), dict
        ):
            return document[section]
    raise ConfigError(f"{path} has no {section} section")


class UnityProject:
    """A Unity project on disk.

    Provides the two collaborators a build needs from the project:
    the ordered scene list and the product name/version.
    """

    def __init__(self, path: Path, assets_dir: str = "Assets"):
        self.path = Path(path)
        self.assets_dir = assets_dir

    @property
    def data_path(self) -> Path:
        """Absolute path of the asset directory."""
        return (self.path / self.assets_dir).resolve()

    def resolve_root(self, teleroot_local: str) -> Path:
        """Resolve a caller-relative root against the asset dir's parent."""
        return (self.data_path.parent / teleroot_local).resolve()

    def scenes(self) -> list[SceneEntry]:
        """All scenes from the build settings, in declared order."""
        settings = load_asset(
            self.path / EDITOR_BUILD_SETTINGS, "EditorBuildSettings"
        )
        entries = settings.get("m_Scenes") or []
        if not isinstance(entries, list):
            raise ConfigError("EditorBuildSettings.m_Scenes is not a list")

        scenes = []
        for entry in entries:
            if not isinstance(entry, dict) or "path" not in entry:
                raise ConfigError(f"Malformed scene entry: {entry!r}")
            scenes.append(SceneEntry(
                path=entry["path"],
                enabled=entry.get("enabled", "0") == "1",
            ))
        return scenes

    def enabled_scenes(self) -> list[str]:
        return [scene.path for scene in self.scenes() if scene.enabled]

    def identity(self) -> AppIdentity:
        """Product name and version from the player settings."""
        player = load_asset(self.path / PROJECT_SETTINGS, "PlayerSettings")
        try:
            identity = AppIdentity(
                product_name=player["productName"],
                version=player["bundleVersion"],
            )
        except KeyError as e:
            raise ConfigError(f"PlayerSettings has no {e}") from e
        logger.debug(
            "Loaded application identity",
            product_name=identity.product_name,
            version=identity.version,
        )
        return identity
