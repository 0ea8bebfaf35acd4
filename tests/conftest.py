"""Pytest configuration and fixtures for unitybuild tests."""

import sys
import tempfile
from pathlib import Path

import pytest

from unitybuild.build.model import BuildReport, ReportResult
from unitybuild.core.log import ConsoleSink, setup_logger

EDITOR_BUILD_SETTINGS = """\
%YAML 1.1
%TAG !u! tag:unity3d.com,2011:
--- !u!1045 &1
EditorBuildSettings:
  m_ObjectHideFlags: 0
  serializedVersion: 2
  m_Scenes:
  - enabled: 1
    path: a.scene
    guid: 2cda990e2423bbf4892e6590ba056729
  - enabled: 0
    path: disabled.scene
    guid: 9fc0d4010bbf28b4594072e72b8655ab
  - enabled: 1
    path: b.scene
    guid: 8e7d0b9d4b5e2c84d9f1e3d5e0b1c2a3
  m_configObjects: {}
"""

PROJECT_SETTINGS = """\
%YAML 1.1
%TAG !u! tag:unity3d.com,2011:
--- !u!129 &1
PlayerSettings:
  m_ObjectHideFlags: 0
  serializedVersion: 26
  companyName: DefaultCompany
  productName: {product_name}
  bundleVersion: {version}
  AndroidBundleVersionCode: 1
"""


def make_unity_project(
    path: Path, product_name: str = "My Game", version: str = "1.2.9"
) -> Path:
    """Create a minimal Unity project layout under path."""
    (path / "Assets").mkdir(parents=True, exist_ok=True)
    settings_dir = path / "ProjectSettings"
    settings_dir.mkdir(exist_ok=True)
    (settings_dir / "EditorBuildSettings.asset").write_text(
        EDITOR_BUILD_SETTINGS
    )
    (settings_dir / "ProjectSettings.asset").write_text(
        PROJECT_SETTINGS.format(product_name=product_name, version=version)
    )
    return path


class FakePipeline:
    """Pipeline that records calls and returns a fixed outcome."""

    def __init__(self, result: ReportResult = ReportResult.SUCCEEDED):
        self.result = result
        self.calls = []

    def build_player(self, scenes, output_path, target, options, toolchain):
        self.calls.append({
            "scenes": list(scenes),
            "output_path": output_path,
            "target": target,
            "options": options,
            "toolchain": toolchain.model_copy(),
        })
        return BuildReport(result=self.result, output_path=output_path)


@pytest.fixture(autouse=True, scope="session")
def configure_logging():
    """Console-only logging for test runs; nothing leaves the machine."""
    setup_logger(
        log_root=Path(tempfile.gettempdir()) / "unitybuild-tests",
        run_name="test",
        console=ConsoleSink(level="debug"),
    )


@pytest.fixture
def unity_project(tmp_path):
    """A Unity project with scenes a, disabled, b and version 1.2.9."""
    return make_unity_project(tmp_path / "project")


@pytest.fixture
def project_factory(tmp_path):
    """Create Unity projects with a given product name and version."""
    def factory(product_name="My Game", version="1.2.9", name="project"):
        return make_unity_project(tmp_path / name, product_name, version)
    return factory


@pytest.fixture
def fake_pipeline():
    return FakePipeline()


@pytest.fixture
def pipeline_factory():
    """Make FakePipelines reporting a chosen outcome."""
    return FakePipeline


@pytest.fixture
def state_factory(monkeypatch, tmp_path):
    """Build a State for a project without CLI or user config leaking in.

    Runs from tmp_path so no ./unitybuild.yaml or .env is picked up.
    """
    from unitybuild.core.config import State

    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(sys, "argv", ["unitybuild"])

    def factory(project_path: Path, **config):
        config.setdefault("project", {"path": str(project_path)})
        config.setdefault("log_root", str(tmp_path / "logs"))
        config.setdefault("logger", {"console": {"level": "debug"}})
        return State(config=config)

    return factory
