"""End-to-end tests of the build workflow and its entry points."""

import asyncio
import json
from datetime import date

import pytest

from unitybuild import cli
from unitybuild.build.model import ReportResult
from unitybuild.core.errors import (
    ConfigError,
    MissingArgumentError,
    UnsupportedPlatformError,
)
from unitybuild.workflow.graph import run_build


def today_suffix():
    today = date.today()
    return f"{today.day}.{today.month}.{today.year}"


def write_settings(root, platform="AndroidRelease", build_path="out"):
    root.mkdir(parents=True, exist_ok=True)
    (root / "settings.json").write_text(json.dumps({
        "platform": platform,
        "keystore_password": "x",
        "build_path": build_path,
    }))


def test_release_build_end_to_end(unity_project, state_factory, fake_pipeline):
    root = unity_project / "Telebuild" / "run"
    write_settings(root)
    state = state_factory(unity_project)
    state.runtime.build.pipeline = fake_pipeline

    exit_code = asyncio.run(run_build(state, "Telebuild/run"))

    name = f"MyGame.1.2.10.{today_suffix()}.apk"
    assert exit_code == 0
    assert json.loads((root / "output.json").read_text()) == {
        "platform": "AndroidRelease",
        "build_path": f"out/{name}",
        "exit_code": 0,
    }

    call = fake_pipeline.calls[0]
    assert call["scenes"] == ["a.scene", "b.scene"]
    assert call["output_path"] == root.resolve() / "out" / name
    assert call["toolchain"].keystore_pass == "x"
    assert call["toolchain"].keyalias_pass == "x"
    assert call["toolchain"].development is False


def test_failed_build_still_writes_result(
    unity_project, state_factory, pipeline_factory
):
    root = unity_project / "root"
    write_settings(root, platform="AndroidDevelopment")
    state = state_factory(unity_project)
    state.runtime.build.pipeline = pipeline_factory(ReportResult.FAILED)

    exit_code = asyncio.run(run_build(state, "root"))

    assert exit_code == 1
    output = json.loads((root / "output.json").read_text())
    assert output["exit_code"] == 1
    assert output["platform"] == "AndroidDevelopment"
    assert state.runtime.build.toolchain.development is True


def test_unknown_platform_fails_at_load(
    unity_project, state_factory, fake_pipeline
):
    root = unity_project / "root"
    write_settings(root, platform="WebGL")
    state = state_factory(unity_project)
    state.runtime.build.pipeline = fake_pipeline

    with pytest.raises(ConfigError):
        asyncio.run(run_build(state, "root"))

    assert fake_pipeline.calls == []
    assert not (root / "output.json").exists()


def test_missing_settings_fails_before_build(
    unity_project, state_factory, fake_pipeline
):
    state = state_factory(unity_project)
    state.runtime.build.pipeline = fake_pipeline

    with pytest.raises(ConfigError):
        asyncio.run(run_build(state, "nowhere"))

    assert fake_pipeline.calls == []


def test_unsupported_platform_writes_no_result(
    unity_project, state_factory, fake_pipeline, monkeypatch
):
    """A platform with no driver handler aborts without output.json."""
    from unitybuild.build.android import AndroidBuild

    root = unity_project / "root"
    write_settings(root)
    state = state_factory(unity_project)
    state.runtime.build.pipeline = fake_pipeline
    monkeypatch.setattr(AndroidBuild, "variants", property(lambda self: {}))

    with pytest.raises(UnsupportedPlatformError):
        asyncio.run(run_build(state, "root"))

    assert not (root / "output.json").exists()


@pytest.mark.parametrize(
    "argv, expected",
    [
        (["unity", "-batchmode", "-teleroot", "Telebuild/x"], "Telebuild/x"),
        (["-teleroot", "a", "-quit"], "a"),
    ],
)
def test_parse_teleroot(argv, expected):
    assert cli.parse_teleroot(argv) == expected


@pytest.mark.parametrize(
    "argv", [["unity", "-batchmode"], ["unity", "-teleroot"], []]
)
def test_parse_teleroot_missing(argv):
    with pytest.raises(MissingArgumentError):
        cli.parse_teleroot(argv)


def test_run_without_teleroot_touches_nothing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    def fail(*args, **kwargs):
        raise AssertionError("configuration must not be loaded")

    monkeypatch.setattr(cli, "State", fail)

    with pytest.raises(SystemExit) as exc:
        cli.run(["unity", "-batchmode", "-quit"])

    assert exc.value.code != 0
    assert list(tmp_path.iterdir()) == []


def test_run_exits_with_result_code(
    unity_project, tmp_path, monkeypatch, pipeline_factory
):
    root = unity_project / "Telebuild" / "run"
    write_settings(root)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("UNITYBUILD_CONFIG__PROJECT__PATH", str(unity_project))
    monkeypatch.setenv("UNITYBUILD_CONFIG__LOG_ROOT", str(tmp_path / "logs"))
    pipeline = pipeline_factory(ReportResult.CANCELLED)
    monkeypatch.setattr(
        "unitybuild.workflow.nodes.dispatch.create_pipeline",
        lambda state: pipeline,
    )

    with pytest.raises(SystemExit) as exc:
        cli.run(["unity", "-batchmode", "-teleroot", "Telebuild/run"])

    assert exc.value.code == 1
    assert json.loads((root / "output.json").read_text())["exit_code"] == 1


def test_run_reports_fatal_error_as_nonzero(
    unity_project, tmp_path, monkeypatch
):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("UNITYBUILD_CONFIG__PROJECT__PATH", str(unity_project))
    monkeypatch.setenv("UNITYBUILD_CONFIG__LOG_ROOT", str(tmp_path / "logs"))

    with pytest.raises(SystemExit) as exc:
        cli.run(["-teleroot", "missing-root"])

    assert exc.value.code == 1
    assert not (unity_project / "missing-root" / "output.json").exists()
