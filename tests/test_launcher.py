"""Tests for the caller-side launcher using a fake editor script."""

import json
import platform
import stat

import pytest

from unitybuild.build.launcher import Launcher
from unitybuild.build.model import BuildPlatform
from unitybuild.core.errors import ResultError

pytestmark = pytest.mark.skipif(
    platform.system() == "Windows", reason="POSIX shell script editor"
)

FAKE_EDITOR = """\
#!/bin/sh
# Stand-in for the editor: find -teleroot, check settings.json, write
# output.json the way the build entry point would.
while [ $# -gt 0 ]; do
  if [ "$1" = "-teleroot" ]; then root="$2"; fi
  shift
done
echo "editor building in $root"
grep -q '"platform":"{platform}"' "$root/settings.json" || exit 3
printf '{output}' > "$root/output.json"
exit {exit_code}
"""

BROKEN_EDITOR = """\
#!/bin/sh
echo "crashed before writing a result"
exit 1
"""


def make_editor(tmp_path, script):
    path = tmp_path / "fake-unity"
    path.write_text(script)
    path.chmod(path.stat().st_mode | stat.S_IEXEC)
    return path


def fake_editor(tmp_path, platform_name, build_path, exit_code=0):
    output = json.dumps({
        "platform": platform_name,
        "build_path": build_path,
        "exit_code": exit_code,
    }, separators=(",", ":"))
    return make_editor(tmp_path, FAKE_EDITOR.format(
        platform=platform_name, output=output, exit_code=exit_code
    ))


def test_launch_round_trip(unity_project, state_factory, tmp_path):
    editor = fake_editor(
        tmp_path,
        "AndroidDevelopment",
        "Builds/Android/Development/MyGame.1.2.10.1.1.2024.apk",
    )
    state = state_factory(
        unity_project,
        launch={
            "bin": str(editor),
            "log_behavior": "file",
            "keystore_password": "secret",
        },
    )

    result = Launcher(state.config).launch(BuildPlatform.ANDROID_DEVELOPMENT)

    assert result.exit_code == 0
    assert result.platform is BuildPlatform.ANDROID_DEVELOPMENT
    assert result.build_path.startswith("Telebuild/")
    assert result.build_path.endswith(
        "/Builds/Android/Development/MyGame.1.2.10.1.1.2024.apk"
    )
    assert "editor building in Telebuild/" in result.log_path.read_text()

    root = unity_project / result.build_path.split("/Builds/")[0]
    settings = json.loads((root / "settings.json").read_text())
    assert settings == {
        "platform": "AndroidDevelopment",
        "keystore_password": "secret",
        "build_path": "Builds/Android/Development",
    }


def test_launch_release_uses_release_path(
    unity_project, state_factory, tmp_path
):
    editor = fake_editor(
        tmp_path, "AndroidRelease", "Builds/Android/Release/x.apk", 1
    )
    state = state_factory(
        unity_project, launch={"bin": str(editor), "log_behavior": "stdout"}
    )

    result = Launcher(state.config).launch(BuildPlatform.ANDROID_RELEASE)

    assert result.exit_code == 1
    assert result.log_path is None


def test_each_launch_gets_its_own_root(unity_project, state_factory):
    launcher = Launcher(state_factory(unity_project).config)

    assert launcher.new_teleroot() != launcher.new_teleroot()


def test_editor_command(unity_project, state_factory):
    state = state_factory(
        unity_project,
        launch={"bin": "/opt/Unity Editor/Unity", "build_entry": "A.B.C"},
    )
    launcher = Launcher(state.config)

    command = launcher.editor_command(launcher.new_teleroot())

    assert command.startswith("'/opt/Unity Editor/Unity' -batchmode -quit")
    assert "-executeMethod A.B.C" in command
    assert "-buildTarget android" in command
    assert "-teleroot Telebuild/" in command


def test_missing_output_is_result_error(unity_project, state_factory, tmp_path):
    editor = make_editor(tmp_path, BROKEN_EDITOR)
    state = state_factory(
        unity_project, launch={"bin": str(editor), "log_behavior": "file"}
    )

    with pytest.raises(ResultError):
        Launcher(state.config).launch()
