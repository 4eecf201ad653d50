import pytest
from pathlib import Path

from qrbuild import main as main_module
from qrbuild.main import build_parser, main

from conftest import read_invocations


class TestMain:
    def test_parser_defaults(self):
        args = build_parser().parse_args([])

        assert not args.publish
        assert not args.fresh
        assert args.project_dir is None

    def test_parser_publish(self):
        args = build_parser().parse_args(["--publish", "--project-dir", "sample-app"])

        assert args.publish
        assert args.project_dir == Path("sample-app")

    def test_successful_build_exits_zero(self, android_project: Path, fake_java):
        with pytest.raises(SystemExit) as exc_info:
            main(["--project-dir", str(android_project)])

        assert exc_info.value.code == 0
        assert read_invocations(android_project)[0] == "clean"

    def test_failed_build_exits_non_zero(self, android_project: Path, fake_java, monkeypatch):
        monkeypatch.setenv("FAKE_GRADLE_FAIL", "assembleDebug")

        with pytest.raises(SystemExit) as exc_info:
            main(["--project-dir", str(android_project)])

        assert exc_info.value.code == 1
        assert read_invocations(android_project)[-1] == "assembleDebug"

    def test_missing_wrapper_exits_non_zero(self, temp_dir: Path, fake_java):
        with pytest.raises(SystemExit) as exc_info:
            main(["--project-dir", str(temp_dir)])

        assert exc_info.value.code == 1

    def test_project_dir_from_env(self, android_project: Path, fake_java, monkeypatch):
        monkeypatch.setenv("QRBUILD_PROJECT_DIR", str(android_project))

        with pytest.raises(SystemExit) as exc_info:
            main(["--publish"])

        assert exc_info.value.code == 0
        assert read_invocations(android_project)[-1].startswith(":qrcode-sdk:publish")

    def test_keyboard_interrupt_exits_one(self, android_project: Path, monkeypatch, capsys):
        async def interrupted(**kwargs):
            raise KeyboardInterrupt

        monkeypatch.setattr(main_module, "run_pipeline", interrupted)

        with pytest.raises(SystemExit) as exc_info:
            main(["--project-dir", str(android_project)])

        assert exc_info.value.code == 1
        assert "Build cancelled by user" in capsys.readouterr().out
