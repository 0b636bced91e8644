from __future__ import annotations

from pathlib import Path

from relflow.core.result import Err, Ok, Result
from relflow.output.console import MockConsole
from relflow.platform.process import ProcessError
from relflow.release.build import CommandBuilder
from relflow.release.model import PublishContext, UploadTarget
from relflow.release.version import Version


class _Runner:
    def __init__(self, fail_on: str | None = None) -> None:
        self.fail_on = fail_on
        self.calls: list[tuple[list[str], Path]] = []

    def __call__(self, argv: list[str], cwd: Path) -> Result[None, ProcessError]:
        self.calls.append((argv, cwd))
        if argv[0] == self.fail_on:
            return Err(ProcessError(command=tuple(argv), returncode=2, stdout="", stderr="boom"))
        return Ok(None)


def _ctx(tmp_path: Path, upload: UploadTarget | None = None) -> PublishContext:
    return PublishContext(
        project_name="app",
        version=Version.parse("1.0.0"),
        work_dir=tmp_path,
        build_command="npm run build",
        target_branch="dev/1.0.0",
        upload=upload,
    )


def test_build_only(tmp_path: Path) -> None:
    runner = _Runner()
    builder = CommandBuilder(console=MockConsole(), runner=runner)

    assert builder.build(_ctx(tmp_path)) == Ok(True)
    assert runner.calls == [(["npm", "run", "build"], tmp_path)]


def test_build_and_upload(tmp_path: Path) -> None:
    (tmp_path / "dist").mkdir()
    runner = _Runner()
    target = UploadTarget(user="deploy", host="10.0.0.5", path="/var/www/app")

    result = CommandBuilder(console=MockConsole(), runner=runner).build(_ctx(tmp_path, target))

    assert result == Ok(True)
    assert runner.calls[1][0] == [
        "scp",
        "-r",
        str(tmp_path / "dist"),
        "deploy@10.0.0.5:/var/www/app",
    ]


def test_build_command_failure(tmp_path: Path) -> None:
    runner = _Runner(fail_on="npm")

    result = CommandBuilder(console=MockConsole(), runner=runner).build(_ctx(tmp_path))

    assert isinstance(result, Err)
    assert result.error.kind == "build_failed"
    assert len(runner.calls) == 1


def test_missing_build_output(tmp_path: Path) -> None:
    runner = _Runner()
    target = UploadTarget(user="deploy", host="h", path="/srv")

    result = CommandBuilder(console=MockConsole(), runner=runner).build(_ctx(tmp_path, target))

    assert isinstance(result, Err)
    assert result.error.kind == "build_failed"
    assert "dist" in result.error.message
    assert len(runner.calls) == 1


def test_upload_failure(tmp_path: Path) -> None:
    (tmp_path / "dist").mkdir()
    runner = _Runner(fail_on="scp")
    target = UploadTarget(user="deploy", host="h", path="/srv")

    result = CommandBuilder(console=MockConsole(), runner=runner).build(_ctx(tmp_path, target))

    assert isinstance(result, Err)
    assert result.error.kind == "remote_failed"
    assert result.error.hint == "deploy@h:/srv"
