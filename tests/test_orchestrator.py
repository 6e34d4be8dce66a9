"""
Orchestrator 테스트

인자 해석 → 검증 → 명령 해석 → 실행 상태 전이와 종료 코드
"""
import io
from unittest.mock import patch

import pytest

from src.orchestrator.build_orchestrator import BuildOrchestrator, ExitCode, OrchestratorState, main
from src.runner.step import StepStatus

S = OrchestratorState


@pytest.fixture
def orchestrator(config, invoker) -> BuildOrchestrator:
    def factory(tools, timeout):
        invoker.tools.update(tools)
        invoker.timeout = timeout
        return invoker

    return BuildOrchestrator(config=config, invoker_factory=factory, out=io.StringIO(), err=io.StringIO())


class TestBuildOrchestrator:
    """BuildOrchestrator 테스트"""

    def test_default_command_is_build(self, orchestrator, invoker):
        exit_code = orchestrator.run([])

        assert exit_code == ExitCode.SUCCESS
        assert orchestrator.state == S.DONE
        assert orchestrator.history == [S.PARSING_ARGS, S.VALIDATING, S.RESOLVING, S.EXECUTING, S.DONE]
        assert [c[1] for c in invoker.calls] == ["clean", "restore", "build"]
        assert "Build: SUCCESS" in orchestrator.out.getvalue()

    def test_build_and_publish(self, orchestrator, invoker, project_root):
        exit_code = orchestrator.run(["BuildAndPublish", "--version", "1.4.0", "--configuration", "Release"])

        assert exit_code == ExitCode.SUCCESS
        assert [c[1] for c in invoker.calls] == ["clean", "restore", "build", "publish"]
        props = (project_root / "src" / "Directory.Build.props").read_text(encoding="utf-8")
        assert "<VersionPrefix>1.4.0</VersionPrefix>" in props
        assert all("Release" in c for c in invoker.calls if c[1] != "restore")

    def test_step_failure_stops_and_exits_non_zero(self, orchestrator, invoker):
        invoker.exit_codes["restore"] = 1

        exit_code = orchestrator.run(["Build"])

        assert exit_code == ExitCode.STEP_FAILED
        assert orchestrator.state == S.FAILED
        assert [c[1] for c in invoker.calls] == ["clean", "restore"]
        statuses = [s.status for s in orchestrator.result.step_results]
        assert statuses == [StepStatus.SUCCESS, StepStatus.FAILED, StepStatus.SKIPPED]
        assert "restore" in orchestrator.err.getvalue()

    def test_unknown_command(self, orchestrator, invoker):
        exit_code = orchestrator.run(["Rebuild"])

        assert exit_code == ExitCode.INVALID_INVOCATION
        assert orchestrator.history[-2:] == [S.RESOLVING, S.FAILED]
        assert S.EXECUTING not in orchestrator.history
        assert invoker.calls == []
        assert "Rebuild" in orchestrator.err.getvalue()

    def test_invalid_configuration(self, orchestrator, invoker):
        """해석 이전에 InvalidParameterError"""
        exit_code = orchestrator.run(["Build", "--configuration", "Profiling"])

        assert exit_code == ExitCode.INVALID_INVOCATION
        assert orchestrator.history == [S.PARSING_ARGS, S.FAILED]
        assert invoker.calls == []
        assert "Profiling" in orchestrator.err.getvalue()

    def test_dry_run_launches_nothing(self, orchestrator, invoker, project_root):
        exit_code = orchestrator.run(["BuildAndPublish", "--dry-run"])

        assert exit_code == ExitCode.SUCCESS
        assert invoker.calls == []
        assert not (project_root / "src" / "Directory.Build.props").exists()
        result = orchestrator.result
        assert [s.step_name for s in result.step_results] == [
            "stamp-assembly-info", "clean", "restore", "compile", "publish",
        ]
        assert all(s.status == StepStatus.WOULD_RUN for s in result.step_results)
        assert "dry-run" in orchestrator.out.getvalue()

    def test_list_commands(self, orchestrator, invoker):
        exit_code = orchestrator.run(["--list"])

        assert exit_code == ExitCode.SUCCESS
        output = orchestrator.out.getvalue()
        assert "BuildAndPublish" in output
        assert "stamp-assembly-info -> clean -> restore -> compile -> publish" in output
        assert invoker.calls == []

    def test_timeout_passed_to_invoker(self, orchestrator, invoker):
        orchestrator.run(["Clean", "--timeout", "15"])

        assert invoker.timeout == 15.0
        assert orchestrator.params.timeout == 15.0

    def test_tool_map_from_config(self, orchestrator, invoker):
        orchestrator.run(["Clean"])

        assert invoker.tools["dotnet"] == "dotnet"
        assert invoker.tools["docker"] == "docker"

    @patch("src.orchestrator.build_orchestrator.ensure_nuget_cli")
    def test_local_build_registers_nuget(self, mock_ensure, orchestrator, invoker, tmp_path):
        mock_ensure.return_value = tmp_path / "nuget.exe"

        exit_code = orchestrator.run(["Clean", "--local-build"])

        assert exit_code == ExitCode.SUCCESS
        mock_ensure.assert_called_once()
        assert invoker.tools["nuget"] == str(tmp_path / "nuget.exe")

    @patch("src.orchestrator.build_orchestrator.ensure_nuget_cli")
    def test_bootstrap_skipped_without_local_build(self, mock_ensure, orchestrator):
        orchestrator.run(["Clean"])

        mock_ensure.assert_not_called()

    @patch("src.orchestrator.build_orchestrator.ensure_nuget_cli")
    def test_bootstrap_failure(self, mock_ensure, orchestrator, invoker):
        from src.core.exceptions import BootstrapError

        mock_ensure.side_effect = BootstrapError("download failed")

        exit_code = orchestrator.run(["Build", "--local-build"])

        assert exit_code == ExitCode.STEP_FAILED
        assert orchestrator.history == [S.PARSING_ARGS, S.VALIDATING, S.FAILED]
        assert invoker.calls == []

    def test_local_build_config_error_is_invalid_invocation(self, tmp_path, project_root, invoker):
        """Validating 단계 설정 오류는 종료 코드 2"""
        from conftest import write_settings
        from src.core.config import Config

        write_settings(tmp_path / "cfg", project_root, bootstrap={"nuget_url": None})
        orchestrator = BuildOrchestrator(
            config=Config(config_dir=tmp_path / "cfg"),
            invoker_factory=lambda tools, timeout: invoker,
            out=io.StringIO(),
            err=io.StringIO(),
        )

        exit_code = orchestrator.run(["Clean", "--local-build"])

        assert exit_code == ExitCode.INVALID_INVOCATION
        assert orchestrator.history == [S.PARSING_ARGS, S.VALIDATING, S.FAILED]
        assert "bootstrap.nuget_url" in orchestrator.err.getvalue()
        assert invoker.calls == []

    def test_config_dir_overrides_injected_config(self, orchestrator, invoker, tmp_path, project_root):
        """--config-dir 지정 시 주입된 설정 대신 해당 디렉토리 사용"""
        from conftest import write_settings

        write_settings(tmp_path / "other", project_root, docker={"image_name": "other-app"})

        exit_code = orchestrator.run(["DockerRun", "--config-dir", str(tmp_path / "other")])

        assert exit_code == ExitCode.SUCCESS
        assert orchestrator.config.config_dir == tmp_path / "other"
        assert invoker.calls[0][-1] == "local/other-app"

    def test_interrupt_during_execution(self, orchestrator, invoker):
        def interrupted(argv, cwd=None, timeout=None):
            raise KeyboardInterrupt

        invoker.run = interrupted

        exit_code = orchestrator.run(["Clean"])

        assert exit_code == ExitCode.INTERRUPTED
        assert orchestrator.state == S.FAILED

    def test_missing_config_dir(self, invoker, tmp_path):
        orchestrator = BuildOrchestrator(err=io.StringIO())

        exit_code = orchestrator.run(["--config-dir", str(tmp_path / "nowhere")])

        assert exit_code == ExitCode.INVALID_INVOCATION
        assert "settings.yaml" in orchestrator.err.getvalue()


class TestMain:
    """콘솔 진입점 테스트"""

    def test_main_with_config_dir(self, tmp_path, project_root, capsys):
        from conftest import write_settings

        write_settings(tmp_path / "cfg", project_root)

        exit_code = main(["--config-dir", str(tmp_path / "cfg"), "DockerRun", "--dry-run"])

        assert exit_code == 0
        assert "docker-run" in capsys.readouterr().out


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
