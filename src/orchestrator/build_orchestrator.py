"""
Build Orchestrator: 진입점

인자 해석 → 검증(로컬 빌드 준비) → 명령 해석 → 단계 실행 순으로 진행하고
첫 실패에서 non-zero 종료 코드를 반환
"""
import sys
from enum import Enum
from pathlib import Path
from typing import Callable, Sequence, TextIO

from src.core.config import Config
from src.core.exceptions import (
    BaseError,
    BootstrapError,
    ConfigError,
    InvalidParameterError,
    UnknownCommandError,
)
from src.core.logger import get_logger, setup_logger_from_config
from src.core.parameters import ParameterSet, parse_arguments, resolve_parameters
from src.runner.actions import BuildActions, ProjectLayout
from src.runner.bootstrap import ensure_nuget_cli
from src.runner.process import ProcessInvoker
from src.runner.registry import CommandRegistry
from src.runner.step import CommandResult, StepExecutor


class OrchestratorState(Enum):
    """오케스트레이터 상태"""
    PARSING_ARGS = "parsing_args"
    VALIDATING = "validating"
    RESOLVING = "resolving"
    EXECUTING = "executing"
    DONE = "done"
    FAILED = "failed"


class ExitCode:
    SUCCESS = 0
    STEP_FAILED = 1
    INVALID_INVOCATION = 2
    INTERRUPTED = 130


InvokerFactory = Callable[[dict[str, str], float | None], ProcessInvoker]


class BuildOrchestrator:
    """
    빌드 오케스트레이터

    사용법:
        orchestrator = BuildOrchestrator()
        exit_code = orchestrator.run(["BuildAndPublish", "--configuration", "Release"])

        orchestrator.state     # OrchestratorState.DONE
        orchestrator.result    # CommandResult
    """

    def __init__(
        self,
        config: Config | None = None,
        invoker_factory: InvokerFactory | None = None,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ):
        self.logger = get_logger(self.__class__.__name__)
        self.config = config
        self.invoker_factory = invoker_factory or (lambda tools, timeout: ProcessInvoker(tools, timeout))
        self.out = out or sys.stdout
        self.err = err or sys.stderr

        self.state = OrchestratorState.PARSING_ARGS
        self.history: list[OrchestratorState] = [self.state]
        self.params: ParameterSet | None = None
        self.result: CommandResult | None = None

    def _transition(self, state: OrchestratorState) -> None:
        self.logger.debug(f"{self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    def _fail(self, error: BaseException | str, exit_code: int) -> int:
        self._transition(OrchestratorState.FAILED)
        print(f"error: {error}", file=self.err)
        return exit_code

    def run(self, argv: Sequence[str]) -> int:
        """
        1회 호출 실행

        Args:
            argv: 프로그램 이름을 제외한 CLI 인자

        Returns:
            프로세스 종료 코드
        """
        # ===== ParsingArgs =====
        try:
            args = parse_arguments(argv)
            config = self._load_config(args.config_dir)
            params, options = resolve_parameters(args, self._defaults(config))
        except (InvalidParameterError, ConfigError) as e:
            return self._fail(e, ExitCode.INVALID_INVOCATION)

        setup_logger_from_config(options.log_level)
        self.params = params
        self.logger.debug(f"parameters: {params.to_dict()}")

        invoker = self.invoker_factory(
            {str(k): str(v) for k, v in config.get_section("tools").items()},
            params.timeout,
        )

        # ===== Validating =====
        self._transition(OrchestratorState.VALIDATING)
        if params.local_build:
            try:
                nuget = ensure_nuget_cli(
                    config.get("bootstrap.tools_dir", ".tools"),
                    config.get_required("bootstrap.nuget_url"),
                    dry_run=params.dry_run,
                    timeout=config.get("bootstrap.download_timeout", 60),
                )
            except BootstrapError as e:
                return self._fail(e, ExitCode.STEP_FAILED)
            except ConfigError as e:
                return self._fail(e, ExitCode.INVALID_INVOCATION)
            invoker.register_tool("nuget", nuget)

        # ===== Resolving =====
        self._transition(OrchestratorState.RESOLVING)
        try:
            registry = CommandRegistry(BuildActions(params, invoker, ProjectLayout.from_config(config)))
            if options.list_commands:
                self._print_commands(registry)
                self._transition(OrchestratorState.DONE)
                return ExitCode.SUCCESS
            command = registry.resolve_name(params.command)
            steps = registry.lookup(command.value)
        except (UnknownCommandError, ConfigError) as e:
            return self._fail(e, ExitCode.INVALID_INVOCATION)

        # ===== Executing =====
        self._transition(OrchestratorState.EXECUTING)
        self.logger.info(
            f"{command.value} 시작 ({params.configuration.value}, version={params.version}"
            + (", dry-run" if params.dry_run else "") + ")"
        )
        executor = StepExecutor(dry_run=params.dry_run)
        try:
            self.result = executor.run(command.value, steps)
        except KeyboardInterrupt:
            return self._fail("interrupted", ExitCode.INTERRUPTED)

        print(self.result.format_report(), file=self.out)

        if not self.result.success:
            return self._fail(self.result.error, ExitCode.STEP_FAILED)

        self._transition(OrchestratorState.DONE)
        return ExitCode.SUCCESS

    def _load_config(self, config_dir: str | None) -> Config:
        if config_dir:
            # --config-dir는 주입된 설정보다 우선
            if self.config is None or self.config.config_dir != Path(config_dir):
                Config.reset()
                self.config = Config(config_dir=Path(config_dir))
        elif self.config is None:
            self.config = Config()
        return self.config

    @staticmethod
    def _defaults(config: Config) -> dict:
        defaults = dict(config.get_section("defaults"))
        defaults.setdefault("timeout", config.get("process.timeout"))
        return defaults

    def _print_commands(self, registry: CommandRegistry) -> None:
        for name, steps in registry.commands().items():
            print(f"{name:<16} {' -> '.join(steps)}", file=self.out)


def main(argv: Sequence[str] | None = None) -> int:
    """콘솔 스크립트 진입점"""
    try:
        return BuildOrchestrator().run(sys.argv[1:] if argv is None else argv)
    except BaseError as e:
        print(f"error: {e}", file=sys.stderr)
        return ExitCode.STEP_FAILED
    except KeyboardInterrupt:
        print("error: interrupted", file=sys.stderr)
        return ExitCode.INTERRUPTED
