"""
Command Registry: 명령 이름 → 단계 목록

복합 명령은 다른 명령의 단계 목록을 이어 붙여 구성한다 (단계 본문 중복 없음).
"""
from src.core.exceptions import UnknownCommandError
from src.core.logger import get_logger
from src.core.parameters import CommandName
from src.runner.actions import BuildActions
from src.runner.step import Step


class CommandRegistry:
    """
    명령 레지스트리

    사용법:
        registry = CommandRegistry(actions)

        steps = registry.lookup("BuildAndPublish")
        # [stamp-assembly-info, clean, restore, compile, publish]
    """

    def __init__(self, actions: BuildActions):
        self.logger = get_logger(self.__class__.__name__)
        self.actions = actions

        a = actions
        self._clean = Step.of("clean", a.clean, "dotnet clean")
        self._restore = Step.of("restore", a.restore, "dotnet restore")
        self._compile = Step.of("compile", a.compile, "dotnet build --no-restore")
        self._stamp = Step.of("stamp-assembly-info", a.stamp_assembly_info, "Directory.Build.props 재생성")
        self._publish = Step.of("publish", a.publish, "dotnet publish")
        self._unit_tests = Step.of("unit-tests", a.unit_tests, "단위 테스트 어셈블리 실행")
        self._e2e_tests = Step.of("e2e-tests", a.e2e_tests, "E2E 테스트 어셈블리 실행")
        self._docker_build = Step.of("docker-build", a.docker_build, "docker build")
        self._docker_run = Step.of("docker-run", a.docker_run, "docker run")

        build = [self._clean, self._restore, self._compile]
        self._commands: dict[CommandName, list[Step]] = {
            CommandName.CLEAN: [self._clean],
            CommandName.BUILD: build,
            CommandName.BUILD_AND_PUBLISH: [self._stamp] + build + [self._publish],
            CommandName.UNIT_TEST: [self._unit_tests],
            CommandName.E2E_TEST: [self._e2e_tests],
            CommandName.DOCKER_BUILD: [self._docker_build],
            CommandName.DOCKER_RUN: [self._docker_run],
        }

    def resolve_name(self, name: str) -> CommandName:
        """대소문자 무시 명령 이름 해석"""
        for command in CommandName:
            if command.value.lower() == name.strip().lower():
                return command
        raise UnknownCommandError(name, CommandName.choices())

    def lookup(self, name: str) -> list[Step]:
        """
        명령의 단계 목록 조회

        Raises:
            UnknownCommandError: 고정 명령 집합에 없는 이름
        """
        steps = list(self._commands[self.resolve_name(name)])
        self.logger.debug(f"{name} -> {[s.name.value for s in steps]}")
        return steps

    def commands(self) -> dict[str, list[str]]:
        """명령 → 단계 이름 표 (--list 용)"""
        return {
            command.value: [s.name.value for s in steps]
            for command, steps in self._commands.items()
        }
