"""
호출 파라미터 (Parameter Set)

CLI 인자를 한 번만 해석하여 불변 ParameterSet으로 고정한다.
열거형 옵션은 이 단계에서 검증되며, 잘못된 값은 단계 실행 전에 거부된다.
"""
import argparse
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence

from src.core.exceptions import InvalidParameterError

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class _ChoiceEnum(Enum):
    """대소문자 무시 파싱을 지원하는 열거형 기반"""

    @classmethod
    def choices(cls) -> list[str]:
        return [member.value for member in cls]

    @classmethod
    def parse(cls, value: str, option: str):
        for member in cls:
            if member.value.lower() == str(value).strip().lower():
                return member
        raise InvalidParameterError(
            f"'{value}' is not a valid value for {option}",
            option=option,
            allowed=cls.choices(),
        )


class Configuration(_ChoiceEnum):
    """빌드 구성"""
    DEBUG = "Debug"
    RELEASE = "Release"


class CommandName(_ChoiceEnum):
    """지원 명령 (고정 집합)"""
    CLEAN = "Clean"
    BUILD = "Build"
    BUILD_AND_PUBLISH = "BuildAndPublish"
    UNIT_TEST = "UnitTest"
    E2E_TEST = "E2ETest"
    DOCKER_BUILD = "DockerBuild"
    DOCKER_RUN = "DockerRun"


@dataclass(frozen=True)
class ParameterSet:
    """
    호출 1회분 파라미터 (불변)

    command는 원문 그대로 보관한다. 명령 해석은 CommandRegistry가 담당.
    """
    command: str = CommandName.BUILD.value
    configuration: Configuration = Configuration.DEBUG
    version: str = "0.1"
    dry_run: bool = False
    feed_url: str = ""
    local_build: bool = False
    timeout: float | None = None

    def to_dict(self) -> dict:
        return {
            "command": self.command,
            "configuration": self.configuration.value,
            "version": self.version,
            "dry_run": self.dry_run,
            "feed_url": self.feed_url,
            "local_build": self.local_build,
            "timeout": self.timeout,
        }


@dataclass(frozen=True)
class CliOptions:
    """ParameterSet 외 실행 옵션"""
    config_dir: str | None = None
    log_level: str | None = None
    list_commands: bool = False


class _RaisingArgumentParser(argparse.ArgumentParser):
    """사용법 오류 시 SystemExit 대신 InvalidParameterError 발생"""

    def error(self, message: str):
        raise InvalidParameterError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _RaisingArgumentParser(
        prog="buildrun",
        description="빌드/테스트/게시/컨테이너 명령 실행기",
    )
    parser.add_argument(
        "command", nargs="?", default=None,
        help=f"실행할 명령 ({', '.join(CommandName.choices())})",
    )
    parser.add_argument("--command", dest="command_option", default=None, help="명령 (이름 지정 형식)")
    parser.add_argument("--version", default=None, help="버전 문자열 (기본: 0.1)")
    parser.add_argument(
        "--configuration", default=None,
        help=f"빌드 구성 ({'|'.join(Configuration.choices())})",
    )
    parser.add_argument("--dry-run", action="store_true", default=None, help="부수 효과 없이 실행 계획만 출력")
    parser.add_argument("--feed-url", default=None, help="패키지 피드 URL")
    parser.add_argument("--local-build", action="store_true", default=None, help="로컬 빌드 도구 준비")
    parser.add_argument("--timeout", type=float, default=None, help="프로세스별 제한 시간 (초)")
    parser.add_argument("--config-dir", default=None, help="settings.yaml 디렉토리")
    parser.add_argument("--log-level", default=None, help="로그 레벨 (DEBUG, INFO, ...)")
    parser.add_argument("--list", dest="list_commands", action="store_true", help="명령 목록 출력")
    return parser


def parse_arguments(argv: Sequence[str]) -> argparse.Namespace:
    """인자 형식만 해석 (값 검증 전)"""
    return build_parser().parse_args(list(argv))


def parse_parameters(
    argv: Sequence[str],
    defaults: dict[str, Any] | None = None,
) -> tuple[ParameterSet, CliOptions]:
    """
    CLI 인자 해석 + 검증

    Args:
        argv: 프로그램 이름을 제외한 인자 목록
        defaults: 설정 파일의 defaults 섹션 (CLI 값이 우선)

    Returns:
        (ParameterSet, CliOptions)

    Raises:
        InvalidParameterError: 인자 형식 또는 열거형 값이 잘못된 경우
    """
    return resolve_parameters(parse_arguments(argv), defaults)


def resolve_parameters(
    args: argparse.Namespace,
    defaults: dict[str, Any] | None = None,
) -> tuple[ParameterSet, CliOptions]:
    """해석된 인자에 설정 기본값을 적용하고 열거형 값을 검증"""
    defaults = defaults or {}

    if args.command and args.command_option and args.command != args.command_option:
        raise InvalidParameterError(
            f"conflicting commands: '{args.command}' and '{args.command_option}'",
            option="command",
        )
    command = args.command or args.command_option or defaults.get("command") or CommandName.BUILD.value

    configuration = Configuration.parse(
        _pick(args.configuration, defaults.get("configuration"), Configuration.DEBUG.value),
        "configuration",
    )

    version = str(_pick(args.version, defaults.get("version"), "0.1")).strip()
    if not version:
        raise InvalidParameterError("version must not be empty", option="version")

    timeout = _pick(args.timeout, defaults.get("timeout"), None)
    if timeout is not None:
        try:
            timeout = float(timeout)
        except (TypeError, ValueError):
            raise InvalidParameterError(f"'{timeout}' is not a number", option="timeout")
        if not math.isfinite(timeout) or timeout <= 0:
            raise InvalidParameterError("timeout must be a positive finite number", option="timeout")

    params = ParameterSet(
        command=str(command).strip(),
        configuration=configuration,
        version=version,
        dry_run=_flag(_pick(args.dry_run, defaults.get("dry_run"), False), "dry-run"),
        feed_url=str(_pick(args.feed_url, defaults.get("feed_url"), "")),
        local_build=_flag(_pick(args.local_build, defaults.get("local_build"), False), "local-build"),
        timeout=timeout,
    )
    log_level = args.log_level.upper() if args.log_level else None
    if log_level is not None and log_level not in LOG_LEVELS:
        raise InvalidParameterError(
            f"'{args.log_level}' is not a valid log level",
            option="log-level",
            allowed=list(LOG_LEVELS),
        )

    options = CliOptions(
        config_dir=args.config_dir,
        log_level=log_level,
        list_commands=args.list_commands,
    )
    return params, options


def _pick(*values):
    """첫 번째 None 아닌 값"""
    for value in values:
        if value is not None:
            return value
    return None


def _flag(value, option: str) -> bool:
    """bool 값만 허용 (YAML 문자열 "false" 등은 거부)"""
    if not isinstance(value, bool):
        raise InvalidParameterError(
            f"'{value}' is not a boolean for {option}",
            option=option,
            allowed=["true", "false"],
        )
    return value
