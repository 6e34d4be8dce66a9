"""
커스텀 예외 클래스 정의

모든 레이어에서 사용하는 표준화된 예외 처리
"""
from typing import Any


class BaseError(Exception):
    """모든 커스텀 예외의 기본 클래스"""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# ============================================
# Configuration Errors
# ============================================
class ConfigError(BaseError):
    """설정 관련 오류"""
    pass


class ConfigNotFoundError(ConfigError):
    """설정 파일을 찾을 수 없음"""
    pass


class ConfigValidationError(ConfigError):
    """설정 값 유효성 검증 실패"""
    pass


# ============================================
# Invocation Errors (ParsingArgs / Resolving)
# ============================================
class InvalidParameterError(BaseError):
    """CLI 옵션 값이 허용 범위를 벗어남"""

    def __init__(
        self,
        message: str,
        option: str | None = None,
        allowed: list[str] | None = None,
    ):
        details: dict[str, Any] = {}
        if option:
            details["option"] = option
        if allowed:
            details["allowed"] = allowed
        super().__init__(message, details)
        self.option = option
        self.allowed = allowed or []


class UnknownCommandError(BaseError):
    """등록되지 않은 명령"""

    def __init__(self, command: str, available: list[str] | None = None):
        super().__init__(
            f"Command '{command}' is not recognized",
            {"available": available} if available else None,
        )
        self.command = command
        self.available = available or []


# ============================================
# Process Errors
# ============================================
class ProcessError(BaseError):
    """외부 프로세스 실행 관련 오류"""
    pass


class ProcessLaunchError(ProcessError):
    """실행 파일을 찾을 수 없거나 시작 불가"""

    def __init__(self, argv: list[str], reason: str):
        super().__init__(
            f"프로세스 시작 실패: {argv[0] if argv else '<empty>'} ({reason})",
            {"argv": argv},
        )
        self.argv = argv


class ProcessTimeoutError(ProcessError):
    """프로세스 실행 시간 초과 (프로세스는 종료됨)"""

    def __init__(self, argv: list[str], timeout: float):
        super().__init__(
            f"프로세스 타임아웃 ({timeout}초): {argv[0] if argv else '<empty>'}",
            {"argv": argv, "timeout": timeout},
        )
        self.argv = argv
        self.timeout = timeout


# ============================================
# Step Errors
# ============================================
class StepFailure(BaseError):
    """단계 실패 (non-zero exit code 또는 내부 로직 오류)"""

    def __init__(
        self,
        message: str,
        step_name: str | None = None,
        exit_code: int | None = None,
    ):
        details: dict[str, Any] = {}
        if step_name:
            details["step"] = step_name
        if exit_code is not None:
            details["exit_code"] = exit_code
        super().__init__(message, details)
        self.step_name = step_name
        self.exit_code = exit_code


class BootstrapError(BaseError):
    """로컬 빌드 도구 준비 실패"""
    pass
