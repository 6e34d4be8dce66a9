"""
Core 모듈 - 공통 인프라

- config: 설정 관리
- logger: 로깅 서비스
- exceptions: 커스텀 예외
- identifiers: 브랜드 식별자
- parameters: 호출 파라미터
"""
from src.core.config import Config, get_config
from src.core.logger import get_logger, LoggerService, setup_logger_from_config
from src.core.exceptions import (
    BaseError,
    ConfigError,
    ConfigNotFoundError,
    ConfigValidationError,
    InvalidParameterError,
    UnknownCommandError,
    ProcessError,
    ProcessLaunchError,
    ProcessTimeoutError,
    StepFailure,
    BootstrapError,
)
from src.core.identifiers import ProjectNamespace, StepName, ImageTag
from src.core.parameters import (
    CommandName,
    Configuration,
    ParameterSet,
    CliOptions,
    parse_parameters,
)

__all__ = [
    # Config
    "Config",
    "get_config",
    # Logger
    "get_logger",
    "LoggerService",
    "setup_logger_from_config",
    # Exceptions
    "BaseError",
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigValidationError",
    "InvalidParameterError",
    "UnknownCommandError",
    "ProcessError",
    "ProcessLaunchError",
    "ProcessTimeoutError",
    "StepFailure",
    "BootstrapError",
    # Identifiers
    "ProjectNamespace",
    "StepName",
    "ImageTag",
    # Parameters
    "CommandName",
    "Configuration",
    "ParameterSet",
    "CliOptions",
    "parse_parameters",
]
