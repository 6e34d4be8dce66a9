"""
Runner: 프로세스 실행, 단계 실행, 명령 레지스트리
"""
from src.runner.process import ProcessInvoker, working_directory
from src.runner.step import Step, StepExecutor, StepResult, StepStatus, CommandResult
from src.runner.actions import BuildActions, ProjectLayout
from src.runner.registry import CommandRegistry
from src.runner.bootstrap import ensure_nuget_cli

__all__ = [
    "ProcessInvoker",
    "working_directory",
    "Step",
    "StepExecutor",
    "StepResult",
    "StepStatus",
    "CommandResult",
    "BuildActions",
    "ProjectLayout",
    "CommandRegistry",
    "ensure_nuget_cli",
]
