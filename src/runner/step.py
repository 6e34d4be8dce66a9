"""
Step Runner: 개별 빌드 단계 실행기

단계를 순서대로 실행하고 첫 실패에서 중단 (fail-fast)
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Sequence

from src.core.exceptions import StepFailure
from src.core.identifiers import StepName
from src.core.logger import get_logger


class StepStatus(Enum):
    """단계 상태"""
    PENDING = "pending"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"
    WOULD_RUN = "would_run"


@dataclass(frozen=True)
class Step:
    """
    이름이 있는 무인자 작업 단위

    action은 성공 시 None 또는 종료 코드(0)를 반환하고,
    실패 시 예외(StepFailure 등)를 발생시킨다.
    """
    name: StepName
    action: Callable[[], int | None] = field(compare=False)
    description: str = ""

    @classmethod
    def of(cls, name: str, action: Callable[[], int | None], description: str = "") -> "Step":
        return cls(StepName(name), action, description)


@dataclass
class StepResult:
    """단계 실행 결과"""
    step_name: str
    status: StepStatus
    exit_code: int | None = None
    error: str | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None

    @property
    def duration_seconds(self) -> float:
        """실행 시간 (초)"""
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return 0.0

    def to_dict(self) -> dict:
        return {
            "step": self.step_name,
            "status": self.status.value,
            "duration": f"{self.duration_seconds:.1f}s",
            "exit_code": self.exit_code,
            "error": self.error,
        }


@dataclass
class CommandResult:
    """명령 1회 실행 결과 (단계별 결과 집계)"""
    command: str
    success: bool
    started_at: datetime
    completed_at: datetime | None = None
    step_results: list[StepResult] = field(default_factory=list)
    error: str | None = None
    dry_run: bool = False

    @property
    def duration_seconds(self) -> float:
        if self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return 0.0

    def get_step(self, step_name: str) -> StepResult | None:
        """특정 단계 결과 조회"""
        for step in self.step_results:
            if step.step_name == step_name:
                return step
        return None

    @property
    def failed_step(self) -> StepResult | None:
        for step in self.step_results:
            if step.status == StepStatus.FAILED:
                return step
        return None

    def to_summary(self) -> dict:
        """요약 정보 반환"""
        return {
            "command": self.command,
            "success": self.success,
            "dry_run": self.dry_run,
            "duration": f"{self.duration_seconds:.1f}s",
            "steps": [s.to_dict() for s in self.step_results],
            "error": self.error,
        }

    def format_report(self) -> str:
        """단계별 상태/소요시간 표"""
        width = max([len(s.step_name) for s in self.step_results] + [4])
        lines = [
            f"{'Step'.ljust(width)}  {'Status':<10}  Duration",
            f"{'-' * width}  {'-' * 10}  {'-' * 8}",
        ]
        for s in self.step_results:
            lines.append(f"{s.step_name.ljust(width)}  {s.status.value:<10}  {s.duration_seconds:7.2f}s")
        outcome = "SUCCESS" if self.success else "FAILED"
        if self.dry_run:
            outcome += " (dry-run)"
        lines.append(f"{self.command}: {outcome} in {self.duration_seconds:.2f}s")
        return "\n".join(lines)


class StepExecutor:
    """
    단계 실행기

    사용법:
        executor = StepExecutor(dry_run=False)

        result = executor.run("Build", [clean_step, restore_step, compile_step])
        if not result.success:
            print(result.failed_step.error)
    """

    def __init__(self, dry_run: bool = False):
        self.logger = get_logger(self.__class__.__name__)
        self.dry_run = dry_run

    def run_step(self, step: Step) -> StepResult:
        """단일 단계 실행 (예외를 결과로 변환)"""
        name = step.name.value
        result = StepResult(
            step_name=name,
            status=StepStatus.RUNNING,
            started_at=datetime.now(),
        )

        if self.dry_run:
            self.logger.info(f"[{name}] would run" + (f": {step.description}" if step.description else ""))
            result.status = StepStatus.WOULD_RUN
            result.completed_at = datetime.now()
            return result

        self.logger.info(f"[{name}] 시작")

        try:
            exit_code = step.action()
            result.exit_code = exit_code
            result.status = StepStatus.SUCCESS
            self.logger.info(f"[{name}] 완료")

        except StepFailure as e:
            result.status = StepStatus.FAILED
            result.exit_code = e.exit_code
            result.error = e.message
            self.logger.error(f"[{name}] 실패: {e}")

        except Exception as e:
            result.status = StepStatus.FAILED
            result.error = str(e)
            self.logger.error(f"[{name}] 실패: {type(e).__name__}: {e}")

        result.completed_at = datetime.now()
        return result

    def run(self, command: str, steps: Sequence[Step]) -> CommandResult:
        """
        단계 목록 순차 실행

        첫 실패 이후 단계는 실행하지 않고 SKIPPED로 기록한다.

        Args:
            command: 명령 이름 (보고용)
            steps: 실행 순서대로 정렬된 단계

        Returns:
            CommandResult
        """
        result = CommandResult(
            command=command,
            success=False,
            started_at=datetime.now(),
            dry_run=self.dry_run,
        )

        failed: StepResult | None = None
        for step in steps:
            if failed is not None:
                result.step_results.append(
                    StepResult(step_name=step.name.value, status=StepStatus.SKIPPED)
                )
                continue

            step_result = self.run_step(step)
            result.step_results.append(step_result)
            if step_result.status == StepStatus.FAILED:
                failed = step_result

        if failed is not None:
            result.error = f"Step '{failed.step_name}' failed: {failed.error}"
        else:
            result.success = True

        result.completed_at = datetime.now()
        return result
