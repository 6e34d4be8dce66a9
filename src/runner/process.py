"""
Process Invoker: 외부 프로세스 실행기

컴파일러/컨테이너 엔진/테스트 러너를 동기 실행하고 종료 코드를 반환
"""
import os
import subprocess
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Sequence

from src.core.exceptions import ProcessLaunchError, ProcessTimeoutError
from src.core.logger import get_logger


@contextmanager
def working_directory(path: str | Path) -> Iterator[Path]:
    """
    작업 디렉토리 임시 변경 (pushd/popd)

    성공/실패/조기 반환 모든 경로에서 이전 디렉토리로 복원한다.
    """
    previous = Path.cwd()
    target = Path(path)
    os.chdir(target)
    try:
        yield target
    finally:
        os.chdir(previous)


class ProcessInvoker:
    """
    외부 프로세스 실행기

    표준 출력/에러는 호출자 콘솔로 그대로 전달된다 (캡처하지 않음).
    non-zero 종료 코드는 예외가 아니라 반환값이다.

    사용법:
        invoker = ProcessInvoker(tools={"dotnet": "/usr/share/dotnet/dotnet"})

        exit_code = invoker.run(["dotnet", "build", "app.sln"], cwd="./src")
        if exit_code != 0:
            ...
    """

    # 타임아웃/중단 후 종료 대기 시간 (초)
    KILL_GRACE_SECONDS = 5.0

    def __init__(
        self,
        tools: dict[str, str] | None = None,
        timeout: float | None = None,
    ):
        self.logger = get_logger(self.__class__.__name__)
        self.tools: dict[str, str] = dict(tools or {})
        self.timeout = timeout

    def register_tool(self, name: str, path: str | Path) -> None:
        """도구 이름 → 실행 파일 경로 등록"""
        self.tools[name] = str(path)
        self.logger.debug(f"도구 등록: {name} -> {path}")

    def resolve(self, argv: Sequence[str]) -> list[str]:
        """argv[0]을 도구 맵으로 치환"""
        if not argv:
            raise ProcessLaunchError([], "empty command line")
        command = [str(a) for a in argv]
        command[0] = self.tools.get(command[0], command[0])
        return command

    def run(
        self,
        argv: Sequence[str],
        cwd: str | Path | None = None,
        timeout: float | None = None,
    ) -> int:
        """
        프로세스 실행 (완료까지 대기)

        Args:
            argv: 실행 파일 + 인자
            cwd: 작업 디렉토리 (None이면 현재 디렉토리)
            timeout: 제한 시간 (초, None이면 생성 시 값 사용)

        Returns:
            종료 코드

        Raises:
            ProcessLaunchError: 실행 파일이 없거나 시작 불가
            ProcessTimeoutError: 제한 시간 초과 (프로세스는 종료됨)
        """
        command = self.resolve(argv)
        limit = timeout if timeout is not None else self.timeout

        self.logger.info(f"실행: {' '.join(command)}" + (f" (cwd={cwd})" if cwd else ""))

        try:
            process = subprocess.Popen(command, cwd=cwd)
        except OSError as e:
            raise ProcessLaunchError(command, str(e)) from e

        try:
            exit_code = process.wait(timeout=limit)
        except subprocess.TimeoutExpired:
            self.logger.error(f"타임아웃 ({limit}초) - 프로세스 종료: {command[0]}")
            self._kill(process)
            raise ProcessTimeoutError(command, limit)
        except KeyboardInterrupt:
            self.logger.warning(f"중단 요청 - 프로세스 종료: {command[0]}")
            self._terminate(process)
            raise

        self.logger.debug(f"종료 코드: {exit_code} ({command[0]})")
        return exit_code

    def _kill(self, process: subprocess.Popen) -> None:
        process.kill()
        process.wait()

    def _terminate(self, process: subprocess.Popen) -> None:
        """정상 종료 요청 후 유예 시간 내 미종료 시 강제 종료"""
        process.terminate()
        try:
            process.wait(timeout=self.KILL_GRACE_SECONDS)
        except subprocess.TimeoutExpired:
            self._kill(process)
