"""
로컬 빌드 준비

로컬 빌드 모드에서만 보조 패키지 관리자 실행 파일(nuget.exe)을 준비한다.
"""
from pathlib import Path

import requests

from src.core.exceptions import BootstrapError
from src.core.logger import get_logger

logger = get_logger(__name__)

NUGET_EXECUTABLE = "nuget.exe"


def ensure_nuget_cli(
    tools_dir: str | Path,
    url: str,
    dry_run: bool = False,
    timeout: float = 60,
) -> Path:
    """
    nuget.exe 경로 반환 (없으면 다운로드)

    Args:
        tools_dir: 도구 저장 디렉토리
        url: 다운로드 URL
        dry_run: True면 다운로드하지 않고 경로만 반환
        timeout: 다운로드 제한 시간 (초)

    Returns:
        실행 파일 경로

    Raises:
        BootstrapError: 다운로드 실패
    """
    path = Path(tools_dir) / NUGET_EXECUTABLE
    if path.exists():
        logger.debug(f"nuget 존재: {path}")
        return path

    if dry_run:
        logger.info(f"would download {url} -> {path}")
        return path

    logger.info(f"nuget 다운로드: {url}")
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise BootstrapError(f"nuget 다운로드 실패: {e}", {"url": url}) from e

    path.parent.mkdir(parents=True, exist_ok=True)
    partial = path.with_suffix(".part")
    partial.write_bytes(response.content)
    partial.replace(path)
    logger.info(f"nuget 설치 완료: {path}")
    return path
