"""
공용 fixture
"""
import os
from pathlib import Path

import pytest
import yaml

from src.core.config import Config
from src.core.logger import LoggerService
from src.runner.process import ProcessInvoker


def write_settings(config_dir: Path, root: Path, **overrides) -> Path:
    """테스트용 settings.yaml 작성"""
    settings = {
        "defaults": {
            "command": "Build",
            "version": "0.1",
            "configuration": "Debug",
            "feed_url": "https://feed.example.test/index.json",
        },
        "project": {
            "root": str(root),
            "solution_root": "src",
            "solution": "App.sln",
            "application_root": "src/services",
            "project_name": "App.Api",
            "product": "Sample Product",
            "maintainers": "Sample Maintainers",
            "copyright_holder": "Sample Org",
        },
        "tests": {"unit_pattern": "*.Tests.Unit", "e2e_pattern": "*.Tests.E2E"},
        "docker": {
            "context": "src",
            "image_namespace": "local",
            "image_name": "app",
            "ports": "8080:8080",
        },
        "tools": {"dotnet": "dotnet", "docker": "docker"},
        "process": {"timeout": None},
        "bootstrap": {
            "tools_dir": str(root / ".tools"),
            "nuget_url": "https://download.example.test/nuget.exe",
        },
        "logging": {"level": "DEBUG", "file": {"enabled": False}},
    }
    for section, values in overrides.items():
        settings.setdefault(section, {}).update(values)

    config_dir.mkdir(parents=True, exist_ok=True)
    path = config_dir / "settings.yaml"
    path.write_text(yaml.safe_dump(settings), encoding="utf-8")
    return path


class RecordingInvoker(ProcessInvoker):
    """실제 프로세스 대신 호출을 기록하는 invoker"""

    def __init__(self, tools=None, timeout=None, exit_codes=None):
        super().__init__(tools, timeout)
        self.calls: list[list[str]] = []
        self.cwds: list[Path] = []
        self.exit_codes = dict(exit_codes or {})

    def run(self, argv, cwd=None, timeout=None):
        command = self.resolve(argv)
        self.calls.append(command)
        self.cwds.append(Path(os.getcwd()))
        # argv[1] (예: "build") 기준으로 종료 코드 지정
        return self.exit_codes.get(str(argv[1]) if len(argv) > 1 else str(argv[0]), 0)


@pytest.fixture(autouse=True)
def reset_singletons():
    """각 테스트 전후 Config/Logger 리셋"""
    Config.reset()
    LoggerService.reset()
    LoggerService.configure(level="DEBUG", file_enabled=False)
    yield
    Config.reset()
    LoggerService.reset()


@pytest.fixture
def project_root(tmp_path) -> Path:
    root = tmp_path / "repo"
    (root / "src").mkdir(parents=True)
    return root


@pytest.fixture
def config(tmp_path, project_root) -> Config:
    config_dir = tmp_path / "config"
    write_settings(config_dir, project_root)
    return Config(config_dir=config_dir)


@pytest.fixture
def invoker() -> RecordingInvoker:
    return RecordingInvoker(tools={"dotnet": "dotnet", "docker": "docker"})
