"""
Orchestrator: 호출 1회의 전체 흐름 조율

인자 해석 → 검증 → 명령 해석 → 단계 실행
"""
from src.orchestrator.build_orchestrator import BuildOrchestrator, OrchestratorState, ExitCode, main

__all__ = [
    "BuildOrchestrator",
    "OrchestratorState",
    "ExitCode",
    "main",
]
