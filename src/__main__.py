"""
직접 실행:
    python -m src [COMMAND] [--configuration Release] [--version 1.2] [--dry-run] [--local-build]

예시:
    python -m src BuildAndPublish --configuration Release --version 1.2.0
"""
import sys

from src.orchestrator.build_orchestrator import main

if __name__ == "__main__":
    sys.exit(main())
