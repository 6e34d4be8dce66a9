"""buildrun: 명령 기반 빌드 작업 실행기"""
