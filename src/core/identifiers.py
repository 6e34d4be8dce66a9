"""
브랜드 식별자 (Branded Identifier)

의미가 다른 문자열끼리 섞이지 않도록 단일 필드 값 타입으로 감싼다.
일반 문자열과의 암묵적 변환/비교는 지원하지 않는다 (항상 .value 사용).
"""
from dataclasses import dataclass


def _require_str(type_name: str, value: object) -> None:
    if not isinstance(value, str):
        raise TypeError(f"{type_name} requires str, got {type(value).__name__}")


@dataclass(frozen=True)
class ProjectNamespace:
    """
    프로젝트 스키마를 가리키는 URI 경로 구성요소

    예: Ed-Fi 데이터 표준 버전의 "ed-fi"
    """
    value: str

    def __post_init__(self):
        _require_str(type(self).__name__, self.value)


@dataclass(frozen=True)
class StepName:
    """빌드 단계 이름 (예: "compile")"""
    value: str

    def __post_init__(self):
        _require_str(type(self).__name__, self.value)
        if not self.value:
            raise ValueError("StepName must not be empty")


@dataclass(frozen=True)
class ImageTag:
    """컨테이너 이미지 태그 (예: "local/data-management-service")"""
    value: str

    def __post_init__(self):
        _require_str(type(self).__name__, self.value)

    @classmethod
    def compose(cls, namespace: str, name: str) -> "ImageTag":
        return cls(f"{namespace}/{name}" if namespace else name)
