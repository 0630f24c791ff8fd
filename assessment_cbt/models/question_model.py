from typing import Optional, List
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


class Question(BaseModel):
    """
    객관식 평가 문제 모델 (원격 저장소 questions 테이블 한 행)
    Pydantic v2 적용

    정답 필드는 correct_option_index 하나로 통일한다.
    과거 스키마의 correct_answer 키로 저장된 행도 같은 필드로 읽는다.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(
        ...,
        description="문제 식별자"
    )
    assessment_id: str = Field(
        ...,
        description="소속 평가 식별자"
    )
    question_text: str = Field(
        ...,
        min_length=1,
        description="발문/문제 내용"
    )
    options: List[str] = Field(
        ...,
        description="보기 리스트 (저장된 순서 그대로 표시, 섞지 않음)"
    )
    correct_option_index: int = Field(
        ...,
        validation_alias=AliasChoices("correct_option_index", "correct_answer"),
        description="정답 보기의 인덱스 (0-based)"
    )
    explanation: Optional[str] = Field(
        None,
        description="해설 (없으면 None)"
    )
    is_active: bool = Field(
        True,
        description="활성 여부. 비활성 문제는 시험에 출제되지 않는다."
    )
    order_num: int = Field(
        0,
        description="출제 순서 (오름차순)"
    )

    @field_validator('options')
    @classmethod
    def validate_options_length(cls, v: List[str]) -> List[str]:
        """
        검증 로직 1: 보기는 2개 이상 6개 이하여야 한다.
        """
        if not 2 <= len(v) <= 6:
            raise ValueError(f"보기(options)는 2~6개여야 합니다. (현재 {len(v)}개)")
        return v

    @model_validator(mode='after')
    def validate_correct_index(self) -> 'Question':
        """
        검증 로직 2: 정답 인덱스는 반드시 보기 리스트의 유효한 인덱스여야 한다.
        """
        if not 0 <= self.correct_option_index < len(self.options):
            raise ValueError(
                f"정답 인덱스({self.correct_option_index})가 보기 범위(0~{len(self.options) - 1})를 벗어났습니다."
            )
        return self

    def option_label(self, index: int) -> str:
        """보기 위치 라벨 (A, B, C, ...)."""
        return chr(ord("A") + index)
