"""
스냅샷 스키마 정의

Pydantic 모델을 사용하여 선수/시기 레코드 유효성 검사 및 타입 강제
"""

from pydantic import AliasChoices, BaseModel, Field, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime, timezone
from enum import Enum

from scoring.models import Athlete, Attempt, AttemptStatus, Discipline, Gender


class ValidationSeverity(str, Enum):
    """검증 오류 심각도"""
    CRITICAL = "critical"   # 계산 불가
    HIGH = "high"           # 계산 불가, 수동 검토 필요
    MEDIUM = "medium"       # 계산 가능, 경고 표시
    LOW = "low"             # 계산 가능, 로그만
    INFO = "info"           # 정보성


class ValidationError(BaseModel):
    """검증 오류"""
    error_type: str = Field(..., description="오류 유형")
    severity: ValidationSeverity = Field(..., description="심각도")
    message: str = Field(..., description="오류 메시지")
    field: Optional[str] = Field(None, description="관련 필드")
    value: Optional[Any] = Field(None, description="문제가 된 값")
    suggestion: Optional[str] = Field(None, description="해결 제안")


class ValidationResult(BaseModel):
    """검증 결과"""
    is_valid: bool = Field(default=True, description="최종 유효성")
    errors: List[ValidationError] = Field(default_factory=list)
    warnings: List[ValidationError] = Field(default_factory=list)
    pass_rate: float = Field(default=1.0, description="통과율 (0-1)")
    validated_at: datetime = Field(default_factory=datetime.now)

    @property
    def has_critical_errors(self) -> bool:
        return any(e.severity in [ValidationSeverity.CRITICAL, ValidationSeverity.HIGH] for e in self.errors)

    @property
    def can_save(self) -> bool:
        """계산 진행 가능 여부"""
        return not self.has_critical_errors


# ==================== 핵심 스키마 ====================

class AthleteSchema(BaseModel):
    """선수 스키마"""

    # 필수 필드
    id: str = Field(..., min_length=1, description="선수 ID")
    name: str = Field(..., min_length=1, max_length=100, description="선수명")

    # 선택 필드
    team: Optional[str] = Field(None, max_length=100, description="소속팀")
    gender: Optional[Gender] = Field(None, description="성별")
    weight_class: Optional[str] = Field(None, max_length=10, description="체급 (81, +109)")
    lot_number: Optional[int] = Field(None, ge=1, description="추첨 번호")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        """숫자 ID 허용"""
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """선수명 공백 정리"""
        v = " ".join(v.split())
        if not v:
            raise ValueError("선수명이 비어 있습니다")
        return v

    @field_validator("team")
    @classmethod
    def blank_team_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()

    def to_record(self) -> Athlete:
        return Athlete(
            id=self.id,
            name=self.name,
            team=self.team,
            gender=self.gender,
            weight_class=self.weight_class,
            lot_number=self.lot_number,
        )

    class Config:
        use_enum_values = True


class AttemptSchema(BaseModel):
    """시기 기록 스키마"""

    athlete_id: str = Field(..., min_length=1, description="선수 ID")
    discipline: Discipline = Field(
        ...,
        validation_alias=AliasChoices("discipline", "type"),
        description="종목 (snatch / cj)",
    )
    attempt_num: int = Field(..., ge=1, le=3, description="시기 번호")
    declared_weight: Optional[int] = Field(None, ge=1, le=500, description="신청 중량 (kg)")
    status: AttemptStatus = Field(default=AttemptStatus.PENDING.value, description="판정")
    updated_at: datetime = Field(
        ...,
        validation_alias=AliasChoices("updated_at", "recorded_at"),
        description="최종 수정 시각",
    )

    @field_validator("athlete_id", mode="before")
    @classmethod
    def coerce_athlete_id(cls, v: Any) -> Any:
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator("updated_at")
    @classmethod
    def ensure_timezone(cls, v: datetime) -> datetime:
        """시간대 없는 시각은 UTC로 간주 (aware/naive 혼재 시 비교 불가)"""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def to_record(self) -> Attempt:
        return Attempt(
            athlete_id=self.athlete_id,
            discipline=self.discipline,
            attempt_num=self.attempt_num,
            declared_weight=self.declared_weight,
            status=self.status,
            updated_at=self.updated_at,
        )

    class Config:
        use_enum_values = True


# ==================== 파이프라인 데이터 컨테이너 ====================

class SnapshotSchema(BaseModel):
    """대회 스냅샷 (선수 목록 + 시기 목록)"""

    tournament: Optional[str] = Field(None, description="대회명")
    athletes: List[Dict[str, Any]] = Field(default_factory=list)
    attempts: List[Dict[str, Any]] = Field(default_factory=list)
