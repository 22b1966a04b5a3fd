"""
스냅샷 파이프라인

3단계 처리:
1. Normalize: 원본 행 정규화 (성별/종목/판정/체급 표기)
2. Validate: 기술적/비즈니스 검증
3. Convert: 계산 엔진 입력 레코드로 변환
"""

from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional
import json

from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from scoring.models import Athlete, Attempt

from .normalizer import (
    get_normalization_changes,
    normalize_athlete_record,
    normalize_attempt_record,
)
from .schemas import (
    AthleteSchema,
    AttemptSchema,
    SnapshotSchema,
    ValidationResult,
    ValidationError,
    ValidationSeverity,
)
from .validators import TechnicalValidator, BusinessValidator, merge_results


class SnapshotRejectedError(Exception):
    """치명적 검증 오류로 스냅샷 계산 거부"""

    def __init__(self, validation: ValidationResult):
        self.validation = validation
        summary = "; ".join(e.message for e in validation.errors[:5])
        super().__init__(f"스냅샷 검증 실패 ({len(validation.errors)}건): {summary}")

    @classmethod
    def malformed(cls, message: str) -> "SnapshotRejectedError":
        """스냅샷 구조 자체가 잘못된 경우"""
        return cls(ValidationResult(
            is_valid=False,
            errors=[ValidationError(
                error_type="MALFORMED_SNAPSHOT",
                severity=ValidationSeverity.CRITICAL,
                message=message
            )],
            pass_rate=0.0
        ))


@dataclass
class PipelineResult:
    """파이프라인 처리 결과"""
    athletes: List[Athlete]
    attempts: List[Attempt]
    validation: ValidationResult
    tournament: Optional[str] = None
    stats: Dict[str, int] = field(default_factory=dict)

    @property
    def can_compute(self) -> bool:
        return self.validation.can_save


class DataPipeline:
    """
    스냅샷 처리 파이프라인

    strict=True 이면 치명적 오류(중복 시기, 존재하지 않는 선수 등)가 있을 때
    SnapshotRejectedError를 발생시킨다. strict=False 이면 스키마를 통과한
    레코드만으로 계산을 진행한다 (중복 시기는 마지막 레코드 사용).
    """

    def __init__(self, strict: bool = True):
        self.strict = strict
        self.tech_validator = TechnicalValidator()
        self.biz_validator = BusinessValidator()

        # 통계
        self.stats = {
            "total_processed": 0,
            "total_rejected": 0,
            "total_warnings": 0,
        }

    def _convert(self, records: List[Dict[str, Any]], schema) -> List[Any]:
        converted = []
        for record in records:
            try:
                converted.append(schema(**record).to_record())
            except PydanticValidationError:
                # 기술적 검증에서 이미 오류로 기록됨
                continue
        return converted

    def process(self, raw: Dict[str, Any]) -> PipelineResult:
        """
        원본 스냅샷 처리

        Args:
            raw: {"tournament": ..., "athletes": [...], "attempts": [...]}

        Returns:
            PipelineResult

        Raises:
            SnapshotRejectedError: strict 모드에서 치명적 오류가 있을 때
        """
        try:
            snapshot = SnapshotSchema.model_validate(raw)
        except PydanticValidationError as e:
            self.stats["total_rejected"] += 1
            raise SnapshotRejectedError.malformed(str(e)) from e

        # Stage 1: 정규화
        athlete_rows = [normalize_athlete_record(a) for a in snapshot.athletes]
        attempt_rows = [normalize_attempt_record(a) for a in snapshot.attempts]

        for original, normalized in zip(snapshot.athletes, athlete_rows):
            changes = get_normalization_changes(original, normalized)
            if changes:
                logger.debug(f"정규화 (선수 {original.get('id')}): {changes}")

        # Stage 2: 검증
        tech_result = merge_results([
            self.tech_validator.validate_batch("athlete", athlete_rows),
            self.tech_validator.validate_batch("attempt", attempt_rows),
        ])

        athletes = self._convert(athlete_rows, AthleteSchema)
        attempts = self._convert(attempt_rows, AttemptSchema)

        biz_result = self.biz_validator.validate_full(athletes, attempts)
        validation = merge_results([tech_result, biz_result])

        self.stats["total_processed"] += 1
        self.stats["total_warnings"] += len(validation.warnings)

        for warning in validation.warnings:
            logger.debug(f"[{warning.severity.value}] {warning.message}")

        if not validation.can_save:
            for error in validation.errors:
                logger.error(f"❌ {error.error_type}: {error.message}")
            if self.strict:
                self.stats["total_rejected"] += 1
                raise SnapshotRejectedError(validation)
            logger.warning("검증 오류가 있지만 non-strict 모드로 계산을 진행합니다")

        # Stage 3: 변환 결과
        stats = {
            "athletes": len(athletes),
            "attempts": len(attempts),
            "dropped_athletes": len(athlete_rows) - len(athletes),
            "dropped_attempts": len(attempt_rows) - len(attempts),
            "warnings": len(validation.warnings),
            "errors": len(validation.errors),
        }
        logger.info(
            f"✅ 스냅샷 처리 완료: 선수 {stats['athletes']}명, 시기 {stats['attempts']}건, "
            f"경고 {stats['warnings']}건"
        )

        return PipelineResult(
            athletes=athletes,
            attempts=attempts,
            validation=validation,
            tournament=snapshot.tournament,
            stats=stats,
        )

    def get_stats(self) -> Dict[str, int]:
        """파이프라인 누적 통계"""
        return dict(self.stats)


def load_snapshot(path: str, strict: bool = True) -> PipelineResult:
    """
    JSON 스냅샷 파일 로드 및 검증

    Raises:
        FileNotFoundError: 파일이 없을 때
        SnapshotRejectedError: JSON 형식 오류 또는 검증 실패
    """
    with open(path, "r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"JSON 파싱 실패: {path} ({e})")
            raise SnapshotRejectedError.malformed(f"JSON 형식 오류: {e}") from e

    logger.info(f"스냅샷 파일 로드: {path}")
    return DataPipeline(strict=strict).process(raw)
