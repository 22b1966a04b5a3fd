"""
스냅샷 검증 시스템

Stage 1: Technical Validation (레코드 단위 기술적 검증)
Stage 2: Business Logic Validation (스냅샷 단위 비즈니스 로직 검증)
"""

from typing import List, Dict, Any, Iterable, Sequence
from collections import defaultdict
from pydantic import ValidationError as PydanticValidationError
from datetime import datetime
from loguru import logger

from scoring.calculator import WEIGHT_CLASS_SENTINEL, weight_class_sort_value
from scoring.constants import is_known_weight_class
from scoring.models import Athlete, Attempt

from .schemas import (
    AthleteSchema,
    AttemptSchema,
    ValidationResult,
    ValidationError,
    ValidationSeverity,
)


def merge_results(results: Iterable[ValidationResult]) -> ValidationResult:
    """여러 검증 결과 병합"""
    errors: List[ValidationError] = []
    warnings: List[ValidationError] = []
    rates: List[float] = []
    for result in results:
        errors.extend(result.errors)
        warnings.extend(result.warnings)
        rates.append(result.pass_rate)

    return ValidationResult(
        is_valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
        pass_rate=min(rates) if rates else 1.0,
        validated_at=datetime.now()
    )


def _schema_errors(exc: PydanticValidationError) -> List[ValidationError]:
    return [
        ValidationError(
            error_type="SCHEMA_VALIDATION_FAILED",
            severity=ValidationSeverity.CRITICAL,
            message=error["msg"],
            field=".".join(str(loc) for loc in error["loc"]),
            value=error.get("input"),
            suggestion="데이터 형식을 확인하세요"
        )
        for error in exc.errors()
    ]


class TechnicalValidator:
    """
    Stage 1: 기술적 검증

    - 필드 존재 여부 / 데이터 타입 (Pydantic 스키마)
    - 시기 번호 범위, 중량 범위
    - 계산 결과에 영향을 주는 누락 값 경고
    """

    def validate_athlete(self, data: Dict[str, Any]) -> ValidationResult:
        """선수 데이터 기술적 검증"""
        errors = []
        warnings = []

        try:
            AthleteSchema(**data)
        except PydanticValidationError as e:
            errors.extend(_schema_errors(e))

        gender = data.get("gender")
        weight_class = data.get("weight_class")

        if not gender or not weight_class:
            warnings.append(ValidationError(
                error_type="MISSING_COHORT_FIELD",
                severity=ValidationSeverity.MEDIUM,
                message=f"성별 또는 체급 누락: {data.get('name')}",
                field="gender" if not gender else "weight_class",
                value=gender if not gender else weight_class,
                suggestion="unknown 그룹으로 집계됩니다"
            ))
        elif weight_class_sort_value(str(weight_class)) == WEIGHT_CLASS_SENTINEL:
            warnings.append(ValidationError(
                error_type="MALFORMED_WEIGHT_CLASS",
                severity=ValidationSeverity.MEDIUM,
                message=f"체급을 숫자로 해석할 수 없습니다: {weight_class}",
                field="weight_class",
                value=weight_class,
                suggestion="해당 성별의 맨 뒤에 표시됩니다"
            ))
        elif not is_known_weight_class(gender, str(weight_class)):
            warnings.append(ValidationError(
                error_type="NON_IWF_WEIGHT_CLASS",
                severity=ValidationSeverity.LOW,
                message=f"IWF 규정 체급이 아닙니다: {gender} {weight_class}",
                field="weight_class",
                value=weight_class
            ))

        return ValidationResult(
            is_valid=len(errors) == 0,
            errors=errors,
            warnings=warnings,
            pass_rate=0.0 if errors else 1.0,
            validated_at=datetime.now()
        )

    def validate_attempt(self, data: Dict[str, Any]) -> ValidationResult:
        """시기 데이터 기술적 검증"""
        errors = []
        warnings = []

        try:
            AttemptSchema(**data)
        except PydanticValidationError as e:
            errors.extend(_schema_errors(e))

        if data.get("status") == "success" and data.get("declared_weight") is None:
            warnings.append(ValidationError(
                error_type="SUCCESS_WITHOUT_WEIGHT",
                severity=ValidationSeverity.MEDIUM,
                message=f"중량 없는 성공 판정: athlete_id={data.get('athlete_id')}",
                field="declared_weight",
                suggestion="최고 기록 계산에서 제외됩니다"
            ))

        return ValidationResult(
            is_valid=len(errors) == 0,
            errors=errors,
            warnings=warnings,
            pass_rate=0.0 if errors else 1.0,
            validated_at=datetime.now()
        )

    def validate_batch(
        self,
        data_type: str,
        records: List[Dict[str, Any]]
    ) -> ValidationResult:
        """배치 검증"""
        all_errors = []
        all_warnings = []
        valid_count = 0

        validator_map = {
            "athlete": self.validate_athlete,
            "attempt": self.validate_attempt,
        }

        validator = validator_map.get(data_type)
        if not validator:
            return ValidationResult(
                is_valid=False,
                errors=[ValidationError(
                    error_type="UNKNOWN_DATA_TYPE",
                    severity=ValidationSeverity.CRITICAL,
                    message=f"알 수 없는 데이터 타입: {data_type}"
                )],
                pass_rate=0.0
            )

        for i, record in enumerate(records):
            result = validator(record)
            if result.is_valid:
                valid_count += 1
            else:
                for error in result.errors:
                    error.message = f"[Record {i}] {error.message}"
                    all_errors.append(error)
            all_warnings.extend(result.warnings)

        return ValidationResult(
            is_valid=valid_count == len(records),
            errors=all_errors,
            warnings=all_warnings,
            pass_rate=valid_count / len(records) if records else 1.0,
            validated_at=datetime.now()
        )


class BusinessValidator:
    """
    Stage 2: 비즈니스 로직 검증

    - 중복 시기 (선수, 종목, 시기 번호)
    - 중복 선수 ID
    - 존재하지 않는 선수의 시기 (참조 무결성)
    - 같은 체급 내 추첨 번호 중복
    - 시기별 중량 감소
    """

    def validate_duplicate_attempts(self, attempts: Sequence[Attempt]) -> ValidationResult:
        """같은 (선수, 종목, 시기 번호) 레코드가 2개 이상인지 확인"""
        errors = []
        counts: Dict[tuple, int] = defaultdict(int)
        for attempt in attempts:
            counts[attempt.natural_key] += 1

        for (athlete_id, discipline, attempt_num), count in counts.items():
            if count > 1:
                errors.append(ValidationError(
                    error_type="DUPLICATE_ATTEMPT",
                    severity=ValidationSeverity.CRITICAL,
                    message=f"중복 시기: {athlete_id} {discipline} {attempt_num}차 ({count}건)",
                    field="attempt_num",
                    value=attempt_num,
                    suggestion="삭제되지 않은 중복 행을 정리하세요"
                ))

        return ValidationResult(
            is_valid=len(errors) == 0,
            errors=errors,
            pass_rate=1.0 if not errors else 0.0,
            validated_at=datetime.now()
        )

    def validate_duplicate_athletes(self, athletes: Sequence[Athlete]) -> ValidationResult:
        """선수 ID 중복 확인"""
        errors = []
        seen = set()
        for athlete in athletes:
            if athlete.id in seen:
                errors.append(ValidationError(
                    error_type="DUPLICATE_ATHLETE",
                    severity=ValidationSeverity.CRITICAL,
                    message=f"중복 선수 ID: {athlete.id} ({athlete.name})",
                    field="id",
                    value=athlete.id
                ))
            seen.add(athlete.id)

        return ValidationResult(
            is_valid=len(errors) == 0,
            errors=errors,
            pass_rate=1.0 if not errors else 0.0,
            validated_at=datetime.now()
        )

    def validate_referential_integrity(
        self,
        athletes: Sequence[Athlete],
        attempts: Sequence[Attempt]
    ) -> ValidationResult:
        """모든 시기가 등록된 선수를 참조하는지 확인"""
        errors = []
        athlete_ids = {a.id for a in athletes}
        missing = sorted({a.athlete_id for a in attempts if a.athlete_id not in athlete_ids})

        for athlete_id in missing:
            errors.append(ValidationError(
                error_type="ATHLETE_NOT_FOUND",
                severity=ValidationSeverity.CRITICAL,
                message=f"선수가 존재하지 않습니다: athlete_id={athlete_id}",
                field="athlete_id",
                value=athlete_id,
                suggestion="다른 대회의 시기가 섞였는지 확인하세요"
            ))

        return ValidationResult(
            is_valid=len(errors) == 0,
            errors=errors,
            pass_rate=1.0 if not errors else 0.0,
            validated_at=datetime.now()
        )

    def validate_lot_numbers(self, athletes: Sequence[Athlete]) -> ValidationResult:
        """같은 성별/체급 내 추첨 번호 중복 경고"""
        warnings = []
        seen: Dict[tuple, str] = {}
        for athlete in athletes:
            if athlete.lot_number is None:
                continue
            key = (athlete.gender, athlete.weight_class, athlete.lot_number)
            if key in seen:
                warnings.append(ValidationError(
                    error_type="DUPLICATE_LOT_NUMBER",
                    severity=ValidationSeverity.MEDIUM,
                    message=f"추첨 번호 중복: {athlete.lot_number} ({seen[key]}, {athlete.name})",
                    field="lot_number",
                    value=athlete.lot_number
                ))
            else:
                seen[key] = athlete.name

        return ValidationResult(is_valid=True, warnings=warnings)

    def validate_attempt_progression(self, attempts: Sequence[Attempt]) -> ValidationResult:
        """판정된 시기의 중량이 시기 번호 순으로 줄어들지 않는지 확인"""
        warnings = []
        grouped: Dict[tuple, List[Attempt]] = defaultdict(list)
        for attempt in attempts:
            if attempt.status == "pending" or attempt.declared_weight is None:
                continue
            grouped[(attempt.athlete_id, attempt.discipline)].append(attempt)

        for (athlete_id, discipline), items in grouped.items():
            items.sort(key=lambda a: a.attempt_num)
            for prev, curr in zip(items, items[1:]):
                if curr.declared_weight < prev.declared_weight:
                    warnings.append(ValidationError(
                        error_type="WEIGHT_DECREASED",
                        severity=ValidationSeverity.LOW,
                        message=(
                            f"중량 감소: {athlete_id} {discipline} "
                            f"{prev.attempt_num}차 {prev.declared_weight}kg → "
                            f"{curr.attempt_num}차 {curr.declared_weight}kg"
                        ),
                        field="declared_weight",
                        value=curr.declared_weight
                    ))

        return ValidationResult(is_valid=True, warnings=warnings)

    def validate_full(
        self,
        athletes: Sequence[Athlete],
        attempts: Sequence[Attempt]
    ) -> ValidationResult:
        """전체 비즈니스 검증 실행"""
        result = merge_results([
            self.validate_duplicate_athletes(athletes),
            self.validate_duplicate_attempts(attempts),
            self.validate_referential_integrity(athletes, attempts),
            self.validate_lot_numbers(athletes),
            self.validate_attempt_progression(attempts),
        ])
        if result.errors:
            logger.warning(f"비즈니스 검증 오류 {len(result.errors)}건")
        return result
