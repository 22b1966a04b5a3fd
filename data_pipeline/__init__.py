"""
스냅샷 데이터 파이프라인 패키지

계산 엔진에 넘기기 전 단계:
- Stage 1: Normalize (표기 정규화)
- Stage 2: Validate (기술적 / 비즈니스 검증)
- Stage 3: Convert (엔진 입력 레코드로 변환)
"""

from .schemas import (
    AthleteSchema,
    AttemptSchema,
    SnapshotSchema,
    ValidationResult,
    ValidationError,
    ValidationSeverity,
)
from .validators import TechnicalValidator, BusinessValidator, merge_results
from .pipeline import DataPipeline, PipelineResult, SnapshotRejectedError, load_snapshot

__all__ = [
    # Schemas
    "AthleteSchema",
    "AttemptSchema",
    "SnapshotSchema",
    "ValidationResult",
    "ValidationError",
    "ValidationSeverity",
    # Validators
    "TechnicalValidator",
    "BusinessValidator",
    "merge_results",
    # Pipeline
    "DataPipeline",
    "PipelineResult",
    "SnapshotRejectedError",
    "load_snapshot",
]
