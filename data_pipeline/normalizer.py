"""
데이터 정규화 모듈
- 성별, 종목, 판정, 체급 표기 정규화
- 원본 행 형식(type, recorded_at 등) → 스키마 필드
"""
import re
from typing import Optional, Dict, Any, Tuple


# =============================================================================
# 정규화 매핑 테이블
# =============================================================================

GENDER_NORMALIZE_MAP = {
    # 표준 형식
    "male": "male",
    "female": "female",
    # 약어 / 복수형
    "m": "male",
    "f": "female",
    "men": "male",
    "women": "female",
    # 한글
    "남": "male",
    "남자": "male",
    "여": "female",
    "여자": "female",
    # 빈값
    "": None,
}

DISCIPLINE_NORMALIZE_MAP = {
    "snatch": "snatch",
    "sn": "snatch",
    "인상": "snatch",
    "cj": "cj",
    "c&j": "cj",
    "c_j": "cj",
    "clean_and_jerk": "cj",
    "clean & jerk": "cj",
    "clean and jerk": "cj",
    "용상": "cj",
}

STATUS_NORMALIZE_MAP = {
    "success": "success",
    "good": "success",
    "ok": "success",
    "○": "success",
    "fail": "fail",
    "no lift": "fail",
    "×": "fail",
    "pass": "pass",
    "패스": "pass",
    "pending": "pending",
    "": "pending",
}

_KG_SUFFIX_RE = re.compile(r"\s*kg\s*$", re.IGNORECASE)


# =============================================================================
# 정규화 함수들
# =============================================================================

def _lookup(value: Optional[Any], mapping: Dict[str, Optional[str]]) -> Optional[str]:
    if value is None:
        return None
    cleaned = str(value).strip()
    if cleaned in mapping:
        return mapping[cleaned]
    if cleaned.lower() in mapping:
        return mapping[cleaned.lower()]
    # 알 수 없는 값은 원본 유지 (스키마 검증에서 걸러짐)
    return cleaned


def normalize_gender(gender: Optional[str]) -> Optional[str]:
    """성별 정규화: 남/M/men → male"""
    return _lookup(gender, GENDER_NORMALIZE_MAP)


def normalize_discipline(discipline: Optional[str]) -> Optional[str]:
    """종목 정규화: C&J/용상 → cj"""
    return _lookup(discipline, DISCIPLINE_NORMALIZE_MAP)


def normalize_status(status: Optional[str]) -> str:
    """판정 정규화 (없으면 pending)"""
    return _lookup(status, STATUS_NORMALIZE_MAP) or "pending"


def normalize_weight_class(weight_class: Optional[Any]) -> Optional[str]:
    """
    체급 표기 정규화

    "81kg" → "81", "109+" → "+109", " +87 KG" → "+87", "" → None
    """
    if weight_class is None:
        return None
    value = _KG_SUFFIX_RE.sub("", str(weight_class).strip())
    value = value.replace(" ", "")
    if not value:
        return None
    if value.endswith("+") and not value.startswith("+"):
        value = "+" + value[:-1]
    return value


def normalize_athlete_record(athlete: Dict[str, Any]) -> Dict[str, Any]:
    """선수 레코드 정규화 (원본 dict는 변경하지 않음)"""
    normalized = dict(athlete)
    if "gender" in normalized:
        normalized["gender"] = normalize_gender(normalized.get("gender"))
    if "weight_class" in normalized:
        normalized["weight_class"] = normalize_weight_class(normalized.get("weight_class"))
    return normalized


def normalize_attempt_record(attempt: Dict[str, Any]) -> Dict[str, Any]:
    """시기 레코드 정규화 (type → discipline)"""
    normalized = dict(attempt)
    if "discipline" not in normalized and "type" in normalized:
        normalized["discipline"] = normalized.pop("type")
    if "discipline" in normalized:
        normalized["discipline"] = normalize_discipline(normalized.get("discipline"))
    normalized["status"] = normalize_status(normalized.get("status"))
    return normalized


def get_normalization_changes(original: Dict[str, Any], normalized: Dict[str, Any]) -> Dict[str, Tuple[Any, Any]]:
    """
    정규화 전후 변경 사항 추출

    Returns:
        {field: (old_value, new_value)}
    """
    changes = {}
    for key in set(original) | set(normalized):
        old = original.get(key)
        new = normalized.get(key)
        if old != new:
            changes[key] = (old, new)
    return changes
