"""
역도 대회 상수 정의
"""
from typing import Optional

from .models import AttemptStatus

# IWF 규정 체급 (2024년~)
WEIGHT_CLASSES = {
    "male": ("55", "61", "67", "73", "81", "89", "96", "102", "109", "+109"),
    "female": ("45", "49", "55", "59", "64", "71", "76", "81", "87", "+87"),
}

GENDER_LABELS = {
    "male": "남자",
    "female": "여자",
}

# CSV 출력용 판정 표시
STATUS_MARKERS = {
    AttemptStatus.SUCCESS.value: "○",
    AttemptStatus.FAIL.value: "×",
    AttemptStatus.PASS.value: "패스",
    AttemptStatus.PENDING.value: "",
}


def gender_label(gender: str) -> str:
    """성별 표시명 (알 수 없으면 원래 값)"""
    return GENDER_LABELS.get(gender, gender)


def status_marker(status: Optional[str]) -> str:
    """판정 상태 표시 (○ / × / 패스)"""
    if status is None:
        return ""
    return STATUS_MARKERS.get(status, "")


def is_known_weight_class(gender: Optional[str], weight_class: Optional[str]) -> bool:
    """IWF 규정 체급인지 확인"""
    if gender is None or weight_class is None:
        return False
    return weight_class in WEIGHT_CLASSES.get(gender, ())
