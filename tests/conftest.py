"""
Pytest configuration and fixtures for weightlifting results tests
"""

import pytest
import sys
from datetime import datetime, timedelta
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from scoring.models import Athlete, Attempt


T0 = datetime(2025, 6, 1, 10, 0, 0)


def make_athlete(athlete_id, name=None, team=None, gender="male", weight_class="81", lot_number=None):
    return Athlete(
        id=athlete_id,
        name=name or athlete_id,
        team=team,
        gender=gender,
        weight_class=weight_class,
        lot_number=lot_number,
    )


def make_attempt(athlete_id, discipline, attempt_num, weight, status="success", minute=0):
    return Attempt(
        athlete_id=athlete_id,
        discipline=discipline,
        attempt_num=attempt_num,
        declared_weight=weight,
        status=status,
        updated_at=T0 + timedelta(minutes=minute),
    )


def make_lifts(athlete_id, snatch=(), cj=(), start_minute=0):
    """
    (중량, 판정) 목록으로 시기 생성. 시기마다 1분씩 증가, 용상은 인상 뒤 60분.
    """
    attempts = []
    for i, (weight, status) in enumerate(snatch, 1):
        attempts.append(make_attempt(athlete_id, "snatch", i, weight, status, start_minute + i))
    for i, (weight, status) in enumerate(cj, 1):
        attempts.append(make_attempt(athlete_id, "cj", i, weight, status, start_minute + 60 + i))
    return attempts


@pytest.fixture(scope="function")
def sample_snapshot_rows():
    """원본 행 형식의 스냅샷 (persistence 계층 출력 모양)"""
    return {
        "tournament": "2025 전국 고교 역도대회",
        "athletes": [
            {"id": "a1", "name": "김철수", "team": "서울고", "gender": "male", "weight_class": "81", "lot_number": 3},
            {"id": "a2", "name": "이민준", "team": "부산고", "gender": "male", "weight_class": "81", "lot_number": 7},
            {"id": "a3", "name": "박지영", "team": "서울고", "gender": "female", "weight_class": "64", "lot_number": 1},
            {"id": "a4", "name": "최동현", "team": None, "gender": "M", "weight_class": "109+", "lot_number": 2},
        ],
        "attempts": [
            {"athlete_id": "a1", "type": "snatch", "attempt_num": 1, "declared_weight": 100, "status": "success", "updated_at": "2025-06-01T10:01:00"},
            {"athlete_id": "a1", "type": "snatch", "attempt_num": 2, "declared_weight": 105, "status": "fail", "updated_at": "2025-06-01T10:05:00"},
            {"athlete_id": "a1", "type": "cj", "attempt_num": 1, "declared_weight": 125, "status": "success", "updated_at": "2025-06-01T11:01:00"},
            {"athlete_id": "a2", "type": "snatch", "attempt_num": 1, "declared_weight": 98, "status": "success", "updated_at": "2025-06-01T10:02:00"},
            {"athlete_id": "a2", "type": "cj", "attempt_num": 1, "declared_weight": 130, "status": "success", "updated_at": "2025-06-01T11:02:00"},
            {"athlete_id": "a3", "type": "snatch", "attempt_num": 1, "declared_weight": 70, "status": "success", "updated_at": "2025-06-01T13:01:00"},
            {"athlete_id": "a3", "type": "cj", "attempt_num": 1, "declared_weight": 90, "status": "pass", "updated_at": "2025-06-01T14:01:00"},
            {"athlete_id": "a4", "type": "snatch", "attempt_num": 1, "declared_weight": 140, "status": "success", "updated_at": "2025-06-01T15:01:00"},
            {"athlete_id": "a4", "type": "cj", "attempt_num": 1, "declared_weight": 170, "status": "success", "updated_at": "2025-06-01T16:01:00"},
        ],
    }
