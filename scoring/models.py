"""
역도 경기 결과 데이터 모델

입력(선수, 시기)과 계산 결과(개인/체급/팀 성적)를 불변 dataclass로 정의
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import NamedTuple, Optional, Tuple


class Gender(str, Enum):
    """성별"""
    MALE = "male"
    FEMALE = "female"


class Discipline(str, Enum):
    """종목 (인상 / 용상)"""
    SNATCH = "snatch"
    CLEAN_AND_JERK = "cj"


class AttemptStatus(str, Enum):
    """시기 판정 상태"""
    PENDING = "pending"
    SUCCESS = "success"
    FAIL = "fail"
    PASS = "pass"


UNKNOWN = "unknown"


# =====================================================
# 입력 레코드
# =====================================================

@dataclass(frozen=True)
class Athlete:
    """선수 등록 정보"""
    id: str
    name: str
    team: Optional[str] = None
    gender: Optional[str] = None
    weight_class: Optional[str] = None      # "81", "+109" 등
    lot_number: Optional[int] = None        # 추첨 번호


@dataclass(frozen=True)
class Attempt:
    """시기 기록 (athlete_id, discipline, attempt_num)이 자연키"""
    athlete_id: str
    discipline: str                         # "snatch" | "cj"
    attempt_num: int                        # 1..3
    declared_weight: Optional[int]
    status: str                             # pending | success | fail | pass
    updated_at: datetime

    @property
    def is_success(self) -> bool:
        return self.status == AttemptStatus.SUCCESS.value

    @property
    def natural_key(self) -> Tuple[str, str, int]:
        return (self.athlete_id, self.discipline, self.attempt_num)


# =====================================================
# 계산 결과
# =====================================================

@dataclass(frozen=True)
class LiftInfo:
    """순위 비교용 기록 정보 (기록, 성공 시기 번호, 기록 시각)"""
    weight: int
    attempt_num: int
    recorded_at: datetime


class CohortKey(NamedTuple):
    """체급 그룹 키 (성별, 체급)"""
    gender: str
    weight_class: str


AttemptSlots = Tuple[Optional[Attempt], Optional[Attempt], Optional[Attempt]]


@dataclass(frozen=True)
class AthleteResult:
    """선수별 계산 결과"""
    athlete: Athlete
    best_snatch: Optional[int]
    best_cj: Optional[int]
    total: Optional[int]
    snatch_rank: Optional[int]
    cj_rank: Optional[int]
    total_rank: Optional[int]
    points: int
    snatch_attempts: AttemptSlots = (None, None, None)
    cj_attempts: AttemptSlots = (None, None, None)


@dataclass(frozen=True)
class WeightClassResult:
    """체급별 순위표"""
    gender: str
    weight_class: str
    athletes: Tuple[AthleteResult, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class TeamAthletePoints:
    """팀 득점에 기여한 선수 한 명"""
    name: str
    weight_class: str
    points: int


@dataclass(frozen=True)
class TeamScore:
    """팀 득점 (상위 5명 합산)"""
    team: str
    total_points: int
    top_athletes: Tuple[TeamAthletePoints, ...]
    all_athlete_points: Tuple[TeamAthletePoints, ...]


@dataclass(frozen=True)
class Standings:
    """대회 전체 결과 (개인 체급별 + 팀)"""
    individual: Tuple[WeightClassResult, ...]
    teams: Tuple[TeamScore, ...]
