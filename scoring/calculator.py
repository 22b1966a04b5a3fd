"""
역도 경기 결과 계산 모듈

IWF 규정 기반 순위 계산
- 인상/용상 종목별 최고 성공 기록
- 동일 기록 시 성공 시기 번호 → 기록 시각 → 추첨 번호 순 판정
- 체급별 인상/용상/합계 순위 (공동 순위 없음)
- 합계 순위별 포인트 (1위 8점 ~ 8위 1점)
- 팀 득점: 상위 5명 포인트 합산
"""
import re
from collections import defaultdict
from functools import lru_cache
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from loguru import logger

from .models import (
    UNKNOWN,
    Athlete,
    AthleteResult,
    Attempt,
    AttemptSlots,
    CohortKey,
    Discipline,
    LiftInfo,
    Standings,
    TeamAthletePoints,
    TeamScore,
    WeightClassResult,
)


# =====================================================
# 상수 정의
# =====================================================

# 합계 순위별 포인트: 1위=8점, 2위=7점, ... 8위=1점. 9위 이하=0점
POINTS_TABLE = (8, 7, 6, 5, 4, 3, 2, 1)

# 팀 득점 합산 인원
TEAM_TOP_N = 5

# 시기 슬롯 수
ATTEMPTS_PER_DISCIPLINE = 3

# 체급 표기를 해석할 수 없을 때의 정렬값 (해당 성별 맨 뒤)
WEIGHT_CLASS_SENTINEL = 999.0

# 추첨 번호가 없을 때의 정렬값
LOT_NUMBER_SENTINEL = 9999

_CLASS_NUMBER_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)")


# =====================================================
# 시기 매핑 / 최고 기록
# =====================================================

def index_attempts(attempts: Iterable[Attempt]) -> Dict[Tuple[str, str], AttemptSlots]:
    """
    시기 목록을 (선수, 종목)별 3칸 슬롯으로 변환

    같은 (선수, 종목, 시기 번호)가 중복되면 마지막 레코드가 남는다.
    범위(1..3)를 벗어난 시기 번호는 무시한다.
    """
    slots: Dict[Tuple[str, str], List[Optional[Attempt]]] = defaultdict(
        lambda: [None] * ATTEMPTS_PER_DISCIPLINE
    )
    for attempt in attempts:
        if not 1 <= attempt.attempt_num <= ATTEMPTS_PER_DISCIPLINE:
            continue
        slots[(attempt.athlete_id, attempt.discipline)][attempt.attempt_num - 1] = attempt

    return {key: tuple(value) for key, value in slots.items()}


def map_attempts(
    attempts: Iterable[Attempt],
    athlete_id: str,
    discipline: str
) -> AttemptSlots:
    """한 선수의 한 종목 시기를 3칸 슬롯으로 반환"""
    index = index_attempts(
        a for a in attempts
        if a.athlete_id == athlete_id and a.discipline == discipline
    )
    return index.get((athlete_id, discipline), (None, None, None))


def best_lift(attempts: Sequence[Optional[Attempt]]) -> Optional[LiftInfo]:
    """
    성공 시기 중 최고 기록과 그 시기 정보

    실패/패스/미판정/빈 슬롯은 무시. 동일 중량이 두 번 성공한 경우
    먼저 나온 시기를 유지한다.

    Returns:
        LiftInfo 또는 성공 시기가 없으면 None
    """
    best: Optional[LiftInfo] = None
    for attempt in attempts:
        if attempt is None or not attempt.is_success:
            continue
        if attempt.declared_weight is None:
            continue
        if best is None or attempt.declared_weight > best.weight:
            best = LiftInfo(
                weight=attempt.declared_weight,
                attempt_num=attempt.attempt_num,
                recorded_at=attempt.updated_at,
            )
    return best


def total_lift(snatch: Optional[LiftInfo], cj: Optional[LiftInfo]) -> Optional[LiftInfo]:
    """
    합계 기록 정보

    합계 동률 판정은 마지막 종목인 용상의 성공 시기 정보를 사용한다.
    """
    if snatch is None or cj is None:
        return None
    return LiftInfo(
        weight=snatch.weight + cj.weight,
        attempt_num=cj.attempt_num,
        recorded_at=cj.recorded_at,
    )


# =====================================================
# 순위 / 포인트
# =====================================================

def lift_sort_key(info: LiftInfo, lot_number: Optional[int] = None) -> tuple:
    """
    IWF 동률 판정 정렬 키

    1. 기록 내림차순
    2. 성공 시기 번호 오름차순 (적은 시기에 성공한 선수 우선)
    3. 기록 시각 오름차순 (먼저 성공한 선수 우선)
    4. 추첨 번호 오름차순
    """
    lot = lot_number if lot_number is not None else LOT_NUMBER_SENTINEL
    return (-info.weight, info.attempt_num, info.recorded_at, lot)


def assign_ranks(
    values: Sequence[Optional[LiftInfo]],
    lot_numbers: Optional[Sequence[Optional[int]]] = None
) -> List[Optional[int]]:
    """
    순위 부여

    기록이 있는 선수만 1..N 순위를 받고 (공동 순위 없음),
    기록이 없는 선수는 None.

    Returns:
        입력 순서와 같은 위치의 순위 리스트
    """
    lots = list(lot_numbers) if lot_numbers is not None else [None] * len(values)
    ranked = [i for i, value in enumerate(values) if value is not None]
    ranked.sort(key=lambda i: lift_sort_key(values[i], lots[i]))

    ranks: List[Optional[int]] = [None] * len(values)
    for rank, i in enumerate(ranked, 1):
        ranks[i] = rank
    return ranks


def points_for_rank(rank: Optional[int]) -> int:
    """합계 순위별 포인트 (9위 이하, 순위 없음 = 0)"""
    if rank is None or rank < 1 or rank > len(POINTS_TABLE):
        return 0
    return POINTS_TABLE[rank - 1]


# =====================================================
# 체급 그룹화 / 정렬
# =====================================================

def _label_or_unknown(value: Optional[str]) -> str:
    if value is None or not value.strip():
        return UNKNOWN
    return value


def cohort_key(athlete: Athlete) -> CohortKey:
    """선수의 체급 그룹 키 (성별/체급 누락 시 unknown)"""
    return CohortKey(
        gender=_label_or_unknown(athlete.gender),
        weight_class=_label_or_unknown(athlete.weight_class),
    )


def group_by_cohort(athletes: Iterable[Athlete]) -> Dict[CohortKey, List[Athlete]]:
    """성별 × 체급으로 그룹화 (처음 등장한 순서 유지)"""
    groups: Dict[CohortKey, List[Athlete]] = {}
    for athlete in athletes:
        groups.setdefault(cohort_key(athlete), []).append(athlete)
    return groups


def weight_class_sort_value(weight_class: str) -> float:
    """
    체급 정렬값

    "+109", "109+" 는 109로 비교. 숫자로 해석할 수 없는 체급은
    WEIGHT_CLASS_SENTINEL.
    """
    # 첫 번째 '+'만 제거 ("1++0" → 1)
    match = _CLASS_NUMBER_RE.match(weight_class.replace("+", "", 1))
    if not match:
        return WEIGHT_CLASS_SENTINEL
    value = float(match.group(1))
    if value <= 0:
        return WEIGHT_CLASS_SENTINEL
    return value


def cohort_sort_key(result: WeightClassResult) -> tuple:
    """체급 결과 정렬 키: 성별 → 체급 수치 → 무제한급(+) 뒤 → 표기"""
    return (
        result.gender,
        weight_class_sort_value(result.weight_class),
        "+" in result.weight_class,
        result.weight_class,
    )


# =====================================================
# 개인 성적
# =====================================================

def score_cohort(
    key: CohortKey,
    athletes: Sequence[Athlete],
    attempt_index: Dict[Tuple[str, str], AttemptSlots]
) -> WeightClassResult:
    """한 체급의 기록/순위/포인트 계산"""
    empty: AttemptSlots = (None, None, None)
    snatch_slots = [
        attempt_index.get((a.id, Discipline.SNATCH.value), empty) for a in athletes
    ]
    cj_slots = [
        attempt_index.get((a.id, Discipline.CLEAN_AND_JERK.value), empty) for a in athletes
    ]

    snatch_info = [best_lift(slots) for slots in snatch_slots]
    cj_info = [best_lift(slots) for slots in cj_slots]
    total_info = [total_lift(sn, cj) for sn, cj in zip(snatch_info, cj_info)]

    lots = [a.lot_number for a in athletes]
    snatch_ranks = assign_ranks(snatch_info, lots)
    cj_ranks = assign_ranks(cj_info, lots)
    total_ranks = assign_ranks(total_info, lots)

    results = [
        AthleteResult(
            athlete=athlete,
            best_snatch=snatch_info[i].weight if snatch_info[i] is not None else None,
            best_cj=cj_info[i].weight if cj_info[i] is not None else None,
            total=total_info[i].weight if total_info[i] is not None else None,
            snatch_rank=snatch_ranks[i],
            cj_rank=cj_ranks[i],
            total_rank=total_ranks[i],
            points=points_for_rank(total_ranks[i]),
            snatch_attempts=snatch_slots[i],
            cj_attempts=cj_slots[i],
        )
        for i, athlete in enumerate(athletes)
    ]

    # 합계 순위순, 순위 없는 선수는 뒤로 (입력 순서 유지)
    results.sort(key=lambda r: (r.total_rank is None, r.total_rank or 0))

    logger.debug(
        f"{key.gender} {key.weight_class}: {len(results)}명, "
        f"합계 순위 {sum(1 for r in results if r.total_rank is not None)}명"
    )

    return WeightClassResult(
        gender=key.gender,
        weight_class=key.weight_class,
        athletes=tuple(results),
    )


def calculate_individual_results(
    athletes: Iterable[Athlete],
    attempts: Iterable[Attempt]
) -> List[WeightClassResult]:
    """
    전체 선수의 개인 성적을 체급별로 그룹화하여 순위 계산

    Args:
        athletes: 대회 선수 목록
        attempts: 대회 시기 기록 목록

    Returns:
        성별 → 체급 순으로 정렬된 체급별 결과
    """
    attempt_index = index_attempts(attempts)
    groups = group_by_cohort(athletes)

    results = [
        score_cohort(key, members, attempt_index)
        for key, members in groups.items()
    ]
    results.sort(key=cohort_sort_key)
    return results


# =====================================================
# 팀 득점
# =====================================================

def calculate_team_scores(
    weight_class_results: Iterable[WeightClassResult]
) -> List[TeamScore]:
    """
    팀 득점 계산

    소속이 있고 포인트가 있는 선수만 집계. 팀별 포인트 내림차순 정렬 후
    상위 TEAM_TOP_N명 합산. 팀은 총점 내림차순.
    """
    team_map: Dict[str, List[TeamAthletePoints]] = {}

    for wcr in weight_class_results:
        for ar in wcr.athletes:
            team = ar.athlete.team
            if team is None or not team.strip() or ar.points == 0:
                continue
            team_map.setdefault(team.strip(), []).append(
                TeamAthletePoints(
                    name=ar.athlete.name,
                    weight_class=wcr.weight_class,
                    points=ar.points,
                )
            )

    scores: List[TeamScore] = []
    for team, entries in team_map.items():
        entries.sort(key=lambda e: -e.points)
        top = tuple(entries[:TEAM_TOP_N])
        scores.append(
            TeamScore(
                team=team,
                total_points=sum(e.points for e in top),
                top_athletes=top,
                all_athlete_points=tuple(entries),
            )
        )

    scores.sort(key=lambda s: -s.total_points)
    return scores


def calculate_standings(
    athletes: Iterable[Athlete],
    attempts: Iterable[Attempt]
) -> Standings:
    """개인 체급별 결과와 팀 득점을 한 번에 계산"""
    individual = calculate_individual_results(athletes, attempts)
    teams = calculate_team_scores(individual)
    return Standings(individual=tuple(individual), teams=tuple(teams))


# =====================================================
# 결과 계산기 클래스
# =====================================================

class ResultsCalculator:
    """
    대회 결과 계산기

    스냅샷(선수/시기)을 받아 결과를 계산한다. 같은 스냅샷 내용이면
    캐시된 결과를 반환 (결과 객체는 불변).
    """

    def __init__(self, cache_size: int = 8):
        self.athletes: Tuple[Athlete, ...] = ()
        self.attempts: Tuple[Attempt, ...] = ()
        self._compute = lru_cache(maxsize=cache_size)(self._compute_uncached)

    @staticmethod
    def _compute_uncached(
        athletes: Tuple[Athlete, ...],
        attempts: Tuple[Attempt, ...]
    ) -> Standings:
        return calculate_standings(athletes, attempts)

    def load(self, athletes: Iterable[Athlete], attempts: Iterable[Attempt]):
        """스냅샷 교체"""
        self.athletes = tuple(athletes)
        self.attempts = tuple(attempts)
        logger.info(f"스냅샷 로드: 선수 {len(self.athletes)}명, 시기 {len(self.attempts)}건")

    def compute(self) -> Standings:
        """현재 스냅샷의 결과"""
        return self._compute(self.athletes, self.attempts)

    def cache_info(self):
        return self._compute.cache_info()

    def print_standings_summary(self, standings: Standings, top_n: int = 20):
        """체급별 순위 요약 출력"""
        for wcr in standings.individual:
            print(f"\n{'='*72}")
            print(f" {wcr.gender} {wcr.weight_class}kg")
            print(f"{'='*72}")
            print(f"{'순위':>4} {'이름':<12} {'소속':<15} {'인상':>5} {'용상':>5} {'합계':>5} {'점수':>4}")
            print(f"{'-'*72}")

            for ar in wcr.athletes[:top_n]:
                team = ar.athlete.team or "-"
                if len(team) > 12:
                    team = team[:12] + ".."
                print(
                    f"{_fmt(ar.total_rank):>4} {ar.athlete.name:<12} {team:<15} "
                    f"{_fmt(ar.best_snatch):>5} {_fmt(ar.best_cj):>5} "
                    f"{_fmt(ar.total):>5} {ar.points:>4}"
                )

    def print_team_summary(self, standings: Standings):
        """팀 득점 출력"""
        print(f"\n{'='*48}")
        print(f" 팀 득점 (상위 {TEAM_TOP_N}명)")
        print(f"{'='*48}")
        for rank, score in enumerate(standings.teams, 1):
            print(f"{rank:>4} {score.team:<24} {score.total_points:>6}")


def _fmt(value: Optional[int]) -> str:
    return "-" if value is None else str(value)
