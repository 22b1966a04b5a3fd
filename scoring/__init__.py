"""
역도 경기 결과 계산 엔진

시기 기록 → 체급별 순위/포인트 → 팀 득점
"""
from .models import (
    Athlete,
    Attempt,
    AthleteResult,
    AttemptStatus,
    CohortKey,
    Discipline,
    Gender,
    LiftInfo,
    Standings,
    TeamAthletePoints,
    TeamScore,
    WeightClassResult,
)
from .calculator import (
    ResultsCalculator,
    assign_ranks,
    best_lift,
    calculate_individual_results,
    calculate_standings,
    calculate_team_scores,
    group_by_cohort,
    index_attempts,
    lift_sort_key,
    map_attempts,
    points_for_rank,
    weight_class_sort_value,
    POINTS_TABLE,
    TEAM_TOP_N,
    WEIGHT_CLASS_SENTINEL,
)

__all__ = [
    "Athlete",
    "Attempt",
    "AthleteResult",
    "AttemptStatus",
    "CohortKey",
    "Discipline",
    "Gender",
    "LiftInfo",
    "Standings",
    "TeamAthletePoints",
    "TeamScore",
    "WeightClassResult",
    "ResultsCalculator",
    "assign_ranks",
    "best_lift",
    "calculate_individual_results",
    "calculate_standings",
    "calculate_team_scores",
    "group_by_cohort",
    "index_attempts",
    "lift_sort_key",
    "map_attempts",
    "points_for_rank",
    "weight_class_sort_value",
    "POINTS_TABLE",
    "TEAM_TOP_N",
    "WEIGHT_CLASS_SENTINEL",
]
