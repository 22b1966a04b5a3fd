"""
결과 내보내기

- 체급별 결과 → 선수당 1행 CSV (엑셀 호환 BOM 포함 UTF-8)
- 개인/팀 결과 → JSON
"""
import csv
import json
import os
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from loguru import logger

from .constants import gender_label, status_marker
from .models import AthleteResult, AttemptSlots, Standings, TeamScore, WeightClassResult


RESULT_HEADERS = [
    "체급",
    "성별",
    "합계 순위",
    "이름",
    "소속",
    "인상 1차",
    "인상 1차 판정",
    "인상 2차",
    "인상 2차 판정",
    "인상 3차",
    "인상 3차 판정",
    "인상 최고",
    "인상 순위",
    "용상 1차",
    "용상 1차 판정",
    "용상 2차",
    "용상 2차 판정",
    "용상 3차",
    "용상 3차 판정",
    "용상 최고",
    "용상 순위",
    "합계",
    "점수",
]

TEAM_HEADERS = ["순위", "팀", "총점", "집계 선수", "전체 선수"]


def _cell(value: Optional[Any]) -> str:
    return "" if value is None else str(value)


def _attempt_cells(slots: AttemptSlots) -> List[str]:
    cells: List[str] = []
    for attempt in slots:
        if attempt is None:
            cells.extend(["", ""])
            continue
        cells.append(_cell(attempt.declared_weight))
        cells.append(status_marker(attempt.status))
    return cells


def athlete_row(wcr: WeightClassResult, ar: AthleteResult) -> List[str]:
    """선수 한 명의 CSV 행"""
    row = [
        f"{wcr.weight_class}kg",
        gender_label(wcr.gender),
        _cell(ar.total_rank),
        ar.athlete.name,
        _cell(ar.athlete.team),
    ]
    row.extend(_attempt_cells(ar.snatch_attempts))
    row.append(_cell(ar.best_snatch))
    row.append(_cell(ar.snatch_rank))
    row.extend(_attempt_cells(ar.cj_attempts))
    row.append(_cell(ar.best_cj))
    row.append(_cell(ar.cj_rank))
    row.append(_cell(ar.total))
    row.append(str(ar.points) if ar.points > 0 else "")
    return row


def flatten_results(results: Iterable[WeightClassResult]) -> List[List[str]]:
    """체급별 결과를 선수당 1행으로 평탄화 (헤더 제외)"""
    return [
        athlete_row(wcr, ar)
        for wcr in results
        for ar in wcr.athletes
    ]


def team_rows(teams: Iterable[TeamScore]) -> List[List[str]]:
    """팀 득점 표 (헤더 제외)"""
    rows = []
    for rank, score in enumerate(teams, 1):
        rows.append([
            str(rank),
            score.team,
            str(score.total_points),
            ", ".join(f"{a.name}({a.points})" for a in score.top_athletes),
            ", ".join(f"{a.name}({a.points})" for a in score.all_athlete_points),
        ])
    return rows


def results_filename(tournament_name: str) -> str:
    """CSV 파일명 (경로 구분자 제거)"""
    safe = tournament_name.replace("/", "_").replace("\\", "_").strip() or "대회"
    return f"{safe}_결과.csv"


def write_results_csv(
    results: Iterable[WeightClassResult],
    path: str,
    bom: bool = True
) -> int:
    """
    체급별 결과 CSV 저장

    Returns:
        기록한 선수 행 수
    """
    rows = flatten_results(results)
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    encoding = "utf-8-sig" if bom else "utf-8"
    with open(path, "w", encoding=encoding, newline="") as f:
        writer = csv.writer(f, quoting=csv.QUOTE_ALL, lineterminator="\r\n")
        writer.writerow(RESULT_HEADERS)
        writer.writerows(rows)

    logger.info(f"CSV 내보내기 완료: {path} ({len(rows)}행)")
    return len(rows)


def _athlete_payload(ar: AthleteResult) -> Dict[str, Any]:
    def attempts(slots: AttemptSlots) -> List[Optional[Dict[str, Any]]]:
        return [
            None if a is None else {
                "weight": a.declared_weight,
                "status": a.status,
            }
            for a in slots
        ]

    return {
        "id": ar.athlete.id,
        "name": ar.athlete.name,
        "team": ar.athlete.team,
        "lot_number": ar.athlete.lot_number,
        "best_snatch": ar.best_snatch,
        "best_cj": ar.best_cj,
        "total": ar.total,
        "snatch_rank": ar.snatch_rank,
        "cj_rank": ar.cj_rank,
        "total_rank": ar.total_rank,
        "points": ar.points,
        "snatch_attempts": attempts(ar.snatch_attempts),
        "cj_attempts": attempts(ar.cj_attempts),
    }


def build_standings_payload(
    standings: Standings,
    generated_at: Optional[datetime] = None
) -> Dict[str, Any]:
    """개인/팀 결과 JSON 구조"""
    generated_at = generated_at or datetime.now()
    return {
        "meta": {
            "generated_at": generated_at.isoformat(),
            "weight_classes": len(standings.individual),
            "athletes": sum(len(w.athletes) for w in standings.individual),
            "teams": len(standings.teams),
        },
        "individual": [
            {
                "gender": wcr.gender,
                "weight_class": wcr.weight_class,
                "athletes": [_athlete_payload(ar) for ar in wcr.athletes],
            }
            for wcr in standings.individual
        ],
        "teams": [
            {
                "rank": rank,
                "team": score.team,
                "total_points": score.total_points,
                "top_athletes": [
                    {"name": a.name, "weight_class": a.weight_class, "points": a.points}
                    for a in score.top_athletes
                ],
                "all_athlete_points": [
                    {"name": a.name, "weight_class": a.weight_class, "points": a.points}
                    for a in score.all_athlete_points
                ],
            }
            for rank, score in enumerate(standings.teams, 1)
        ],
    }


def export_standings_json(standings: Standings, output_file: str):
    """결과를 JSON으로 내보내기"""
    directory = os.path.dirname(output_file)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(build_standings_payload(standings), f, ensure_ascii=False, indent=2)

    logger.info(f"결과 내보내기 완료: {output_file}")
