"""
결과 내보내기 테스트 (CSV / JSON)
"""
import csv
import json
from datetime import datetime

import pytest

from conftest import make_athlete, make_lifts
from scoring.calculator import calculate_standings
from scoring.export import (
    RESULT_HEADERS,
    athlete_row,
    build_standings_payload,
    export_standings_json,
    flatten_results,
    results_filename,
    team_rows,
    write_results_csv,
)


@pytest.fixture
def standings():
    athletes = [
        make_athlete("a", name="김철수", team="서울고"),
        make_athlete("b", name="이민준"),
        make_athlete("c", name="박지영", team="서울고", gender="female", weight_class="64"),
    ]
    attempts = (
        make_lifts("a", snatch=[(100, "success"), (105, "fail")], cj=[(120, "pass"), (125, "success")])
        + make_lifts("b", snatch=[(90, "fail")] * 3)
        + make_lifts("c", snatch=[(70, "success")], cj=[(90, "success")])
    )
    return calculate_standings(athletes, attempts)


def _male_81(standings):
    return next(w for w in standings.individual if w.weight_class == "81")


class TestCsvRows:
    """CSV 행 구성"""

    def test_row_layout(self, standings):
        wcr = _male_81(standings)
        row = athlete_row(wcr, wcr.athletes[0])
        assert len(row) == len(RESULT_HEADERS)
        assert row == [
            "81kg", "남자", "1", "김철수", "서울고",
            "100", "○", "105", "×", "", "",
            "100", "1",
            "120", "패스", "125", "○", "", "",
            "125", "1",
            "225", "8",
        ]

    def test_unranked_athlete_has_blank_cells(self, standings):
        wcr = _male_81(standings)
        row = athlete_row(wcr, wcr.athletes[1])
        assert row[2] == ""          # 합계 순위
        assert row[4] == ""          # 소속
        assert row[11] == ""         # 인상 최고
        assert row[12] == ""         # 인상 순위
        assert row[21] == ""         # 합계
        assert row[22] == ""         # 점수 (0점은 빈칸)

    def test_flatten_follows_cohort_order(self, standings):
        rows = flatten_results(standings.individual)
        assert [(r[0], r[1], r[3]) for r in rows] == [
            ("64kg", "여자", "박지영"),
            ("81kg", "남자", "김철수"),
            ("81kg", "남자", "이민준"),
        ]

    def test_team_rows(self, standings):
        rows = team_rows(standings.teams)
        assert rows == [["1", "서울고", "16", "박지영(8), 김철수(8)", "박지영(8), 김철수(8)"]]


class TestWriteCsv:
    """CSV 파일 저장"""

    def test_writes_bom_and_rows(self, standings, tmp_path):
        path = tmp_path / "out" / "results.csv"
        count = write_results_csv(standings.individual, str(path))

        assert count == 3
        raw = path.read_bytes()
        assert raw.startswith(b"\xef\xbb\xbf")
        assert b"\r\n" in raw

        with open(path, encoding="utf-8-sig", newline="") as f:
            rows = list(csv.reader(f))
        assert rows[0] == RESULT_HEADERS
        assert len(rows) == 4
        assert rows[2][3] == "김철수"

    def test_without_bom(self, standings, tmp_path):
        path = tmp_path / "results.csv"
        write_results_csv(standings.individual, str(path), bom=False)
        assert not path.read_bytes().startswith(b"\xef\xbb\xbf")

    def test_all_fields_quoted(self, standings, tmp_path):
        path = tmp_path / "results.csv"
        write_results_csv(standings.individual, str(path))
        first_line = path.read_text(encoding="utf-8-sig").splitlines()[0]
        assert first_line.startswith('"체급","성별"')

    @pytest.mark.parametrize("name,expected", [
        ("2025 전국체전", "2025 전국체전_결과.csv"),
        ("A/B 대회", "A_B 대회_결과.csv"),
        ("   ", "대회_결과.csv"),
    ])
    def test_results_filename(self, name, expected):
        assert results_filename(name) == expected


class TestJsonPayload:
    """JSON 내보내기"""

    def test_payload_structure(self, standings):
        generated = datetime(2025, 6, 1, 18, 0, 0)
        payload = build_standings_payload(standings, generated_at=generated)

        assert payload["meta"] == {
            "generated_at": "2025-06-01T18:00:00",
            "weight_classes": 2,
            "athletes": 3,
            "teams": 1,
        }
        male = payload["individual"][1]
        assert male["gender"] == "male"
        assert male["weight_class"] == "81"
        first = male["athletes"][0]
        assert first["total"] == 225
        assert first["points"] == 8
        assert first["snatch_attempts"][2] is None
        assert first["cj_attempts"][0] == {"weight": 120, "status": "pass"}

        team = payload["teams"][0]
        assert team["rank"] == 1
        assert team["total_points"] == 16
        assert {a["weight_class"] for a in team["top_athletes"]} == {"64", "81"}

    def test_export_file_is_valid_json(self, standings, tmp_path):
        path = tmp_path / "json" / "standings.json"
        export_standings_json(standings, str(path))

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["individual"][0]["athletes"][0]["name"] == "박지영"
        assert data["teams"][0]["team"] == "서울고"
