"""
CLI 진입점 테스트
"""
import csv
import json

import pytest
from loguru import logger

import main
from scoring.config import get_config


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    """로그/출력 경로를 임시 디렉토리로 돌리고 설정 캐시 초기화"""
    monkeypatch.setenv("SCORING_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("SCORING_OUTPUT_DIR", str(tmp_path / "exports"))
    monkeypatch.setenv("SCORING_LOG_LEVEL", "WARNING")
    get_config.cache_clear()
    yield tmp_path
    get_config.cache_clear()
    logger.remove()


@pytest.fixture
def snapshot_file(cli_env, sample_snapshot_rows):
    path = cli_env / "snapshot.json"
    path.write_text(json.dumps(sample_snapshot_rows, ensure_ascii=False), encoding="utf-8")
    return path


class TestMain:
    """main() 실행 결과"""

    def test_prints_standings_and_writes_exports(self, cli_env, snapshot_file, capsys):
        csv_path = cli_env / "out.csv"
        json_path = cli_env / "out.json"

        code = main.main([
            "--data", str(snapshot_file),
            "--csv", str(csv_path),
            "--json", str(json_path),
            "--teams",
        ])

        assert code == 0
        out = capsys.readouterr().out
        assert "81kg" in out
        assert "팀 득점" in out

        with open(csv_path, encoding="utf-8-sig", newline="") as f:
            rows = list(csv.reader(f))
        assert len(rows) == 5
        assert [r[3] for r in rows[1:]] == ["박지영", "이민준", "김철수", "최동현"]

        data = json.loads(json_path.read_text(encoding="utf-8"))
        assert [t["team"] for t in data["teams"]] == ["부산고", "서울고"]
        assert [t["total_points"] for t in data["teams"]] == [8, 7]

    def test_csv_auto_uses_tournament_name(self, cli_env, snapshot_file):
        code = main.main(["--data", str(snapshot_file), "--csv-auto", "--quiet"])

        assert code == 0
        assert (cli_env / "exports" / "2025 전국 고교 역도대회_결과.csv").exists()

    def test_quiet_prints_nothing(self, cli_env, snapshot_file, capsys):
        assert main.main(["--data", str(snapshot_file), "--quiet"]) == 0
        assert capsys.readouterr().out == ""

    def test_missing_snapshot_returns_error(self, cli_env):
        assert main.main(["--data", str(cli_env / "nope.json"), "--quiet"]) == 1

    def test_invalid_json_returns_error(self, cli_env):
        path = cli_env / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        assert main.main(["--data", str(path), "--quiet"]) == 1

    def test_duplicate_attempt_rejected_unless_no_strict(self, cli_env, sample_snapshot_rows):
        sample_snapshot_rows["attempts"].append(dict(sample_snapshot_rows["attempts"][0]))
        path = cli_env / "dup.json"
        path.write_text(json.dumps(sample_snapshot_rows, ensure_ascii=False), encoding="utf-8")

        assert main.main(["--data", str(path), "--quiet"]) == 1
        assert main.main(["--data", str(path), "--quiet", "--no-strict"]) == 0

    def test_log_file_created(self, cli_env, snapshot_file):
        main.main(["--data", str(snapshot_file), "--quiet"])
        assert list((cli_env / "logs").glob("scoring_*.log"))


class TestBuildParser:
    """인자 기본값"""

    def test_defaults_from_config(self, cli_env, monkeypatch):
        monkeypatch.setenv("SCORING_SNAPSHOT_PATH", "custom/snap.json")
        get_config.cache_clear()

        args = main.build_parser().parse_args([])
        assert args.data == "custom/snap.json"
        assert args.top == 20
        assert not args.no_strict
