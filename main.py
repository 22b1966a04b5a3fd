"""
역도 대회 결과 계산 메인

스냅샷(JSON) → 검증 → 체급별 순위/팀 득점 → 출력/내보내기
"""
import argparse
import os
import sys
from typing import List, Optional

from loguru import logger

from data_pipeline import SnapshotRejectedError, load_snapshot
from scoring.calculator import ResultsCalculator
from scoring.config import get_config
from scoring.export import export_standings_json, results_filename, write_results_csv


def setup_logging(level: str = "INFO", log_dir: str = "logs"):
    """로깅 설정"""
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=level
    )
    logger.add(
        os.path.join(log_dir, "scoring_{time:YYYY-MM-DD}.log"),
        rotation="1 day",
        retention="30 days",
        level="DEBUG"
    )


def build_parser() -> argparse.ArgumentParser:
    config = get_config()

    parser = argparse.ArgumentParser(description="역도 대회 결과 계산기")
    parser.add_argument("--data", type=str, default=config.snapshot_path, help="스냅샷 JSON 파일")
    parser.add_argument("--csv", type=str, help="CSV 출력 파일")
    parser.add_argument("--csv-auto", action="store_true", help="출력 디렉토리에 '<대회명>_결과.csv'로 저장")
    parser.add_argument("--json", type=str, help="JSON 출력 파일")
    parser.add_argument("--teams", action="store_true", help="팀 득점 출력")
    parser.add_argument("--top", type=int, default=20, help="체급별 출력할 상위 N명")
    parser.add_argument("--no-strict", action="store_true", help="검증 오류가 있어도 계산")
    parser.add_argument("--quiet", action="store_true", help="순위표 출력 생략")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    config = get_config()
    args = build_parser().parse_args(argv)

    setup_logging(config.log_level, config.log_dir)

    strict = config.strict_validation and not args.no_strict
    try:
        snapshot = load_snapshot(args.data, strict=strict)
    except FileNotFoundError:
        logger.error(f"스냅샷 파일이 없습니다: {args.data}")
        return 1
    except SnapshotRejectedError as e:
        logger.error(str(e))
        return 1

    calculator = ResultsCalculator(cache_size=config.cache_size)
    calculator.load(snapshot.athletes, snapshot.attempts)
    standings = calculator.compute()

    if not args.quiet:
        calculator.print_standings_summary(standings, top_n=args.top)
        if args.teams:
            calculator.print_team_summary(standings)

    csv_path = args.csv
    if csv_path is None and args.csv_auto:
        csv_path = os.path.join(config.output_dir, results_filename(snapshot.tournament or "대회"))
    if csv_path:
        write_results_csv(standings.individual, csv_path, bom=config.csv_bom)

    if args.json:
        export_standings_json(standings, args.json)

    return 0


if __name__ == "__main__":
    sys.exit(main())
