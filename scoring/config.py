"""
결과 계산기 설정
"""
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

load_dotenv()


class ScoringConfig(BaseSettings):
    """결과 계산 / 내보내기 설정"""

    # 입출력 경로
    snapshot_path: str = Field(default="data/snapshot.json", description="선수/시기 스냅샷 JSON")
    output_dir: str = Field(default="data/exports", description="CSV/JSON 출력 디렉토리")

    # 로깅
    log_level: str = Field(default="INFO", description="콘솔 로그 레벨")
    log_dir: str = Field(default="logs", description="로그 파일 디렉토리")

    # CSV (엑셀 호환용 BOM)
    csv_bom: bool = Field(default=True, description="CSV에 UTF-8 BOM 추가")

    # 계산 캐시 (스냅샷 내용 기준)
    cache_size: int = Field(default=8, ge=1, description="캐시할 스냅샷 수")

    # 치명적 검증 오류 시 계산 거부
    strict_validation: bool = Field(default=True, description="중복 시기 등 오류 시 거부")

    class Config:
        env_prefix = "SCORING_"
        case_sensitive = False


@lru_cache()
def get_config() -> ScoringConfig:
    return ScoringConfig()
