"""
클럽 리더보드 설정
"""
from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()


class ClubSettings(BaseSettings):
    """클럽 서버 설정 (환경변수 CLUB_*)"""

    # 저장소
    storage_backend: str = Field(default="file", description="저장소 종류 (file/memory)")
    data_dir: str = Field(default="data", description="JSON 저장 디렉토리")

    # 서버
    host: str = Field(default="0.0.0.0", description="바인드 주소")
    port: int = Field(default=7171, description="포트")

    # 로깅
    log_level: str = Field(default="INFO", description="콘솔 로그 레벨")
    log_dir: str = Field(default="logs", description="로그 파일 디렉토리")

    class Config:
        env_prefix = "CLUB_"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_settings() -> ClubSettings:
    return ClubSettings()
