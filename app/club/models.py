"""
Club API Models

요청/응답 Pydantic 모델 정의
"""

from datetime import date, datetime
from typing import Optional, Dict
from pydantic import BaseModel, Field

from ranking.calculator import LeaderboardEntry
from ranking.models import MAX_BOUT_SCORE, Weapon


# =============================================
# 선수
# =============================================

class FencerCreate(BaseModel):
    """선수 등록 요청"""
    name: str = Field(..., min_length=1, max_length=100, description="선수 이름")


class FencerResponse(BaseModel):
    """선수 정보"""
    id: str
    name: str


class FencerDeleteResponse(BaseModel):
    """선수 삭제 결과"""
    message: str
    removed_bouts: int = 0


# =============================================
# 경기
# =============================================

class BoutCreate(BaseModel):
    """경기 기록/수정 요청"""
    fencer1_id: str = Field(..., description="선수 1 ID")
    fencer2_id: str = Field(..., description="선수 2 ID")
    referee_id: str = Field(..., description="심판 ID")
    score1: int = Field(..., ge=0, le=MAX_BOUT_SCORE)
    score2: int = Field(..., ge=0, le=MAX_BOUT_SCORE)
    bout_date: Optional[date] = Field(None, description="경기 날짜 (생략시 오늘)")


class BoutResponse(BaseModel):
    """경기 정보"""
    id: str
    date: datetime
    weapon: Weapon
    fencer1_id: str
    fencer2_id: str
    referee_id: str
    score1: int
    score2: int


# =============================================
# 리더보드
# =============================================

class LeaderboardRow(BaseModel):
    """리더보드 행"""
    rank: int
    id: str
    name: str
    bouts: int
    wins: int
    rating: float
    points: float
    refereed_bouts: int

    @classmethod
    def from_entry(cls, rank: int, entry: LeaderboardEntry) -> "LeaderboardRow":
        return cls(rank=rank, **entry.to_dict())


class StatusResponse(BaseModel):
    """서버 상태"""
    status: str = "ok"
    fencers: int = 0
    bouts: Dict[str, int] = Field(default_factory=dict)
