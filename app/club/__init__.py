"""
Club Leaderboard Module

펜싱 클럽 명단 / 경기 기록 / 리더보드
"""

from .router import router as club_router, get_club_service
from .service import ClubService

__all__ = [
    "club_router",
    "get_club_service",
    "ClubService",
]
