"""
펜싱 클럽 리더보드

Elo 레이팅 + 시간 감쇠 포인트 계산 모듈
"""
from .models import (
    Weapon,
    Fencer,
    Bout,
    BoutsByWeapon,
    empty_bouts_by_weapon,
)
from .calculator import (
    LeaderboardEntry,
    calculate_leaderboard,
    calculate_win_chance,
    calculate_rating_change,
    INITIAL_RATING,
    LEADERBOARD_MONTHS_EXPIRE,
)
from .export import (
    format_leaderboard_text,
    format_bout_history_text,
)

__all__ = [
    "Weapon",
    "Fencer",
    "Bout",
    "BoutsByWeapon",
    "empty_bouts_by_weapon",
    "LeaderboardEntry",
    "calculate_leaderboard",
    "calculate_win_chance",
    "calculate_rating_change",
    "INITIAL_RATING",
    "LEADERBOARD_MONTHS_EXPIRE",
    "format_leaderboard_text",
    "format_bout_history_text",
]
