"""
클럽 리더보드 계산 모듈

Elo 방식 레이팅 + 시간 감쇠 포인트
- 경기 날짜순 전체 재계산 (증분 상태 없음)
- 점수차 보정 레이팅 변화
- 12개월 선형 감쇠 포인트
- 같은 날 경기 수에 따른 포인트 배수
"""
from datetime import datetime
from typing import List, Dict, Any, Iterable, Optional
from dataclasses import dataclass, asdict
from loguru import logger

from .models import Bout, Fencer


# =====================================================
# 상수 정의
# =====================================================

INITIAL_RATING = 1000          # 시작 레이팅
CURVE_CONSTANT = 400           # 기대 승률 곡선
BASE_CHANGE = 80               # 레이팅 최대 변화량
WIN_BONUS = 1                  # 점수차 보정 가산값
MAX_SCORE = 15                 # DE 만점
LEADERBOARD_MONTHS_EXPIRE = 12 # 포인트 유효 기간 (월)
MULTIPLIER_AMOUNT = 0.05       # 같은 날 경기당 포인트 배수 증가분
POINTS_BOUT = 10               # 경기 참가 포인트
POINTS_WIN = 60                # 승리 포인트
POINTS_TOUCH = 20              # 득점(투셰)당 포인트


# =====================================================
# 데이터 클래스
# =====================================================

@dataclass
class LeaderboardEntry:
    """리더보드 항목 (매 요청마다 재계산, 저장하지 않음)"""
    id: str
    name: str
    bouts: int = 0
    wins: int = 0
    rating: float = float(INITIAL_RATING)
    points: float = 0.0
    refereed_bouts: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# =====================================================
# 계산 함수
# =====================================================

def calculate_win_chance(rating1: float, rating2: float) -> float:
    """선수 1의 기대 승률: 1 / (1 + 10^((R2 - R1) / 400))"""
    return 1 / (1 + 10 ** ((rating2 - rating1) / CURVE_CONSTANT))


def calculate_rating_change(
    win_chance1: float,
    fencer1_won: bool,
    score1: int,
    score2: int
) -> float:
    """
    선수 1의 레이팅 변화량 (선수 2는 같은 값만큼 반대로)

    공식: BASE_CHANGE × (결과 - 기대 승률) × (점수차 + 1) / (15 + 1)
    """
    outcome = 1 if fencer1_won else 0
    change = BASE_CHANGE * (outcome - win_chance1)

    score_diff = abs(score1 - score2)
    change *= (score_diff + WIN_BONUS) / (MAX_SCORE + WIN_BONUS)
    return change


def months_between(now: datetime, then: datetime) -> int:
    """달력 기준 개월 차이 (일자는 무시)"""
    return (now.year - then.year) * 12 + (now.month - then.month)


def calculate_age_scale(months_old: int) -> float:
    """경과 개월에 따른 선형 감쇠 (12개월에 0)"""
    return (LEADERBOARD_MONTHS_EXPIRE - months_old) / LEADERBOARD_MONTHS_EXPIRE


def daily_multiplier(prior_daily_bouts: int) -> float:
    """같은 날 앞선 경기 수에 따른 포인트 배수"""
    return 1.0 + prior_daily_bouts * MULTIPLIER_AMOUNT


def calculate_bout_points(
    own_score: int,
    won: bool,
    age_scale: float,
    multiplier: float,
    opponent_win_chance: float
) -> float:
    """
    경기 1회 획득 포인트

    공식: (참가 + 득점 × 20 [+ 승리 60]) × 감쇠 × 배수 × 상대 기대 승률
    """
    points = POINTS_BOUT + own_score * POINTS_TOUCH
    if won:
        points += POINTS_WIN
    return points * age_scale * multiplier * opponent_win_chance


# =====================================================
# 리더보드 계산
# =====================================================

def calculate_leaderboard(
    bouts: Iterable[Bout],
    fencers: Iterable[Fencer],
    now: Optional[datetime] = None
) -> List[LeaderboardEntry]:
    """
    리더보드 계산

    Args:
        bouts: 한 무기의 경기 목록 (순서 무관, 날짜순으로 정렬해서 처리)
        fencers: 전체 선수 명단
        now: 감쇠 기준 시각 (None이면 현재 시각)

    Returns:
        포인트 내림차순 리더보드
    """
    fencers = list(fencers)
    if not fencers:
        return []

    if now is None:
        now = datetime.now()

    stats: Dict[str, LeaderboardEntry] = {
        fencer.id: LeaderboardEntry(id=fencer.id, name=fencer.name)
        for fencer in fencers
    }

    # 날짜순 처리 (레이팅은 순서에 의존)
    sorted_bouts = sorted(bouts, key=lambda b: b.date)

    last_bout_day = None
    daily_bouts: Dict[str, int] = {}
    skipped = 0

    for bout in sorted_bouts:
        # 날짜가 바뀌면 당일 경기 수 초기화
        bout_day = bout.date.date()
        if bout_day != last_bout_day:
            daily_bouts.clear()
            last_bout_day = bout_day

        fencer1 = stats.get(bout.fencer1_id)
        fencer2 = stats.get(bout.fencer2_id)
        referee = stats.get(bout.referee_id)

        if fencer1 is None or fencer2 is None:
            skipped += 1
            continue

        # 경기 수 / 심판 수 / 승수
        fencer1.bouts += 1
        fencer2.bouts += 1
        if referee is not None:
            referee.refereed_bouts += 1

        fencer1_won = bout.score1 > bout.score2
        if fencer1_won:
            fencer1.wins += 1
        else:
            fencer2.wins += 1

        # 레이팅 (경기 전 레이팅 기준)
        win_chance1 = calculate_win_chance(fencer1.rating, fencer2.rating)
        rating_change = calculate_rating_change(win_chance1, fencer1_won, bout.score1, bout.score2)
        fencer1.rating += rating_change
        fencer2.rating -= rating_change

        # 포인트 (12개월 지난 경기는 제외)
        months_old = months_between(now, bout.date)
        if months_old >= LEADERBOARD_MONTHS_EXPIRE:
            continue

        age_scale = calculate_age_scale(months_old)

        fencer1_daily = daily_bouts.get(fencer1.id, 0)
        fencer2_daily = daily_bouts.get(fencer2.id, 0)
        daily_bouts[fencer1.id] = fencer1_daily + 1
        daily_bouts[fencer2.id] = fencer2_daily + 1

        fencer1.points += calculate_bout_points(
            bout.score1, fencer1_won, age_scale,
            daily_multiplier(fencer1_daily), 1 - win_chance1
        )
        fencer2.points += calculate_bout_points(
            bout.score2, not fencer1_won, age_scale,
            daily_multiplier(fencer2_daily), win_chance1
        )

    if skipped:
        logger.debug(f"명단에 없는 선수 경기 {skipped}개 제외")
    logger.debug(f"리더보드 계산 완료: 선수 {len(stats)}명, 경기 {len(sorted_bouts) - skipped}개")

    # 포인트 기준 정렬 (동점은 명단 순서 유지)
    return sorted(stats.values(), key=lambda e: e.points, reverse=True)
