"""
Club Roster Service

선수 명단 / 무기별 경기 기록 관리
- 모든 변경은 즉시 저장소에 저장
- 리더보드는 요청마다 전체 재계산
"""

from datetime import date, datetime, time
from typing import Optional, List, Dict, Union
from pydantic import ValidationError as PydanticValidationError
from loguru import logger

from database.storage import KeyValueStore
from ranking.calculator import LeaderboardEntry, calculate_leaderboard
from ranking.export import format_leaderboard_text, format_bout_history_text
from ranking.models import Bout, BoutsByWeapon, Fencer, Weapon, empty_bouts_by_weapon


FENCERS_KEY = "fencers"
BOUTS_KEY = "bouts"

BoutDate = Union[date, datetime, None]


def _to_datetime(value: BoutDate) -> datetime:
    """date → 해당 날짜 0시"""
    if value is None:
        return datetime.combine(date.today(), time())
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time())


class ClubService:
    """클럽 명단/경기 서비스"""

    def __init__(self, store: KeyValueStore):
        self.store = store
        self._fencers: List[Fencer] = self._load_fencers()
        self._bouts: BoutsByWeapon = self._load_bouts()
        logger.info(
            f"클럽 데이터 로드 완료: 선수 {len(self._fencers)}명, "
            f"경기 {sum(len(b) for b in self._bouts.values())}개"
        )

    # =============================================
    # 로드 / 저장
    # =============================================

    def _load_fencers(self) -> List[Fencer]:
        raw = self.store.get(FENCERS_KEY, [])
        try:
            return [Fencer.model_validate(item) for item in raw]
        except (PydanticValidationError, TypeError) as e:
            logger.error(f"선수 명단 데이터 손상, 기본값 사용: {e}")
            return []

    def _load_bouts(self) -> BoutsByWeapon:
        raw = self.store.get(BOUTS_KEY, {})
        bouts = empty_bouts_by_weapon()
        try:
            for weapon_key, items in raw.items():
                weapon = Weapon(weapon_key)
                bouts[weapon] = [Bout.model_validate(item) for item in items]
        except (PydanticValidationError, ValueError, TypeError, AttributeError) as e:
            logger.error(f"경기 기록 데이터 손상, 기본값 사용: {e}")
            return empty_bouts_by_weapon()
        return bouts

    def _save_fencers(self) -> None:
        self.store.set(FENCERS_KEY, [f.model_dump(mode="json") for f in self._fencers])

    def _save_bouts(self) -> None:
        self.store.set(BOUTS_KEY, {
            weapon.value: [b.model_dump(mode="json") for b in bouts]
            for weapon, bouts in self._bouts.items()
        })

    # =============================================
    # 선수 명단
    # =============================================

    def list_fencers(self) -> List[Fencer]:
        return list(self._fencers)

    def get_fencer(self, fencer_id: str) -> Optional[Fencer]:
        for fencer in self._fencers:
            if fencer.id == fencer_id:
                return fencer
        return None

    def add_fencer(self, name: str) -> Fencer:
        """
        선수 등록
        - 이름 앞뒤 공백 제거
        - 같은 이름이 이미 있으면 등록 불가
        """
        name = (name or "").strip()
        if not name:
            raise ValueError("선수 이름을 입력해주세요")
        if any(f.name == name for f in self._fencers):
            raise ValueError(f"이미 등록된 선수입니다: {name}")

        fencer = Fencer(name=name)
        self._fencers.append(fencer)
        self._save_fencers()
        logger.info(f"선수 등록: {fencer.name} ({fencer.id})")
        return fencer

    def delete_fencer(self, fencer_id: str) -> int:
        """
        선수 삭제

        해당 선수가 선수 1, 선수 2, 심판으로 참여한 모든 무기의 경기도 함께 삭제한다.

        Returns:
            삭제된 경기 수
        """
        fencer = self.get_fencer(fencer_id)
        if fencer is None:
            raise KeyError(fencer_id)

        self._fencers = [f for f in self._fencers if f.id != fencer_id]

        removed = 0
        for weapon, bouts in self._bouts.items():
            kept = [b for b in bouts if not b.involves(fencer_id)]
            removed += len(bouts) - len(kept)
            self._bouts[weapon] = kept

        self._save_fencers()
        self._save_bouts()
        logger.info(f"선수 삭제: {fencer.name} (경기 {removed}개 함께 삭제)")
        return removed

    # =============================================
    # 경기 기록
    # =============================================

    def list_bouts(self, weapon: Weapon) -> List[Bout]:
        """무기별 경기 목록 (최신 경기 먼저)"""
        return sorted(self._bouts[weapon], key=lambda b: b.date, reverse=True)

    def get_bout(self, weapon: Weapon, bout_id: str) -> Optional[Bout]:
        for bout in self._bouts[weapon]:
            if bout.id == bout_id:
                return bout
        return None

    def _build_bout(
        self,
        weapon: Weapon,
        fencer1_id: str,
        fencer2_id: str,
        referee_id: str,
        score1: int,
        score2: int,
        bout_date: BoutDate,
        bout_id: Optional[str] = None
    ) -> Bout:
        if not fencer1_id or not fencer2_id or not referee_id or fencer1_id == fencer2_id:
            raise ValueError("서로 다른 선수 2명과 심판을 선택해주세요")

        for fencer_id in (fencer1_id, fencer2_id, referee_id):
            if self.get_fencer(fencer_id) is None:
                raise ValueError(f"명단에 없는 선수입니다: {fencer_id}")

        data = dict(
            date=_to_datetime(bout_date),
            weapon=weapon,
            fencer1_id=fencer1_id,
            fencer2_id=fencer2_id,
            referee_id=referee_id,
            score1=score1,
            score2=score2,
        )
        if bout_id:
            data["id"] = bout_id
        return Bout(**data)

    def record_bout(
        self,
        weapon: Weapon,
        fencer1_id: str,
        fencer2_id: str,
        referee_id: str,
        score1: int,
        score2: int,
        bout_date: BoutDate = None
    ) -> Bout:
        """경기 결과 기록"""
        bout = self._build_bout(weapon, fencer1_id, fencer2_id, referee_id, score1, score2, bout_date)
        self._bouts[weapon].append(bout)
        self._save_bouts()
        logger.info(f"[{weapon.value}] 경기 기록: {bout.fencer1_id} {bout.score1}-{bout.score2} {bout.fencer2_id}")
        return bout

    def update_bout(
        self,
        weapon: Weapon,
        bout_id: str,
        fencer1_id: str,
        fencer2_id: str,
        referee_id: str,
        score1: int,
        score2: int,
        bout_date: BoutDate = None
    ) -> Bout:
        """경기 수정 (같은 ID 자리에 교체)"""
        bouts = self._bouts[weapon]
        index = next((i for i, b in enumerate(bouts) if b.id == bout_id), None)
        if index is None:
            raise KeyError(bout_id)

        bout = self._build_bout(
            weapon, fencer1_id, fencer2_id, referee_id, score1, score2,
            bout_date or bouts[index].date, bout_id=bout_id
        )
        bouts[index] = bout
        self._save_bouts()
        logger.info(f"[{weapon.value}] 경기 수정: {bout_id}")
        return bout

    def delete_bout(self, weapon: Weapon, bout_id: str) -> None:
        bouts = self._bouts[weapon]
        kept = [b for b in bouts if b.id != bout_id]
        if len(kept) == len(bouts):
            raise KeyError(bout_id)

        self._bouts[weapon] = kept
        self._save_bouts()
        logger.info(f"[{weapon.value}] 경기 삭제: {bout_id}")

    def bout_counts(self) -> Dict[str, int]:
        return {weapon.value: len(bouts) for weapon, bouts in self._bouts.items()}

    # =============================================
    # 리더보드 / 내보내기
    # =============================================

    def leaderboard(self, weapon: Weapon, now: Optional[datetime] = None) -> List[LeaderboardEntry]:
        return calculate_leaderboard(self._bouts[weapon], self._fencers, now=now)

    def export_leaderboard(self, weapon: Weapon, now: Optional[datetime] = None) -> str:
        return format_leaderboard_text(self.leaderboard(weapon, now=now), weapon, exported_at=now)

    def export_bout_history(self, now: Optional[datetime] = None) -> str:
        return format_bout_history_text(self._bouts, self._fencers, exported_at=now)
