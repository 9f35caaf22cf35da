"""
클럽 도메인 모델 정의 (Pydantic)

- Fencer: 클럽 선수 명단
- Bout: 무기별 경기 기록
"""
import uuid
from datetime import datetime
from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, Field, field_validator, model_validator


MAX_BOUT_SCORE = 15


def new_id() -> str:
    """고유 ID 생성 (uuid4)"""
    return str(uuid.uuid4())


class Weapon(str, Enum):
    """무기 종류"""
    EPEE = "Epee"
    FOIL = "Foil"
    SABRE = "Sabre"

    @classmethod
    def from_string(cls, value: str) -> "Weapon":
        """문자열에서 무기 타입 추출 (대소문자 무시)"""
        value_lower = value.strip().lower()
        if value_lower in ("epee", "épée", "에뻬", "에페"):
            return cls.EPEE
        if value_lower in ("foil", "플러레", "플뢰레"):
            return cls.FOIL
        if value_lower in ("sabre", "saber", "사브르"):
            return cls.SABRE
        raise ValueError(f"알 수 없는 무기: {value}")


class Fencer(BaseModel):
    """선수 정보"""
    id: str = Field(default_factory=new_id, description="선수 고유 ID")
    name: str = Field(..., min_length=1, max_length=100, description="표시 이름")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """앞뒤 공백 제거"""
        v = v.strip()
        if not v:
            raise ValueError("선수 이름이 비어 있습니다")
        return v


class Bout(BaseModel):
    """경기 기록

    fencer1_id, fencer2_id 는 서로 다른 선수여야 하며
    심판(referee_id)은 명단의 누구든 될 수 있다.
    """
    id: str = Field(default_factory=new_id, description="경기 고유 ID")
    date: datetime = Field(..., description="경기 일시")
    weapon: Weapon = Field(..., description="무기")
    fencer1_id: str = Field(..., description="선수 1 ID")
    fencer2_id: str = Field(..., description="선수 2 ID")
    referee_id: str = Field(..., description="심판 ID")
    score1: int = Field(..., ge=0, le=MAX_BOUT_SCORE, description="선수 1 점수")
    score2: int = Field(..., ge=0, le=MAX_BOUT_SCORE, description="선수 2 점수")

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: datetime) -> datetime:
        """시간대 있는 일시는 로컬 시각으로 변환 후 시간대 제거"""
        if v.tzinfo is not None:
            v = v.astimezone().replace(tzinfo=None)
        return v

    @model_validator(mode="after")
    def validate_fencers(self) -> "Bout":
        if self.fencer1_id == self.fencer2_id:
            raise ValueError("같은 선수끼리 경기를 기록할 수 없습니다")
        return self

    @property
    def winner_id(self) -> str:
        """승자 ID (동점이면 선수 2)"""
        return self.fencer1_id if self.score1 > self.score2 else self.fencer2_id

    def involves(self, fencer_id: str) -> bool:
        """선수 또는 심판으로 참여했는지"""
        return fencer_id in (self.fencer1_id, self.fencer2_id, self.referee_id)


BoutsByWeapon = Dict[Weapon, List[Bout]]


def empty_bouts_by_weapon() -> BoutsByWeapon:
    """무기별 빈 경기 목록"""
    return {weapon: [] for weapon in Weapon}
