"""
Club Leaderboard Router

선수 명단 / 경기 기록 / 리더보드 API
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse

from ranking.models import Weapon
from .models import (
    FencerCreate,
    FencerResponse,
    FencerDeleteResponse,
    BoutCreate,
    BoutResponse,
    LeaderboardRow,
)
from .service import ClubService


router = APIRouter(tags=["Club Leaderboard"])

_club_service: Optional[ClubService] = None


def get_club_service() -> ClubService:
    """
    ClubService 인스턴스 반환 (싱글톤)
    설정의 저장소로 최초 1회 로드
    """
    global _club_service
    if _club_service is None:
        from app.config import get_settings
        from database.storage import create_store

        _club_service = ClubService(create_store(get_settings()))
    return _club_service


# =============================================
# 선수 명단
# =============================================

@router.get("/fencers", response_model=List[FencerResponse])
async def list_fencers(service: ClubService = Depends(get_club_service)):
    """등록된 선수 목록 (등록 순서)"""
    return [f.model_dump() for f in service.list_fencers()]


@router.post("/fencers", response_model=FencerResponse, status_code=201)
async def add_fencer(
    request: FencerCreate,
    service: ClubService = Depends(get_club_service)
):
    """
    선수 등록

    같은 이름의 선수가 이미 있으면 400을 반환합니다.
    """
    try:
        fencer = service.add_fencer(request.name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return fencer.model_dump()


@router.delete("/fencers/{fencer_id}", response_model=FencerDeleteResponse)
async def delete_fencer(
    fencer_id: str,
    service: ClubService = Depends(get_club_service)
):
    """
    선수 삭제

    해당 선수가 참여(선수/심판)한 모든 무기의 경기도 함께 삭제됩니다.
    """
    try:
        removed = service.delete_fencer(fencer_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="선수를 찾을 수 없습니다")
    return {"message": "선수가 삭제되었습니다", "removed_bouts": removed}


# =============================================
# 경기 기록
# =============================================

@router.get("/weapons/{weapon}/bouts", response_model=List[BoutResponse])
async def list_bouts(
    weapon: Weapon,
    service: ClubService = Depends(get_club_service)
):
    """무기별 경기 기록 (최신순)"""
    return [b.model_dump() for b in service.list_bouts(weapon)]


@router.post("/weapons/{weapon}/bouts", response_model=BoutResponse, status_code=201)
async def record_bout(
    weapon: Weapon,
    request: BoutCreate,
    service: ClubService = Depends(get_club_service)
):
    """경기 결과 기록"""
    try:
        bout = service.record_bout(
            weapon,
            request.fencer1_id,
            request.fencer2_id,
            request.referee_id,
            request.score1,
            request.score2,
            request.bout_date
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return bout.model_dump()


@router.put("/weapons/{weapon}/bouts/{bout_id}", response_model=BoutResponse)
async def update_bout(
    weapon: Weapon,
    bout_id: str,
    request: BoutCreate,
    service: ClubService = Depends(get_club_service)
):
    """경기 수정"""
    try:
        bout = service.update_bout(
            weapon,
            bout_id,
            request.fencer1_id,
            request.fencer2_id,
            request.referee_id,
            request.score1,
            request.score2,
            request.bout_date
        )
    except KeyError:
        raise HTTPException(status_code=404, detail="경기를 찾을 수 없습니다")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return bout.model_dump()


@router.delete("/weapons/{weapon}/bouts/{bout_id}")
async def delete_bout(
    weapon: Weapon,
    bout_id: str,
    service: ClubService = Depends(get_club_service)
):
    """경기 삭제"""
    try:
        service.delete_bout(weapon, bout_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="경기를 찾을 수 없습니다")
    return {"message": "경기가 삭제되었습니다", "bout_id": bout_id}


# =============================================
# 리더보드 / 내보내기
# =============================================

@router.get("/weapons/{weapon}/leaderboard", response_model=List[LeaderboardRow])
async def get_leaderboard(
    weapon: Weapon,
    service: ClubService = Depends(get_club_service)
):
    """
    무기별 리더보드

    요청마다 전체 경기 기록으로 다시 계산합니다. 포인트 내림차순.
    """
    entries = service.leaderboard(weapon)
    return [LeaderboardRow.from_entry(rank, entry) for rank, entry in enumerate(entries, 1)]


@router.get("/weapons/{weapon}/leaderboard/export", response_class=PlainTextResponse)
async def export_leaderboard(
    weapon: Weapon,
    service: ClubService = Depends(get_club_service)
):
    """리더보드 텍스트 내보내기"""
    return service.export_leaderboard(weapon)


@router.get("/bouts/export", response_class=PlainTextResponse)
async def export_bout_history(service: ClubService = Depends(get_club_service)):
    """전체 무기 경기 기록 텍스트 내보내기"""
    return service.export_bout_history()
