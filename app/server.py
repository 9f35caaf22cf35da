"""
Fencing Club Leaderboard - FastAPI 웹 서버
선수 명단 / 경기 기록 / 무기별 리더보드
포트: 7171

데이터 소스: 키-값 저장소 (JSON 파일 또는 메모리)
"""
from fastapi import FastAPI, Depends
from loguru import logger

from app.club import club_router, get_club_service, ClubService
from app.club.models import StatusResponse


# FastAPI 앱
app = FastAPI(
    title="Fencing Club Leaderboard",
    description="클럽 경기 기록 기반 Elo 레이팅 / 포인트 리더보드",
    version="1.0.0"
)

# Club 라우터 등록
app.include_router(club_router, prefix="/api")


@app.on_event("startup")
async def startup_event():
    """서버 시작 시 클럽 데이터 로드"""
    service = get_club_service()
    logger.info(f"서버 시작: 선수 {len(service.list_fencers())}명")


@app.get("/api/status", response_model=StatusResponse)
async def get_status(service: ClubService = Depends(get_club_service)):
    """서버 상태"""
    return StatusResponse(
        status="ok",
        fencers=len(service.list_fencers()),
        bouts=service.bout_counts()
    )


# ==================== 서버 실행 ====================

if __name__ == "__main__":
    import uvicorn
    from app.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "app.server:app",
        host=settings.host,
        port=settings.port,
        reload=True,
        log_level="info"
    )
