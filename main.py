"""
펜싱 클럽 리더보드 메인

사용법:
    python main.py serve
    python main.py add-fencer "홍길동"
    python main.py leaderboard --weapon epee --top 10
    python main.py export --weapon foil --output foil.txt
    python main.py export --bouts --output bouts.txt
"""
import argparse
import sys
from pathlib import Path
from loguru import logger

from app.config import get_settings, ClubSettings
from app.club.service import ClubService
from database.storage import create_store
from ranking.export import format_leaderboard_text
from ranking.models import Weapon


def setup_logging(settings: ClubSettings):
    """로깅 설정"""
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=settings.log_level
    )
    logger.add(
        str(Path(settings.log_dir) / "club_{time:YYYY-MM-DD}.log"),
        rotation="1 day",
        retention="30 days",
        level="DEBUG"
    )


def _weapon_arg(value: str) -> Weapon:
    try:
        return Weapon.from_string(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="펜싱 클럽 리더보드")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("serve", help="API 서버 실행")

    add_parser = subparsers.add_parser("add-fencer", help="선수 등록")
    add_parser.add_argument("name", type=str, help="선수 이름")

    board_parser = subparsers.add_parser("leaderboard", help="리더보드 출력")
    board_parser.add_argument("--weapon", type=_weapon_arg, default=Weapon.EPEE, help="무기 (epee/foil/sabre)")
    board_parser.add_argument("--top", type=int, default=20, help="출력할 상위 N명")

    export_parser = subparsers.add_parser("export", help="텍스트 보고서 내보내기")
    target = export_parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--weapon", type=_weapon_arg, help="리더보드 무기")
    target.add_argument("--bouts", action="store_true", help="전체 경기 기록")
    export_parser.add_argument("--output", type=str, help="출력 파일 (생략시 표준출력)")

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(settings)

    if args.command == "serve":
        import uvicorn

        uvicorn.run("app.server:app", host=settings.host, port=settings.port, log_level="info")
        return 0

    service = ClubService(create_store(settings))

    if args.command == "add-fencer":
        try:
            fencer = service.add_fencer(args.name)
        except ValueError as e:
            logger.error(str(e))
            return 1
        print(f"{fencer.name}\t{fencer.id}")
        return 0

    if args.command == "leaderboard":
        entries = service.leaderboard(args.weapon)[:args.top]
        print(format_leaderboard_text(entries, args.weapon), end="")
        return 0

    if args.bouts:
        report = service.export_bout_history()
    else:
        report = service.export_leaderboard(args.weapon)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(report)
        logger.info(f"내보내기 완료: {args.output}")
    else:
        print(report, end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
