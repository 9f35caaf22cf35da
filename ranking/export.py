"""
리더보드 / 경기 기록 텍스트 내보내기
"""
import math
from datetime import datetime
from typing import Dict, Iterable, List, Mapping, Optional

from .calculator import LeaderboardEntry
from .models import Bout, Fencer, Weapon


UNKNOWN_NAME = "Unknown"
BOUT_SEPARATOR = "-" * 40

# (라벨, 폭, 정렬)
LEADERBOARD_COLUMNS = [
    ("Rank", 4, ">"),
    ("Name", 20, "<"),
    ("Points", 8, ">"),
    ("Rating", 8, ">"),
    ("Wins", 5, ">"),
    ("Bouts", 5, ">"),
    ("Ref'd", 5, ">"),
]


def round_half_up(value: float) -> int:
    """가장 가까운 정수 (0.5는 올림)"""
    return int(math.floor(value + 0.5))


def _format_row(values: List) -> str:
    cells = []
    for value, (_, width, align) in zip(values, LEADERBOARD_COLUMNS):
        text = str(value)
        if align == "<" and len(text) > width:
            text = text[:width - 2] + ".."
        cells.append(f"{text:{align}{width}}")
    return " ".join(cells).rstrip()


def _header_lines(title: str, exported_at: Optional[datetime]) -> List[str]:
    exported_at = exported_at or datetime.now()
    return [
        title,
        f"Exported: {exported_at.strftime('%Y-%m-%d %H:%M:%S')}",
        "=" * len(title),
    ]


def format_leaderboard_text(
    entries: Iterable[LeaderboardEntry],
    weapon: Weapon,
    exported_at: Optional[datetime] = None
) -> str:
    """리더보드를 고정폭 텍스트로 변환"""
    lines = _header_lines(f"{weapon.value} Leaderboard", exported_at)
    lines.append("")
    lines.append(_format_row([label for label, _, _ in LEADERBOARD_COLUMNS]))

    entries = list(entries)
    if not entries:
        lines.append("No fencers on the leaderboard.")

    for rank, entry in enumerate(entries, 1):
        lines.append(_format_row([
            rank,
            entry.name,
            round_half_up(entry.points),
            round_half_up(entry.rating),
            entry.wins,
            entry.bouts,
            entry.refereed_bouts,
        ]))

    return "\n".join(lines) + "\n"


def format_bout_history_text(
    bouts_by_weapon: Mapping[Weapon, Iterable[Bout]],
    fencers: Iterable[Fencer],
    exported_at: Optional[datetime] = None
) -> str:
    """무기별 경기 기록을 텍스트로 변환 (최신 경기 먼저)"""
    names: Dict[str, str] = {f.id: f.name for f in fencers}
    lines = _header_lines("Bout History", exported_at)

    for weapon in Weapon:
        bouts = sorted(bouts_by_weapon.get(weapon, []), key=lambda b: b.date, reverse=True)
        lines.append("")
        lines.append(f"[{weapon.value}] ({len(bouts)} bouts)")

        if not bouts:
            lines.append(f"No bouts recorded for {weapon.value}.")
            continue

        for bout in bouts:
            lines.append(f"Date: {bout.date.strftime('%Y-%m-%d')}")
            lines.append(
                f"{names.get(bout.fencer1_id, UNKNOWN_NAME)} vs "
                f"{names.get(bout.fencer2_id, UNKNOWN_NAME)}"
            )
            lines.append(f"Score: {bout.score1} - {bout.score2}")
            lines.append(f"Referee: {names.get(bout.referee_id, UNKNOWN_NAME)}")
            lines.append(BOUT_SEPARATOR)

    return "\n".join(lines) + "\n"
