"""
Pytest configuration and fixtures for Fencing Club Leaderboard tests
"""

import pytest
import sys
from datetime import datetime
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from ranking.models import Bout, Fencer, Weapon
from database.storage import MemoryStore
from app.club.service import ClubService


@pytest.fixture(scope="session")
def fixed_now():
    """감쇠 기준 시각"""
    return datetime(2026, 10, 19, 18, 0, 0)


@pytest.fixture(scope="function")
def sample_fencers():
    """Sample roster: Alice, Bob, Carol"""
    return [
        Fencer(id="alice", name="Alice"),
        Fencer(id="bob", name="Bob"),
        Fencer(id="carol", name="Carol"),
    ]


@pytest.fixture(scope="function")
def make_bout():
    """Bout factory"""
    counter = {"n": 0}

    def _make(fencer1_id, fencer2_id, score1, score2, date, referee_id="carol", weapon=Weapon.EPEE):
        counter["n"] += 1
        return Bout(
            id=f"bout-{counter['n']}",
            date=date,
            weapon=weapon,
            fencer1_id=fencer1_id,
            fencer2_id=fencer2_id,
            referee_id=referee_id,
            score1=score1,
            score2=score2,
        )

    return _make


@pytest.fixture(scope="function")
def memory_store():
    return MemoryStore()


@pytest.fixture(scope="function")
def club_service(memory_store):
    """In-memory club service"""
    return ClubService(memory_store)
