"""
ClubService 테스트 (명단 / 경기 / 저장)
"""

import pytest
from datetime import date, datetime

from app.club.service import ClubService, FENCERS_KEY, BOUTS_KEY
from database.storage import MemoryStore, JsonFileStore
from ranking.models import Weapon


@pytest.fixture
def roster(club_service):
    """Alice, Bob, Carol 등록"""
    alice = club_service.add_fencer("Alice")
    bob = club_service.add_fencer("Bob")
    carol = club_service.add_fencer("Carol")
    return alice, bob, carol


class TestFencers:
    """선수 명단"""

    def test_add_fencer_trims_name(self, club_service):
        fencer = club_service.add_fencer("  Alice  ")
        assert fencer.name == "Alice"
        assert fencer.id
        assert club_service.list_fencers() == [fencer]

    def test_duplicate_name_rejected(self, club_service):
        club_service.add_fencer("Alice")
        with pytest.raises(ValueError):
            club_service.add_fencer(" Alice ")
        assert len(club_service.list_fencers()) == 1

    def test_internal_spacing_kept_as_typed(self, club_service):
        """이름 안쪽 공백은 그대로 저장, 다른 이름으로 취급"""
        first = club_service.add_fencer("Bob Smith")
        second = club_service.add_fencer("Bob  Smith")
        assert first.name == "Bob Smith"
        assert second.name == "Bob  Smith"
        assert len({f.name for f in club_service.list_fencers()}) == 2

    def test_stored_names_not_rewritten_on_load(self):
        store = MemoryStore({FENCERS_KEY: [{"id": "a", "name": "Bob  Smith"}]})
        assert ClubService(store).list_fencers()[0].name == "Bob  Smith"

    def test_empty_name_rejected(self, club_service):
        with pytest.raises(ValueError):
            club_service.add_fencer("   ")

    def test_ids_are_unique(self, roster):
        assert len({f.id for f in roster}) == 3

    def test_delete_unknown_fencer(self, club_service):
        with pytest.raises(KeyError):
            club_service.delete_fencer("missing")

    def test_delete_cascades_to_all_weapons(self, club_service, roster):
        alice, bob, carol = roster
        club_service.record_bout(Weapon.EPEE, alice.id, bob.id, carol.id, 15, 10)
        club_service.record_bout(Weapon.FOIL, bob.id, carol.id, alice.id, 5, 3)
        club_service.record_bout(Weapon.SABRE, carol.id, alice.id, bob.id, 15, 14)
        kept = club_service.record_bout(Weapon.SABRE, bob.id, carol.id, bob.id, 15, 1)

        removed = club_service.delete_fencer(alice.id)

        assert removed == 3
        assert club_service.get_fencer(alice.id) is None
        assert club_service.list_bouts(Weapon.EPEE) == []
        assert club_service.list_bouts(Weapon.FOIL) == []
        assert club_service.list_bouts(Weapon.SABRE) == [kept]


class TestBouts:
    """경기 기록"""

    def test_record_bout_defaults_to_today(self, club_service, roster):
        alice, bob, carol = roster
        bout = club_service.record_bout(Weapon.EPEE, alice.id, bob.id, carol.id, 15, 10)
        assert bout.date.date() == date.today()
        assert bout.weapon == Weapon.EPEE
        assert club_service.get_bout(Weapon.EPEE, bout.id) == bout

    def test_record_bout_with_date(self, club_service, roster):
        alice, bob, carol = roster
        bout = club_service.record_bout(Weapon.FOIL, alice.id, bob.id, carol.id, 5, 4, date(2026, 3, 2))
        assert bout.date == datetime(2026, 3, 2)
        assert club_service.list_bouts(Weapon.EPEE) == []

    def test_same_fencer_twice_rejected(self, club_service, roster):
        alice, bob, carol = roster
        with pytest.raises(ValueError):
            club_service.record_bout(Weapon.EPEE, alice.id, alice.id, carol.id, 15, 10)

    def test_missing_referee_rejected(self, club_service, roster):
        alice, bob, _ = roster
        with pytest.raises(ValueError):
            club_service.record_bout(Weapon.EPEE, alice.id, bob.id, "", 15, 10)

    def test_unknown_fencer_rejected(self, club_service, roster):
        alice, _, carol = roster
        with pytest.raises(ValueError):
            club_service.record_bout(Weapon.EPEE, alice.id, "ghost", carol.id, 15, 10)

    def test_score_out_of_range_rejected(self, club_service, roster):
        alice, bob, carol = roster
        with pytest.raises(ValueError):
            club_service.record_bout(Weapon.EPEE, alice.id, bob.id, carol.id, 16, 10)
        with pytest.raises(ValueError):
            club_service.record_bout(Weapon.EPEE, alice.id, bob.id, carol.id, 15, -1)

    def test_list_bouts_newest_first(self, club_service, roster):
        alice, bob, carol = roster
        old = club_service.record_bout(Weapon.EPEE, alice.id, bob.id, carol.id, 15, 10, date(2026, 1, 1))
        new = club_service.record_bout(Weapon.EPEE, alice.id, bob.id, carol.id, 15, 10, date(2026, 2, 1))
        assert club_service.list_bouts(Weapon.EPEE) == [new, old]

    def test_update_bout_in_place(self, club_service, roster):
        alice, bob, carol = roster
        first = club_service.record_bout(Weapon.EPEE, alice.id, bob.id, carol.id, 15, 10, date(2026, 1, 1))
        second = club_service.record_bout(Weapon.EPEE, bob.id, carol.id, alice.id, 15, 10, date(2026, 1, 2))

        updated = club_service.update_bout(Weapon.EPEE, first.id, alice.id, bob.id, carol.id, 9, 15)

        assert updated.id == first.id
        assert updated.score1 == 9
        assert updated.date == first.date
        assert club_service.get_bout(Weapon.EPEE, first.id) == updated
        assert club_service.get_bout(Weapon.EPEE, second.id) == second
        assert len(club_service.list_bouts(Weapon.EPEE)) == 2

    def test_update_unknown_bout(self, club_service, roster):
        alice, bob, carol = roster
        with pytest.raises(KeyError):
            club_service.update_bout(Weapon.EPEE, "missing", alice.id, bob.id, carol.id, 15, 10)

    def test_delete_bout(self, club_service, roster):
        alice, bob, carol = roster
        bout = club_service.record_bout(Weapon.EPEE, alice.id, bob.id, carol.id, 15, 10)
        club_service.delete_bout(Weapon.EPEE, bout.id)
        assert club_service.list_bouts(Weapon.EPEE) == []
        with pytest.raises(KeyError):
            club_service.delete_bout(Weapon.EPEE, bout.id)


class TestLeaderboard:
    def test_leaderboard_per_weapon(self, club_service, roster, fixed_now):
        alice, bob, carol = roster
        club_service.record_bout(Weapon.EPEE, alice.id, bob.id, carol.id, 15, 10, datetime(2026, 10, 19, 9))

        epee = club_service.leaderboard(Weapon.EPEE, now=fixed_now)
        foil = club_service.leaderboard(Weapon.FOIL, now=fixed_now)

        assert epee[0].name == "Alice"
        assert epee[0].points == pytest.approx(185.0)
        assert epee[0].rating == pytest.approx(1015.0)
        assert all(e.points == 0 for e in foil)
        assert len(foil) == 3

    def test_exports(self, club_service, roster, fixed_now):
        alice, bob, carol = roster
        club_service.record_bout(Weapon.EPEE, alice.id, bob.id, carol.id, 15, 10, datetime(2026, 10, 19, 9))

        board = club_service.export_leaderboard(Weapon.EPEE, now=fixed_now)
        assert board.startswith("Epee Leaderboard\nExported: 2026-10-19 18:00:00\n")

        history = club_service.export_bout_history(now=fixed_now)
        assert "Alice vs Bob" in history
        assert "Referee: Carol" in history


class TestPersistence:
    """변경 시 저장 / 시작 시 로드"""

    def test_changes_saved_immediately(self, memory_store, club_service, roster):
        alice, bob, carol = roster
        club_service.record_bout(Weapon.SABRE, alice.id, bob.id, carol.id, 15, 10)

        assert [f["name"] for f in memory_store.get(FENCERS_KEY)] == ["Alice", "Bob", "Carol"]
        assert len(memory_store.get(BOUTS_KEY)["Sabre"]) == 1
        assert memory_store.get(BOUTS_KEY)["Epee"] == []

    def test_reload_from_store(self, memory_store, club_service, roster):
        alice, bob, carol = roster
        bout = club_service.record_bout(Weapon.FOIL, alice.id, bob.id, carol.id, 5, 3, date(2026, 5, 5))

        reloaded = ClubService(memory_store)
        assert [f.name for f in reloaded.list_fencers()] == ["Alice", "Bob", "Carol"]
        assert reloaded.list_bouts(Weapon.FOIL) == [bout]

    def test_reload_from_file_store(self, tmp_path):
        service = ClubService(JsonFileStore(str(tmp_path)))
        alice = service.add_fencer("Alice")
        bob = service.add_fencer("Bob")
        service.record_bout(Weapon.EPEE, alice.id, bob.id, bob.id, 15, 10, date(2026, 5, 5))

        reloaded = ClubService(JsonFileStore(str(tmp_path)))
        assert len(reloaded.list_fencers()) == 2
        assert reloaded.list_bouts(Weapon.EPEE)[0].score1 == 15

    def test_corrupt_values_fall_back_to_defaults(self):
        store = MemoryStore({
            FENCERS_KEY: [{"id": "a"}],
            BOUTS_KEY: {"Rapier": [{"id": "x"}]},
        })
        service = ClubService(store)
        assert service.list_fencers() == []
        assert service.bout_counts() == {"Epee": 0, "Foil": 0, "Sabre": 0}

    def test_mixed_timezone_dates_load_and_rank(self):
        """UTC(Z) 일시와 시간대 없는 일시가 섞여 있어도 정렬/계산 가능"""
        store = MemoryStore({
            FENCERS_KEY: [{"id": "a", "name": "Alice"}, {"id": "b", "name": "Bob"}],
            BOUTS_KEY: {"Epee": [
                {"id": "x", "date": "2026-10-01T00:00:00.000Z", "weapon": "Epee",
                 "fencer1_id": "a", "fencer2_id": "b", "referee_id": "b", "score1": 15, "score2": 10},
                {"id": "y", "date": "2026-10-02T12:00:00", "weapon": "Epee",
                 "fencer1_id": "b", "fencer2_id": "a", "referee_id": "a", "score1": 15, "score2": 12},
            ]},
        })
        service = ClubService(store)

        bouts = service.list_bouts(Weapon.EPEE)
        assert [b.id for b in bouts] == ["y", "x"]
        assert all(b.date.tzinfo is None for b in bouts)

        board = service.leaderboard(Weapon.EPEE, now=datetime(2026, 10, 19, 18))
        assert sum(e.bouts for e in board) == 4
        assert sum(e.rating for e in board) == pytest.approx(2000.0)

    def test_wrong_shape_falls_back_to_defaults(self):
        store = MemoryStore({FENCERS_KEY: "not a list", BOUTS_KEY: ["not", "a", "dict"]})
        service = ClubService(store)
        assert service.list_fencers() == []
        assert service.bout_counts() == {"Epee": 0, "Foil": 0, "Sabre": 0}
