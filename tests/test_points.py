"""
Tests for the gamification engine: level formula, awards and the ledger.
"""
import pytest
from sqlalchemy import select

from model.points import PointTransaction
from src.social import NotFound, PointsLedger, ProfileManager, level_for_points, points_for_post


# ===================================================================
# Pure rules
# ===================================================================

class TestLevelRules:
    """Level is floor(points / 1000) + 1 with no cap."""

    @pytest.mark.parametrize("points,level", [
        (0, 1),
        (100, 1),
        (999, 1),
        (1000, 2),
        (1999, 2),
        (25000, 26),
        (-1, 0),
        (-1000, 0),
        (-1001, -1),
    ])
    def test_level_for_points(self, points, level):
        assert level_for_points(points) == level

    def test_post_points_by_type(self):
        assert points_for_post("verse") == 20
        assert points_for_post("prayer") == 15
        assert points_for_post("testimony") == 10
        assert points_for_post("general") == 10

    def test_unknown_post_type_gets_general_points(self):
        assert points_for_post("limerick") == 10


# ===================================================================
# Ledger
# ===================================================================

class TestPointsLedger:

    def test_award_updates_total_level_and_ledger(self, db_session, alice, make_profile):
        make_profile(alice)
        ledger = PointsLedger(db_session)

        result = ledger.award(alice.user_id, 950, "bonus", "Big bonus")
        db_session.commit()

        assert result == {"new_points": 1050, "new_level": 2}
        rows = db_session.scalars(
            select(PointTransaction).where(PointTransaction.user_id == alice.user_id).order_by(PointTransaction.id)
        ).all()
        assert [(r.points, r.action) for r in rows] == [(100, "welcome"), (950, "bonus")]

    def test_level_follows_points_over_any_sequence(self, db_session, alice, make_profile):
        profile = make_profile(alice)
        ledger = PointsLedger(db_session)

        for delta in [500, 400, 1, -2, 3000, -5000, 7, 0, 999]:
            ledger.award(alice.user_id, delta, "adjust", "Adjustment")
            db_session.commit()
            db_session.refresh(profile)
            assert profile.level == profile.points // 1000 + 1

    def test_negative_total_is_allowed(self, db_session, alice, make_profile):
        make_profile(alice)
        result = PointsLedger(db_session).award(alice.user_id, -150, "penalty", "Penalty")
        assert result == {"new_points": -50, "new_level": 0}

    def test_award_without_profile_raises_when_required(self, db_session, alice):
        with pytest.raises(NotFound):
            PointsLedger(db_session).award(alice.user_id, 10, "bonus", "Bonus")

    def test_award_without_profile_is_skipped_when_optional(self, db_session, alice):
        result = PointsLedger(db_session).award(alice.user_id, 10, "post", "Posted", required=False)
        db_session.commit()

        assert result is None
        assert db_session.scalars(select(PointTransaction)).all() == []

    def test_history_is_newest_first(self, db_session, alice, make_profile):
        make_profile(alice)
        manager = ProfileManager(db_session)
        manager.award_points(alice, 5, "first", "First")
        manager.award_points(alice, 7, "second", "Second")

        history = manager.point_history(alice)

        assert [t.action for t in history] == ["second", "first", "welcome"]
        assert manager.point_history(alice, limit=1)[0].action == "second"
