"""
Tests for the social graph.
"""
import pytest
from sqlalchemy import func, select

from model.followers import Follow
from src.social import FollowManager, InvalidArgument, NotFound


@pytest.fixture
def graph(db_session, storage):
    return FollowManager(db_session, storage)


class TestFollow:

    def test_follow_twice(self, db_session, graph, alice, bob):
        assert graph.follow(alice, bob.user_id) is True
        assert graph.follow(alice, bob.user_id) is False
        assert db_session.scalar(select(func.count(Follow.id))) == 1

    def test_self_follow_rejected(self, db_session, graph, alice):
        with pytest.raises(InvalidArgument):
            graph.follow(alice, alice.user_id)
        assert db_session.scalar(select(func.count(Follow.id))) == 0

    def test_follow_unknown_user(self, graph, alice):
        with pytest.raises(NotFound):
            graph.follow(alice, 9999)

    def test_unfollow(self, graph, alice, bob):
        graph.follow(alice, bob.user_id)
        assert graph.unfollow(alice, bob.user_id) is True
        assert graph.unfollow(alice, bob.user_id) is False
        assert graph.is_following(alice, bob.user_id) is False

    def test_edges_are_directed(self, graph, alice, bob):
        graph.follow(alice, bob.user_id)
        assert graph.is_following(alice, bob.user_id) is True
        assert graph.is_following(bob, alice.user_id) is False
        assert graph.is_following(None, bob.user_id) is False


class TestCounts:

    def test_counts(self, graph, make_caller, alice, bob):
        carol = make_caller("auth0|carol")
        graph.follow(alice, bob.user_id)
        graph.follow(carol, bob.user_id)
        graph.follow(bob, alice.user_id)

        assert graph.follow_counts(bob.user_id) == {"followers": 2, "following": 1}
        assert graph.follow_counts(carol.user_id) == {"followers": 0, "following": 1}

    def test_edge_lists(self, graph, make_caller, make_profile, alice, bob):
        carol = make_caller("auth0|carol")
        make_profile(alice)
        graph.follow(alice, bob.user_id)
        graph.follow(carol, bob.user_id)

        followers = graph.list_followers(bob.user_id)
        assert [f["user_id"] for f in followers] == [carol.user_id, alice.user_id]
        # carol has no profile yet
        assert followers[0]["display_name"] is None
        assert followers[1]["display_name"] == "Alice"
        assert followers[1]["followed_at"] is not None

        following = graph.list_following(alice.user_id)
        assert [f["user_id"] for f in following] == [bob.user_id]
