from src.social.mentions import active_mention_query, insert_mention, mentioned_names, split_mentions


def test_split_mentions():
    assert split_mentions("@ann hello") == [("ann", True), (" hello", False)]
    assert split_mentions("no mentions") == [("no mentions", False)]
    assert split_mentions("") == []


def test_mentioned_names():
    assert mentioned_names("thanks @grace and @john_k!") == ["grace", "john_k"]


def test_active_mention_query():
    assert active_mention_query("praying for @gr") == "gr"
    assert active_mention_query("praying for @") == ""
    assert active_mention_query("praying for @grace now") is None


def test_insert_mention():
    assert insert_mention("thanks @gr", "for sharing", "grace") == "thanks @grace for sharing"
    assert insert_mention("hi ", "", "bob") == "hi @bob "
