"""
Tests for Twoogle Feed Assembler
"""

import pytest

from twoogle.config import Config
from twoogle.core.errors import AuthenticationRequired, UnknownUser
from twoogle.core.feeds import collect_lines, render_sections
from twoogle.core.service import MessageService
from twoogle.db.connection import Database
from twoogle.db.models import Message, TagCount
from twoogle.utils.formatting import format_message_line, format_tag_listing


def make_service() -> MessageService:
    """Service on an in-memory database with cheap password hashing."""
    config = Config()
    config.crypto.argon2_time_cost = 1
    config.crypto.argon2_memory_kb = 8192
    return MessageService(config, db=Database(":memory:")).setup()


class FeedTestBase:
    """Two registered users and a guest session."""

    def setup_method(self):
        self.service = make_service()
        self.feeds = self.service.feeds
        self.post = self.service.composer.post

        self.alice = self.service.new_session()
        self.service.auth.register(self.alice, "alice", "pw1")
        self.bob = self.service.new_session()
        self.service.auth.register(self.bob, "bob", "pw2")
        self.guest = self.service.new_session()


class TestFormatting:
    """Tests for fixed-width message lines."""

    def test_line_layout(self):
        message = Message(
            message_id="alice_1",
            created_at_us=1_700_000_000_000_000,
            username="alice",
            contents="Hello world"
        )
        line = format_message_line(message)

        assert line.endswith("\n")
        assert line[:30] == "<alice @nobody> ".ljust(30)
        assert line[30:100] == '"Hello world" '.ljust(70)
        assert line[100:110] == "[no tag] ".ljust(10)
        assert line[110:].startswith("(alice_1) @")

    def test_reply_and_tag_columns(self):
        message = Message(
            message_id="alice_1",
            created_at_us=1_700_000_000_000_000,
            username="bob",
            tag="fun",
            is_reply=True,
            replied_to_username="alice",
            contents="nice!"
        )
        line = format_message_line(message)

        assert line.startswith("<bob @alice> ")
        assert "[fun] " in line

    def test_collect_lines_reverses(self):
        newest_first = [
            Message(message_id="a_2", username="a", contents="second", created_at_us=2),
            Message(message_id="a_1", username="a", contents="first", created_at_us=1),
        ]
        lines = collect_lines(newest_first)

        assert "(a_1)" in lines[0]
        assert "(a_2)" in lines[1]

    def test_tag_listing_format(self):
        text = format_tag_listing([TagCount("a", 2), TagCount("b", 1)])

        assert text == "Format: #tag (number of times used)\n#a (2)\n#b (1)\n"


class TestUserFeed(FeedTestBase):
    """Tests for per-user views."""

    def test_oldest_first(self):
        self.post(self.alice, "one")
        self.post(self.alice, "two")
        self.post(self.alice, "three")

        lines = self.feeds.user_messages(self.bob, "alice")

        assert len(lines) == 3
        assert "(alice_1)" in lines[0]
        assert "(alice_2)" in lines[1]
        assert "(alice_3)" in lines[2]

    def test_limit_keeps_newest(self):
        for i in range(7):
            self.post(self.alice, f"post {i}")

        lines = self.feeds.user_messages(self.bob, "alice", limit=5)

        assert len(lines) == 5
        assert "(alice_3)" in lines[0]
        assert "(alice_7)" in lines[-1]

    def test_default_limit(self):
        for i in range(8):
            self.post(self.alice, f"post {i}")

        assert len(self.feeds.user_messages(self.bob, "alice")) == 5

    def test_private_hidden_from_others(self):
        self.post(self.alice, "public")
        self.post(self.alice, "*private secret")

        lines = self.feeds.user_messages(self.bob, "alice")

        assert len(lines) == 1
        assert "secret" not in "".join(lines)

    def test_private_hidden_even_from_subscribers(self):
        self.service.auth.subscribe(self.bob, "alice")
        self.post(self.alice, "*private secret")

        assert self.feeds.user_messages(self.bob, "alice") == []

    def test_private_visible_to_self(self):
        self.post(self.alice, "*private secret")

        lines = self.feeds.user_messages(self.alice, "alice")

        assert len(lines) == 1
        assert "secret" in lines[0]

    def test_unknown_user(self):
        with pytest.raises(UnknownUser):
            self.feeds.user_messages(self.alice, "nobody")

    def test_username_case_insensitive(self):
        self.post(self.alice, "hi")

        assert len(self.feeds.user_messages(self.bob, "ALICE")) == 1


class TestMessageById(FeedTestBase):
    """Tests for message-by-id threads."""

    def test_scenario_reply_thread(self):
        original = self.post(self.alice, "Hello world")
        reply = self.post(self.bob, "@alice nice!")

        assert original.message_id == reply.message_id == "alice_1"

        lines = self.feeds.message(self.guest, "alice_1")

        assert len(lines) == 2
        assert lines[0].startswith("<bob @alice>")
        assert lines[1].startswith("<alice @nobody>")

    def test_thread_lists_latest_reply_first(self):
        self.post(self.alice, "Hello world")
        self.post(self.bob, "@alice first reply")
        self.post(self.guest, "@alice second reply")

        lines = self.feeds.message(self.bob, "alice_1")

        assert len(lines) == 3
        assert "second reply" in lines[0]
        assert "first reply" in lines[1]
        assert "Hello world" in lines[2]

    def test_private_row_only_for_author(self):
        self.post(self.alice, "*private secret")

        assert self.feeds.message(self.bob, "alice_1") == []
        assert len(self.feeds.message(self.alice, "alice_1")) == 1

    def test_id_case_insensitive(self):
        self.post(self.alice, "hi")

        assert len(self.feeds.message(self.bob, "ALICE_1")) == 1

    def test_missing_id(self):
        assert self.feeds.message(self.bob, "alice_99") == []


class TestTags(FeedTestBase):
    """Tests for tag feeds and tag listing."""

    def test_guest_tag_scenario(self):
        self.post(self.guest, "#funny knock knock")

        lines = self.feeds.tag_messages("#funny")

        assert len(lines) == 1
        assert "knock knock" in lines[0]
        assert "[funny]" in lines[0]
        assert "#funny (1)" in self.feeds.tag_listing()

    def test_tag_lookup_without_hash(self):
        self.post(self.alice, "#Movies great")

        assert len(self.feeds.tag_messages("movies")) == 1
        assert len(self.feeds.tag_messages("#MOVIES")) == 1

    def test_tag_feed_excludes_private(self):
        self.post(self.alice, "#news public")
        self.post(self.alice, "#news *private hidden")

        lines = self.feeds.tag_messages("news")

        assert len(lines) == 1
        assert "hidden" not in lines[0]

    def test_tag_counts(self):
        self.post(self.alice, "#a one")
        self.post(self.bob, "#a two")
        self.post(self.alice, "#b three")
        self.post(self.alice, "#b *private four")
        self.post(self.alice, "untagged")

        counts = self.feeds.tags()

        assert counts == [TagCount("a", 2), TagCount("b", 1)]

    def test_tag_listing_lists_each_tag_once(self):
        self.post(self.alice, "#a one")
        self.post(self.alice, "#a two")
        self.post(self.alice, "#b three")

        listing = self.feeds.tag_listing()

        assert listing.splitlines() == [
            "Format: #tag (number of times used)",
            "#a (2)",
            "#b (1)",
        ]

    def test_empty_tag(self):
        assert self.feeds.tag_messages("#") == []


class TestRepliesAndSubscriptions(FeedTestBase):
    """Tests for replies-to-me, subscribed and recent views."""

    def test_replies_to_me(self):
        self.post(self.alice, "hello")
        self.post(self.bob, "@alice hi back")
        self.post(self.bob, "@alice *private just for you")
        self.post(self.bob, "unrelated")

        lines = self.feeds.replies(self.alice)

        assert len(lines) == 2
        assert "hi back" in lines[0]
        assert "just for you" in lines[1]

    def test_replies_require_login(self):
        with pytest.raises(AuthenticationRequired):
            self.feeds.replies(self.guest)

    def test_subscribed_includes_private(self):
        self.post(self.alice, "public")
        self.post(self.alice, "*private members only")
        self.service.auth.subscribe(self.bob, "alice")

        lines = self.feeds.subscribed_messages(self.bob)

        assert len(lines) == 2
        assert "members only" in lines[1]

    def test_subscribed_without_subscription(self):
        self.post(self.alice, "*private members only")

        assert self.feeds.subscribed_messages(self.bob) == []

    def test_subscribed_limit_per_user(self):
        carol = self.service.new_session()
        self.service.auth.register(carol, "carol", "pw3")
        for i in range(4):
            self.post(self.alice, f"a{i}")
            self.post(carol, f"c{i}")
        self.service.auth.subscribe(self.bob, "alice")
        self.service.auth.subscribe(self.bob, "carol")

        lines = self.feeds.subscribed_messages(self.bob, limit=2)

        assert len(lines) == 4
        assert sum("<alice" in line for line in lines) == 2
        assert sum("<carol" in line for line in lines) == 2

    def test_subscribed_requires_login(self):
        with pytest.raises(AuthenticationRequired):
            self.feeds.subscribed_messages(self.guest)

    def test_recent_for_guest(self):
        self.post(self.guest, "guest says hi")

        sections = self.feeds.recent(self.guest)

        assert [s.title for s in sections] == ["Guest Messages"]
        assert len(sections[0].lines) == 1

    def test_recent_for_member(self):
        self.post(self.alice, "mine")
        self.post(self.bob, "@alice reply")
        self.post(self.guest, "from guest")

        sections = self.feeds.recent(self.alice)

        assert [s.title for s in sections] == [
            "My Recent Messages",
            "Subscribed To Messages",
            "Replies to Me",
            "Guest Messages",
        ]
        assert len(sections[0].lines) == 1
        assert sections[1].lines == []
        assert len(sections[2].lines) == 1
        assert len(sections[3].lines) == 1

        text = render_sections(sections)
        assert text.index("My Recent Messages:") < text.index("Guest Messages:")


class TestUserListing(FeedTestBase):

    def test_usernames(self):
        names = self.feeds.usernames()

        assert names[0] == "messageservice_guest"
        assert "alice" in names
        assert "bob" in names
