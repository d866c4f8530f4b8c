"""
Tests for Twoogle Console Menu
"""

import io

from twoogle.cli.console import ConsoleMenu
from twoogle.config import Config
from twoogle.core.service import MessageService
from twoogle.db.connection import Database


def make_service() -> MessageService:
    """Service on an in-memory database with cheap password hashing."""
    config = Config()
    config.crypto.argon2_time_cost = 1
    config.crypto.argon2_memory_kb = 8192
    return MessageService(config, db=Database(":memory:")).setup()


def run_script(service: MessageService, *lines: str) -> tuple[ConsoleMenu, str]:
    """Feed input lines to a console menu and return it with its output."""
    stdin = io.StringIO("".join(f"{line}\n" for line in lines))
    stdout = io.StringIO()
    menu = ConsoleMenu(service, stdin=stdin, stdout=stdout)
    menu.run()
    return menu, stdout.getvalue()


class TestMenu:
    """Tests for the menu loop and command gating."""

    def setup_method(self):
        self.service = make_service()

    def test_exit(self):
        menu, output = run_script(self.service, "E")

        assert menu.running is False
        assert "Have a nice day!" in output

    def test_end_of_input_exits(self):
        _, output = run_script(self.service)

        assert "Welcome to Twoogle!" in output
        assert "Have a nice day!" in output

    def test_guest_menu(self):
        menu = ConsoleMenu(self.service, stdin=io.StringIO(), stdout=io.StringIO())
        commands = menu.available_commands()

        assert "L" in commands
        assert "R" in commands
        assert "SU" not in commands
        assert "VSM" not in commands
        assert "LO" not in commands

    def test_commands_case_insensitive(self):
        _, output = run_script(self.service, "vu", "e")

        assert "messageservice_guest" in output

    def test_unknown_command(self):
        _, output = run_script(self.service, "XYZ", "E")

        assert "I'm sorry I don't recognize that option." in output

    def test_guest_cannot_subscribe(self):
        _, output = run_script(self.service, "SU", "E")

        assert "I'm sorry I don't recognize that option." in output


class TestSessionFlows:
    """End-to-end console flows."""

    def setup_method(self):
        self.service = make_service()

    def register_alice(self):
        self.service.auth.register(self.service.new_session(), "alice", "pw1")

    def test_register_post_and_view(self):
        menu, output = run_script(
            self.service,
            "R", "alice", "pw1", "n",
            "PM", "Hello world",
            "VM", "alice_1",
            "E"
        )

        assert menu.session.username == "alice"
        assert "Welcome, alice! You are now logged in." in output
        assert "Posted message (alice_1)." in output
        assert "<alice @nobody>" in output
        assert '"Hello world"' in output

    def test_register_with_profile(self):
        _, output = run_script(
            self.service,
            "R", "alice", "pw1", "y", "F", "1990-01-01", "a@example.com", "hi there",
            "E"
        )

        user = self.service.users.get_user_by_username("alice")
        assert user.has_profile
        assert user.about_me == "hi there"
        assert "You are now logged in." in output

    def test_register_empty_username(self):
        _, output = run_script(self.service, "R", "", "E")

        assert "Username cannot be empty." in output
        assert self.service.db.count_users() == 1

    def test_register_taken_username_declined(self):
        self.register_alice()

        _, output = run_script(self.service, "R", "alice", "n", "E")

        assert "Username already exists" in output
        assert self.service.db.count_users() == 2

    def test_login_success(self):
        self.register_alice()

        menu, output = run_script(self.service, "L", "alice", "pw1", "E")

        assert menu.session.is_authenticated
        assert "Welcome back, alice!" in output
        assert "My Recent Messages:" in output
        assert "Guest Messages:" in output

    def test_login_three_failures(self):
        self.register_alice()

        menu, output = run_script(
            self.service,
            "L", "alice", "x", "alice", "y", "alice", "z",
            "E"
        )

        assert menu.session.is_guest
        assert output.count("Incorrect username and/or password") == 2
        assert "Login failed; you are still browsing as a guest." in output

    def test_logout(self):
        self.register_alice()

        menu, output = run_script(self.service, "L", "alice", "pw1", "LO", "E")

        assert menu.session.is_guest
        assert "You have been logged out." in output

    def test_post_too_long(self):
        _, output = run_script(self.service, "PM", "x" * 141, "E")

        assert "140" in output
        assert self.service.db.count_messages() == 0

    def test_subscribe_and_view(self):
        self.register_alice()
        alice = self.service.new_session()
        self.service.auth.login(alice, "alice", "pw1")
        self.service.composer.post(alice, "*private members only")

        _, output = run_script(
            self.service,
            "R", "bob", "pw2", "n",
            "SU", "alice",
            "VSM", "5",
            "E"
        )

        assert "You are now subscribed to alice." in output
        assert "members only" in output

    def test_view_subscriptions(self):
        self.register_alice()

        _, output = run_script(
            self.service,
            "R", "bob", "pw2", "n",
            "VS",
            "SU", "alice",
            "VS",
            "E"
        )

        assert "You have not subscribed to anyone yet." in output
        assert "\nalice\n" in output

    def test_view_subscriptions_hidden_from_guest(self):
        _, output = run_script(self.service, "VS", "E")

        assert "I'm sorry I don't recognize that option." in output

    def test_view_profile_unknown_user_declined(self):
        _, output = run_script(self.service, "VP", "nobody", "n", "E")

        assert "that username is not registered" in output

    def test_view_tags(self):
        guest = self.service.new_session()
        self.service.composer.post(guest, "#funny knock knock")

        _, output = run_script(self.service, "VT", "VTM", "#funny", "E")

        assert "#funny (1)" in output
        assert "knock knock" in output

    def test_view_missing_message(self):
        _, output = run_script(self.service, "VM", "nobody_1", "E")

        assert "No message with that id." in output
