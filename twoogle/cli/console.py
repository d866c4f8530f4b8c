"""
Twoogle Console Menu

Menu-driven front end. Commands are short case-insensitive mnemonics;
the menu only lists the ones valid for the current session state.
"""

import sys
import logging
from typing import Optional, TextIO, TYPE_CHECKING

from ..core.composer import POST_EXAMPLES, POST_FORMAT_HELP
from ..core.errors import InvalidCredentials, StorageError, UsernameTaken, ValidationError
from ..core.feeds import render_lines, render_sections
from ..db.models import Profile
from ..utils.formatting import format_profile

if TYPE_CHECKING:
    from ..core.service import MessageService

logger = logging.getLogger(__name__)


class ConsoleMenu:
    """Interactive console front end over a MessageService."""

    def __init__(
        self,
        service: "MessageService",
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None
    ):
        self.service = service
        self.config = service.config
        self.session = service.new_session()
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.running = True
        self._eof = False

        # Command registry: command -> (handler, access, help_text)
        # Access levels: "always", "guest", "authenticated"
        self._commands = {}
        self._register_builtins()

    def _register_builtins(self):
        """Register menu commands in display order."""
        self.register("GUI", self.cmd_gui, "always", "load the window driven display")
        self.register("L", self.cmd_login, "guest", "login")
        self.register("R", self.cmd_register, "guest", "register")
        self.register("LO", self.cmd_logout, "authenticated", "logout")
        self.register("UP", self.cmd_update_profile, "authenticated", "create or update your profile")
        self.register("VP", self.cmd_view_profile, "always", "view a profile")
        self.register("E", self.cmd_exit, "always", "exit")
        self.register("PM", self.cmd_post, "always", "post message")
        self.register("VUM", self.cmd_view_user_messages, "always", "view a user's messages")
        self.register("VRM", self.cmd_view_recent, "always", "view most recent messages")
        self.register("VU", self.cmd_view_users, "always", "view a list of users")
        self.register("VT", self.cmd_view_tags, "always", "view a list of tags")
        self.register("VTM", self.cmd_view_tag_messages, "always", "view messages with a tag")
        self.register("VM", self.cmd_view_message, "always", "view a message by its ID")
        self.register("SU", self.cmd_subscribe, "authenticated", "subscribe to a user")
        self.register("VSM", self.cmd_view_subscribed, "authenticated",
                      "view messages from users you have subscribed to")
        self.register("VS", self.cmd_view_subscriptions, "authenticated",
                      "view the users you have subscribed to")
        self.register("?", self.cmd_help, "always", "show this menu")

    def register(self, command: str, handler, access: str, help_text: str):
        """Register a command handler."""
        self._commands[command.upper()] = (handler, access, help_text)

    # === I/O helpers ===

    def write(self, text: str = ""):
        self.stdout.write(text + "\n")
        self.stdout.flush()

    def prompt(self, message: str, default: str = "") -> str:
        """Get user input with optional default."""
        if default:
            self.stdout.write(f"{message} [{default}]: ")
        else:
            self.stdout.write(f"{message} ")
        self.stdout.flush()

        line = self.stdin.readline()
        if not line:
            self._eof = True
        result = line.strip()
        return result if result else default

    def confirm(self, message: str) -> bool:
        """Ask until the answer is yes or no; end of input means no."""
        while True:
            answer = self.prompt(f"{message} [y/n]").lower()
            if answer in ("y", "yes"):
                return True
            if answer in ("n", "no") or self._eof:
                return False
            self.write("I'm sorry that was not a yes or no answer. Please try again!")

    def prompt_int(self, message: str, default: int) -> int:
        value = self.prompt(message, str(default))
        try:
            return int(value)
        except ValueError:
            self.write(f"Not a number, using {default}.")
            return default

    def prompt_for_username(self, message: str) -> Optional[str]:
        """Ask for a registered username, offering retries."""
        while True:
            username = self.prompt(message).lower()
            if self._eof:
                return None
            if username and self.service.auth.username_exists(username):
                return username
            if not self.confirm("I'm sorry that username is not registered. Try again?"):
                return None

    def print_box(self, title: str, content: list[str], width: int = 61):
        """Print a bordered menu box."""
        border_h = "─" * (width - 2)
        self.write(f"┌{border_h}┐")
        self.write(f"│{title.center(width - 2)}│")
        self.write(f"├{border_h}┤")
        for line in content:
            padded = line.ljust(width - 4)[:width - 4]
            self.write(f"│ {padded} │")
        self.write(f"└{border_h}┘")

    # === Menu loop ===

    def available_commands(self) -> list[str]:
        """Commands valid for the current session state."""
        guest = self.session.is_guest
        result = []
        for cmd, (_, access, _) in self._commands.items():
            if access == "guest" and not guest:
                continue
            if access == "authenticated" and guest:
                continue
            result.append(cmd)
        return result

    def show_menu(self):
        content = [
            f"Press '{cmd}' to {self._commands[cmd][2]}"
            for cmd in self.available_commands()
        ]
        who = "guest" if self.session.is_guest else self.session.username
        self.print_box(f"{self.config.service.name} ({who})", content)

    def run(self) -> int:
        """Loop until the user exits or input ends."""
        self.write(f"Welcome to {self.config.service.name}!")
        while self.running:
            self.show_menu()
            choice = self.prompt("Menu Choice?")
            if self._eof and not choice:
                break
            self.write()
            self.dispatch(choice)

        self.write(f"Thanks for using {self.config.service.name}. Have a nice day!")
        return 0

    def dispatch(self, choice: str):
        """Run one menu command, reporting errors without leaving the loop."""
        cmd = choice.strip().upper()
        if cmd not in self.available_commands():
            self.write("I'm sorry I don't recognize that option. "
                       "Please select an option from the menu.")
            return

        handler, _, _ = self._commands[cmd]
        try:
            handler()
        except ValidationError as e:
            self.write(str(e))
        except StorageError as e:
            self.write(f"{e} Nothing was done.")

    # === Command handlers ===

    def cmd_help(self):
        self.show_menu()

    def cmd_exit(self):
        logger.debug("Exit requested from console")
        self.running = False

    def cmd_gui(self):
        if not self.config.features.gui_enabled:
            self.write("The window driven display is disabled.")
            return
        from ..gui.app import run_gui
        run_gui(self.service, self.session)

    def cmd_login(self):
        attempts = self.config.service.login_attempts
        for attempt in range(attempts):
            if attempt > 0:
                self.write("Incorrect username and/or password")
            username = self.prompt("Username:")
            password = self.prompt("Password:")
            if self._eof and not username:
                return
            try:
                user = self.service.auth.login(self.session, username, password)
            except InvalidCredentials:
                continue

            self.write(f"Welcome back, {user.username}!")
            if user.has_profile:
                self.write(format_profile(user))
            self.cmd_view_recent()
            return

        self.write("Login failed; you are still browsing as a guest.")

    def cmd_logout(self):
        self.service.auth.logout(self.session)
        self.write("You have been logged out.")

    def cmd_register(self):
        auth = self.service.auth
        username = self.prompt("Username?").lower()
        while username and auth.username_exists(username):
            if not self.confirm("Username already exists, would you like to choose another?"):
                return
            username = self.prompt("Username?").lower()
        auth.validate_username(username)

        password = self.prompt("Password?")
        profile = None
        if self.confirm("Would you like to create a profile?"):
            profile = self._prompt_profile(Profile())

        try:
            user = auth.register(self.session, username, password, profile)
        except UsernameTaken as e:
            self.write(str(e))
            return
        self.write(f"Welcome, {user.username}! You are now logged in.")

    def _prompt_profile(self, profile: Profile) -> Profile:
        profile.gender = self.prompt("Gender?", profile.gender or "") or None
        profile.birth_date = self.prompt("Birthdate?", profile.birth_date or "") or None
        profile.email = self.prompt("Email?", profile.email or "") or None
        profile.about_me = self.prompt(
            "Write a short message about yourself:", profile.about_me or ""
        ) or None
        return profile

    def cmd_update_profile(self):
        user = self.session.user
        if not user.has_profile:
            if not self.confirm("You do not have a profile. Would you like to create one?"):
                self.write("Returning to menu.")
                return
            profile = self._prompt_profile(Profile())
        else:
            profile = Profile(
                gender=user.gender,
                birth_date=user.birth_date,
                email=user.email,
                about_me=user.about_me,
                visible=user.profile_visible
            )
            self._edit_profile_fields(profile)

        self.service.auth.update_profile(self.session, profile)
        self.write("Your profile has been saved.")

    def _edit_profile_fields(self, profile: Profile):
        while True:
            self.write("* Press 'GEN' to edit gender.")
            self.write("* Press 'BDAY' to edit birthdate.")
            self.write("* Press 'EM' to edit email.")
            self.write("* Press 'MES' to edit your description.")
            self.write("* Press 'VIS' to edit profile visibility.")
            self.write("* Press 'E' to finish editing your profile.")
            choice = self.prompt("Choice?").lower()

            if choice == "gen":
                profile.gender = self.prompt("Gender?") or None
            elif choice == "bday":
                profile.birth_date = self.prompt("Birthdate?") or None
            elif choice == "em":
                profile.email = self.prompt("Email?") or None
            elif choice == "mes":
                profile.about_me = self.prompt("Short message about yourself:") or None
            elif choice == "vis":
                profile.visible = self.confirm("Would you like your profile to be publicly visible?")
            elif choice == "e" or self._eof:
                return

    def cmd_view_profile(self):
        username = self.prompt_for_username("What username's profile would you like to view?")
        if username is None:
            return
        user = self.service.auth.get_profile(self.session, username)
        self.write(format_profile(user))

    def cmd_post(self):
        for example in POST_EXAMPLES:
            self.write(example)
        self.write(POST_FORMAT_HELP)
        text = self.prompt("Message:")
        message = self.service.composer.post(self.session, text)
        self.write(f"Posted message ({message.message_id}).")

    def cmd_view_user_messages(self):
        username = self.prompt_for_username("View messages of which username?")
        if username is None:
            return
        limit = self.prompt_int(
            "How many messages would you like to display?",
            self.config.service.feed_limit
        )
        self.write(render_lines(self.service.feeds.user_messages(self.session, username, limit)))

    def cmd_view_recent(self):
        sections = self.service.feeds.recent(self.session, self.config.service.feed_limit)
        self.write(render_sections(sections))

    def cmd_view_users(self):
        self.write("\n".join(self.service.feeds.usernames()))

    def cmd_view_tags(self):
        self.write(self.service.feeds.tag_listing())

    def cmd_view_tag_messages(self):
        tag = self.prompt("Which tag do you want to search for? (Example: #oranges)")
        self.write(render_lines(self.service.feeds.tag_messages(tag)))

    def cmd_view_message(self):
        message_id = self.prompt("What is the message id?")
        lines = self.service.feeds.message(self.session, message_id)
        self.write(render_lines(lines) if lines else "No message with that id.")

    def cmd_subscribe(self):
        username = self.prompt_for_username("What username would you like to subscribe to?")
        if username is None:
            return
        if self.service.auth.subscribe(self.session, username):
            self.write(f"You are now subscribed to {username}.")
        else:
            self.write(f"You were already subscribed to {username}.")

    def cmd_view_subscriptions(self):
        usernames = self.service.auth.list_subscriptions(self.session)
        if not usernames:
            self.write("You have not subscribed to anyone yet.")
            return
        self.write("\n".join(usernames))

    def cmd_view_subscribed(self):
        limit = self.prompt_int(
            "How many messages from each subscribed to user would you like to display?",
            self.config.service.feed_limit
        )
        self.write(render_lines(self.service.feeds.subscribed_messages(self.session, limit)))


def run_console(service: "MessageService") -> int:
    """Run the console front end until the user exits."""
    return ConsoleMenu(service).run()
