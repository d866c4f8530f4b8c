"""
Twoogle Desktop GUI

customtkinter presentation over the same MessageService the console uses.
The window shares the console's Session, so logging in here is logging in
there.
"""

import logging
import tkinter as tk
from tkinter import messagebox
from typing import Callable, TYPE_CHECKING

import customtkinter as ctk

from ..core.errors import StorageError, ValidationError
from ..core.feeds import render_lines, render_sections
from ..core.session import Session
from ..db.models import Profile
from ..utils.formatting import format_profile

if TYPE_CHECKING:
    from ..core.service import MessageService

logger = logging.getLogger(__name__)


VIEWS = [
    "Recent",
    "User",
    "Tag",
    "Message ID",
    "Subscribed",
    "Subscriptions",
    "Replies",
    "Tags",
    "Users",
]


class TwoogleApp:
    """Main window: account bar, post box, view selector and output pane."""

    def __init__(self, root: ctk.CTk, service: "MessageService", session: Session):
        self.root = root
        self.service = service
        self.session = session
        self.limit = service.config.service.feed_limit

        root.title(service.config.service.name)
        root.geometry("1200x640")

        self._build_account_bar()
        self._build_post_box()
        self._build_view_bar()
        self._build_output()
        self._refresh_account()
        self.show_view("Recent")

    # === Layout ===

    def _build_account_bar(self):
        bar = ctk.CTkFrame(self.root, fg_color="transparent")
        bar.pack(fill="x", padx=8, pady=(8, 4))

        self.account_label = ctk.CTkLabel(bar, text="", font=ctk.CTkFont(weight="bold"))
        self.account_label.pack(side="left")

        ctk.CTkButton(bar, text="Exit", width=70, command=self.root.destroy).pack(side="right")
        self.logout_button = ctk.CTkButton(bar, text="Log out", width=90, command=self.on_logout)
        self.profile_button = ctk.CTkButton(bar, text="Edit Profile", width=110, command=self.on_edit_profile)
        self.subscribe_button = ctk.CTkButton(bar, text="Subscribe", width=100, command=self.on_subscribe)
        self.register_button = ctk.CTkButton(bar, text="Register", width=90, command=self.on_register)
        self.login_button = ctk.CTkButton(bar, text="Log in", width=80, command=self.on_login)

        self.username_var = tk.StringVar()
        self.password_var = tk.StringVar()
        self.username_entry = ctk.CTkEntry(bar, textvariable=self.username_var, width=140)
        self.password_entry = ctk.CTkEntry(
            bar, textvariable=self.password_var, width=140, show="*"
        )

    def _build_post_box(self):
        frame = ctk.CTkFrame(self.root, fg_color="transparent")
        frame.pack(fill="x", padx=8, pady=4)

        ctk.CTkLabel(frame, text="[@user] [#tag] [*private] message:").pack(side="left")
        self.post_var = tk.StringVar()
        entry = ctk.CTkEntry(frame, textvariable=self.post_var)
        entry.pack(side="left", fill="x", expand=True, padx=6)
        entry.bind("<Return>", lambda _event: self.on_post())
        ctk.CTkButton(frame, text="Post!", width=70, command=self.on_post).pack(side="left")

    def _build_view_bar(self):
        frame = ctk.CTkFrame(self.root, fg_color="transparent")
        frame.pack(fill="x", padx=8, pady=4)

        self.view_var = tk.StringVar(value=VIEWS[0])
        ctk.CTkOptionMenu(frame, values=VIEWS, variable=self.view_var, width=140).pack(side="left")

        self.query_var = tk.StringVar()
        ctk.CTkEntry(frame, textvariable=self.query_var, width=200).pack(side="left", padx=6)
        ctk.CTkButton(
            frame, text="Go", width=50, command=lambda: self.show_view(self.view_var.get())
        ).pack(side="left")

    def _build_output(self):
        self.output = ctk.CTkTextbox(self.root, wrap="none", font=("Courier", 12))
        self.output.pack(fill="both", expand=True, padx=8, pady=(4, 8))
        self.output.configure(state="disabled")

    def _refresh_account(self):
        for widget in (
            self.logout_button, self.profile_button, self.subscribe_button,
            self.register_button, self.login_button,
            self.password_entry, self.username_entry,
        ):
            widget.pack_forget()

        if self.session.is_guest:
            self.account_label.configure(text="Browsing as guest")
            for widget in (self.register_button, self.login_button,
                           self.password_entry, self.username_entry):
                widget.pack(side="right", padx=2)
        else:
            self.account_label.configure(text=f"Logged in as {self.session.username}")
            for widget in (self.logout_button, self.profile_button, self.subscribe_button):
                widget.pack(side="right", padx=2)

    def _set_output(self, text: str):
        self.output.configure(state="normal")
        self.output.delete("1.0", "end")
        self.output.insert("1.0", text)
        self.output.configure(state="disabled")

    def _run(self, action: Callable[[], None]) -> bool:
        """Run a service call, showing errors in a dialog."""
        try:
            action()
            return True
        except ValidationError as e:
            messagebox.showerror("Twoogle", str(e))
        except StorageError as e:
            messagebox.showerror("Twoogle", f"{e} Nothing was done.")
        return False

    # === Actions ===

    def on_login(self):
        def action():
            self.service.auth.login(self.session, self.username_var.get(), self.password_var.get())

        if self._run(action):
            self.password_var.set("")
            self._refresh_account()
            self.show_view("Recent")

    def on_logout(self):
        self.service.auth.logout(self.session)
        self._refresh_account()
        self.show_view("Recent")

    def on_register(self):
        ProfileDialog(self.root, self, register=True)

    def on_edit_profile(self):
        ProfileDialog(self.root, self, register=False)

    def on_subscribe(self):
        username = self.query_var.get().strip()
        if not username:
            messagebox.showinfo("Twoogle", "Enter a username in the search box first.")
            return

        def action():
            if self.service.auth.subscribe(self.session, username):
                messagebox.showinfo("Twoogle", f"You are now subscribed to {username}.")
            else:
                messagebox.showinfo("Twoogle", f"You were already subscribed to {username}.")

        self._run(action)

    def on_post(self):
        def action():
            message = self.service.composer.post(self.session, self.post_var.get())
            self.post_var.set("")
            logger.debug(f"GUI posted {message.message_id}")

        if self._run(action):
            self.show_view(self.view_var.get())

    def show_view(self, view: str):
        feeds = self.service.feeds
        query = self.query_var.get().strip()

        def action():
            if view == "Recent":
                text = render_sections(feeds.recent(self.session, self.limit))
            elif view == "User":
                text = render_lines(feeds.user_messages(self.session, query or self.session.username, self.limit))
            elif view == "Tag":
                text = render_lines(feeds.tag_messages(query))
            elif view == "Message ID":
                text = render_lines(feeds.message(self.session, query))
            elif view == "Subscribed":
                text = render_lines(feeds.subscribed_messages(self.session, self.limit))
            elif view == "Subscriptions":
                text = "\n".join(self.service.auth.list_subscriptions(self.session))
            elif view == "Replies":
                text = render_lines(feeds.replies(self.session, self.limit))
            elif view == "Tags":
                text = feeds.tag_listing()
            else:
                text = "\n".join(feeds.usernames())
            self._set_output(text)

        self._run(action)


class ProfileDialog:
    """Register form, or profile editor for a logged in user."""

    def __init__(self, parent: ctk.CTk, app: TwoogleApp, register: bool):
        self.app = app
        self.register = register
        self.window = ctk.CTkToplevel(parent)
        self.window.title("Register" if register else "Edit Profile")
        self.window.transient(parent)

        user = app.session.user
        self.vars = {
            "username": tk.StringVar(),
            "password": tk.StringVar(),
            "gender": tk.StringVar(value="" if register else (user.gender or "")),
            "birth_date": tk.StringVar(value="" if register else (user.birth_date or "")),
            "email": tk.StringVar(value="" if register else (user.email or "")),
            "about_me": tk.StringVar(value="" if register else (user.about_me or "")),
        }
        self.visible_var = tk.BooleanVar(value=True if register else user.profile_visible)

        fields = [("Gender:", "gender"), ("Birthday:", "birth_date"),
                  ("Email:", "email"), ("About me:", "about_me")]
        if register:
            fields = [("Username:", "username"), ("Password:", "password")] + fields

        for row, (label, key) in enumerate(fields):
            ctk.CTkLabel(self.window, text=label).grid(row=row, column=0, sticky="w", padx=8, pady=3)
            ctk.CTkEntry(
                self.window, textvariable=self.vars[key], width=320,
                show="*" if key == "password" else ""
            ).grid(row=row, column=1, padx=8, pady=3)

        row = len(fields)
        ctk.CTkCheckBox(
            self.window, text="Profile publicly visible", variable=self.visible_var
        ).grid(row=row, column=1, sticky="w", padx=8, pady=3)

        buttons = ctk.CTkFrame(self.window, fg_color="transparent")
        buttons.grid(row=row + 1, column=0, columnspan=2, pady=8)
        if register:
            ctk.CTkButton(buttons, text="Register", command=lambda: self.submit(True)).pack(side="left", padx=3)
            ctk.CTkButton(buttons, text="Register (No Profile)",
                          command=lambda: self.submit(False)).pack(side="left", padx=3)
        else:
            ctk.CTkButton(buttons, text="Update Profile",
                          command=lambda: self.submit(True)).pack(side="left", padx=3)
            ctk.CTkButton(buttons, text="Delete Profile", command=self.delete).pack(side="left", padx=3)
        ctk.CTkButton(buttons, text="Cancel", command=self.window.destroy).pack(side="left", padx=3)

    def _profile(self) -> Profile:
        return Profile(
            gender=self.vars["gender"].get().strip() or None,
            birth_date=self.vars["birth_date"].get().strip() or None,
            email=self.vars["email"].get().strip() or None,
            about_me=self.vars["about_me"].get().strip() or None,
            visible=self.visible_var.get()
        )

    def submit(self, with_profile: bool):
        auth = self.app.service.auth
        session = self.app.session

        def action():
            if self.register:
                auth.register(
                    session,
                    self.vars["username"].get(),
                    self.vars["password"].get(),
                    self._profile() if with_profile else None
                )
            else:
                user = auth.update_profile(session, self._profile())
                messagebox.showinfo("Twoogle", format_profile(user))

        if self.app._run(action):
            self.window.destroy()
            self.app._refresh_account()
            self.app.show_view("Recent")

    def delete(self):
        if self.app._run(lambda: self.app.service.auth.delete_profile(self.app.session)):
            self.window.destroy()


def run_gui(service: "MessageService", session: Session):
    """Open the window and block until it is closed."""
    logger.info("Starting GUI")
    ctk.set_appearance_mode("system")
    root = ctk.CTk()
    TwoogleApp(root, service, session)
    root.mainloop()
    logger.info("GUI closed")
