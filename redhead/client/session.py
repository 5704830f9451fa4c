import logging
import os
import random
import string
from pathlib import Path
from typing import Callable

from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError

from ..storage.interface import DEFAULT_CREDITS
from ..storage.model import CamelModel

load_dotenv()

REDHEAD_SESSION_FILE = os.getenv(
    "REDHEAD_SESSION_FILE", str(Path.home() / ".redhead" / "session.json")
)


class SessionUser(CamelModel):
    id: str
    username: str
    email: str
    credits: int


class SessionState(CamelModel):
    user: SessionUser | None = None
    is_loading: bool = False


Listener = Callable[[SessionState], None]


def _mock_user_id() -> str:
    alphabet = string.ascii_lowercase + string.digits
    return "user-" + "".join(random.choices(alphabet, k=9))


class ClientSession:
    """
    Holds the signed-in user and their credit count on the client side.

    There is no server session: the user id is sent with every request.
    Sign-in and sign-up here are local placeholders with no credential
    check. Every mutation notifies all listeners synchronously and rewrites
    the snapshot file, which is read back on construction.
    """

    def __init__(self, snapshot_path: str | Path | None = None):
        self.snapshot_path = Path(snapshot_path or REDHEAD_SESSION_FILE)
        self._state = SessionState()
        self._listeners: list[Listener] = []
        self._restore()

    def _restore(self) -> None:
        if not self.snapshot_path.exists():
            return
        try:
            self._state.user = SessionUser.model_validate_json(
                self.snapshot_path.read_text(encoding="utf-8")
            )
        except ValidationError as e:
            logging.warning(f"Ignoring unreadable session snapshot {self.snapshot_path}: {e}")

    def _persist(self) -> None:
        if self._state.user is None:
            self.snapshot_path.unlink(missing_ok=True)
            return
        self.snapshot_path.parent.mkdir(parents=True, exist_ok=True)
        self.snapshot_path.write_text(
            self._state.user.model_dump_json(by_alias=True), encoding="utf-8"
        )

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self.state)

    @property
    def state(self) -> SessionState:
        return self._state.model_copy(deep=True)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Registers ``listener`` and calls it once with the current state.

        Returns a function that removes the listener again.
        """
        self._listeners.append(listener)
        listener(self.state)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_loading(self, is_loading: bool) -> None:
        self._state.is_loading = is_loading
        self._notify()

    def set_user(self, user: SessionUser | BaseModel | dict | None) -> None:
        """Adopts a user returned by the server (or clears it with ``None``)."""
        if user is None:
            self._state.user = None
        elif isinstance(user, dict):
            self._state.user = SessionUser.model_validate(user)
        else:
            self._state.user = SessionUser.model_validate(user, from_attributes=True)
        self._state.is_loading = False
        self._persist()
        self._notify()

    def sign_in(self, email: str, username: str | None = None) -> SessionUser:
        self._set_loading(True)
        user = SessionUser(
            id=_mock_user_id(),
            username=username or email.split("@")[0],
            email=email,
            credits=DEFAULT_CREDITS,
        )
        self.set_user(user)
        return user

    def sign_up(self, email: str, username: str, password: str) -> SessionUser:
        # The password is accepted for interface parity only; nothing verifies it
        self._set_loading(True)
        user = SessionUser(
            id=_mock_user_id(), username=username, email=email, credits=DEFAULT_CREDITS
        )
        self.set_user(user)
        return user

    def sign_out(self) -> None:
        self.set_user(None)

    def update_credits(self, credits: int) -> None:
        if self._state.user is None:
            return
        self._state.user.credits = credits
        self._persist()
        self._notify()

    def get_user(self) -> SessionUser | None:
        return self.state.user

    def is_authenticated(self) -> bool:
        return self._state.user is not None
