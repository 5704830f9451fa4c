import itertools
import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Any

from ..exceptions import ConflictError
from .interface import DEFAULT_CREDITS, DEFAULT_HISTORY_LIMIT, Storage
from .model import (
    GenerationRecord,
    ImageHistory,
    ImageHistoryCreate,
    ReferenceUpload,
    ReferenceUploadCreate,
    SavedStyle,
    SavedStyleCreate,
    User,
    UserCreate,
    UserPreferences,
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MemStorage(Storage):
    """Single-process storage backed by dictionaries.

    Every operation runs under one re-entrant lock, which is what makes
    ``record_generation`` atomic when sync endpoints run in FastAPI's thread
    pool. Records are copied on the way in and out so callers never hold a
    reference into the store.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._users: dict[str, User] = {}
        self._saved_styles: dict[str, SavedStyle] = {}
        self._image_history: dict[str, ImageHistory] = {}
        self._reference_uploads: dict[str, ReferenceUpload] = {}
        # Breaks generated_at ties so equal timestamps still list newest first
        self._history_sequence: dict[str, int] = {}
        self._counter = itertools.count()

    # Users

    def get_user(self, user_id: str) -> User | None:
        with self._lock:
            user = self._users.get(user_id)
            return user.model_copy(deep=True) if user else None

    def get_user_by_username(self, username: str) -> User | None:
        with self._lock:
            for user in self._users.values():
                if user.username == username:
                    return user.model_copy(deep=True)
        return None

    def get_user_by_email(self, email: str) -> User | None:
        with self._lock:
            for user in self._users.values():
                if user.email == email:
                    return user.model_copy(deep=True)
        return None

    def create_user(self, user: UserCreate) -> User:
        with self._lock:
            for existing in self._users.values():
                if existing.username == user.username or existing.email == user.email:
                    raise ConflictError("User already exists")
            db_user = User(
                id=str(uuid.uuid4()),
                username=user.username,
                email=user.email,
                hashed_password=user.hashed_password,
                credits=DEFAULT_CREDITS,
                preferences=None,
            )
            self._users[db_user.id] = db_user
            logging.debug(f"Stored user {db_user.id} ({db_user.username})")
            return db_user.model_copy(deep=True)

    def update_user_credits(self, user_id: str, credits: int) -> User | None:
        with self._lock:
            user = self._users.get(user_id)
            if not user:
                return None
            user.credits = credits
            return user.model_copy(deep=True)

    def update_user_preferences(
        self, user_id: str, preferences: UserPreferences | None
    ) -> User | None:
        with self._lock:
            user = self._users.get(user_id)
            if not user:
                return None
            user.preferences = preferences.model_copy() if preferences else None
            return user.model_copy(deep=True)

    # Saved styles

    def list_saved_styles(self, user_id: str) -> list[SavedStyle]:
        with self._lock:
            return [
                style.model_copy(deep=True)
                for style in self._saved_styles.values()
                if style.user_id == user_id
            ]

    def get_saved_style(self, style_id: str) -> SavedStyle | None:
        with self._lock:
            style = self._saved_styles.get(style_id)
            return style.model_copy(deep=True) if style else None

    def create_saved_style(self, style: SavedStyleCreate) -> SavedStyle:
        db_style = SavedStyle(
            id=str(uuid.uuid4()),
            usage_count=0,
            created_at=_now(),
            **style.model_dump(),
        )
        with self._lock:
            self._saved_styles[db_style.id] = db_style
        return db_style.model_copy(deep=True)

    def update_saved_style(
        self, style_id: str, updates: dict[str, Any]
    ) -> SavedStyle | None:
        with self._lock:
            style = self._saved_styles.get(style_id)
            if not style:
                return None
            updated = style.model_copy(update=updates, deep=True)
            self._saved_styles[style_id] = updated
            return updated.model_copy(deep=True)

    def delete_saved_style(self, style_id: str) -> None:
        with self._lock:
            self._saved_styles.pop(style_id, None)

    def increment_style_usage(self, style_id: str) -> None:
        with self._lock:
            style = self._saved_styles.get(style_id)
            if style:
                style.usage_count += 1

    # Image history

    def list_image_history(
        self, user_id: str, limit: int = DEFAULT_HISTORY_LIMIT
    ) -> list[ImageHistory]:
        with self._lock:
            items = [
                item for item in self._image_history.values() if item.user_id == user_id
            ]
            items.sort(
                key=lambda item: (item.generated_at, self._history_sequence[item.id]),
                reverse=True,
            )
            return [item.model_copy(deep=True) for item in items[:limit]]

    def get_image_history_item(self, history_id: str) -> ImageHistory | None:
        with self._lock:
            item = self._image_history.get(history_id)
            return item.model_copy(deep=True) if item else None

    def create_image_history(self, history: ImageHistoryCreate) -> ImageHistory:
        payload = history.model_dump()
        payload["generated_at"] = history.generated_at or _now()
        db_history = ImageHistory(id=str(uuid.uuid4()), **payload)
        with self._lock:
            self._image_history[db_history.id] = db_history
            self._history_sequence[db_history.id] = next(self._counter)
        return db_history.model_copy(deep=True)

    def record_generation(
        self, history: ImageHistoryCreate, cost: int
    ) -> GenerationRecord | None:
        with self._lock:
            user = self._users.get(history.user_id)
            if not user or user.credits < cost:
                return None
            db_history = self.create_image_history(history)
            user.credits -= cost
            return GenerationRecord(history=db_history, credits_remaining=user.credits)

    # Reference uploads

    def list_reference_uploads(self, user_id: str) -> list[ReferenceUpload]:
        with self._lock:
            return [
                upload.model_copy()
                for upload in self._reference_uploads.values()
                if upload.user_id == user_id
            ]

    def get_reference_upload(self, upload_id: str) -> ReferenceUpload | None:
        with self._lock:
            upload = self._reference_uploads.get(upload_id)
            return upload.model_copy() if upload else None

    def create_reference_upload(self, upload: ReferenceUploadCreate) -> ReferenceUpload:
        db_upload = ReferenceUpload(
            id=str(uuid.uuid4()), uploaded_at=_now(), **upload.model_dump()
        )
        with self._lock:
            self._reference_uploads[db_upload.id] = db_upload
        return db_upload.model_copy()

    def delete_reference_upload(self, upload_id: str) -> None:
        with self._lock:
            self._reference_uploads.pop(upload_id, None)
