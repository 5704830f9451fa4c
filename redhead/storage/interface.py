from abc import ABC, abstractmethod
from typing import Any

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

DEFAULT_CREDITS = 120
DEFAULT_HISTORY_LIMIT = 50
GENERATION_COST = 4


class Storage(ABC):
    """
    Persistence contract for users, saved styles, image history and reference
    uploads.

    Lookups return ``None`` for unknown ids instead of raising, deletes are
    idempotent, and identifiers are always generated by the backend. Callers
    depend only on this interface so the in-memory and SQL backends can be
    swapped without touching the services.
    """

    # Users

    @abstractmethod
    def get_user(self, user_id: str) -> User | None: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> User | None: ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> User | None: ...

    @abstractmethod
    def create_user(self, user: UserCreate) -> User:
        """Stores a new user with ``DEFAULT_CREDITS``.

        Raises ConflictError if the username or email is already taken.
        """

    @abstractmethod
    def update_user_credits(self, user_id: str, credits: int) -> User | None: ...

    @abstractmethod
    def update_user_preferences(
        self, user_id: str, preferences: UserPreferences | None
    ) -> User | None: ...

    # Saved styles

    @abstractmethod
    def list_saved_styles(self, user_id: str) -> list[SavedStyle]: ...

    @abstractmethod
    def get_saved_style(self, style_id: str) -> SavedStyle | None: ...

    @abstractmethod
    def create_saved_style(self, style: SavedStyleCreate) -> SavedStyle: ...

    @abstractmethod
    def update_saved_style(
        self, style_id: str, updates: dict[str, Any]
    ) -> SavedStyle | None: ...

    @abstractmethod
    def delete_saved_style(self, style_id: str) -> None: ...

    @abstractmethod
    def increment_style_usage(self, style_id: str) -> None:
        """Adds one to ``usage_count``; silently does nothing for unknown ids."""

    # Image history

    @abstractmethod
    def list_image_history(
        self, user_id: str, limit: int = DEFAULT_HISTORY_LIMIT
    ) -> list[ImageHistory]:
        """Returns the user's records, most recently generated first."""

    @abstractmethod
    def get_image_history_item(self, history_id: str) -> ImageHistory | None: ...

    @abstractmethod
    def create_image_history(self, history: ImageHistoryCreate) -> ImageHistory: ...

    @abstractmethod
    def record_generation(
        self, history: ImageHistoryCreate, cost: int
    ) -> GenerationRecord | None:
        """Debits ``cost`` and appends ``history`` as one atomic step.

        The debit is conditional on the balance still covering ``cost``; when
        it does not (or the user is gone) nothing is written and ``None`` is
        returned.
        """

    # Reference uploads

    @abstractmethod
    def list_reference_uploads(self, user_id: str) -> list[ReferenceUpload]: ...

    @abstractmethod
    def get_reference_upload(self, upload_id: str) -> ReferenceUpload | None: ...

    @abstractmethod
    def create_reference_upload(
        self, upload: ReferenceUploadCreate
    ) -> ReferenceUpload: ...

    @abstractmethod
    def delete_reference_upload(self, upload_id: str) -> None: ...
