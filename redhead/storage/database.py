import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..entities.image_history import ImageHistory as ImageHistoryEntity
from ..entities.reference_upload import ReferenceUpload as ReferenceUploadEntity
from ..entities.saved_style import SavedStyle as SavedStyleEntity
from ..entities.user import User as UserEntity
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


class SqlStorage(Storage):
    """Storage backed by a SQLAlchemy session (one per request)."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def _commit(self) -> None:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    # Users

    def get_user(self, user_id: str) -> User | None:
        db_user = self.db.get(UserEntity, user_id)
        return User.model_validate(db_user) if db_user else None

    def get_user_by_username(self, username: str) -> User | None:
        db_user = self.db.query(UserEntity).filter(UserEntity.username == username).first()
        return User.model_validate(db_user) if db_user else None

    def get_user_by_email(self, email: str) -> User | None:
        db_user = self.db.query(UserEntity).filter(UserEntity.email == email).first()
        return User.model_validate(db_user) if db_user else None

    def create_user(self, user: UserCreate) -> User:
        db_user = UserEntity(
            username=user.username,
            email=user.email,
            hashed_password=user.hashed_password,
            credits=DEFAULT_CREDITS,
        )
        try:
            self.db.add(db_user)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logging.warning(
                f"IntegrityError registering user {user.username} or email {user.email}: {e}"
            )
            raise ConflictError("User already exists")
        self.db.refresh(db_user)
        return User.model_validate(db_user)

    def update_user_credits(self, user_id: str, credits: int) -> User | None:
        db_user = self.db.get(UserEntity, user_id)
        if not db_user:
            return None
        db_user.credits = credits
        self._commit()
        self.db.refresh(db_user)
        return User.model_validate(db_user)

    def update_user_preferences(
        self, user_id: str, preferences: UserPreferences | None
    ) -> User | None:
        db_user = self.db.get(UserEntity, user_id)
        if not db_user:
            return None
        db_user.preferences = preferences.model_dump() if preferences else None
        self._commit()
        self.db.refresh(db_user)
        return User.model_validate(db_user)

    # Saved styles

    def list_saved_styles(self, user_id: str) -> list[SavedStyle]:
        rows = (
            self.db.query(SavedStyleEntity)
            .filter(SavedStyleEntity.user_id == user_id)
            .order_by(SavedStyleEntity.created_at)
            .all()
        )
        return [SavedStyle.model_validate(row) for row in rows]

    def get_saved_style(self, style_id: str) -> SavedStyle | None:
        db_style = self.db.get(SavedStyleEntity, style_id)
        return SavedStyle.model_validate(db_style) if db_style else None

    def create_saved_style(self, style: SavedStyleCreate) -> SavedStyle:
        db_style = SavedStyleEntity(**style.model_dump(), usage_count=0)
        self.db.add(db_style)
        self._commit()
        self.db.refresh(db_style)
        return SavedStyle.model_validate(db_style)

    def update_saved_style(
        self, style_id: str, updates: dict[str, Any]
    ) -> SavedStyle | None:
        db_style = self.db.get(SavedStyleEntity, style_id)
        if not db_style:
            return None
        for field, value in updates.items():
            setattr(db_style, field, value)
        self._commit()
        self.db.refresh(db_style)
        return SavedStyle.model_validate(db_style)

    def delete_saved_style(self, style_id: str) -> None:
        self.db.query(SavedStyleEntity).filter(SavedStyleEntity.id == style_id).delete()
        self._commit()

    def increment_style_usage(self, style_id: str) -> None:
        self.db.execute(
            update(SavedStyleEntity)
            .where(SavedStyleEntity.id == style_id)
            .values(usage_count=SavedStyleEntity.usage_count + 1)
        )
        self._commit()

    # Image history

    def list_image_history(
        self, user_id: str, limit: int = DEFAULT_HISTORY_LIMIT
    ) -> list[ImageHistory]:
        rows = (
            self.db.query(ImageHistoryEntity)
            .filter(ImageHistoryEntity.user_id == user_id)
            .order_by(ImageHistoryEntity.generated_at.desc())
            .limit(limit)
            .all()
        )
        return [ImageHistory.model_validate(row) for row in rows]

    def get_image_history_item(self, history_id: str) -> ImageHistory | None:
        db_history = self.db.get(ImageHistoryEntity, history_id)
        return ImageHistory.model_validate(db_history) if db_history else None

    def _new_history(self, history: ImageHistoryCreate) -> ImageHistoryEntity:
        payload = history.model_dump()
        payload["generated_at"] = history.generated_at or datetime.now(timezone.utc)
        return ImageHistoryEntity(**payload)

    def create_image_history(self, history: ImageHistoryCreate) -> ImageHistory:
        db_history = self._new_history(history)
        self.db.add(db_history)
        self._commit()
        self.db.refresh(db_history)
        return ImageHistory.model_validate(db_history)

    def record_generation(
        self, history: ImageHistoryCreate, cost: int
    ) -> GenerationRecord | None:
        try:
            result = self.db.execute(
                update(UserEntity)
                .where(UserEntity.id == history.user_id, UserEntity.credits >= cost)
                .values(credits=UserEntity.credits - cost)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                self.db.rollback()
                return None
            db_history = self._new_history(history)
            self.db.add(db_history)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(db_history)
        db_user = self.db.get(UserEntity, history.user_id)
        self.db.refresh(db_user)
        return GenerationRecord(
            history=ImageHistory.model_validate(db_history),
            credits_remaining=db_user.credits,
        )

    # Reference uploads

    def list_reference_uploads(self, user_id: str) -> list[ReferenceUpload]:
        rows = (
            self.db.query(ReferenceUploadEntity)
            .filter(ReferenceUploadEntity.user_id == user_id)
            .order_by(ReferenceUploadEntity.uploaded_at)
            .all()
        )
        return [ReferenceUpload.model_validate(row) for row in rows]

    def get_reference_upload(self, upload_id: str) -> ReferenceUpload | None:
        db_upload = self.db.get(ReferenceUploadEntity, upload_id)
        return ReferenceUpload.model_validate(db_upload) if db_upload else None

    def create_reference_upload(self, upload: ReferenceUploadCreate) -> ReferenceUpload:
        db_upload = ReferenceUploadEntity(**upload.model_dump())
        self.db.add(db_upload)
        self._commit()
        self.db.refresh(db_upload)
        return ReferenceUpload.model_validate(db_upload)

    def delete_reference_upload(self, upload_id: str) -> None:
        self.db.query(ReferenceUploadEntity).filter(
            ReferenceUploadEntity.id == upload_id
        ).delete()
        self._commit()
