import logging

from ..storage.interface import DEFAULT_HISTORY_LIMIT, Storage
from ..storage.model import ImageHistory
from ..exceptions import NotFoundError


def list_history(
    storage: Storage, user_id: str, limit: int | None = None
) -> list[ImageHistory]:
    """Newest first, capped at ``limit`` (50 when not given)."""
    return storage.list_image_history(user_id, limit or DEFAULT_HISTORY_LIMIT)


def get_history_item(storage: Storage, history_id: str) -> ImageHistory:
    item = storage.get_image_history_item(history_id)
    if not item:
        logging.warning(f"History item {history_id} not found.")
        raise NotFoundError("History item")
    return item
