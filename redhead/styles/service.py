import logging

from . import model
from ..storage.interface import Storage
from ..storage.model import SavedStyle, SavedStyleCreate
from ..exceptions import BadRequestError, NotFoundError


def list_styles(storage: Storage, user_id: str) -> list[SavedStyle]:
    return storage.list_saved_styles(user_id)


def create_style(storage: Storage, style_request: model.StyleCreateRequest) -> SavedStyle:
    if not storage.get_user(style_request.user_id):
        logging.warning(f"Cannot save style, user {style_request.user_id} not found.")
        raise NotFoundError("User")
    style = storage.create_saved_style(SavedStyleCreate(**style_request.model_dump()))
    logging.info(f"Saved style {style.id} ({style.name}) for user {style.user_id}")
    return style


def update_style(
    storage: Storage, style_id: str, style_update: model.StyleUpdateRequest
) -> SavedStyle:
    updates = style_update.model_dump(exclude_unset=True)
    for field in ("name", "base_style", "tags"):
        if field in updates and updates[field] is None:
            raise BadRequestError(f"{field} cannot be null")
    style = storage.update_saved_style(style_id, updates)
    if not style:
        raise NotFoundError("Style")
    return style


def delete_style(storage: Storage, style_id: str) -> None:
    """Deletes a saved style. Unknown ids are ignored; history keeps its style_id."""
    storage.delete_saved_style(style_id)
    logging.info(f"Deleted style {style_id}")
