import logging

from . import model
from ..storage.interface import Storage
from ..storage.model import ReferenceUpload, ReferenceUploadCreate
from ..exceptions import NotFoundError


def list_references(storage: Storage, user_id: str) -> list[ReferenceUpload]:
    return storage.list_reference_uploads(user_id)


def create_reference(
    storage: Storage, reference_request: model.ReferenceCreateRequest
) -> ReferenceUpload:
    if not storage.get_user(reference_request.user_id):
        logging.warning(f"Cannot record upload, user {reference_request.user_id} not found.")
        raise NotFoundError("User")
    reference = storage.create_reference_upload(
        ReferenceUploadCreate(**reference_request.model_dump())
    )
    logging.info(f"Recorded reference upload {reference.id} for user {reference.user_id}")
    return reference


def delete_reference(storage: Storage, reference_id: str) -> None:
    storage.delete_reference_upload(reference_id)
