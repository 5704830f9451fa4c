from fastapi import APIRouter, HTTPException, status

from . import model
from . import service
from ..auth.model import UserEnvelope
from ..storage.dependency import StorageDep
from ..exceptions import NotFoundError

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("/{user_id}", response_model=UserEnvelope)
def read_user(user_id: str, storage: StorageDep):
    """Returns the public fields of a user."""
    try:
        return {"user": service.get_user(storage, user_id)}
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


@router.patch("/{user_id}/credits", response_model=model.SuccessResponse)
def update_user_credits(user_id: str, credits_update: model.CreditsUpdate, storage: StorageDep):
    try:
        service.set_user_credits(storage, user_id, credits_update.credits)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    return model.SuccessResponse()


@router.patch("/{user_id}/preferences", response_model=model.SuccessResponse)
def update_user_preferences(
    user_id: str, preferences_update: model.PreferencesUpdate, storage: StorageDep
):
    try:
        service.set_user_preferences(storage, user_id, preferences_update.preferences)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    return model.SuccessResponse()
