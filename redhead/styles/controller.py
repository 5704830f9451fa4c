from fastapi import APIRouter, HTTPException, status

from . import model
from . import service
from ..storage.dependency import StorageDep
from ..users.model import SuccessResponse
from ..exceptions import BadRequestError, NotFoundError

router = APIRouter(prefix="/api/styles", tags=["Styles"])


@router.get("/{user_id}", response_model=model.StylesEnvelope)
def list_styles(user_id: str, storage: StorageDep):
    return {"styles": service.list_styles(storage, user_id)}


@router.post("", response_model=model.StyleEnvelope)
def create_style(style_request: model.StyleCreateRequest, storage: StorageDep):
    try:
        return {"style": service.create_style(storage, style_request)}
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


@router.patch("/{style_id}", response_model=model.StyleEnvelope)
def update_style(style_id: str, style_update: model.StyleUpdateRequest, storage: StorageDep):
    try:
        return {"style": service.update_style(storage, style_id, style_update)}
    except BadRequestError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


@router.delete("/{style_id}", response_model=SuccessResponse)
def delete_style(style_id: str, storage: StorageDep):
    service.delete_style(storage, style_id)
    return SuccessResponse()
