from fastapi import APIRouter, HTTPException, status

from . import model
from . import service
from ..storage.dependency import StorageDep
from ..users.model import SuccessResponse
from ..exceptions import NotFoundError

router = APIRouter(prefix="/api/references", tags=["References"])


@router.get("/{user_id}", response_model=model.ReferencesEnvelope)
def list_references(user_id: str, storage: StorageDep):
    return {"references": service.list_references(storage, user_id)}


@router.post("", response_model=model.ReferenceEnvelope)
def create_reference(reference_request: model.ReferenceCreateRequest, storage: StorageDep):
    try:
        return {"reference": service.create_reference(storage, reference_request)}
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


@router.delete("/{reference_id}", response_model=SuccessResponse)
def delete_reference(reference_id: str, storage: StorageDep):
    service.delete_reference(storage, reference_id)
    return SuccessResponse()
