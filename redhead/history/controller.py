from fastapi import APIRouter, HTTPException, Query, status

from . import model
from . import service
from ..storage.dependency import StorageDep
from ..exceptions import NotFoundError

router = APIRouter(prefix="/api/history", tags=["History"])


# Declared before /{user_id} so "item" is never read as a user id
@router.get("/item/{history_id}", response_model=model.HistoryItemEnvelope)
def read_history_item(history_id: str, storage: StorageDep):
    try:
        return {"item": service.get_history_item(storage, history_id)}
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


@router.get("/{user_id}", response_model=model.HistoryEnvelope)
def list_history(user_id: str, storage: StorageDep, limit: int | None = Query(None, ge=1)):
    return {"history": service.list_history(storage, user_id, limit)}
