from fastapi import APIRouter, HTTPException, status

from . import model
from . import service
from ..storage.dependency import StorageDep
from ..exceptions import AuthenticationError, BadRequestError, ConflictError

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/register", response_model=model.UserEnvelope)
def register_user(register_user_request: model.RegisterUserRequest, storage: StorageDep):
    try:
        user = service.register_user(storage, register_user_request)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)
    return {"user": user}


@router.post("/login", response_model=model.UserEnvelope)
def login(login_request: model.LoginRequest, storage: StorageDep):
    try:
        user = service.authenticate_user(storage, login_request)
    except BadRequestError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except AuthenticationError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message)
    return {"user": user}
