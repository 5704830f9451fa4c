from fastapi import APIRouter, HTTPException, Request, status

from . import model
from . import service
from .provider import ImageProviderDep
from ..storage.dependency import StorageDep
from ..rate_limiting import GENERATE_RATE_LIMIT, limiter
from ..exceptions import (
    BadRequestError,
    GenerationError,
    InsufficientCreditsError,
    NotFoundError,
    ProviderConfigurationError,
)

router = APIRouter(prefix="/api", tags=["Generation"])


@router.post("/generate", response_model=model.GenerateResponse)
@limiter.limit(GENERATE_RATE_LIMIT)
async def generate_images(
    request: Request,
    generate_request: model.GenerateRequest,
    storage: StorageDep,
    provider: ImageProviderDep,
):
    """Spends credits on one image generation and records it in the user's history."""
    try:
        return await service.generate_images(storage, provider, generate_request)
    except BadRequestError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except InsufficientCreditsError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except ProviderConfigurationError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message)
    except GenerationError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)
