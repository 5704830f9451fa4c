import asyncio
import logging
import os
from dotenv import load_dotenv

from . import model
from .prompt import compose_prompt, sanitize_text, size_for_dimension
from .provider import ImageProvider
from ..storage.interface import GENERATION_COST, Storage
from ..storage.model import ImageHistoryCreate
from ..exceptions import (
    BadRequestError,
    GenerationError,
    InsufficientCreditsError,
    NotFoundError,
)

load_dotenv()

GENERATION_TIMEOUT_SECONDS = float(os.getenv("GENERATION_TIMEOUT_SECONDS", "120"))


async def generate_images(
    storage: Storage, provider: ImageProvider, request: model.GenerateRequest
) -> model.GenerateResponse:
    """
    Runs one generation: validate, check the user and balance, call the
    provider once, then commit the history record and the debit together.

    Nothing is written unless the provider returns at least one image, and
    the provider is never retried.
    """
    prompt = sanitize_text(request.prompt)
    refinement = sanitize_text(request.refinement or "") or None
    if not prompt:
        raise BadRequestError("Prompt is empty after sanitization")

    user = storage.get_user(request.user_id)
    if not user:
        logging.warning(f"Generation requested for unknown user {request.user_id}")
        raise NotFoundError("User")

    if user.credits < GENERATION_COST:
        logging.info(f"User {user.id} has {user.credits} credits, generation refused")
        raise InsufficientCreditsError()

    provider.ensure_configured()

    style_description = None
    if request.apply_my_style and user.preferences:
        style_description = user.preferences.style_description

    enhanced_prompt = compose_prompt(
        prompt, request.style, refinement=refinement, style_description=style_description
    )
    size = size_for_dimension(request.dimension)
    logging.info(f'Generating image with prompt: "{enhanced_prompt}" at {size} via {provider.name}')

    try:
        image_urls = await asyncio.wait_for(
            provider.generate(enhanced_prompt, size), timeout=GENERATION_TIMEOUT_SECONDS
        )
    except asyncio.TimeoutError:
        logging.error(f"Image generation timed out after {GENERATION_TIMEOUT_SECONDS}s")
        raise GenerationError("Image generation timed out")

    if not image_urls:
        raise GenerationError("No images generated")
    logging.info(f"Successfully generated {len(image_urls)} image(s)")

    record = storage.record_generation(
        ImageHistoryCreate(
            user_id=user.id,
            prompt=prompt,
            style=request.style,
            refinement=refinement,
            dimension=request.dimension,
            image_urls=image_urls,
            style_id=request.style_id,
        ),
        GENERATION_COST,
    )
    if record is None:
        # Another request spent the credits while the provider was working
        logging.warning(f"Credits for user {user.id} ran out before the debit, discarding result")
        raise InsufficientCreditsError()

    if request.style_id:
        storage.increment_style_usage(request.style_id)

    return model.GenerateResponse(
        images=image_urls,
        history_id=record.history.id,
        credits_remaining=record.credits_remaining,
    )
