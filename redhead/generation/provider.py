import base64
import logging
import os
from abc import ABC, abstractmethod
from typing import Annotated

from dotenv import load_dotenv
from fastapi import Depends
from google import genai
from google.genai import types
from openai import AsyncOpenAI, OpenAIError

from ..exceptions import GenerationError, ProviderConfigurationError

load_dotenv()

IMAGE_PROVIDER = os.getenv("IMAGE_PROVIDER", "openai").lower()
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_IMAGE_MODEL = os.getenv("OPENAI_IMAGE_MODEL", "dall-e-3")
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY")
GEMINI_IMAGE_MODEL = os.getenv(
    "GEMINI_IMAGE_MODEL", "gemini-2.0-flash-exp-image-generation"
)

if IMAGE_PROVIDER == "openai" and not OPENAI_API_KEY:
    logging.warning("OPENAI_API_KEY not found. Image generation will not work.")


class ImageProvider(ABC):
    """A remote text-to-image service: one prompt in, image URLs out."""

    name = "provider"

    @abstractmethod
    def ensure_configured(self) -> None:
        """Raises ProviderConfigurationError when the provider cannot be called."""

    @abstractmethod
    async def generate(self, prompt: str, size: str) -> list[str]:
        """Requests a single image of ``size`` (``"WIDTHxHEIGHT"``).

        Raises GenerationError when the provider call fails.
        """


class OpenAIImageProvider(ImageProvider):
    name = "openai"

    def __init__(self, api_key: str | None = None, model: str | None = None):
        self.api_key = OPENAI_API_KEY if api_key is None else api_key
        self.model = model or OPENAI_IMAGE_MODEL

    def ensure_configured(self) -> None:
        if not self.api_key:
            raise ProviderConfigurationError("OpenAI API key not configured")

    async def generate(self, prompt: str, size: str) -> list[str]:
        try:
            async with AsyncOpenAI(api_key=self.api_key) as client:
                # dall-e-3 only supports n=1
                response = await client.images.generate(
                    model=self.model,
                    prompt=prompt,
                    n=1,
                    size=size,
                    quality="standard",
                )
        except OpenAIError as e:
            logging.error(f"OpenAI image generation failed: {e}", exc_info=True)
            raise GenerationError(f"Image generation failed: {e}")

        return [image.url for image in response.data or [] if image.url]


class GeminiImageProvider(ImageProvider):
    """Google GenAI image generation. Inline image bytes come back as data URLs."""

    name = "gemini"

    def __init__(self, api_key: str | None = None, model: str | None = None):
        self.api_key = GOOGLE_API_KEY if api_key is None else api_key
        self.model = model or GEMINI_IMAGE_MODEL

    def ensure_configured(self) -> None:
        if not self.api_key:
            raise ProviderConfigurationError("Google API key not configured")

    async def generate(self, prompt: str, size: str) -> list[str]:
        client = genai.Client(api_key=self.api_key)
        width, height = size.split("x")
        prompt_template: str = (
            "Generate an image of {prompt} with a width of {width} "
            "and a height of {height} EXPLICITLY."
        )

        try:
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=prompt_template.format(prompt=prompt, width=width, height=height),
                config=types.GenerateContentConfig(response_modalities=["TEXT", "IMAGE"]),
            )
        except Exception as e:
            logging.error(f"Error during generate_content call: {e}", exc_info=True)
            raise GenerationError(f"Google GenAI API call failed: {e}")

        if not response.candidates:
            logging.warning("No candidates found in the response.")
            return []

        image_urls = []
        for part in response.candidates[0].content.parts or []:  # type: ignore
            if part.inline_data is not None and part.inline_data.data:
                encoded = base64.b64encode(part.inline_data.data).decode("utf-8")
                mime_type = part.inline_data.mime_type or "image/png"
                image_urls.append(f"data:{mime_type};base64,{encoded}")

        if not image_urls:
            logging.warning("No inline_data found in response parts.")
        return image_urls


class UnknownImageProvider(ImageProvider):
    """Stands in for an unrecognised IMAGE_PROVIDER so the failure surfaces per request."""

    def __init__(self, name: str):
        self.name = name

    def ensure_configured(self) -> None:
        raise ProviderConfigurationError(f"Unknown image provider '{self.name}'")

    async def generate(self, prompt: str, size: str) -> list[str]:
        raise ProviderConfigurationError(f"Unknown image provider '{self.name}'")


PROVIDERS: dict[str, type[ImageProvider]] = {
    OpenAIImageProvider.name: OpenAIImageProvider,
    GeminiImageProvider.name: GeminiImageProvider,
}


def get_image_provider() -> ImageProvider:
    provider_class = PROVIDERS.get(IMAGE_PROVIDER)
    if provider_class is None:
        return UnknownImageProvider(IMAGE_PROVIDER)
    return provider_class()


ImageProviderDep = Annotated[ImageProvider, Depends(get_image_provider)]
