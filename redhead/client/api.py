import logging
import os
from typing import Any

import httpx
from dotenv import load_dotenv

from .session import ClientSession, SessionUser
from ..generation.model import GenerateRequest, GenerateResponse
from ..storage.interface import GENERATION_COST
from ..storage.model import ImageHistory, ReferenceUpload, SavedStyle

load_dotenv()

REDHEAD_API_URL = os.getenv("REDHEAD_API_URL", "http://localhost:5000")


class ApiError(Exception):
    """A non-2xx response from the Redhead API."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


class RedheadClient:
    """Thin wrapper over the HTTP API. Pass ``http_client`` to reuse a session."""

    def __init__(
        self,
        base_url: str | None = None,
        http_client: httpx.Client | None = None,
        timeout: float = 180.0,
    ):
        self.http = http_client or httpx.Client(
            base_url=base_url or REDHEAD_API_URL, timeout=timeout
        )

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "RedheadClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        response = self.http.request(method, url, **kwargs)
        if response.status_code >= 400:
            try:
                message = response.json().get("message") or response.text
            except ValueError:
                message = response.text or response.reason_phrase
            logging.warning(f"{method} {url} failed with {response.status_code}: {message}")
            raise ApiError(response.status_code, message)
        return response.json()

    # Authentication

    def register(self, username: str, email: str, password: str | None = None) -> SessionUser:
        body = {"username": username, "email": email}
        if password:
            body["password"] = password
        data = self._request("POST", "/api/auth/register", json=body)
        return SessionUser.model_validate(data["user"])

    def login(
        self,
        email: str | None = None,
        username: str | None = None,
        password: str | None = None,
    ) -> SessionUser:
        body = {"email": email, "username": username, "password": password}
        data = self._request(
            "POST",
            "/api/auth/login",
            json={key: value for key, value in body.items() if value is not None},
        )
        return SessionUser.model_validate(data["user"])

    # Users

    def get_user(self, user_id: str) -> SessionUser:
        data = self._request("GET", f"/api/users/{user_id}")
        return SessionUser.model_validate(data["user"])

    def update_credits(self, user_id: str, credits: int) -> bool:
        data = self._request("PATCH", f"/api/users/{user_id}/credits", json={"credits": credits})
        return data["success"]

    def update_preferences(self, user_id: str, style_description: str | None) -> bool:
        preferences = {"version": 1, "styleDescription": style_description}
        data = self._request(
            "PATCH", f"/api/users/{user_id}/preferences", json={"preferences": preferences}
        )
        return data["success"]

    # Image generation

    def generate_images(self, request: GenerateRequest) -> GenerateResponse:
        data = self._request(
            "POST",
            "/api/generate",
            json=request.model_dump(by_alias=True, exclude_none=True),
        )
        return GenerateResponse.model_validate(data)

    # Styles

    def get_styles(self, user_id: str) -> list[SavedStyle]:
        data = self._request("GET", f"/api/styles/{user_id}")
        return [SavedStyle.model_validate(style) for style in data["styles"]]

    def create_style(self, **style: Any) -> SavedStyle:
        data = self._request("POST", "/api/styles", json=style)
        return SavedStyle.model_validate(data["style"])

    def update_style(self, style_id: str, **updates: Any) -> SavedStyle:
        data = self._request("PATCH", f"/api/styles/{style_id}", json=updates)
        return SavedStyle.model_validate(data["style"])

    def delete_style(self, style_id: str) -> bool:
        return self._request("DELETE", f"/api/styles/{style_id}")["success"]

    # History

    def get_history(self, user_id: str, limit: int | None = None) -> list[ImageHistory]:
        params = {"limit": limit} if limit else None
        data = self._request("GET", f"/api/history/{user_id}", params=params)
        return [ImageHistory.model_validate(item) for item in data["history"]]

    def get_history_item(self, history_id: str) -> ImageHistory:
        data = self._request("GET", f"/api/history/item/{history_id}")
        return ImageHistory.model_validate(data["item"])

    # References

    def get_references(self, user_id: str) -> list[ReferenceUpload]:
        data = self._request("GET", f"/api/references/{user_id}")
        return [ReferenceUpload.model_validate(item) for item in data["references"]]

    def create_reference(self, user_id: str, filename: str, url: str) -> ReferenceUpload:
        data = self._request(
            "POST",
            "/api/references",
            json={"userId": user_id, "filename": filename, "url": url},
        )
        return ReferenceUpload.model_validate(data["reference"])

    def delete_reference(self, reference_id: str) -> bool:
        return self._request("DELETE", f"/api/references/{reference_id}")["success"]


def generate_for_session(
    client: RedheadClient,
    session: ClientSession,
    prompt: str,
    style: str,
    dimension: str,
    refinement: str | None = None,
    style_id: str | None = None,
    apply_my_style: bool = False,
) -> GenerateResponse:
    """
    Submits a generation for the signed-in user and syncs the cached credits.

    The cached balance is only touched after a successful response.
    """
    user = session.get_user()
    if user is None:
        raise ApiError(401, "Not signed in")
    if user.credits < GENERATION_COST:
        raise ApiError(400, "Insufficient credits")

    response = client.generate_images(
        GenerateRequest(
            prompt=prompt,
            style=style,
            refinement=refinement,
            dimension=dimension,
            user_id=user.id,
            style_id=style_id,
            apply_my_style=apply_my_style,
        )
    )
    session.update_credits(response.credits_remaining)
    return response
