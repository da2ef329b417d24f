"""
HTTP client for the LiftLog API.

Thin wrapper over httpx.AsyncClient: every method returns the decoded JSON
body and maps failures onto two exceptions, ApiError for non-2xx responses
and ApiUnavailable when the request never completed.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from liftlog.client.config import get_client_settings

logger = logging.getLogger(__name__)


class ClientError(Exception):
    """Base exception for LiftLog client errors."""

    pass


class ApiUnavailable(ClientError):
    """Raised when the API could not be reached or timed out."""

    pass


class ApiError(ClientError):
    """Raised when the API returns an error response."""

    def __init__(self, status_code: int, message: str, data: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.data = data


class LiftLogClient:
    """
    Async client for the workout and set endpoints.

    Use as an async context manager, or call aclose() when done.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: Optional[float] = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: API root, e.g. "http://localhost:8000"
            token: Bearer token from the identity provider
            timeout: Request timeout in seconds
            transport: Custom httpx transport (tests mount the app directly)
        """
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=self._base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, token: Optional[str] = None, **kwargs) -> "LiftLogClient":
        s = get_client_settings()
        return cls(s.API_URL, token=token, timeout=s.API_TIMEOUT, **kwargs)

    async def __aenter__(self) -> "LiftLogClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, json: Any = None, params: Optional[dict] = None) -> Any:
        try:
            response = await self._http.request(method, path, json=json, params=params)
        except httpx.TimeoutException as e:
            logger.error(f"LiftLog API timeout: {method} {path}")
            raise ApiUnavailable("LiftLog API request timed out") from e
        except httpx.RequestError as e:
            # any request that never produced a usable response
            logger.error(f"LiftLog API unavailable: {e}")
            raise ApiUnavailable(f"LiftLog API is not available at {self._base_url}") from e

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.is_error:
            message = None
            if isinstance(data, dict):
                message = data.get("error")
            raise ApiError(
                response.status_code,
                message or f"Request failed with status {response.status_code}",
                data,
            )
        return data

    # Exercises

    async def list_exercises(self, search: Optional[str] = None) -> dict:
        params = {"search": search} if search else None
        return await self._request("GET", "/exercises", params=params)

    # Workouts

    async def start_workout(self, name: str) -> dict:
        return await self._request("POST", "/workouts/start", json={"name": name})

    async def get_workout(self, workout_id: int) -> dict:
        return await self._request("GET", f"/workouts/{workout_id}")

    async def add_exercise(self, workout_id: int, exercise_id: int) -> dict:
        return await self._request(
            "POST", f"/workouts/{workout_id}/exercises", json={"exerciseId": exercise_id}
        )

    async def complete_workout(self, workout_id: int) -> dict:
        return await self._request("POST", f"/workouts/{workout_id}/complete")

    # Sets

    async def update_set(self, set_id: int, patch: dict) -> dict:
        """Returns {"set": ..., "isPR": bool}."""
        return await self._request("PATCH", f"/workouts/sets/{set_id}", json=patch)

    async def add_set(self, workout_exercise_id: int) -> dict:
        return await self._request("POST", f"/workouts/exercises/{workout_exercise_id}/sets")

    async def delete_set(self, set_id: int) -> dict:
        return await self._request("DELETE", f"/workouts/sets/{set_id}")
