# services/backend/client.py
"""
HTTP collaborator for the template/actor backend.

Wraps an ``httpx.Client``; transient network failures are retried with
tenacity, everything else surfaces as ``core.exceptions.TransportError``.
Response envelopes look like ``{"success": bool, "data": ..., "message": str}``.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

import httpx
from loguru import logger
from tenacity import (
    RetryError,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from core.config import Settings, get_settings
from core.exceptions import TransportError


class BackendClient:
    """Schema fetch, template load/save and actor listing."""

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 10.0,
        max_retries: int = 3,
        backoff: float = 1.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self.max_retries = max_retries
        self.backoff = backoff
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **kwargs: Any) -> "BackendClient":
        settings = settings or get_settings()
        return cls(
            base_url=settings.API_BASE_URL,
            token=settings.API_TOKEN,
            timeout=settings.TIMEOUT,
            max_retries=settings.MAX_RETRIES,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------
    def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        retrying = Retrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=self.backoff, max=10),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=False,
        )
        try:
            for attempt in retrying:
                with attempt:
                    if attempt.retry_state.attempt_number > 1:
                        logger.warning(
                            f"Retrying {method} {path} "
                            f"(attempt {attempt.retry_state.attempt_number}/{self.max_retries})"
                        )
                    return self._client.request(method, path, **kwargs)
        except RetryError as exc:
            cause = exc.last_attempt.exception()
            logger.error(f"{method} {path} failed after {self.max_retries} attempt(s): {cause}")
            raise TransportError(f"Backend unreachable: {cause}") from cause
        except httpx.HTTPError as exc:
            # not retried: invalid URL, redirect loop, undecodable body
            logger.error(f"{method} {path} failed: {exc}")
            raise TransportError(f"Backend request failed: {exc}") from exc
        raise TransportError(f"{method} {path} produced no response")  # pragma: no cover

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        response = self._send(method, path, **kwargs)
        try:
            body = response.json()
        except ValueError:
            body = None

        if response.is_error:
            message = None
            if isinstance(body, Mapping):
                message = body.get("message")
            message = message or f"{response.status_code} {response.reason_phrase}"
            logger.error(f"{method} {path} → {response.status_code}: {message}")
            raise TransportError(message, status_code=response.status_code)

        if body is None:
            raise TransportError(
                f"{method} {path} returned a non-JSON body", status_code=response.status_code
            )
        if isinstance(body, Mapping) and body.get("success") is False:
            raise TransportError(
                body.get("message") or "Backend reported failure",
                status_code=response.status_code,
            )
        return body

    @staticmethod
    def _data(body: Any) -> Any:
        if isinstance(body, Mapping) and "data" in body:
            return body["data"]
        return body

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def fetch_schema(self, actor_id: str) -> List[Dict[str, Any]]:
        """Raw field descriptors of an actor (``data.schema.fields``)."""
        data = self._data(self._request("GET", f"/templates/actors/{actor_id}/schema"))
        try:
            fields = data["schema"]["fields"]
        except (KeyError, TypeError) as exc:
            raise TransportError(f"Schema response for {actor_id} has no field list") from exc
        if not isinstance(fields, list):
            raise TransportError(f"Schema response for {actor_id} has no field list")
        return fields

    def list_actors(self) -> List[Dict[str, Any]]:
        data = self._data(self._request("GET", "/templates/actors"))
        if isinstance(data, Mapping) and isinstance(data.get("data"), list):
            data = data["data"]
        if not isinstance(data, list):
            raise TransportError("Actor listing is not a list")
        return data

    def get_template(self, template_id: str) -> Dict[str, Any]:
        return self._data(self._request("GET", f"/templates/{template_id}"))

    def save_template(
        self, payload: Mapping[str, Any], template_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """Create (``POST``) or update (``PUT``) a template."""
        if template_id:
            body = self._request("PUT", f"/templates/{template_id}", json=dict(payload))
        else:
            body = self._request("POST", "/templates", json=dict(payload))
        data = self._data(body)
        return data if isinstance(data, dict) else {}

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "BackendClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def legacy_names_from_actors(actors: List[Mapping[str, Any]]) -> Dict[str, str]:
    """Build a name → id allow-list from an actor listing."""
    table: Dict[str, str] = {}
    for actor in actors:
        name = actor.get("name")
        actor_id = actor.get("_id") or actor.get("id")
        if isinstance(name, str) and name and actor_id:
            table[name] = str(actor_id)
    return table
