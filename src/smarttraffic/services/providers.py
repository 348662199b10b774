"""Shared HTTP plumbing for the TomTom provider clients."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from ..config import settings
from .errors import ProviderError

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class ProviderClient:
    """Base class holding retry, timeout and credential settings."""

    service_name = "provider"

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not base_url:
            raise ValueError(f"{self.service_name} base URL is not configured.")
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key if api_key is not None else settings.tomtom_api_key
        self.timeout = timeout if timeout is not None else settings.provider_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.provider_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.provider_backoff_seconds
        self._transport = transport

    def _require_key(self) -> str:
        if not self.api_key:
            raise ValueError(
                f"{self.service_name} API key is missing. Set SMARTTRAFFIC_TOMTOM_API_KEY in your .env file."
            )
        return self.api_key

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            transport=self._transport,
        )

    def _get_json(self, url: str, params: dict[str, Any] | None = None) -> dict:
        """GET ``url`` and decode JSON, retrying transient failures."""
        query = {"key": self._require_key(), **(params or {})}
        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.get(url, params=query)
                    response.raise_for_status()
                    data = response.json()
                    if not isinstance(data, dict):
                        raise ProviderError(f"{self.service_name} returned an unexpected payload.")
                    return data
                except httpx.HTTPStatusError as e:
                    status_code = e.response.status_code
                    if status_code not in RETRYABLE_STATUS_CODES:
                        raise ProviderError(
                            f"{self.service_name} API error ({status_code}): {_error_message(e.response)}"
                        ) from e
                    attempt += 1
                    if attempt > self.max_retries:
                        raise ProviderError(
                            f"{self.service_name} API error ({status_code}) after {self.max_retries} retries."
                        ) from e
                    time.sleep(self.backoff_seconds * attempt)
                except httpx.TimeoutException as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"{self.service_name} request timed out after {self.max_retries} attempts: {e}")
                        raise ConnectionError(f"{self.service_name} request timed out.") from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(
                        f"{self.service_name} timeout, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})"
                    )
                    time.sleep(wait_time)
                except (httpx.NetworkError, OSError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise ConnectionError(
                            f"Failed to connect to {self.service_name} at {self.base_url}: {e}"
                        ) from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(
                        f"{self.service_name} network error, retrying in {wait_time:.1f}s "
                        f"(attempt {attempt}/{self.max_retries}): {e}"
                    )
                    time.sleep(wait_time)
                except ValueError as e:
                    raise ProviderError(f"{self.service_name} returned invalid JSON: {e}") from e
        finally:
            client.close()


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(payload, dict):
        detailed = payload.get("detailedError") or payload.get("error") or {}
        if isinstance(detailed, dict) and detailed.get("message"):
            return str(detailed["message"])
        if payload.get("errorText"):
            return str(payload["errorText"])
        if payload.get("message"):
            return str(payload["message"])
    return response.reason_phrase
