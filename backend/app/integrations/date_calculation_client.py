"""Client for the remote next-feeding-date calculation service."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, time
from typing import Any

import httpx

from app.core.config import get_settings
from app.models.feeding import FeedingFrequency

logger = logging.getLogger(__name__)

RPC_PATH = "/rpc/calculate_next_feeding_date"


class ComputationUnavailable(RuntimeError):
    """Raised when the remote calculation fails or cannot be reached."""


class DateCalculationClient:
    """Call the ``calculate_next_feeding_date`` remote procedure.

    The service computes from its own notion of "now"; the payload carries
    only the recurrence configuration.
    """

    def __init__(
        self,
        base_url: str,
        *,
        api_key: str | None = None,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("Date calculation service URL is not configured")
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["apikey"] = self._api_key
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    @staticmethod
    def _parse_instant(body: Any) -> datetime:
        raw = body
        if isinstance(body, dict):
            raw = body.get("next_feeding_date") or body.get("result")
        if not isinstance(raw, str):
            raise ComputationUnavailable(f"Unexpected calculation response: {body!r}")
        try:
            return datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError as exc:
            raise ComputationUnavailable(f"Unparsable instant: {raw!r}") from exc

    async def calculate_next_feeding_date(
        self,
        frequency: FeedingFrequency,
        feeding_time: time,
        days_of_week: Iterable[str] | None,
    ) -> datetime:
        """Return the service's next occurrence as an aware or naive datetime."""
        payload = {
            "p_frequency": frequency.value,
            "p_feeding_time": feeding_time.strftime("%H:%M"),
            "p_days_of_week": list(days_of_week) if days_of_week else None,
        }
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    RPC_PATH, json=payload, headers=self._headers()
                )
                response.raise_for_status()
                body = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise ComputationUnavailable(str(exc) or exc.__class__.__name__) from exc
        result = self._parse_instant(body)
        logger.debug("Remote next feeding date for %s: %s", frequency.value, result)
        return result


def build_date_calculation_client(**overrides: Any) -> DateCalculationClient | None:
    """Return a client from settings, or ``None`` when no service is configured."""
    settings = get_settings()
    base_url = overrides.pop("base_url", settings.feeding_calc_url)
    if not base_url:
        return None
    params: dict[str, Any] = {
        "api_key": settings.feeding_calc_api_key,
        "timeout": settings.feeding_calc_timeout_seconds,
    }
    params.update(overrides)
    return DateCalculationClient(base_url, **params)


__all__ = [
    "ComputationUnavailable",
    "DateCalculationClient",
    "build_date_calculation_client",
]
