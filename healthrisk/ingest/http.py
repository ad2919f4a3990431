"""Single-shot JSON GET that reports failures as values instead of raising."""

import logging
from typing import Any

import httpx

from healthrisk.models.weather import FailureReason, SourceFailure

logger = logging.getLogger(__name__)


def fetch_json(
    source: str,
    url: str,
    params: dict[str, Any],
    timeout: float,
    user_agent: str,
    headers: dict[str, str] | None = None,
) -> tuple[Any, SourceFailure | None]:
    """GET ``url`` and decode the JSON body.

    Returns ``(payload, None)`` on success and ``(None, failure)`` on a
    transport error, a non-2xx status or an undecodable body. No retries.
    """
    headers = {"User-Agent": user_agent, "Accept": "application/json", **(headers or {})}
    try:
        resp = httpx.get(url, params=params, headers=headers, timeout=timeout)
    except httpx.RequestError as e:
        return None, SourceFailure(
            source=source,
            reason=FailureReason.TRANSPORT,
            detail=f"{type(e).__name__}: {e}",
            error=e,
        )

    if not resp.is_success:
        error = httpx.HTTPStatusError(
            f"{source} returned HTTP {resp.status_code}",
            request=resp.request,
            response=resp,
        )
        return None, SourceFailure(
            source=source,
            reason=FailureReason.HTTP_STATUS,
            detail=str(error),
            status_code=resp.status_code,
            error=error,
        )

    try:
        return resp.json(), None
    except ValueError as e:
        return None, SourceFailure(
            source=source,
            reason=FailureReason.MALFORMED,
            detail=f"Undecodable JSON body: {e}",
            status_code=resp.status_code,
            error=e,
        )
