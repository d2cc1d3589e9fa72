"""Shared async HTTP client utilities for registry lookups.

Provides a thin wrapper around ``httpx.AsyncClient`` with standardised
timeouts, user-agent headers, retry with exponential backoff for transient
failures, and error handling.

Unlike a best-effort scanner, a lookup that fails must never look like a
missing skill: HTTP 404 is reported as ``None``, every other failure raises
``RegistryError``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from skillpm.exceptions import RegistryError

logger = logging.getLogger(__name__)

# Timeout for all registry HTTP requests (seconds).
DEFAULT_TIMEOUT: float = 30.0

# User-Agent sent with every request.
USER_AGENT: str = "skillpm/0.1"

# Attempts for timeouts and connection failures before giving up.
DEFAULT_MAX_ATTEMPTS: int = 3
DEFAULT_BASE_DELAY: float = 1.0
BACKOFF_FACTOR: float = 2.0


async def fetch_json(
    url: str,
    *,
    params: dict[str, str] | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    base_delay: float = DEFAULT_BASE_DELAY,
) -> Any | None:
    """Fetch a URL and parse the response as JSON.

    Timeouts and transport errors are retried up to ``max_attempts`` times,
    sleeping ``base_delay * 2**attempt`` seconds between attempts. HTTP
    error statuses are not retried.

    Args:
        url: The URL to fetch.
        params: Optional query parameters.
        timeout: Request timeout in seconds.
        max_attempts: Total number of attempts for transient failures.
        base_delay: Initial backoff delay in seconds.

    Returns:
        Parsed JSON response, or None if the server answered 404.

    Raises:
        RegistryError: On non-404 HTTP errors, exhausted retries, or a body
            that is not valid JSON.
    """
    last_error: Exception | None = None
    for attempt in range(max_attempts):
        try:
            async with httpx.AsyncClient(
                timeout=timeout,
                headers={"User-Agent": USER_AGENT},
                follow_redirects=True,
            ) as client:
                resp = await client.get(url, params=params)
        except (httpx.TimeoutException, httpx.TransportError) as exc:
            last_error = exc
            if attempt + 1 < max_attempts:
                delay = base_delay * (BACKOFF_FACTOR ** attempt)
                logger.warning(
                    "Registry request to %s failed (%s), retrying in %.1fs (attempt %d/%d)",
                    url, exc.__class__.__name__, delay, attempt + 1, max_attempts,
                )
                await asyncio.sleep(delay)
            continue

        if resp.status_code == 404:
            logger.debug("Registry returned 404 for %s params=%s", url, params)
            return None
        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise RegistryError(
                f"Registry returned HTTP {resp.status_code} for {url}", url
            ) from exc
        try:
            return resp.json()
        except ValueError as exc:
            raise RegistryError(f"Registry response from {url} is not valid JSON", url) from exc

    raise RegistryError(
        f"Registry request to {url} failed after {max_attempts} attempts: {last_error}",
        url,
    ) from last_error
