"""HTTP gateway registry for published skills.

Queries a read-only HTTP endpoint that serves the registry's cached state,
one skill per request::

    GET <base_url>?name=ao-basics

The endpoint answers either with the record itself or wrapped as
``{"skill": {...}, "status": 200}``. Unknown skills come back as HTTP 404
or as a body carrying ``"status": 404``.

Usage::

    registry = HttpSkillRegistry("https://registry.example/getSkill")
    record = await registry.get_skill("ao-basics")
"""

from __future__ import annotations

import logging
from typing import Any

from skillpm.exceptions import RegistryError
from skillpm.registry.base import SkillRecord, SkillRegistry
from skillpm.registry.http_client import DEFAULT_BASE_DELAY, DEFAULT_TIMEOUT, fetch_json

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY_URL: str = "https://registry.skillpm.dev/skills/get"


class HttpSkillRegistry(SkillRegistry):
    """Registry backed by an HTTP gateway endpoint."""

    def __init__(
        self,
        base_url: str = DEFAULT_REGISTRY_URL,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        retry_delay: float = DEFAULT_BASE_DELAY,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._retry_delay = retry_delay

    @property
    def registry_name(self) -> str:
        return f"HTTP registry ({self._base_url})"

    @property
    def base_url(self) -> str:
        return self._base_url

    async def get_skill(self, name: str) -> SkillRecord | None:
        """Fetch a skill record from the gateway.

        Returns:
            The parsed record, or None if the gateway reports 404.

        Raises:
            RegistryError: On transport failures or malformed responses.
        """
        logger.debug("Querying %s for skill %r", self._base_url, name)
        data = await fetch_json(
            self._base_url,
            params={"name": name},
            timeout=self._timeout,
            base_delay=self._retry_delay,
        )
        if data is None:
            return None
        return _parse_skill_response(name, data, self._base_url)


def _parse_skill_response(name: str, data: Any, url: str) -> SkillRecord | None:
    """Turn a gateway response body into a record, or None for not-found."""
    if not isinstance(data, dict):
        raise RegistryError(f"Unexpected registry response for {name!r}: not an object", url)

    status = data.get("status")
    if status == 404:
        return None
    if isinstance(status, int) and status >= 400:
        raise RegistryError(
            f"Registry error for {name!r}: {data.get('error', 'status ' + str(status))}", url
        )

    payload = data.get("skill", data)
    if payload is None:
        return None
    try:
        return SkillRecord.from_dict(payload)
    except ValueError as exc:
        raise RegistryError(f"Malformed skill record for {name!r}: {exc}", url) from exc
