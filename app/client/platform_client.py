"""
HTTP client for the company-facing platform API
"""
import logging
from typing import Any, List, Optional

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)


class PlatformClientError(Exception):
    """A platform request failed: transport error, server error or unreadable body"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class PlatformClient:
    """Synchronous client for the /api/company and /api/public-plans routes"""

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = (base_url or settings.PLATFORM_API_URL).rstrip("/")
        self.token = token
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else settings.PLATFORM_API_TIMEOUT,
            transport=transport,
        )

    def close(self):
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _headers(self) -> dict:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def _get(self, path: str) -> Any:
        url = f"{settings.API_PREFIX}{path}"
        try:
            response = self._client.get(url, headers=self._headers())
        except httpx.HTTPError as e:
            logger.warning(f"Platform request GET {url} failed: {str(e)}")
            raise PlatformClientError(f"Request to {url} failed: {str(e)}") from e

        if response.status_code >= 400:
            logger.warning(f"Platform request GET {url} returned {response.status_code}")
            raise PlatformClientError(
                f"GET {url} returned {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise PlatformClientError(f"GET {url} returned invalid JSON") from e

    def get_subscription_status(self) -> dict:
        data = self._get("/company/subscription-status")
        if not isinstance(data, dict):
            raise PlatformClientError("Subscription status payload is not an object")
        return data

    def get_plan_info(self) -> dict:
        data = self._get("/company/plan-info")
        if not isinstance(data, dict):
            raise PlatformClientError("Plan info payload is not an object")
        return data

    def get_public_plans(self) -> List[dict]:
        data = self._get("/public-plans")
        if not isinstance(data, list):
            raise PlatformClientError("Public plans payload is not a list")
        return data
