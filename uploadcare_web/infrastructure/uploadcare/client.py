"""
Uploadcare REST API client for file groups.

Only the two calls the integration needs: storing a group and reading
a group's info. Everything else about files lives on Uploadcare's side.

Mock mode keeps groups in memory, enabling local development and
route tests without credentials.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol

import requests

logger = logging.getLogger(__name__)


API_ACCEPT_HEADER = "application/vnd.uploadcare-v0.7+json"


class UploadcareApiError(Exception):
    """Raised when a REST call fails or returns an unusable response."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass
class UploadcareConfig:
    """
    Credentials and endpoint for the REST API.

    Validated at construction so a misconfigured client fails at boot,
    not on the first save.
    """
    public_key: str
    secret_key: str
    base_url: str = "https://api.uploadcare.com"
    timeout: float = 30.0

    def __post_init__(self) -> None:
        if not self.public_key:
            raise ValueError("public_key is required")
        if not self.secret_key:
            raise ValueError("secret_key is required")


class GroupApiClient(Protocol):
    """Group operations used by the store hook and files-count lookup."""

    def store_group(self, group_id: str) -> dict[str, Any]:
        """Mark every file in the group as stored."""
        ...

    def get_group(self, group_id: str) -> Optional[dict[str, Any]]:
        """Return group info, or None if the group does not exist."""
        ...


class RestGroupApiClient:
    """Group client backed by the Uploadcare REST API (Simple auth)."""

    def __init__(self, config: UploadcareConfig, session: Optional[requests.Session] = None) -> None:
        self._config = config
        self._session = session or requests.Session()
        self._session.headers.update({
            "Accept": API_ACCEPT_HEADER,
            "Authorization": f"Uploadcare.Simple {config.public_key}:{config.secret_key}",
        })

        logger.info(
            "Initialized Uploadcare group client",
            extra={"base_url": config.base_url}
        )

    def store_group(self, group_id: str) -> dict[str, Any]:
        response = self._request("PUT", f"/groups/{group_id}/storage/")
        logger.info("Stored group", extra={"group_id": group_id})
        return self._json(response)

    def get_group(self, group_id: str) -> Optional[dict[str, Any]]:
        response = self._request("GET", f"/groups/{group_id}/", allow_not_found=True)
        if response is None:
            return None
        return self._json(response)

    def _request(
        self,
        method: str,
        path: str,
        allow_not_found: bool = False,
    ) -> Optional[requests.Response]:
        url = f"{self._config.base_url.rstrip('/')}{path}"

        try:
            response = self._session.request(method, url, timeout=self._config.timeout)
        except requests.RequestException as e:
            logger.error(
                "Uploadcare request failed",
                extra={"method": method, "path": path, "error": str(e)}
            )
            raise UploadcareApiError(f"Request to {path} failed: {e}")

        if allow_not_found and response.status_code == 404:
            return None

        if not response.ok:
            logger.error(
                "Uploadcare API error",
                extra={"method": method, "path": path, "status": response.status_code}
            )
            raise UploadcareApiError(
                f"{method} {path} returned {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        return response

    def _json(self, response: requests.Response) -> dict[str, Any]:
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise UploadcareApiError(f"Invalid JSON from Uploadcare: {e}")


# ---------------------------------------------------------------------------
# Mock Client for Local Development
# ---------------------------------------------------------------------------

class MockGroupApiClient:
    """
    In-memory group client.

    Groups are created lazily from their id: "<uuid>~3" is a group of
    three files on mock CDN URLs. Store calls are recorded in order.
    """

    def __init__(self, cdn_base: str = "https://ucarecdn.com") -> None:
        self._cdn_base = cdn_base.rstrip("/")
        self._groups: dict[str, dict[str, Any]] = {}
        self.stored: list[str] = []
        logger.info("Initialized mock Uploadcare group client (in-memory)")

    def add_group(self, group_id: str, files: list[str]) -> dict[str, Any]:
        info = {
            "id": group_id,
            "cdn_url": f"{self._cdn_base}/{group_id}/",
            "files_count": len(files),
            "files": [{"uuid": uuid, "original_file_url": f"{self._cdn_base}/{uuid}/"} for uuid in files],
            "datetime_stored": None,
        }
        self._groups[group_id] = info
        return info

    def store_group(self, group_id: str) -> dict[str, Any]:
        info = self.get_group(group_id)
        if info is None:
            raise UploadcareApiError(f"Group not found: {group_id}", status_code=404)
        info["datetime_stored"] = "stored"
        self.stored.append(group_id)
        return info

    def get_group(self, group_id: str) -> Optional[dict[str, Any]]:
        if group_id not in self._groups:
            count = group_id.rsplit("~", 1)[-1] if "~" in group_id else ""
            if not count.isdigit():
                return None
            uuid = group_id.split("~", 1)[0]
            self.add_group(group_id, [f"{uuid[:-4]}{index:04d}" for index in range(int(count))])
        return self._groups[group_id]


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_group_api_client(
    config: Optional[UploadcareConfig] = None,
    mock_mode: bool = False,
) -> GroupApiClient:
    """
    Create a group client based on configuration.

    Args:
        config: REST credentials (required if not mock_mode)
        mock_mode: If True, return the in-memory client
    """
    if mock_mode:
        return MockGroupApiClient()

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return RestGroupApiClient(config)
