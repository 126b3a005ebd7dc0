"""
GitHub Issues Client
====================

Minimal async client for the GitHub REST endpoints the sync needs:
label lookup, label creation and issue creation.
"""

import asyncio
import ssl
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import aiohttp
import certifi

from ..utils.logging import get_logger_for_component
from ..utils.exceptions import ConfigurationError, ErrorCode, GitHubAPIError

DEFAULT_API_URL = "https://api.github.com"
API_VERSION = "2022-11-28"


class GitHubIssuesClient:
    """Async GitHub client scoped to one repository.

    Use as an async context manager; the underlying session lives for the
    duration of the block.
    """

    def __init__(
        self,
        token: str,
        repository: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30,
    ):
        """Initialize client.

        Args:
            token: GitHub token sent as a bearer credential
            repository: Target repository as owner/name
            api_url: REST API base URL (GitHub Enterprise uses its own)
            timeout: Per-request timeout in seconds

        Raises:
            ConfigurationError: If token or repository is missing or malformed
        """
        if not token:
            raise ConfigurationError(
                "GitHub token is required",
                config_key="github.token",
                error_code=ErrorCode.CONFIG_MISSING,
            )

        owner, _, name = (repository or "").partition("/")
        if not owner or not name or "/" in name:
            raise ConfigurationError(
                f"Repository must be in the form owner/name, got {repository!r}",
                config_key="github.repository",
            )

        self.owner = owner
        self.repo = name
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._token = token
        self._session: Optional[aiohttp.ClientSession] = None
        self.logger = get_logger_for_component("github_client", repository=repository)

    @property
    def repository(self) -> str:
        return f"{self.owner}/{self.repo}"

    async def __aenter__(self) -> "GitHubIssuesClient":
        connector = aiohttp.TCPConnector(
            ssl=ssl.create_default_context(cafile=certifi.where())
        )
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": "changelog-issues/1.0",
        }
        self._session = aiohttp.ClientSession(
            connector=connector,
            timeout=aiohttp.ClientTimeout(total=self.timeout),
            headers=headers,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def _request(
        self, method: str, path: str, payload: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        if self._session is None:
            raise RuntimeError("GitHubIssuesClient must be used as an async context manager")

        endpoint = f"/repos/{self.owner}/{self.repo}{path}"
        url = f"{self.api_url}{endpoint}"

        try:
            async with self._session.request(method, url, json=payload) as response:
                if response.status >= 400:
                    detail = await self._error_detail(response)
                    raise GitHubAPIError(
                        f"GitHub API {method} {endpoint} failed with {response.status}: {detail}",
                        status_code=response.status,
                        endpoint=endpoint,
                    )

                if response.status == 204:
                    return {}
                return await response.json(content_type=None)

        except asyncio.TimeoutError as e:
            raise GitHubAPIError(
                f"GitHub API {method} {endpoint} timed out after {self.timeout:g} seconds",
                endpoint=endpoint,
            ) from e
        except aiohttp.ClientError as e:
            raise GitHubAPIError(str(e), endpoint=endpoint) from e

    @staticmethod
    async def _error_detail(response: aiohttp.ClientResponse) -> str:
        text = await response.text()
        try:
            data = await response.json(content_type=None)
        except ValueError:
            return text or response.reason or "unknown error"
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
        return text or response.reason or "unknown error"

    async def get_label(self, name: str) -> Dict[str, Any]:
        """Fetch a label; raises GitHubAPIError with status 404 when absent."""
        return await self._request("GET", f"/labels/{quote(name, safe='')}")

    async def create_label(
        self, name: str, color: str, description: Optional[str] = None
    ) -> Dict[str, Any]:
        """Create a repository label.

        Args:
            name: Label name
            color: Six hex digits without the leading '#'
            description: Optional label description
        """
        payload = {"name": name, "color": color}
        if description:
            payload["description"] = description
        return await self._request("POST", "/labels", payload)

    async def create_issue(
        self, title: str, body: str, labels: Optional[List[str]] = None
    ) -> Dict[str, Any]:
        """Open an issue and return the API representation."""
        payload = {"title": title, "body": body, "labels": list(labels or [])}
        issue = await self._request("POST", "/issues", payload)
        self.logger.debug(f"Created issue #{issue.get('number')} in {self.repository}")
        return issue
