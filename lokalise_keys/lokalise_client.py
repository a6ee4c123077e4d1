"""Async client for the parts of the Lokalise API v2 used by this tool."""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Set

import httpx
from aiolimiter import AsyncLimiter

from lokalise_keys.errors import (
    AuthError,
    ProjectNotFoundError,
    RemoteError,
    UnsupportedKeyError
)
from lokalise_keys.key_file_parser import KeyEntry
from lokalise_keys.payloads import DEFAULT_PLATFORMS, build_create_keys_body

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.lokalise.com/api2"
DEFAULT_TIMEOUT = 30.0
# Lokalise allows 6 requests per second per token.
DEFAULT_REQUESTS_PER_SECOND = 6
PAGE_LIMIT = 1000


@dataclass
class Project:
    project_id: str
    name: str
    base_language_iso: str

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Project":
        return cls(
            project_id=data["project_id"],
            name=data.get("name", ""),
            base_language_iso=data.get("base_language_iso", "en"),
        )


def _single_key_name(key_name: Any) -> str:
    """
    Collapse Lokalise's per-platform ``key_name`` object into one name.

    Raises:
        UnsupportedKeyError: If the platforms use different names.
    """
    if isinstance(key_name, str):
        return key_name
    names = set(key_name.values())
    if len(names) != 1:
        raise UnsupportedKeyError(
            f"Key with different names per platform isn't supported: {key_name}"
        )
    return names.pop()


class LokaliseClient:
    """
    Thin wrapper over ``httpx.AsyncClient`` that authenticates, throttles and
    maps error responses to the tool's exception types.

    Use it as an async context manager so the underlying connection pool is
    closed when the run ends.
    """

    def __init__(
            self,
            api_token: Optional[str],
            base_url: str = DEFAULT_BASE_URL,
            timeout: float = DEFAULT_TIMEOUT,
            requests_per_second: float = DEFAULT_REQUESTS_PER_SECOND,
            transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        if not api_token:
            raise AuthError("A Lokalise API token is required.")
        self._limiter = AsyncLimiter(requests_per_second, 1)
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip('/'),
            headers={
                "Authorization": f"Bearer {api_token}",
                "Accept": "application/json",
            },
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def __aenter__(self) -> "LokaliseClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        async with self._limiter:
            try:
                response = await self._http.request(method, path, **kwargs)
            except httpx.HTTPError as http_exc:
                raise RemoteError(None, f"{method} {path}: {http_exc}") from http_exc

        logger.debug("%s %s -> HTTP %s", method, path, response.status_code)
        if response.status_code in (401, 403):
            raise AuthError(
                f"Lokalise rejected the API token (HTTP {response.status_code}): {response.text}"
            )
        if not response.is_success:
            raise RemoteError(response.status_code, response.text)
        try:
            return response.json()
        except ValueError as json_exc:
            raise RemoteError(response.status_code, f"Invalid JSON in response: {response.text}") from json_exc

    async def _paginate(self, path: str, collection: str) -> List[Dict[str, Any]]:
        """Fetch every page of a list endpoint, stopping on a short page."""
        items: List[Dict[str, Any]] = []
        page = 1
        while True:
            data = await self._request("GET", path, params={"limit": PAGE_LIMIT, "page": page})
            page_items = data.get(collection, [])
            items.extend(page_items)
            if len(page_items) < PAGE_LIMIT:
                return items
            page += 1

    async def list_projects(self) -> List[Project]:
        return [Project.from_api(raw) for raw in await self._paginate("/projects", "projects")]

    async def find_project(self, name_or_id: str) -> Project:
        """
        Resolve a project by name, falling back to a project id match.

        Raises:
            ProjectNotFoundError: If no project matches.
        """
        projects = await self.list_projects()
        for project in projects:
            if project.name == name_or_id:
                return project
        for project in projects:
            if project.project_id == name_or_id:
                return project
        raise ProjectNotFoundError(f"No project name '{name_or_id}' was found")

    async def list_key_names(self, project: Project) -> Set[str]:
        raw_keys = await self._paginate(f"/projects/{project.project_id}/keys", "keys")
        return {_single_key_name(raw["key_name"]) for raw in raw_keys}

    async def create_keys(
            self,
            project: Project,
            batch: Sequence[KeyEntry],
            platforms: Sequence[str] = DEFAULT_PLATFORMS
    ) -> Dict[str, Any]:
        """
        Create one batch of keys in the project.

        Returns:
            Dict[str, Any]: The decoded response, with ``keys`` and possibly ``errors``.
        """
        body = build_create_keys_body(batch, project.base_language_iso, platforms)
        return await self._request("POST", f"/projects/{project.project_id}/keys", json=body)
