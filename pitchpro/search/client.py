"""A thin client for the hosted search engine's REST query endpoint."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, TypedDict
from urllib.parse import urlencode

import requests

from pitchpro.errors import SearchError, SearchNotConfiguredError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


class SearchResult(TypedDict):
    hits: list[dict[str, Any]]
    nbHits: int
    nbPages: int


class SearchClient:
    """Query a single Algolia application with a search-only key."""

    def __init__(
        self,
        app_id: str,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not app_id or not api_key:
            raise SearchNotConfiguredError()
        self.app_id = app_id
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> SearchClient:
        """Build a client from Flask config, or fail if credentials are missing."""
        return cls(
            config.get("ALGOLIA_APP_ID") or "",
            config.get("ALGOLIA_SEARCH_API_KEY") or "",
            timeout=config.get("HTTP_TIMEOUT") or DEFAULT_TIMEOUT,
        )

    def _url(self, index_name: str) -> str:
        return (
            f"https://{self.app_id}-dsn.algolia.net/1/indexes/{index_name}/query"
        )

    def search(
        self,
        index_name: str,
        query: str = "",
        filters: str = "",
        page: int = 0,
        hits_per_page: int = 20,
    ) -> SearchResult:
        """Run one query and return its hits with the paging totals."""
        params = {"query": query, "page": page, "hitsPerPage": hits_per_page}
        if filters:
            params["filters"] = filters
        logger.debug(f"Searching {index_name}: {params}")

        try:
            response = self.session.post(
                self._url(index_name),
                json={"params": urlencode(params)},
                headers={
                    "X-Algolia-Application-Id": self.app_id,
                    "X-Algolia-API-Key": self.api_key,
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            body = response.json()
        except requests.RequestException as e:
            logger.error(f"Search on {index_name} failed: {e}")
            raise SearchError(f"Search failed: {e}") from e
        except ValueError as e:
            logger.error(f"Search on {index_name} returned invalid JSON: {e}")
            raise SearchError("Search failed: invalid response") from e

        return SearchResult(
            hits=body.get("hits") or [],
            nbHits=body.get("nbHits") or 0,
            nbPages=body.get("nbPages") or 0,
        )
