import logging
from typing import Any, Dict, List, Mapping, Optional

import requests

from ..config import settings
from .filters import build_query_params

log = logging.getLogger(__name__)

MAX_PAGE_SIZE = 40


class RAWGError(Exception):
    def __init__(self, status: int, reason: str):
        super().__init__(f"RAWG API error: {status} {reason}")
        self.status = status
        self.reason = reason


class RAWGClient:
    """Read-only client for the RAWG games catalog."""

    def __init__(self, api_key: str, base_url: Optional[str] = None, timeout: Optional[int] = None):
        if not api_key:
            raise ValueError("RAWG API key is required")
        self.api_key = api_key
        self.base_url = (base_url or settings.rawg_base_url).rstrip("/")
        self.timeout = timeout or settings.http_timeout_sec
        self.session = requests.Session()
        self.headers = {"Content-Type": "application/json"}

    def _request(self, endpoint: str, params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        query = dict(params or {})
        query["key"] = self.api_key
        url = f"{self.base_url}{endpoint}"
        log.info("RAWG GET %s params=%s", endpoint, {k: v for k, v in query.items() if k != "key"})
        resp = self.session.get(url, headers=self.headers, params=query, timeout=self.timeout)
        if not resp.ok:
            raise RAWGError(resp.status_code, resp.reason)
        return resp.json()

    def get_games(self, filters: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        return self._request("/games", build_query_params(filters or {}))

    def get_all_games(self, filters: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        games: List[Dict[str, Any]] = []
        page = 1
        while True:
            resp = self.get_games({**(filters or {}), "page": page, "page_size": MAX_PAGE_SIZE})
            results = resp.get("results") or []
            games.extend(results)
            if not resp.get("next") or not results:
                break
            page += 1
        return games

    def get_genres(self) -> List[Dict[str, Any]]:
        return self._request("/genres").get("results", [])

    def get_platforms(self) -> List[Dict[str, Any]]:
        return self._request("/platforms").get("results", [])
