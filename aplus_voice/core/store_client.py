"""
Upstream Store Client - aplusauto.parts (WordPress / WooCommerce)

The only place that makes outbound HTTP calls. Every failure mode
(transport error, timeout, non-2xx, unexpected body) is raised as
UpstreamError so callers have a single thing to catch.
"""

import logging
import httpx
from typing import Any, Dict, List, Optional
from aplus_voice.config import get_settings

logger = logging.getLogger(__name__)

STORE_API_PATH = "/wp-json/wc/store/v1"
ADMIN_AJAX_PATH = "/wp-admin/admin-ajax.php"
INVENTORY_ACTION = "iis_search_parts"
INVENTORY_REFERER_PATH = "/used-parts-inventory/"
INVENTORY_LIST_KEYS = ("data", "results", "parts", "products")


class UpstreamError(Exception):
    """The store could not be reached or answered with something unusable"""


class StoreClient:
    """
    Thin async client for the store's public surfaces

    - WooCommerce Store API (unauthenticated JSON)
    - Used-parts inventory search (admin-ajax form POST)
    - Rendered HTML pages (search, categories, homepage)
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        user_agent: str = "Mozilla/5.0",
        max_results: int = 10,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_results = max_results

        # Default pooling only; no retries
        self.client = client or httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            limits=httpx.Limits(max_keepalive_connections=5, max_connections=10)
        )
        self.headers = {
            "User-Agent": user_agent,
            "Accept-Language": "en-US,en;q=0.5",
        }

    def url(self, path: str) -> str:
        """Absolute URL for a site-relative path (absolute URLs pass through)"""
        if path.startswith("http://") or path.startswith("https://"):
            return path
        if not path.startswith("/"):
            path = "/" + path
        return f"{self.base_url}{path}"

    async def _request(
        self,
        method: str,
        path: str,
        accept: str = "*/*",
        **kwargs
    ) -> httpx.Response:
        url = self.url(path)
        headers = dict(self.headers, Accept=accept)
        headers.update(kwargs.pop("headers", None) or {})

        try:
            response = await self.client.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UpstreamError(f"{url} returned HTTP {e.response.status_code}") from e
        except httpx.TimeoutException as e:
            raise UpstreamError(f"{url} timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"{url} request failed: {e}") from e

        logger.debug("[Store] %s %s -> %s", method, response.request.url, response.status_code)
        return response

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None, accept: str = "*/*") -> httpx.Response:
        return await self._request("GET", path, accept=accept, params=params)

    @staticmethod
    def _json(response: httpx.Response, path: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(f"{path} returned a non-JSON body") from e

    async def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        response = await self._get(path, params=params, accept="application/json")
        return self._json(response, path)

    async def search_products(self, query: str, per_page: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Search the catalog through the Store API

        Returns the raw product dicts in the store's native order.
        """
        data = await self._get_json(
            f"{STORE_API_PATH}/products",
            params={"search": query, "per_page": per_page or self.max_results}
        )
        if not isinstance(data, list):
            raise UpstreamError(f"product search returned {type(data).__name__}, expected a list")
        return [item for item in data if isinstance(item, dict)]

    async def list_categories(self) -> List[Dict[str, Any]]:
        """All product categories (name, slug, permalink, count)"""
        data = await self._get_json(f"{STORE_API_PATH}/products/categories", params={"per_page": 100})
        if not isinstance(data, list):
            raise UpstreamError(f"category listing returned {type(data).__name__}, expected a list")
        return [item for item in data if isinstance(item, dict)]

    async def inventory_search(self, fields: Dict[str, str]) -> List[Dict[str, Any]]:
        """
        Used-parts inventory search (IIS Pro plugin, admin-ajax)

        The plugin answers with a list of parts, an object wrapping one
        (``data``/``results``/``parts``/``products``), or a single part.
        Anything else, including WordPress's bare "0" for an unknown
        action, is an UpstreamError.
        """
        data = dict(fields, action=INVENTORY_ACTION)
        response = await self._request(
            "POST",
            ADMIN_AJAX_PATH,
            accept="application/json, text/javascript, */*; q=0.01",
            data=data,
            headers={"Referer": self.url(INVENTORY_REFERER_PATH)}
        )
        payload = self._json(response, ADMIN_AJAX_PATH)

        if isinstance(payload, dict):
            for key in INVENTORY_LIST_KEYS:
                if isinstance(payload.get(key), list):
                    payload = payload[key]
                    break
            else:
                if payload.get("success") is False:
                    raise UpstreamError("inventory search reported failure")
                payload = [payload]

        if not isinstance(payload, list):
            raise UpstreamError(f"inventory search returned {type(payload).__name__}, expected parts")
        return [item for item in payload if isinstance(item, dict)]

    async def fetch_page(self, path: str, params: Optional[Dict[str, Any]] = None) -> str:
        """Rendered HTML for a site page"""
        response = await self._get(
            path,
            params=params,
            accept="text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
        )
        return response.text

    async def fetch_search_page(self, query: str) -> str:
        """WordPress product search results page"""
        return await self.fetch_page("/", params={"s": query, "post_type": "product"})

    async def fetch_homepage(self) -> str:
        return await self.fetch_page("/")

    async def close(self):
        """Close HTTP client"""
        await self.client.aclose()


# Global client instance
_store_client: Optional[StoreClient] = None


def get_store_client() -> StoreClient:
    """
    Get or create the store client

    One client per process so connections to the store are reused
    """
    global _store_client

    if _store_client is None:
        settings = get_settings()
        _store_client = StoreClient(
            base_url=settings.UPSTREAM_BASE_URL,
            timeout=settings.UPSTREAM_TIMEOUT,
            user_agent=settings.UPSTREAM_USER_AGENT,
            max_results=settings.MAX_RESULTS
        )

    return _store_client


async def close_store_client():
    """Close store client on shutdown"""
    global _store_client
    if _store_client:
        await _store_client.close()
        _store_client = None
