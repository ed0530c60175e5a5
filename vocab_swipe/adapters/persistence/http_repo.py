# vocab_swipe/adapters/persistence/http_repo.py
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
import structlog

from vocab_swipe.core.domain.exceptions import SourceLoadError, SourceNotFoundError
from vocab_swipe.core.ports.source_repository import ISourceRepository, RawSource
from vocab_swipe.shared.config import settings
from vocab_swipe.shared.resilience import (
    RETRYABLE_STATUS,
    CircuitBreakerOpenError,
    get_circuit_breaker,
    retry_external_api,
)

logger = structlog.get_logger()


class HttpSourceRepository(ISourceRepository):
    """
    Source backing served by a remote Vocab Swipe server (`/api/sources`).

    Responsibilities:
    1. Speak the `{success: bool, ...}` JSON envelope of the sources API.
    2. Retry transport failures and trip a circuit breaker when the server stays down.
    3. Map 404 answers to SourceNotFoundError and everything else to SourceLoadError.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"User-Agent": f"{settings.APP_NAME}/1.0"},
        )
        self.circuit_breaker = get_circuit_breaker(f"sources:{self.base_url}")

    async def aclose(self) -> None:
        await self.client.aclose()

    @staticmethod
    def _source_path(name: str) -> str:
        return f"/api/sources/{quote(name, safe='')}"

    @retry_external_api
    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        response = await self.client.request(method, path, **kwargs)
        if response.status_code in RETRYABLE_STATUS:
            response.raise_for_status()
        return response

    async def _call(self, method: str, path: str, name: Optional[str] = None, **kwargs) -> Dict[str, Any]:
        try:
            response = await self.circuit_breaker.a_call(self._request, method, path, **kwargs)
        except CircuitBreakerOpenError as e:
            raise SourceLoadError(str(e), name=name)
        except httpx.TransportError as e:
            logger.error("remote_unreachable", url=self.base_url, path=path, error=str(e))
            raise SourceLoadError(f"remote server unreachable: {e}", name=name)
        except httpx.HTTPStatusError as e:
            logger.error("remote_unavailable", url=self.base_url, path=path, status=e.response.status_code)
            raise SourceLoadError(f"remote server unavailable (HTTP {e.response.status_code})", name=name)

        if response.status_code == 404 and name is not None:
            raise SourceNotFoundError(name)

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.is_error or body.get("success") is False:
            reason = body.get("message") or body.get("error") or f"HTTP {response.status_code}"
            logger.warning("remote_request_failed", path=path, status=response.status_code, reason=reason)
            raise SourceLoadError(str(reason), name=name)
        return body

    @staticmethod
    def _raw(name: str, item: Dict[str, Any]) -> RawSource:
        words = item.get("words")
        link = item.get("originLink")
        if not isinstance(words, list):
            return RawSource(name=name, error="remote payload has no word array")
        return RawSource(name=name, words=words, origin_link=link)

    # --- Interface Implementation ---

    async def list_raw(self) -> List[RawSource]:
        body = await self._call("GET", "/api/sources")
        items = body.get("sources")
        if not isinstance(items, list):
            raise SourceLoadError("remote listing has no 'sources' array")

        raws: List[RawSource] = []
        for i, item in enumerate(items):
            if not isinstance(item, dict) or not isinstance(item.get("name"), str):
                raws.append(RawSource(name=f"#{i + 1}", error="remote entry has no name"))
                continue
            raws.append(self._raw(item["name"], item))
        return raws

    async def get(self, name: str) -> RawSource:
        body = await self._call("GET", self._source_path(name), name=name)
        return self._raw(name, body)

    async def put(self, name: str, words: List[dict], origin_link: Optional[str] = None) -> None:
        payload: Dict[str, Any] = {"words": words}
        if origin_link:
            payload["originLink"] = origin_link
        # PUT carries the name in the path and creates or overwrites
        await self._call("PUT", self._source_path(name), json=payload)
        logger.info("remote_source_written", source=name, words=len(words))

    async def delete(self, name: str) -> None:
        await self._call("DELETE", self._source_path(name), name=name)

    async def health_check(self) -> bool:
        try:
            body = await self._call("GET", "/api/health")
        except SourceLoadError:
            return False
        return body.get("status") == "ok"
