"""HTTP client for a running articles service."""

from __future__ import annotations

from types import TracebackType

import httpx


class ClientError(Exception):
    pass


class Client:
    """Talks to the service at ``addr``, e.g. ``http://localhost:3333``.

    Pass ``transport`` to run against an in-process app (``httpx.ASGITransport``).
    """

    def __init__(self, addr: str, transport: httpx.AsyncBaseTransport | None = None, timeout: float = 5.0) -> None:
        self.addr = addr.rstrip("/")
        self._http = httpx.AsyncClient(base_url=self.addr, transport=transport, timeout=timeout)

    async def ping(self) -> str:
        try:
            resp = await self._http.get("/ping")
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise ClientError(f"ping {self.addr}: {exc}") from exc
        return resp.text

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> Client:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
