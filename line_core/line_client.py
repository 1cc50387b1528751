# =============================================================================
# line_core/line_client.py  -  LINE Messaging API Client
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns each validated tool call into exactly ONE HTTP request against the
#   LINE Messaging API and hands back the parsed JSON body, unmodified.
#
# WHAT IT DOES NOT DO:
#   - It does not look at the status code.  A 400 from LINE comes back as
#     LINE's own {"message": ...} body, same as a 200.
#   - It does not retry, cache, or paginate.
#   - It does not decide what an error "means".  Network failures
#     (httpx.HTTPError) and unparseable bodies (ValueError) propagate to the
#     dispatcher, which reports them to the host.
#
# SHARING:
#   One LineClient is built at startup and shared by every request.  The
#   token and header template are set in __init__ and never touched again;
#   the underlying httpx.AsyncClient owns the connection pool.
# =============================================================================

import logging
from typing import Any, Optional

import httpx

from line_core.registry import DEFAULT_HISTORY_COUNT

logger = logging.getLogger(__name__)

LINE_API_BASE_URL = "https://api.line.me/v2/bot"


class LineClient:
    """Async client for the three LINE group endpoints the tools expose."""

    def __init__(
        self,
        channel_access_token: str,
        base_url: str = LINE_API_BASE_URL,
        timeout: Optional[float] = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            channel_access_token: LINE channel access token (bearer credential).
            base_url: API root; every endpoint path is appended to it.
            timeout: Per-request timeout in seconds, or None for no limit.
            transport: Optional httpx transport, e.g. httpx.MockTransport in tests.
        """
        if not channel_access_token:
            raise ValueError("channel_access_token must be a non-empty string")

        self.base_url = base_url.rstrip("/")
        self._headers = {
            "Authorization": f"Bearer {channel_access_token}",
            "Content-Type": "application/json",
        }
        self._http = httpx.AsyncClient(
            headers=self._headers,
            timeout=timeout,
            transport=transport,
        )

    def __repr__(self) -> str:
        return f"LineClient(base_url={self.base_url!r})"

    async def __aenter__(self) -> "LineClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # -------------------------------------------------------------------------
    # Endpoints
    # -------------------------------------------------------------------------
    async def send_group_message(self, group_id: str, message: str) -> Any:
        """Push a single text message to a group."""
        payload = {
            "to": group_id,
            "messages": [{"type": "text", "text": message}],
        }
        response = await self._http.post(f"{self.base_url}/message/push", json=payload)
        logger.debug("POST /message/push -> %s", response.status_code)
        return response.json()

    async def get_group_profile(self, group_id: str) -> Any:
        """Fetch the group summary (name, picture URL)."""
        response = await self._http.get(f"{self.base_url}/group/{group_id}/summary")
        logger.debug("GET /group/%s/summary -> %s", group_id, response.status_code)
        return response.json()

    async def get_group_history(self, group_id: str, count: int = DEFAULT_HISTORY_COUNT) -> Any:
        """Fetch the latest ``count`` messages of a group."""
        response = await self._http.get(
            f"{self.base_url}/message/list/group/{group_id}",
            params={"count": count},
        )
        logger.debug("GET /message/list/group/%s -> %s", group_id, response.status_code)
        return response.json()
