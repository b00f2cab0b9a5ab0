"""
MetaGraphClient - thin async wrapper over the Meta Graph API.

Reads objects with field selection and posts URL-encoded create requests
to ad-account edges. Every non-2xx response becomes a MetaApiError that
keeps the platform's diagnostic fields (code, error_subcode, error_user_msg).

No retry, backoff or rate limiting: a failed call surfaces immediately.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from ..core.config import Config
from .exceptions import MetaApiError

logger = logging.getLogger(__name__)


def encode_form_value(value: Any) -> str:
    """Graph API form fields take JSON for structured values, str() for scalars."""
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def normalize_account_id(account_id: str) -> str:
    """'123' and 'act_123' both become 'act_123'."""
    account_id = str(account_id).strip()
    return account_id if account_id.startswith("act_") else f"act_{account_id}"


class MetaGraphClient:
    """
    Async Meta Graph API client.

    Usage:
        async with MetaGraphClient(access_token="...") as graph:
            ad = await graph.get_object("120200000", ["adset_id", "account_id"])
            new = await graph.post_edge("act_123", "adsets", {"name": "Clone"})
    """

    def __init__(
        self,
        access_token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.access_token = access_token or Config.META_GRAPH_API_TOKEN
        self.base_url = (base_url or Config.graph_base_url()).rstrip("/")
        self._timeout = timeout if timeout is not None else Config.META_HTTP_TIMEOUT
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

        if not self.access_token:
            logger.warning("No Meta access token provided - MetaGraphClient will not work")

    async def __aenter__(self) -> "MetaGraphClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            kwargs: Dict[str, Any] = {"base_url": self.base_url}
            if self._timeout is not None:
                kwargs["timeout"] = self._timeout
            if self._transport is not None:
                kwargs["transport"] = self._transport
            self._client = httpx.AsyncClient(**kwargs)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @staticmethod
    def _parse(response: httpx.Response) -> Dict[str, Any]:
        if response.is_error:
            error = MetaApiError.from_response(response.status_code, response.text)
            logger.warning(
                f"Graph API error {response.status_code} on {response.request.method} "
                f"{response.request.url.path}: {error.detail} (code={error.code}, "
                f"subcode={error.error_subcode})"
            )
            raise error
        try:
            body = response.json()
        except ValueError:
            raise MetaApiError(
                f"Unparsable response body: {response.text[:200]}",
                status_code=response.status_code,
                body=response.text,
            )
        if not isinstance(body, dict):
            raise MetaApiError(
                f"Expected a JSON object, got: {response.text[:200]}",
                status_code=response.status_code,
                body=body,
            )
        return body

    # ========================================================================
    # Reads
    # ========================================================================

    async def get_object(self, object_id: str, fields: List[str]) -> Dict[str, Any]:
        """GET /{object_id}?fields=..."""
        response = await self._http().get(
            f"/{object_id}",
            params={"fields": ",".join(fields), "access_token": self.access_token},
        )
        return self._parse(response)

    async def get_edge(
        self,
        object_id: str,
        edge: str,
        fields: List[str],
        limit: int = 100,
    ) -> List[Dict[str, Any]]:
        """GET /{object_id}/{edge} and return the first page of `data`."""
        response = await self._http().get(
            f"/{object_id}/{edge}",
            params={
                "fields": ",".join(fields),
                "limit": limit,
                "access_token": self.access_token,
            },
        )
        return self._parse(response).get("data", [])

    # ========================================================================
    # Writes
    # ========================================================================

    async def post_edge(
        self,
        parent_id: str,
        edge: str,
        data: Dict[str, Any],
        files: Optional[Dict[str, Tuple[str, bytes]]] = None,
    ) -> Dict[str, Any]:
        """
        POST /{parent_id}/{edge} with a URL-encoded body.

        None values are dropped; dicts/lists are JSON-encoded. When `files`
        is given the body goes out as multipart instead (video uploads).
        """
        form = {k: encode_form_value(v) for k, v in data.items() if v is not None}
        form["access_token"] = self.access_token

        logger.debug(f"POST /{parent_id}/{edge} fields={sorted(k for k in form if k != 'access_token')}")
        response = await self._http().post(f"/{parent_id}/{edge}", data=form, files=files)
        return self._parse(response)

    # ========================================================================
    # Account browsing
    # ========================================================================

    async def list_ad_accounts(self) -> List[Dict[str, Any]]:
        return await self.get_edge("me", "adaccounts", ["id", "name", "account_status"])

    async def list_campaigns(self, ad_account_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        List campaigns for an ad account.

        Falls back to the first account the token can see when no account
        id is given.
        """
        if not ad_account_id:
            accounts = await self.get_edge("me", "adaccounts", ["id", "name"], limit=1)
            if not accounts:
                raise MetaApiError("No ad accounts found")
            ad_account_id = accounts[0]["id"]

        return await self.get_edge(
            normalize_account_id(ad_account_id),
            "campaigns",
            ["id", "name", "status", "objective"],
        )

    async def list_ad_sets(self, campaign_id: str) -> List[Dict[str, Any]]:
        return await self.get_edge(
            campaign_id,
            "adsets",
            ["id", "name", "status", "daily_budget", "lifetime_budget", "targeting"],
        )

    async def list_ads(self, ad_set_id: str) -> List[Dict[str, Any]]:
        return await self.get_edge(ad_set_id, "ads", ["id", "name", "status", "creative"])
