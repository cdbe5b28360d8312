"""FatSecret Platform REST API client."""

import base64
import hashlib
import hmac
import secrets
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from urllib.parse import quote

import httpx

from slimfit.services.diary import FatSecretClient

FATSECRET_API_URL = "https://platform.fatsecret.com/rest/server.api"
_EPOCH = date(1970, 1, 1)


class FatSecretApiError(RuntimeError):
    """Raised when FatSecret answers with an error payload."""

    def __init__(self, code: object, message: str) -> None:
        super().__init__(f"FatSecret error {code}: {message}")
        self.code = code


def _percent(value: str) -> str:
    return quote(value, safe="~")


def oauth_signature(
    http_method: str,
    url: str,
    params: dict[str, str],
    consumer_secret: str,
    token_secret: str = "",
) -> str:
    """Return the OAuth 1.0a HMAC-SHA1 signature for a request."""
    normalized = "&".join(
        f"{_percent(key)}={_percent(value)}"
        for key, value in sorted((str(k), str(v)) for k, v in params.items())
    )
    base_string = "&".join(
        [http_method.upper(), _percent(url), _percent(normalized)]
    )
    key = f"{_percent(consumer_secret)}&{_percent(token_secret)}"
    digest = hmac.new(key.encode(), base_string.encode(), hashlib.sha1).digest()
    return base64.b64encode(digest).decode()


def diary_day_number(day: date) -> int:
    """FatSecret dates are whole days since the Unix epoch."""
    return (day - _EPOCH).days


@dataclass
class HttpxFatSecretClient(FatSecretClient):
    """HTTPX-backed FatSecret client with OAuth 1.0a request signing."""

    consumer_key: str
    consumer_secret: str
    http_client: httpx.AsyncClient
    base_url: str = FATSECRET_API_URL
    clock: Callable[[], float] = time.time
    nonce_factory: Callable[[], str] = field(default=lambda: secrets.token_hex(8))

    @classmethod
    def create(
        cls, consumer_key: str, consumer_secret: str, base_url: str = FATSECRET_API_URL
    ) -> "HttpxFatSecretClient":
        """Create a FatSecret client with a managed httpx session."""
        return cls(
            consumer_key=consumer_key,
            consumer_secret=consumer_secret,
            http_client=httpx.AsyncClient(),
            base_url=base_url,
        )

    async def create_profile(self, user_key: str) -> dict[str, object]:
        """Create a profile bound to our user id."""
        return await self._call("profile.create", {"user_id": user_key})

    async def get_food_entries(
        self, day: date, auth_token: str, auth_secret: str
    ) -> dict[str, object]:
        """Read one day of the user's food diary."""
        return await self._call(
            "food_entries.get.v2",
            {"date": str(diary_day_number(day))},
            auth_token=auth_token,
            auth_secret=auth_secret,
        )

    async def search_foods(self, query: str, max_results: int = 10) -> dict[str, object]:
        """Search the public food database."""
        return await self._call(
            "foods.search",
            {"search_expression": query, "max_results": str(max_results)},
        )

    async def get_food(self, food_id: str) -> dict[str, object]:
        """Fetch a food with its servings."""
        return await self._call("food.get", {"food_id": food_id})

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _call(
        self,
        method: str,
        params: dict[str, str],
        *,
        auth_token: str | None = None,
        auth_secret: str | None = None,
    ) -> dict[str, object]:
        form = self._signed_form(method, params, auth_token, auth_secret)
        response = await self.http_client.post(self.base_url, data=form, timeout=10)
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise FatSecretApiError("invalid", "Unexpected response body")
        error = payload.get("error")
        if isinstance(error, dict):
            raise FatSecretApiError(error.get("code"), str(error.get("message", "")))
        return payload

    def _signed_form(
        self,
        method: str,
        params: dict[str, str],
        auth_token: str | None,
        auth_secret: str | None,
    ) -> dict[str, str]:
        form = {
            **params,
            "method": method,
            "format": "json",
            "oauth_consumer_key": self.consumer_key,
            "oauth_nonce": self.nonce_factory(),
            "oauth_signature_method": "HMAC-SHA1",
            "oauth_timestamp": str(int(self.clock())),
            "oauth_version": "1.0",
        }
        if auth_token:
            form["oauth_token"] = auth_token
        form["oauth_signature"] = oauth_signature(
            "POST", self.base_url, form, self.consumer_secret, auth_secret or ""
        )
        return form
