"""
Minimal GitHub OAuth web-flow client over httpx.
"""

from typing import Any, Callable, Dict
from urllib.parse import urlencode

import httpx

from shortcode_app.errors import OAuthError


GITHUB_AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
GITHUB_TOKEN_URL = "https://github.com/login/oauth/access_token"
GITHUB_USER_URL = "https://api.github.com/user"


class GitHubOAuthClient:

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        callback_url: str,
        client_factory: Callable[[], httpx.AsyncClient],
        scope: str = "user:email",
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.callback_url = callback_url
        self.client_factory = client_factory
        self.scope = scope

    def authorize_url(self, state: str) -> str:
        query = urlencode({
            "client_id": self.client_id,
            "redirect_uri": self.callback_url,
            "scope": self.scope,
            "state": state,
        })
        return f"{GITHUB_AUTHORIZE_URL}?{query}"

    async def exchange_code(self, code: str) -> str:
        """Trade the callback ``code`` for an access token."""
        try:
            async with self.client_factory() as client:
                response = await client.post(
                    GITHUB_TOKEN_URL,
                    data={
                        "client_id": self.client_id,
                        "client_secret": self.client_secret,
                        "code": code,
                        "redirect_uri": self.callback_url,
                    },
                    headers={"Accept": "application/json"},
                )
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise OAuthError(f"Token exchange failed: {e}") from e

        token = payload.get("access_token")
        if not token:
            raise OAuthError(payload.get("error_description") or payload.get("error") or "No access token")
        return token

    async def fetch_profile(self, access_token: str) -> Dict[str, Any]:
        try:
            async with self.client_factory() as client:
                response = await client.get(
                    GITHUB_USER_URL,
                    headers={
                        "Authorization": f"Bearer {access_token}",
                        "Accept": "application/vnd.github+json",
                    },
                )
                response.raise_for_status()
                profile = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise OAuthError(f"Profile fetch failed: {e}") from e

        if not isinstance(profile, dict) or "id" not in profile:
            raise OAuthError("GitHub profile has no id")
        return profile
