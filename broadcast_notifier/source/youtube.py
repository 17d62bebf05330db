"""YouTube Data API v3 broadcast source."""

import json
import socket
from pathlib import Path
from typing import Any, Union
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from ..config.defaults import SourceParams
from ..data.parsers import Broadcast, parse_broadcast_list
from ..errors import BroadcastFetchError, ConfigurationError
from .base import BaseBroadcastSource

BROADCAST_PARTS = "id,snippet,contentDetails,status"


def read_access_token(token_path: Union[str, Path]) -> str:
    """
    Read the cached OAuth access token.

    The token file is produced by the external authorization flow and holds
    a JSON object with an ``access_token`` field.
    """
    path = Path(token_path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Unable to read token file {path}: {e}") from e

    token = data.get("access_token") if isinstance(data, dict) else None
    if not token:
        raise ConfigurationError(f"Token file {path} has no access_token")
    return token


class YouTubeBroadcastSource(BaseBroadcastSource):
    """Lists the authenticated channel's live broadcasts."""

    def __init__(self, config: SourceParams, name: str = "youtube"):
        super().__init__(name)
        self.config = config

    @property
    def endpoint(self) -> str:
        return f"{self.config.api_base.rstrip('/')}/liveBroadcasts"

    def list_owned_broadcasts(self, max_results: int) -> list[Broadcast]:
        """Fetch the newest ``max_results`` broadcasts of the authenticated channel."""
        payload = self._request({
            "part": BROADCAST_PARTS,
            "mine": "true",
            "maxResults": str(max_results),
        })

        items = payload.get("items") or []
        if not isinstance(items, list):
            raise BroadcastFetchError(
                "Response 'items' is not a list",
                endpoint=self.endpoint
            )

        broadcasts = parse_broadcast_list(items)
        self.logger.debug(
            "Fetched broadcasts",
            source=self.name,
            item_count=len(items),
            broadcast_count=len(broadcasts)
        )
        return broadcasts

    def _request(self, params: dict[str, str]) -> dict[str, Any]:
        """GET the broadcasts endpoint and decode the JSON body."""
        url = f"{self.endpoint}?{urlencode(params)}"
        try:
            token = read_access_token(self.config.token_path)
        except ConfigurationError as e:
            # The token file is rewritten by the external authorization flow
            raise BroadcastFetchError(str(e), endpoint=self.endpoint) from e

        headers = {
            'Accept': 'application/json',
            'Authorization': f'Bearer {token}',
            'User-Agent': 'broadcast-notifier/1.0'
        }
        req = Request(url, headers=headers, method="GET")

        try:
            with urlopen(req, timeout=self.config.timeout_seconds) as response:
                body = response.read().decode('utf-8')

        except HTTPError as e:
            raise BroadcastFetchError(
                f"HTTP {e.code}: {e.reason}",
                status_code=e.code,
                endpoint=self.endpoint
            ) from e

        except (OSError, URLError, socket.timeout) as e:
            raise BroadcastFetchError(
                f"Network error: {e}",
                endpoint=self.endpoint
            ) from e

        try:
            payload = json.loads(body)
        except json.JSONDecodeError as e:
            raise BroadcastFetchError(
                f"Invalid JSON response: {e}",
                endpoint=self.endpoint
            ) from e

        if not isinstance(payload, dict):
            raise BroadcastFetchError("Response is not a JSON object", endpoint=self.endpoint)
        return payload
