"""WordPress REST API client."""

from datetime import datetime
from typing import Any, Dict, Optional

import httpx
import pendulum
from pydantic import BaseModel, Field

from ..errors import PublishingError


class PublishedPost(BaseModel):
    """Post created on the publishing target."""

    id: int = Field(..., description="Remote post id")
    url: str = Field(..., description="Public URL of the post")


class WordPressClient:
    """Create posts through ``/wp-json/wp/v2`` with application-password auth."""

    def __init__(
        self,
        base_url: str,
        username: str,
        app_password: str,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """
        Initialize WordPress client.

        Args:
            base_url: Site root, e.g. https://www.example.com
            username: WordPress user owning the application password
            app_password: Application password
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use MockTransport)
        """
        if not base_url:
            raise ValueError("WordPress base_url is not configured")
        self.api_url = base_url.rstrip("/") + "/wp-json/wp/v2"
        self.auth = httpx.BasicAuth(username, app_password)
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(auth=self.auth, timeout=self.timeout, transport=self.transport)

    def create_post(
        self,
        title: str,
        content: str,
        status: str = "publish",
        date: Optional[datetime] = None,
        excerpt: Optional[str] = None,
    ) -> PublishedPost:
        """
        Create a post.

        Args:
            title: Post title
            content: Post body as HTML
            status: WordPress post status (publish, future, draft)
            date: Publication date, required by WordPress for ``future``
            excerpt: Optional excerpt

        Returns:
            PublishedPost with the remote id and public link

        Raises:
            PublishingError: the request failed or WordPress rejected it
        """
        payload: Dict[str, Any] = {"title": title, "content": content, "status": status}
        if date is not None:
            when = pendulum.instance(date, tz="UTC").in_timezone("UTC")
            payload["date_gmt"] = when.strftime("%Y-%m-%dT%H:%M:%S")
        if excerpt:
            payload["excerpt"] = excerpt

        try:
            with self._client() as client:
                response = client.post(f"{self.api_url}/posts", json=payload)
        except httpx.HTTPError as e:
            raise PublishingError(f"WordPress request failed: {e}") from e

        if response.status_code in (401, 403):
            raise PublishingError(
                f"WordPress authentication failed: HTTP {response.status_code}",
                status_code=response.status_code,
            )
        if response.status_code >= 400:
            raise PublishingError(
                f"WordPress rejected the post: HTTP {response.status_code}: {_error_message(response)}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
            return PublishedPost(id=body["id"], url=body["link"])
        except (ValueError, KeyError, TypeError) as e:
            raise PublishingError(f"Unexpected WordPress response: {e}") from e


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict):
        return str(body.get("message", body))
    return str(body)
