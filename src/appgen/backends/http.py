"""HTTP clients for the generation and artifact storage services.

Both services live under the same base URL:

- POST /api/generate accepts JSON ``{query?, currentHtml, feedback?}`` and
  answers ``{html, usage?}``. A 400 carrying ``{error, category}`` means the
  request was refused on content grounds.
- POST /api/apps/{session_id}/{version} accepts the raw HTML body.
"""

import logging
import urllib.parse

import httpx

from ..core import Usage
from ..errors import GenerationFailure, PersistenceFailure, ValidationRejection
from ..provider import ArtifactStore, GenerationResult, GenerationService

logger = logging.getLogger(__name__)


class HttpGenerationService(GenerationService):
    """Generation service reached over HTTP."""

    name = "http"

    def __init__(self, base_url: str, timeout: float = 60.0, client: httpx.AsyncClient | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    async def generate(self, query: str, current_html: str = "") -> GenerationResult:
        return await self._post({"query": query, "currentHtml": current_html})

    async def revise(self, current_html: str, feedback: str) -> GenerationResult:
        return await self._post({"currentHtml": current_html, "feedback": feedback})

    # ── Private helpers ──────────────────────────────────────────────

    async def _post(self, payload: dict) -> GenerationResult:
        url = f"{self.base_url}/api/generate"
        try:
            if self._client is not None:
                response = await self._client.post(url, json=payload, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(url, json=payload)
        except httpx.HTTPError as e:
            raise GenerationFailure(f"Request to {url} failed: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = None

        if not response.is_success:
            if response.status_code == 400 and isinstance(data, dict) and data.get("category"):
                raise ValidationRejection(str(data.get("error", "")), str(data["category"]))
            raise GenerationFailure("Failed to generate HTML", status_code=response.status_code)

        if not isinstance(data, dict) or not data.get("html"):
            raise GenerationFailure("Response contained no HTML", status_code=response.status_code)

        # Usage is diagnostic only; a malformed value is dropped.
        try:
            usage = Usage.from_dict(data.get("usage"))
        except (TypeError, ValueError, AttributeError):
            logger.warning("Ignoring malformed usage in response: %r", data.get("usage"))
            usage = None

        logger.debug("Generated %d characters of HTML", len(data["html"]))
        return GenerationResult(html=data["html"], usage=usage)


class HttpArtifactStore(ArtifactStore):
    """Artifact storage reached over HTTP."""

    name = "http"

    def __init__(self, base_url: str, timeout: float = 60.0, client: httpx.AsyncClient | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    async def save(self, session_id: str, version_label: str, html: str) -> None:
        url = artifact_path(self.base_url, session_id, version_label)
        headers = {"Content-Type": "text/html; charset=utf-8"}
        body = html.encode("utf-8")
        try:
            if self._client is not None:
                response = await self._client.post(url, content=body, headers=headers, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(url, content=body, headers=headers)
        except httpx.HTTPError as e:
            raise PersistenceFailure(session_id, version_label, str(e)) from e

        if not response.is_success:
            raise PersistenceFailure(session_id, version_label, f"HTTP {response.status_code}")


def artifact_path(base_url: str, session_id: str, version_label: str) -> str:
    """Return the URL under which a stored version lives."""
    return "{}/api/apps/{}/{}".format(
        base_url.rstrip("/"),
        urllib.parse.quote(session_id, safe=""),
        urllib.parse.quote(version_label, safe=""),
    )
