"""Build the collaborators the controller needs from configuration."""

from ..config import get_api_url, get_timeout
from ..provider import ArtifactStore, GenerationService
from .http import HttpArtifactStore, HttpGenerationService


def get_collaborators() -> tuple[GenerationService, ArtifactStore]:
    """Return the generation service and artifact store for the configured API."""
    base_url = get_api_url()
    timeout = get_timeout()
    return (
        HttpGenerationService(base_url, timeout=timeout),
        HttpArtifactStore(base_url, timeout=timeout),
    )
