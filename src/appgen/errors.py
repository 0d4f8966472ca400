"""Exceptions raised by the generation and storage clients."""


class AppgenError(Exception):
    """Base class for appgen errors."""


class ValidationRejection(AppgenError):
    """The generation service refused the request (HTTP 400 with a category)."""

    def __init__(self, error: str, category: str):
        super().__init__(f"{error} (category: {category})")
        self.error = error
        self.category = category


class GenerationFailure(AppgenError):
    """Any other failed generation request, including transport errors."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class PersistenceFailure(AppgenError):
    """Storing a generated version failed."""

    def __init__(self, session_id: str, version_label: str, message: str):
        super().__init__(f"Failed to store {session_id}/{version_label}: {message}")
        self.session_id = session_id
        self.version_label = version_label
