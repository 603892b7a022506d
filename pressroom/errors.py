"""Exception hierarchy for the article pipeline."""

from typing import Optional


class PressroomError(Exception):
    """Base class for all pipeline errors."""


class GenerationError(PressroomError):
    """Base class for failures of a single generation call."""


class GenerationTimeout(GenerationError):
    """The provider did not answer within the allowed wait."""

    def __init__(self, timeout_seconds: float) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Generation did not complete within {timeout_seconds:.0f}s")


class GenerationProviderError(GenerationError):
    """The upstream provider reported a failure (rate limit, auth, bad request...)."""

    def __init__(self, message: str, kind: str = "unknown") -> None:
        self.kind = kind
        super().__init__(f"Provider error ({kind}): {message}")


class InvalidGenerationOutput(GenerationError):
    """The model output violated the requested output contract."""


class InvalidTransition(PressroomError):
    """An article was moved along an edge the lifecycle does not allow."""

    def __init__(self, current: str, target: str, reason: Optional[str] = None) -> None:
        self.current = current
        self.target = target
        self.reason = reason
        message = f"Cannot move article from '{current}' to '{target}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class PublishBlocked(InvalidTransition):
    """Approval refused because critical quality checks fail."""

    def __init__(self, current: str, target: str, report) -> None:
        self.report = report
        failed = ", ".join(report.failed_critical()) or "unknown"
        super().__init__(current, target, f"critical quality checks failing ({failed})")


class ArticleNotFound(PressroomError):
    """No article with the given id exists in storage."""

    def __init__(self, article_id: str) -> None:
        self.article_id = article_id
        super().__init__(f"Article not found: {article_id}")


class PublishingError(PressroomError):
    """The publishing target rejected or failed a request."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)
