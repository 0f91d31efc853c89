"""Exception hierarchy shared by the planner, the runner and the service."""
from typing import Optional


class ProviderError(Exception):
    """Base class for recoverable planning-provider failures."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.message = message


class ProviderUnavailable(ProviderError):
    """Provider is missing a credential or configuration."""


class ProviderResponseInvalid(ProviderError):
    """Provider answered, but the answer is not a valid plan."""


class ProviderTransportError(ProviderError):
    """Network or API failure while calling the provider."""


class StageFatalError(Exception):
    """A build stage failed; the build is aborted."""

    def __init__(self, stage: str, message: str):
        super().__init__(f"Stage '{stage}' failed: {message}")
        self.stage = stage
        self.message = message


class InvalidBuildRequest(ValueError):
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field
