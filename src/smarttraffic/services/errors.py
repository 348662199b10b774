"""Exceptions raised by external provider integrations."""


class ProviderError(RuntimeError):
    """A provider answered with an error or a payload we cannot use."""


class AIServiceError(ProviderError):
    """The language-model completion service failed or is not configured."""
