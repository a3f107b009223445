from __future__ import annotations


class ConfigurationError(RuntimeError):
    """The provider credential is missing, so no model call can be made."""


class ProviderError(RuntimeError):
    """The completion call reached the provider (or tried to) and failed.

    ``quota_exhausted`` is set when the provider signalled a rate limit or an
    exhausted quota. Callers route on the flag instead of the message text.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        quota_exhausted: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.quota_exhausted = quota_exhausted
