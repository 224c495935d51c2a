"""Error taxonomy shared by the adapters, tools, orchestrator and CLI."""

from __future__ import annotations


class ApprenticeError(Exception):
    """Base error carrying a short machine-readable ``code``."""

    code = "error"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class ConfigError(ApprenticeError):
    """Missing or invalid settings.  Raised before any network call."""

    code = "config"


class MissingArgumentError(ConfigError):
    code = "missing_argument"

    def __str__(self) -> str:
        return (
            f"Missing mandatory arguments: {self.message} "
            "Try `apprentice chat --help` for more information."
        )


class TransportError(ApprenticeError):
    """Network or HTTP failure while talking to the model endpoint."""

    code = "transport"

    def __str__(self) -> str:
        return f"Failed to call LLM: {self.message}"


class ResponseFormatError(ApprenticeError):
    """Vendor response is missing a field or has an unexpected shape."""

    code = "response_format"

    def __str__(self) -> str:
        return f"Failed to parse LLM response: {self.message}"


class ProviderError(ApprenticeError):
    """
    The vendor answered with an explicit error envelope.

    ``message`` holds the vendor text verbatim.  This is the only
    recoverable model-call failure.
    """

    code = "provider"

    def __str__(self) -> str:
        return f"LLM provider responded with error: {self.message}"


class ProtocolViolation(ApprenticeError):
    """The model produced a message shape outside the conversation contract."""

    code = "protocol"

    def __str__(self) -> str:
        return f"Unexpected LLM response: {self.message}"


class InputError(ApprenticeError):
    """Terminal read failed for a reason other than EOF or interrupt."""

    code = "input"

    def __str__(self) -> str:
        return f"Reading user input: {self.message}"
