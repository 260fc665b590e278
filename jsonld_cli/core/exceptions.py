"""Custom exception classes for jsonld-cli error handling.

This module defines the exception hierarchy for the invocation layer:
- InputReadError: A local file or stdin could not be read
- InputParseError: Document text is not valid JSON
- NetworkUnavailableError: A URL was given but no HTTP client is installed
- NetworkError: A remote source answered with a non-2xx status
- UnknownFormatError: Unrecognized output format name
- BooleanParseError: Unrecognized boolean flag literal
- OptionError: Invalid option value (negative indent, bad log level, ...)
- ProcessingError: The JSON-LD engine failed

All exceptions inherit from JsonLdCliError for consistent error handling.
"""

from typing import Any


class JsonLdCliError(Exception):
    """Base exception for all jsonld-cli errors.

    Provides a common base class for all custom exceptions so the command
    layer can report them uniformly.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        """Initialize the exception with a message and optional context.

        Args:
            message: Human-readable error description
            context: Optional dictionary of contextual information (source
                    descriptors, status codes, offending values, etc.)
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return a formatted error message with context."""
        if not self.context:
            return self.message

        context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"{self.message} [{context_str}]"


class InputReadError(JsonLdCliError):
    """Exception raised when a local file or stdin cannot be read.

    Context typically includes:
        - source: The source descriptor that failed
        - encoding: Encoding used for decoding
        - reason: Underlying OS or codec error
    """

    def __init__(
        self,
        message: str,
        source: str | None = None,
        encoding: str | None = None,
        reason: str | None = None,
        **extra_context: Any,
    ) -> None:
        context: dict[str, Any] = {}
        if source is not None:
            context["source"] = source
        if encoding is not None:
            context["encoding"] = encoding
        if reason is not None:
            context["reason"] = reason
        context.update(extra_context)

        super().__init__(message, context)


class InputParseError(JsonLdCliError):
    """Exception raised when document text is not a valid JSON document.

    Context typically includes:
        - source: The source descriptor whose content failed to parse
        - line_number: Line where parsing failed (if known)
        - reason: Decoder message
    """

    def __init__(
        self,
        message: str,
        source: str | None = None,
        line_number: int | None = None,
        reason: str | None = None,
        **extra_context: Any,
    ) -> None:
        context: dict[str, Any] = {}
        if source is not None:
            context["source"] = source
        if line_number is not None:
            context["line_number"] = line_number
        if reason is not None:
            context["reason"] = reason
        context.update(extra_context)

        super().__init__(message, context)


class NetworkUnavailableError(JsonLdCliError):
    """Exception raised when a URL source is given but no HTTP client is available."""

    def __init__(self, message: str, url: str | None = None, **extra_context: Any) -> None:
        context: dict[str, Any] = {}
        if url is not None:
            context["url"] = url
        context.update(extra_context)

        super().__init__(message, context)


class NetworkError(JsonLdCliError):
    """Exception raised when a remote source cannot be fetched.

    Context typically includes:
        - status_code: HTTP status of the response (absent for transport errors)
        - url: The requested URL
        - reason: Transport error message
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        url: str | None = None,
        reason: str | None = None,
        **extra_context: Any,
    ) -> None:
        context: dict[str, Any] = {}
        if status_code is not None:
            context["status_code"] = status_code
        if url is not None:
            context["url"] = url
        if reason is not None:
            context["reason"] = reason
        context.update(extra_context)

        super().__init__(message, context)
        self.status_code = status_code
        self.url = url


class UnknownFormatError(JsonLdCliError):
    """Exception raised for an output format name that is not registered."""

    def __init__(
        self,
        message: str,
        format: str | None = None,
        available: list[str] | None = None,
        **extra_context: Any,
    ) -> None:
        context: dict[str, Any] = {}
        if format is not None:
            context["format"] = format
        if available is not None:
            context["available"] = available
        context.update(extra_context)

        super().__init__(message, context)
        self.format = format


class BooleanParseError(JsonLdCliError):
    """Exception raised when a flag value is not a recognized boolean literal."""

    def __init__(
        self,
        message: str,
        value: Any = None,
        option: str | None = None,
        **extra_context: Any,
    ) -> None:
        context: dict[str, Any] = {"value": value}
        if option is not None:
            context["option"] = option
        context.update(extra_context)

        super().__init__(message, context)
        self.value = value


class OptionError(JsonLdCliError):
    """Exception raised for an option value outside its allowed range."""

    def __init__(
        self,
        message: str,
        option: str | None = None,
        value: Any = None,
        **extra_context: Any,
    ) -> None:
        context: dict[str, Any] = {}
        if option is not None:
            context["option"] = option
        if value is not None:
            context["value"] = value
        context.update(extra_context)

        super().__init__(message, context)


class ProcessingError(JsonLdCliError):
    """Exception raised when the JSON-LD engine rejects a request.

    Wraps the engine's own exception (available as ``__cause__``) and records
    which operation was running.
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        reason: str | None = None,
        **extra_context: Any,
    ) -> None:
        context: dict[str, Any] = {}
        if operation is not None:
            context["operation"] = operation
        if reason is not None:
            context["reason"] = reason
        context.update(extra_context)

        super().__init__(message, context)
