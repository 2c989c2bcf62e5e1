"""Custom exceptions for docsan with context support."""

import uuid
from typing import Any


def generate_correlation_id() -> str:
    """
    Generate an 8-character UUID-based correlation ID.

    Returns:
        8-character correlation ID string.
    """
    return str(uuid.uuid4())[:8]


class DocsanError(Exception):
    """Base exception for docsan with context and correlation ID support."""

    def __init__(
        self,
        message: str,
        correlation_id: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialise exception with message, correlation ID, and context.

        Args:
            message: Error message.
            correlation_id: Optional correlation ID. If None, generates a new one.
            context: Optional context dictionary for debugging.
        """
        self.message = message
        self.correlation_id = correlation_id or generate_correlation_id()
        self.context = context or {}
        super().__init__(f"{message} [correlation_id={self.correlation_id}]")


class DocumentParseError(DocsanError):
    """Raised when the input markup cannot be parsed into a tree.

    This is the only fatal condition of the assembly pipeline: it is raised
    before any tree rewriting happens and no partial output exists.
    """

    def __init__(
        self,
        message: str,
        parser: str | None = None,
        correlation_id: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialise parse error with parser context.

        Args:
            message: Error message.
            parser: Optional name of the tree builder that rejected the input.
            correlation_id: Optional correlation ID. If None, generates a new one.
            context: Optional context dictionary for debugging.
        """
        if context is None:
            context = {}
        if parser is not None:
            context["parser"] = parser
        super().__init__(message, correlation_id=correlation_id, context=context)


class ConfigurationError(DocsanError):
    """Raised when configuration loading or validation fails."""

    def __init__(
        self,
        message: str,
        config_path: str | None = None,
        correlation_id: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialise configuration error with path context.

        Args:
            message: Error message.
            config_path: Optional path to the configuration file.
            correlation_id: Optional correlation ID. If None, generates a new one.
            context: Optional context dictionary for debugging.
        """
        if context is None:
            context = {}
        if config_path is not None:
            context["config_path"] = str(config_path)
        super().__init__(message, correlation_id=correlation_id, context=context)


class PayloadError(DocsanError):
    """Raised when an embedded JSON payload is not valid JSON.

    The assembler recovers from this per slot; it never aborts a request.
    """

    def __init__(
        self,
        message: str,
        slot: str | None = None,
        correlation_id: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialise payload error with slot context.

        Args:
            message: Error message.
            slot: Optional slot id whose payload failed to decode (e.g., "outline").
            correlation_id: Optional correlation ID. If None, generates a new one.
            context: Optional context dictionary for debugging.
        """
        if context is None:
            context = {}
        if slot is not None:
            context["slot"] = slot
        super().__init__(message, correlation_id=correlation_id, context=context)
