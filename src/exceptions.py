"""
Exception hierarchy for the alchemy engine

The scoring functions themselves never raise. These errors cover the two
places where caller-supplied data can be rejected: raw experiment payloads
and environment configuration. Every error logs itself once on creation.
"""

from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)


class AlchemyError(Exception):
    """
    Base exception for alchemy engine errors

    Args:
        message: What went wrong
        operation: Engine operation that rejected the input
        context: Extra structured data for the log record
        cause: Underlying exception, if any
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.context = context or {}
        self.cause = cause

        logger.error(
            f"{self.__class__.__name__} in {operation or 'unknown operation'}: {message}",
            extra={"error_operation": operation, "error_context": self.context},
            exc_info=cause,
        )


class ValidationError(AlchemyError):
    """
    Raised when a raw experiment payload cannot be turned into an Experiment

    Example:
        ValidationError("Field required", field="results.0.safety_score")
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
        **kwargs
    ):
        self.field = field
        self.value = value
        super().__init__(
            message=message,
            context={"field": field, "value": value, **(context or {})},
            **kwargs
        )

    def __str__(self) -> str:
        if self.field:
            return f"{self.field}: {self.message}"
        return self.message


class ConfigurationError(AlchemyError):
    """An environment setting is malformed or inconsistent"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        value: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        self.value = value
        super().__init__(
            message=message,
            operation="validate_config",
            context={"config_key": config_key, "value": value},
            **kwargs
        )
