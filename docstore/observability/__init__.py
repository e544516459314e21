"""
Docstore Observability Module
=============================

Structured logging with request-scoped context.
"""

from .logging_config import (
    ContextFormatter,
    OperationContext,
    OperationLogger,
    StructuredFormatter,
    generate_correlation_id,
    generate_operation_id,
    get_correlation_id,
    get_logger,
    get_operation_id,
    get_profile_id,
    set_correlation_id,
    set_operation_id,
    set_profile_id,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "OperationContext",
    "OperationLogger",
    "get_correlation_id",
    "set_correlation_id",
    "get_operation_id",
    "set_operation_id",
    "get_profile_id",
    "set_profile_id",
    "generate_correlation_id",
    "generate_operation_id",
    "StructuredFormatter",
    "ContextFormatter",
]
