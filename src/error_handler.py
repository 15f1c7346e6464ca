"""Error handling helpers for catalog adapters and controllers."""
from typing import Any, Dict, Optional
import logging

from src.catalog.validation import CatalogValidationError
from src.integrations.contracts.interfaces import ErrorCode
from src.integrations.contracts.results import OperationResult

logger = logging.getLogger(__name__)


class ErrorHandler:
    def handle_exception(
        self,
        exc: Exception,
        message: str = "An internal error occurred while processing your request.",
        context: Optional[Dict[str, Any]] = None,
    ) -> OperationResult:
        if isinstance(exc, CatalogValidationError):
            logger.info("Validation failed: %s %s", exc.field_errors, context or {})
            return OperationResult.fail(
                ErrorCode.VALIDATION,
                exc.message,
                error=str(exc),
                payload={"field_errors": exc.field_errors},
            )

        logger.error("Unhandled exception in catalog layer: %s (context=%s)", exc, context or {}, exc_info=True)
        return OperationResult.fail(ErrorCode.STORE_FAILURE, message, error=str(exc))


error_handler = ErrorHandler()
