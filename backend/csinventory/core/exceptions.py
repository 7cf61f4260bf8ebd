"""
Inventory error taxonomy and safe HTTP translation.

Domain code raises InventoryError subclasses. Nothing is mutated before one
of these is raised, so every failure is recoverable: the caller can fix the
input and try again.

The HTTP layer turns them into HTTPExceptions through BusinessError, which
logs the real reason internally and returns a message safe to show staff.
"""
from typing import Optional

from fastapi import HTTPException, status
import logging

logger = logging.getLogger(__name__)


class InventoryError(Exception):
    """Base class for all inventory failures."""

    code = "INVENTORY_ERROR"

    def __init__(self, message: str, detail: Optional[dict] = None):
        self.message = message
        self.detail = detail
        super().__init__(message)


class ValidationFailure(InventoryError):
    """Rejected input. Reported synchronously, no mutation happened."""

    code = "VALIDATION_ERROR"


class InvalidQuantityError(ValidationFailure):
    code = "INVALID_QUANTITY"


class InsufficientStockError(ValidationFailure):
    """Distribution larger than the stock on hand."""

    code = "INSUFFICIENT_STOCK"

    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        super().__init__(
            f"Cannot distribute more than the available stock of {available}.",
            detail={"requested": requested, "available": available},
        )


class UnknownDrugError(InventoryError):
    """Drug id not in the live catalog. A caller bug, state is untouched."""

    code = "UNKNOWN_DRUG"

    def __init__(self, drug_id):
        self.drug_id = drug_id
        super().__init__(f"Drug {drug_id} is not in the catalog", detail={"drug_id": drug_id})


class ClassificationError(InventoryError):
    """Classification gateway unreachable or returned an unusable response."""

    code = "CLASSIFICATION_FAILED"


class UnrecognizedScheduleError(ClassificationError):
    """Gateway answered, but not with a schedule between II and V."""

    code = "UNRECOGNIZED_SCHEDULE"

    def __init__(self, token):
        self.token = token
        super().__init__(
            f'Could not automatically classify the drug schedule. The classifier responded: "{token}".',
            detail={"schedule": token},
        )


class BusinessError:
    """HTTP exceptions with safe (non-leaky) messages."""

    @staticmethod
    def not_found(resource: str = "Resource", reason: str = "") -> HTTPException:
        """
        Generic 404.

        Example:
            raise BusinessError.not_found("Drug", reason=str(exc))
        """
        if reason:
            logger.warning(f"Not found: {resource} - {reason}")

        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{resource} not found",
        )

    @staticmethod
    def forbidden(reason: str = "") -> HTTPException:
        logger.warning(f"Forbidden access: {reason}")
        return HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied",
        )

    @staticmethod
    def bad_request(detail: str) -> HTTPException:
        """
        400 for input validation / ledger rule violations.

        OK to include specific details here since the user caused the issue.
        Examples: "Please enter a valid positive quantity."
        """
        logger.info(f"Bad request: {detail}")
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
        )

    @staticmethod
    def unprocessable(detail: str) -> HTTPException:
        """422 when the classifier refused to place a drug on a schedule."""
        logger.info(f"Unprocessable: {detail}")
        return HTTPException(
            status_code=422,
            detail=detail,
        )

    @staticmethod
    def bad_gateway(original_error: Exception = None) -> HTTPException:
        """
        502 when the classification service failed.

        The upstream error is logged, never returned.
        """
        if original_error:
            logger.error(f"Classification gateway error: {type(original_error).__name__}: {original_error}")
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="An error occurred while trying to classify and format the drug. Please try again.",
        )


def to_http_exception(exc: InventoryError) -> HTTPException:
    """Pick the BusinessError response for a domain failure."""
    if isinstance(exc, UnknownDrugError):
        return BusinessError.not_found("Drug", reason=exc.message)
    if isinstance(exc, UnrecognizedScheduleError):
        return BusinessError.unprocessable(exc.message)
    if isinstance(exc, ClassificationError):
        return BusinessError.bad_gateway(exc)
    if isinstance(exc, ValidationFailure):
        return BusinessError.bad_request(exc.message)
    logger.error(f"Unhandled inventory error: {exc!r}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="An internal error occurred. Please try again later.",
    )
