"""
Error Response Factory for PokerPlan

Provides standardized error and success response creation functionality,
and the error handling decorator used by Socket.IO handlers.
"""

import logging
import traceback
from functools import wraps
from typing import Dict, Optional, Tuple

from flask_socketio import emit

from src.core.errors import ErrorCode, PlayerNotFoundError, RoomIdConflictError, ValidationError
from src.core.results import MutationResult, MutationStatus

logger = logging.getLogger(__name__)


MUTATION_STATUS_ERRORS = {
    MutationStatus.NOT_FOUND: ErrorCode.ROOM_NOT_FOUND,
    MutationStatus.PLAYER_NOT_FOUND: ErrorCode.PLAYER_NOT_FOUND,
    MutationStatus.LOCKED: ErrorCode.ROOM_LOCKED,
    MutationStatus.FULL: ErrorCode.ROOM_FULL,
    MutationStatus.NOT_A_PARTICIPANT: ErrorCode.NOT_A_PARTICIPANT,
    MutationStatus.FORBIDDEN: ErrorCode.NOT_ALLOWED_TO_VOTE,
}


class ErrorResponseFactory:
    """Factory responsible for creating standardized error and success responses."""

    def create_success_response(self, data: Dict) -> Dict:
        """
        Create standardized success response.

        Args:
            data: Response data

        Returns:
            Standardized success response
        """
        return {
            "success": True,
            "data": data
        }

    def create_error_response(self, code: ErrorCode, message: str, details: Optional[Dict] = None) -> Dict:
        """
        Create standardized error response.

        Args:
            code: Error code enum
            message: Human-readable error message
            details: Optional additional error details

        Returns:
            Standardized error response
        """
        return {
            "success": False,
            "error": {
                "code": code.value,
                "message": message,
                "details": details or {}
            }
        }

    def emit_error(self, code: ErrorCode, message: str, details: Optional[Dict] = None):
        """
        Emit standardized error response to client.

        Args:
            code: Error code enum
            message: Human-readable error message
            details: Optional additional error details
        """
        error_response = self.create_error_response(code, message, details)

        logger.warning(f"Emitting error: {code.value} - {message}")
        emit('error', error_response)

    def emit_validation_error(self, error: ValidationError):
        """
        Emit validation error response to client.

        Args:
            error: ValidationError instance
        """
        self.emit_error(error.code, error.message, error.details)

    def error_for_mutation(self, result: MutationResult) -> ValidationError:
        """Convert an unsuccessful mutation result into a ValidationError."""
        code = MUTATION_STATUS_ERRORS.get(result.status, ErrorCode.INTERNAL_ERROR)

        return ValidationError(
            code,
            result.message or f"Operation on room {result.room_id} failed: {result.status.value}",
            {"room_id": result.room_id, "status": result.status.value}
        )

    def handle_exception(self, e: Exception, context: str = "Unknown") -> Tuple[ErrorCode, str]:
        """
        Handle unexpected exceptions and return appropriate error code and message.

        Args:
            e: Exception instance
            context: Context where the exception occurred

        Returns:
            Tuple of (error_code, error_message)
        """
        if isinstance(e, ValidationError):
            return e.code, e.message

        if isinstance(e, PlayerNotFoundError):
            return ErrorCode.PLAYER_NOT_FOUND, "Create a player before creating a room"

        if isinstance(e, RoomIdConflictError):
            return ErrorCode.ROOM_ID_CONFLICT, "Could not allocate a room id, please try another name"

        # Log the full exception for debugging
        logger.error(f"Unexpected exception in {context}: {str(e)}")
        logger.error(f"Exception traceback: {traceback.format_exc()}")

        return ErrorCode.INTERNAL_ERROR, "An internal error occurred"

    def log_error_context(self, context: str, **kwargs):
        """
        Log error context for debugging.

        Args:
            context: Description of the context
            **kwargs: Additional context data
        """
        context_data = {k: v for k, v in kwargs.items() if v is not None}
        logger.error(f"Error context - {context}: {context_data}")


def with_error_handling(func):
    """
    Decorator for Socket.IO event handlers to provide consistent error handling.

    Args:
        func: Socket.IO event handler function

    Returns:
        Wrapped function with error handling
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ValidationError as e:
            factory = ErrorResponseFactory()
            factory.emit_validation_error(e)
        except Exception as e:
            factory = ErrorResponseFactory()
            error_code, error_message = factory.handle_exception(e, func.__name__)
            factory.emit_error(error_code, error_message)

    return wrapper
