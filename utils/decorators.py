"""
Handler decorators for error handling, logging, and response formatting.
"""
import functools
import uuid
import traceback
from typing import Callable, Any, Dict
from logger_config import get_logger
from utils.exceptions import AwisHTTPError, MalformedResponseError

logger = get_logger(__name__)


def _error_response(
    error_type: str,
    message: str,
    correlation_id: str,
    handler: str,
    **details: Any
) -> Dict[str, Any]:
    error = {
        "type": error_type,
        "message": message,
        "correlation_id": correlation_id,
        **details,
    }
    return {
        "error": error,
        "metadata": {
            "correlation_id": correlation_id,
            "handler": handler
        }
    }


def lambda_handler(
    func: Callable[[Any, Any], Any]
) -> Callable[[Any, Any], Dict[str, Any]]:
    """
    Decorator for Lambda handler functions.

    Provides:
    - Structured error responses instead of raised exceptions
    - Request correlation IDs for logging
    - Response formatting

    Args:
        func: The handler function to decorate

    Returns:
        Decorated handler function
    """
    @functools.wraps(func)
    def wrapper(event: Any, context: Any) -> Dict[str, Any]:
        correlation_id = str(uuid.uuid4())
        name = func.__name__

        logger.info(
            f"Handler {name} invoked",
            extra={
                "correlation_id": correlation_id,
                "handler": name,
                "request_id": getattr(context, "aws_request_id", None) if context else None
            }
        )

        try:
            result = func(event or {}, context)

            if not isinstance(result, dict):
                result = {"data": result}

            result.setdefault("metadata", {})
            result["metadata"]["correlation_id"] = correlation_id

            logger.info(
                f"Handler {name} completed successfully",
                extra={"correlation_id": correlation_id}
            )
            return result

        except ValueError as e:
            # Bad input or missing credentials; the caller can fix these
            logger.warning(
                f"Handler {name} validation error: {str(e)}",
                extra={"correlation_id": correlation_id}
            )
            return _error_response(
                "ValidationError", str(e), correlation_id, name,
                field=getattr(e, "field", None)
            )

        except AwisHTTPError as e:
            logger.error(
                f"Handler {name} got HTTP {e.status_code} from AWIS",
                extra={"correlation_id": correlation_id}
            )
            return _error_response(
                type(e).__name__, e.message, correlation_id, name,
                status_code=e.status_code
            )

        except MalformedResponseError as e:
            logger.error(
                f"Handler {name} received a malformed response: {e.message}",
                extra={"correlation_id": correlation_id}
            )
            return _error_response(
                type(e).__name__, e.message, correlation_id, name,
                path=list(e.path)
            )

        except Exception as e:
            logger.error(
                f"Handler {name} failed: {str(e)}",
                extra={
                    "correlation_id": correlation_id,
                    "traceback": traceback.format_exc()
                },
                exc_info=True
            )
            return _error_response(type(e).__name__, str(e), correlation_id, name)

    return wrapper
