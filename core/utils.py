import logging
import ssl
import asyncio
import functools

from typing import Optional

import httplib2
from googleapiclient.errors import HttpError
from auth.google_auth import GoogleAuthenticationError
from gdocs.errors import (
    DocsError,
    DocsErrorBuilder,
    DocumentNotFoundError,
    PermissionDeniedError,
    RequestRejectedError,
    TransportFailureError,
)

logger = logging.getLogger(__name__)

# Failures where no HTTP response arrived (timeouts, refused connections)
TRANSPORT_ERRORS = (OSError, httplib2.HttpLib2Error)


class TransientNetworkError(Exception):
    """Custom exception for transient network errors after retries."""

    pass


def _http_error_details(error: HttpError) -> str:
    """
    Pull the remote explanation out of an HttpError.

    ``error_details`` is a list of detail objects when the API sends them and a plain
    string otherwise; fall back to the top-level reason when neither is useful.
    """
    details = getattr(error, "error_details", None)
    if isinstance(details, list):
        descriptions = [
            item.get("description") or item.get("message")
            for item in details
            if isinstance(item, dict)
        ]
        descriptions = [d for d in descriptions if d]
        if descriptions:
            return "; ".join(descriptions)
    elif isinstance(details, str) and details:
        return details

    reason = getattr(error, "reason", None)
    return reason or str(error)


def classify_http_error(
    error: HttpError, document_id: str, operation: str
) -> DocsError:
    """
    Map a Google Docs API HttpError to the matching DocsError.

    Args:
        error: The HttpError raised by the client
        document_id: Document the call targeted, for the error message
        operation: API operation name, for logging and internal errors

    Returns:
        RequestRejectedError (400), PermissionDeniedError (403),
        DocumentNotFoundError (404), or TransportFailureError for any other status
    """
    status = getattr(error.resp, "status", None)
    try:
        status = int(status)
    except (TypeError, ValueError):
        pass

    if status == 400:
        details = _http_error_details(error)
        logger.warning(f"{operation} rejected for document {document_id}: {details}")
        return RequestRejectedError(DocsErrorBuilder.request_rejected(document_id, details))
    if status == 403:
        return PermissionDeniedError(DocsErrorBuilder.permission_denied(document_id))
    if status == 404:
        return DocumentNotFoundError(DocsErrorBuilder.document_not_found(document_id))

    logger.error(f"Unexpected status {status} from {operation} on document {document_id}: {error}")
    return TransportFailureError(
        DocsErrorBuilder.api_error(operation, str(error), document_id)
    )


def classify_transport_error(
    error: Exception, document_id: str, operation: str
) -> TransportFailureError:
    """Wrap a network-level failure from an API call as a TransportFailureError."""
    logger.error(f"Network error during {operation} on document {document_id}: {error!r}")
    return TransportFailureError(
        DocsErrorBuilder.api_error(operation, str(error) or type(error).__name__, document_id)
    )


def handle_http_errors(
    tool_name: str, is_read_only: bool = False, service_type: Optional[str] = None
):
    """
    A decorator to handle Google API errors and transient SSL errors in a standardized way.

    Errors the caller can act on (bad targets, bad ranges, missing documents, denied
    access, rejected requests) are returned as structured JSON, the same shape the
    tools use for validation failures. Anything else is logged and raised as a
    generic Exception.

    If is_read_only is True, it will also catch ssl.SSLError and retry with
    exponential backoff. After exhausting retries, it raises a TransientNetworkError.

    Args:
        tool_name (str): The name of the tool being decorated (e.g., 'apply_text_style').
        is_read_only (bool): If True, the operation is considered safe to retry on
                             transient network errors. Defaults to False.
        service_type (str): Optional. The Google service type (e.g., 'docs').
    """

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            max_retries = 3
            base_delay = 1

            for attempt in range(max_retries):
                try:
                    return await func(*args, **kwargs)
                except ssl.SSLError as e:
                    if is_read_only and attempt < max_retries - 1:
                        delay = base_delay * (2**attempt)
                        logger.warning(
                            f"SSL error in {tool_name} on attempt {attempt + 1}: {e}. Retrying in {delay} seconds..."
                        )
                        await asyncio.sleep(delay)
                    else:
                        logger.error(
                            f"SSL error in {tool_name} on final attempt: {e}. Raising exception."
                        )
                        raise TransientNetworkError(
                            f"A transient SSL error occurred in '{tool_name}' after {max_retries} attempts. "
                            "This is likely a temporary network or certificate issue. Please try again shortly."
                        ) from e
                except HttpError as error:
                    document_id = kwargs.get("document_id", "unknown")
                    classified = classify_http_error(error, document_id, tool_name)
                    if classified.user_facing:
                        logger.error(f"API error in {tool_name}: {error}", exc_info=True)
                        return classified.to_json()
                    message = f"API error in {tool_name}: {error}"
                    logger.error(message, exc_info=True)
                    raise Exception(message) from error
                except DocsError as error:
                    if error.user_facing:
                        logger.info(f"[{tool_name}] {error.code}: {error}")
                        return error.to_json()
                    message = f"API error in {tool_name}: {error}"
                    logger.error(message, exc_info=True)
                    raise Exception(message) from error
                except TransientNetworkError:
                    # Re-raise without wrapping to preserve the specific error type
                    raise
                except GoogleAuthenticationError:
                    # Re-raise authentication errors without wrapping
                    raise
                except Exception as e:
                    message = f"An unexpected error occurred in {tool_name}: {e}"
                    logger.exception(message)
                    raise Exception(message) from e

        return wrapper

    return decorator
