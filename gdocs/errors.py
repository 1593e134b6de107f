"""
Google Docs Error Handling

This module provides structured, actionable error messages for Google Docs operations
together with the exception types raised by the range-resolution core.

Every exception below carries a StructuredError so the tool layer can surface it to
an agent as self-documenting JSON. UserFacingDocsError subclasses describe bad input
or remote conditions the caller can act on; TransportFailureError signals an internal
failure that is not attributable to the request.
"""
import json
from enum import Enum
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional


class ErrorCode(str, Enum):
    """Standardized error codes for Google Docs operations."""

    # Validation errors
    INVALID_DOCUMENT_ID = "INVALID_DOCUMENT_ID"
    DOCUMENT_NOT_FOUND = "DOCUMENT_NOT_FOUND"
    PERMISSION_DENIED = "PERMISSION_DENIED"

    # Index errors
    INVALID_INDEX_RANGE = "INVALID_INDEX_RANGE"
    INVALID_INDEX_TYPE = "INVALID_INDEX_TYPE"

    # Formatting errors
    INVALID_COLOR_FORMAT = "INVALID_COLOR_FORMAT"

    # Search errors
    EMPTY_SEARCH_TEXT = "EMPTY_SEARCH_TEXT"
    SEARCH_TEXT_NOT_FOUND = "SEARCH_TEXT_NOT_FOUND"
    INVALID_OCCURRENCE = "INVALID_OCCURRENCE"
    PARAGRAPH_NOT_FOUND = "PARAGRAPH_NOT_FOUND"

    # Parameter errors
    MISSING_REQUIRED_PARAM = "MISSING_REQUIRED_PARAM"
    INVALID_PARAM_VALUE = "INVALID_PARAM_VALUE"
    CONFLICTING_PARAMS = "CONFLICTING_PARAMS"

    # Operation errors
    REQUEST_REJECTED = "REQUEST_REJECTED"
    NOT_IMPLEMENTED = "NOT_IMPLEMENTED"
    API_ERROR = "API_ERROR"


@dataclass
class ErrorContext:
    """Additional context for error messages."""
    received: Optional[Dict[str, Any]] = None
    expected: Optional[Dict[str, Any]] = None
    remote_details: Optional[str] = None
    possible_causes: Optional[List[str]] = None


@dataclass
class StructuredError:
    """
    Structured error response with actionable guidance.

    Attributes:
        error: Always True for error responses
        code: Machine-readable error code from ErrorCode enum
        message: Human-readable error description
        reason: Explanation of why this error occurred
        suggestion: Actionable advice on how to fix the issue
        example: Optional example showing correct usage
        context: Additional context like received values
    """
    error: bool = True
    code: str = ""
    message: str = ""
    reason: str = ""
    suggestion: str = ""
    example: Optional[Dict[str, Any]] = None
    context: Optional[ErrorContext] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, excluding None values."""
        result = {
            "error": self.error,
            "code": self.code,
            "message": self.message,
        }

        if self.reason:
            result["reason"] = self.reason
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.example:
            result["example"] = self.example
        if self.context:
            ctx = asdict(self.context)
            ctx = {k: v for k, v in ctx.items() if v is not None}
            if ctx:
                result["context"] = ctx

        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)


class DocsErrorBuilder:
    """
    Builder for creating structured error messages.

    Usage:
        error = DocsErrorBuilder.invalid_index_range(start_index=10, end_index=5).to_json()
    """

    @staticmethod
    def invalid_index_range(start_index: int, end_index: int) -> StructuredError:
        """Error when start_index >= end_index."""
        return StructuredError(
            code=ErrorCode.INVALID_INDEX_RANGE.value,
            message=f"end_index ({end_index}) must be greater than start_index ({start_index})",
            reason="Ranges are half-open: the character at end_index is excluded, so an empty or reversed range selects nothing.",
            suggestion="Provide an end_index strictly greater than start_index.",
            context=ErrorContext(
                received={"start_index": start_index, "end_index": end_index},
                expected={"end_index": f"> {start_index}"}
            )
        )

    @staticmethod
    def invalid_index_type(param_name: str, value: Any) -> StructuredError:
        """Error when an index is not a positive integer."""
        return StructuredError(
            code=ErrorCode.INVALID_INDEX_TYPE.value,
            message=f"'{param_name}' must be an integer >= 1, got {value!r}",
            reason="Document indices are 1-based character positions.",
            suggestion="Use read_google_doc to inspect the document, then pass an index of 1 or more.",
            context=ErrorContext(received={param_name: value})
        )

    @staticmethod
    def empty_search_text() -> StructuredError:
        """Error when search text is empty."""
        return StructuredError(
            code=ErrorCode.EMPTY_SEARCH_TEXT.value,
            message="Search text cannot be empty",
            reason="An empty string was provided for the search parameter, which would match nothing.",
            suggestion="Provide a non-empty search string to locate text in the document.",
            example={
                "by_text": "apply_text_style(document_id='...', text_to_find='target text', bold=True)"
            }
        )

    @staticmethod
    def search_text_not_found(
        search_text: str,
        occurrence: int = 1,
        total_found: int = 0
    ) -> StructuredError:
        """Error when the requested occurrence of search text does not exist."""
        if total_found:
            message = (
                f"Occurrence {occurrence} of '{search_text}' not found. "
                f"Document contains {total_found} occurrence(s)."
            )
            suggestion = f"Use match_instance between 1 and {total_found}."
            code = ErrorCode.INVALID_OCCURRENCE.value
        else:
            message = f"Could not find '{search_text}' in the document"
            suggestion = "Check spelling and case; matching is exact and case-sensitive."
            code = ErrorCode.SEARCH_TEXT_NOT_FOUND.value

        return StructuredError(
            code=code,
            message=message,
            reason="The exact text was not found at the requested occurrence.",
            suggestion=suggestion,
            context=ErrorContext(
                received={"text_to_find": search_text, "match_instance": occurrence}
            )
        )

    @staticmethod
    def paragraph_not_found(index: int) -> StructuredError:
        """Error when an index does not fall inside any paragraph."""
        return StructuredError(
            code=ErrorCode.PARAGRAPH_NOT_FOUND.value,
            message=f"Index {index} is not inside an editable paragraph",
            reason="The index is beyond the document, or inside a structural element such as a section break or table of contents.",
            suggestion="Use read_google_doc to locate the paragraph text and target it with text_to_find instead.",
            context=ErrorContext(received={"index_within_paragraph": index})
        )

    @staticmethod
    def invalid_document_id(document_id: Any) -> StructuredError:
        """Error when a document ID is empty or not a string."""
        return StructuredError(
            code=ErrorCode.INVALID_DOCUMENT_ID.value,
            message=f"Invalid document_id: {document_id!r}",
            reason="A document ID must be a non-empty string.",
            suggestion="Copy the ID from the document's URL: docs.google.com/document/d/{document_id}/edit",
            context=ErrorContext(received={"document_id": document_id})
        )

    @staticmethod
    def document_not_found(document_id: str) -> StructuredError:
        """Error when a document cannot be found or accessed."""
        return StructuredError(
            code=ErrorCode.DOCUMENT_NOT_FOUND.value,
            message=f"Document not found (ID: {document_id}). Check the ID.",
            reason="The Google Docs API returned 404 for this document.",
            suggestion="Verify the document ID is correct. You can find the ID in the document's URL: docs.google.com/document/d/{document_id}/edit",
            context=ErrorContext(
                received={"document_id": document_id},
                possible_causes=[
                    "Document ID is incorrect",
                    "Document was deleted",
                    "Document ID includes extra characters (quotes, spaces)"
                ]
            )
        )

    @staticmethod
    def permission_denied(document_id: str) -> StructuredError:
        """Error when user lacks permission to edit."""
        return StructuredError(
            code=ErrorCode.PERMISSION_DENIED.value,
            message=f"Permission denied for document (ID: {document_id}). Ensure the authenticated user has edit access.",
            reason="The Google Docs API returned 403 for this document.",
            suggestion="Request edit access from the document owner or re-authenticate with the right account.",
            context=ErrorContext(received={"document_id": document_id})
        )

    @staticmethod
    def request_rejected(document_id: str, details: str) -> StructuredError:
        """Error when the API rejects the batch as structurally invalid."""
        return StructuredError(
            code=ErrorCode.REQUEST_REJECTED.value,
            message=f"Invalid request sent to Google Docs API. Details: {details}",
            reason="The document may have changed since its indices were read, or a range points outside the document.",
            suggestion="Re-read the document and retry with fresh indices.",
            context=ErrorContext(
                received={"document_id": document_id},
                remote_details=details
            )
        )

    @staticmethod
    def invalid_color_format(color_value: str, param_name: str = "color") -> StructuredError:
        """Error when a color value has an invalid format."""
        return StructuredError(
            code=ErrorCode.INVALID_COLOR_FORMAT.value,
            message=f"Invalid {param_name} hex color format: {color_value}",
            reason="Colors must be hex codes with 3 or 6 digits and an optional leading '#'.",
            suggestion="Use hex format such as #FF0000 or #F00.",
            example={"hex_color": "#FF0000", "short_hex": "#F00"},
            context=ErrorContext(
                received={param_name: color_value},
                expected={"format": "#RRGGBB or #RGB"}
            )
        )

    @staticmethod
    def missing_required_param(
        param_name: str,
        context_description: str,
        valid_values: Optional[List[str]] = None
    ) -> StructuredError:
        """Error when a required parameter is missing."""
        suggestion = f"Provide the '{param_name}' parameter"
        if valid_values:
            suggestion += f". Valid values: {', '.join(valid_values)}"

        return StructuredError(
            code=ErrorCode.MISSING_REQUIRED_PARAM.value,
            message=f"'{param_name}' is required {context_description}",
            reason=f"This operation cannot proceed without the '{param_name}' parameter.",
            suggestion=suggestion,
            context=ErrorContext(
                expected={param_name: valid_values[0] if valid_values else "(required)"}
            )
        )

    @staticmethod
    def invalid_param_value(
        param_name: str,
        received_value: Any,
        valid_values: List[str],
        context_description: str = ""
    ) -> StructuredError:
        """Error when a parameter has an invalid value."""
        return StructuredError(
            code=ErrorCode.INVALID_PARAM_VALUE.value,
            message=f"Invalid '{param_name}' value '{received_value}'{'. ' + context_description if context_description else ''}",
            reason=f"The value '{received_value}' is not a valid option for '{param_name}'.",
            suggestion=f"Use one of: {', '.join(valid_values)}",
            context=ErrorContext(
                received={param_name: received_value},
                expected={param_name: valid_values}
            )
        )

    @staticmethod
    def conflicting_params(params: List[str], message: str) -> StructuredError:
        """Error when conflicting parameters are provided."""
        return StructuredError(
            code=ErrorCode.CONFLICTING_PARAMS.value,
            message=message,
            reason=f"The parameters {', '.join(params)} cannot be used together.",
            suggestion="Choose one targeting method and provide only its parameters.",
            example={
                "range_mode": "apply_paragraph_style(document_id='...', start_index=10, end_index=40, alignment='CENTER')",
                "text_mode": "apply_paragraph_style(document_id='...', text_to_find='Summary', named_style_type='HEADING_2')",
                "index_mode": "apply_paragraph_style(document_id='...', index_within_paragraph=25, keep_with_next=True)"
            }
        )

    @staticmethod
    def not_implemented(feature: str) -> StructuredError:
        """Error for capabilities that are declared but not available."""
        return StructuredError(
            code=ErrorCode.NOT_IMPLEMENTED.value,
            message=f"{feature} is not yet implemented.",
            reason="This capability is reserved and performs no changes.",
        )

    @staticmethod
    def api_error(operation: str, error_message: str, document_id: Optional[str] = None) -> StructuredError:
        """Error from Google API call that does not map to a user-facing condition."""
        context_data = {"operation": operation}
        if document_id:
            context_data["document_id"] = document_id

        return StructuredError(
            code=ErrorCode.API_ERROR.value,
            message=f"Google API Error during {operation}: {error_message}",
            reason="The Google Docs API call failed for a reason unrelated to the request parameters.",
            context=ErrorContext(received=context_data)
        )


class DocsError(Exception):
    """Base class for errors raised by the Google Docs helpers and managers."""

    user_facing = True

    def __init__(self, structured: StructuredError):
        super().__init__(structured.message)
        self.structured = structured

    @property
    def code(self) -> str:
        return self.structured.code

    def to_json(self) -> str:
        return self.structured.to_json()


class UserFacingDocsError(DocsError):
    """An error the caller can act on by changing its input or permissions."""


class TargetNotFoundError(UserFacingDocsError):
    """Search text occurrence or enclosing paragraph does not exist."""


class InvalidRangeError(UserFacingDocsError):
    """A range whose end is not strictly after its start."""


class InvalidColorError(UserFacingDocsError):
    """A color option that is not a valid hex string."""


class InvalidParameterError(UserFacingDocsError):
    """A tool parameter failed shape or cross-field validation."""


class DocumentNotFoundError(UserFacingDocsError):
    """The API returned 404 for the document."""


class PermissionDeniedError(UserFacingDocsError):
    """The API returned 403 for the document."""


class RequestRejectedError(UserFacingDocsError):
    """The API rejected the request as structurally invalid."""


class UnimplementedError(UserFacingDocsError):
    """A reserved capability that always fails without side effects."""


class TransportFailureError(DocsError):
    """Network error or unexpected status; not caused by the caller's input."""

    user_facing = False


def format_error(error: StructuredError) -> str:
    """
    Format a StructuredError for return to the user.

    Returns a JSON string that can be parsed by both humans and AI agents.
    """
    return error.to_json()
