"""
Range Resolution Manager

This module fetches a document snapshot and resolves tool targets against it:
text occurrences, the paragraph around a piece of text, and the paragraph around
an index. Every call fetches fresh; nothing is cached between tool calls.
"""
import logging
import asyncio
import ssl
from typing import Any, Dict, Optional

from googleapiclient.errors import HttpError

from core.utils import TRANSPORT_ERRORS, classify_http_error, classify_transport_error
from gdocs.docs_helpers import (
    ParagraphIndexTarget,
    RangeTarget,
    Target,
    TextTarget,
    resolve_target,
)
from gdocs.docs_structure import LocatedRange

logger = logging.getLogger(__name__)


class RangeResolutionManager:
    """
    Resolves targets to native ranges for a single Docs service.
    """

    def __init__(self, service):
        """
        Initialize the range resolution manager.

        Args:
            service: Google Docs API service instance
        """
        self.service = service

    async def get_document(
        self,
        document_id: str,
        fields: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Fetch a document snapshot.

        Args:
            document_id: ID of the document
            fields: Optional partial-response field mask

        Raises:
            PermissionDeniedError, DocumentNotFoundError, RequestRejectedError,
            TransportFailureError: as classified from the HTTP status or network failure
        """
        kwargs = {'documentId': document_id}
        if fields:
            kwargs['fields'] = fields
        try:
            return await asyncio.to_thread(
                self.service.documents().get(**kwargs).execute
            )
        except HttpError as error:
            raise classify_http_error(error, document_id, "documents.get") from error
        # Retried by handle_http_errors for read-only tools
        except ssl.SSLError:
            raise
        except TRANSPORT_ERRORS as error:
            raise classify_transport_error(error, document_id, "documents.get") from error

    async def find_text_range(
        self,
        document_id: str,
        text_to_find: str,
        match_instance: int = 1
    ) -> LocatedRange:
        """Native range of the match_instance-th occurrence of text_to_find."""
        return await self.resolve(document_id, TextTarget(text_to_find, match_instance))

    async def get_paragraph_range(self, document_id: str, index: int) -> LocatedRange:
        """Native range of the paragraph containing index."""
        return await self.resolve(document_id, ParagraphIndexTarget(index))

    async def resolve(
        self,
        document_id: str,
        target: Target,
        containing_paragraph: bool = False
    ) -> LocatedRange:
        """
        Resolve a target to a native range, fetching the document only when needed.

        Args:
            document_id: ID of the document
            target: RangeTarget, TextTarget or ParagraphIndexTarget
            containing_paragraph: Widen a text match to its enclosing paragraph

        Raises:
            InvalidRangeError: RangeTarget with end_index <= start_index
            TargetNotFoundError: text occurrence or paragraph does not exist
        """
        if isinstance(target, RangeTarget):
            return resolve_target(None, target)

        doc_data = await self.get_document(document_id)
        located = resolve_target(doc_data, target, containing_paragraph)
        logger.debug(
            f"Resolved {target!r} in document {document_id} to "
            f"{located.start_index}-{located.end_index}"
        )
        return located
