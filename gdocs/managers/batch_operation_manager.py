"""
Batch Operation Manager

This module sends already-built requests to the Google Docs batchUpdate endpoint
and turns API failures into the error types the tools report.

Features:
- Atomic batch execution (the API applies all requests or none)
- Empty batches short-circuit without a network call
- Oversized batches are logged but still sent as one call
- HTTP and network failures classified as rejected, permission denied, not found, or transport
"""
import logging
import asyncio
import ssl
from typing import Any, Dict, List

from googleapiclient.errors import HttpError

from core.utils import TRANSPORT_ERRORS, classify_http_error, classify_transport_error

logger = logging.getLogger(__name__)

# Soft limit; larger batches are sent unchanged with a warning.
MAX_BATCH_UPDATE_REQUESTS = 50


class BatchOperationManager:
    """
    Sends batchUpdate calls for a single document.

    No retries happen here: a failed batch raises the classified error and the
    document is left as the API left it (unchanged, since batches are atomic).
    """

    def __init__(self, service):
        """
        Initialize the batch operation manager.

        Args:
            service: Google Docs API service instance
        """
        self.service = service

    async def execute_batch_update(
        self,
        document_id: str,
        requests: List[Dict[str, Any]]
    ) -> Dict[str, Any]:
        """
        Execute a list of requests as one batchUpdate call.

        Args:
            document_id: ID of the document to update
            requests: Request bodies, applied in order

        Returns:
            The API's batchUpdate response, or {} when there was nothing to send

        Raises:
            RequestRejectedError: the API rejected the batch (HTTP 400)
            PermissionDeniedError: no edit access (HTTP 403)
            DocumentNotFoundError: no such document (HTTP 404)
            TransportFailureError: any other HTTP status, or a network failure
        """
        if not requests:
            logger.debug(f"No requests to send for document {document_id}")
            return {}

        if len(requests) > MAX_BATCH_UPDATE_REQUESTS:
            logger.warning(
                f"Sending {len(requests)} requests to document {document_id}, more than "
                f"the recommended {MAX_BATCH_UPDATE_REQUESTS} per batchUpdate"
            )

        logger.info(f"Executing batchUpdate with {len(requests)} request(s) on document {document_id}")
        try:
            return await self._execute_batch_requests(document_id, requests)
        except HttpError as error:
            raise classify_http_error(error, document_id, "batchUpdate") from error
        # Retried by handle_http_errors for read-only tools
        except ssl.SSLError:
            raise
        except TRANSPORT_ERRORS as error:
            raise classify_transport_error(error, document_id, "batchUpdate") from error

    async def _execute_batch_requests(
        self,
        document_id: str,
        requests: List[Dict[str, Any]]
    ) -> Dict[str, Any]:
        return await asyncio.to_thread(
            self.service.documents().batchUpdate(
                documentId=document_id,
                body={'requests': requests}
            ).execute
        )
