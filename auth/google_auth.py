"""
Google OAuth credentials and API client construction.

Credentials come from an authorized-user token file, refreshed when expired, or from
the installed-app OAuth flow on first run. GoogleServiceFactory builds API clients on
first use and hands back the same client afterwards; the server configures one
factory at startup and tool decorators obtain services from it.
"""

import logging
import os
import threading
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build

from auth.scopes import SCOPES

logger = logging.getLogger(__name__)


class GoogleAuthenticationError(Exception):
    """Raised when valid Google credentials cannot be obtained."""

    pass


def load_credentials(
    credentials_path: str,
    token_path: str,
    scopes: Sequence[str] = SCOPES,
) -> Credentials:
    """
    Load OAuth credentials, refreshing or re-authorizing as needed.

    Args:
        credentials_path: OAuth client secrets file (credentials.json)
        token_path: Authorized-user token file; written after refresh or authorization
        scopes: Scopes to request when authorizing

    Returns:
        Valid Credentials

    Raises:
        GoogleAuthenticationError: if no valid credentials could be obtained
    """
    creds = None

    if os.path.exists(token_path) and os.path.getsize(token_path) > 0:
        try:
            creds = Credentials.from_authorized_user_file(token_path, list(scopes))
        except (ValueError, OSError) as e:
            logger.warning(f"Could not load token file {token_path}: {e}")
            creds = None

    if creds and creds.valid:
        return creds

    try:
        if creds and creds.expired and creds.refresh_token:
            logger.info("Refreshing expired Google credentials")
            creds.refresh(Request())
        else:
            if not os.path.exists(credentials_path):
                raise GoogleAuthenticationError(
                    f"OAuth client secrets file not found: {os.path.abspath(credentials_path)}. "
                    "Set GOOGLE_OAUTH_CREDENTIALS_PATH to the downloaded credentials.json."
                )
            logger.info("No valid token found, starting OAuth authorization flow")
            flow = InstalledAppFlow.from_client_secrets_file(credentials_path, list(scopes))
            creds = flow.run_local_server(port=0)
    except GoogleAuthError as e:
        raise GoogleAuthenticationError(f"Failed to obtain Google credentials: {e}") from e

    # Save the credentials for the next run
    with open(token_path, "w") as token:
        token.write(creds.to_json())
    logger.info(f"Saved Google credentials to {token_path}")

    return creds


class GoogleServiceFactory:
    """
    Builds Google API clients on first use and reuses them afterwards.

    Args:
        credentials_loader: Zero-argument callable returning Credentials
        builder: Client constructor with googleapiclient.discovery.build's signature
    """

    def __init__(
        self,
        credentials_loader: Callable[[], Credentials],
        builder: Callable[..., Any] = build,
    ):
        self._credentials_loader = credentials_loader
        self._builder = builder
        self._credentials: Optional[Credentials] = None
        self._services: Dict[Tuple[str, str], Any] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_files(
        cls, credentials_path: str, token_path: str, scopes: Sequence[str] = SCOPES
    ) -> "GoogleServiceFactory":
        return cls(lambda: load_credentials(credentials_path, token_path, scopes))

    def get_service(self, service_name: str, version: str) -> Any:
        """Return the client for (service_name, version), creating it on first call."""
        key = (service_name, version)
        with self._lock:
            service = self._services.get(key)
            if service is None:
                if self._credentials is None:
                    self._credentials = self._credentials_loader()
                service = self._builder(
                    service_name,
                    version,
                    credentials=self._credentials,
                    cache_discovery=False,
                )
                self._services[key] = service
                logger.info(f"Initialized Google {service_name} {version} client")
            return service


_service_factory: Optional[GoogleServiceFactory] = None


def configure_service_factory(factory: Optional[GoogleServiceFactory]) -> None:
    """Install the factory tool decorators obtain services from (None clears it)."""
    global _service_factory
    _service_factory = factory


def get_service_factory() -> GoogleServiceFactory:
    if _service_factory is None:
        raise GoogleAuthenticationError(
            "Google service factory is not configured; start the server through main.py"
        )
    return _service_factory
