#!/usr/bin/env python3
"""
Clicksign e-signature adapter.
Builds document requests and dispatches them on a worker pool.
"""
import threading
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional
from urllib.parse import quote, urlparse

import requests

from settings import settings
from file_transfer import source_filename, staged_source, write_response_to_file

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}
UPLOAD_FIELD = "document[archive][original]"


def is_success(response: requests.Response) -> bool:
    """True for 2xx answers only."""
    return 200 <= response.status_code < 300


class ClicksignAPIError(Exception):
    """Raised when Clicksign answers with a non-2xx status."""

    def __init__(self, status_code: int, body: str, url: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        self.url = url
        super().__init__(f"Clicksign API error {status_code}: {body}")


@dataclass
class RequestDescriptor:
    """One outbound request. Built fresh for every call."""

    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    params: Dict[str, Any] = field(default_factory=dict)
    json: Optional[Dict[str, Any]] = None
    files: Optional[Dict[str, Any]] = None

    @property
    def path(self) -> str:
        """URL path without the query string, safe to log."""
        return urlparse(self.url).path


class RequestDispatcher:
    """Sends request descriptors with requests on a thread pool."""

    def __init__(
        self,
        max_workers: int = 4,
        timeout: Optional[float] = None,
        raise_for_status: bool = False,
    ):
        self.timeout = timeout
        self.raise_for_status = raise_for_status
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="clicksign"
        )
        self._local = threading.local()
        self._sessions = []
        self._sessions_lock = threading.Lock()

    def _get_session(self) -> requests.Session:
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            self._local.session = session
            with self._sessions_lock:
                self._sessions.append(session)
        return session

    def send(self, descriptor: RequestDescriptor, stream: bool = False) -> requests.Response:
        """Send a descriptor synchronously and return the raw response."""
        response = self._get_session().request(
            descriptor.method,
            descriptor.url,
            headers=descriptor.headers or None,
            params=descriptor.params or None,
            json=descriptor.json,
            files=descriptor.files,
            timeout=self.timeout,
            stream=stream,
        )
        logger.info(f"{descriptor.method} {descriptor.path} -> {response.status_code}")
        return response

    def execute(self, descriptor: RequestDescriptor) -> str:
        """
        Send a descriptor and return the response body.

        Status codes are only checked when `raise_for_status` is set.
        """
        response = self.send(descriptor)
        if self.raise_for_status and not is_success(response):
            raise ClicksignAPIError(response.status_code, response.text, descriptor.path)
        return response.text

    def dispatch(self, descriptor: RequestDescriptor) -> Future:
        """Schedule a descriptor; the future resolves with the response body."""
        return self.submit(self.execute, descriptor)

    def submit(self, fn: Callable[..., Any], *args: Any) -> Future:
        return self._executor.submit(fn, *args)

    def close(self) -> None:
        """Wait for pending work, then close every worker session."""
        self._executor.shutdown(wait=True)
        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()


class ClicksignClient:
    """
    Clicksign documents API client.

    Every operation returns a concurrent.futures.Future. Transport errors
    from requests surface unwrapped through the future.
    """

    def __init__(
        self,
        access_token: Optional[str],
        base_url: str = "https://api.clicksign.com",
        api_version: str = "v1",
        dispatcher: Optional[RequestDispatcher] = None,
    ):
        self.access_token = access_token
        self.base_url = base_url.rstrip("/")
        self.api_version = api_version.strip("/")
        self.dispatcher = dispatcher or RequestDispatcher()

    def __enter__(self) -> "ClicksignClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.dispatcher.close()

    def _url(self, *parts: str) -> str:
        segments = [quote(str(part), safe="") for part in parts]
        return "/".join([self.base_url, self.api_version, "documents", *segments])

    def _descriptor(self, method: str, *parts: str, **kwargs: Any) -> RequestDescriptor:
        kwargs.setdefault("headers", dict(JSON_HEADERS))
        return RequestDescriptor(
            method=method,
            url=self._url(*parts),
            params={"access_token": self.access_token},
            **kwargs,
        )

    def list_documents(self) -> Future:
        """Fetch all documents."""
        return self.dispatcher.dispatch(self._descriptor("GET"))

    def get_document(self, document_key: str) -> Future:
        """Fetch a single document."""
        return self.dispatcher.dispatch(self._descriptor("GET", document_key))

    def cancel_document(self, document_key: str) -> Future:
        """Cancel a document that has not been fully signed yet."""
        return self.dispatcher.dispatch(self._descriptor("POST", document_key, "cancel"))

    def resend_notification(self, document_key: str, data: Mapping[str, Any]) -> Future:
        """
        Resend the signature request email to a signer.

        Args:
            document_key: Clicksign document key
            data: mapping with 'email' and 'message' keys, sent verbatim
        """
        body = {"email": data.get("email"), "message": data.get("message")}
        return self.dispatcher.dispatch(
            self._descriptor("POST", document_key, "resend", json=body)
        )

    def upload_document(self, source: str) -> Future:
        """
        Upload a document from a local path or URL.

        The source is staged into a temporary file first. If it cannot be
        fetched the future fails and no upload request is sent.
        """
        return self.dispatcher.submit(self._upload, source)

    def _upload(self, source: str) -> str:
        with staged_source(source, timeout=self.dispatcher.timeout) as temp_path:
            with open(temp_path, "rb") as staged:
                descriptor = self._descriptor(
                    "POST",
                    headers={},
                    files={UPLOAD_FIELD: (source_filename(source), staged)},
                )
                return self.dispatcher.execute(descriptor)

    def download_document(self, document_key: str, location: str) -> Future:
        """
        Download a document's file to `location`.

        The future resolves with `location` once the file is fully written.
        Non-2xx responses fail it with ClicksignAPIError.
        """
        return self.dispatcher.submit(self._download, document_key, location)

    def _download(self, document_key: str, location: str) -> str:
        # The download endpoint is requested without the access token
        descriptor = RequestDescriptor(
            method="GET", url=self._url(document_key, "download")
        )
        response = self.dispatcher.send(descriptor, stream=True)
        if not is_success(response):
            body = response.text
            response.close()
            raise ClicksignAPIError(response.status_code, body, descriptor.path)

        write_response_to_file(response, location)
        logger.info(f"Downloaded document {document_key} to {location}")
        return location


_default_client: Optional[ClicksignClient] = None
_default_client_lock = threading.Lock()


def get_clicksign_client() -> ClicksignClient:
    """Get the process-wide client built from settings."""
    global _default_client
    with _default_client_lock:
        if _default_client is None:
            config = settings.get_clicksign_config()
            if not settings.validate_clicksign_config():
                logger.warning("CLICKSIGN_TOKEN is not set; requests will be unauthenticated")
            _default_client = ClicksignClient(
                access_token=config["access_token"],
                base_url=config["base_url"],
                api_version=config["api_version"],
                dispatcher=RequestDispatcher(
                    max_workers=config["max_workers"],
                    timeout=config["timeout"],
                    raise_for_status=config["raise_for_status"],
                ),
            )
        return _default_client


def list_documents() -> Future:
    return get_clicksign_client().list_documents()


def get_document(document_key: str) -> Future:
    return get_clicksign_client().get_document(document_key)


def upload_document(source: str) -> Future:
    return get_clicksign_client().upload_document(source)


def download_document(document_key: str, location: str) -> Future:
    return get_clicksign_client().download_document(document_key, location)


def cancel_document(document_key: str) -> Future:
    return get_clicksign_client().cancel_document(document_key)


def resend_notification(document_key: str, data: Mapping[str, Any]) -> Future:
    return get_clicksign_client().resend_notification(document_key, data)


def close_clicksign_client() -> None:
    """Close the process-wide client if one was ever built."""
    global _default_client
    with _default_client_lock:
        client, _default_client = _default_client, None
    if client is not None:
        client.close()
