#!/usr/bin/env python3
"""
File transfer helpers for Clicksign uploads and downloads.

Uploads are staged: the source (local path or URL) is copied into a
uniquely named temporary file, which is then streamed as multipart
content. Downloads stream an HTTP response body straight to disk.
"""
import os
import shutil
import tempfile
import logging
from contextlib import contextmanager
from typing import BinaryIO, Iterator, Optional
from urllib.parse import urlparse, unquote

import requests

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def source_filename(source: str) -> str:
    """Return the file name the source should be uploaded under."""
    parsed_url = urlparse(source)
    if parsed_url.scheme in ("http", "https", "file"):
        name = os.path.basename(unquote(parsed_url.path))
    else:
        name = os.path.basename(source)
    return name or "document"


def fetch_source(source: str, destination: BinaryIO, timeout: Optional[float] = None) -> int:
    """
    Copy the bytes of a URL or local file path into an open binary file.

    Args:
        source: URL (http/https), file:// URL or local file path
        destination: file object opened for binary writing
        timeout: optional timeout for remote sources

    Returns:
        Number of bytes written

    Raises:
        ValueError: If a local file does not exist or the scheme is unsupported
        requests.RequestException: If fetching a remote source fails
    """
    parsed_url = urlparse(source)

    if parsed_url.scheme in ("http", "https"):
        written = 0
        with requests.get(source, stream=True, timeout=timeout) as response:
            response.raise_for_status()
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if chunk:
                    destination.write(chunk)
                    written += len(chunk)
        return written

    # A single letter scheme is a Windows drive, not a URL
    if parsed_url.scheme == "file" or len(parsed_url.scheme) <= 1:
        file_path = unquote(parsed_url.path) if parsed_url.scheme == "file" else source

        if not os.path.isfile(file_path):
            raise ValueError(f"File not found: {file_path}")

        with open(file_path, "rb") as f:
            shutil.copyfileobj(f, destination, CHUNK_SIZE)
            return f.tell()

    raise ValueError(f"Unsupported URL scheme: {parsed_url.scheme}")


def stage_source(source: str, timeout: Optional[float] = None) -> str:
    """
    Fetch an upload source into a new temporary file and return its path.

    The caller owns the returned file. If fetching fails the temporary
    file is removed before the error propagates.
    """
    suffix = os.path.splitext(source_filename(source))[1]
    with tempfile.NamedTemporaryFile(prefix="clicksign-", suffix=suffix, delete=False) as temp_file:
        temp_path = temp_file.name
        try:
            size = fetch_source(source, temp_file, timeout=timeout)
        except BaseException:
            temp_file.close()
            _remove_quietly(temp_path)
            raise

    logger.debug(f"Staged {size} bytes from {source} at {temp_path}")
    return temp_path


@contextmanager
def staged_source(source: str, timeout: Optional[float] = None) -> Iterator[str]:
    """Stage an upload source for the duration of a with block."""
    temp_path = stage_source(source, timeout=timeout)
    try:
        yield temp_path
    finally:
        _remove_quietly(temp_path)


def write_response_to_file(response: requests.Response, destination: str) -> int:
    """
    Stream a response body into a file at `destination`.

    A partially written file is removed if the transfer fails.

    Returns:
        Number of bytes written
    """
    written = 0
    try:
        with open(destination, "wb") as f:
            try:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
                        written += len(chunk)
            except BaseException:
                f.close()
                _remove_quietly(destination)
                raise
    finally:
        response.close()

    logger.debug(f"Wrote {written} bytes to {destination}")
    return written


def _remove_quietly(path: str) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Could not remove {path}: {e}")
