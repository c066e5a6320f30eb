#!/usr/bin/env python3
"""
Clicksign Documents MCP Server
Built with FastMCP, exposing the Clicksign document operations as tools.
"""
import os
import sys
import json
import logging
from pathlib import Path
from typing import Any, Optional

# Add the src directory to the Python path
current_dir = Path(__file__).parent
sys.path.insert(0, str(current_dir))

from fastmcp import FastMCP

from settings import settings
from esign_clicksign import ClicksignAPIError, close_clicksign_client, get_clicksign_client

# Set up logging
logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)

SERVER_NAME = "Clicksign Documents MCP Server"

# Initialize FastMCP
mcp = FastMCP(SERVER_NAME)


def _body(raw: str) -> Any:
    """Decode a JSON response body for the tool result, falling back to text."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def _failure(tool: str, e: Exception, message: str) -> dict:
    logger.error(f"❌ {tool} error: {e}")
    result = {"success": False, "error": str(e), "message": message}
    if isinstance(e, ClicksignAPIError):
        result["status_code"] = e.status_code
        result["body"] = _body(e.body)
    return result


def default_download_location(document_key: str) -> str:
    """Local path for a download, kept inside the working directory."""
    name = document_key.replace("\\", "/")
    name = os.path.basename(name).lstrip(".") or "document"
    return os.path.join(os.getcwd(), f"{name}.pdf")


@mcp.tool(description="Health check endpoint")
def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "healthy", "message": "Server is running"}


@mcp.tool(description="Get server information and configuration status")
def get_server_info() -> dict:
    """Get server information and configuration status."""
    try:
        return {
            "success": True,
            "server": {"name": SERVER_NAME, "version": "1.0.0", "status": "running"},
            "config": {
                "clicksign": {
                    "configured": settings.validate_clicksign_config(),
                    "base_url": settings.CLICKSIGN_BASE_URL,
                    "api_version": settings.CLICKSIGN_API_VERSION,
                },
                "environment": settings.ENVIRONMENT,
                "production": settings.is_production(),
            },
            "message": "Server is running and ready",
        }
    except Exception as e:
        return _failure("get_server_info", e, "Failed to get server info")


@mcp.tool(description="List all Clicksign documents")
def list_documents() -> dict:
    """List all Clicksign documents."""
    logger.info("📄 list_documents called")
    try:
        raw = get_clicksign_client().list_documents().result()
        return {"success": True, "body": _body(raw)}
    except Exception as e:
        return _failure("list_documents", e, "Failed to list documents")


@mcp.tool(description="Get a single Clicksign document by its key")
def get_document(document_key: str) -> dict:
    """Get a single Clicksign document by its key."""
    logger.info(f"📄 get_document called with document_key: {document_key}")
    try:
        raw = get_clicksign_client().get_document(document_key).result()
        return {"success": True, "document_key": document_key, "body": _body(raw)}
    except Exception as e:
        return _failure("get_document", e, "Failed to get document")


@mcp.tool(description="Upload a document to Clicksign from a URL or local file path")
def upload_document(file_url: str) -> dict:
    """Upload a document to Clicksign from a URL or a local file path."""
    logger.info(f"📤 upload_document called with file_url: {file_url}")
    try:
        raw = get_clicksign_client().upload_document(file_url).result()
        return {"success": True, "body": _body(raw), "message": "Document uploaded to Clicksign"}
    except Exception as e:
        return _failure("upload_document", e, "Failed to upload document")


@mcp.tool(description="Download a Clicksign document file to a local path")
def download_document(document_key: str, location: Optional[str] = None) -> dict:
    """Download a Clicksign document's file to a local path."""
    location = location or default_download_location(document_key)
    logger.info(f"📥 download_document called with document_key: {document_key}, location: {location}")
    try:
        path = get_clicksign_client().download_document(document_key, location).result()
        return {"success": True, "document_key": document_key, "location": path}
    except Exception as e:
        return _failure("download_document", e, "Failed to download document")


@mcp.tool(description="Cancel a Clicksign document that is not fully signed")
def cancel_document(document_key: str) -> dict:
    """Cancel a Clicksign document that has not been fully signed yet."""
    logger.info(f"🛑 cancel_document called with document_key: {document_key}")
    try:
        raw = get_clicksign_client().cancel_document(document_key).result()
        return {"success": True, "document_key": document_key, "body": _body(raw)}
    except Exception as e:
        return _failure("cancel_document", e, "Failed to cancel document")


@mcp.tool(description="Resend the signature request email to a signer")
def resend_notification(document_key: str, email: str, message: str = "") -> dict:
    """Resend the signature request email to a signer who has not signed yet."""
    logger.info(f"📧 resend_notification called with document_key: {document_key}, email: {email}")
    try:
        raw = get_clicksign_client().resend_notification(
            document_key, {"email": email, "message": message}
        ).result()
        return {"success": True, "document_key": document_key, "body": _body(raw)}
    except Exception as e:
        return _failure("resend_notification", e, "Failed to resend notification")


if __name__ == "__main__":
    logger.info(f"🚀 Starting {SERVER_NAME} with FastMCP...")
    logger.info(f"🌍 Environment: {settings.ENVIRONMENT}")
    logger.info(f"🌐 Starting FastMCP server on {settings.HOST}:{settings.PORT}")

    try:
        mcp.run(
            transport="http",
            host=settings.HOST,
            port=settings.PORT,
            stateless_http=True,
        )
    except KeyboardInterrupt:
        logger.info("🛑 Server shutdown requested by user")
    except Exception as e:
        logger.error(f"❌ Server error: {e}")
        raise
    finally:
        close_clicksign_client()
