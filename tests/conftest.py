import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

import esign_clicksign
from esign_clicksign import ClicksignClient
from esign_clicksign import RequestDispatcher

BASE_URL = "https://api.clicksign.test"
DOCUMENTS_URL = f"{BASE_URL}/v1/documents"
ACCESS_TOKEN = "test-token"


@pytest.fixture
def client():
    with ClicksignClient(access_token=ACCESS_TOKEN, base_url=BASE_URL) as client:
        yield client


@pytest.fixture
def strict_client():
    dispatcher = RequestDispatcher(raise_for_status=True)
    with ClicksignClient(
        access_token=ACCESS_TOKEN,
        base_url=BASE_URL,
        dispatcher=dispatcher,
    ) as client:
        yield client


@pytest.fixture
def sample_pdf(tmp_path):
    """A small one page PDF on disk."""
    path = tmp_path / "contract.pdf"
    c = canvas.Canvas(str(path), pagesize=letter)
    c.drawString(100, 750, "Test Document for Clicksign")
    c.drawString(100, 700, "Please sign this document.")
    c.save()
    return path


@pytest.fixture
def staging_dir(tmp_path, monkeypatch):
    """Redirect temporary files so staged uploads can be inspected."""
    directory = tmp_path / "staging"
    directory.mkdir()
    monkeypatch.setattr("tempfile.tempdir", str(directory))
    return directory


@pytest.fixture
def default_client(monkeypatch):
    """Reset the process-wide client so it is rebuilt from settings."""
    monkeypatch.setattr(esign_clicksign, "_default_client", None)
    yield
    client = esign_clicksign._default_client
    if client is not None:
        client.close()
