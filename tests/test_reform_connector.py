"""
Tests for the Reform connector and its actions.
"""

import json

import httpx
import pytest

from config.settings import config
from connectors.exceptions import ConfigurationError
from connectors.reform import ReformConnector, parse_fields
from tools.reform_tools import extract_data_from_document, extract_data_from_text

FIELDS = ['{"name": "total", "type": "number"}', {"name": "vendor", "type": "string"}]


class ReformStub:
    def __init__(self):
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == "files.example.com":
            return httpx.Response(200, content=b"%PDF-1.4 remote")
        return httpx.Response(200, json={"total": 12.5, "vendor": "Acme"})


def _connector(stub):
    return ReformConnector("key-abc", transport=httpx.MockTransport(stub))


class TestParseFields:
    def test_decodes_strings_and_keeps_objects(self):
        assert parse_fields(FIELDS) == [
            {"name": "total", "type": "number"},
            {"name": "vendor", "type": "string"},
        ]

    def test_invalid_json(self):
        with pytest.raises(ConfigurationError, match="not valid JSON"):
            parse_fields(["{name: total"])


class TestExtractText:
    @pytest.mark.asyncio
    async def test_posts_json_with_bearer_key(self):
        stub = ReformStub()
        result = await extract_data_from_text(_connector(stub), "Invoice total 12.50", FIELDS)

        req = stub.requests[0]
        assert str(req.url) == "https://api.reformhq.com/v1/api/extract-text"
        assert req.headers["Authorization"] == "Bearer key-abc"
        assert json.loads(req.content) == {
            "text": "Invoice total 12.50",
            "fields_to_extract": parse_fields(FIELDS),
        }
        assert result == {"total": 12.5, "vendor": "Acme"}


class TestExtractDocument:
    @pytest.mark.asyncio
    async def test_local_file_uploaded_as_multipart(self, tmp_path, monkeypatch):
        monkeypatch.setattr(config, "reform_upload_dir", str(tmp_path))
        doc = tmp_path / "invoice.pdf"
        doc.write_bytes(b"%PDF-1.4 local")
        stub = ReformStub()

        await extract_data_from_document(_connector(stub), str(doc), FIELDS)

        req = stub.requests[0]
        assert str(req.url) == "https://api.reformhq.com/v1/api/extract"
        assert req.headers["Content-Type"].startswith("multipart/form-data")
        assert req.headers["Authorization"] == "Bearer key-abc"
        body = req.read()
        assert b'filename="invoice.pdf"' in body
        assert b"%PDF-1.4 local" in body
        assert b"fields_to_extract" in body

    @pytest.mark.asyncio
    async def test_url_downloaded_first(self):
        stub = ReformStub()
        await extract_data_from_document(
            _connector(stub), "https://files.example.com/docs/receipt.pdf", FIELDS
        )

        assert [r.url.host for r in stub.requests] == ["files.example.com", "api.reformhq.com"]
        assert "Authorization" not in stub.requests[0].headers
        upload = stub.requests[1].read()
        assert b'filename="receipt.pdf"' in upload
        assert b"%PDF-1.4 remote" in upload

    @pytest.mark.asyncio
    async def test_missing_file(self):
        with pytest.raises(ConfigurationError, match="Document not found"):
            await _connector(ReformStub()).extract_data_from_document("/tmp/does-not-exist.pdf", FIELDS)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("document", ["/etc/passwd", "/tmp/../etc/passwd"])
    async def test_files_outside_upload_dir_rejected(self, document, monkeypatch):
        monkeypatch.setattr(config, "reform_upload_dir", "/tmp")
        stub = ReformStub()
        with pytest.raises(ConfigurationError, match="must be a URL or a file in /tmp"):
            await _connector(stub).extract_data_from_document(document, FIELDS)
        assert stub.requests == []

    @pytest.mark.asyncio
    async def test_server_error_propagates(self):
        def failing(request):
            return httpx.Response(500, json={"error": "boom"})

        connector = ReformConnector("key", transport=httpx.MockTransport(failing))
        with pytest.raises(httpx.HTTPStatusError):
            await connector.extract_data_from_text("x", [])


class TestReformProps:
    def test_prop_definitions(self):
        names = [p.name for p in ReformConnector("k").prop_definitions]
        assert names == ["document", "fields"]

    @pytest.mark.asyncio
    async def test_props_have_no_options(self):
        with pytest.raises(ConfigurationError, match="no options"):
            await ReformConnector("k").load_options("document")
