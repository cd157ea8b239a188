"""
ReformConnector — document-data extraction through the Reform REST API.

Two operations: extract structured fields from an uploaded document
(multipart) or from a plain text string (JSON). Fields are described as a
list of objects; the workflow UI hands them over as JSON strings.
"""

from __future__ import annotations

import json
import logging
import pathlib
from typing import Any, Dict, List, Optional, Sequence, Tuple
from urllib.parse import urlparse

import httpx

from config.settings import config
from connectors.base import BaseConnector
from connectors.exceptions import ConfigurationError
from utils.schemas import PropDefinition

logger = logging.getLogger(__name__)


def parse_fields(fields: Sequence[Any]) -> List[Any]:
    """Decode field entries given as JSON strings; pass objects through."""
    parsed: List[Any] = []
    for entry in fields:
        if isinstance(entry, str):
            try:
                entry = json.loads(entry)
            except json.JSONDecodeError as exc:
                raise ConfigurationError(
                    f"Field definition is not valid JSON: {entry!r}", original_error=exc
                ) from exc
        parsed.append(entry)
    return parsed


def _is_url(document: str) -> bool:
    return urlparse(document).scheme in ("http", "https")


class ReformConnector(BaseConnector):
    """Connector for the Reform extraction API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(transport=transport)
        self._api_key = api_key if api_key is not None else config.reform_api_key

    @property
    def provider_name(self) -> str:
        return "reform"

    @property
    def display_name(self) -> str:
        return "Reform"

    @property
    def icon(self) -> str:
        return "📄"

    @property
    def base_url(self) -> str:
        return config.reform_api_base

    def is_configured(self) -> bool:
        return bool(self._api_key)

    def auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self._api_key}"}

    @property
    def prop_definitions(self) -> List[PropDefinition]:
        return [
            PropDefinition(
                name="document",
                label="File Path or URL",
                description=(
                    "The file to process. Provide either a file URL or a path to a "
                    "file in the `/tmp` directory (for example, `/tmp/myFile.txt`)"
                ),
            ),
            PropDefinition(
                name="fields",
                type="string[]",
                label="Fields",
                description=(
                    "List of fields that you would like to extract as an array of objects."
                ),
            ),
        ]

    # ── Document loading ────────────────────────────────────────────────

    async def _read_document(self, document: str) -> Tuple[str, bytes]:
        """Return ``(filename, content)`` for a URL or a local path."""
        if _is_url(document):
            async with self._client() as client:
                resp = await client.get(document, follow_redirects=True)
                resp.raise_for_status()
            name = pathlib.PurePosixPath(urlparse(document).path).name or "document"
            return name, resp.content

        upload_dir = pathlib.Path(config.reform_upload_dir).resolve()
        path = pathlib.Path(document).resolve()
        if not path.is_relative_to(upload_dir):
            raise ConfigurationError(
                f"Document must be a URL or a file in {config.reform_upload_dir}: {document}"
            )
        if not path.is_file():
            raise ConfigurationError(f"Document not found: {document}")
        return path.name, path.read_bytes()

    # ── Extraction ──────────────────────────────────────────────────────

    async def extract_data_from_document(
        self, document: str, fields: Sequence[Any]
    ) -> Dict[str, Any]:
        """POST /extract with the document as a multipart upload."""
        filename, content = await self._read_document(document)
        logger.info("Extracting %d fields from %s", len(fields), filename)
        return await self._make_request(
            "POST",
            "/extract",
            files={"document": (filename, content)},
            data={"fields_to_extract": json.dumps(parse_fields(fields))},
        )

    async def extract_data_from_text(
        self, text: str, fields: Sequence[Any]
    ) -> Dict[str, Any]:
        """POST /extract-text with a JSON body."""
        return await self._make_request(
            "POST",
            "/extract-text",
            json={"text": text, "fields_to_extract": parse_fields(fields)},
        )
