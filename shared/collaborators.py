"""
Collaborator Interfaces
=======================
The content pipeline talks to three external systems:

  - WebsiteRegistry : integration key -> website (owner + status)
  - ProductCatalog  : affiliate products of a user's active accounts
  - RecordStore     : one content-analysis row per (website_id, content_hash)

Each has a JSON-file implementation (local dev, tests) and an HTTP
implementation talking to the platform data API. build_collaborators()
picks one set based on settings.COLLABORATOR_BACKEND.
"""

import asyncio
import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from shared.config import GlobalConfig
from shared.errors import CollaboratorError
from shared.models import ContentAnalysisRecord, ProductCandidate, Website

logger = logging.getLogger("collaborators")


# ──────────────────────────────────────────────────────────────────
# Interfaces
# ──────────────────────────────────────────────────────────────────
class WebsiteRegistry(ABC):
    name = "website_registry"

    @abstractmethod
    async def resolve(self, integration_key: str) -> Optional[Website]:
        """Website for the key, or None when the key is unknown."""


class ProductCatalog(ABC):
    name = "product_catalog"

    @abstractmethod
    async def products_for_user(self, user_id: str, limit: int = 20) -> List[ProductCandidate]:
        """Products of the user's active affiliate accounts, catalog order."""


class RecordStore(ABC):
    name = "record_store"

    @abstractmethod
    async def get(self, website_id: str, content_hash: str) -> Optional[ContentAnalysisRecord]:
        pass

    @abstractmethod
    async def save(self, record: ContentAnalysisRecord) -> ContentAnalysisRecord:
        """Insert the row unless one exists for its key. Returns the stored row."""


@dataclass
class Collaborators:
    registry: WebsiteRegistry
    catalog: ProductCatalog
    store: RecordStore


# ──────────────────────────────────────────────────────────────────
# JSON file backend
# ──────────────────────────────────────────────────────────────────
class _JsonFile:
    """Thread-safe JSON document on disk, written atomically."""

    def __init__(self, filepath: str, default):
        self._filepath = filepath
        self._default = default
        self._lock = threading.Lock()

    def read(self):
        with self._lock:
            return self._read_unlocked()

    def update(self, fn):
        """Apply fn to the current document under the lock, persist, return fn's result."""
        with self._lock:
            data = self._read_unlocked()
            result = fn(data)
            self._write_unlocked(data)
            return result

    def _read_unlocked(self):
        if not os.path.exists(self._filepath):
            return self._default()
        with open(self._filepath, "r") as f:
            return json.load(f)

    def _write_unlocked(self, data) -> None:
        os.makedirs(os.path.dirname(self._filepath) or ".", exist_ok=True)
        # Write to temp file first, then rename (atomic on POSIX)
        tmp = self._filepath + ".tmp"
        with open(tmp, "w") as f:
            json.dump(data, f, indent=2, default=str)
        os.replace(tmp, self._filepath)


class FileWebsiteRegistry(WebsiteRegistry):
    """websites.json: a list of website objects."""

    def __init__(self, filepath: str):
        self._file = _JsonFile(filepath, list)

    async def resolve(self, integration_key: str) -> Optional[Website]:
        try:
            websites = await asyncio.to_thread(self._file.read)
        except (OSError, ValueError) as e:
            raise CollaboratorError(self.name, f"Failed to read websites: {e}") from e
        for w in websites:
            if w.get("integration_key") == integration_key:
                return Website(**w)
        return None


class FileProductCatalog(ProductCatalog):
    """
    products.json: a list of product objects, each tagged with the owning
    account's `user_id` and `account_status`.
    """

    def __init__(self, filepath: str):
        self._file = _JsonFile(filepath, list)

    async def products_for_user(self, user_id: str, limit: int = 20) -> List[ProductCandidate]:
        try:
            products = await asyncio.to_thread(self._file.read)
        except (OSError, ValueError) as e:
            raise CollaboratorError(self.name, f"Failed to read products: {e}") from e
        owned = [
            p for p in products
            if p.get("user_id") == user_id and p.get("account_status", "active") == "active"
        ]
        return [ProductCandidate(**p) for p in owned[:limit]]


class FileRecordStore(RecordStore):
    """records.json: rows keyed by "<website_id>:<content_hash>"."""

    def __init__(self, filepath: str):
        self._file = _JsonFile(filepath, dict)

    @staticmethod
    def _key(website_id: str, content_hash: str) -> str:
        return f"{website_id}:{content_hash}"

    async def get(self, website_id: str, content_hash: str) -> Optional[ContentAnalysisRecord]:
        try:
            rows = await asyncio.to_thread(self._file.read)
        except (OSError, ValueError) as e:
            raise CollaboratorError(self.name, f"Failed to read records: {e}") from e
        row = rows.get(self._key(website_id, content_hash))
        return ContentAnalysisRecord(**row) if row else None

    async def save(self, record: ContentAnalysisRecord) -> ContentAnalysisRecord:
        key = self._key(record.website_id, record.content_hash)

        def _insert(rows: Dict[str, Any]) -> Dict[str, Any]:
            return rows.setdefault(key, record.model_dump(mode="json"))

        try:
            stored = await asyncio.to_thread(self._file.update, _insert)
        except (OSError, ValueError) as e:
            raise CollaboratorError(self.name, f"Failed to persist record {key}: {e}") from e
        return ContentAnalysisRecord(**stored)


# ──────────────────────────────────────────────────────────────────
# HTTP backend
# ──────────────────────────────────────────────────────────────────
class _HttpCollaborator:
    name = "http"

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._headers = {"Content-Type": "application/json"}
        if api_key:
            self._headers["Authorization"] = f"Bearer {api_key}"
        self._timeout = httpx.Timeout(timeout, connect=min(timeout, 5.0))
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._headers,
            timeout=self._timeout,
            transport=self._transport,
        )

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            async with self._client() as client:
                return await client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise CollaboratorError(self.name, f"{method} {path} timed out", timed_out=True) from e
        except httpx.HTTPError as e:
            raise CollaboratorError(self.name, f"{method} {path} unreachable: {e}") from e

    def _raise_for_status(self, resp: httpx.Response) -> None:
        if resp.is_error:
            logger.error(f"{self.name} returned {resp.status_code}: {resp.text[:200]}")
            raise CollaboratorError(self.name, f"{self.name} returned {resp.status_code}")


class HttpWebsiteRegistry(_HttpCollaborator, WebsiteRegistry):
    name = WebsiteRegistry.name

    async def resolve(self, integration_key: str) -> Optional[Website]:
        resp = await self._request("GET", "/websites", params={"integration_key": integration_key})
        if resp.status_code == 404:
            return None
        self._raise_for_status(resp)
        return Website(**resp.json())


class HttpProductCatalog(_HttpCollaborator, ProductCatalog):
    name = ProductCatalog.name

    async def products_for_user(self, user_id: str, limit: int = 20) -> List[ProductCandidate]:
        resp = await self._request(
            "GET",
            "/products",
            params={"user_id": user_id, "account_status": "active", "limit": limit},
        )
        self._raise_for_status(resp)
        return [ProductCandidate(**p) for p in resp.json()[:limit]]


class HttpRecordStore(_HttpCollaborator, RecordStore):
    name = RecordStore.name

    async def get(self, website_id: str, content_hash: str) -> Optional[ContentAnalysisRecord]:
        resp = await self._request("GET", f"/content-analysis/{website_id}/{content_hash}")
        if resp.status_code == 404:
            return None
        self._raise_for_status(resp)
        return ContentAnalysisRecord(**resp.json())

    async def save(self, record: ContentAnalysisRecord) -> ContentAnalysisRecord:
        resp = await self._request("POST", "/content-analysis", json=record.model_dump(mode="json"))
        if resp.status_code == 409:
            # Another request stored this page first
            existing = await self.get(record.website_id, record.content_hash)
            if existing is not None:
                return existing
        self._raise_for_status(resp)
        return ContentAnalysisRecord(**resp.json())


# ──────────────────────────────────────────────────────────────────
# Factory
# ──────────────────────────────────────────────────────────────────
def build_collaborators(config: GlobalConfig) -> Collaborators:
    if config.COLLABORATOR_BACKEND == "http":
        opts = {"api_key": config.COLLABORATOR_API_KEY, "timeout": config.COLLABORATOR_TIMEOUT_SECONDS}
        return Collaborators(
            registry=HttpWebsiteRegistry(config.WEBSITE_REGISTRY_URL, **opts),
            catalog=HttpProductCatalog(config.PRODUCT_CATALOG_URL, **opts),
            store=HttpRecordStore(config.RECORD_STORE_URL, **opts),
        )

    if config.COLLABORATOR_BACKEND != "file":
        logger.warning(f"Unknown COLLABORATOR_BACKEND={config.COLLABORATOR_BACKEND!r}, using file stores")
    return Collaborators(
        registry=FileWebsiteRegistry(os.path.join(config.DATA_DIR, "websites.json")),
        catalog=FileProductCatalog(os.path.join(config.DATA_DIR, "products.json")),
        store=FileRecordStore(os.path.join(config.DATA_DIR, "records.json")),
    )
