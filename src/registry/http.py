"""Package lookup backed by the registry HTTP API.

Reads ``GET {base_url}/expressions/{name}``; the record is expected inside a
``{"data": {...}}`` envelope carrying ``name``, ``dependencies`` and
``versions``.
"""
from __future__ import annotations

import logging
import urllib.parse
from typing import Optional

from common.http_client import get_json
from common.logging_utils import extra_context, is_debug_enabled, safe_url
from constants import Constants
from errors import IndexUnavailableError

from .index import PackageLookup
from .models import Package

logger = logging.getLogger(__name__)


class HttpPackageIndex(PackageLookup):
    """Lookup collaborator querying a remote registry API."""

    def __init__(self, base_url: Optional[str] = None, *, use_cache: bool = True):
        self.base_url = (base_url or Constants.API_BASE_URL).rstrip("/")
        self.use_cache = use_cache

    def package_url(self, name: str) -> str:
        """Return the API URL of a package record."""
        return f"{self.base_url}/expressions/{urllib.parse.quote(name, safe='')}"

    def get_package_with_versions(self, name: str) -> Optional[Package]:
        """Fetch a package record.

        Returns:
            The Package, or None when the API answers 404.

        Raises:
            IndexUnavailableError: On transport failures, unexpected status
                codes or undecodable bodies.
        """
        url = self.package_url(name)
        status_code, _, data = get_json(
            url, headers={"Accept": "application/json"}, use_cache=self.use_cache
        )
        if is_debug_enabled(logger):
            logger.debug(
                "Package lookup",
                extra=extra_context(
                    event="lookup",
                    component="http_index",
                    target=safe_url(url),
                    package=name,
                    status_code=status_code,
                ),
            )

        if status_code == 404:
            return None
        if status_code == 0:
            raise IndexUnavailableError(f"Package index unreachable at {safe_url(self.base_url)}")
        if status_code != 200:
            raise IndexUnavailableError(f"Package index returned HTTP {status_code} for {name}")
        if not isinstance(data, dict):
            raise IndexUnavailableError(f"Package index returned an undecodable body for {name}")

        record = data.get("data", data)
        if not isinstance(record, dict):
            raise IndexUnavailableError(f"Package index returned an unexpected record for {name}")
        record.setdefault("name", name)
        return Package.from_dict(record)
