# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Plugin location normalization and module resolution.

Location Normalization:
    ``normalize_plugin_location`` turns a configured plugin entry into a
    fully-qualified location:

        - URLs (``http://``, ``https://``, ``file://``) and absolute paths
          pass through untouched
        - bare names are joined onto the plugins base path
        - a location not ending in ``.py`` gets the conventional entry file
          appended (``<location>/plugin.py``)

Resolvers:
    - ModuleResolverFilesystem: local paths and ``file://`` URLs
    - ModuleResolverHttp: ``http(s)://`` URLs fetched with httpx
    - ModuleResolverComposite: dispatches on the URL scheme

Every resolver raises PluginLoadError(MODULE_NOT_FOUND) when nothing exists
at the location. Errors raised by the module body propagate unchanged and
are classified by the plugin registry.

Module Names:
    Each resolve executes into a fresh module named
    ``omnishell_plugin_<dir>_<hex>``. The name is present in ``sys.modules``
    only while the module body runs, so repeated load passes never grow it.

Security:
    Resolving a plugin executes its code in-process. Only configure plugin
    locations you trust.
"""

from __future__ import annotations

import asyncio
import importlib.abc
import importlib.machinery
import importlib.util
import logging
import re
import sys
from pathlib import Path
from types import ModuleType
from typing import Optional
from urllib.parse import unquote, urlparse
from urllib.request import url2pathname
from uuid import uuid4

import httpx

from omnishell.enums import EnumPluginLoadError
from omnishell.errors import ModelShellErrorContext, PluginLoadError
from omnishell.models.model_shell_config import (
    DEFAULT_ENTRY_FILENAME,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
)
from omnishell.protocols import ProtocolModuleResolver

logger = logging.getLogger(__name__)

_SCHEME_PATTERN = re.compile(r"^(?P<scheme>[A-Za-z][A-Za-z0-9+.-]*)://")
_MODULE_NAME_UNSAFE = re.compile(r"[^0-9A-Za-z_]")

MODULE_NAME_PREFIX = "omnishell_plugin_"


def location_scheme(location: str) -> str:
    """Return the lower-cased URL scheme of ``location``, or "" for paths."""
    match = _SCHEME_PATTERN.match(location)
    return match.group("scheme").lower() if match else ""


def normalize_plugin_location(
    entry: str,
    base_path: str,
    entry_filename: str = DEFAULT_ENTRY_FILENAME,
) -> str:
    """Turn a configured plugin entry into a fully-qualified location.

    Example:
        >>> normalize_plugin_location("chat", "/srv/plugins")
        '/srv/plugins/chat/plugin.py'
        >>> normalize_plugin_location("https://cdn.example/clock", "/srv/plugins")
        'https://cdn.example/clock/plugin.py'
        >>> normalize_plugin_location("https://cdn.example/clock/main.py", "plugins")
        'https://cdn.example/clock/main.py'
    """
    entry = entry.strip()
    if location_scheme(entry) or Path(entry).is_absolute():
        location = entry
    else:
        location = f"{base_path.rstrip('/')}/{entry.strip('/')}"

    if not location.endswith(".py"):
        location = f"{location.rstrip('/')}/{entry_filename}"
    return location


def _module_name_for(location: str) -> str:
    stem = _MODULE_NAME_UNSAFE.sub("_", Path(urlparse(location).path).parent.name)
    return f"{MODULE_NAME_PREFIX}{stem or 'anon'}_{uuid4().hex[:8]}"


def _exec_spec(spec: importlib.machinery.ModuleSpec, location: str) -> ModuleType:
    """Create and execute the module for ``spec``.

    The module is in ``sys.modules`` only while ``exec_module`` runs and is
    removed afterwards whether or not the body raised.
    """
    assert spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    if getattr(module, "__file__", None) is None:
        module.__file__ = location
    sys.modules[spec.name] = module
    try:
        spec.loader.exec_module(module)
    finally:
        sys.modules.pop(spec.name, None)
    return module


class _SourceTextLoader(importlib.abc.SourceLoader):
    """Serves already-fetched source text to the import machinery."""

    def __init__(self, location: str, source: bytes) -> None:
        self._location = location
        self._source = source

    def get_filename(self, fullname: str) -> str:
        return self._location

    def get_data(self, path: str) -> bytes:
        return self._source


def _not_found(location: str, operation: str, reason: str) -> PluginLoadError:
    return PluginLoadError(
        "Plugin does not exist at location",
        location=location,
        loader_error=EnumPluginLoadError.MODULE_NOT_FOUND,
        context=ModelShellErrorContext(operation=operation, target_name=location),
        reason=reason,
    )


class ModuleResolverFilesystem:
    """Loads plugin modules from local files."""

    async def resolve(self, location: str) -> ModuleType:
        """Execute the Python file at ``location`` as a fresh module.

        Raises:
            PluginLoadError: MODULE_NOT_FOUND if the file does not exist.
        """
        path = self._to_path(location)
        if not path.is_file():
            raise _not_found(location, "resolve_filesystem", "file not found")

        module_name = _module_name_for(location)
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise _not_found(location, "resolve_filesystem", "not a loadable module")

        module = _exec_spec(spec, location)

        logger.debug(
            "Resolved plugin module from filesystem",
            extra={"location": location, "module_name": module_name},
        )
        return module

    @staticmethod
    def _to_path(location: str) -> Path:
        if location_scheme(location) == "file":
            parsed = urlparse(location)
            return Path(url2pathname(unquote(parsed.path)))
        return Path(location)


class ModuleResolverHttp:
    """Fetches plugin modules over HTTP(S) with httpx.

    The client is created lazily and closed by ``aclose`` unless it was
    injected.

    Example:
        ```python
        async with ModuleResolverHttp(timeout_seconds=5.0) as resolver:
            module = await resolver.resolve("https://cdn.example/chat/plugin.py")
        ```
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
    ) -> None:
        self._http_client = client
        self._owns_http_client = client is None
        self._timeout_seconds = timeout_seconds
        self._http_client_lock = asyncio.Lock()

    async def __aenter__(self) -> ModuleResolverHttp:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _get_http_client(self) -> httpx.AsyncClient:
        if self._http_client is not None:
            return self._http_client

        async with self._http_client_lock:
            if self._http_client is not None:
                return self._http_client
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout_seconds),
                follow_redirects=True,
            )
            return self._http_client

    async def aclose(self) -> None:
        """Close the HTTP client if this resolver owns it."""
        async with self._http_client_lock:
            if self._owns_http_client and self._http_client is not None:
                await self._http_client.aclose()
                self._http_client = None

    async def resolve(self, location: str) -> ModuleType:
        """Fetch ``location`` and execute it as a fresh module.

        Raises:
            PluginLoadError: MODULE_NOT_FOUND on a transport failure or a
                non-success status.
        """
        client = await self._get_http_client()
        try:
            response = await client.get(location)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise _not_found(
                location,
                "resolve_http",
                f"HTTP {e.response.status_code}",
            ) from e
        except httpx.HTTPError as e:
            raise _not_found(location, "resolve_http", type(e).__name__) from e

        module_name = _module_name_for(location)
        spec = importlib.util.spec_from_loader(
            module_name,
            _SourceTextLoader(location, response.content),
            origin=location,
        )
        if spec is None:
            raise _not_found(location, "resolve_http", "not a loadable module")
        module = _exec_spec(spec, location)

        logger.debug(
            "Resolved plugin module over HTTP",
            extra={"location": location, "module_name": module_name},
        )
        return module


class ModuleResolverComposite:
    """Routes each location to a resolver by URL scheme.

    Paths without a scheme use the ``""`` entry. Unknown schemes fail with
    MODULE_NOT_FOUND.
    """

    def __init__(self, resolvers: dict[str, ProtocolModuleResolver]) -> None:
        self._resolvers = {scheme.lower(): r for scheme, r in resolvers.items()}

    @classmethod
    def default(
        cls, timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    ) -> ModuleResolverComposite:
        """Filesystem for paths and ``file://``, httpx for ``http(s)://``."""
        filesystem = ModuleResolverFilesystem()
        http = ModuleResolverHttp(timeout_seconds=timeout_seconds)
        return cls({"": filesystem, "file": filesystem, "http": http, "https": http})

    async def resolve(self, location: str) -> ModuleType:
        scheme = location_scheme(location)
        resolver = self._resolvers.get(scheme)
        if resolver is None:
            raise _not_found(location, "resolve", f"unsupported scheme '{scheme}'")
        return await resolver.resolve(location)

    async def aclose(self) -> None:
        """Close every resolver that holds resources."""
        seen: set[int] = set()
        for resolver in self._resolvers.values():
            if id(resolver) in seen:
                continue
            seen.add(id(resolver))
            close = getattr(resolver, "aclose", None)
            if close is not None:
                await close()


__all__: list[str] = [
    "MODULE_NAME_PREFIX",
    "ModuleResolverComposite",
    "ModuleResolverFilesystem",
    "ModuleResolverHttp",
    "location_scheme",
    "normalize_plugin_location",
]
