# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for plugin location normalization and module resolvers.

HTTP resolution runs against ``httpx.MockTransport`` so no network access
is needed.
"""

from __future__ import annotations

import sys
from pathlib import Path

import httpx
import pytest

from omnishell.enums import EnumPluginLoadError
from omnishell.errors import PluginLoadError
from omnishell.runtime import (
    ModuleResolverComposite,
    ModuleResolverFilesystem,
    ModuleResolverHttp,
    normalize_plugin_location,
)
from omnishell.runtime.module_resolver import MODULE_NAME_PREFIX, location_scheme
from omnishell.testing import ModuleResolverInMemory

pytestmark = pytest.mark.unit

PLUGIN_SOURCE = """
from omnishell.plugins import PluginBase


class Plugin(PluginBase):
    name = "fixture"
    version = "2.0.0"
"""


def write_plugin(root: Path, name: str, body: str = PLUGIN_SOURCE) -> Path:
    directory = root / name
    directory.mkdir(parents=True)
    path = directory / "plugin.py"
    path.write_text(body, encoding="utf-8")
    return path


class TestNormalizePluginLocation:
    """Test entry -> location normalization."""

    @pytest.mark.parametrize(
        ("entry", "base", "expected"),
        [
            ("chat", "plugins", "plugins/chat/plugin.py"),
            ("chat", "/srv/plugins/", "/srv/plugins/chat/plugin.py"),
            ("chat/", "plugins", "plugins/chat/plugin.py"),
            ("chat/main.py", "plugins", "plugins/chat/main.py"),
            ("https://cdn.example/clock", "plugins", "https://cdn.example/clock/plugin.py"),
            ("https://cdn.example/clock/x.py", "plugins", "https://cdn.example/clock/x.py"),
            ("/opt/tools", "plugins", "/opt/tools/plugin.py"),
            ("file:///opt/tools/plugin.py", "plugins", "file:///opt/tools/plugin.py"),
            ("chat", "https://cdn.example/plugins", "https://cdn.example/plugins/chat/plugin.py"),
        ],
    )
    def test_normalization(self, entry: str, base: str, expected: str) -> None:
        assert normalize_plugin_location(entry, base) == expected

    def test_custom_entry_filename(self) -> None:
        assert normalize_plugin_location("chat", "plugins", "main.py") == "plugins/chat/main.py"

    def test_location_scheme(self) -> None:
        assert location_scheme("HTTPS://cdn.example/a.py") == "https"
        assert location_scheme("plugins/chat/plugin.py") == ""


class TestModuleResolverFilesystem:
    """Test loading plugin modules from local files."""

    @pytest.mark.asyncio
    async def test_resolves_path(self, tmp_path: Path) -> None:
        path = write_plugin(tmp_path, "fixture")

        module = await ModuleResolverFilesystem().resolve(str(path))

        assert module.Plugin.name == "fixture"
        assert module.__name__.startswith(MODULE_NAME_PREFIX)
        assert module.__name__ not in sys.modules

    @pytest.mark.asyncio
    async def test_module_sees_itself_while_body_runs(self, tmp_path: Path) -> None:
        body = (
            "import sys\n"
            "from dataclasses import dataclass\n\n\n"
            "@dataclass\n"
            "class Options:\n"
            "    level: int = 1\n\n\n"
            "REGISTERED = sys.modules[__name__] is not None\n"
        )
        path = write_plugin(tmp_path, "dataclassy", body)

        module = await ModuleResolverFilesystem().resolve(str(path))

        assert module.REGISTERED is True
        assert module.Options().level == 1

    @pytest.mark.asyncio
    async def test_resolves_file_url(self, tmp_path: Path) -> None:
        path = write_plugin(tmp_path, "fixture")

        module = await ModuleResolverFilesystem().resolve(path.as_uri())

        assert module.Plugin.version == "2.0.0"

    @pytest.mark.asyncio
    async def test_each_resolve_is_a_fresh_module(self, tmp_path: Path) -> None:
        path = write_plugin(tmp_path, "fixture")
        resolver = ModuleResolverFilesystem()

        first = await resolver.resolve(str(path))
        second = await resolver.resolve(str(path))

        assert first is not second
        assert first.Plugin is not second.Plugin

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path: Path) -> None:
        location = str(tmp_path / "nope" / "plugin.py")

        with pytest.raises(PluginLoadError) as exc_info:
            await ModuleResolverFilesystem().resolve(location)

        assert exc_info.value.loader_error is EnumPluginLoadError.MODULE_NOT_FOUND
        assert exc_info.value.location == location

    @pytest.mark.asyncio
    async def test_failing_body_propagates_and_is_unregistered(
        self, tmp_path: Path
    ) -> None:
        path = write_plugin(tmp_path, "broken", "raise ValueError('body failed')\n")
        before = set(sys.modules)

        with pytest.raises(ValueError, match="body failed"):
            await ModuleResolverFilesystem().resolve(str(path))

        leaked = {
            name for name in set(sys.modules) - before if name.startswith(MODULE_NAME_PREFIX)
        }
        assert leaked == set()


class TestModuleResolverHttp:
    """Test fetching plugin modules with httpx."""

    @staticmethod
    def make_client(routes: dict[str, httpx.Response]) -> httpx.AsyncClient:
        def handler(request: httpx.Request) -> httpx.Response:
            response = routes.get(str(request.url))
            if response is None:
                return httpx.Response(404, text="not found")
            return response

        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    @pytest.mark.asyncio
    async def test_resolves_url(self) -> None:
        url = "https://cdn.example/fixture/plugin.py"
        client = self.make_client({url: httpx.Response(200, text=PLUGIN_SOURCE)})

        async with ModuleResolverHttp(client=client) as resolver:
            module = await resolver.resolve(url)

        assert module.Plugin.name == "fixture"
        assert module.__file__ == url
        assert module.__spec__.origin == url
        assert module.__name__ not in sys.modules
        # Injected clients stay open
        assert client.is_closed is False
        await client.aclose()

    @pytest.mark.asyncio
    async def test_http_error_status_is_not_found(self) -> None:
        client = self.make_client({})
        resolver = ModuleResolverHttp(client=client)

        with pytest.raises(PluginLoadError) as exc_info:
            await resolver.resolve("https://cdn.example/missing/plugin.py")

        assert exc_info.value.loader_error is EnumPluginLoadError.MODULE_NOT_FOUND
        assert exc_info.value.context["reason"] == "HTTP 404"
        assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)
        await client.aclose()

    @pytest.mark.asyncio
    async def test_transport_error_is_not_found(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        resolver = ModuleResolverHttp(client=client)

        with pytest.raises(PluginLoadError) as exc_info:
            await resolver.resolve("https://offline.example/plugin.py")

        assert exc_info.value.context["reason"] == "ConnectError"
        await client.aclose()

    @pytest.mark.asyncio
    async def test_syntax_error_in_body_propagates(self) -> None:
        url = "https://cdn.example/broken/plugin.py"
        client = self.make_client({url: httpx.Response(200, text="def broken(:\n")})
        resolver = ModuleResolverHttp(client=client)

        with pytest.raises(SyntaxError):
            await resolver.resolve(url)
        await client.aclose()

    @pytest.mark.asyncio
    async def test_owned_client_is_closed(self) -> None:
        resolver = ModuleResolverHttp(timeout_seconds=1.0)
        client = await resolver._get_http_client()

        await resolver.aclose()

        assert client.is_closed is True


class TestModuleResolverComposite:
    """Test scheme dispatch."""

    @pytest.mark.asyncio
    async def test_dispatches_by_scheme(self) -> None:
        paths = ModuleResolverInMemory()
        remote = ModuleResolverInMemory()
        paths.add_plugin("plugins/a/plugin.py", object)
        remote.add_plugin("https://cdn.example/b/plugin.py", object)
        composite = ModuleResolverComposite({"": paths, "https": remote})

        await composite.resolve("plugins/a/plugin.py")
        await composite.resolve("https://cdn.example/b/plugin.py")

        assert paths.resolved == ["plugins/a/plugin.py"]
        assert remote.resolved == ["https://cdn.example/b/plugin.py"]

    @pytest.mark.asyncio
    async def test_unknown_scheme_is_not_found(self) -> None:
        composite = ModuleResolverComposite({"": ModuleResolverInMemory()})

        with pytest.raises(PluginLoadError) as exc_info:
            await composite.resolve("ftp://old.example/plugin.py")

        assert exc_info.value.loader_error is EnumPluginLoadError.MODULE_NOT_FOUND
        assert "unsupported scheme" in str(exc_info.value.context["reason"])

    @pytest.mark.asyncio
    async def test_default_resolves_local_files(self, tmp_path: Path) -> None:
        path = write_plugin(tmp_path, "fixture")
        composite = ModuleResolverComposite.default(timeout_seconds=2.0)

        module = await composite.resolve(str(path))
        await composite.aclose()

        assert module.Plugin.name == "fixture"
