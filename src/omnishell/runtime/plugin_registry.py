# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Plugin registry: load, order, register, and tear down plugins.

The registry owns the live, priority-ordered plugin list and drives every
plugin through the same protocol on every load pass.

Load Pass (``register_all_plugins``):
    1. Unregister every current plugin.
    2. Compute sources: the default plugin, then the configured entries
       normalized into module locations.
    3. De-duplicate sources, keeping the first occurrence.
    4. Resolve and instantiate every source concurrently
       (``asyncio.gather(..., return_exceptions=True)``).
    5. Partition outcomes into ModelImportResult.good / .bad.
    6. Sort ``good`` by priority and extend the plugin list in place.
    7. Call each plugin's ``register(ctx)`` hook in order.
    8. Emit ``EnumCoreEvent.PLUGINS_LOADED`` with the import result.

Ordering:
    Descending numeric ``priority``; plugins without a priority come after
    every numbered one; ties keep source order.

Failure Handling:
    No single plugin can abort a load pass. Resolution, export lookup and
    construction failures become PluginLoadError entries in ``bad``. A
    ``register`` hook that raises gets its plugin force-unregistered from
    every subsystem, dropped from the list, and reported as
    REGISTRATION_FAILED. A plugin reusing a ref already loaded is reported
    as DUPLICATE_REF.

Teardown:
    ``unregister_plugin`` runs the plugin's own ``unregister`` hook, then
    unregisters it from the bus and every collaborator whatever the hook
    did. Removal is allowed while the shell is locked. A load pass is not:
    ``register_all_plugins`` raises BusLockedError before touching anything.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable, Iterator, Mapping
from numbers import Real
from typing import Any, Optional

from omnishell.enums import EnumCoreEvent, EnumPluginLoadError
from omnishell.errors import (
    BusLockedError,
    ModelShellErrorContext,
    PluginLoadError,
)
from omnishell.event_bus import BusManager
from omnishell.models import (
    ModelContextProviders,
    ModelImportResult,
    ModelInlineConstructorSource,
    ModelPluginOptions,
    ModelRemoteModuleSource,
    ModelShellConfig,
    PluginSource,
    coerce_plugin_entries,
)
from omnishell.plugins.plugin_core import PluginCore
from omnishell.protocols import (
    PluginRef,
    ProtocolDisplay,
    ProtocolModuleResolver,
    ProtocolSettingsProvider,
    ProtocolStylesheetProvider,
    ProtocolTemplateProvider,
)
from omnishell.runtime.module_resolver import (
    ModuleResolverComposite,
    normalize_plugin_location,
)

logger = logging.getLogger(__name__)

# Settings keys holding the enabled plugin entries
SETTINGS_PLUGINS_KEY = "plugins"
SETTINGS_CUSTOM_PLUGINS_KEY = "custom_plugins"


def plugin_sort_key(plugin: object) -> tuple[int, float]:
    """Sort key: numbered priorities descending, then unprioritized plugins."""
    priority = getattr(plugin, "priority", None)
    if isinstance(priority, Real) and not isinstance(priority, bool):
        return (0, -float(priority))
    return (1, 0.0)


def sort_plugins(plugins: list[Any]) -> list[Any]:
    """Return ``plugins`` in load order. ``sorted`` is stable, so ties keep input order."""
    return sorted(plugins, key=plugin_sort_key)


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class PluginRegistry:
    """Priority-ordered list of live plugins plus the load/unload protocol.

    Attributes:
        plugins: The live plugin list. Mutated in place, never reassigned.

    Example:
        ```python
        registry = PluginRegistry(
            bus=bus,
            settings=settings,
            template=templates,
            stylesheets=stylesheets,
            display=display,
            config=ModelShellConfig(plugins_base_path="/srv/plugins"),
        )
        result = await registry.register_all_plugins()
        for error in result.bad:
            display.show_error(error)
        ```
    """

    def __init__(
        self,
        bus: BusManager,
        settings: ProtocolSettingsProvider,
        template: ProtocolTemplateProvider,
        stylesheets: ProtocolStylesheetProvider,
        display: ProtocolDisplay,
        config: Optional[ModelShellConfig] = None,
        resolver: Optional[ProtocolModuleResolver] = None,
        default_plugin: Optional[Callable[..., Any]] = PluginCore,
    ) -> None:
        """Initialize the registry.

        Args:
            bus: Bus manager plugins register events and middleware on.
            settings: Settings collaborator; also the source of plugin entries.
            template: Template collaborator.
            stylesheets: Stylesheet collaborator.
            display: User-facing message surface.
            config: Location conventions (base path, entry file, export name).
            resolver: Module resolver (scheme-dispatching default).
            default_plugin: Constructor always loaded first; None disables it.
        """
        self._bus = bus
        self._settings = settings
        self._template = template
        self._stylesheets = stylesheets
        self._display = display
        self._config = config or ModelShellConfig()
        self._resolver = resolver or ModuleResolverComposite.default(
            timeout_seconds=self._config.http_timeout_seconds
        )
        self._default_plugin = default_plugin

        self._plugins: list[Any] = []
        # plugin ref -> source label it was loaded from
        self._locations: dict[object, str] = {}

        self._context_providers = ModelContextProviders(
            bus=bus,
            settings=settings,
            template=template,
            stylesheets=stylesheets,
            display=display,
        )
        self._plugin_options = ModelPluginOptions(
            bus=bus,
            settings=settings,
            display=display,
        )

    @property
    def plugins(self) -> list[Any]:
        return self._plugins

    @property
    def context_providers(self) -> ModelContextProviders:
        """Capability object handed to every register hook."""
        return self._context_providers

    @property
    def config(self) -> ModelShellConfig:
        return self._config

    @property
    def resolver(self) -> ProtocolModuleResolver:
        return self._resolver

    def __len__(self) -> int:
        return len(self._plugins)

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._plugins))

    def location_of(self, plugin: Any) -> Optional[str]:
        """Return the source label ``plugin`` was loaded from."""
        return self._locations.get(getattr(plugin, "ref", None))

    # =========================================================================
    # Load pass
    # =========================================================================

    def compute_sources(self) -> list[PluginSource]:
        """Return the de-duplicated source list for the next load pass."""
        sources: list[PluginSource] = []
        if self._default_plugin is not None:
            sources.append(ModelInlineConstructorSource(constructor=self._default_plugin))

        for entry in self._configured_entries():
            location = normalize_plugin_location(
                entry,
                self._config.plugins_base_path,
                self._config.entry_filename,
            )
            sources.append(ModelRemoteModuleSource(location=location))

        unique: list[PluginSource] = []
        seen: set[object] = set()
        for source in sources:
            key = source.dedupe_key
            if key in seen:
                logger.debug(
                    "Skipping duplicate plugin source",
                    extra={"location": source.label},
                )
                continue
            seen.add(key)
            unique.append(source)
        return unique

    async def register_all_plugins(self) -> ModelImportResult:
        """Run a full load pass and return its import result.

        Raises:
            BusLockedError: If the shell is locked. Checked before anything
                is torn down, so the current plugin set is left untouched.
        """
        if self._bus.is_locked:
            raise BusLockedError(
                context=ModelShellErrorContext(operation="register_all_plugins"),
                collaborator=type(self).__name__,
            )

        await self.unregister_all_plugins()

        sources = self.compute_sources()
        outcomes = await asyncio.gather(
            *(self._load_source(source) for source in sources),
            return_exceptions=True,
        )

        good: list[Any] = []
        bad: list[PluginLoadError] = []
        seen_refs: set[int] = set()
        for source, outcome in zip(sources, outcomes):
            if isinstance(outcome, PluginLoadError):
                bad.append(outcome)
                continue
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                bad.append(self._wrap_unexpected(source.label, outcome))
                continue

            ref_id = id(outcome.ref)
            if ref_id in seen_refs:
                bad.append(
                    PluginLoadError(
                        "Plugin reuses the identity of an already loaded plugin",
                        location=source.label,
                        loader_error=EnumPluginLoadError.DUPLICATE_REF,
                        context=ModelShellErrorContext(
                            operation="load_plugin",
                            target_name=source.label,
                            plugin_name=outcome.name,
                        ),
                    )
                )
                continue
            seen_refs.add(ref_id)
            self._locations[outcome.ref] = source.label
            good.append(outcome)

        self._plugins.extend(sort_plugins(good))

        for plugin in list(self._plugins):
            error = await self._register_plugin(plugin)
            if error is not None:
                bad.append(error)

        result = ModelImportResult(good=list(self._plugins), bad=bad)
        logger.info(
            "Plugins loaded",
            extra={
                "requested": len(sources),
                "good": len(result.good),
                "bad": len(result.bad),
                "plugins": [p.name for p in result.good],
            },
        )
        self._bus.emit(EnumCoreEvent.PLUGINS_LOADED, result)
        return result

    async def _load_source(self, source: PluginSource) -> Any:
        if isinstance(source, ModelInlineConstructorSource):
            constructor = source.constructor
        else:
            constructor = await self._constructor_from_module(source.location)

        try:
            plugin = constructor(self._plugin_options)
        except Exception as e:
            raise PluginLoadError(
                "Plugin could not be instantiated",
                location=source.label,
                loader_error=EnumPluginLoadError.CONSTRUCTOR_FAILED,
                context=ModelShellErrorContext(
                    operation="instantiate_plugin",
                    target_name=source.label,
                ),
                error_type=type(e).__name__,
            ) from e

        self._ensure_identity(plugin)
        logger.debug(
            "Instantiated plugin",
            extra={"plugin_name": plugin.name, "location": source.label},
        )
        return plugin

    async def _constructor_from_module(self, location: str) -> Callable[..., Any]:
        try:
            module = await self._resolver.resolve(location)
        except PluginLoadError:
            raise
        except Exception as e:
            raise PluginLoadError(
                "Plugin module failed to load",
                location=location,
                loader_error=EnumPluginLoadError.MODULE_NOT_FOUND,
                context=ModelShellErrorContext(
                    operation="resolve_plugin",
                    target_name=location,
                ),
                error_type=type(e).__name__,
            ) from e

        export_name = self._config.export_name
        constructor = getattr(module, export_name, None)
        if constructor is None or not callable(constructor):
            raise PluginLoadError(
                f"Missing `{export_name}` export",
                location=location,
                loader_error=EnumPluginLoadError.MISSING_EXPORT,
                context=ModelShellErrorContext(
                    operation="resolve_plugin",
                    target_name=location,
                ),
                export_name=export_name,
            )
        return constructor

    @staticmethod
    def _ensure_identity(plugin: Any) -> None:
        if not getattr(plugin, "name", None):
            plugin.name = type(plugin).__name__
        if getattr(plugin, "version", None) is None:
            plugin.version = "0.0.0"
        if getattr(plugin, "ref", None) is None:
            plugin.ref = PluginRef(plugin.name)

    @staticmethod
    def _wrap_unexpected(location: str, error: Exception) -> PluginLoadError:
        wrapped = PluginLoadError(
            "Plugin could not be loaded",
            location=location,
            loader_error=EnumPluginLoadError.MODULE_NOT_FOUND,
            error_type=type(error).__name__,
        )
        wrapped.__cause__ = error
        return wrapped

    async def _register_plugin(self, plugin: Any) -> Optional[PluginLoadError]:
        hook = getattr(plugin, "register", None)
        if not callable(hook):
            return None

        try:
            await _maybe_await(hook(self._context_providers))
        except Exception as e:
            logger.exception(
                "Plugin registration failed",
                extra={"plugin_name": plugin.name, "error": str(e)},
            )
            location = self.location_of(plugin) or plugin.name
            await self._force_unregister(plugin)
            self._plugins.remove(plugin)
            self._locations.pop(plugin.ref, None)

            error = PluginLoadError(
                "Plugin failed to register",
                location=location,
                loader_error=EnumPluginLoadError.REGISTRATION_FAILED,
                context=ModelShellErrorContext(
                    operation="register_plugin",
                    target_name=location,
                    plugin_name=plugin.name,
                ),
                error_type=type(e).__name__,
            )
            error.__cause__ = e
            return error

        logger.debug("Registered plugin", extra={"plugin_name": plugin.name})
        return None

    # =========================================================================
    # Teardown
    # =========================================================================

    async def unregister_plugin(self, plugin: Any) -> None:
        """Tear ``plugin`` down and drop it from the live list. Works while locked."""
        hook = getattr(plugin, "unregister", None)
        if callable(hook):
            try:
                await _maybe_await(hook())
            except Exception as e:
                logger.exception(
                    "Plugin unregister hook failed",
                    extra={"plugin_name": plugin.name, "error": str(e)},
                )

        await self._force_unregister(plugin)

        for idx, existing in enumerate(self._plugins):
            if existing is plugin:
                del self._plugins[idx]
                break
        self._locations.pop(getattr(plugin, "ref", None), None)

    async def unregister_all_plugins(self) -> None:
        """Tear down every plugin, empty the list in place, emit PLUGINS_UNLOADED."""
        for plugin in list(self._plugins):
            await self.unregister_plugin(plugin)
        self._plugins.clear()
        self._locations.clear()
        self._bus.emit(EnumCoreEvent.PLUGINS_UNLOADED)

    async def _force_unregister(self, plugin: Any) -> None:
        self._bus.unregister(plugin)
        for collaborator in (self._settings, self._stylesheets, self._template):
            try:
                await _maybe_await(collaborator.unregister(plugin))
            except Exception as e:
                logger.warning(
                    "Collaborator unregister failed",
                    extra={
                        "plugin_name": getattr(plugin, "name", None),
                        "collaborator": type(collaborator).__name__,
                        "error": str(e),
                    },
                )

    # =========================================================================
    # Settings
    # =========================================================================

    def validate_settings(self) -> bool | dict[str, str]:
        """Ask every plugin whether it is configured.

        Returns:
            True when every plugin is configured, otherwise the merged
            field -> message map of every plugin that is not.
        """
        errors: dict[str, str] = {}
        for plugin in self._plugins:
            check = getattr(plugin, "is_configured", None)
            if not callable(check):
                continue
            outcome = check()
            if outcome is True:
                continue
            if isinstance(outcome, Mapping):
                errors.update({str(k): str(v) for k, v in outcome.items()})
            else:
                errors[plugin.name] = "Plugin is not configured"

        return True if not errors else errors

    def _configured_entries(self) -> list[str]:
        values = self._settings.get()
        entries: list[str] = []
        for key in (SETTINGS_PLUGINS_KEY, SETTINGS_CUSTOM_PLUGINS_KEY):
            try:
                entries.extend(coerce_plugin_entries(values.get(key)))
            except TypeError as e:
                logger.warning(
                    "Ignoring malformed plugin setting",
                    extra={"setting": key, "error": str(e)},
                )
        return entries


__all__: list[str] = [
    "SETTINGS_CUSTOM_PLUGINS_KEY",
    "SETTINGS_PLUGINS_KEY",
    "PluginRegistry",
    "plugin_sort_key",
    "sort_plugins",
]
