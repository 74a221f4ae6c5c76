"""Named registries for pluggable strategies.

Bulk executors are looked up by name when a caller writes
``request.apply("http")``.  Installed distributions contribute
implementations through an entry-point group; ``load_entrypoints``
imports them on demand.  Names are case-insensitive.

Example
-------
In-process registration::

    from scimbulk.bulk.executor import BulkExecutor, executor_registry

    @executor_registry.register("http")
    class HttpBulkExecutor(BulkExecutor):
        ...

Discovery from a downstream ``pyproject.toml``::

    [project.entry-points."scimbulk.executors"]
    http = "my_package.executors:HttpBulkExecutor"

::

    executor_registry.load_entrypoints()
    executor = executor_registry.create("http", base_url="https://example.com/scim/v2")
"""
from __future__ import annotations

import importlib.metadata
import logging
from abc import ABC
from collections.abc import Callable
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=ABC)


class PluginNotFoundError(KeyError):
    """No implementation is registered under the requested name."""

    def __init__(self, name: str, registry_name: str) -> None:
        self.plugin_name = name
        self.registry_name = registry_name
        super().__init__(
            f"No {registry_name} implementation named {name!r}. "
            "Install the package that provides it or register it first."
        )

    def __str__(self) -> str:
        return str(self.args[0])


class PluginAlreadyRegisteredError(ValueError):
    """The name is already taken in this registry."""

    def __init__(self, name: str, registry_name: str) -> None:
        self.plugin_name = name
        self.registry_name = registry_name
        super().__init__(f"A {registry_name} implementation named {name!r} already exists")


class PluginRegistry(Generic[T]):
    """Maps names to subclasses of ``base_class``.

    Parameters
    ----------
    base_class:
        Every registered class must subclass it.
    name:
        Registry name used in messages, e.g. ``"executors"``.
    entrypoint_group:
        Default group for ``load_entrypoints``.
    """

    def __init__(
        self, base_class: type[T], name: str, entrypoint_group: str | None = None
    ) -> None:
        self._base_class = base_class
        self._name = name
        self._entrypoint_group = entrypoint_group
        self._plugins: dict[str, type[T]] = {}

    @property
    def name(self) -> str:
        return self._name

    @property
    def entrypoint_group(self) -> str | None:
        return self._entrypoint_group

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, name: str) -> Callable[[type[T]], type[T]]:
        """Class decorator form of ``register_class``; returns the class unchanged."""

        def decorator(cls: type[T]) -> type[T]:
            self.register_class(name, cls)
            return cls

        return decorator

    def register_class(self, name: str, cls: type[T]) -> None:
        """Register ``cls`` under ``name``.

        Raises
        ------
        PluginAlreadyRegisteredError
            If ``name`` is taken.
        TypeError
            If ``cls`` is not a subclass of ``base_class``.
        """
        key = name.lower()
        if key in self._plugins:
            raise PluginAlreadyRegisteredError(key, self._name)
        if not (isinstance(cls, type) and issubclass(cls, self._base_class)):
            raise TypeError(
                f"{cls!r} cannot be registered as {name!r}: "
                f"{self._name} must subclass {self._base_class.__name__}"
            )
        self._plugins[key] = cls
        logger.debug("Registered %s %r -> %s", self._name, key, cls.__qualname__)

    def deregister(self, name: str) -> None:
        """Remove ``name``.  Raises ``PluginNotFoundError`` if it is unknown."""
        key = name.lower()
        if key not in self._plugins:
            raise PluginNotFoundError(key, self._name)
        del self._plugins[key]
        logger.debug("Deregistered %s %r", self._name, key)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, name: str) -> type[T]:
        """Return the class registered under ``name``.

        Raises
        ------
        PluginNotFoundError
            If nothing is registered under ``name``.
        """
        try:
            return self._plugins[name.lower()]
        except KeyError:
            raise PluginNotFoundError(name, self._name) from None

    def create(self, name: str, *args: Any, **kwargs: Any) -> T:
        """Instantiate the class registered under ``name`` with the given arguments."""
        return self.get(name)(*args, **kwargs)

    def list_plugins(self) -> list[str]:
        """Registered names, sorted."""
        return sorted(self._plugins)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._plugins

    def __len__(self) -> int:
        return len(self._plugins)

    def __repr__(self) -> str:
        return (
            f"PluginRegistry(name={self._name!r}, "
            f"base_class={self._base_class.__name__}, "
            f"plugins={self.list_plugins()})"
        )

    # ------------------------------------------------------------------
    # Entry-point discovery
    # ------------------------------------------------------------------

    def load_entrypoints(self, group: str | None = None) -> list[str]:
        """Import and register the implementations declared in ``group``.

        ``group`` defaults to the registry's ``entrypoint_group``.  Names
        already registered are left alone, so calling this repeatedly is
        safe.  An entry-point that fails to import or does not load a
        ``base_class`` subclass is logged and skipped.

        Returns
        -------
        list[str]
            The names registered by this call.
        """
        group = group or self._entrypoint_group
        if group is None:
            raise ValueError(f"No entry-point group given for the {self._name} registry")

        added: list[str] = []
        for ep in importlib.metadata.entry_points(group=group):
            if ep.name.lower() in self._plugins:
                logger.debug("%s %r already registered; skipping entry-point", self._name, ep.name)
                continue
            try:
                cls = ep.load()
            except Exception:
                logger.exception("Could not import entry-point %r from %r", ep.name, group)
                continue
            try:
                self.register_class(ep.name, cls)
            except TypeError:
                logger.warning(
                    "Entry-point %r in %r is not a %s subclass; skipping",
                    ep.name,
                    group,
                    self._base_class.__name__,
                )
                continue
            added.append(ep.name.lower())
        return added
