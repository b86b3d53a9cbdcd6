"""
Component Registry - Ordered collection of daemon components.

Components are kept in attachment order under an opaque id, so one can be
removed mid-shutdown without disturbing the others. The registry starts
components one after another and hands out stop operations; it never
enforces timeouts itself.
"""

import itertools
from collections.abc import Coroutine, Iterator
from typing import Any

import structlog

from .contracts import DaemonComponent
from .errors import ComponentStartFailure

__all__ = ["ComponentId", "ComponentRegistry"]

logger = structlog.get_logger(__name__)

ComponentId = int


def _describe(component: DaemonComponent) -> str:
    return type(component).__name__


class ComponentRegistry:
    """Registry for daemon components.

    Example:
        registry = ComponentRegistry()
        registry.attach(database)
        registry.attach(http_server)   # started after database

        await registry.start_all()

        stops = [asyncio.create_task(op) for op in registry.stop_operations()]
        await asyncio.wait(stops)
        assert len(registry) == 0
    """

    def __init__(self) -> None:
        self._components: dict[ComponentId, DaemonComponent] = {}
        self._started: set[ComponentId] = set()
        self._ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self._components)

    def __iter__(self) -> Iterator[DaemonComponent]:
        return iter(list(self._components.values()))

    def __contains__(self, component_id: object) -> bool:
        return component_id in self._components

    def components(self) -> list[tuple[ComponentId, DaemonComponent]]:
        """Snapshot of (id, component) pairs in attachment order."""
        return list(self._components.items())

    def is_started(self, component_id: ComponentId) -> bool:
        """Whether start() was called for this component."""
        return component_id in self._started

    def attach(self, component: DaemonComponent) -> ComponentId:
        """Append a component and return its id."""
        component_id = next(self._ids)
        self._components[component_id] = component
        logger.debug("component_attached", id=component_id, component=_describe(component))
        return component_id

    def detach(self, component_id: ComponentId) -> DaemonComponent | None:
        """Remove a component by id.

        Returns:
            The removed component, or None if it wasn't attached
        """
        component = self._components.pop(component_id, None)
        self._started.discard(component_id)
        if component is not None:
            logger.debug("component_detached", id=component_id, component=_describe(component))
        return component

    async def start(self, component_id: ComponentId) -> None:
        """Start a single attached component.

        Raises:
            KeyError: If no component has this id
            ComponentStartFailure: If the component's start() raised
        """
        component = self._components[component_id]
        name = _describe(component)
        logger.debug("component_starting", id=component_id, component=name)
        self._started.add(component_id)
        try:
            await component.start()
        except Exception as e:
            logger.error("component_start_failed", id=component_id, component=name, error=str(e))
            raise ComponentStartFailure(component, e) from e
        logger.info("component_started", id=component_id, component=name)

    async def start_all(self) -> None:
        """Start all components sequentially, in attachment order.

        Components attached while an earlier start() is suspended are
        started too, after everything attached before them.

        Raises:
            ComponentStartFailure: On the first failing component; later
                components are not started and earlier ones stay running
        """
        while True:
            pending = [cid for cid in self._components if cid not in self._started]
            if not pending:
                return
            await self.start(pending[0])

    def stop_operations(self) -> list[Coroutine[Any, Any, None]]:
        """One stop coroutine per started component.

        Each coroutine awaits the component's stop(), logs a failure instead
        of raising it, and detaches the component once the stop completes.
        Components whose start() was never called are detached right away
        without being stopped.
        """
        operations = []
        for component_id, component in list(self._components.items()):
            if component_id in self._started:
                operations.append(self._stop(component_id, component))
            else:
                self.detach(component_id)
        return operations

    async def _stop(self, component_id: ComponentId, component: DaemonComponent) -> None:
        name = _describe(component)
        try:
            await component.stop()
            logger.info("component_stopped", id=component_id, component=name)
        except Exception as e:
            logger.error("component_stop_failed", id=component_id, component=name, error=str(e))
        finally:
            self.detach(component_id)
