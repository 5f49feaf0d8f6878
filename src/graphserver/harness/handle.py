"""Accessor for a running server's database."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from graphserver.core.interfaces.storage import GraphDatabase
from graphserver.graph.cleaner import GraphDatabaseCleaner

if TYPE_CHECKING:
    from graphserver.harness.controller import LifecycleController

CleanerFactory = Callable[[GraphDatabase], GraphDatabaseCleaner]


class DatabaseHandle:
    """Graph database, base URI and cleanup for test assertions.

    Every accessor goes back to the controller, so a handle kept past
    stop() raises NotRunningError instead of touching a dead database.
    """

    def __init__(
        self,
        controller: LifecycleController,
        cleaner_factory: CleanerFactory = GraphDatabaseCleaner,
    ) -> None:
        self._controller = controller
        self._cleaner_factory = cleaner_factory

    @property
    def graph(self) -> GraphDatabase:
        return self._controller.graph_database()

    @property
    def base_uri(self) -> str:
        return self._controller.base_uri()

    def clean_db(self) -> dict[str, int]:
        """Remove all nodes, relationships and indexes without a restart."""
        return self._cleaner_factory(self.graph).clean_db()
