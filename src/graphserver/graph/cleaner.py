"""Database cleaner: wipes a graph between test cases."""

import logging

from graphserver.core.interfaces.storage import GraphDatabase
from graphserver.logging_schema import LogEvent

logger = logging.getLogger(__name__)


class GraphDatabaseCleaner:
    """Removes every index, relationship and node from a graph.

    Works through the public GraphDatabase API only, so it cleans any
    implementation. Order matters: relationships must go before the
    nodes they connect.
    """

    def __init__(self, graph: GraphDatabase) -> None:
        self._graph = graph

    def clean_db(self) -> dict[str, int]:
        """Empty the graph.

        Returns:
            Counts of removed index entries, relationships and nodes.
        """
        result = {
            "index_entries_deleted": self._remove_indexes(),
            "relationships_deleted": self._remove_relationships(),
            "nodes_deleted": self._remove_nodes(),
        }
        logger.info("Graph cleaned", extra={"event": LogEvent.GRAPH_CLEANED, **result})
        return result

    def _remove_indexes(self) -> int:
        return sum(self._graph.drop_index(name) for name in self._graph.index_names())

    def _remove_relationships(self) -> int:
        relationships = self._graph.all_relationships()
        for relationship in relationships:
            self._graph.delete_relationship(relationship.id)
        return len(relationships)

    def _remove_nodes(self) -> int:
        nodes = self._graph.all_nodes()
        for node in nodes:
            self._graph.delete_node(node.id)
        return len(nodes)
