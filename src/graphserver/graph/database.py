"""SQLModel-backed graph database."""

import logging
import threading
from collections.abc import Mapping
from typing import Any

from sqlalchemy import delete, func, or_
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, select

from graphserver.core.interfaces.storage import (
    Direction,
    GraphDatabase,
    Node,
    Relationship,
)
from graphserver.errors import (
    InvalidRequestError,
    NodeInUseError,
    NodeNotFoundError,
    RelationshipNotFoundError,
)
from graphserver.graph.models import (
    GRAPH_TABLES,
    IndexEntryRecord,
    NodeRecord,
    RelationshipRecord,
)
from graphserver.logging_schema import LogEvent

logger = logging.getLogger(__name__)


def _to_node(record: NodeRecord) -> Node:
    return Node(id=record.id, properties=dict(record.properties or {}))


def _to_relationship(record: RelationshipRecord) -> Relationship:
    return Relationship(
        id=record.id,
        type=record.type,
        start_node_id=record.start_node_id,
        end_node_id=record.end_node_id,
        properties=dict(record.properties or {}),
    )


class SqlGraphDatabase(GraphDatabase):
    """Graph database over a SQLAlchemy engine.

    Every operation runs in its own session under a re-entrant lock, so
    the web server thread and the test thread can share one instance.
    """

    def __init__(self, engine: Engine, location: str | None = None) -> None:
        self._engine = engine
        self._lock = threading.RLock()
        self._closed = False
        self.location = location
        SQLModel.metadata.create_all(engine, tables=GRAPH_TABLES)

    @property
    def engine(self) -> Engine:
        return self._engine

    # =========================================================================
    # Nodes
    # =========================================================================

    def create_node(self, properties: Mapping[str, Any] | None = None) -> Node:
        with self._lock, Session(self._engine) as session:
            record = NodeRecord(properties=dict(properties or {}))
            session.add(record)
            session.commit()
            session.refresh(record)
            return _to_node(record)

    def get_node(self, node_id: int) -> Node:
        with self._lock, Session(self._engine) as session:
            return _to_node(self._require_node(session, node_id))

    def set_node_properties(self, node_id: int, properties: Mapping[str, Any]) -> Node:
        with self._lock, Session(self._engine) as session:
            record = self._require_node(session, node_id)
            record.properties = dict(properties)
            session.add(record)
            session.commit()
            session.refresh(record)
            return _to_node(record)

    def delete_node(self, node_id: int) -> None:
        with self._lock, Session(self._engine) as session:
            record = self._require_node(session, node_id)
            attached = session.exec(
                select(func.count())
                .select_from(RelationshipRecord)
                .where(
                    or_(
                        RelationshipRecord.start_node_id == node_id,
                        RelationshipRecord.end_node_id == node_id,
                    )
                )
            ).one()
            if attached:
                raise NodeInUseError(
                    f"Node {node_id} still has {attached} relationship(s)"
                )
            session.exec(delete(IndexEntryRecord).where(IndexEntryRecord.node_id == node_id))
            session.delete(record)
            session.commit()

    def all_nodes(self) -> list[Node]:
        with self._lock, Session(self._engine) as session:
            records = session.exec(select(NodeRecord).order_by(NodeRecord.id)).all()
            return [_to_node(r) for r in records]

    def count_nodes(self) -> int:
        with self._lock, Session(self._engine) as session:
            return session.exec(select(func.count()).select_from(NodeRecord)).one()

    # =========================================================================
    # Relationships
    # =========================================================================

    def create_relationship(
        self,
        start_node_id: int,
        end_node_id: int,
        type: str,
        properties: Mapping[str, Any] | None = None,
    ) -> Relationship:
        if not type:
            raise InvalidRequestError("Relationship type must not be empty")
        with self._lock, Session(self._engine) as session:
            self._require_node(session, start_node_id)
            self._require_node(session, end_node_id)
            record = RelationshipRecord(
                type=type,
                start_node_id=start_node_id,
                end_node_id=end_node_id,
                properties=dict(properties or {}),
            )
            session.add(record)
            session.commit()
            session.refresh(record)
            return _to_relationship(record)

    def get_relationship(self, relationship_id: int) -> Relationship:
        with self._lock, Session(self._engine) as session:
            return _to_relationship(self._require_relationship(session, relationship_id))

    def delete_relationship(self, relationship_id: int) -> None:
        with self._lock, Session(self._engine) as session:
            record = self._require_relationship(session, relationship_id)
            session.delete(record)
            session.commit()

    def relationships(
        self, node_id: int, direction: Direction = Direction.ALL
    ) -> list[Relationship]:
        with self._lock, Session(self._engine) as session:
            self._require_node(session, node_id)
            if direction == Direction.OUT:
                condition = RelationshipRecord.start_node_id == node_id
            elif direction == Direction.IN:
                condition = RelationshipRecord.end_node_id == node_id
            else:
                condition = or_(
                    RelationshipRecord.start_node_id == node_id,
                    RelationshipRecord.end_node_id == node_id,
                )
            records = session.exec(
                select(RelationshipRecord).where(condition).order_by(RelationshipRecord.id)
            ).all()
            return [_to_relationship(r) for r in records]

    def all_relationships(self) -> list[Relationship]:
        with self._lock, Session(self._engine) as session:
            records = session.exec(
                select(RelationshipRecord).order_by(RelationshipRecord.id)
            ).all()
            return [_to_relationship(r) for r in records]

    def count_relationships(self) -> int:
        with self._lock, Session(self._engine) as session:
            return session.exec(select(func.count()).select_from(RelationshipRecord)).one()

    def relationship_types(self) -> list[str]:
        with self._lock, Session(self._engine) as session:
            types = session.exec(
                select(RelationshipRecord.type).distinct().order_by(RelationshipRecord.type)
            ).all()
            return list(types)

    # =========================================================================
    # Node Indexes
    # =========================================================================

    def index_node(self, index_name: str, node_id: int, key: str, value: Any) -> None:
        with self._lock, Session(self._engine) as session:
            self._require_node(session, node_id)
            session.add(
                IndexEntryRecord(
                    index_name=index_name,
                    node_id=node_id,
                    key=key,
                    value=str(value),
                )
            )
            session.commit()

    def query_index(self, index_name: str, key: str, value: Any) -> list[Node]:
        with self._lock, Session(self._engine) as session:
            records = session.exec(
                select(NodeRecord)
                .join(IndexEntryRecord, IndexEntryRecord.node_id == NodeRecord.id)
                .where(
                    IndexEntryRecord.index_name == index_name,
                    IndexEntryRecord.key == key,
                    IndexEntryRecord.value == str(value),
                )
                .distinct()
                .order_by(NodeRecord.id)
            ).all()
            return [_to_node(r) for r in records]

    def index_names(self) -> list[str]:
        with self._lock, Session(self._engine) as session:
            names = session.exec(
                select(IndexEntryRecord.index_name)
                .distinct()
                .order_by(IndexEntryRecord.index_name)
            ).all()
            return list(names)

    def drop_index(self, index_name: str) -> int:
        with self._lock, Session(self._engine) as session:
            result = session.exec(
                delete(IndexEntryRecord).where(IndexEntryRecord.index_name == index_name)
            )
            session.commit()
            return result.rowcount

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def shutdown(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._engine.dispose()
            self._closed = True
        logger.info(
            "Graph database shut down",
            extra={"event": LogEvent.DATABASE_SHUTDOWN, "location": self.location},
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _require_node(session: Session, node_id: int) -> NodeRecord:
        record = session.get(NodeRecord, node_id)
        if record is None:
            raise NodeNotFoundError(f"Node {node_id} not found")
        return record

    @staticmethod
    def _require_relationship(session: Session, relationship_id: int) -> RelationshipRecord:
        record = session.get(RelationshipRecord, relationship_id)
        if record is None:
            raise RelationshipNotFoundError(f"Relationship {relationship_id} not found")
        return record
