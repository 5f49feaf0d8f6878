"""Graph storage tables.

Entity ids are SQLite rowids; they restart from 1 once a graph has been
emptied, the way a fresh database would number them.
"""

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class NodeRecord(SQLModel, table=True):
    __tablename__ = "nodes"

    id: int | None = Field(default=None, primary_key=True)
    properties: dict = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False),
    )


class RelationshipRecord(SQLModel, table=True):
    __tablename__ = "relationships"

    id: int | None = Field(default=None, primary_key=True)
    type: str = Field(max_length=255, index=True)
    start_node_id: int = Field(foreign_key="nodes.id", index=True)
    end_node_id: int = Field(foreign_key="nodes.id", index=True)
    properties: dict = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False),
    )


class IndexEntryRecord(SQLModel, table=True):
    """Node index entry: (index_name, key, value) -> node."""

    __tablename__ = "node_index_entries"

    id: int | None = Field(default=None, primary_key=True)
    index_name: str = Field(max_length=255, index=True)
    node_id: int = Field(foreign_key="nodes.id", index=True)
    key: str = Field(max_length=255)
    value: str  # str() of the indexed value


GRAPH_TABLES = [
    NodeRecord.__table__,
    RelationshipRecord.__table__,
    IndexEntryRecord.__table__,
]
