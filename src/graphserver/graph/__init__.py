"""Graph storage engine."""

from graphserver.graph.cleaner import GraphDatabaseCleaner
from graphserver.graph.database import SqlGraphDatabase
from graphserver.graph.factory import (
    EphemeralGraphDatabaseFactory,
    PersistentGraphDatabaseFactory,
)

__all__ = [
    "EphemeralGraphDatabaseFactory",
    "GraphDatabaseCleaner",
    "PersistentGraphDatabaseFactory",
    "SqlGraphDatabase",
]
