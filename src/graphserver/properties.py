"""Configuration resource properties.

Configuration resources are Java-style properties files:

    # comment
    graphserver.database.location = target/graph-db
    graphserver.db.echo: false
    graphserver.thirdparty.extensions = myapp.ext:router=/ext, \\
        otherapp.api:router=/other
"""

from collections.abc import Iterator, Mapping
from pathlib import Path

DATABASE_LOCATION = "graphserver.database.location"
DATABASE_PROPERTY_PREFIX = "graphserver.db."
REST_MOUNT_POINT = "graphserver.rest.mount_point"
THIRDPARTY_EXTENSIONS = "graphserver.thirdparty.extensions"

DEFAULT_DATABASE_LOCATION = "target/graph-db"
DEFAULT_REST_MOUNT_POINT = "/db/data"

_COMMENT_PREFIXES = ("#", "!")


def _logical_lines(text: str) -> Iterator[str]:
    """Join backslash-continued lines."""
    pending = ""
    for raw in text.splitlines():
        line = raw.strip() if not pending else raw.lstrip()
        if not pending and (not line or line.startswith(_COMMENT_PREFIXES)):
            continue
        if line.endswith("\\") and not line.endswith("\\\\"):
            pending += line[:-1]
            continue
        yield pending + line
        pending = ""
    if pending:
        yield pending


def parse_properties(text: str) -> dict[str, str]:
    """Parse properties text into a dict. Later keys win."""
    properties: dict[str, str] = {}
    for line in _logical_lines(text):
        positions = [p for p in (line.find("="), line.find(":")) if p != -1]
        if not positions:
            properties[line.strip()] = ""
            continue
        split_at = min(positions)
        key = line[:split_at].strip()
        properties[key] = line[split_at + 1 :].strip()
    return properties


def load_properties(path: Path) -> dict[str, str]:
    return parse_properties(path.read_text(encoding="utf-8"))


def database_properties(properties: Mapping[str, str]) -> dict[str, str]:
    """graphserver.db.* entries with the prefix stripped."""
    return {
        key[len(DATABASE_PROPERTY_PREFIX) :]: value
        for key, value in properties.items()
        if key.startswith(DATABASE_PROPERTY_PREFIX)
    }
