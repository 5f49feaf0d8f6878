"""Harness value objects."""

from pathlib import Path

from pydantic import BaseModel, Field


class Endpoint(BaseModel):
    """Hostname and port a server binds to. Fixed at construction."""

    hostname: str = "localhost"
    port: int = Field(default=7473, ge=1, le=65535)

    model_config = {"frozen": True}

    @property
    def base_uri(self) -> str:
        return f"http://{self.hostname}:{self.port}/"


class ConfigurationResource(BaseModel):
    """A configuration resource resolved from the search path."""

    name: str
    path: Path
    properties: dict[str, str] = {}

    model_config = {"frozen": True}
