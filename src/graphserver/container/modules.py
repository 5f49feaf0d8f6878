"""Server modules registered with the web application."""

import importlib
import logging
from collections.abc import Mapping

from fastapi import APIRouter, FastAPI

from graphserver.api.graph import router as graph_router
from graphserver.core.interfaces.container import ServerModule
from graphserver.errors import ConfigurationError
from graphserver.logging_schema import LogEvent
from graphserver.properties import (
    DEFAULT_REST_MOUNT_POINT,
    REST_MOUNT_POINT,
    THIRDPARTY_EXTENSIONS,
)

logger = logging.getLogger(__name__)


def _normalize_mount_point(mount_point: str) -> str:
    mount_point = "/" + mount_point.strip().strip("/")
    return "" if mount_point == "/" else mount_point


class RestApiModule(ServerModule):
    """Mounts the graph REST API."""

    def start(self, app: FastAPI, properties: Mapping[str, str]) -> None:
        mount_point = _normalize_mount_point(
            properties.get(REST_MOUNT_POINT, DEFAULT_REST_MOUNT_POINT)
        )
        app.include_router(graph_router, prefix=mount_point)
        logger.info(
            "REST API mounted",
            extra={
                "event": LogEvent.MODULE_STARTED,
                "server_module": type(self).__name__,
                "mount_point": mount_point or "/",
            },
        )


class ThirdPartyExtensionModule(ServerModule):
    """Mounts extension routers listed in the configuration.

    Format: graphserver.thirdparty.extensions = pkg.module:attr=/mount, ...
    `attr` defaults to `router`. Each target must be a FastAPI APIRouter.
    """

    def __init__(self) -> None:
        self.mounted: list[str] = []

    def start(self, app: FastAPI, properties: Mapping[str, str]) -> None:
        for target, mount_point in self.parse(properties.get(THIRDPARTY_EXTENSIONS, "")):
            app.include_router(self.load(target), prefix=mount_point)
            self.mounted.append(mount_point)
            logger.info(
                "Extension mounted",
                extra={
                    "event": LogEvent.MODULE_STARTED,
                    "server_module": type(self).__name__,
                    "target": target,
                    "mount_point": mount_point,
                },
            )

    def stop(self) -> None:
        self.mounted.clear()

    @staticmethod
    def parse(value: str) -> list[tuple[str, str]]:
        """Split the property value into (target, mount_point) pairs."""
        entries = []
        for item in value.split(","):
            item = item.strip()
            if not item:
                continue
            target, sep, mount_point = item.partition("=")
            if not sep or not target.strip() or not mount_point.strip():
                raise ConfigurationError(
                    f"Invalid extension entry {item!r}, expected module:attr=/mount"
                )
            entries.append((target.strip(), _normalize_mount_point(mount_point)))
        return entries

    @staticmethod
    def load(target: str) -> APIRouter:
        module_path, _, attr = target.partition(":")
        try:
            module = importlib.import_module(module_path)
        except ImportError as exc:
            raise ConfigurationError(f"Cannot import extension module {module_path}") from exc
        router = getattr(module, attr or "router", None)
        if not isinstance(router, APIRouter):
            raise ConfigurationError(f"Extension {target} is not an APIRouter")
        return router
