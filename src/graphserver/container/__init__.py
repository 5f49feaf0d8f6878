"""Server container and its default collaborators."""

from graphserver.container.address import FixedAddressResolver
from graphserver.container.health import PropertyMustBePresentRule, StartupHealthCheck
from graphserver.container.modules import RestApiModule, ThirdPartyExtensionModule
from graphserver.container.server import GraphServer
from graphserver.container.web import UvicornWebServer

__all__ = [
    "FixedAddressResolver",
    "GraphServer",
    "PropertyMustBePresentRule",
    "RestApiModule",
    "StartupHealthCheck",
    "ThirdPartyExtensionModule",
    "UvicornWebServer",
]
