"""Startup health check."""

import logging
from collections.abc import Iterable, Mapping

from graphserver.core.interfaces.container import HealthCheckRule
from graphserver.logging_schema import LogEvent

logger = logging.getLogger(__name__)


class PropertyMustBePresentRule(HealthCheckRule):
    """Fails when a configuration property is missing or blank."""

    def __init__(self, key: str) -> None:
        self.key = key
        self.failure_message = f"Property {key} must be set"

    def execute(self, properties: Mapping[str, str]) -> bool:
        return bool(properties.get(self.key, "").strip())


class StartupHealthCheck:
    """Runs rules in order; stops at the first failure."""

    def __init__(self, rules: Iterable[HealthCheckRule] = ()) -> None:
        self.rules = list(rules)
        self.failed_rule: HealthCheckRule | None = None

    @property
    def failure_message(self) -> str:
        if self.failed_rule is None:
            return ""
        return self.failed_rule.failure_message or f"{self.failed_rule.name} failed"

    def run(self, properties: Mapping[str, str]) -> bool:
        self.failed_rule = None
        for rule in self.rules:
            if not rule.execute(properties):
                self.failed_rule = rule
                logger.error(
                    "Startup health check failed",
                    extra={
                        "event": LogEvent.HEALTH_CHECK_FAILED,
                        "rule": rule.name,
                        "reason": self.failure_message,
                    },
                )
                return False
        return True
