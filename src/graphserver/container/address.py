"""Address resolvers."""

from graphserver.core.interfaces.container import AddressResolver


class FixedAddressResolver(AddressResolver):
    """Always resolves to the configured hostname, no network discovery."""

    def __init__(self, hostname: str) -> None:
        self._hostname = hostname

    def hostname(self) -> str:
        return self._hostname

    def __repr__(self) -> str:
        return f"FixedAddressResolver({self._hostname!r})"
