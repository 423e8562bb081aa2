"""Registry entry models."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class RegistrationKind(Enum):
    """How a name is bound in the registry."""

    PROXY = "proxy"  # upgradeable, implementation may be swapped
    IMMUTABLE = "immutable"


@dataclass(frozen=True)
class Registration:
    """A live name -> address binding.

    For proxies ``address`` is the proxy the registry created and
    ``implementation`` is the contract behind it.
    """

    name: str
    address: str
    kind: RegistrationKind
    implementation: Optional[str] = None

    @property
    def is_proxy(self) -> bool:
        return self.kind == RegistrationKind.PROXY

    def upgraded(self, implementation: str) -> "Registration":
        """Same proxy, new implementation."""
        if not self.is_proxy:
            raise ValueError(f"{self.name} is immutable and cannot be upgraded")
        return Registration(self.name, self.address, self.kind, implementation)
