from __future__ import annotations

from enum import Enum
from typing import Union

class Protocol(str, Enum):
    TCP = "TCP"
    UDP = "UDP"

    @classmethod
    def parse(cls, protocol: Union[Protocol, str]) -> Protocol:
        """
        protocol - Protocol or its name ("TCP" or "UDP", any case)

        Raises ValueError for anything else
        """

        if isinstance(protocol, Protocol):
            return protocol
        try:
            return cls(str(protocol).upper())
        except ValueError:
            raise ValueError("Protocol must be TCP or UDP") from None

    def __str__(self) -> str:
        return self.value
