from __future__ import annotations

from datetime import timedelta

from bs4 import BeautifulSoup

from pyigd.models.protocol import Protocol

class PortMapping:
    def __init__(self,
        external_port: int=None,
        internal_ip: str=None,
        internal_port: int=None,
        protocol: Protocol=None,
        description: str=None,
        duration: timedelta=None,
        remote_host: str="",
        enabled: bool=True
    ):
        """
        external_port - external port on igd which is mapped
        internal_ip - internal ip on local device which is mapped to
        internal_port - internal port on local device which is mapped to
        protocol - protocol allowed over port (TCP or UDP)
        description - description of port forward
        duration - remaining lease duration of port mapping as a timedelta
        remote_host - remote host the mapping is restricted to ("" for any)
        enabled - whether the mapping is active
        """

        self.external_port = external_port
        self.internal_ip = internal_ip
        self.internal_port = internal_port
        self.protocol = protocol
        self.description = description
        self.duration = duration
        self.remote_host = remote_host
        self.enabled = enabled

    @classmethod
    def from_response(cls, response: bytes) -> PortMapping:
        """
        Builds a PortMapping from a GetGenericPortMappingEntry response body
        """

        parser = BeautifulSoup(response, "lxml-xml")

        def field(name: str) -> str:
            tag = parser.find(name)
            if tag is None:
                return ""
            return tag.get_text().strip()

        duration = field("NewLeaseDuration")
        return cls(
            external_port=int(field("NewExternalPort") or 0),
            internal_ip=field("NewInternalClient"),
            internal_port=int(field("NewInternalPort") or 0),
            protocol=Protocol.parse(field("NewProtocol")),
            description=field("NewPortMappingDescription"),
            duration=timedelta(seconds=int(duration or 0)),
            remote_host=field("NewRemoteHost"),
            enabled=field("NewEnabled") != "0"
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, PortMapping):
            return NotImplemented
        return (self.external_port, self.protocol, self.remote_host) == \
            (other.external_port, other.protocol, other.remote_host)

    def __hash__(self) -> int:
        return hash((self.external_port, self.protocol, self.remote_host))

    def __repr__(self) -> str:
        return f"PortMapping(external_port={self.external_port}, internal_ip={self.internal_ip}, internal_port={self.internal_port}, protocol={self.protocol}, description={self.description}, duration={self.duration})"
