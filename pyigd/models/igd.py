from __future__ import annotations

import ipaddress
from typing import List, Optional, Tuple, Union
from xml.sax.saxutils import escape

from bs4 import BeautifulSoup
from yarl import URL

from pyigd.models.mapping import PortMapping
from pyigd.models.protocol import Protocol
from pyigd.network.requester import Requester
from pyigd.exceptions import MalformedResponseError, NoSuchMappingError

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

class IGDService:
    def __init__(self, service_id: str, url: str, urn: str, requester: Requester=None):
        """
        service_id - serviceId advertised by the device
        url - absolute control url of the service
        urn - service type, WANIPConnection or WANPPPConnection of some version
        requester - SOAP client used for actions (default is one with default settings)
        """

        self._id = service_id
        self._url = url
        self._urn = urn
        self._requester = requester if requester is not None else Requester()

    @property
    def id(self) -> str:
        return self._id

    @property
    def url(self) -> str:
        return self._url

    @property
    def urn(self) -> str:
        return self._urn

    def add_port_mapping(
        self,
        local_ip_address: str,
        protocol: Union[Protocol, str],
        external_port: int,
        internal_port: int,
        description: str,
        duration: int
    ):
        """
        local_ip_address - ip address to forward to
        protocol - protocol to allow over port (TCP or UDP)
        external_port - router port to forward from
        internal_port - port to forward to
        description - description of port forward
        duration - lease duration of port mapping in seconds (0 for unlimited)

        Maps an external port to an internal port, for any remote host
        """

        ACTION = "AddPortMapping"
        CONTENT = """<u:{action} xmlns:u="{urn}">
<NewRemoteHost></NewRemoteHost>
<NewExternalPort>{external_port}</NewExternalPort>
<NewProtocol>{protocol}</NewProtocol>
<NewInternalPort>{internal_port}</NewInternalPort>
<NewInternalClient>{internal_ip}</NewInternalClient>
<NewEnabled>1</NewEnabled>
<NewPortMappingDescription>{description}</NewPortMappingDescription>
<NewLeaseDuration>{duration}</NewLeaseDuration>
</u:{action}>""".format(
            action=ACTION,
            urn=self._urn,
            external_port=int(external_port),
            protocol=Protocol.parse(protocol),
            internal_port=int(internal_port),
            internal_ip=escape(local_ip_address),
            description=escape(description),
            duration=int(duration)
        )

        self._requester.do_request(self._url, self._urn, ACTION, CONTENT)

    def delete_port_mapping(self, protocol: Union[Protocol, str], external_port: int):
        """
        protocol - protocol allowed over port to disable (TCP or UDP)
        external_port - router port to disable forwarding from

        Removes the port mapping on a port and protocol
        """

        ACTION = "DeletePortMapping"
        CONTENT = """<u:{action} xmlns:u="{urn}">
<NewRemoteHost></NewRemoteHost>
<NewExternalPort>{external_port}</NewExternalPort>
<NewProtocol>{protocol}</NewProtocol>
</u:{action}>""".format(
            action=ACTION,
            urn=self._urn,
            external_port=int(external_port),
            protocol=Protocol.parse(protocol)
        )

        self._requester.do_request(self._url, self._urn, ACTION, CONTENT)

    def get_external_ip_address(self) -> Optional[IPAddress]:
        """
        Returns the external ip address,
            None if the device reports none or something that is not an ip address
        Raises MalformedResponseError if the response is not a SOAP envelope
        """

        ACTION = "GetExternalIPAddress"
        CONTENT = '<u:{action} xmlns:u="{urn}" />'.format(
            action=ACTION,
            urn=self._urn
        )

        response = self._requester.do_request(self._url, self._urn, ACTION, CONTENT)

        parser = BeautifulSoup(response, "lxml-xml")
        if parser.find("Envelope") is None:
            raise MalformedResponseError(f"{ACTION}: response is not a SOAP envelope")
        field = parser.find("NewExternalIPAddress")
        if field is None:
            return None
        try:
            return ipaddress.ip_address(field.get_text().strip())
        except ValueError:
            return None

    def get_generic_port_mapping_entry(self, index: int) -> PortMapping:
        """
        Get a single mapping given the index in the service's table of mappings
        Raises NoSuchMappingError past the end of the table
        """

        ACTION = "GetGenericPortMappingEntry"
        CONTENT = """<u:{action} xmlns:u="{urn}">
<NewPortMappingIndex>{index}</NewPortMappingIndex>
</u:{action}>""".format(
            action=ACTION,
            urn=self._urn,
            index=int(index)
        )

        response = self._requester.do_request(self._url, self._urn, ACTION, CONTENT)
        return PortMapping.from_response(response)

    def get_port_mappings(self) -> List[PortMapping]:
        """
        Returns list of all port mappings of this service
        """

        index = 0
        all_mappings = []
        # keep going until we get an out of bounds error
        while True:
            try:
                mapping = self.get_generic_port_mapping_entry(index)
            except NoSuchMappingError:
                break
            all_mappings.append(mapping)
            index += 1

        return all_mappings

    def __repr__(self) -> str:
        return f"IGDService(id={self._id}, url={self._url}, urn={self._urn})"


class IGD:
    def __init__(self,
        uuid: str,
        friendly_name: str,
        url: URL,
        local_ip_address: str,
        services: List[IGDService]
    ):
        """
        uuid - device uuid from the USN of its search response
        friendly_name - friendlyName of the root device
        url - url of the root device description
        local_ip_address - address of this machine on the network the IGD is on
        services - WAN connection services of the device, in description order
        """

        self._uuid = uuid
        self._friendly_name = friendly_name
        self._url = URL(url)
        self._local_ip_address = local_ip_address
        self._services: Tuple[IGDService, ...] = tuple(services)

    @property
    def uuid(self) -> str:
        return self._uuid

    @property
    def friendly_name(self) -> str:
        return self._friendly_name

    @property
    def friendly_identifier(self) -> str:
        """
        Friendly name plus host, e.g. "'Router' (192.168.1.1)"
        """

        return f"'{self._friendly_name}' ({self._url.host})"

    @property
    def url(self) -> URL:
        return self._url

    @property
    def local_ip_address(self) -> str:
        return self._local_ip_address

    @property
    def services(self) -> Tuple[IGDService, ...]:
        return self._services

    def add_port_mapping(
        self,
        protocol: Union[Protocol, str],
        external_port: int,
        internal_port: int,
        description: str,
        duration: int
    ):
        """
        Adds the port mapping on every service of this IGD, forwarding to the local ip address

        Stops at the first service that fails and raises its error, leaving the
        mapping in place on the services before it. Use IGDService.add_port_mapping
        directly when that is not acceptable
        """

        for service in self._services:
            service.add_port_mapping(
                self._local_ip_address, protocol, external_port, internal_port, description, duration
            )

    def delete_port_mapping(self, protocol: Union[Protocol, str], external_port: int):
        """
        Deletes the port mapping from every service of this IGD

        Stops at the first service that fails and raises its error
        """

        for service in self._services:
            service.delete_port_mapping(protocol, external_port)

    def get_external_ip_address(self) -> Optional[IPAddress]:
        """
        Returns the first external ip address reported by a service, None if none report one
        """

        for service in self._services:
            ip = service.get_external_ip_address()
            if ip is not None:
                return ip
        return None

    def __eq__(self, other) -> bool:
        if not isinstance(other, IGD):
            return NotImplemented
        return self._uuid == other._uuid

    def __hash__(self) -> int:
        return hash(self._uuid)

    def __repr__(self) -> str:
        return f"IGD(uuid={self._uuid}, friendly_name={self._friendly_name}, url={self._url}, local_ip_address={self._local_ip_address}, services={list(self._services)})"
