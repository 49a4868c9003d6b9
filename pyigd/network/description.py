"""
Locates the WAN connection services of an InternetGatewayDevice in its
root device description, and the control url of each of them.
"""

from __future__ import annotations

from typing import List

import requests
from yarl import URL

from pyigd.models import DeviceKind, DeviceNode, IGDService
from pyigd.network.requester import Requester
from pyigd.settings import Settings
from pyigd.exceptions import (
    NoCompatibleServicesError,
    TransportError,
    UnsupportedDeviceError,
)

def splice_control_url(root_url: str, control_url: str) -> str:
    """
    root_url - url of the root device description
    control_url - controlURL as advertised for a service

    Returns the absolute control url. Scheme, host and port always come from
    the root url; an absolute control url only contributes path and query
    """

    url = URL(root_url)
    try:
        control = URL(control_url)
    except ValueError:
        return str(url)

    if control.is_absolute():
        path, query = control.raw_path, control.raw_query_string
    else:
        path, _, query = control_url.partition("?")
        if not path.startswith("/"):
            path = url.raw_path + path

    url = url.with_path(path, encoded=True)
    if query:
        url = url.with_query(query)
    return str(url)


class DescriptionResolver:
    def __init__(self, settings: Settings=None, requester: Requester=None):
        """
        settings - logging and timeouts
        requester - SOAP client handed to every IGDService found
            (default is one sharing these settings)
        """

        self.settings = settings if settings is not None else Settings()
        self.log = self.settings.log
        self.requester = requester if requester is not None else Requester(self.settings)

    def fetch(self, location: str) -> DeviceNode:
        """
        Downloads and parses the root device description at location
        Raises TransportError or MalformedResponseError
        """

        try:
            r = requests.get(location, timeout=self.settings.http_timeout)
        except requests.RequestException as e:
            raise TransportError(f"[{location}] {e}") from e

        if r.status_code >= 400:
            raise TransportError(f"[{location}] {r.status_code} {r.reason}")

        return DeviceNode.parse(r.content)

    def resolve(self, root_url: str, device: DeviceNode) -> List[IGDService]:
        """
        root_url - url of the root device description
        device - root device of the description

        Returns the compatible WAN connection services, in description order
        Raises UnsupportedDeviceError if the root device is not an IGD,
            NoCompatibleServicesError if it has no usable services
        """

        kind = device.kind
        if kind is None:
            raise UnsupportedDeviceError(
                f"[{root_url}] Malformed root device description: not an InternetGatewayDevice."
            )

        services = self._find_services(root_url, device, kind)
        if not services:
            raise NoCompatibleServicesError(
                f"[{root_url}] Malformed device description: no compatible service descriptions found."
            )
        return services

    def _find_services(self, root_url: str, device: DeviceNode, kind: DeviceKind) -> List[IGDService]:
        result = []

        wan_devices = device.child_devices(kind.wan_device)
        if not wan_devices:
            self.log(f"[{root_url}] Malformed InternetGatewayDevice description: no WANDevices specified.")
            return result

        for wan_device in wan_devices:
            connections = wan_device.child_devices(kind.wan_connection_device)
            if not connections:
                self.log(f"[{root_url}] Malformed {kind.wan_device} description: no WANConnectionDevices specified.")

            for connection in connections:
                for service_type in kind.service_types:
                    services = connection.child_services(service_type)
                    if not services:
                        self.log.debug(f"[{root_url}] No services of type {service_type} found on connection.")

                    for service in services:
                        if not service.control_url:
                            self.log(f"[{root_url}] Malformed {service.service_type} description: no control URL.")
                            continue

                        url = splice_control_url(root_url, service.control_url)
                        self.log.debug(f"[{root_url}] Found {service.service_type} with URL {url}")
                        result.append(IGDService(service.service_id, url, service.service_type, self.requester))

        return result
