"""
SSDP discovery of InternetGatewayDevices.

Each search pass multicasts one M-SEARCH and listens until its deadline.
Every response is handled on its own thread, so that fetching a slow device's
description never holds up reading the socket. The pass waits for all of its
handlers before collecting their results.
"""

from __future__ import annotations

import http.client
import io
import queue
import re
import socket
import threading
import time
from email.message import Message
from typing import Iterable, List, Optional, Set

from yarl import URL

from pyigd.models import IGD
from pyigd.network.description import DescriptionResolver
from pyigd.network.local_address import get_local_ip
from pyigd.settings import Settings
from pyigd.static import (
    SSDP_ADDRESS, SSDP_PORT, SSDP_REQUEST, SSDP_BUFFER_SIZE, IGD_V1, IGD_V2
)
from pyigd.exceptions import (
    MalformedResponseError,
    ProtocolMismatchError,
    UPnPError,
)

UUID_PATTERN = re.compile(r"[a-fA-F0-9]{8}-[a-fA-F0-9]{4}-[a-fA-F0-9]{4}-[a-fA-F0-9]{4}-[a-fA-F0-9]{12}")

class _DatagramSocket:
    """Just enough of a socket for http.client.HTTPResponse to read a datagram"""

    def __init__(self, data: bytes):
        self._data = data

    def makefile(self, *args, **kwargs):
        return io.BytesIO(self._data)


def parse_response(data: bytes) -> Message:
    """
    data - SSDP response datagram

    Returns the headers of the response
    Raises MalformedResponseError if it is not an HTTP response
    """

    response = http.client.HTTPResponse(_DatagramSocket(data))
    try:
        response.begin()
    except (http.client.HTTPException, ValueError) as e:
        raise MalformedResponseError(f"Invalid SSDP response: {e!r}") from e
    return response.headers


def parse_uuid(usn: str) -> str:
    """
    Returns the device uuid of a USN such as "uuid:<uuid>::<device type>"
    """

    uuid = usn.split("::")[0]
    if uuid.startswith("uuid:"):
        uuid = uuid[len("uuid:"):]
    return uuid


class SSDP:
    def __init__(self, settings: Settings=None, resolver: DescriptionResolver=None):
        """
        settings - timeout, local address override and logging
        resolver - resolves the services of responding devices
            (default is one sharing these settings)
        """

        self.settings = settings if settings is not None else Settings()
        self.log = self.settings.log
        self.resolver = resolver if resolver is not None else DescriptionResolver(self.settings)

    def discover(self) -> List[IGD]:
        """
        Returns all IGDs that answered within the timeout, in no particular order

        Searches for InternetGatewayDevice:2 first, then InternetGatewayDevice:1.
        Devices answering both searches are only returned once
        """

        self.log("Starting UPnP discovery...")

        result = self.search(IGD_V2)
        result += self.search(IGD_V1, known_devices=result)

        if result and self.log.debug_enabled:
            self.log.debug("UPnP discovery result:")
            for device in result:
                self.log.debug(f"[{device.uuid}]")
                for service in device.services:
                    self.log.debug(f"* [{service.id}] {service.url}")

        suffix = "device" if len(result) == 1 else "devices"
        self.log(f"UPnP discovery complete (found {len(result)} {suffix}).")

        return result

    def build_request(self, device_type: str) -> bytes:
        return SSDP_REQUEST.format(
            address=SSDP_ADDRESS,
            port=SSDP_PORT,
            device_type=device_type,
            mx=self.settings.mx
        ).encode()

    def open_socket(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, 2)
            sock.bind(("", 0))
        except OSError:
            sock.close()
            raise

        membership = socket.inet_aton(SSDP_ADDRESS) + socket.inet_aton("0.0.0.0")
        try:
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_ADD_MEMBERSHIP, membership)
        except OSError as e:
            # responses are unicast, so this only matters on some platforms
            self.log.debug("Could not join multicast group:", e)

        return sock

    def search(self, device_type: str, known_devices: Iterable[IGD]=()) -> List[IGD]:
        """
        device_type - device type URN to search for
        known_devices - IGDs whose responses are ignored

        Searches for devices of one type for the configured timeout
        Returns the new IGDs found, never raises
        """

        known_uuids = {device.uuid for device in known_devices}
        self.log.debug(f"Starting discovery of device type {device_type}...")

        try:
            sock = self.open_socket()
        except OSError as e:
            self.log(e)
            return []

        results: queue.Queue = queue.Queue()
        handlers: List[threading.Thread] = []

        with sock:
            deadline = time.monotonic() + self.settings.timeout

            self.log.debug(f"Sending search request for device type {device_type}...")
            try:
                sock.sendto(self.build_request(device_type), (SSDP_ADDRESS, SSDP_PORT))
            except OSError as e:
                self.log(e)
                return []

            self.log.debug(f"Listening for UPnP response for device type {device_type}...")

            # listen for responses until the deadline passes
            while True:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                sock.settimeout(remaining)
                try:
                    data, address = sock.recvfrom(SSDP_BUFFER_SIZE)
                except socket.timeout:
                    break
                except OSError as e:
                    self.log(e)
                    break

                handler = threading.Thread(
                    target=self.handle_response,
                    args=(device_type, known_uuids, data, results),
                    daemon=True
                )
                handler.start()
                handlers.append(handler)

        # every handler has either put its result or given up once joined
        for handler in handlers:
            handler.join()

        devices = []
        seen: Set[str] = set()
        while True:
            try:
                device = results.get_nowait()
            except queue.Empty:
                break
            # some routers send several responses per search
            if device.uuid in seen:
                self.log.debug("Already processed device with UUID", device.uuid, "continuing...")
                continue
            seen.add(device.uuid)
            devices.append(device)

        self.log.debug(f"Discovery for device type {device_type} finished.")
        return devices

    def handle_response(self, device_type: str, known_uuids: Set[str], data: bytes, results: queue.Queue):
        """
        Puts the IGD that sent data on results, if it is a new and usable one
        Failures are logged and drop only this response
        """

        self.log.debug("Handling UPnP response:\n\n" + data.decode(errors="replace"))

        try:
            device = self.read_response(device_type, known_uuids, data)
        except UPnPError as e:
            self.log(e)
            return

        if device is not None:
            results.put(device)
            self.log.debug("Finished handling of UPnP response.")

    def read_response(self, device_type: str, known_uuids: Set[str], data: bytes) -> Optional[IGD]:
        """
        Returns the IGD that sent data, None if it is already known
        """

        headers = parse_response(data)

        responding_type = headers.get("St", "")
        if responding_type != device_type:
            raise ProtocolMismatchError(f"Unrecognized UPnP device of type {responding_type}")

        location = headers.get("Location", "")
        if not location:
            raise MalformedResponseError("Invalid IGD response: no location specified.")
        try:
            url = URL(location)
        except ValueError as e:
            raise MalformedResponseError(f"Invalid IGD location: {e}") from e
        if not url.is_absolute() or not url.host:
            raise MalformedResponseError(f"Invalid IGD location: {location}")

        usn = headers.get("USN", "")
        if not usn:
            raise MalformedResponseError("Invalid IGD response: USN not specified.")

        uuid = parse_uuid(usn)
        if not UUID_PATTERN.search(uuid):
            # some devices use their own uuid format
            self.log("Invalid IGD response: invalid device UUID", uuid, "(continuing anyway)")

        # don't re-add devices that are already known
        if uuid in known_uuids:
            self.log.debug(f"Ignoring known device with UUID {uuid}")
            return None

        root = self.resolver.fetch(location)
        services = self.resolver.resolve(location, root)

        # figure out our ip address on the network used to reach the igd
        local_ip_address = get_local_ip(url, self.settings.intranet, self.settings.http_timeout)

        return IGD(
            uuid=uuid,
            friendly_name=root.friendly_name,
            url=url,
            local_ip_address=local_ip_address,
            services=services
        )


def discover(intranet: Optional[str]=None, settings: Settings=None) -> List[IGD]:
    """
    intranet - local address to use for every IGD instead of probing for it
    settings - discovery settings (default is Settings())

    Discovers UPnP InternetGatewayDevices on the local network
    Returns a possibly empty list of IGDs, in no particular order
    """

    if settings is None:
        settings = Settings()
    if intranet:
        settings = settings.copy(intranet=intranet)

    return SSDP(settings).discover()
