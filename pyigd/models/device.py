"""
Device description tree, as advertised by a device's root description XML.
Only lives while WAN services are being located.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Tuple

from bs4 import BeautifulSoup
from bs4.element import Tag

from pyigd.exceptions import MalformedResponseError
from pyigd.static import (
    IGD_V1, IGD_V2,
    WAN_DEVICE_V1, WAN_DEVICE_V2,
    WAN_CONNECTION_DEVICE_V1, WAN_CONNECTION_DEVICE_V2,
    WAN_IP_CONNECTION_V1, WAN_IP_CONNECTION_V2, WAN_PPP_CONNECTION_V1,
)

class DeviceKind(Enum):
    IGD_V1 = IGD_V1
    IGD_V2 = IGD_V2

    @classmethod
    def from_device_type(cls, device_type: str) -> Optional[DeviceKind]:
        """
        Returns the kind of gateway a device type URN names, None if it is not one
        """

        try:
            return cls(device_type)
        except ValueError:
            return None

    @property
    def wan_device(self) -> str:
        return WAN_DEVICE_V1 if self is DeviceKind.IGD_V1 else WAN_DEVICE_V2

    @property
    def wan_connection_device(self) -> str:
        if self is DeviceKind.IGD_V1:
            return WAN_CONNECTION_DEVICE_V1
        return WAN_CONNECTION_DEVICE_V2

    @property
    def service_types(self) -> Tuple[str, ...]:
        # IGD:2 still allows the version 1 PPP service
        if self is DeviceKind.IGD_V1:
            return (WAN_IP_CONNECTION_V1, WAN_PPP_CONNECTION_V1)
        return (WAN_IP_CONNECTION_V2, WAN_PPP_CONNECTION_V1)


class ServiceNode:
    def __init__(self, service_id: str="", service_type: str="", control_url: str=""):
        self.service_id = service_id
        self.service_type = service_type
        self.control_url = control_url

    @classmethod
    def from_tag(cls, tag: Tag) -> ServiceNode:
        return cls(
            service_id=_child_text(tag, "serviceId"),
            service_type=_child_text(tag, "serviceType"),
            control_url=_child_text(tag, "controlURL"),
        )

    def __repr__(self) -> str:
        return f"ServiceNode(service_id={self.service_id}, service_type={self.service_type}, control_url={self.control_url})"


class DeviceNode:
    def __init__(self,
        device_type: str="",
        friendly_name: str="",
        devices: List[DeviceNode]=None,
        services: List[ServiceNode]=None
    ):
        """
        device_type - device type URN
        friendly_name - human readable name of the device
        devices - embedded devices, in document order
        services - services of this device, in document order
        """

        self.device_type = device_type
        self.friendly_name = friendly_name
        self.devices = devices or []
        self.services = services or []

    @property
    def kind(self) -> Optional[DeviceKind]:
        return DeviceKind.from_device_type(self.device_type)

    def child_devices(self, device_type: str) -> List[DeviceNode]:
        return [device for device in self.devices if device.device_type == device_type]

    def child_services(self, service_type: str) -> List[ServiceNode]:
        return [service for service in self.services if service.service_type == service_type]

    @classmethod
    def from_tag(cls, tag: Tag) -> DeviceNode:
        devices = []
        device_list = tag.find("deviceList", recursive=False)
        if device_list is not None:
            devices = [cls.from_tag(child) for child in device_list.find_all("device", recursive=False)]

        services = []
        service_list = tag.find("serviceList", recursive=False)
        if service_list is not None:
            services = [ServiceNode.from_tag(child) for child in service_list.find_all("service", recursive=False)]

        return cls(
            device_type=_child_text(tag, "deviceType"),
            friendly_name=_child_text(tag, "friendlyName"),
            devices=devices,
            services=services,
        )

    @classmethod
    def parse(cls, document: bytes) -> DeviceNode:
        """
        document - root device description XML

        Returns the root device of the description
        Raises MalformedResponseError if there is no root device
        """

        parser = BeautifulSoup(document, "lxml-xml")
        root = parser.find("root")
        if root is None:
            raise MalformedResponseError("Device description has no root element")
        device = root.find("device", recursive=False)
        if device is None:
            raise MalformedResponseError("Device description has no root device")

        return cls.from_tag(device)

    def __repr__(self) -> str:
        return f"DeviceNode(device_type={self.device_type}, friendly_name={self.friendly_name}, devices={self.devices}, services={self.services})"


def _child_text(tag: Tag, name: str) -> str:
    child = tag.find(name, recursive=False)
    if child is None:
        return ""
    return child.get_text().strip()
