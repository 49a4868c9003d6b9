"""
pyigd: UPnP InternetGatewayDevice discovery and port mapping

Discover the IGDs on the local network with discover(), then map ports with
IGD.add_port_mapping() or per service with IGDService.add_port_mapping().
"""

from pyigd.log import Log
from pyigd.settings import Settings
from pyigd.models import Protocol, PortMapping, IGD, IGDService
from pyigd.network.ssdp import SSDP, discover
from pyigd.exceptions import (
    UPnPError,
    TransportError,
    LocalAddressError,
    MalformedResponseError,
    ProtocolMismatchError,
    DescriptionError,
    UnsupportedDeviceError,
    NoCompatibleServicesError,
    ActionError,
    NoSuchMappingError,
)

__version__ = "1.0.0"
