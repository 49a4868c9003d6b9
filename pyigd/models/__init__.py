from pyigd.models.protocol import Protocol
from pyigd.models.device import DeviceKind, DeviceNode, ServiceNode
from pyigd.models.mapping import PortMapping
from pyigd.models.igd import IGD, IGDService
