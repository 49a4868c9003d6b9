SSDP_ADDRESS = "239.255.255.250"
SSDP_PORT = 1900
SSDP_REQUEST = (
    "M-SEARCH * HTTP/1.1\r\n"
    "Host: {address}:{port}\r\n"
    "St: {device_type}\r\n"
    'Man: "ssdp:discover"\r\n'
    "Mx: {mx}\r\n"
    "\r\n"
)
# large enough for any single SSDP datagram
SSDP_BUFFER_SIZE = 1500
WAIT_TIME = 3

USER_AGENT = "pyigd/1.0"

IGD_V1 = "urn:schemas-upnp-org:device:InternetGatewayDevice:1"
IGD_V2 = "urn:schemas-upnp-org:device:InternetGatewayDevice:2"

WAN_DEVICE_V1 = "urn:schemas-upnp-org:device:WANDevice:1"
WAN_DEVICE_V2 = "urn:schemas-upnp-org:device:WANDevice:2"
WAN_CONNECTION_DEVICE_V1 = "urn:schemas-upnp-org:device:WANConnectionDevice:1"
WAN_CONNECTION_DEVICE_V2 = "urn:schemas-upnp-org:device:WANConnectionDevice:2"

WAN_IP_CONNECTION_V1 = "urn:schemas-upnp-org:service:WANIPConnection:1"
WAN_IP_CONNECTION_V2 = "urn:schemas-upnp-org:service:WANIPConnection:2"
WAN_PPP_CONNECTION_V1 = "urn:schemas-upnp-org:service:WANPPPConnection:1"

SOAP_ENVELOPE = (
    '<?xml version="1.0" ?>\n'
    '<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/" '
    's:encodingStyle="http://schemas.xmlsoap.org/soap/encoding/">\n'
    "<s:Body>{content}</s:Body>\n"
    "</s:Envelope>\n"
)

# UPnP control errors meaning there is no such port mapping
SPECIFIED_ARRAY_INDEX_INVALID = 713
NO_SUCH_ENTRY_IN_ARRAY = 714
NO_SUCH_MAPPING_ERRORS = (SPECIFIED_ARRAY_INDEX_INVALID, NO_SUCH_ENTRY_IN_ARRAY)
