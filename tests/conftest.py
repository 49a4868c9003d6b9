"""Shared fixtures for pyigd tests."""

from __future__ import annotations

import logging
import re
import socket
from unittest.mock import MagicMock

import pytest

from pyigd.log import Log
from pyigd.settings import Settings

ROOT_URL = "http://192.168.1.1:5000/rootDesc.xml"
UUID = "2fac1234-31f8-11b4-a222-08002b34c003"

IGD_V1_DESCRIPTION = b"""<?xml version="1.0"?>
<root xmlns="urn:schemas-upnp-org:device-1-0">
  <specVersion><major>1</major><minor>0</minor></specVersion>
  <device>
    <deviceType>urn:schemas-upnp-org:device:InternetGatewayDevice:1</deviceType>
    <friendlyName>Home Router</friendlyName>
    <serviceList>
      <service>
        <serviceType>urn:schemas-upnp-org:service:Layer3Forwarding:1</serviceType>
        <serviceId>urn:upnp-org:serviceId:L3Forwarding1</serviceId>
        <controlURL>/ctl/L3F</controlURL>
      </service>
    </serviceList>
    <deviceList>
      <device>
        <deviceType>urn:schemas-upnp-org:device:WANDevice:1</deviceType>
        <friendlyName>WANDevice</friendlyName>
        <deviceList>
          <device>
            <deviceType>urn:schemas-upnp-org:device:WANConnectionDevice:1</deviceType>
            <friendlyName>WANConnectionDevice</friendlyName>
            <serviceList>
              <service>
                <serviceType>urn:schemas-upnp-org:service:WANIPConnection:1</serviceType>
                <serviceId>urn:upnp-org:serviceId:WANIPConn1</serviceId>
                <controlURL>/ctl/IPConn</controlURL>
              </service>
              <service>
                <serviceType>urn:schemas-upnp-org:service:WANPPPConnection:1</serviceType>
                <serviceId>urn:upnp-org:serviceId:WANPPPConn1</serviceId>
                <controlURL>ctl/PPPConn?conn=1</controlURL>
              </service>
            </serviceList>
          </device>
        </deviceList>
      </device>
    </deviceList>
  </device>
</root>
"""

IGD_V2_DESCRIPTION = b"""<?xml version="1.0"?>
<root xmlns="urn:schemas-upnp-org:device-1-0">
  <device>
    <deviceType>urn:schemas-upnp-org:device:InternetGatewayDevice:2</deviceType>
    <friendlyName>Fibre Box</friendlyName>
    <deviceList>
      <device>
        <deviceType>urn:schemas-upnp-org:device:WANDevice:2</deviceType>
        <deviceList>
          <device>
            <deviceType>urn:schemas-upnp-org:device:WANConnectionDevice:2</deviceType>
            <serviceList>
              <service>
                <serviceType>urn:schemas-upnp-org:service:WANIPConnection:1</serviceType>
                <serviceId>urn:upnp-org:serviceId:WANIPConn1</serviceId>
                <controlURL>/ctl/IPConn1</controlURL>
              </service>
              <service>
                <serviceType>urn:schemas-upnp-org:service:WANIPConnection:2</serviceType>
                <serviceId>urn:upnp-org:serviceId:WANIPConn2</serviceId>
                <controlURL>http://10.0.0.1:80/ctl/IPConn2?v=2</controlURL>
              </service>
              <service>
                <serviceType>urn:schemas-upnp-org:service:WANPPPConnection:1</serviceType>
                <serviceId>urn:upnp-org:serviceId:WANPPPConn1</serviceId>
                <controlURL></controlURL>
              </service>
            </serviceList>
          </device>
        </deviceList>
      </device>
    </deviceList>
  </device>
</root>
"""

MEDIA_SERVER_DESCRIPTION = b"""<?xml version="1.0"?>
<root xmlns="urn:schemas-upnp-org:device-1-0">
  <device>
    <deviceType>urn:schemas-upnp-org:device:MediaServer:1</deviceType>
    <friendlyName>NAS</friendlyName>
  </device>
</root>
"""


def ssdp_response(
    st: str = "urn:schemas-upnp-org:device:InternetGatewayDevice:1",
    location: str | None = ROOT_URL,
    usn: str | None = f"uuid:{UUID}::urn:schemas-upnp-org:device:InternetGatewayDevice:1",
) -> bytes:
    lines = ["HTTP/1.1 200 OK", "CACHE-CONTROL: max-age=120", f"ST: {st}"]
    if location is not None:
        lines.append(f"LOCATION: {location}")
    if usn is not None:
        lines.append(f"USN: {usn}")
    lines.append("SERVER: Linux/3.14 UPnP/1.1 MiniUPnPd/2.1")
    lines.append("EXT:")
    return ("\r\n".join(lines) + "\r\n\r\n").encode()


def soap_response(action: str, content: str = "") -> bytes:
    return (
        '<?xml version="1.0"?>'
        '<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/" '
        's:encodingStyle="http://schemas.xmlsoap.org/soap/encoding/">'
        "<s:Body>"
        f'<u:{action}Response xmlns:u="urn:schemas-upnp-org:service:WANIPConnection:1">'
        f"{content}"
        f"</u:{action}Response>"
        "</s:Body>"
        "</s:Envelope>"
    ).encode()


def soap_fault(code: int, description: str) -> bytes:
    return (
        '<?xml version="1.0"?>'
        '<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/">'
        "<s:Body><s:Fault>"
        "<faultcode>s:Client</faultcode><faultstring>UPnPError</faultstring>"
        '<detail><UPnPError xmlns="urn:schemas-upnp-org:control-1-0">'
        f"<errorCode>{code}</errorCode>"
        f"<errorDescription>{description}</errorDescription>"
        "</UPnPError></detail>"
        "</s:Fault></s:Body>"
        "</s:Envelope>"
    ).encode()


def http_response(status_code: int = 200, content: bytes = b"", reason: str = "OK") -> MagicMock:
    """A stand-in for requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.reason = reason
    response.content = content
    response.text = content.decode()
    return response


class FakeSSDPSocket:
    """UDP socket answering each M-SEARCH with whatever responder returns for it."""

    def __init__(self, responder):
        self.responder = responder
        self.sent: list[tuple[bytes, tuple]] = []
        self.pending: list[bytes] = []
        self.timeouts: list[float] = []
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.closed = True
        return False

    def settimeout(self, timeout):
        self.timeouts.append(timeout)

    def sendto(self, data, address):
        self.sent.append((data, address))
        self.pending = list(self.responder(data))
        return len(data)

    def recvfrom(self, size):
        if self.pending:
            return self.pending.pop(0), ("192.168.1.1", 1900)
        raise socket.timeout("timed out")


def search_target(request: bytes) -> str:
    return re.search(rb"St: (\S+)\r\n", request).group(1).decode()


@pytest.fixture
def settings():
    """Settings which never probe the network for the local address."""
    return Settings(timeout=1, debug=True, intranet="192.168.1.10")


@pytest.fixture
def log_records():
    """Captures what a Log writes."""
    records: list[logging.LogRecord] = []

    class _Collect(logging.Handler):
        def emit(self, record):
            records.append(record)

    logger = logging.getLogger("pyigd.tests")
    logger.handlers = [_Collect()]
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    yield logger, records
    logger.handlers = []


@pytest.fixture(autouse=True)
def cleanup_logging():
    """Remove handlers added by Log.enable() between tests."""
    yield
    logger = logging.getLogger("pyigd")
    for handler in logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            handler.close()
            logger.removeHandler(handler)


def make_log(logger: logging.Logger, debug: bool = True) -> Log:
    return Log(logger=logger, debug=debug)
