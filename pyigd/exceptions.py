"""Exceptions raised by pyigd."""

from __future__ import annotations

from typing import Optional


class UPnPError(Exception):
    """Base exception for all UPnP errors."""


class TransportError(UPnPError):
    """A socket or HTTP exchange with a device failed."""


class LocalAddressError(TransportError):
    """The local address used to reach a device could not be determined."""


class MalformedResponseError(UPnPError):
    """A device answered with something that could not be parsed."""


class ProtocolMismatchError(UPnPError):
    """A device answered for a device type other than the one requested."""


class DescriptionError(UPnPError):
    """A device description has no usable WAN connection service."""


class UnsupportedDeviceError(DescriptionError, ProtocolMismatchError):
    """The root device of a description is not an InternetGatewayDevice."""


class NoCompatibleServicesError(DescriptionError):
    """No WANIPConnection or WANPPPConnection service was found."""


class ActionError(UPnPError):
    def __init__(
        self,
        action: str,
        status: str,
        body: bytes = b"",
        error_code: Optional[int] = None,
        error_description: Optional[str] = None
    ):
        """
        action - name of the SOAP action which failed
        status - HTTP status line text, e.g. "500 Internal Server Error"
        body - raw response body
        error_code - UPnP error code from the SOAP fault, if any
        error_description - UPnP error description from the SOAP fault, if any
        """

        self.action = action
        self.status = status
        self.body = body
        self.error_code = error_code
        self.error_description = error_description

        message = f"{action}: {status}"
        if error_code is not None:
            message += f" (UPnP error {error_code}: {error_description})"
        super().__init__(message)


class NoSuchMappingError(ActionError):
    """The device has no port mapping matching the request."""
