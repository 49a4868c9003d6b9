from __future__ import annotations

from typing import Dict, Optional, Tuple

import requests
from bs4 import BeautifulSoup

from pyigd.settings import Settings
from pyigd.static import SOAP_ENVELOPE, NO_SUCH_MAPPING_ERRORS
from pyigd.exceptions import ActionError, NoSuchMappingError, TransportError

class Requester:
    def __init__(self, settings: Settings=None):
        self.settings = settings if settings is not None else Settings()
        self.log = self.settings.log

    def make_headers(self, urn: str, action: str) -> Dict[str, str]:
        """
        Generates headers for request

        urn - service type the action belongs to
        action - SOAPAction
        """

        return {
            "Content-Type": 'text/xml; charset="utf-8"',
            "User-Agent": self.settings.user_agent,
            "SOAPAction": '"{urn}#{action}"'.format(
                urn=urn,
                action=action
            ),
            "Connection": "Close",
            "Cache-Control": "no-cache",
            "Pragma": "no-cache",
        }

    @staticmethod
    def make_body(content: str) -> str:
        """
        Generates body for request

        content - body content
        """

        return SOAP_ENVELOPE.format(content=content)

    def do_request(self, url: str, urn: str, action: str, content: str) -> bytes:
        """
        url - control url of the service
        urn - service type the action belongs to
        action - name of the action
        content - action element to place in the SOAP body

        Returns the response body
        Raises ActionError if the device answers with an HTTP error,
            TransportError if it could not be reached
        """

        headers = self.make_headers(urn, action)
        body = self.make_body(content)

        self.log.debug("SOAP Request URL:", url)
        self.log.debug("SOAP Action:", headers["SOAPAction"])
        self.log.debug("SOAP Request:\n\n" + body)

        try:
            r = requests.post(
                url,
                headers=headers,
                data=body.encode("utf-8"),
                timeout=self.settings.control_timeout
            )
        except requests.RequestException as e:
            raise TransportError(f"{action}: {e}") from e

        response = r.content
        self.log.debug("SOAP Response:\n\n" + r.text + "\n")

        if r.status_code >= 400:
            status = f"{r.status_code} {r.reason}".strip()
            error_code, error_description = self.parse_fault(response)
            if error_code in NO_SUCH_MAPPING_ERRORS:
                raise NoSuchMappingError(action, status, response, error_code, error_description)
            raise ActionError(action, status, response, error_code, error_description)

        return response

    @staticmethod
    def parse_fault(response: bytes) -> Tuple[Optional[int], Optional[str]]:
        """
        Returns UPnP error code and description of a SOAP fault,
            (None, None) if the response carries none
        """

        if not response:
            return None, None

        parser = BeautifulSoup(response, "lxml-xml")
        code = parser.find("errorCode")
        description = parser.find("errorDescription")
        try:
            error_code = int(code.get_text().strip()) if code is not None else None
        except ValueError:
            error_code = None
        error_description = description.get_text().strip() if description is not None else None

        return error_code, error_description
