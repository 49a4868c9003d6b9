from __future__ import annotations

import socket
from typing import Optional

from yarl import URL

from pyigd.exceptions import LocalAddressError

def get_local_ip(url: URL, intranet: Optional[str]=None, timeout: Optional[float]=None) -> str:
    """
    url - url of the device to reach
    intranet - address to return instead of probing (no network activity)
    timeout - connect timeout in seconds

    Returns the address of the local end of a connection to the device
    Raises LocalAddressError if the device cannot be connected to
    """

    if intranet:
        return intranet

    url = URL(url)
    if not url.host:
        raise LocalAddressError(f"No host in {url}")
    # yarl fills in the scheme's default port
    port = url.port or 80

    try:
        # connect to igd device to check what ip is
        with socket.create_connection((url.host, port), timeout=timeout) as s:
            return s.getsockname()[0]
    except OSError as e:
        raise LocalAddressError(f"Could not connect to {url.host}:{port}: {e}") from e
