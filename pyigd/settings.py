from __future__ import annotations

from typing import Optional

from pyigd.log import Log
from pyigd.static import WAIT_TIME, USER_AGENT

class Settings:
    def __init__(self,
        timeout: float=WAIT_TIME,
        debug: bool=False,
        log: Log=None,
        user_agent: str=USER_AGENT,
        intranet: Optional[str]=None,
        http_timeout: Optional[float]=10,
        control_timeout: Optional[float]=None
    ):
        """
        timeout - how long each discovery pass listens for IGD responses, in seconds
            (also sent as the MX value of the search)
        debug - whether to trace every step of discovery and control
        log - log sink (default is a silent Log, see Log.enable);
            its own debug flag is left alone, debug decides for these settings
        user_agent - User-Agent header sent with SOAP requests
        intranet - local address to report for every IGD instead of probing for it
        http_timeout - timeout for description fetches and local address probes
        control_timeout - timeout for SOAP actions (default is no timeout)
        """

        if timeout < 0:
            raise ValueError("Timeout must not be negative")
        self.timeout = timeout
        self.debug = debug
        if log is None:
            log = Log()
        # own Log over the same sink, so the flag stays with these settings
        self.log = Log(logger=log.logger, debug=debug)
        self.user_agent = user_agent
        self.intranet = intranet or None
        self.http_timeout = http_timeout
        self.control_timeout = control_timeout

    def copy(self, **changes) -> Settings:
        """
        Returns new Settings with the given fields replaced
        """

        values = dict(
            timeout=self.timeout,
            debug=self.debug,
            log=self.log,
            user_agent=self.user_agent,
            intranet=self.intranet,
            http_timeout=self.http_timeout,
            control_timeout=self.control_timeout
        )
        values.update(changes)
        return Settings(**values)

    @property
    def mx(self) -> int:
        return int(self.timeout)

    def __repr__(self) -> str:
        return f"Settings(timeout={self.timeout}, debug={self.debug}, intranet={self.intranet}, user_agent={self.user_agent})"
