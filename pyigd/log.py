import logging
from typing import Optional

class Log:
    def __init__(self, logger: Optional[logging.Logger] = None, debug: bool = False):
        """
        logger - sink for log lines (default is a silent "pyigd" logger)
        debug - whether verbose tracing is written as well

        Every message goes to the sink; debug messages only when debug is set.
        Nothing is visible until the sink has a handler, see enable()
        """

        if logger is None:
            logger = logging.getLogger("pyigd")
            if not logger.handlers:
                logger.addHandler(logging.NullHandler())
        self.logger = logger
        self.debug_enabled = debug

    def enable(self, stream=None) -> "Log":
        """
        stream - where to write log lines (default is stderr)

        Attaches a handler printing "upnp: " prefixed, timestamped lines
        """

        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter("upnp: %(asctime)s %(message)s"))
        self.logger.addHandler(handler)
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False
        return self

    def __call__(self, *args):
        self.logger.info(self._join(args))

    def debug(self, *args):
        if self.debug_enabled:
            self.logger.debug(self._join(args))

    @staticmethod
    def _join(args) -> str:
        return " ".join([str(arg) for arg in args])

    def __repr__(self) -> str:
        return f"Log(logger={self.logger.name}, debug={self.debug_enabled})"
