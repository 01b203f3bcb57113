"""TCP transport to the printer daemon."""

import logging
import socket
from typing import Optional

from .errors import LprConnectionError

logger = logging.getLogger(__name__)


class TcpTransport:
    def __init__(self, io_timeout: Optional[float] = None):
        """
        :param io_timeout: Seconds a single read or write may block once
            connected. None blocks indefinitely.
        """
        self.io_timeout = io_timeout

    def connect(self, host: str, port: int, timeout: float) -> socket.socket:
        """
        Open a stream connection to host:port.
        :param timeout: Seconds allowed for establishing the connection.
        :return: Connected socket, usable as a context manager.
        """
        try:
            conn = socket.create_connection((host, port), timeout=timeout)
        except OSError as e:
            logger.error(f"Cannot connect to {host}:{port}: {e}")
            raise LprConnectionError(str(e), e.errno or 0) from e
        conn.settimeout(self.io_timeout)
        return conn
