"""Print on network printers through the Line Printer Daemon protocol (RFC 1179)."""

from .config import PrinterConfig, load_config
from .control_file import JobContext, make_control_file, next_job_id
from .diagnostics import DiagnosticEvent, DiagnosticLog, EventKind
from .errors import LprConnectionError, LprEncodingError, LprError, LprProtocolError
from .lpd_server import LPDServer, ReceivedJob
from .lpr_client import JobState, LprPrinter
from .transport import TcpTransport

__all__ = [
    "DiagnosticEvent",
    "DiagnosticLog",
    "EventKind",
    "JobContext",
    "JobState",
    "LPDServer",
    "LprConnectionError",
    "LprEncodingError",
    "LprError",
    "LprPrinter",
    "LprProtocolError",
    "PrinterConfig",
    "ReceivedJob",
    "TcpTransport",
    "load_config",
    "make_control_file",
    "next_job_id",
]
