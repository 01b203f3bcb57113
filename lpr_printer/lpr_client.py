# file: lpr_client.py
from enum import Enum
from typing import Optional, Tuple, Union

from .config import PrinterConfig
from .control_file import (
    JobContext,
    control_file_name,
    data_file_name,
    line_end,
    make_control_file,
    next_job_id,
    source_hostname,
)
from .diagnostics import DiagnosticEvent, DiagnosticLog
from .errors import LprConnectionError, LprEncodingError, LprError, LprProtocolError
from .transport import TcpTransport

DEFAULT_PORT = 515
DEFAULT_TIMEOUT = 30
DEFAULT_USERNAME = "lpr_printer"
DEFAULT_QUEUE = "raw"

ACK_OK = b"\x00"

CMD_PRINT_WAITING = "\x01"
CMD_RECEIVE_JOB = "\x02"
SUBCMD_CONTROL_FILE = "\x02"
SUBCMD_DATA_FILE = "\x03"

CONNECTION_ERROR = "Error in connection. Please change HOST or PORT."


class JobState(str, Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    SENDING_QUEUE_SELECT = "sending queue select"
    STARTING_JOB = "starting job"
    SENDING_CONTROL_HEADER = "sending control file header"
    SENDING_CONTROL_BODY = "sending control file"
    SENDING_DATA_HEADER = "sending data file header"
    SENDING_DATA_BODY = "sending data file"
    DONE = "done"
    FAILED = "failed"


class LprPrinter:
    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        io_timeout: Optional[float] = None,
        username: str = DEFAULT_USERNAME,
        use_empty_hostname: bool = False,
        literal_newlines: bool = True,
        encoding: str = "utf-8",
        transport: Optional[TcpTransport] = None,
    ):
        """
        Initialize the LPR client.
        :param host: Address of the print server.
        :param port: Port for LPD communication (default: 515).
        :param timeout: Seconds allowed to establish the connection.
        :param io_timeout: Read/write deadline once connected, None to block.
        :param username: Owner written into the control file.
        :param use_empty_hostname: Leave the source host blank, for jobs
            relayed on behalf of remote users.
        :param literal_newlines: Terminate lines with a literal backslash-n
            instead of a line feed.
        """
        self.host = host
        self.port = port
        self.timeout = timeout
        self.username = username
        self.use_empty_hostname = use_empty_hostname
        self.literal_newlines = literal_newlines
        self.encoding = encoding
        self.transport = transport or TcpTransport(io_timeout=io_timeout)
        self.state = JobState.IDLE
        self._log = DiagnosticLog()
        self._error_number = 0

    @classmethod
    def from_config(cls, config: PrinterConfig, transport: Optional[TcpTransport] = None) -> "LprPrinter":
        return cls(
            config.host,
            config.port,
            timeout=config.timeout,
            io_timeout=config.io_timeout,
            username=config.username,
            use_empty_hostname=config.use_empty_hostname,
            literal_newlines=config.literal_newlines,
            encoding=config.encoding,
            transport=transport,
        )

    def set_port(self, port: int):
        self.port = port
        self._log.message(f"Setting port: {self.port}")

    def set_timeout(self, timeout: float):
        self.timeout = timeout
        self._log.message(f"Setting time out: {self.timeout}")

    def set_username(self, username: str):
        self.username = username
        self._log.message(f"Setting username: {self.username}")

    @property
    def last_error(self) -> Optional[str]:
        return self._log.last_error

    @property
    def last_error_number(self) -> int:
        return self._error_number

    @property
    def debug(self) -> Tuple[DiagnosticEvent, ...]:
        return self._log.events

    def get_err_no(self) -> int:
        return self.last_error_number

    def get_err_str(self) -> Optional[str]:
        return self.last_error

    def get_debug(self) -> Tuple[DiagnosticEvent, ...]:
        return self.debug

    def print_waiting_jobs(self, queue: str) -> bool:
        """
        Ask the daemon to print any jobs waiting in a queue.
        :param queue: Print queue name on the server.
        :return: True if the daemon acknowledged the command.
        """
        eol = line_end(self.literal_newlines)
        try:
            with self._connect() as conn:
                self._enter(JobState.SENDING_QUEUE_SELECT, "Print any waiting job...")
                self._send_command(
                    conn,
                    f"{CMD_PRINT_WAITING}{queue}{eol}",
                    f"Error while start print jobs on queue {queue}",
                )
                self._enter(JobState.DONE, f"Queue {queue} started")
        except LprError as e:
            self._fail(e)
            return False
        return True

    def print_text(self, text: Union[str, bytes] = "", queue: str = DEFAULT_QUEUE, job_id: Optional[int] = None) -> bool:
        """
        Submit a print job holding text to the LPD server.
        :param text: Payload to print; str is encoded with the client encoding.
        :param queue: Print queue name on the server.
        :param job_id: Job number, taken from the process counter when omitted.
        :return: True if every step was acknowledged.
        """
        context = JobContext(
            job_id=next_job_id() if job_id is None else job_id,
            username=self.username,
            hostname=source_hostname(self.use_empty_hostname),
            queue=queue,
        )
        eol = line_end(self.literal_newlines)

        try:
            data = self._encode(text)
            with self._connect() as conn:
                # Step 1: Send the "Receive a printer job" command
                self._enter(JobState.STARTING_JOB, "Starting printer...")
                self._send_command(
                    conn,
                    f"{CMD_RECEIVE_JOB}{queue}{eol}",
                    f"Error while start printing on queue {queue}",
                )

                # Step 2: Send the control file
                self._log.message("Setting cfA control String")
                ctrl = self._encode(make_control_file(context, eol))
                self._enter(JobState.SENDING_CONTROL_HEADER, "Sending control file...")
                self._send_command(
                    conn,
                    f"{SUBCMD_CONTROL_FILE}{len(ctrl)} {control_file_name(context)}{eol}",
                    "Error while start sending control file",
                )
                self._enter(JobState.SENDING_CONTROL_BODY, "Writing control file...")
                self._send_command(conn, ctrl + b"\0", "Error while sending control file")

                # Step 3: Send the data file
                self._enter(JobState.SENDING_DATA_HEADER, "Sending data...")
                self._send_command(
                    conn,
                    f"{SUBCMD_DATA_FILE}{len(data)} {data_file_name(context)}{eol}",
                    "Error while start sending data file",
                )
                self._enter(JobState.SENDING_DATA_BODY, "Writing data...")
                self._send_command(conn, data + b"\0", "Error while sending data file")

                self._enter(JobState.DONE, "Data received!!!")
        except LprError as e:
            self._fail(e)
            return False
        return True

    def _connect(self):
        self._enter(JobState.CONNECTING, f"Connecting... Host: {self.host}, Port: {self.port}")
        try:
            return self.transport.connect(self.host, self.port, self.timeout)
        except LprConnectionError as e:
            raise LprConnectionError(CONNECTION_ERROR, e.errno) from e

    def _enter(self, state: JobState, message: str):
        self.state = state
        self._log.message(message)

    def _send_command(self, conn, command: Union[str, bytes], error_message: str):
        """
        Write one command and wait for its single acknowledgement byte.
        :param conn: Connected socket.
        :param command: Bytes to write; str is encoded with the client encoding.
        :param error_message: Recorded when the daemon refuses the command.
        """
        payload = self._encode(command)
        try:
            conn.sendall(payload)
            ack = conn.recv(1)
        except OSError as e:
            raise LprConnectionError(
                f"Connection lost while {self.state.value}: {e}", e.errno or 0
            ) from e
        if ack != ACK_OK:
            raise LprProtocolError(error_message, self.state.value, ack)

    def _encode(self, value: Union[str, bytes]) -> bytes:
        if not isinstance(value, str):
            return bytes(value)
        try:
            return value.encode(self.encoding)
        except UnicodeError as e:
            raise LprEncodingError(f"Cannot encode job for the printer with {self.encoding}: {e}") from e

    def _fail(self, error: LprError):
        if isinstance(error, LprConnectionError):
            self._error_number = error.errno
        self.state = JobState.FAILED
        self._log.error(str(error))
