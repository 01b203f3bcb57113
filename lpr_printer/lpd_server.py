# file: lpd_server.py
import argparse
import logging
import os
import socket
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional

from .control_file import line_end

LOG_FILE = "./lpd_server.log"

ACK_OK = b"\x00"
ACK_REFUSED = b"\x01"


@dataclass
class ReceivedJob:
    queue: str
    control_name: str = ""
    control: bytes = b""
    data_name: str = ""
    data: bytes = b""
    aborted: bool = False


class _Refused(Exception):
    pass


class _Session:
    """One client connection: buffered reads, a transcript of every byte read, and ack counting."""

    def __init__(self, conn, eol: bytes, refuse_step: Optional[int]):
        self.conn = conn
        self.rfile = conn.makefile("rb")
        self.eol = eol
        self.refuse_step = refuse_step
        self.acks = 0
        self.transcript = bytearray()

    def read(self, size: int) -> bytes:
        data = self.rfile.read(size)
        self.transcript += data
        return data

    def read_line(self) -> str:
        line = b""
        while not line.endswith(self.eol):
            byte = self.read(1)
            if not byte:
                raise ConnectionError("Connection closed in the middle of a command")
            line += byte
        return line[: -len(self.eol)].decode("utf-8")

    def ack(self):
        self.acks += 1
        if self.refuse_step is not None and self.acks == self.refuse_step:
            self.conn.sendall(ACK_REFUSED)
            raise _Refused(f"refused step {self.acks}")
        self.conn.sendall(ACK_OK)

    def close(self):
        self.rfile.close()


class LPDServer:
    def __init__(
        self,
        host="0.0.0.0",
        port=515,
        spool_dir="./spool",
        max_threads=10,
        literal_newlines=True,
        refuse_step=None,
        conn_timeout=30.0,
    ):
        """
        Initialize the LPD server.
        :param host: Host to bind the server (default: 0.0.0.0).
        :param port: Port for the LPD protocol (default: 515, 0 picks a free port).
        :param spool_dir: Directory to store print jobs.
        :param max_threads: Maximum number of threads in the thread pool.
        :param literal_newlines: Expect command lines ending in a literal backslash-n.
        :param refuse_step: Answer the Nth acknowledgement of each connection
            with an error and hang up.
        """
        self.host = host
        self.port = port
        self.spool_dir = spool_dir
        self.max_threads = max_threads
        self.eol = line_end(literal_newlines).encode("ascii")
        self.refuse_step = refuse_step
        self.conn_timeout = conn_timeout
        os.makedirs(spool_dir, exist_ok=True)
        self.server_socket = None
        self.running = False
        self.ready = threading.Event()
        self.jobs: List[ReceivedJob] = []
        self.waiting_requests: List[str] = []
        self.transcripts: List[bytes] = []
        self._handled = threading.Condition()

    def receive_large_file(self, session, file_path, file_size, chunk_size=4096):
        """
        Receive a file from a connection and save it to disk.
        :param session: The client session.
        :param file_path: Path to save the received file.
        :param file_size: Total size of the file in bytes.
        :param chunk_size: Size of each chunk to receive (default: 4 KB).
        :return: The received bytes.
        """
        received = bytearray()
        with open(file_path, "wb") as file:
            while len(received) < file_size:
                remaining = file_size - len(received)
                chunk = session.read(min(chunk_size, remaining))
                if not chunk:
                    raise ConnectionError("Connection closed prematurely")
                file.write(chunk)
                received += chunk
        if session.read(1) != b"\0":
            raise ConnectionError(f"Missing end of file marker after {file_path}")
        logging.info(f"File {file_path} received successfully (Size: {file_size} bytes)")
        return bytes(received)

    def handle_connection(self, conn, addr):
        """
        Handle an incoming connection from a client.
        """
        logging.info(f"Connection established with {addr}")
        conn.settimeout(self.conn_timeout)
        session = _Session(conn, self.eol, self.refuse_step)
        try:
            command = session.read(1)
            if command == b"\x01":  # Print any waiting jobs
                queue_name = session.read_line()
                logging.info(f"Print waiting jobs on queue: {queue_name}")
                self.waiting_requests.append(queue_name)
                session.ack()
            elif command == b"\x02":  # Receive a print job
                self.receive_print_job(session)
            elif command:
                logging.warning(f"Unknown command received: {command}")
                conn.sendall(ACK_REFUSED)
        except _Refused as e:
            logging.warning(f"Connection from {addr}: {e}")
        except (OSError, ValueError) as e:
            logging.error(f"Error handling connection from {addr}: {e}")
        finally:
            session.close()
            conn.close()
            with self._handled:
                self.transcripts.append(bytes(session.transcript))
                self._handled.notify_all()
            logging.info(f"Connection closed with {addr}")

    def receive_print_job(self, session):
        """
        Handle the 'Receive Print Job' command and its subcommands.
        """
        queue_name = session.read_line()
        logging.info(f"Receiving print job for queue: {queue_name}")
        session.ack()

        job = ReceivedJob(queue=queue_name)
        try:
            while True:
                subcommand = session.read(1)
                if not subcommand:
                    break
                if subcommand == b"\x01":  # Abort job
                    session.read_line()
                    job.aborted = True
                    logging.info(f"Job aborted on queue: {queue_name}")
                    break
                if subcommand not in (b"\x02", b"\x03"):
                    logging.warning(f"Unknown subcommand received: {subcommand}")
                    session.conn.sendall(ACK_REFUSED)
                    break

                file_type = "control file" if subcommand == b"\x02" else "data file"
                file_size, file_name = self._read_size_prefixed_data(session, file_type)
                session.ack()
                file_path = os.path.join(self.spool_dir, os.path.basename(file_name) or file_type)
                content = self.receive_large_file(session, file_path, file_size)
                if subcommand == b"\x02":
                    job.control_name, job.control = file_name, content
                else:
                    job.data_name, job.data = file_name, content
                session.ack()
        finally:
            self.jobs.append(job)

        logging.info(f"Print job received for queue: {queue_name}")

    def _read_size_prefixed_data(self, session, file_type):
        """
        Read a size-prefixed command for file transfer.
        """
        size_data = session.read_line()
        logging.info(f"Receiving {file_type} with size: {size_data}")
        size, _, name = size_data.partition(" ")
        return int(size), name

    def wait_for_connections(self, count, timeout=5.0):
        """
        Block until at least count connections have been fully handled.
        """
        with self._handled:
            return self._handled.wait_for(lambda: len(self.transcripts) >= count, timeout)

    def start(self):
        """
        Start the LPD server using a thread pool for multithreading.
        """
        logging.info(f"Starting LPD server on {self.host}:{self.port}...")
        self.running = True
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as server_socket:
            server_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            server_socket.bind((self.host, self.port))
            server_socket.listen(5)
            server_socket.settimeout(0.2)
            self.port = server_socket.getsockname()[1]
            self.server_socket = server_socket
            logging.info("LPD server is running and waiting for connections...")
            self.ready.set()

            with ThreadPoolExecutor(max_workers=self.max_threads) as executor:
                while self.running:
                    try:
                        conn, addr = server_socket.accept()
                    except socket.timeout:
                        continue
                    except OSError as e:
                        if self.running:
                            logging.error(f"Error accepting connection: {e}")
                        continue
                    executor.submit(self.handle_connection, conn, addr)

    def stop(self):
        """
        Stop the LPD server.
        """
        logging.info("Stopping LPD server...")
        self.running = False
        if self.server_socket:
            self.server_socket.close()
        logging.info("LPD server stopped.")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Receive RFC 1179 print jobs into a spool directory.")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=515)
    parser.add_argument("--spool-dir", default="./spool")
    parser.add_argument("--max-threads", type=int, default=10)
    parser.add_argument("--log-file", default=LOG_FILE)
    parser.add_argument("--rfc-newlines", action="store_true", help="expect line feeds instead of a literal backslash-n")
    args = parser.parse_args(argv)

    logging.basicConfig(
        filename=args.log_file,
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s"
    )

    server = LPDServer(
        host=args.host,
        port=args.port,
        spool_dir=args.spool_dir,
        max_threads=args.max_threads,
        literal_newlines=not args.rfc_newlines,
    )
    try:
        server.start()
    except KeyboardInterrupt:
        server.stop()


if __name__ == "__main__":
    main()
