"""
Builders for the cfA control file and the file names used on the wire.
See RFC 1179, section 7, for the control file lines.
"""

import socket
import threading
from dataclasses import dataclass

# Two characters, backslash and "n". This is what the daemons we were
# tested against have always received.
LITERAL_EOL = "\\n"
# RFC 1179 line feed.
NEWLINE_EOL = "\n"

MAX_JOB_ID = 999

_job_id_lock = threading.Lock()
_last_job_id = 0


def line_end(literal_newlines: bool = True) -> str:
    return LITERAL_EOL if literal_newlines else NEWLINE_EOL


def next_job_id() -> int:
    """
    Return the next job number for this process: 1, 2, ... 999, then 1 again.
    """
    global _last_job_id
    with _job_id_lock:
        _last_job_id = _last_job_id % MAX_JOB_ID + 1
        return _last_job_id


def reset_job_ids():
    global _last_job_id
    with _job_id_lock:
        _last_job_id = 0


def source_hostname(use_empty_hostname: bool = False) -> str:
    """
    Host name written into the control file and the data file name.
    Requests relayed on behalf of remote users leave it blank.
    """
    if use_empty_hostname:
        return ""
    return socket.gethostname()


@dataclass(frozen=True)
class JobContext:
    job_id: int
    username: str
    hostname: str
    queue: str = "raw"


def control_file_name(context: JobContext) -> str:
    return f"cfA{context.job_id}{context.username}"


def data_file_name(context: JobContext) -> str:
    return f"dfA{context.job_id}{context.hostname}"


def make_control_file(context: JobContext, eol: str = LITERAL_EOL) -> str:
    """
    Build the cfA control file for a job.
    :param context: Job being sent.
    :param eol: Terminator appended to every line.
    :return: Control file text.
    """
    data_name = data_file_name(context)
    ctrl = ""
    ctrl += f"H{context.hostname}{eol}"  # host
    ctrl += f"P{context.username}{eol}"  # user
    ctrl += f"l{data_name}{eol}"  # print file, control characters kept
    ctrl += f"U{data_name}{eol}"  # unlink when done
    return ctrl
