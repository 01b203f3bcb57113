import socket

from lpr_printer.control_file import (
    LITERAL_EOL,
    NEWLINE_EOL,
    JobContext,
    control_file_name,
    data_file_name,
    line_end,
    make_control_file,
    next_job_id,
    source_hostname,
)


def test_control_file_literal_terminators():
    ctrl = make_control_file(JobContext(job_id=1, username="U", hostname="H"))
    assert ctrl == r"HH\nPU\nldfA1H\nUdfA1H\n"
    assert "\n" not in ctrl
    assert ctrl.encode("ascii") == b"HH\\nPU\\nldfA1H\\nUdfA1H\\n"


def test_control_file_line_feeds():
    ctrl = make_control_file(JobContext(job_id=1, username="U", hostname="H"), NEWLINE_EOL)
    assert ctrl == "HH\nPU\nldfA1H\nUdfA1H\n"
    assert ctrl.splitlines() == ["HH", "PU", "ldfA1H", "UdfA1H"]


def test_control_file_with_empty_hostname():
    ctrl = make_control_file(JobContext(job_id=7, username="alice", hostname=""), NEWLINE_EOL)
    assert ctrl == "H\nPalice\nldfA7\nUdfA7\n"


def test_file_names_use_user_for_control_and_host_for_data():
    context = JobContext(job_id=42, username="alice", hostname="desk", queue="lp")
    assert control_file_name(context) == "cfA42alice"
    assert data_file_name(context) == "dfA42desk"


def test_line_end_selection():
    assert line_end() == LITERAL_EOL == "\\n"
    assert line_end(literal_newlines=False) == NEWLINE_EOL == "\n"


def test_job_ids_increase_and_wrap():
    assert [next_job_id() for _ in range(3)] == [1, 2, 3]
    for _ in range(996):
        next_job_id()
    assert next_job_id() == 1


def test_source_hostname(monkeypatch):
    monkeypatch.setattr(socket, "gethostname", lambda: "printhost")
    assert source_hostname() == "printhost"
    assert source_hostname(use_empty_hostname=True) == ""
