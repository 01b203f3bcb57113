import pytest

from lpr_printer.config import PrinterConfig, load_config
from lpr_printer.errors import LprError
from lpr_printer.lpr_client import LprPrinter


def test_load_config_defaults(tmp_path):
    path = tmp_path / "printer.yaml"
    path.write_text("host: 192.168.1.136\n", encoding="utf-8")

    config = load_config(path)
    assert config == PrinterConfig(host="192.168.1.136")
    assert config.port == 515
    assert config.timeout == 30
    assert config.io_timeout is None
    assert config.queue == "raw"
    assert config.literal_newlines is True


def test_load_config_overrides(tmp_path):
    path = tmp_path / "printer.yaml"
    path.write_text(
        "host: printer.example\n"
        "port: 9515\n"
        "timeout: 5\n"
        "io_timeout: 2.5\n"
        "username: alice\n"
        "queue: lp\n"
        "use_empty_hostname: true\n"
        "literal_newlines: false\n",
        encoding="utf-8",
    )

    config = load_config(path)
    printer = LprPrinter.from_config(config)
    assert printer.host == "printer.example"
    assert printer.port == 9515
    assert printer.timeout == 5.0
    assert printer.transport.io_timeout == 2.5
    assert printer.username == "alice"
    assert printer.use_empty_hostname is True
    assert printer.literal_newlines is False
    assert config.queue == "lp"


@pytest.mark.parametrize(
    "content",
    [
        "port: 515\n",
        "",
        "- just\n- a list\n",
        "host: [unclosed\n",
        "host: x\nport: abc\n",
        "host: x\ntimeout: [1, 2]\n",
        "host: x\nio_timeout: soon\n",
    ],
)
def test_load_config_rejects_bad_files(tmp_path, content):
    path = tmp_path / "printer.yaml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(LprError):
        load_config(path)


def test_load_config_missing_file(tmp_path):
    with pytest.raises(LprError, match="Cannot read config"):
        load_config(tmp_path / "missing.yaml")
