"""Printer settings loaded from YAML."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import yaml

from .errors import LprError


@dataclass
class PrinterConfig:
    host: str
    port: int = 515
    timeout: float = 30
    io_timeout: Optional[float] = None
    username: str = "lpr_printer"
    queue: str = "raw"
    use_empty_hostname: bool = False
    literal_newlines: bool = True
    encoding: str = "utf-8"


def load_config(path: Union[str, Path]) -> PrinterConfig:
    """Load a YAML printer config; only host is required."""
    try:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise LprError(f"Cannot read config {path}: {e}") from e
    if not isinstance(data, dict):
        raise LprError(f"Config {path} must be a mapping")
    if not data.get("host"):
        raise LprError(f"Config {path} has no host")

    io_timeout = data.get("io_timeout")
    try:
        return PrinterConfig(
            host=str(data["host"]),
            port=int(data.get("port", 515)),
            timeout=float(data.get("timeout", 30)),
            io_timeout=float(io_timeout) if io_timeout is not None else None,
            username=str(data.get("username", "lpr_printer")),
            queue=str(data.get("queue", "raw")),
            use_empty_hostname=bool(data.get("use_empty_hostname", False)),
            literal_newlines=bool(data.get("literal_newlines", True)),
            encoding=str(data.get("encoding", "utf-8")),
        )
    except (TypeError, ValueError) as e:
        raise LprError(f"Invalid value in config {path}: {e}") from e
