"""Command line entry point: print a file (or stdin) on an LPD printer."""

import argparse
import logging
import sys

from .config import PrinterConfig, load_config
from .errors import LprError
from .lpr_client import LprPrinter


def usage(argv=None):
    parser = argparse.ArgumentParser(description="Line Printer Daemon Protocol (RFC 1179) print.")
    parser.add_argument("host", nargs="?", help="printer ip address or hostname")
    parser.add_argument("filename", nargs="?", help="file to be delivered to printer (default: stdin)")
    parser.add_argument("--config", help="YAML printer config")
    parser.add_argument("--port", type=int)
    parser.add_argument("--queue")
    parser.add_argument("--timeout", type=float)
    parser.add_argument("--user")
    parser.add_argument("--empty-hostname", action="store_true", help="leave the source host blank")
    parser.add_argument("--rfc-newlines", action="store_true", help="end lines with a line feed")
    parser.add_argument("--waiting", action="store_true", help="only ask the daemon to print waiting jobs")
    parser.add_argument("--log-file", help="write log records to this file instead of stderr")
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args(argv)
    # With a config file the printer comes from the file, so a lone
    # positional is the document.
    if args.config and args.host and not args.filename:
        args.host, args.filename = None, args.host
    return parser, args


def build_config(parser, args) -> PrinterConfig:
    if args.config:
        config = load_config(args.config)
    elif args.host:
        config = PrinterConfig(host=args.host)
    else:
        parser.error("a host or --config is required")
    if args.host:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    if args.queue:
        config.queue = args.queue
    if args.timeout is not None:
        config.timeout = args.timeout
    if args.user:
        config.username = args.user
    if args.empty_hostname:
        config.use_empty_hostname = True
    if args.rfc_newlines:
        config.literal_newlines = False
    return config


def main(argv=None) -> int:
    parser, args = usage(argv)
    logging.basicConfig(
        filename=args.log_file,
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s"
    )

    try:
        config = build_config(parser, args)
    except LprError as e:
        print(e, file=sys.stderr)
        return 1

    printer = LprPrinter.from_config(config)
    if args.waiting:
        ok = printer.print_waiting_jobs(config.queue)
    else:
        try:
            if args.filename:
                with open(args.filename, mode="rb") as f:
                    data = f.read()
            else:
                data = sys.stdin.buffer.read()
        except OSError as e:
            print(f"Cannot read from file: {e}", file=sys.stderr)
            return 1
        ok = printer.print_text(data, queue=config.queue)

    for event in printer.debug:
        print(f"{event.timestamp:%Y-%m-%d %H:%M:%S} [{event.kind.value}] {event.message}")
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
