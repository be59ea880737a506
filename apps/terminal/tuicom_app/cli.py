"""CLI entrypoints for the terminal, port listing and diagnostics."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from tuicom_core import DiagnosticsExporter, build_doctor_payload, load_config
from tuicom_core.logging_setup import configure_logging, get_logger, install_crash_hooks
from tuicom_link import ChannelError, SerialChannel


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def _baud_rate(value: str) -> int:
    try:
        rate = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid baud rate: {value!r}") from None
    if rate <= 0:
        raise argparse.ArgumentTypeError(f"invalid baud rate: {value!r}")
    return rate


def cmd_run(args: argparse.Namespace) -> int:
    from .app import open_channel, run_terminal

    cfg = load_config()
    if args.crlf:
        cfg.session.crlf = True
    port = args.port or cfg.link.port
    baud = args.baud or cfg.link.baud

    if not port and not args.loopback:
        print("error: no serial port given (use --port or set link.port in the config file)", file=sys.stderr)
        return 2

    install_crash_hooks()
    logger = get_logger()
    try:
        channel = open_channel(cfg, port, baud, loopback=args.loopback)
    except ChannelError as exc:
        logger.error(f"open failed: {exc}", extra={"event": "open_failed"})
        print(f"error: {exc}", file=sys.stderr)
        return 1

    try:
        return run_terminal(cfg, channel)
    except ChannelError as exc:
        logger.exception("session aborted", extra={"event": "fatal_channel_error"})
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        channel.close()


def cmd_list_ports(_args: argparse.Namespace) -> int:
    _print_json(
        [
            {
                "device": p.device,
                "description": p.description,
                "hwid": p.hwid,
                "vid": p.vid,
                "pid": p.pid,
            }
            for p in SerialChannel.discover()
        ]
    )
    return 0


def cmd_doctor(args: argparse.Namespace) -> int:
    cfg = load_config()
    payload = build_doctor_payload(cfg)

    if args.export:
        exporter = DiagnosticsExporter()
        out_dir = Path(args.out_dir).expanduser().resolve() if args.out_dir else None
        bundle = exporter.bundle(cfg=cfg, doctor_payload=payload, output_dir=out_dir)
        payload["diagnostics_bundle"] = str(bundle)

    _print_json(payload)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tuicom", description="A TUI serial terminal")
    sub = parser.add_subparsers(dest="command", required=True)

    run_cmd = sub.add_parser("run", help="Open a port and start the terminal")
    run_cmd.add_argument("-p", "--port", default=None, help="Serial port or pyserial URL (default: config link.port)")
    run_cmd.add_argument("-b", "--baud", type=_baud_rate, default=None, help="Baud rate (default: config link.baud)")
    run_cmd.add_argument("--loopback", action="store_true", help="Use an in-memory echo device instead of a port")
    run_cmd.add_argument("--crlf", action="store_true", help="Start with newline sent as LF+CR")
    run_cmd.set_defaults(func=cmd_run)

    list_cmd = sub.add_parser("list-ports", help="List serial ports")
    list_cmd.set_defaults(func=cmd_list_ports)

    doctor_cmd = sub.add_parser("doctor", help="Print diagnostics and detected ports")
    doctor_cmd.add_argument("--export", action="store_true", help="Export offline diagnostics bundle")
    doctor_cmd.add_argument("--out-dir", default=None, help="Optional output directory for diagnostics bundle")
    doctor_cmd.set_defaults(func=cmd_doctor)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(keep_files=load_config().diagnostics.keep_log_files)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
