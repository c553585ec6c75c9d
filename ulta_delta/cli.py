from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from ulta_delta.api_client import fetch_config
from ulta_delta.errors import DecodeError, FilesystemError, UltaError
from ulta_delta.settings import ApiSettings
from ulta_delta.storage import save_config
from ulta_delta.token_codec import decode_vpn_link


logger = logging.getLogger("ulta_delta")


def _configure_logging(args: argparse.Namespace) -> None:
    if args.quiet:
        level = logging.WARNING
    elif args.verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO
    # rebinds the root handler to the current sys.stderr on every run
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", force=True)
    logger.setLevel(level)


def _read_link(args: argparse.Namespace) -> str:
    link = args.vpn_link
    if args.link_file:
        try:
            link = Path(args.link_file).read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise FilesystemError(f"Cannot read link file {args.link_file}: {exc.strerror or exc}") from exc
    if not link or not link.strip():
        raise DecodeError("VPN key is required")
    return link


def _resolve_settings(args: argparse.Namespace) -> ApiSettings:
    return ApiSettings.from_env().override(
        base_url=args.api_url,
        user_agent=args.user_agent,
        timeout=args.timeout,
    )


def cmd_decode(args: argparse.Namespace) -> int:
    config = decode_vpn_link(_read_link(args))
    print(config.to_json())

    if not args.get_conf:
        if args.output:
            logger.warning("--output is ignored without --gc")
        return 0

    api_key = config.require_api_key()
    wg_config = fetch_config(api_key, settings=_resolve_settings(args))
    print(wg_config)

    if args.output:
        saved = save_config(wg_config, args.output)
        print(f"[+] Config saved to: {saved}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ulta-delta",
        description="Decode vpn:// share links and fetch the WireGuard config they point to",
    )
    link_source = parser.add_mutually_exclusive_group()
    link_source.add_argument("vpn_link", nargs="?", help="VPN key, with or without the vpn:// prefix")
    link_source.add_argument("--link-file", help="Read the VPN key from a file")
    parser.add_argument(
        "--gc",
        "--get-conf",
        dest="get_conf",
        action="store_true",
        help="Fetch WG config from API using the decoded api_key",
    )
    parser.add_argument("-o", "--output", help="Save fetched WireGuard config to file (with --gc)")
    parser.add_argument("--api-url", help="Override API base URL (or use ULTA_API_BASE_URL)")
    parser.add_argument("--user-agent", help="Override User-Agent header (or use ULTA_USER_AGENT)")
    parser.add_argument("--timeout", help="HTTP timeout in seconds (or use ULTA_HTTP_TIMEOUT; default: none)")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only warnings and errors")
    parser.set_defaults(func=cmd_decode)
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args)
    try:
        return args.func(args)
    except (UltaError, ValueError) as exc:
        print(f"[!] Error: {exc}", file=sys.stderr)
        return 1


def run(argv: Optional[list[str]] = None) -> int:
    try:
        return main(argv)
    except Exception as exc:
        print(f"[!] Unhandled error: {exc!r}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(run())
