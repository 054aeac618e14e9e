from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

from jwtkit import __version__
from jwtkit.algorithms import ALGORITHMS, SigningKind, get_algorithm
from jwtkit.config import JWTKitConfig, load_config
from jwtkit.diagnostics import format_error_with_hint
from jwtkit.errors import JWTConfigError, JWTError

EXIT_OK = 0
EXIT_USAGE_OR_CONFIG = 2
EXIT_TOKEN_REJECTED = 3


def _add_common_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--root",
        type=str,
        default=None,
        help="Project root (defaults to searching upward from cwd for jwtkit.toml).",
    )
    p.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to jwtkit.toml (defaults to <root>/jwtkit.toml).",
    )
    p.add_argument(
        "--alg",
        type=str,
        default=None,
        choices=sorted(ALGORITHMS),
        help="Signing algorithm.",
    )
    p.add_argument("--verbose", action="store_true", help="Log debug output to stderr.")

    keys = p.add_mutually_exclusive_group()
    keys.add_argument("--key", type=str, default=None, help="Key material as text.")
    keys.add_argument("--key-file", type=str, default=None, help="Read key material from a file.")
    keys.add_argument(
        "--key-env",
        type=str,
        default=None,
        help="Read key material from an environment variable.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jwtkit")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    encode_p = subparsers.add_parser("encode", help="Sign a JSON payload and print the token.")
    _add_common_flags(encode_p)
    encode_p.add_argument("payload", help="Payload as a JSON object, or '-' to read stdin.")
    encode_p.add_argument(
        "--header",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Extra header field (repeatable). VALUE is parsed as JSON when possible.",
    )

    decode_p = subparsers.add_parser("decode", help="Verify a token and print its payload.")
    _add_common_flags(decode_p)
    decode_p.add_argument("token", help="Compact token, or '-' to read stdin.")
    decode_p.add_argument(
        "--no-verify",
        action="store_true",
        help="Skip signature and exp/nbf checks (unsafe for untrusted tokens).",
    )

    return parser


def parse_args(argv: list[str]) -> argparse.Namespace:
    return _build_parser().parse_args(argv)


def _eprint(msg: str) -> None:
    print(msg, file=sys.stderr)


def _load_config(args: argparse.Namespace) -> JWTKitConfig:
    root = Path(args.root).resolve() if args.root else None
    config_path = Path(args.config).resolve() if args.config else None
    return load_config(root=root, config_path=config_path)


def _read_arg(value: str) -> str:
    if value == "-":
        return sys.stdin.read().strip()
    return value


def _read_key_file(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise JWTConfigError(f"Could not read key file {path}: {e.strerror or e}") from e


def _resolve_key(
    args: argparse.Namespace, cfg: JWTKitConfig, *, kind: SigningKind, decoding: bool
) -> str | bytes:
    """Pick key material: explicit flags first, then jwtkit.toml [keys].

    Raises KeyError for a named environment variable that is not set.
    """

    if args.key is not None:
        return args.key
    if args.key_file is not None:
        return _read_key_file(Path(args.key_file))
    if args.key_env is not None:
        return os.environ[args.key_env]

    if kind is SigningKind.ASYMMETRIC:
        pem_file = cfg.keys.public_key_file if decoding else cfg.keys.private_key_file
        if pem_file is not None:
            return _read_key_file(pem_file)
    if cfg.keys.secret_env is not None:
        return os.environ[cfg.keys.secret_env]

    raise JWTConfigError("No key available: pass --key, --key-file or --key-env")


def _parse_header_args(items: list[str]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for item in items:
        name, sep, raw = item.partition("=")
        name = name.strip()
        if not sep or not name:
            raise ValueError(f"--header expects KEY=VALUE, got {item!r}")
        try:
            out[name] = json.loads(raw)
        except json.JSONDecodeError:
            out[name] = raw
    return out


def cmd_encode(args: argparse.Namespace) -> int:
    from jwtkit.codec import encode

    try:
        cfg = _load_config(args)
        algorithm = args.alg or cfg.encode.algorithm
        kind = get_algorithm(algorithm).kind

        payload = json.loads(_read_arg(args.payload))
        if not isinstance(payload, dict):
            raise ValueError("payload must be a JSON object")
        header = {**cfg.encode.header, **_parse_header_args(args.header)}

        key = _resolve_key(args, cfg, kind=kind, decoding=False)
        token = encode(payload, key, algorithm, {"header": header} if header else None)
    except JWTConfigError as e:
        _eprint(format_error_with_hint(e))
        return EXIT_USAGE_OR_CONFIG
    except JWTError as e:
        _eprint(format_error_with_hint(e))
        return EXIT_TOKEN_REJECTED
    except (KeyError, ValueError) as e:
        # Missing environment variables and unparseable payload/header input.
        _eprint(format_error_with_hint(e))
        return EXIT_USAGE_OR_CONFIG

    print(token)
    return EXIT_OK


def cmd_decode(args: argparse.Namespace) -> int:
    from jwtkit.codec import decode, get_unverified_header

    try:
        cfg = _load_config(args)
        token = _read_arg(args.token)

        key: str | bytes | None = None
        if not args.no_verify:
            alg_name = args.alg or get_unverified_header(token).get("alg")
            kind = get_algorithm(alg_name).kind
            key = _resolve_key(args, cfg, kind=kind, decoding=True)

        payload = decode(token, key, no_verify=bool(args.no_verify), algorithm=args.alg)
    except (JWTConfigError, KeyError) as e:
        _eprint(format_error_with_hint(e))
        return EXIT_USAGE_OR_CONFIG
    except JWTError as e:
        _eprint(format_error_with_hint(e))
        return EXIT_TOKEN_REJECTED

    print(json.dumps(payload, indent=2, sort_keys=True))
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    try:
        args = parse_args(list(sys.argv[1:] if argv is None else argv))
    except SystemExit as e:
        # argparse uses SystemExit for --help/--version and parse errors.
        code = e.code
        return int(code) if isinstance(code, int) else EXIT_USAGE_OR_CONFIG

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if args.command == "encode":
        return cmd_encode(args)
    if args.command == "decode":
        return cmd_decode(args)

    return EXIT_USAGE_OR_CONFIG


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
