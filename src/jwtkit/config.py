"""Optional `jwtkit.toml` configuration for the command-line front end.

This module only reads the file and validates types; it never reads key
material itself. The codec API does not use configuration at all.
"""

from __future__ import annotations

import math
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jwtkit.algorithms import DEFAULT_ALGORITHM, get_algorithm
from jwtkit.errors import JWTConfigError, UnsupportedAlgorithmError

CONFIG_FILENAME = "jwtkit.toml"


@dataclass(frozen=True)
class EncodeConfig:
    algorithm: str = DEFAULT_ALGORITHM
    header: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class KeysConfig:
    secret_env: str | None = None
    private_key_file: Path | None = None
    public_key_file: Path | None = None


@dataclass(frozen=True)
class JWTKitConfig:
    version: int
    root: Path
    encode: EncodeConfig
    keys: KeysConfig


def default_config(root: Path) -> JWTKitConfig:
    return JWTKitConfig(version=1, root=root, encode=EncodeConfig(), keys=KeysConfig())


def find_project_root(start: Path) -> Path | None:
    """Walk upward from `start` (file or directory) looking for `jwtkit.toml`."""

    cur = start
    try:
        if cur.is_file():
            cur = cur.parent
    except OSError:
        cur = cur.parent

    cur = cur.resolve()
    while True:
        if (cur / CONFIG_FILENAME).is_file():
            return cur
        if cur.parent == cur:
            return None
        cur = cur.parent


def _as_table(value: Any, *, name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise JWTConfigError(f"Expected [{name}] to be a table.")
    return value


def _as_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise JWTConfigError(f"Expected {name} to be an integer.")
    return value


def _as_str(value: Any, *, name: str) -> str:
    if not isinstance(value, str):
        raise JWTConfigError(f"Expected {name} to be a string.")
    return value


def _as_path(value: Any, *, name: str, root: Path) -> Path:
    p = Path(_as_str(value, name=name))
    return p if p.is_absolute() else root / p


def _as_json_value(value: Any, *, name: str) -> Any:
    # TOML dates and times have no JSON form.
    if isinstance(value, (str, bool, int)):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return value
    if isinstance(value, list):
        return [_as_json_value(v, name=f"{name}[{i}]") for i, v in enumerate(value)]
    if isinstance(value, dict):
        return {k: _as_json_value(v, name=f"{name}.{k}") for k, v in value.items()}
    raise JWTConfigError(f"Expected {name} to be a JSON value, got {type(value).__name__}.")


def load_config(*, root: Path | None = None, config_path: Path | None = None) -> JWTKitConfig:
    """Load and validate `jwtkit.toml`.

    With neither argument, the file is discovered by walking upward from the
    current working directory and defaults are returned when none exists.
    An explicit `root` or `config_path` must point at an existing file.
    """

    if config_path is None:
        if root is None:
            root = find_project_root(Path.cwd())
            if root is None:
                return default_config(Path.cwd())
        config_path = root / CONFIG_FILENAME
    elif root is None:
        root = config_path.parent

    try:
        raw = config_path.read_bytes()
    except FileNotFoundError as e:
        raise JWTConfigError(f"Missing {CONFIG_FILENAME} at: {config_path}") from e
    except OSError as e:
        raise JWTConfigError(f"Failed reading config file: {config_path}") from e

    try:
        data = tomllib.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise JWTConfigError(f"Config is not valid UTF-8: {config_path}") from e
    except tomllib.TOMLDecodeError as e:
        raise JWTConfigError(f"Invalid TOML in {config_path}: {e}") from e

    version = data.get("version", None)
    if version is None:
        raise JWTConfigError(f"Missing required `version = 1` in {CONFIG_FILENAME}.")
    version_i = _as_int(version, name="version")
    if version_i != 1:
        raise JWTConfigError(f"Unsupported config version: {version_i} (expected 1).")

    encode_tbl = _as_table(data.get("encode"), name="encode")
    keys_tbl = _as_table(data.get("keys"), name="keys")

    if "algorithm" in encode_tbl:
        algorithm = _as_str(encode_tbl["algorithm"], name="encode.algorithm")
        try:
            get_algorithm(algorithm)
        except UnsupportedAlgorithmError as e:
            raise JWTConfigError(f"Invalid config: encode.algorithm: {e}") from e
    else:
        algorithm = DEFAULT_ALGORITHM

    header = {
        k: _as_json_value(v, name=f"encode.header.{k}")
        for k, v in _as_table(encode_tbl.get("header"), name="encode.header").items()
    }

    secret_env = None
    if "secret_env" in keys_tbl:
        secret_env = _as_str(keys_tbl["secret_env"], name="keys.secret_env")
        if not secret_env:
            raise JWTConfigError("Invalid config: keys.secret_env must be non-empty.")

    private_key_file = None
    if "private_key_file" in keys_tbl:
        private_key_file = _as_path(
            keys_tbl["private_key_file"], name="keys.private_key_file", root=root
        )

    public_key_file = None
    if "public_key_file" in keys_tbl:
        public_key_file = _as_path(
            keys_tbl["public_key_file"], name="keys.public_key_file", root=root
        )

    return JWTKitConfig(
        version=version_i,
        root=root,
        encode=EncodeConfig(algorithm=algorithm, header=header),
        keys=KeysConfig(
            secret_env=secret_env,
            private_key_file=private_key_file,
            public_key_file=public_key_file,
        ),
    )
