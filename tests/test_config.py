from __future__ import annotations

from pathlib import Path

import pytest

from jwtkit.config import find_project_root, load_config
from jwtkit.errors import JWTConfigError


def test_load_minimal_config_defaults_apply(tmp_path: Path) -> None:
    (tmp_path / "jwtkit.toml").write_text("version = 1\n", encoding="utf-8")
    cfg = load_config(root=tmp_path)

    assert cfg.version == 1
    assert cfg.root == tmp_path
    assert cfg.encode.algorithm == "HS256"
    assert cfg.encode.header == {}
    assert cfg.keys.secret_env is None
    assert cfg.keys.private_key_file is None
    assert cfg.keys.public_key_file is None


def test_load_config_overrides_work(tmp_path: Path) -> None:
    (tmp_path / "jwtkit.toml").write_text(
        "\n".join(
            [
                "version = 1",
                "",
                "[encode]",
                'algorithm = "RS256"',
                "",
                "[encode.header]",
                'kid = "2024-01"',
                "",
                "[keys]",
                'secret_env = "MY_SECRET"',
                'private_key_file = "keys/private.pem"',
                'public_key_file = "/etc/jwt/public.pem"',
                "",
            ]
        )
        + "\n",
        encoding="utf-8",
    )

    cfg = load_config(root=tmp_path)
    assert cfg.encode.algorithm == "RS256"
    assert cfg.encode.header == {"kid": "2024-01"}
    assert cfg.keys.secret_env == "MY_SECRET"
    assert cfg.keys.private_key_file == tmp_path / "keys" / "private.pem"
    assert cfg.keys.public_key_file == Path("/etc/jwt/public.pem")


def test_config_path_sets_root(tmp_path: Path) -> None:
    p = tmp_path / "custom.toml"
    p.write_text('version = 1\n[keys]\nprivate_key_file = "k.pem"\n', encoding="utf-8")

    cfg = load_config(config_path=p)
    assert cfg.root == tmp_path
    assert cfg.keys.private_key_file == tmp_path / "k.pem"


def test_invalid_toml_raises(tmp_path: Path) -> None:
    (tmp_path / "jwtkit.toml").write_text("version = \n", encoding="utf-8")
    with pytest.raises(JWTConfigError):
        load_config(root=tmp_path)


def test_missing_explicit_config_raises(tmp_path: Path) -> None:
    with pytest.raises(JWTConfigError):
        load_config(config_path=tmp_path / "jwtkit.toml")
    with pytest.raises(JWTConfigError):
        load_config(root=tmp_path)


def test_no_config_discovered_returns_defaults(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("jwtkit.config.find_project_root", lambda start: None)

    cfg = load_config()
    assert cfg.encode.algorithm == "HS256"
    assert cfg.keys.secret_env is None


@pytest.mark.parametrize(
    "text",
    [
        "",
        "version = 2\n",
        'version = "1"\n',
        "version = true\n",
        "version = 1\nencode = 3\n",
        'version = 1\n[encode]\nalgorithm = "none"\n',
        "version = 1\n[encode]\nalgorithm = 256\n",
        "version = 1\n[encode]\nheader = 1\n",
        "version = 1\n[encode.header]\nissued = 2024-01-01\n",
        "version = 1\n[encode.header]\nttl = inf\n",
        "version = 1\n[encode.header]\nseen = [12:30:00]\n",
        'version = 1\n[keys]\nsecret_env = ""\n',
        "version = 1\n[keys]\npublic_key_file = 1\n",
    ],
)
def test_invalid_values_raise(tmp_path: Path, text: str) -> None:
    (tmp_path / "jwtkit.toml").write_text(text, encoding="utf-8")
    with pytest.raises(JWTConfigError):
        load_config(root=tmp_path)


def test_find_project_root_success(tmp_path: Path) -> None:
    (tmp_path / "jwtkit.toml").write_text("version = 1\n", encoding="utf-8")
    deep = tmp_path / "a" / "b"
    deep.mkdir(parents=True)

    assert find_project_root(deep) == tmp_path.resolve()
    some_file = deep / "x.txt"
    some_file.write_text("x\n", encoding="utf-8")
    assert find_project_root(some_file) == tmp_path.resolve()
