"""Pytest configuration and fixtures."""

import os
import sys
from pathlib import Path

import pytest

# Add repo root to path (for 'treeshare.*' imports without installing)
repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root))

from treeshare import create_app  # noqa: E402
from treeshare.config import Settings, TestingConfig  # noqa: E402

POLICY_DEFAULTS = {
    "prefix": "/",
    "skip_hidden": True,
    "follow_symlinks": False,
    "read_only": False,
    "verbose": False,
}


@pytest.fixture
def share_root(tmp_path):
    """Create the shared tree.

    Layout::

        share/
            .git/config
            B.txt            "bee"
            a_dir/           (empty)
            c.TXT            "sea"
            sub/
                .hidden      "secret"
                a.txt        10 bytes
                deep/x.bin
    """
    root = Path(os.path.realpath(tmp_path)) / "share"
    root.mkdir()
    (root / ".git").mkdir()
    (root / ".git" / "config").write_text("[core]")
    (root / "B.txt").write_text("bee")
    (root / "a_dir").mkdir()
    (root / "c.TXT").write_text("sea")
    (root / "sub").mkdir()
    (root / "sub" / ".hidden").write_text("secret")
    (root / "sub" / "a.txt").write_bytes(b"0123456789")
    (root / "sub" / "deep").mkdir()
    (root / "sub" / "deep" / "x.bin").write_bytes(bytes(range(256)) * 4)
    return root


@pytest.fixture
def outside(tmp_path):
    """A directory next to the shared root that must never be reachable."""
    path = Path(os.path.realpath(tmp_path)) / "outside"
    path.mkdir()
    (path / "secret.txt").write_text("top secret")
    return path


@pytest.fixture
def make_settings(share_root):
    """Build Settings for the shared tree with explicit policy defaults."""
    def _make(**overrides):
        values = dict(POLICY_DEFAULTS, root=str(share_root))
        values.update(overrides)
        return Settings.from_config(TestingConfig, **values)
    return _make


@pytest.fixture
def make_client(share_root):
    """Build a Flask test client for the shared tree."""
    def _make(**overrides):
        values = dict(POLICY_DEFAULTS, root=str(share_root))
        values.update(overrides)
        app = create_app("testing", **values)
        return app.test_client()
    return _make


@pytest.fixture
def client(make_client):
    return make_client()


def multipart_body(boundary: str, *parts) -> bytes:
    """Encode (field name, filename, data) tuples as a multipart/form-data body."""
    out = b""
    for name, filename, data in parts:
        out += b"--" + boundary.encode() + b"\r\n"
        out += (
            f'Content-Disposition: form-data; name="{name}"; filename="{filename}"\r\n'
        ).encode()
        out += b"Content-Type: application/octet-stream\r\n\r\n"
        out += data + b"\r\n"
    out += b"--" + boundary.encode() + b"--\r\n"
    return out


@pytest.fixture
def multipart():
    return multipart_body
