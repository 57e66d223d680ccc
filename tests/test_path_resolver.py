"""Tests for sandboxed path resolution."""

import os

import pytest

from treeshare.errors import InvalidPathError
from treeshare.services.path_resolver import PathResolver


@pytest.fixture
def resolver(make_settings):
    return PathResolver(make_settings())


def test_prefix_only_resolves_to_root(resolver, share_root):
    resolved = resolver.resolve("/")
    assert resolved.absolute == str(share_root)
    assert resolved.relative == ""
    assert resolved.is_root


def test_nested_file(resolver, share_root):
    resolved = resolver.resolve("/sub/a.txt")
    assert resolved.absolute == os.path.join(str(share_root), "sub", "a.txt")
    assert resolved.relative == "sub/a.txt"
    assert not resolved.is_root


def test_missing_path_is_not_an_error(resolver, share_root):
    resolved = resolver.resolve("/new/dir")
    assert resolved.absolute == os.path.join(str(share_root), "new", "dir")


def test_climbing_out_from_absolute_looking_request_is_rejected(resolver, share_root):
    with pytest.raises(InvalidPathError):
        resolver.resolve(str(share_root) + "/../../etc/passwd")


@pytest.mark.parametrize("raw", [
    "/../etc/passwd",
    "/../../../../../../etc/passwd",
    "/sub/../../outside/secret.txt",
    "/sub/deep/../../..",
    "/..",
])
def test_traversal_is_rejected(make_settings, raw):
    resolver = PathResolver(make_settings(skip_hidden=False))
    with pytest.raises(InvalidPathError):
        resolver.resolve(raw)


@pytest.mark.parametrize("raw", [
    "/sub/..",
    "/sub/deep/../a.txt",
    "/a_dir/../../share/B.txt",
    "/./sub",
])
def test_dotdot_that_stays_inside_root_resolves_within_root(make_settings, share_root, raw):
    resolver = PathResolver(make_settings(skip_hidden=False))
    resolved = resolver.resolve(raw)
    root = str(share_root)
    assert resolved.absolute == root or resolved.absolute.startswith(root + os.sep)


@pytest.mark.parametrize("raw", [
    "/sub/.hidden",
    "/.git",
    "/.git/config",
    "/sub/..",
    "/./sub",
    "/.does-not-exist/file",
])
def test_hidden_segments_rejected_when_skipping_hidden(resolver, raw):
    with pytest.raises(InvalidPathError):
        resolver.resolve(raw)


def test_hidden_segments_allowed_when_not_skipping(make_settings, share_root):
    resolver = PathResolver(make_settings(skip_hidden=False))
    resolved = resolver.resolve("/sub/.hidden")
    assert resolved.absolute == os.path.join(str(share_root), "sub", ".hidden")


def test_hidden_symlink_target_rejected(resolver, share_root):
    os.symlink(share_root / "sub", share_root / ".shortcut")
    with pytest.raises(InvalidPathError):
        resolver.resolve("/.shortcut/a.txt")


def test_symlink_escaping_root_rejected(resolver, share_root, outside):
    os.symlink(outside, share_root / "escape")
    with pytest.raises(InvalidPathError):
        resolver.resolve("/escape")
    with pytest.raises(InvalidPathError):
        resolver.resolve("/escape/secret.txt")
    with pytest.raises(InvalidPathError):
        resolver.resolve("/escape/not-yet-created")


def test_symlink_escaping_root_allowed_when_following(make_settings, share_root, outside):
    os.symlink(outside, share_root / "escape")
    resolver = PathResolver(make_settings(follow_symlinks=True))
    resolved = resolver.resolve("/escape/secret.txt")
    # The link path is returned, not its target
    assert resolved.absolute == os.path.join(str(share_root), "escape", "secret.txt")


def test_symlink_inside_root_allowed(resolver, share_root):
    os.symlink(share_root / "sub", share_root / "shortcut")
    resolved = resolver.resolve("/shortcut/a.txt")
    assert resolved.absolute == os.path.join(str(share_root), "shortcut", "a.txt")


def test_symlink_to_sibling_sharing_name_prefix_rejected(resolver, share_root):
    sibling = share_root.parent / (share_root.name + "2")
    sibling.mkdir()
    os.symlink(sibling, share_root / "sibling")
    with pytest.raises(InvalidPathError):
        resolver.resolve("/sibling")


def test_url_prefix_is_required(make_settings, share_root):
    resolver = PathResolver(make_settings(prefix="/share/"))
    assert resolver.resolve("/share/sub").absolute == os.path.join(str(share_root), "sub")
    assert resolver.resolve("/share/").is_root
    for raw in ("/sub", "/share", "/other/sub", "share/sub", ""):
        with pytest.raises(InvalidPathError):
            resolver.resolve(raw)


@pytest.mark.parametrize("raw", [None, 42, "/sub/\x00a.txt"])
def test_malformed_input_rejected(resolver, raw):
    with pytest.raises(InvalidPathError):
        resolver.resolve(raw)


def test_rejections_are_indistinguishable(resolver, share_root, outside):
    os.symlink(outside, share_root / "escape")
    messages = set()
    for raw in ("/sub/.hidden", "/escape/secret.txt", "nope", "/sub/\x00"):
        with pytest.raises(InvalidPathError) as exc_info:
            resolver.resolve(raw)
        messages.add(str(exc_info.value))
    assert messages == {"invalid path"}
