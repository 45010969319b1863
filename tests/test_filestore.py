import re

import pytest

from pinbox.core.errors import InvalidInput, NotFound, PathTraversal
from pinbox.services.hashing import hash_pin


@pytest.fixture
def root(storage):
    return storage.ensure_root("1234")


def test_root_is_named_by_digest(storage):
    root = storage.ensure_root("1234")
    assert root.is_dir()
    assert root.parent == storage.uploads_root
    assert root.name == hash_pin("1234")
    # idempotent
    assert storage.ensure_root("1234") == root


def test_root_for_digest_rejects_non_digest(storage):
    with pytest.raises(InvalidInput):
        storage.root_for_digest("..")


@pytest.mark.parametrize("rel", ["../../etc/passwd", "..", "a/../../x", "..\\..\\secret", ".", "/"])
def test_resolve_safe_rejects_escapes(storage, root, rel):
    with pytest.raises(PathTraversal):
        storage.resolve_safe(root, rel)


def test_resolve_safe_rejects_sibling_user(storage, root):
    other = storage.ensure_root("9999")
    (other / "secret.txt").write_bytes(b"x")
    with pytest.raises(PathTraversal):
        storage.resolve_safe(root, f"../{other.name}/secret.txt")


def test_resolve_safe_strips_leading_separators(storage, root):
    assert storage.resolve_safe(root, "/a.txt") == root.resolve() / "a.txt"
    assert storage.resolve_safe(root, "sub/../a.txt") == root.resolve() / "a.txt"


def test_resolve_safe_requires_path(storage, root):
    with pytest.raises(InvalidInput):
        storage.resolve_safe(root, "")


def test_list_missing_and_empty(storage, root):
    assert storage.list_files(root) == []
    assert storage.list_files(storage.root_for("5555")) == []


def test_list_skips_directories(storage, root):
    (root / "b.txt").write_bytes(b"b")
    (root / "a.txt").write_bytes(b"a")
    (root / "nested").mkdir()
    assert storage.list_files(root) == ["a.txt", "b.txt"]


def test_save_flattens_directories(storage, root):
    assert storage.save_file(root, "/deep/dir/a.txt", b"1") == "a.txt"
    assert storage.save_file(root, "win\\path\\b.txt", b"2") == "b.txt"
    assert sorted(p.name for p in root.iterdir()) == ["a.txt", "b.txt"]


def test_save_rejects_empty_name(storage, root):
    for name in ["", "dir/", ".."]:
        with pytest.raises(InvalidInput):
            storage.save_file(root, name, b"x")


def test_save_collision_gets_timestamp(storage, root):
    first = storage.save_file(root, "report.txt", b"one")
    second = storage.save_file(root, "report.txt", b"two")

    assert first == "report.txt"
    assert re.fullmatch(r"report-\d+\.txt", second)
    assert (root / first).read_bytes() == b"one"
    assert (root / second).read_bytes() == b"two"


def test_save_collision_without_extension(storage, root):
    storage.save_file(root, "README", b"one")
    assert re.fullmatch(r"README-\d+", storage.save_file(root, "README", b"two"))


def test_save_creates_missing_root(storage):
    root = storage.root_for("7777")
    storage.save_file(root, "a.txt", b"x")
    assert (root / "a.txt").read_bytes() == b"x"


def test_delete_file_leaves_siblings(storage, root):
    (root / "a.txt").write_bytes(b"a")
    (root / "b.txt").write_bytes(b"b")
    storage.delete(root, "a.txt")
    assert storage.list_files(root) == ["b.txt"]


def test_delete_directory_recursively(storage, root):
    nested = root / "nested" / "inner"
    nested.mkdir(parents=True)
    (nested / "x.txt").write_bytes(b"x")
    storage.delete(root, "nested")
    assert not (root / "nested").exists()
    assert root.is_dir()


def test_delete_missing(storage, root):
    with pytest.raises(NotFound):
        storage.delete(root, "ghost.txt")


def test_delete_traversal(storage, root):
    with pytest.raises(PathTraversal):
        storage.delete(root, "../../pins.json")


def test_list_skips_symlinks_out_of_root(storage, root, tmp_path):
    outside = tmp_path / "outside.txt"
    outside.write_bytes(b"secret")
    (root / "a.txt").write_bytes(b"a")
    (root / "link.txt").symlink_to(outside)
    assert storage.list_files(root) == ["a.txt"]
