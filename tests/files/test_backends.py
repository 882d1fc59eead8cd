"""Tests for file backends."""

import pytest

from relatedfiles.files import FileBackend, InMemoryFileBackend, LocalFileBackend


@pytest.fixture
def repo(tmp_path):
    root = tmp_path / "repo"
    (root / "src" / "com" / "acme").mkdir(parents=True)
    (root / "target" / "classes").mkdir(parents=True)
    (root / "generated").mkdir()
    (root / "src" / "com" / "acme" / "A.java").write_text("class A {}\n")
    (root / "src" / "com" / "acme" / "B.java").write_text("class B {}\n")
    (root / "target" / "classes" / "A.class").write_bytes(b"\xca\xfe\xba\xbe")
    (root / "generated" / "G.java").write_text("class G {}\n")
    (root / "big.txt").write_text("x" * 100)
    (root / ".gitignore").write_text("generated/\n*.log\n")
    (root / "debug.log").write_text("noise\n")
    return root


class TestLocalFileBackend:
    def test_satisfies_protocol(self, repo):
        assert isinstance(LocalFileBackend(repo), FileBackend)

    def test_rejects_non_directory(self, repo):
        with pytest.raises(ValueError, match="not a directory"):
            LocalFileBackend(repo / "big.txt")

    def test_read_file(self, repo):
        backend = LocalFileBackend(repo)
        assert backend.read_file("src/com/acme/A.java") == "class A {}\n"
        assert backend.read_file("src/com/acme/Missing.java") is None

    def test_blocks_path_traversal(self, repo):
        (repo.parent / "secret.txt").write_text("secret")
        backend = LocalFileBackend(repo)
        assert backend.read_file("../secret.txt") is None
        assert not backend.file_exists("../secret.txt")

    def test_size_limit(self, repo):
        assert LocalFileBackend(repo, max_file_size=10).read_file("big.txt") is None
        assert LocalFileBackend(repo).read_file("big.txt", max_size=10) is None
        assert LocalFileBackend(repo).read_file("big.txt") == "x" * 100

    def test_walk_skips_ignored_and_gitignored(self, repo):
        files = list(LocalFileBackend(repo).walk_files())
        assert "src/com/acme/A.java" in files
        assert "target/classes/A.class" not in files
        assert "generated/G.java" not in files
        assert "debug.log" not in files

    def test_walk_without_gitignore(self, repo):
        files = list(LocalFileBackend(repo, respect_gitignore=False).walk_files())
        assert "generated/G.java" in files

    def test_walk_subdirectory_sorted(self, repo):
        files = list(LocalFileBackend(repo).walk_files("src"))
        assert files == ["src/com/acme/A.java", "src/com/acme/B.java"]

    def test_relative_path(self, repo):
        backend = LocalFileBackend(repo)
        assert backend.relative_path(repo / "src" / "com" / "acme" / "A.java") == "src/com/acme/A.java"
        assert backend.relative_path(repo.parent / "elsewhere.txt") is None


class TestInMemoryFileBackend:
    def setup_method(self):
        self.backend = InMemoryFileBackend("/fake/repo", {
            "src/b.py": "b",
            "src/a.py": "a",
            "build/out.py": "generated",
        })

    def test_satisfies_protocol(self):
        assert isinstance(self.backend, FileBackend)

    def test_read_and_exists(self):
        assert self.backend.read_file("src/a.py") == "a"
        assert self.backend.file_exists("./src/a.py")
        assert not self.backend.file_exists("src/c.py")

    def test_blocks_path_traversal(self):
        assert self.backend.read_file("../etc/passwd") is None

    def test_size_limit(self):
        assert self.backend.read_file("src/a.py", max_size=0) is None

    def test_walk_sorted_with_ignores(self):
        assert list(self.backend.walk_files()) == ["build/out.py", "src/a.py", "src/b.py"]
        assert list(self.backend.walk_files(ignore_dirs={"build"})) == ["src/a.py", "src/b.py"]
        assert list(self.backend.walk_files("src")) == ["src/a.py", "src/b.py"]

    def test_add_and_remove(self):
        self.backend.add_file("src/c.py", "c")
        assert self.backend.read_file("src/c.py") == "c"
        self.backend.remove_file("src/c.py")
        assert self.backend.read_file("src/c.py") is None

    def test_add_rejects_escaping_path(self):
        with pytest.raises(ValueError):
            self.backend.add_file("../outside.py", "x")

    def test_relative_path(self):
        assert self.backend.relative_path("/fake/repo/src/a.py") == "src/a.py"
        assert self.backend.relative_path("src/./a.py") == "src/a.py"
        assert self.backend.relative_path("/fake/repo/src/missing.py") is None
