import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'adoc_reducer' and tests/ importable for helpers
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from helpers.cache_utils import reset_adoc_reducer_caches


# ============================================================================
# Isolation
# ============================================================================


@pytest.fixture(autouse=True)
def _isolate_global_state(monkeypatch: pytest.MonkeyPatch):
    """Drop ADOC_REDUCER_* variables and reset caches and logging around each test."""
    import os

    for key in list(os.environ):
        if key.startswith("ADOC_REDUCER_"):
            monkeypatch.delenv(key, raising=False)
    reset_adoc_reducer_caches()
    yield
    reset_adoc_reducer_caches()


# ============================================================================
# Fixture files
# ============================================================================


@pytest.fixture
def fixtures_dir() -> Path:
    return TESTS_ROOT / "fixtures"


@pytest.fixture
def book_path(fixtures_dir: Path) -> Path:
    """A book with chapter includes, a level offset, a tagged snippet and a draft-only block."""
    return fixtures_dir / "book" / "book.adoc"


@pytest.fixture
def write_doc(tmp_path: Path):
    """Write files below tmp_path and return the path of the first one.

    Usage:
        main = write_doc({"main.adoc": "include::a.adoc[]", "a.adoc": "text"})
    """
    from helpers.documents import write_files

    def _write(files):
        return write_files(tmp_path, files)

    return _write
