import pytest
import sys
from pathlib import Path
from PIL import Image

# Add src to sys.path so we can import mistipad
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from mistipad.core.models import QuestionSet
from mistipad.manager import QuestionSetManager
from mistipad.storage import MemoryBlobStore, MemoryFileStore, PersistenceStore


# Common test fixtures
@pytest.fixture
def blobs():
    """Empty in-memory blob store."""
    return MemoryBlobStore()


@pytest.fixture
def files():
    """Empty in-memory file store."""
    return MemoryFileStore()


@pytest.fixture
def store(blobs, files):
    """PersistenceStore over the in-memory fakes."""
    return PersistenceStore(blobs, files)


@pytest.fixture
def manager(store):
    """Manager with empty collections."""
    return QuestionSetManager(store)


@pytest.fixture
def math_set():
    """A one-question set with a fixed id."""
    return QuestionSet(id="A", title="Math", questions=["2+2"], answers=["4"])


@pytest.fixture
def sample_image():
    """Create a simple test image."""
    return Image.new("RGB", (20, 10), color="white")


@pytest.fixture
def png_bytes(sample_image):
    """PNG encoding of sample_image."""
    from mistipad.images import encode_png
    return encode_png(sample_image)
