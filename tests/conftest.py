import os
import sys

# Ensure project root is on sys.path when pytest runs from a different CWD.
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

# Settings are read at import time; keep tests off disk and unthrottled
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from string_analyzer.main import app  # noqa: E402
from string_analyzer.routes import get_store  # noqa: E402
from string_analyzer.storage import InMemoryStringStore  # noqa: E402


@pytest.fixture
def store():
    return InMemoryStringStore()


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
