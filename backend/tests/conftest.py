import json
import os
import shutil
import tempfile
from pathlib import Path

import pytest

# Point the app at throwaway storage before importing app modules
_SESSION_DIR = Path(tempfile.mkdtemp(prefix="handbook_pytest_"))
CONTENT_PATH = _SESSION_DIR / "content.json"

os.environ["DATABASE_URL"] = f"sqlite:///{_SESSION_DIR / 'handbook.db'}"
os.environ["CONTENT_TREE_PATH"] = str(CONTENT_PATH)
os.environ.pop("CONTENT_TREE_URL", None)
os.environ.setdefault("LOG_LEVEL", "WARNING")

from fastapi.testclient import TestClient  # noqa: E402

from handbook.database import Base, SessionLocal, engine  # noqa: E402
from handbook.main import app  # noqa: E402
from handbook.api.tracking import limiter  # noqa: E402


def policy(id, title, summary="", body="", url=None, **properties):
    properties.update({"policyTitle": title, "summary": summary, "fullPolicyText": body})
    return {
        "id": id,
        "name": title,
        "contentType": "policyCard",
        "url": url or f"/policies/{id}/",
        "properties": properties,
    }


def category(id, title, description="", url=None, children=None):
    return {
        "id": id,
        "name": title,
        "contentType": "HandbookCategoryCard",
        "url": url or f"/categories/{id}/",
        "properties": {"categoryTitle": title, "categoryDescription": description},
        "children": children or [],
    }


SAMPLE_TREE = [
    {
        "id": 1,
        "name": "Home",
        "contentType": "home",
        "url": "/",
        "children": [
            category(10, "People", "Leave, benefits and conduct", url="/people/", children=[
                policy(101, "Annual Leave",
                       summary="<p>How to <b>request</b> leave</p>",
                       body="<p>Staff accrue leave monthly.</p>",
                       url="/people/annual-leave/",
                       revisionDate="2024-03-01T00:00:00"),
                policy(102, "Remote Work",
                       body="<p>one two three four five</p>",
                       url="/people/remote-work/"),
            ]),
            category(20, "Finance", "Expenses and travel", url="/finance/", children=[
                policy(201, 'Acme, "Inc"',
                       summary="<p>Claiming expenses</p>",
                       body="<p>Line one,\nline two</p>",
                       url="/finance/acme/"),
            ]),
        ],
    }
]


def write_content(document):
    CONTENT_PATH.write_text(json.dumps(document), encoding="utf-8")


@pytest.fixture(autouse=True)
def _fresh_state():
    Base.metadata.drop_all(bind=engine)
    write_content(SAMPLE_TREE)
    limiter.reset()
    app.dependency_overrides.clear()
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    # Entering the client runs the lifespan, which bootstraps the schema
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def pytest_sessionfinish(session, exitstatus):
    """Cleanup temporary test files after the test session."""
    engine.dispose()
    shutil.rmtree(_SESSION_DIR, ignore_errors=True)
