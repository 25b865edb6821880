"""
Shared fixtures.

Every test gets its own milestone store file and upload directory under
pytest's tmp_path, wired into the Flask app's config.
"""
import json

import pytest

from milestones.server import app


@pytest.fixture
def db_file(tmp_path):
    return tmp_path / "milestones_db.json"


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def client(db_file, upload_dir):
    original = dict(app.config)
    app.config.update(TESTING=True, DB_FILE=db_file, UPLOAD_DIR=upload_dir)
    with app.test_client() as test_client:
        yield test_client
    app.config.clear()
    app.config.update(original)


@pytest.fixture
def seed(db_file):
    """Write the given milestones straight into the store file."""

    def _seed(milestones):
        db_file.write_text(json.dumps(milestones), encoding="utf-8")
        return milestones

    return _seed
