"""Tests for the operator CLI."""
from typer.testing import CliRunner

from milestones import state
from milestones.cli import app

runner = CliRunner()


def _records():
    return [
        {"id": "1", "title": "Kickoff", "description": "", "date": "d", "owner": 2,
         "images": ["http://h/uploads/keep.png"], "createdAt": "c"},
        {"id": "2", "title": "Launch", "description": "", "date": "d", "owner": 3,
         "images": [], "createdAt": "c"},
    ]


def test_list_empty(db_file):
    result = runner.invoke(app, ["list", "--db-file", str(db_file)])
    assert result.exit_code == 0
    assert "No milestones stored." in result.output


def test_list_shows_titles(db_file):
    state.save_milestones(db_file, _records())
    result = runner.invoke(app, ["list", "--db-file", str(db_file)])
    assert result.exit_code == 0
    assert "Kickoff" in result.output
    assert "Launch" in result.output


def test_delete(db_file):
    state.save_milestones(db_file, _records())
    result = runner.invoke(app, ["delete", "1", "--db-file", str(db_file)])
    assert result.exit_code == 0
    assert [m["id"] for m in state.load_milestones(db_file)] == ["2"]


def test_delete_missing_exits_nonzero(db_file):
    state.save_milestones(db_file, _records())
    result = runner.invoke(app, ["delete", "9", "--db-file", str(db_file)])
    assert result.exit_code == 1
    assert len(state.load_milestones(db_file)) == 2


def test_orphans(db_file, upload_dir):
    state.save_milestones(db_file, _records())
    upload_dir.mkdir()
    (upload_dir / "keep.png").write_bytes(b"k")
    (upload_dir / "stray.png").write_bytes(b"s")

    result = runner.invoke(app, ["orphans", "--db-file", str(db_file), "--upload-dir", str(upload_dir)])
    assert result.exit_code == 0
    assert "stray.png" in result.output
    assert "keep.png" not in result.output


def test_no_orphans(db_file, upload_dir):
    result = runner.invoke(app, ["orphans", "--db-file", str(db_file), "--upload-dir", str(upload_dir)])
    assert result.exit_code == 0
    assert "No orphaned uploads." in result.output
