"""Unit tests for the vidmerge web API."""

from unittest.mock import patch

import pytest

from vidmerge.editors.merge import MergeError
from vidmerge.engine import RunCancelled
from vidmerge.models import Session, SessionPaths, StageOutcome, StageStatus
from vidmerge.web import create_app


class _InlineThread:
    """Runs the job synchronously so responses can be checked right away."""

    def __init__(self, target, daemon=None):
        self.target = target

    def start(self):
        self.target()


@pytest.fixture
def app(tmp_path):
    app = create_app(work_dir=tmp_path)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture(autouse=True)
def inline_threads():
    with patch("vidmerge.web.routes.threading.Thread", _InlineThread):
        yield


def _fake_process(config, provider, logger=None, on_progress=None):
    paths = SessionPaths.for_prefix(config.prefix, config.output_dir)
    paths.merged.write_bytes(b"merged")
    paths.audio.write_bytes(b"mp3")
    if on_progress:
        on_progress("Merging files", 0.1)
    session = Session(prefix=config.prefix, paths=paths)
    session.record("merge", StageOutcome(StageStatus.DONE, paths.merged))
    return session


def _start(client, **body):
    body.setdefault("input_dir", "/videos")
    return client.post("/api/jobs", json=body)


class TestCreateJob:
    def test_missing_input_dir(self, client):
        resp = client.post("/api/jobs", json={"prefix": "x"})
        assert resp.status_code == 400
        assert "input_dir" in resp.get_json()["error"]

    def test_bad_section(self, client):
        resp = _start(client, audio={"quality": "best"})
        assert resp.status_code == 400

    @pytest.mark.parametrize("prefix", ["../../escaped", "a/b", "..", "/abs", "x\\y", "", 5])
    @patch("vidmerge.web.routes.process", side_effect=_fake_process)
    def test_prefix_must_stay_in_job_dir(self, mock_process, client, tmp_path, prefix):
        resp = _start(client, prefix=prefix)
        assert resp.status_code == 400
        assert "prefix" in resp.get_json()["error"]
        mock_process.assert_not_called()
        assert list(tmp_path.iterdir()) == []

    @patch("vidmerge.web.routes.process", side_effect=_fake_process)
    def test_starts(self, mock_process, client):
        resp = _start(client, prefix="final")
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["status"] == "started"
        assert "job_id" in data

    @patch("vidmerge.web.routes.process", side_effect=_fake_process)
    def test_config_passed_to_engine(self, mock_process, client, tmp_path):
        resp = _start(client, prefix="final", cut={"start": "10", "end": "40"})
        job_id = resp.get_json()["job_id"]

        config = mock_process.call_args[0][0]
        assert config.prefix == "final"
        assert config.output_dir == tmp_path / job_id
        assert config.cut.enabled is True
        assert config.cut.start == "10"

    @patch("vidmerge.web.routes.process", side_effect=_fake_process)
    def test_no_cut_by_default(self, mock_process, client):
        _start(client)
        config = mock_process.call_args[0][0]
        assert config.cut.enabled is False


class TestStatus:
    @patch("vidmerge.web.routes.process", side_effect=_fake_process)
    def test_done(self, mock_process, client):
        job_id = _start(client).get_json()["job_id"]
        resp = client.get(f"/api/jobs/{job_id}/status")
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["status"] == "done"
        assert set(data["files"]) == {"merged", "audio"}
        assert data["stages"] == {"merge": "done"}

    @patch("vidmerge.web.routes.process", side_effect=RunCancelled())
    def test_cancelled(self, mock_process, client):
        job_id = _start(client).get_json()["job_id"]
        assert client.get(f"/api/jobs/{job_id}/status").get_json()["status"] == "cancelled"

    @patch("vidmerge.web.routes.process", side_effect=MergeError("Failed to merge files", "ffmpeg -c:v libx264"))
    def test_merge_error(self, mock_process, client):
        job_id = _start(client).get_json()["job_id"]
        data = client.get(f"/api/jobs/{job_id}/status").get_json()
        assert data["status"] == "error"
        assert "libx264" in data["error"]

    def test_unknown_job(self, client):
        assert client.get("/api/jobs/nonexistent/status").status_code == 404


class TestProgress:
    @patch("vidmerge.web.routes.process", side_effect=_fake_process)
    def test_stream(self, mock_process, client):
        job_id = _start(client).get_json()["job_id"]
        resp = client.get(f"/api/jobs/{job_id}/progress")
        assert resp.mimetype == "text/event-stream"
        body = resp.get_data(as_text=True)
        assert '"stage": "Merging files"' in body
        assert '"stage": "done"' in body

    def test_unknown_job(self, client):
        assert client.get("/api/jobs/nonexistent/progress").status_code == 404


class TestDownload:
    @patch("vidmerge.web.routes.process", side_effect=_fake_process)
    def test_download(self, mock_process, client):
        job_id = _start(client).get_json()["job_id"]
        resp = client.get(f"/api/jobs/{job_id}/files/audio")
        assert resp.status_code == 200
        assert resp.data == b"mp3"

    @patch("vidmerge.web.routes.process", side_effect=_fake_process)
    def test_file_not_produced(self, mock_process, client):
        job_id = _start(client).get_json()["job_id"]
        assert client.get(f"/api/jobs/{job_id}/files/cut").status_code == 409

    @patch("vidmerge.web.routes.process", side_effect=_fake_process)
    def test_unknown_kind(self, mock_process, client):
        job_id = _start(client).get_json()["job_id"]
        assert client.get(f"/api/jobs/{job_id}/files/video").status_code == 404

    @patch("vidmerge.web.routes.process", side_effect=RunCancelled())
    def test_not_complete(self, mock_process, client):
        job_id = _start(client).get_json()["job_id"]
        assert client.get(f"/api/jobs/{job_id}/files/merged").status_code == 409

    def test_unknown_job(self, client):
        assert client.get("/api/jobs/nonexistent/files/merged").status_code == 404
