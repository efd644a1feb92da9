"""Unit tests for the mkvutils web UI."""

import io
from pathlib import Path
from unittest.mock import patch

import pytest

from mkvutils.engine import EngineResult
from mkvutils.web import create_app
from mkvutils.web import routes


@pytest.fixture
def app(tmp_path):
    app = create_app(work_dir=tmp_path)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def _upload(client, *names, content=b"fake audio data"):
    names = names or ("album.flac",)
    return client.post(
        "/api/upload",
        data={"file": [(io.BytesIO(content), name) for name in names]},
        content_type="multipart/form-data",
    )


def _wait(job_id):
    """Block until the job thread has posted its sentinel."""
    q = routes._jobs[job_id]["progress_queue"]
    while q.get(timeout=5) is not None:
        pass


class TestPlanPreview:
    def test_split(self, client):
        resp = client.post(
            "/api/plan/split",
            json={"timestamps": ["00:00:03.000", "00:00:07.000"], "overlap_ms": 200},
        )
        assert resp.status_code == 200
        segs = resp.get_json()["segments"]
        assert [s["track"] for s in segs] == ["track_01", "track_02", "track_03"]
        assert segs[1]["start"] == "2.800"
        assert segs[1]["duration"] == "4.200"
        assert segs[2]["duration"] is None
        assert segs[2]["start_timestamp"] == "00:00:06.800"

    def test_split_invalid(self, client):
        resp = client.post("/api/plan/split", json={"timestamps": ["00:00:07.000", "00:00:03.000"]})
        assert resp.status_code == 400
        assert "strictly increasing" in resp.get_json()["error"]

    def test_merge(self, client):
        resp = client.post(
            "/api/plan/merge",
            json={"tracks": [{"name": "a.flac", "duration": 5}, {"name": "b.flac", "duration": "5.0"}], "overlap_ms": 1000},
        )
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["total_duration"] == "9.000"
        assert data["entries"][1]["start_offset"] == "4.000"
        assert data["entries"][1]["fade_in"] == "1.000"

    def test_merge_bad_track(self, client):
        resp = client.post("/api/plan/merge", json={"tracks": [{"name": "a.flac"}]})
        assert resp.status_code == 400


class TestUpload:
    def test_upload_success(self, client):
        resp = _upload(client)
        assert resp.status_code == 200
        data = resp.get_json()
        assert "job_id" in data
        assert data["filenames"] == ["album.flac"]

    def test_upload_no_file(self, client):
        resp = client.post("/api/upload")
        assert resp.status_code == 400

    def test_upload_many(self, client, tmp_path):
        resp = _upload(client, "track_01.flac", "track_02.flac", content=b"CONTENT")
        job_id = resp.get_json()["job_id"]
        uploaded = sorted(p.name for p in (tmp_path / job_id / "uploads").iterdir())
        assert uploaded == ["track_01.flac", "track_02.flac"]
        assert (tmp_path / job_id / "uploads" / "track_01.flac").read_bytes() == b"CONTENT"


class TestProcess:
    def test_process_unknown_job(self, client):
        resp = client.post("/api/jobs/nonexistent/process", json={"command": "merge"})
        assert resp.status_code == 404

    def test_bad_timestamps_rejected_before_start(self, client):
        job_id = _upload(client).get_json()["job_id"]
        resp = client.post(f"/api/jobs/{job_id}/process", json={"command": "split", "timestamps": []})
        assert resp.status_code == 400
        assert client.get(f"/api/jobs/{job_id}/status").get_json()["status"] == "uploaded"

    def test_unsupported_command(self, client):
        job_id = _upload(client).get_json()["job_id"]
        resp = client.post(f"/api/jobs/{job_id}/process", json={"command": "extract"})
        assert resp.status_code == 400

    @patch("mkvutils.web.routes.process")
    def test_split_job_completes(self, mock_process, client, tmp_path):
        job_id = _upload(client).get_json()["job_id"]
        track = tmp_path / job_id / "tracks" / "track_01.flac"
        track.parent.mkdir(parents=True)
        track.write_bytes(b"TRACK")
        mock_process.return_value = EngineResult(outputs=[track, track.with_name("track_02.flac")])

        resp = client.post(
            f"/api/jobs/{job_id}/process",
            json={"command": "split", "timestamps": ["00:00:01.000"], "overlap_ms": 100},
        )
        assert resp.status_code == 200
        assert resp.get_json()["status"] == "started"
        _wait(job_id)

        manifest = mock_process.call_args.args[0]
        assert manifest.command == "split"
        assert manifest.input == tmp_path / job_id / "uploads" / "album.flac"
        assert manifest.split.overlap_ms == 100

        status = client.get(f"/api/jobs/{job_id}/status").get_json()
        assert status["status"] == "done"
        assert status["result"]["outputs"] == ["track_01.flac", "track_02.flac"]

        download = client.get(f"/api/jobs/{job_id}/result/track_01.flac")
        assert download.status_code == 200
        assert download.data == b"TRACK"
        download.close()

        assert client.get(f"/api/jobs/{job_id}/result/other.flac").status_code == 404

    @patch("mkvutils.web.routes.process")
    def test_engine_failure_is_reported(self, mock_process, client):
        from mkvutils.errors import EngineFailureError

        mock_process.side_effect = EngineFailureError(["ffmpeg"], 1, "Conversion failed!")
        job_id = _upload(client, "track_01.flac", "track_02.flac").get_json()["job_id"]
        client.post(f"/api/jobs/{job_id}/process", json={"command": "merge", "overlap_ms": 500})
        _wait(job_id)

        status = client.get(f"/api/jobs/{job_id}/status").get_json()
        assert status["status"] == "error"
        assert status["error"] == "ffmpeg failed: Conversion failed!"


class TestStatus:
    def test_status_after_upload(self, client):
        job_id = _upload(client).get_json()["job_id"]
        resp = client.get(f"/api/jobs/{job_id}/status")
        assert resp.status_code == 200
        assert resp.get_json()["status"] == "uploaded"

    def test_status_unknown_job(self, client):
        resp = client.get("/api/jobs/nonexistent/status")
        assert resp.status_code == 404


class TestDownload:
    def test_download_not_complete(self, client):
        job_id = _upload(client).get_json()["job_id"]
        resp = client.get(f"/api/jobs/{job_id}/result/track_01.flac")
        assert resp.status_code == 409

    def test_download_unknown_job(self, client):
        resp = client.get("/api/jobs/nonexistent/result/track_01.flac")
        assert resp.status_code == 404
