"""Web UI routes for mkvutils."""

import json
import queue
import threading
import uuid
from decimal import Decimal, InvalidOperation
from pathlib import Path

from flask import Blueprint, Response, current_app, jsonify, request, send_file
from werkzeug.utils import secure_filename

from mkvutils.engine import process
from mkvutils.errors import EngineFailureError, InvalidInputError
from mkvutils.manifest import Manifest, MergeConfig, SplitConfig
from mkvutils.planners.merge import plan_merge
from mkvutils.planners.split import plan_split
from mkvutils.timestamps import format_timestamp

bp = Blueprint("web", __name__)

# In-memory job store: job_id -> job dict
_jobs: dict[str, dict] = {}


def _overlap(config: dict) -> int:
    try:
        return int(config.get("overlap_ms", 0))
    except (TypeError, ValueError):
        raise InvalidInputError("overlap_ms must be an integer")


@bp.errorhandler(InvalidInputError)
def invalid_input(error):
    return jsonify({"error": str(error)}), 400


@bp.route("/api/plan/split", methods=["POST"])
def preview_split():
    config = request.get_json() or {}
    segments = plan_split(config.get("timestamps", []), _overlap(config))
    return jsonify({
        "segments": [
            {
                "track": seg.track_name,
                "start": str(seg.start),
                "duration": None if seg.duration is None else str(seg.duration),
                "start_timestamp": format_timestamp(seg.start),
            }
            for seg in segments
        ]
    })


@bp.route("/api/plan/merge", methods=["POST"])
def preview_merge():
    config = request.get_json() or {}
    try:
        tracks = [(Path(t["name"]), Decimal(str(t["duration"]))) for t in config.get("tracks", [])]
    except (KeyError, TypeError, InvalidOperation):
        raise InvalidInputError("Each track needs a name and a duration")
    if not tracks:
        raise InvalidInputError("No tracks given")

    plan = plan_merge(tracks, _overlap(config))
    return jsonify({
        "total_duration": str(plan.total_duration),
        "entries": [
            {
                "name": str(e.path),
                "start_offset": str(e.start_offset),
                "fade_in": str(e.fade_in),
                "fade_out": str(e.fade_out),
            }
            for e in plan.entries
        ],
    })


@bp.route("/api/upload", methods=["POST"])
def upload():
    files = request.files.getlist("file")
    if not files:
        return jsonify({"error": "No file provided"}), 400
    if any(not f.filename for f in files):
        return jsonify({"error": "Empty filename"}), 400

    job_id = uuid.uuid4().hex[:12]
    job_dir = Path(current_app.config["WORK_DIR"]) / job_id
    upload_dir = job_dir / "uploads"
    upload_dir.mkdir(parents=True, exist_ok=True)

    names = []
    for f in files:
        name = secure_filename(f.filename) or f"upload{Path(f.filename).suffix}"
        f.save(upload_dir / name)
        names.append(name)

    _jobs[job_id] = {
        "dir": job_dir,
        "upload_dir": upload_dir,
        "filenames": names,
        "status": "uploaded",
    }

    return jsonify({"job_id": job_id, "filenames": names})


def _manifest_for(job: dict, config: dict) -> Manifest:
    command = config.get("command")
    overlap_ms = _overlap(config)
    if command == "split":
        if len(job["filenames"]) != 1:
            raise InvalidInputError("split needs exactly one uploaded file")
        timestamps = config.get("timestamps", [])
        plan_split(timestamps, overlap_ms)
        return Manifest(
            command="split",
            input=job["upload_dir"] / job["filenames"][0],
            output=job["dir"] / "tracks",
            split=SplitConfig(timestamps=timestamps, overlap_ms=overlap_ms),
        )
    if command == "merge":
        if overlap_ms < 0:
            raise InvalidInputError("overlap_ms must not be negative")
        return Manifest(
            command="merge",
            input=job["upload_dir"],
            output=job["dir"] / "merged.flac",
            merge=MergeConfig(overlap_ms=overlap_ms),
        )
    raise InvalidInputError(f"Unsupported command: {command!r}")


@bp.route("/api/jobs/<job_id>/process", methods=["POST"])
def start_process(job_id: str):
    if job_id not in _jobs:
        return jsonify({"error": "Job not found"}), 404

    job = _jobs[job_id]
    if job["status"] not in ("uploaded", "done", "error"):
        return jsonify({"error": f"Job is already {job['status']}"}), 409

    manifest = _manifest_for(job, request.get_json() or {})

    progress_queue: queue.Queue = queue.Queue()
    job["progress_queue"] = progress_queue
    job["status"] = "processing"
    job["error"] = None

    def run():
        try:
            def on_progress(stage: str, frac: float):
                progress_queue.put({"stage": stage, "progress": round(frac, 3)})

            result = process(manifest, on_progress=on_progress)
            job["outputs"] = {p.name: p for p in result.outputs}
            job["result"] = {
                "outputs": sorted(job["outputs"]),
                "duration_final": (
                    str(result.duration_final) if result.duration_final is not None else None
                ),
            }
            job["status"] = "done"
        except EngineFailureError as e:
            job["status"] = "error"
            job["error"] = f"ffmpeg failed: {e.stderr[-500:]}" if e.stderr else str(e)
        except Exception as e:
            job["status"] = "error"
            job["error"] = str(e)
        finally:
            progress_queue.put(None)  # sentinel

    threading.Thread(target=run, daemon=True).start()
    return jsonify({"status": "started"})


@bp.route("/api/jobs/<job_id>/progress")
def progress_stream(job_id: str):
    if job_id not in _jobs:
        return jsonify({"error": "Job not found"}), 404

    job = _jobs[job_id]
    q = job.get("progress_queue")

    if q is None:
        return jsonify({"error": "No processing in progress"}), 409

    def generate():
        while True:
            try:
                msg = q.get(timeout=120)
            except queue.Empty:
                yield "data: {\"error\": \"timeout\"}\n\n"
                break
            if msg is None:
                if job["status"] == "error":
                    data = json.dumps({"error": job["error"]})
                else:
                    data = json.dumps({
                        "stage": "complete",
                        "progress": 1.0,
                        "result": job.get("result"),
                    })
                yield f"data: {data}\n\n"
                break
            yield f"data: {json.dumps(msg)}\n\n"

    return Response(generate(), mimetype="text/event-stream")


@bp.route("/api/jobs/<job_id>/result/<name>")
def download_result(job_id: str, name: str):
    if job_id not in _jobs:
        return jsonify({"error": "Job not found"}), 404

    job = _jobs[job_id]
    if job["status"] != "done":
        return jsonify({"error": "Job not complete"}), 409

    path = job["outputs"].get(name)
    if path is None:
        return jsonify({"error": "No such output"}), 404
    return send_file(path, as_attachment=True)


@bp.route("/api/jobs/<job_id>/status")
def job_status(job_id: str):
    if job_id not in _jobs:
        return jsonify({"error": "Job not found"}), 404

    job = _jobs[job_id]
    resp = {"status": job["status"], "filenames": job.get("filenames")}
    if job["status"] == "done":
        resp["result"] = job.get("result")
    if job["status"] == "error":
        resp["error"] = job.get("error")
    return jsonify(resp)
