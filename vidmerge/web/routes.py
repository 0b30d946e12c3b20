"""JSON API routes for running the pipeline without a terminal."""

import json
import queue
import threading
import uuid
from pathlib import Path

from flask import Blueprint, Response, current_app, jsonify, request, send_file

from vidmerge.editors.merge import MergeError
from vidmerge.engine import RunCancelled, process
from vidmerge.ffutil import FFmpegError
from vidmerge.log import get_logger
from vidmerge.manifest import config_from_dict
from vidmerge.prompts import ScriptedInput

bp = Blueprint("web", __name__)

FILE_KINDS = ("merged", "cut", "normalized", "audio")

# In-memory job store: job_id -> job dict
_jobs: dict[str, dict] = {}


def _get_job(job_id: str) -> dict | None:
    return _jobs.get(job_id)


def _valid_prefix(prefix) -> bool:
    """True when *prefix* is a plain file-name stem that stays in the job dir."""
    if not isinstance(prefix, str) or not prefix or prefix in (".", ".."):
        return False
    return "/" not in prefix and "\\" not in prefix and Path(prefix).name == prefix


@bp.route("/api/jobs", methods=["POST"])
def create_job():
    body = request.get_json(silent=True) or {}
    if "prefix" in body and not _valid_prefix(body["prefix"]):
        return jsonify({"error": f"Invalid prefix: {body['prefix']!r}"}), 400

    job_id = uuid.uuid4().hex[:12]
    job_dir = Path(current_app.config["WORK_DIR"]) / job_id

    data = dict(body)
    data["output_dir"] = str(job_dir)
    cut = data.get("cut") or {}
    data["cut"] = {
        "enabled": bool(cut.get("start") and cut.get("end")),
        "start": cut.get("start"),
        "end": cut.get("end"),
    }
    try:
        config = config_from_dict(data)
    except (TypeError, ValueError) as e:
        return jsonify({"error": str(e)}), 400

    job_dir.mkdir(parents=True, exist_ok=True)
    progress_queue: queue.Queue = queue.Queue()
    job = {
        "dir": job_dir,
        "status": "processing",
        "error": None,
        "files": {},
        "progress_queue": progress_queue,
    }
    _jobs[job_id] = job

    def run():
        logger = get_logger(f"web.{job_id}")
        try:
            def on_progress(stage: str, frac: float):
                progress_queue.put({"stage": stage, "progress": round(frac, 3)})

            session = process(
                config,
                ScriptedInput.from_config(config),
                logger=logger,
                on_progress=on_progress,
            )
            job["files"] = {
                kind: str(getattr(session.paths, kind))
                for kind in FILE_KINDS
                if getattr(session.paths, kind).is_file()
            }
            job["stages"] = {name: o.status.value for name, o in session.stages.items()}
            job["status"] = "done"
        except RunCancelled:
            job["status"] = "cancelled"
        except MergeError as e:
            job["status"] = "error"
            job["error"] = f"{e}. Try: {e.fallback_command}"
        except FFmpegError as e:
            job["status"] = "error"
            job["error"] = f"ffmpeg failed: {e.stderr[-500:]}" if e.stderr else str(e)
        except Exception as e:
            logger.exception("Job %s failed", job_id)
            job["status"] = "error"
            job["error"] = str(e)
        finally:
            progress_queue.put(None)  # sentinel

    threading.Thread(target=run, daemon=True).start()
    return jsonify({"job_id": job_id, "status": "started"})


@bp.route("/api/jobs/<job_id>/progress")
def progress_stream(job_id: str):
    job = _get_job(job_id)
    if job is None:
        return jsonify({"error": "Job not found"}), 404

    q = job["progress_queue"]

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
                        "stage": job["status"],
                        "progress": 1.0,
                        "files": job.get("files"),
                    })
                yield f"data: {data}\n\n"
                break
            yield f"data: {json.dumps(msg)}\n\n"

    return Response(generate(), mimetype="text/event-stream")


@bp.route("/api/jobs/<job_id>/status")
def job_status(job_id: str):
    job = _get_job(job_id)
    if job is None:
        return jsonify({"error": "Job not found"}), 404

    resp = {"status": job["status"]}
    if job["status"] == "done":
        resp["files"] = job["files"]
        resp["stages"] = job.get("stages", {})
    if job["status"] == "error":
        resp["error"] = job["error"]
    return jsonify(resp)


@bp.route("/api/jobs/<job_id>/files/<kind>")
def download_file(job_id: str, kind: str):
    job = _get_job(job_id)
    if job is None:
        return jsonify({"error": "Job not found"}), 404
    if kind not in FILE_KINDS:
        return jsonify({"error": f"Unknown file kind: {kind}"}), 404
    if job["status"] != "done":
        return jsonify({"error": "Job not complete"}), 409
    if kind not in job["files"]:
        return jsonify({"error": f"No {kind} file was produced"}), 409

    return send_file(Path(job["files"][kind]), as_attachment=True)
