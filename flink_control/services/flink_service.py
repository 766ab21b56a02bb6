# flink_control/services/flink_service.py
import os, shutil, logging
from uuid import uuid4
from typing import BinaryIO
from fastapi import HTTPException

from flink_control.config import settings
from flink_control.clients.flink_client import FlinkClient
from flink_control.errors import (
    FlinkClientError, NotFoundError, RequestError, SubmissionError, UploadError,
)
from flink_control.models.jar import RunOverrides
from flink_control.status import is_terminal

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    NotFoundError: 404,
    UploadError: 400,
    SubmissionError: 502,
    RequestError: 502,
}


def get_client() -> FlinkClient:
    """A new client per call; handlers run in a thread pool and a session is not shared."""
    return FlinkClient(settings.client_config())


def _http_error(exc: FlinkClientError) -> HTTPException:
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS:
            return HTTPException(ERROR_STATUS[cls], str(exc))
    return HTTPException(500, str(exc))

# ---------- jars ----------
def list_jars():
    try:
        with get_client() as client:
            return [jar.model_dump() for jar in client.list_jars()]
    except FlinkClientError as e:
        raise _http_error(e)

def upload_jar(file_name: str, stream: BinaryIO):
    if not file_name or not file_name.endswith(".jar"):
        raise HTTPException(400, "Only .jar files can be uploaded")

    # keep the original name: Flink derives the jar id from it
    scratch = os.path.join(settings.UPLOAD_TMP_DIR, f"flink-upload-{uuid4()}")
    os.makedirs(scratch, exist_ok=True)
    local_path = os.path.join(scratch, os.path.basename(file_name))
    try:
        with open(local_path, "wb") as f:
            shutil.copyfileobj(stream, f)
        with get_client() as client:
            jar_id = client.upload_jar(local_path)
    except FlinkClientError as e:
        raise _http_error(e)
    finally:
        shutil.rmtree(scratch, ignore_errors=True)

    logger.info("uploaded %s as %s", file_name, jar_id)
    return {"jar_id": jar_id, "status": "uploaded"}

def delete_jar(jar_id: str):
    try:
        with get_client() as client:
            client.delete_jar(jar_id)
    except FlinkClientError as e:
        raise _http_error(e)
    return {"message": f"Jar {jar_id} deleted"}

def run_jar(jar_id: str, overrides: RunOverrides | None = None):
    try:
        with get_client() as client:
            job_id = client.run_jar(jar_id, overrides)
    except FlinkClientError as e:
        raise _http_error(e)
    return {"jar_id": jar_id, "job_id": job_id}

# ---------- jobs ----------
def list_jobs(running_only: bool = False):
    try:
        with get_client() as client:
            jobs = client.list_running_jobs() if running_only else client.list_jobs()
    except FlinkClientError as e:
        raise _http_error(e)
    return [
        {"job_id": jid, "state": job.get("state"), "name": job.get("name"), "terminal": is_terminal(job.get("state"))}
        for jid, job in jobs.items()
    ]

def get_job(job_id: str):
    try:
        with get_client() as client:
            return client.job_detail(job_id)
    except FlinkClientError as e:
        raise _http_error(e)

def cancel_job(job_id: str):
    with get_client() as client:
        return {"job_id": job_id, "canceled": client.cancel_job(job_id)}

# ---------- cluster ----------
def list_task_managers():
    try:
        with get_client() as client:
            return client.list_task_managers()
    except FlinkClientError as e:
        raise _http_error(e)

def cluster_health():
    with get_client() as client:
        try:
            client.list_task_managers()
            status = "ok"
        except RequestError as e:
            logger.warning("flink cluster unreachable: %s", e)
            status = "unreachable"
        return {"status": status, "flink_url": client.config.base_url}
