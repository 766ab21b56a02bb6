# flink_control/clients/flink_client.py
"""Synchronous client for the Flink JobManager monitoring REST API.

Every call issues exactly one blocking request (``run_jar`` also lists the
jars first to resolve the entry class) and returns plain Python values or
pydantic models. Nothing is cached between calls.
"""
import json
import logging
import os
from typing import Any, Optional

import requests
from pydantic import ValidationError

from flink_control.errors import NotFoundError, RequestError, SubmissionError, UploadError
from flink_control.models.client import ClientConfig
from flink_control.models.jar import JarRecord, RunOverrides, RunRequest
from flink_control.status import JobState

logger = logging.getLogger(__name__)


def _parse_json(response) -> Optional[Any]:
    """Decode a body as JSON whatever the declared content type; None if it isn't JSON."""
    # raw bytes: requests assumes ISO-8859-1 for text/* without a charset
    content = response.content
    if not content:
        return None
    try:
        return json.loads(content)
    except ValueError:
        return None


def _jar_id_from_filename(filename: str) -> str:
    return filename.rsplit("/", 1)[-1]


class FlinkClient:
    def __init__(self, config: ClientConfig | str, session: requests.Session | None = None):
        if isinstance(config, str):
            config = ClientConfig(base_url=config)
        self.config = config
        self.session = session or requests.Session()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        self.session.close()

    def _url(self, path: str) -> str:
        return f"{self.config.base_url}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, **kwargs):
        url = self._url(path)
        logger.info("request url: %s %s", method, url)
        try:
            return self.session.request(method, url, timeout=self.config.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.error("%s %s failed: %s", method, url, exc)
            raise RequestError(f"{method} {url} failed: {exc}") from exc

    # ---------- jars ----------
    def list_jars(self) -> list[JarRecord]:
        """Jars previously uploaded through ``/jars/upload``.

        A missing or malformed body yields an empty list.
        """
        body = _parse_json(self._request("GET", "jars"))
        if not isinstance(body, dict) or not isinstance(body.get("files"), list):
            return []

        jars = []
        for entry in body["files"]:
            if not isinstance(entry, dict) or "id" not in entry or "name" not in entry:
                continue
            entries = entry.get("entry")
            entry_classes = [
                str(e["name"]) for e in (entries if isinstance(entries, list) else [])
                if isinstance(e, dict) and e.get("name")
            ]
            try:
                jars.append(JarRecord(
                    id=str(entry["id"]),
                    name=str(entry["name"]),
                    entry_classes=entry_classes,
                    uploaded=entry.get("uploaded"),
                ))
            except ValidationError as exc:
                logger.warning("skipping malformed jar entry %s: %s", entry.get("id"), exc)
        return jars

    def jar_names(self) -> dict[str, str]:
        return {jar.id: jar.name for jar in self.list_jars()}

    def entry_class_of(self, jar_id: str) -> str:
        for jar in self.list_jars():
            if jar.id == jar_id and jar.entry_classes:
                return jar.entry_classes[0]
        raise NotFoundError(f"No entry class available for jar '{jar_id}'")

    def upload_jar(self, file_path: str) -> str:
        """Upload a local jar and return the id the cluster assigned to it."""
        if not os.path.isfile(file_path):
            logger.error("jar upload failed: %s does not exist", file_path)
            raise UploadError(f"Jar file not found: {file_path}")

        with open(file_path, "rb") as f:
            files = {"jarfile": (os.path.basename(file_path), f, "application/x-java-archive")}
            response = self._request("POST", "jars/upload", files=files)

        body = _parse_json(response)
        if response.status_code >= 400 or not isinstance(body, dict) or body.get("status") != "success":
            logger.error("jar upload failed (%s): %s", response.status_code, response.text)
            raise UploadError(f"Jar upload failed with status {response.status_code}: {body}")

        filename = body.get("filename")
        if not filename:
            raise UploadError(f"Jar upload response has no filename: {body}")
        return _jar_id_from_filename(filename)

    def delete_jar(self, jar_id: str) -> None:
        # the response status is not inspected; only transport errors surface
        self._request("DELETE", f"jars/{jar_id}")

    def run_jar(self, jar_id: str, overrides: RunOverrides | None = None) -> str:
        overrides = overrides or RunOverrides()
        entry_class = overrides.entry_class or self.entry_class_of(jar_id)

        run = RunRequest(
            jar_id=jar_id,
            entry_class=entry_class,
            parallelism=overrides.parallelism or self.config.default_parallelism,
            savepoint_path=(overrides.savepoint_path
                            if overrides.savepoint_path is not None
                            else self.config.savepoint_path),
            allow_non_restored_state=bool(overrides.allow_non_restored_state),
            program_args=overrides.program_args,
        )

        logger.info("starting flink job: jar_id=%s entry_class=%s", jar_id, entry_class)
        response = self._request("POST", f"jars/{jar_id}/run", files=run.multipart_fields())
        body = _parse_json(response)
        logger.info("run jar result: %s", body)

        if response.status_code >= 400 or not isinstance(body, dict) or not body.get("jobid"):
            logger.error("run jar[%s] failed (%s): %s", jar_id, response.status_code, response.text)
            raise SubmissionError(f"No job id returned for jar '{jar_id}': {body}")
        return body["jobid"]

    # ---------- jobs ----------
    def list_jobs(self) -> dict[str, dict]:
        body = _parse_json(self._request("GET", "jobs/overview"))
        if not isinstance(body, dict) or not isinstance(body.get("jobs"), list):
            return {}
        return {
            job["jid"]: job
            for job in body["jobs"]
            if isinstance(job, dict) and job.get("jid")
        }

    def list_running_jobs(self) -> dict[str, dict]:
        return {
            jid: job for jid, job in self.list_jobs().items()
            if job.get("state") == JobState.RUNNING.value
        }

    def job_detail(self, job_id: str) -> dict:
        response = self._request("GET", f"jobs/{job_id}")
        if response.status_code == 404:
            raise NotFoundError(f"Job '{job_id}' not found")
        if response.status_code >= 400:
            raise RequestError(f"GET jobs/{job_id} returned {response.status_code}")
        body = _parse_json(response)
        if not isinstance(body, dict):
            raise RequestError(f"Malformed detail for job '{job_id}'")
        return body

    def cancel_job(self, job_id: str) -> bool:
        """Best-effort cancel; reports failure instead of raising."""
        try:
            response = self._request("GET", f"jobs/{job_id}/yarn-cancel")
        except RequestError as exc:
            logger.error("cancel job[%s] failed: %s", job_id, exc)
            return False
        if response.status_code >= 400:
            logger.error("cancel job[%s] returned %s: %s", job_id, response.status_code, response.text)
            return False
        logger.info("cancel job[%s] result: %s", job_id, response.text)
        return True

    # ---------- cluster ----------
    def list_task_managers(self) -> list[dict]:
        body = _parse_json(self._request("GET", "taskmanagers"))
        if not isinstance(body, dict) or not isinstance(body.get("taskmanagers"), list):
            return []
        return body["taskmanagers"]
