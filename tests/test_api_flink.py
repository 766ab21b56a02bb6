import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from flink_control.errors import NotFoundError, RequestError, SubmissionError, UploadError
from flink_control.models.jar import JarRecord


class FakeFlinkClient:
    def __init__(self):
        self.config = type("Cfg", (), {"base_url": "http://flink:8081"})()
        self.uploaded = []
        self.deleted = []
        self.runs = []
        self.fail_with = None
        self.closed = 0

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed += 1

    def _maybe_fail(self):
        if self.fail_with is not None:
            raise self.fail_with

    def list_jars(self):
        self._maybe_fail()
        return [JarRecord(id="a", name="x.jar", entry_classes=["com.Foo"])]

    def upload_jar(self, path):
        self._maybe_fail()
        with open(path, "rb") as f:
            self.uploaded.append((path, f.read()))
        return "abc-123.jar"

    def delete_jar(self, jar_id):
        self._maybe_fail()
        self.deleted.append(jar_id)

    def run_jar(self, jar_id, overrides=None):
        self._maybe_fail()
        self.runs.append((jar_id, overrides))
        return "job-1"

    def list_jobs(self):
        self._maybe_fail()
        return {"j1": {"jid": "j1", "state": "RUNNING", "name": "one"},
                "j2": {"jid": "j2", "state": "FINISHED", "name": "two"}}

    def list_running_jobs(self):
        return {k: v for k, v in self.list_jobs().items() if v["state"] == "RUNNING"}

    def job_detail(self, job_id):
        self._maybe_fail()
        if job_id != "j1":
            raise NotFoundError(f"Job '{job_id}' not found")
        return {"jid": "j1", "state": "RUNNING"}

    def cancel_job(self, job_id):
        return job_id == "j1"

    def list_task_managers(self):
        self._maybe_fail()
        return [{"id": "tm-1"}]


@pytest.fixture
def fake_client(monkeypatch):
    from flink_control.services import flink_service

    client = FakeFlinkClient()
    monkeypatch.setattr(flink_service, "get_client", lambda: client)
    return client


@pytest.fixture
def api_client(fake_client, tmp_path, monkeypatch):
    from flink_control.config import settings
    from flink_control.api import router as api_router_module

    monkeypatch.setattr(settings, "UPLOAD_TMP_DIR", str(tmp_path))

    app = FastAPI()
    app.include_router(api_router_module.api_router)
    client = TestClient(app)
    try:
        yield client
    finally:
        client.close()


def test_list_jars(api_client):
    resp = api_client.get("/jars")
    assert resp.status_code == 200
    assert resp.json() == [{"id": "a", "name": "x.jar", "entry_classes": ["com.Foo"], "uploaded": None}]


def test_upload_jar_cleans_scratch(api_client, fake_client, tmp_path):
    resp = api_client.post("/jars/upload", files={"jarfile": ("app.jar", b"PK\x03\x04", "application/java-archive")})
    assert resp.status_code == 200, resp.text
    assert resp.json() == {"jar_id": "abc-123.jar", "status": "uploaded"}

    path, content = fake_client.uploaded[0]
    assert path.endswith("app.jar")
    assert content == b"PK\x03\x04"
    assert list(tmp_path.iterdir()) == []


def test_upload_rejects_non_jar(api_client, fake_client):
    resp = api_client.post("/jars/upload", files={"jarfile": ("notes.txt", b"hi", "text/plain")})
    assert resp.status_code == 400
    assert fake_client.uploaded == []


def test_upload_error_maps_to_400(api_client, fake_client):
    fake_client.fail_with = UploadError("rejected")
    resp = api_client.post("/jars/upload", files={"jarfile": ("app.jar", b"PK", "application/java-archive")})
    assert resp.status_code == 400


def test_delete_jar(api_client, fake_client):
    resp = api_client.delete("/jars/a")
    assert resp.status_code == 200
    assert fake_client.deleted == ["a"]


def test_run_jar_with_overrides(api_client, fake_client):
    resp = api_client.post("/jars/a/run", json={"parallelism": 3, "program_args": "--in s3://x"})
    assert resp.status_code == 200, resp.text
    assert resp.json() == {"jar_id": "a", "job_id": "job-1"}
    _, overrides = fake_client.runs[0]
    assert overrides.parallelism == 3
    assert overrides.program_args == "--in s3://x"


def test_run_jar_rejects_zero_parallelism(api_client, fake_client):
    resp = api_client.post("/jars/a/run", json={"parallelism": 0})
    assert resp.status_code == 422
    assert fake_client.runs == []


@pytest.mark.parametrize("error, status", [
    (NotFoundError("no entry class"), 404),
    (SubmissionError("no job id"), 502),
    (RequestError("down"), 502),
])
def test_run_jar_error_mapping(api_client, fake_client, error, status):
    fake_client.fail_with = error
    resp = api_client.post("/jars/a/run")
    assert resp.status_code == status


def test_list_jobs(api_client):
    jobs = api_client.get("/jobs").json()
    assert {j["job_id"] for j in jobs} == {"j1", "j2"}
    finished = next(j for j in jobs if j["job_id"] == "j2")
    assert finished["terminal"] is True

    running = api_client.get("/jobs", params={"running": True}).json()
    assert [j["job_id"] for j in running] == ["j1"]


def test_get_job(api_client):
    assert api_client.get("/jobs/j1").json()["state"] == "RUNNING"
    assert api_client.get("/jobs/nope").status_code == 404


def test_cancel_job(api_client):
    assert api_client.post("/jobs/j1/cancel").json() == {"job_id": "j1", "canceled": True}
    assert api_client.post("/jobs/j9/cancel").json() == {"job_id": "j9", "canceled": False}


def test_task_managers_and_health(api_client, fake_client):
    assert api_client.get("/taskmanagers").json() == [{"id": "tm-1"}]
    assert api_client.get("/health").json() == {"status": "ok", "flink_url": "http://flink:8081"}

    fake_client.fail_with = RequestError("down")
    assert api_client.get("/health").json()["status"] == "unreachable"
    assert api_client.get("/taskmanagers").status_code == 502


def test_service_list_jobs_raises_http_exception(fake_client):
    from flink_control.services import flink_service

    fake_client.fail_with = RequestError("down")
    with pytest.raises(HTTPException) as exc:
        flink_service.list_jobs()
    assert exc.value.status_code == 502




def test_main_app_mounts_routes(fake_client):
    from flink_control.main import app

    with TestClient(app) as client:
        assert client.get("/health").json()["status"] == "ok"
        assert client.get("/jobs/j1").status_code == 200


def test_get_client_is_fresh_per_call(monkeypatch):
    from flink_control.config import settings
    from flink_control.services import flink_service

    monkeypatch.setattr(settings, "FLINK_URL", "http://jm.example:8081/")
    first = flink_service.get_client()
    second = flink_service.get_client()
    try:
        assert first is not second
        assert first.session is not second.session
        assert first.config.base_url == "http://jm.example:8081"
    finally:
        first.close()
        second.close()


def test_service_closes_client_after_each_call(api_client, fake_client):
    api_client.get("/jobs")
    api_client.post("/jobs/j1/cancel")
    fake_client.fail_with = NotFoundError("gone")
    assert api_client.get("/jars").status_code == 404
    assert fake_client.closed == 3


def test_error_subclass_maps_like_parent(fake_client):
    from flink_control.services import flink_service

    class JarMissingError(NotFoundError):
        pass

    fake_client.fail_with = JarMissingError("no such jar")
    with pytest.raises(HTTPException) as exc:
        flink_service.run_jar("a")
    assert exc.value.status_code == 404


def test_client_config_rejects_zero_parallelism(monkeypatch):
    from pydantic import ValidationError
    from flink_control.config import settings
    from flink_control.models.client import ClientConfig

    with pytest.raises(ValidationError):
        ClientConfig(base_url="http://flink:8081", default_parallelism=0)

    monkeypatch.setattr(settings, "FLINK_DEFAULT_PARALLELISM", 0)
    with pytest.raises(ValidationError):
        settings.client_config()
