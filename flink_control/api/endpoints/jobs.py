from fastapi import APIRouter
from flink_control.controllers import job_controller

router = APIRouter()

@router.get("/jobs")
def list_jobs(running: bool = False):
    return job_controller.list_jobs(running)

@router.get("/jobs/{job_id}")
def get_job(job_id: str):
    return job_controller.get_job(job_id)

@router.post("/jobs/{job_id}/cancel")
def cancel_job(job_id: str):
    return job_controller.cancel_job(job_id)

@router.get("/taskmanagers")
def list_task_managers():
    return job_controller.list_task_managers()

@router.get("/health")
def health():
    return job_controller.health()
