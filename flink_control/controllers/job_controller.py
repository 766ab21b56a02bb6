from flink_control.services import flink_service

def list_jobs(running: bool = False):
    return flink_service.list_jobs(running_only=running)

def get_job(job_id: str):
    return flink_service.get_job(job_id)

def cancel_job(job_id: str):
    return flink_service.cancel_job(job_id)

def list_task_managers():
    return flink_service.list_task_managers()

def health():
    return flink_service.cluster_health()
