from fastapi import APIRouter, File, UploadFile
from flink_control.controllers import jar_controller
from flink_control.models.jar import RunOverrides

router = APIRouter()

@router.get("/jars")
def list_jars():
    return jar_controller.list_jars()

@router.post("/jars/upload")
def upload_jar(jarfile: UploadFile = File(...)):
    return jar_controller.upload_jar(jarfile)

@router.delete("/jars/{jar_id}")
def delete_jar(jar_id: str):
    return jar_controller.delete_jar(jar_id)

@router.post("/jars/{jar_id}/run")
def run_jar(jar_id: str, overrides: RunOverrides | None = None):
    return jar_controller.run_jar(jar_id, overrides)
