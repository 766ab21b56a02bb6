from fastapi import HTTPException, UploadFile
from flink_control.services import flink_service
from flink_control.models.jar import RunOverrides

def list_jars():
    return flink_service.list_jars()

def upload_jar(jarfile: UploadFile):
    try:
        return flink_service.upload_jar(jarfile.filename, jarfile.file)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

def delete_jar(jar_id: str):
    return flink_service.delete_jar(jar_id)

def run_jar(jar_id: str, overrides: RunOverrides | None = None):
    try:
        return flink_service.run_jar(jar_id, overrides)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
