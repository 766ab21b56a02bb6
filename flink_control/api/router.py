from fastapi import APIRouter
from flink_control.api.endpoints import jars, jobs

api_router = APIRouter()
api_router.include_router(jars.router, tags=["Jars"])
api_router.include_router(jobs.router, tags=["Jobs"])
