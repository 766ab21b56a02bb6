import logging
from fastapi import FastAPI

from flink_control.config import settings
from flink_control.api.router import api_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Flink job control")
app.include_router(api_router)
