import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from saknak.config import APP_HOST, APP_PORT, DEBUG, LOG_LEVEL, SCHEDULER_ENABLED
from saknak.database import models  # noqa: F401 registers the tables
from saknak.database.init import Base, engine
from saknak.routes import (
    auth_routes,
    booking_routes,
    job_routes,
    notification_routes,
    profile_routes,
    property_routes,
    rating_routes,
)
from saknak.services.background_tasks import BackgroundTasks
from saknak.utils.middleware import AppCORSMiddleware

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("saknak")

Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    background_tasks = None
    if SCHEDULER_ENABLED:
        background_tasks = BackgroundTasks()
        background_tasks.start()
    yield
    if background_tasks:
        background_tasks.shutdown()


app = FastAPI(title="Saknak API", lifespan=lifespan)

app.add_middleware(
    AppCORSMiddleware,
    exclude_prefixes=(job_routes.router.prefix,),
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_routes.router)
app.include_router(profile_routes.router)
app.include_router(property_routes.router)
app.include_router(booking_routes.router)
app.include_router(rating_routes.router)
app.include_router(notification_routes.router)
app.include_router(job_routes.router)


@app.get("/")
def read_root():
    return {"name": "Saknak API", "version": "1.0.0"}


if __name__ == "__main__":
    uvicorn.run("saknak.main:app", host=APP_HOST, port=APP_PORT, reload=DEBUG)
