from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware
from core.config_loader import settings
from core.database import SessionLocal
from core.logging import configure_logging
from core.realtime import ChangeFeed, install_change_capture

from core.router import changes_router
from employee.router import employee_router
from project.router import project_router
from allocation.router import allocation_router
from absence.router import absence_router
from teamevent.router import team_event_router
from deadline.router import deadline_router
from editlock.router import lock_router
from capacity.router import capacity_router
import models_bootstrap

configure_logging(settings.LOG_LEVEL)

openapi_tags = [
    {
        "name": "Capacity",
        "description": "Employee load per week and month",
    },
    {
        "name": "Edit locks",
        "description": "Advisory locks on a project's monthly sheet",
    },
    {
        "name": "Health Checks",
        "description": "Application health checks",
    }
]

app = FastAPI(openapi_tags=openapi_tags)

app.state.change_feed = ChangeFeed()
install_change_capture(SessionLocal, app.state.change_feed)

if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            str(origin).strip("/") for origin in settings.BACKEND_CORS_ORIGINS
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(employee_router, prefix="/api")
app.include_router(project_router, prefix="/api")
app.include_router(allocation_router, prefix="/api")
app.include_router(absence_router, prefix="/api")
app.include_router(team_event_router, prefix="/api")
app.include_router(deadline_router, prefix="/api")
app.include_router(lock_router, prefix="/api")
app.include_router(capacity_router, prefix="/api")
app.include_router(changes_router, prefix="/api")



@app.get("/health", tags=['Health Checks'])
def read_root():
    return {"health": "true"}
