import logging

from fastapi import FastAPI

from teamhub.api import health
from teamhub.api.errors import register_error_handlers
from teamhub.api.v1.endpoints import join_requests, members, notifications, team_events, team_invites, teams
from teamhub.core.config import settings
from teamhub.core.init_db import init_db
from teamhub.core.metrics import APP_VERSION, PrometheusMiddleware, metrics_response
from teamhub.db.mongodb import close_mongo_connection, connect_to_mongo

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="""
    TeamHub API for organizing people into teams.

    ## Features
    * **Teams**: Public and private teams with owner, admin and member roles.
    * **Join Requests**: Ask to join a team; owner and admins approve or reject.
    * **Invite Links**: Single-use links that file a join request for their holder.
    * **Team Events**: Schedule events and take a seat while capacity lasts.
    * **Notifications**: In-app notifications with optional push delivery.
    """,
    version=APP_VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
)

app.add_middleware(PrometheusMiddleware)
register_error_handlers(app)


@app.on_event("startup")
async def startup_event():
    await connect_to_mongo()
    await init_db()


@app.on_event("shutdown")
async def shutdown_event():
    await close_mongo_connection()


app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(team_invites.router, prefix=f"{settings.API_V1_STR}/teams", tags=["invites"])
app.include_router(teams.router, prefix=f"{settings.API_V1_STR}/teams", tags=["teams"])
app.include_router(members.router, prefix=f"{settings.API_V1_STR}/teams", tags=["members"])
app.include_router(join_requests.router, prefix=f"{settings.API_V1_STR}/teams", tags=["join-requests"])
app.include_router(team_events.router, prefix=f"{settings.API_V1_STR}/teams", tags=["events"])
app.include_router(notifications.router, prefix=f"{settings.API_V1_STR}/notifications", tags=["notifications"])


@app.get("/metrics", include_in_schema=False)
async def metrics():
    return metrics_response()


@app.get("/")
async def root():
    return {"message": "Welcome to TeamHub API"}
