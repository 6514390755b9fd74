import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from teamhub.db.mongodb import db

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/live", summary="Liveness check")
async def liveness():
    return {"status": "alive"}


@router.get("/ready", summary="Readiness check")
async def readiness():
    """
    Ready once MongoDB answers a ping. Answers 503 while the client is not
    connected or the ping fails.
    """
    if db.client is None:
        database = "client_not_initialized"
    else:
        try:
            await db.client.admin.command("ping")
            database = "connected"
        except Exception as e:
            logger.warning(f"Readiness check failed: {e}")
            database = f"error: {e}"

    components = {"database": database}
    if database == "connected":
        return {"status": "ready", "components": components}

    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "components": components},
    )
