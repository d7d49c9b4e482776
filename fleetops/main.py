import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware

from fleetops.config import settings
from fleetops.database import create_tables, async_session
from fleetops.dependencies import verify_api_key
from fleetops.seed import seed_data
from fleetops.services.auth_service import SessionStore
from fleetops.routers.alerts import router as alerts_router
from fleetops.routers.auth import router as auth_router
from fleetops.routers.battery_records import router as battery_records_router
from fleetops.routers.inspections import router as inspections_router
from fleetops.routers.location import router as location_router
from fleetops.routers.maintenance import router as maintenance_router
from fleetops.routers.reports import router as reports_router
from fleetops.routers.shifts import router as shifts_router
from fleetops.routers.users import router as users_router
from fleetops.routers.vehicles import router as vehicles_router
from fleetops.utils.exceptions import register_exception_handlers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    await create_tables()
    async with async_session() as session:
        await seed_data(session)
    logger.info("Fleet operations API ready")
    yield


app = FastAPI(
    title="FleetOps API",
    description="Backend API for fleet shifts, safety inspections, battery counts and alerts",
    version="0.1.0",
    lifespan=lifespan,
)

app.state.session_store = SessionStore()

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

_api_key_dep = [Depends(verify_api_key)]

for router in (
    auth_router,
    shifts_router,
    inspections_router,
    battery_records_router,
    alerts_router,
    vehicles_router,
    users_router,
    maintenance_router,
    location_router,
    reports_router,
):
    app.include_router(router, prefix="/api/v1", dependencies=_api_key_dep)


@app.get("/health")
async def health_check():
    return {"status": "success", "data": {"service": "fleetops-api", "version": "0.1.0"}, "message": None}
