from __future__ import annotations
import logging
from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from synczone.logging_conf import setup_logging
from synczone.config import settings
from synczone import catalog
from synczone.errors import ReferenceIndexError, UnknownZoneError
from synczone.models import (
    AgendaResponse,
    EditRequest,
    LiveStatus,
    MeetingDetails,
    MeetingView,
    Role,
    ZoneChangeRequest,
    ZoneDescriptor,
)
from synczone.deps import get_planner
from synczone.planner import MeetingPlanner

setup_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    planner = app.dependency_overrides.get(get_planner, get_planner)()
    async with planner.live_clock:
        yield


app = FastAPI(title="SyncZone", version="0.1.0", lifespan=lifespan)


@app.exception_handler(UnknownZoneError)
def unknown_zone_handler(request: Request, exc: UnknownZoneError) -> JSONResponse:
    logger.warning("Rejected unknown zone %r on %s", exc.zone_id, request.url.path)
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(ReferenceIndexError)
def reference_index_handler(request: Request, exc: ReferenceIndexError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}

@app.get("/zones", response_model=list[ZoneDescriptor])
def zones():
    return catalog.list_zones()

@app.get("/zones/{zone_id:path}", response_model=ZoneDescriptor)
def zone_detail(zone_id: str, planner: MeetingPlanner = Depends(get_planner)):
    try:
        return catalog.describe(zone_id, planner.state.instant)
    except UnknownZoneError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

@app.get("/meeting", response_model=MeetingView)
async def meeting(planner: MeetingPlanner = Depends(get_planner)):
    return planner.view()

@app.post("/meeting/edit", response_model=MeetingView)
async def meeting_edit(req: EditRequest, planner: MeetingPlanner = Depends(get_planner)):
    return planner.edit(req.role, req.edit)

@app.put("/meeting/zones/{role}", response_model=MeetingView)
async def meeting_zone(
    role: Role, req: ZoneChangeRequest, planner: MeetingPlanner = Depends(get_planner)
):
    return planner.change_zone(role, req.zone_id, req.index)

@app.get("/meeting/live", response_model=LiveStatus)
async def meeting_live(planner: MeetingPlanner = Depends(get_planner)):
    return planner.live_status()

@app.post("/meeting/agenda", response_model=AgendaResponse)
async def meeting_agenda(details: MeetingDetails, planner: MeetingPlanner = Depends(get_planner)):
    result = await planner.generate_agenda(details)
    if result is None:
        raise HTTPException(status_code=409, detail="Agenda request was cancelled")
    return result

@app.delete("/meeting/agenda", status_code=204)
async def meeting_agenda_cancel(planner: MeetingPlanner = Depends(get_planner)) -> None:
    planner.cancel_agenda()
