"""
FastAPI Application for the Clinic Portal.

Exposes the directory, appointment roster and booking controllers to a
browser front end. Every response carries the rendered ChatKit widget
tree of the affected region plus the notices raised while handling it.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from config import settings
from use_cases.clinic import AppointmentTableController, ClinicPortalServer, RoleParseError
from use_cases.clinic.domain import DoctorFilter, NewDoctor

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Reduce HTTP client logging verbosity
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

# Global instance
server: Optional[ClinicPortalServer] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - handles startup and shutdown."""
    global server

    logger.info("Starting Clinic Portal Application...")
    server = ClinicPortalServer.from_settings()
    logger.info("Clinic portal server initialized")

    yield

    # Cleanup
    logger.info("Shutting down...")
    if server:
        await server.close()


# Create FastAPI app
app = FastAPI(
    title="Clinic Portal",
    description="Doctor directory, appointment roster and booking handoff for the clinic backend",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc"
)

# CORS middleware for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_server() -> ClinicPortalServer:
    if server is None:
        raise HTTPException(status_code=503, detail="Server not initialized")
    return server


# =============================================================================
# REQUEST MODELS
# =============================================================================

class FilterRequest(BaseModel):
    name: Optional[str] = None
    time: Optional[str] = None
    specialty: Optional[str] = None


class ActionRequest(BaseModel):
    action_type: str
    payload: Dict[str, Any] = Field(default_factory=dict)
    confirmed: bool = True


class NameRequest(BaseModel):
    name: Optional[str] = None


class DateRequest(BaseModel):
    date: str


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(RoleParseError)
async def role_error_handler(request: Request, exc: RoleParseError):
    logger.error(f"Rejected request with bad role: {exc}")
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.error(f"Error processing {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# =============================================================================
# GENERAL
# =============================================================================

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": "1.0.0",
        "use_case": "clinic_portal",
        "backend": settings.api_base_url,
    }


@app.get("/api/branding")
async def get_branding():
    """Return branding configuration for the frontend."""
    return {
        "name": settings.brand_name,
        "tableColumns": list(AppointmentTableController.COLUMNS),
    }


# =============================================================================
# DIRECTORY ENDPOINTS
# =============================================================================

@app.get("/api/directory")
async def load_directory(portal: ClinicPortalServer = Depends(get_server)):
    """Load every doctor."""
    await portal.begin_request()
    rendered = await portal.directory.load_all()
    return portal.snapshot(portal.directory.content, rendered=rendered)


@app.post("/api/directory/filter")
async def filter_directory(request: FilterRequest, portal: ClinicPortalServer = Depends(get_server)):
    """Apply all three directory filters."""
    await portal.begin_request()
    rendered = await portal.directory.apply_filter(
        DoctorFilter(name=request.name, time=request.time, specialty=request.specialty)
    )
    return portal.snapshot(portal.directory.content, rendered=rendered)


@app.post("/api/directory/doctors")
async def add_doctor(request: NewDoctor, portal: ClinicPortalServer = Depends(get_server)):
    """Submit the add-doctor form."""
    await portal.begin_request()
    created = await portal.directory.add_doctor(request)
    return portal.snapshot(portal.directory.content, created=created)


@app.post("/api/directory/actions")
async def directory_action(request: ActionRequest, portal: ClinicPortalServer = Depends(get_server)):
    """
    Run a doctor card action.

    ``confirmed`` carries the user's answer to any confirmation the front
    end already asked (e.g. before deleting a doctor).
    """
    await portal.begin_request(confirm_answer=request.confirmed)
    handled = await portal.directory.handle_action(request.action_type, request.payload)
    if not handled:
        raise HTTPException(status_code=404, detail=f"No handler for action {request.action_type}")
    return portal.snapshot(portal.directory.content)


# =============================================================================
# APPOINTMENT ENDPOINTS
# =============================================================================

@app.get("/api/appointments")
async def reload_appointments(portal: ClinicPortalServer = Depends(get_server)):
    """Reload the roster for the current date and name filter."""
    await portal.begin_request()
    rendered = await portal.appointments.reload()
    return _appointments_response(portal, rendered)


@app.post("/api/appointments/name")
async def filter_appointments_by_name(request: NameRequest, portal: ClinicPortalServer = Depends(get_server)):
    await portal.begin_request()
    rendered = await portal.appointments.on_name_input(request.name)
    return _appointments_response(portal, rendered)


@app.post("/api/appointments/today")
async def show_today(portal: ClinicPortalServer = Depends(get_server)):
    await portal.begin_request()
    rendered = await portal.appointments.on_today_clicked()
    return _appointments_response(portal, rendered)


@app.post("/api/appointments/date")
async def change_date(request: DateRequest, portal: ClinicPortalServer = Depends(get_server)):
    await portal.begin_request()
    try:
        rendered = await portal.appointments.on_date_changed(request.date)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid date: {request.date}")
    return _appointments_response(portal, rendered)


def _appointments_response(portal: ClinicPortalServer, rendered: bool) -> Dict[str, Any]:
    return portal.snapshot(
        portal.appointments.table,
        rendered=rendered,
        selected_date=portal.appointments.selected_date.isoformat(),
        name_filter=portal.appointments.name_filter,
    )


# =============================================================================
# BOOKING ENDPOINTS
# =============================================================================

@app.post("/api/booking/close")
async def close_booking(portal: ClinicPortalServer = Depends(get_server)):
    """The booking overlay was closed or submitted."""
    portal.booking.overlay_closed()
    return {"state": portal.booking.state.value}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=False,
        log_level=settings.log_level.lower()
    )
