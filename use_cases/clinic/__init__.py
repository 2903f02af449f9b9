"""
Clinic Portal Use Case.

Client-side coordination for the clinic scheduling app: the doctor
directory (load, filter, role-conditioned cards, delete, add), the
doctor's appointment roster and the patient booking handoff.

Components:
- ClinicApiClient: async gateway to the clinic REST backend
- SessionReader: token and role from the process-wide store
- DirectoryController / AppointmentTableController: view state and reloads
- BookingHandoff: profile fetch, then the external booking overlay
- ClinicPortalServer: wires everything for a host application

Usage:
    from use_cases.clinic import ClinicPortalServer

    server = ClinicPortalServer.from_settings()
    await server.directory.load_all()
"""

from use_cases.clinic.api_client import ClinicApiClient, create_clinic_client
from use_cases.clinic.appointments import AppointmentTableController
from use_cases.clinic.booking import BookingHandoff, BookingOverlay, BookingState, PendingOverlay
from use_cases.clinic.directory import DirectoryController
from use_cases.clinic.server import ClinicPortalServer
from use_cases.clinic.session import ClinicSession, Role, RoleParseError, SessionReader, parse_role

__all__ = [
    # Gateway
    "ClinicApiClient",
    "create_clinic_client",
    # Session
    "ClinicSession",
    "Role",
    "RoleParseError",
    "SessionReader",
    "parse_role",
    # Controllers
    "DirectoryController",
    "AppointmentTableController",
    # Booking
    "BookingHandoff",
    "BookingOverlay",
    "BookingState",
    "PendingOverlay",
    # Server
    "ClinicPortalServer",
]
