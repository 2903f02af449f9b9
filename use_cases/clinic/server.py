"""
Clinic Portal Server.

Wires the clinic components together for a host application: one API
client, one session reader over the process-wide store, the booking
handoff and both controllers, all reporting through RequestNotices so
that concurrent requests each collect their own notices.

The host calls a controller method, then ``snapshot()`` to collect the
rendered widgets, the notices raised meanwhile and any pending booking
overlay request.
"""

import asyncio
import logging
from datetime import date
from typing import Any, Callable, Dict

from config import settings
from core.presentation import RequestNotices, ViewRegion
from core.session import KeyValueStore, get_store

from .api_client import ClinicApiClient, create_clinic_client
from .appointments import AppointmentTableController
from .booking import BookingHandoff, PendingOverlay
from .directory import DirectoryController
from .presentation.composer import AppointmentRowComposer, DoctorCardComposer
from .session import SessionReader

logger = logging.getLogger(__name__)


class ClinicPortalServer:
    """
    Clinic portal for one process.

    Example:
        server = ClinicPortalServer.from_settings()
        await server.directory.load_all()
        response = server.snapshot(server.directory.content)
    """

    def __init__(
        self,
        api_client: ClinicApiClient,
        store: KeyValueStore,
        debounce_seconds: float = 0.0,
        today: Callable[[], date] = date.today,
    ):
        self.api_client = api_client
        self.store = store
        self.notices = RequestNotices()
        self.session_reader = SessionReader(store)

        self.overlay = PendingOverlay()
        self.booking = BookingHandoff(api_client, self.overlay, self.notices)

        self.directory = DirectoryController(
            api_client,
            self.session_reader,
            DoctorCardComposer(api_client, self.notices, self.booking),
            self.notices,
            debounce_seconds=debounce_seconds,
        )
        self.appointments = AppointmentTableController(
            api_client,
            self.session_reader,
            AppointmentRowComposer(),
            self.notices,
            today=today,
        )

    @classmethod
    def from_settings(cls) -> "ClinicPortalServer":
        """Build the server from application settings."""
        logger.info(f"Clinic backend: {settings.api_base_url} (timeout {settings.request_timeout_seconds}s)")
        return cls(
            api_client=create_clinic_client(),
            store=get_store(settings.session_store_path),
            debounce_seconds=settings.filter_debounce_seconds,
        )

    async def begin_request(self, confirm_answer: bool = True):
        """
        Prepare for one host request.

        Must be awaited from the task serving the request. Starts that
        request's notice buffer with the answer to any confirmation asked
        during it, then re-reads the session store off the event loop (the
        login flow may have written to it).
        """
        self.notices.begin(confirm_answer=confirm_answer)
        await asyncio.to_thread(self.store.reload)

    def snapshot(self, region: ViewRegion, **extra: Any) -> Dict[str, Any]:
        """Collect a region's widgets and the request's notices."""
        response = {
            "region": region.name,
            "nodes": region.to_json(),
            "notices": [notice.to_dict() for notice in self.notices.drain()],
            "booking": {
                "state": self.booking.state.value,
                "overlay": self.overlay.take(),
            },
        }
        response.update(extra)
        return response

    async def close(self):
        await self.api_client.close()

