"""
Doctor Directory Controller.

Owns the doctor list shown in the directory's content region: the
unfiltered load, the three-input filter and the in-memory doctor set the
cards were rendered from. Cards are built by the DoctorCardComposer and
their actions are routed back through an ActionRegistry.

Loads and filters render the same region, so they share one request
sequencer; a completion that is no longer the latest is dropped.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from core.data import GatewayError
from core.orchestration import ActionRegistry, Debouncer, RequestSequencer
from core.presentation import NoticeLevel, Notifier, ViewRegion, message_text

from .domain.models import Doctor, DoctorFilter, NewDoctor
from .domain.policies import DoctorFormValidator
from .presentation.composer import DoctorCardComposer
from .session import SessionReader

logger = logging.getLogger(__name__)


PLACEHOLDER_ID = "directory-placeholder"


class DirectoryController:
    """
    Controller for the doctor directory.

    Example:
        controller = DirectoryController(api_client, reader, composer, notifier)
        await controller.load_all()
        await controller.on_search_input("Smith")
    """

    def __init__(
        self,
        api_client,
        session_reader: SessionReader,
        card_composer: DoctorCardComposer,
        notifier: Notifier,
        debounce_seconds: float = 0.0,
    ):
        self.api_client = api_client
        self.session_reader = session_reader
        self.card_composer = card_composer
        self.notifier = notifier
        self.content = ViewRegion("content")

        self._doctors: List[Doctor] = []
        self._filter = DoctorFilter()
        self._sequencer = RequestSequencer("directory")
        self._debouncer = Debouncer(debounce_seconds)
        self._actions = ActionRegistry(target_key="doctor_id")
        self._validator = DoctorFormValidator()

    @property
    def doctors(self) -> List[Doctor]:
        """The doctor set currently rendered."""
        return list(self._doctors)

    @property
    def filter_state(self) -> DoctorFilter:
        return self._filter

    # =========================================================================
    # LOAD / FILTER
    # =========================================================================

    async def load_all(self) -> bool:
        """
        Load and render every doctor.

        Returns:
            True if the result was rendered
        """
        ticket = self._sequencer.next()
        try:
            doctors = await self.api_client.get_doctors()
        except GatewayError as e:
            if not self._sequencer.is_current(ticket):
                logger.debug(f"Discarding stale doctor load failure: {e}")
                return False
            logger.error(f"Error loading doctors: {e}")
            return False

        if not self._sequencer.is_current(ticket):
            logger.debug(f"Discarding stale doctor load (ticket {ticket})")
            return False

        self._render(doctors, "No doctors found.")
        return True

    async def apply_filter(self, criteria: Optional[DoctorFilter] = None) -> bool:
        """
        Filter the directory.

        Args:
            criteria: Filter to apply (defaults to the current filter state).
                      Blank fields are sent as unconstrained.

        Returns:
            True if the result was rendered
        """
        if criteria is not None:
            self._filter = criteria
        criteria = self._filter.normalized()

        ticket = self._sequencer.next()
        try:
            doctors = await self.api_client.filter_doctors(criteria)
        except GatewayError as e:
            if not self._sequencer.is_current(ticket):
                logger.debug(f"Discarding stale filter failure: {e}")
                return False
            logger.error(f"Filter error: {e}")
            self.notifier.alert("Failed to filter doctors, please try again.", NoticeLevel.ERROR)
            return False

        if not self._sequencer.is_current(ticket):
            logger.debug(f"Discarding stale filter result (ticket {ticket})")
            return False

        self._render(doctors, "No doctors found with the given filters.")
        return True

    async def on_search_input(self, text: Optional[str]) -> bool:
        self._filter = self._filter.with_name(text)
        return await self._filter_changed()

    async def on_time_filter_change(self, value: Optional[str]) -> bool:
        self._filter = self._filter.with_time(value)
        return await self._filter_changed()

    async def on_specialty_filter_change(self, value: Optional[str]) -> bool:
        self._filter = self._filter.with_specialty(value)
        return await self._filter_changed()

    async def _filter_changed(self) -> bool:
        if not await self._debouncer.settle():
            return False
        return await self.apply_filter()

    def _render(self, doctors: List[Doctor], empty_message: str):
        # Read the session first so a bad role leaves the view as it was
        session = self.session_reader.read_session() if doctors else None

        self._actions.clear()
        self._doctors = list(doctors)

        if not doctors:
            self.content.replace([message_text(PLACEHOLDER_ID, empty_message)])
            return

        cards = []
        for doctor in doctors:
            rendered = self.card_composer.compose_doctor_card(doctor, session, on_deleted=self.remove_doctor)
            self._actions.register(rendered.action_type, rendered.doctor_id, rendered.action)
            cards.append(rendered.widget)
        self.content.replace(cards)
        logger.info(f"Rendered {len(cards)} doctor cards for role {session.role.name}")

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def remove_doctor(self, doctor_id: str) -> bool:
        """
        Drop one doctor after a confirmed delete.

        Removes the doctor from the in-memory set and exactly its card from
        the content region; nothing is re-fetched.

        Returns:
            False if the doctor is not currently rendered
        """
        doctor_id = str(doctor_id)
        remaining = [d for d in self._doctors if d.id != doctor_id]
        if len(remaining) == len(self._doctors):
            return False

        self._doctors = remaining
        self.content.remove(f"doctor-card-{doctor_id}")
        self._actions.unregister_target(doctor_id)
        logger.info(f"Removed doctor {doctor_id} from directory")
        return True

    async def add_doctor(self, form: Union[NewDoctor, Dict[str, Any]]) -> bool:
        """
        Submit the admin "add doctor" form and reload on success.

        Returns:
            True if the doctor was created
        """
        data = form.model_dump() if isinstance(form, NewDoctor) else dict(form)
        data = {k: v.strip() if isinstance(v, str) else v for k, v in data.items()}

        if not self._validator.is_valid(data):
            self.notifier.alert("Please fill in all required fields.", NoticeLevel.ERROR)
            return False

        token = self.session_reader.read_token()
        if not token:
            self.notifier.alert("You must be logged in as admin to add a doctor.", NoticeLevel.ERROR)
            return False

        try:
            result = await self.api_client.save_doctor(NewDoctor(**data), token)
        except (GatewayError, PydanticValidationError) as e:
            logger.error(f"Error adding doctor: {e}")
            self.notifier.alert("An unexpected error occurred. Please try again.", NoticeLevel.ERROR)
            return False

        if not result.success:
            self.notifier.alert(f"Failed to add doctor: {result.message}", NoticeLevel.ERROR)
            return False

        self.notifier.alert("Doctor added successfully.", NoticeLevel.SUCCESS)
        await self.load_all()
        return True

    # =========================================================================
    # ACTIONS
    # =========================================================================

    async def handle_action(self, action_type: str, payload: Dict[str, Any]) -> bool:
        """Run the card action bound to ``payload["doctor_id"]``."""
        return await self._actions.dispatch(action_type, payload)

    def get_action_types(self) -> List[str]:
        return self._actions.get_action_types()
