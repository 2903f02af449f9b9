import asyncio
from datetime import date, datetime
from unittest.mock import AsyncMock

import pytest

from core.domain import blank_to_none, parse_calendar_date
from core.orchestration import ActionRegistry, Debouncer, RequestSequencer
from core.presentation import NoticeBuffer, NoticeLevel, RequestNotices, ViewRegion, message_text
from shared.api_config import ENDPOINTS, get_endpoint


class TestRequestSequencer:

    def test_only_latest_ticket_is_current(self):
        sequencer = RequestSequencer()
        first = sequencer.next()
        second = sequencer.next()
        assert not sequencer.is_current(first)
        assert sequencer.is_current(second)
        assert sequencer.latest == second


class TestDebouncer:

    @pytest.mark.asyncio
    async def test_zero_delay_passes_through(self):
        debouncer = Debouncer(0)
        assert await debouncer.settle()
        assert await debouncer.settle()

    @pytest.mark.asyncio
    async def test_only_last_call_proceeds(self):
        debouncer = Debouncer(0.01)
        results = await asyncio.gather(debouncer.settle(), debouncer.settle())
        assert results == [False, True]


class TestActionRegistry:

    @pytest.mark.asyncio
    async def test_dispatch_to_bound_handler(self):
        registry = ActionRegistry(target_key="doctor_id")
        handler = AsyncMock()
        registry.register("delete_doctor", "5", handler)

        assert await registry.dispatch("delete_doctor", {"doctor_id": 5})
        handler.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unknown_action(self):
        registry = ActionRegistry(target_key="doctor_id")
        assert not await registry.dispatch("delete_doctor", {"doctor_id": "5"})
        assert not await registry.dispatch("delete_doctor", {})

    @pytest.mark.asyncio
    async def test_unregister_target(self):
        registry = ActionRegistry(target_key="doctor_id")
        handler = AsyncMock()
        registry.register("delete_doctor", "5", handler)
        registry.register("delete_doctor", "6", AsyncMock())

        registry.unregister_target("5")

        assert not await registry.dispatch("delete_doctor", {"doctor_id": "5"})
        assert registry.get_action_types() == ["delete_doctor"]
        handler.assert_not_awaited()


class TestViewRegion:

    def test_replace_find_remove(self):
        region = ViewRegion("content")
        region.replace([message_text("a", "A"), message_text("b", "B")])

        assert region.find("b").value == "B"
        assert region.remove("a")
        assert not region.remove("a")
        assert [node.id for node in region.nodes] == ["b"]

    def test_to_json(self):
        region = ViewRegion("content")
        region.replace([message_text("a", "Hello")])
        [node] = region.to_json()
        assert node["type"] == "Text"
        assert node["value"] == "Hello"


class TestNoticeBuffer:

    def test_collects_and_drains(self):
        buffer = NoticeBuffer(confirm_answer=False)
        buffer.alert("Saved", NoticeLevel.SUCCESS)

        assert not buffer.confirm("Sure?")
        assert buffer.confirmations == ["Sure?"]
        assert [n.to_dict() for n in buffer.drain()] == [{"message": "Saved", "level": "success"}]
        assert buffer.messages == []


class TestRequestNotices:

    @pytest.mark.asyncio
    async def test_tasks_collect_separately(self):
        notices = RequestNotices()
        first_ready = asyncio.Event()
        second_done = asyncio.Event()

        async def first():
            notices.begin()
            notices.alert("first")
            first_ready.set()
            await second_done.wait()
            return [n.message for n in notices.drain()]

        async def second():
            await first_ready.wait()
            notices.begin(confirm_answer=False)
            notices.alert("second")
            answer = notices.confirm("Sure?")
            second_done.set()
            return answer, [n.message for n in notices.drain()]

        first_messages, (answer, second_messages) = await asyncio.gather(first(), second())

        assert first_messages == ["first"]
        assert second_messages == ["second"]
        assert answer is False

    def test_alert_without_begin(self):
        notices = RequestNotices()
        notices.alert("Saved", NoticeLevel.SUCCESS)
        assert notices.messages == ["Saved"]
        assert notices.confirm("Sure?")


class TestDomainHelpers:

    @pytest.mark.parametrize("value, expected", [
        (None, None),
        ("", None),
        ("   ", None),
        (" Smith ", "Smith"),
    ])
    def test_blank_to_none(self, value, expected):
        assert blank_to_none(value) == expected

    @pytest.mark.parametrize("value", [
        "2024-01-02",
        "2024-01-02T09:30:00",
        date(2024, 1, 2),
        datetime(2024, 1, 2, 9, 30),
    ])
    def test_parse_calendar_date(self, value):
        assert parse_calendar_date(value) == date(2024, 1, 2)

    def test_parse_calendar_date_rejects_garbage(self):
        with pytest.raises(ValueError):
            parse_calendar_date("02/01/2024")


class TestEndpoints:

    def test_token_placement(self):
        placements = {name: placement for name, (_, _, placement) in ENDPOINTS.items()}
        assert placements["delete_doctor"] == "path"
        assert placements["patient_profile"] == "bearer"
        assert placements["list_doctors"] is None

    def test_unknown_endpoint(self):
        with pytest.raises(ValueError):
            get_endpoint("nope")
