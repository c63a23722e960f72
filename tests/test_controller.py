from __future__ import annotations

import asyncio

import pytest
from conftest import FakeStore, external_row, internal_row

from fleetdesk.inbox.controller import InboxController
from fleetdesk.inbox.errors import MessageNotFound
from fleetdesk.inbox.messages import Identity, InboxFilter, MessageKey, Role, SourceKind

pytestmark = pytest.mark.anyio

DRIVER = Identity(Role.DRIVER, entity_id=1, display_name="Dana Driver")
COORD = Identity(Role.COORDINATOR, entity_id=1, display_name="Cole Coordinator")
ADMIN = Identity(Role.ADMIN, entity_id=1, display_name="Admin")


def _keys(msgs):
    return [(m.source_kind.value, m.id) for m in msgs]


def _mixed_store() -> FakeStore:
    return FakeStore(
        internal=[
            internal_row(1, t=10),
            internal_row(2, t=20, is_starred=True, is_read=True),
            internal_row(3, t=30, driver_id=2, coordinator_id=2, sender="Other Driver"),
        ],
        external=[external_row(1, t=15), external_row(2, t=40)],
    )


@pytest.mark.parametrize("who", [DRIVER, COORD, Identity(Role.NONE)])
@pytest.mark.parametrize("f", list(InboxFilter))
async def test_non_admins_never_see_external(who, f):
    ctrl = InboxController(_mixed_store(), who)

    msgs = await ctrl.set_filter(f)

    assert all(m.source_kind is SourceKind.INTERNAL for m in msgs)


async def test_driver_starred_scenario():
    store = FakeStore(
        internal=[
            internal_row(1, t=10, is_starred=False),
            internal_row(2, t=20, is_starred=True),
        ]
    )
    ctrl = InboxController(store, DRIVER)

    msgs = await ctrl.set_filter("Starred")

    assert _keys(msgs) == [("internal", 2)]


async def test_admin_important_scenario():
    store = FakeStore(internal=[internal_row(1, t=10, is_read=True)], external=[external_row(1, t=5)])
    ctrl = InboxController(store, ADMIN)

    msgs = await ctrl.set_filter(InboxFilter.IMPORTANT)

    assert _keys(msgs) == [("external", 1)]
    assert msgs[0].is_read is False and msgs[0].is_starred is False


async def test_admin_important_includes_every_external_row():
    ctrl = InboxController(_mixed_store(), ADMIN)

    msgs = await ctrl.set_filter(InboxFilter.IMPORTANT)

    assert _keys(msgs) == [("external", 2), ("internal", 3), ("external", 1), ("internal", 1)]


async def test_admin_all_is_unscoped_internal_only():
    ctrl = InboxController(_mixed_store(), ADMIN)

    msgs = await ctrl.set_filter(InboxFilter.ALL)

    assert _keys(msgs) == [("internal", 3), ("internal", 2), ("internal", 1)]


async def test_driver_sent_matches_display_name():
    ctrl = InboxController(_mixed_store(), Identity(Role.DRIVER, entity_id=2, display_name="Other Driver"))

    assert _keys(await ctrl.set_filter("Sent")) == [("internal", 3)]


async def test_unprivileged_viewer_sees_empty_inbox():
    ctrl = InboxController(_mixed_store(), Identity(Role.NONE))

    assert await ctrl.set_filter("All") == []


async def test_failing_source_degrades_to_empty():
    store = _mixed_store()
    store.fail_external = True
    ctrl = InboxController(store, ADMIN)

    msgs = await ctrl.set_filter(InboxFilter.IMPORTANT)

    assert _keys(msgs) == [("internal", 3), ("internal", 1)]

    store.fail_internal = True
    assert await ctrl.set_filter(InboxFilter.IMPORTANT) == []


class GatedStore(FakeStore):
    """Holds starred queries until the gate opens."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.gate = asyncio.Event()

    async def query_internal(self, predicate):
        if predicate.is_starred:
            await self.gate.wait()
        return await super().query_internal(predicate)


async def test_superseded_filter_response_is_discarded():
    store = GatedStore(internal=[internal_row(1, t=10), internal_row(2, t=20, is_starred=True)])
    ctrl = InboxController(store, DRIVER)

    slow = asyncio.create_task(ctrl.set_filter("Starred"))
    await asyncio.sleep(0)
    latest = await ctrl.set_filter("All")
    store.gate.set()

    assert await slow is None
    assert ctrl.active_filter is InboxFilter.ALL
    assert _keys(ctrl.messages) == _keys(latest) == [("internal", 2), ("internal", 1)]


async def test_select_marks_read_but_listing_does_not():
    store = _mixed_store()
    ctrl = InboxController(store, DRIVER)

    await ctrl.set_filter("All")
    assert store.updates == []

    result = await ctrl.select(MessageKey(SourceKind.INTERNAL, 1))

    assert result.message.is_read is True
    assert ctrl.selected.is_read is True
    assert store.internal[1].is_read is True


async def test_select_external_as_admin_is_noop():
    store = _mixed_store()
    ctrl = InboxController(store, ADMIN)

    result = await ctrl.select(MessageKey(SourceKind.EXTERNAL, 2))

    assert result.message.is_read is False
    assert store.updates == []


async def test_open_hides_messages_the_viewer_cannot_see():
    ctrl = InboxController(_mixed_store(), DRIVER)

    with pytest.raises(MessageNotFound):
        await ctrl.select(MessageKey(SourceKind.INTERNAL, 3))
    with pytest.raises(MessageNotFound):
        await ctrl.toggle_star(MessageKey(SourceKind.EXTERNAL, 1))
    with pytest.raises(MessageNotFound):
        await ctrl.select(MessageKey(SourceKind.INTERNAL, 404))


async def test_driver_cannot_touch_external_messages():
    store = _mixed_store()
    ctrl = InboxController(store, DRIVER)

    for action in (ctrl.select, ctrl.toggle_star):
        with pytest.raises(MessageNotFound):
            await action(MessageKey(SourceKind.EXTERNAL, 2))

    assert store.updates == []
    assert ctrl.view.get(MessageKey(SourceKind.EXTERNAL, 2)) is None


async def test_toggle_star_keeps_selected_in_sync():
    ctrl = InboxController(_mixed_store(), DRIVER)
    key = MessageKey(SourceKind.INTERNAL, 1)

    await ctrl.select(key)
    await ctrl.toggle_star(key)

    assert ctrl.selected.is_starred is True
    assert ctrl.selected.is_read is True


async def test_unread_count_counts_current_view():
    ctrl = InboxController(_mixed_store(), ADMIN)

    await ctrl.set_filter(InboxFilter.IMPORTANT)

    assert ctrl.unread_count() == 4
