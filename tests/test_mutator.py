from __future__ import annotations

import pytest
from conftest import FakeStore, external_row, internal_row

from fleetdesk.inbox.errors import MessageNotFound, MutationFailed
from fleetdesk.inbox.messages import MessageKey, SourceKind
from fleetdesk.inbox.mutator import InboxView, StateMutator
from fleetdesk.inbox.normalizer import normalize, normalize_internal

pytestmark = pytest.mark.anyio

IKEY = MessageKey(SourceKind.INTERNAL, 1)
EKEY = MessageKey(SourceKind.EXTERNAL, 1)


def _setup(**row_overrides):
    store = FakeStore(internal=[internal_row(1, **row_overrides)], external=[external_row(1)])
    view = InboxView(
        messages=[
            normalize_internal(store.internal[1]),
            normalize(store.external[1]),
        ]
    )
    return store, view, StateMutator(store, view)


async def test_mark_read_updates_view_and_store():
    store, view, mutator = _setup()

    result = await mutator.mark_read(IKEY)

    assert result.ok and result.persisted
    assert view.get(IKEY).is_read is True
    assert store.internal[1].is_read is True
    assert store.updates == [(1, {"is_read": True})]


async def test_mark_read_twice_is_same_as_once():
    store, view, mutator = _setup()

    await mutator.mark_read(IKEY)
    second = await mutator.mark_read(IKEY)

    assert second.persisted is False
    assert view.get(IKEY).is_read is True
    assert len(store.updates) == 1


async def test_toggle_star_twice_restores_original_and_leaves_read_alone():
    store, view, mutator = _setup(is_read=False)

    first = await mutator.toggle_star(IKEY)
    assert first.message.is_starred is True
    second = await mutator.toggle_star(IKEY)

    assert second.message.is_starred is False
    assert view.get(IKEY).is_read is False
    assert store.updates == [(1, {"is_starred": True}), (1, {"is_starred": False})]


async def test_external_mutations_are_noops():
    store, view, mutator = _setup()
    before = view.get(EKEY)

    read = await mutator.mark_read(EKEY)
    star = await mutator.toggle_star(EKEY)

    assert read.ok and star.ok
    assert view.get(EKEY) == before
    assert store.updates == []


async def test_failed_persist_keeps_local_change_and_surfaces_error():
    store, view, mutator = _setup()
    store.fail_updates = True

    result = await mutator.toggle_star(IKEY)

    assert result.ok is False
    assert result.persisted is False
    assert isinstance(result.error, MutationFailed)
    assert view.get(IKEY).is_starred is True
    assert view.errors == [result.error]
    assert store.internal[1].is_starred is False


async def test_unknown_key_raises():
    _, _, mutator = _setup()
    with pytest.raises(MessageNotFound):
        await mutator.mark_read(MessageKey(SourceKind.INTERNAL, 99))
