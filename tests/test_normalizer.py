from __future__ import annotations

from conftest import at, external_row, internal_row

from fleetdesk.inbox.messages import ExternalRow, SourceKind
from fleetdesk.inbox.normalizer import normalize, normalize_internal


def test_external_row_maps_to_unified_shape():
    m = normalize(external_row(7, t=30, phone="+15550100", company="Acme Buses"))

    assert m.id == 7
    assert m.source_kind is SourceKind.EXTERNAL
    assert m.sender_name == "Pat Public"
    assert m.sender_email == "pat@example.com"
    assert m.receiver_name == "Admin"
    assert m.receiver_email == ""
    assert m.subject == "Fleet financing"
    assert m.body == "Please call me back about financing."
    assert m.created_at == at(30)
    assert m.sender_phone == "+15550100"
    assert m.sender_company == "Acme Buses"


def test_external_row_is_never_read_or_starred_and_has_no_owner():
    m = normalize(external_row(1))

    assert m.is_read is False
    assert m.is_starred is False
    assert m.owner_driver_id is None
    assert m.owner_coordinator_id is None
    assert m.attachment_ref is None


def test_missing_external_fields_get_explicit_defaults():
    m = normalize(ExternalRow(id=3, created_at=at(0)))

    assert m.subject == "Contact Us"
    assert m.sender_name == "Unknown"
    assert m.sender_email == ""
    assert m.body == ""


def test_internal_row_keeps_state_and_owners():
    m = normalize_internal(
        internal_row(4, is_read=True, is_starred=True, attachment="receipts/4.pdf", driver_avatar="a.png")
    )

    assert m.source_kind is SourceKind.INTERNAL
    assert m.is_read is True
    assert m.is_starred is True
    assert m.owner_driver_id == 1
    assert m.owner_coordinator_id == 1
    assert m.attachment_ref == "receipts/4.pdf"
    assert m.sender_avatar == "a.png"


def test_internal_row_without_sender_still_has_a_name():
    assert normalize_internal(internal_row(5, sender=None)).sender_name == "Unknown"
