from __future__ import annotations

from datetime import timedelta

import pytest
from conftest import T0, external_row

from fleetdesk.inbox.normalizer import normalize
from fleetdesk.inbox.presentation import initials, message_to_dict, relative_time


@pytest.mark.parametrize(
    "delta, label",
    [
        (timedelta(seconds=5), "Just now"),
        (timedelta(minutes=1), "1 min ago"),
        (timedelta(minutes=42), "42 mins ago"),
        (timedelta(hours=1), "1 hour ago"),
        (timedelta(hours=5), "5 hours ago"),
        (timedelta(days=1, hours=3), "A day ago"),
        (timedelta(days=9), "9 days ago"),
    ],
)
def test_relative_time(delta, label):
    assert relative_time(T0, T0 + delta) == label


def test_initials():
    assert initials("dana driver") == "DA"
    assert initials("") == ""


def test_external_message_dict():
    d = message_to_dict(normalize(external_row(3, name="Pat")), T0 + timedelta(minutes=2))

    assert d["source"] == "external"
    assert d["id"] == 3
    assert d["sender_initials"] == "PA"
    assert d["receiver_name"] == "Admin"
    assert d["is_read"] is False
    assert d["submitted"].endswith("2 mins ago")
