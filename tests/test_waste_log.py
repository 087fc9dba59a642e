"""Unit tests for the in-memory waste log."""

from __future__ import annotations

import math
from datetime import date

import pytest

from datastore.waste_log import WasteLogStore
from models.records import WasteCategory
from services.errors import ValidationError


def test_append_inserts_at_head() -> None:
    store = WasteLogStore()
    weights = [0.5, 2.0, 1.25, 3.0, 0.1]
    categories = list(WasteCategory)

    for index, weight in enumerate(weights):
        entry = store.append_entry(categories[index % len(categories)], weight)
        entries = store.entries()
        assert entries[0] == entry
        assert len(entries) == index + 1

    assert len(store) == len(weights)
    assert [entry.weight_kg for entry in store.entries()] == list(reversed(weights))


def test_two_vegetable_entries_keep_first_unchanged() -> None:
    store = WasteLogStore()

    first = store.append_entry(WasteCategory.vegetable, 1.5)
    second = store.append_entry(WasteCategory.vegetable, 1.5)

    entries = store.entries()
    assert len(entries) == 2
    assert entries[0] is second
    assert entries[0].category is WasteCategory.vegetable
    assert entries[0].weight_kg == 1.5
    assert entries[1] == first
    assert first.id != second.id


def test_entry_gets_date_label_and_notes() -> None:
    store = WasteLogStore(today=lambda: date(2024, 3, 9))

    entry = store.append_entry("egg_shell", 0.2, notes="  crushed  ")

    assert entry.category is WasteCategory.egg_shell
    assert entry.logged_at == "09/03/2024"
    assert entry.notes == "crushed"
    assert store.latest() == entry


def test_blank_notes_are_dropped() -> None:
    store = WasteLogStore()

    entry = store.append_entry(WasteCategory.fruit, 1.0, notes="   ")

    assert entry.notes is None


@pytest.mark.parametrize("weight", [0, -1.5, math.nan, math.inf, True, "1.5"])
def test_invalid_weight_is_rejected(weight) -> None:
    store = WasteLogStore()

    with pytest.raises(ValidationError):
        store.append_entry(WasteCategory.fruit, weight)

    assert len(store) == 0


def test_unknown_category_is_rejected() -> None:
    store = WasteLogStore()

    with pytest.raises(ValidationError):
        store.append_entry("plastic", 1.0)


def test_entries_returns_copy() -> None:
    store = WasteLogStore()
    store.append_entry(WasteCategory.other, 1.0)

    snapshot = store.entries()
    snapshot.clear()

    assert len(store) == 1
    assert store.latest() is not None


def test_latest_is_none_for_empty_log() -> None:
    assert WasteLogStore().latest() is None
