##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################
"""
Tests for the `replica.py` module.
"""

import pytest
from pytest_mock import MockerFixture

from brewguide.backends.key_value.key_value_store import KeyValueStore
from brewguide.backends.replica import ReplicatedWriter
from brewguide.backends.sqlite.document_store import COFFEE_BEANS, DocumentStore
from brewguide.events import DATA_CHANGED
from brewguide.exceptions import StorageBackendError


def test_put_writes_record_and_backup(writer: ReplicatedWriter, document_store: DocumentStore, key_value_store: KeyValueStore):
    """Test that a put lands in the document store and the backup key."""
    bean = {"id": "b1", "name": "Kenya AA"}
    writer.put(COFFEE_BEANS, bean, COFFEE_BEANS, [bean])
    assert document_store.coffee_beans.get("b1") == bean
    assert key_value_store.get_json(COFFEE_BEANS) == [bean]


def test_put_publishes_collection_change(writer: ReplicatedWriter, recorded_events: list):
    """Test that a put announces the collection that changed."""
    writer.put(COFFEE_BEANS, {"id": "b1"}, COFFEE_BEANS, [{"id": "b1"}])
    assert (DATA_CHANGED, {"key": COFFEE_BEANS}) in recorded_events


def test_put_without_notify_is_silent(writer: ReplicatedWriter, recorded_events: list):
    """Test that `notify=False` suppresses every event, including the backup's."""
    writer.put(COFFEE_BEANS, {"id": "b1"}, COFFEE_BEANS, [{"id": "b1"}], notify=False)
    assert recorded_events == []


def test_backup_failure_does_not_fail_write(
    writer: ReplicatedWriter, document_store: DocumentStore, mocker: MockerFixture, caplog
):
    """
    Test that a failed backup write is logged and the record is still stored.

    Args:
        writer: The writer under test.
        document_store: The document store under test.
        mocker: PyTest mocker fixture.
        caplog: PyTest caplog fixture.
    """
    mocker.patch.object(writer.key_value_store, "set_json", side_effect=StorageBackendError("quota exceeded"))
    writer.put(COFFEE_BEANS, {"id": "b1"}, COFFEE_BEANS, [{"id": "b1"}])
    assert document_store.coffee_beans.get("b1") == {"id": "b1"}
    assert "Backup copy 'coffeeBeans' was not updated" in caplog.text


def test_record_failure_skips_backup(writer: ReplicatedWriter, key_value_store: KeyValueStore, mocker: MockerFixture):
    """
    Test that a failed document write raises and leaves the backup untouched.

    Args:
        writer: The writer under test.
        key_value_store: The key-value store under test.
        mocker: PyTest mocker fixture.
    """
    mocker.patch.object(
        writer.document_store.coffee_beans, "put", side_effect=StorageBackendError("database is locked")
    )
    with pytest.raises(StorageBackendError):
        writer.put(COFFEE_BEANS, {"id": "b1"}, COFFEE_BEANS, [{"id": "b1"}])
    assert key_value_store.get(COFFEE_BEANS) is None


def test_delete(writer: ReplicatedWriter, document_store: DocumentStore, key_value_store: KeyValueStore):
    """Test that a delete removes the record and mirrors the remaining collection."""
    writer.put(COFFEE_BEANS, {"id": "b1"}, COFFEE_BEANS, [{"id": "b1"}])
    writer.delete(COFFEE_BEANS, "b1", COFFEE_BEANS, [])
    assert document_store.coffee_beans.get("b1") is None
    assert key_value_store.get_json(COFFEE_BEANS) == []


def test_replace_all(writer: ReplicatedWriter, document_store: DocumentStore, key_value_store: KeyValueStore):
    """Test that `replace_all` swaps out the whole collection and its backup."""
    writer.put(COFFEE_BEANS, {"id": "old"}, COFFEE_BEANS, [{"id": "old"}])
    records = [{"id": "b1"}, {"id": "b2"}]
    writer.replace_all(COFFEE_BEANS, records, COFFEE_BEANS)
    assert document_store.coffee_beans.to_array() == records
    assert key_value_store.get_json(COFFEE_BEANS) == records


def test_drop_removes_backup_key(writer: ReplicatedWriter, document_store: DocumentStore, key_value_store: KeyValueStore):
    """Test that `drop` deletes the record and removes the backup key entirely."""
    record = {"equipmentId": "e1", "methods": []}
    writer.put("customMethods", record, "customMethods_e1", [])
    writer.drop("customMethods", "e1", "customMethods_e1")
    assert document_store.custom_methods.get("e1") is None
    assert key_value_store.get("customMethods_e1") is None
