##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################
"""
Tests for the `events.py` module.
"""

from pytest_mock import MockerFixture

from brewguide.events import ALL_TOPICS, DATA_CHANGED, STORAGE_CHANGED, EventBus


def test_publish_reaches_topic_and_wildcard(mocker: MockerFixture):
    """
    Test that handlers of the topic and of the wildcard both receive an event.

    Args:
        mocker: PyTest mocker fixture.
    """
    bus = EventBus()
    topic_handler = mocker.Mock()
    wildcard_handler = mocker.Mock()
    other_handler = mocker.Mock()
    bus.subscribe(DATA_CHANGED, topic_handler)
    bus.subscribe(ALL_TOPICS, wildcard_handler)
    bus.subscribe(STORAGE_CHANGED, other_handler)

    bus.notify_data_changed("coffeeBeans")
    topic_handler.assert_called_once_with({"key": "coffeeBeans"})
    wildcard_handler.assert_called_once_with({"key": "coffeeBeans"})
    other_handler.assert_not_called()


def test_storage_changed_payload(mocker: MockerFixture):
    """Test the payload of a storage change."""
    bus = EventBus()
    handler = mocker.Mock()
    bus.subscribe(STORAGE_CHANGED, handler)
    bus.notify_storage_changed("theme", source="sync")
    handler.assert_called_once_with({"key": "theme", "source": "sync"})


def test_unsubscribe(mocker: MockerFixture):
    """Test that an unsubscribed handler stops receiving events."""
    bus = EventBus()
    handler = mocker.Mock()
    bus.subscribe(DATA_CHANGED, handler)
    assert bus.unsubscribe(DATA_CHANGED, handler) is True
    assert bus.unsubscribe(DATA_CHANGED, handler) is False
    bus.notify_data_changed("x")
    handler.assert_not_called()


def test_failing_handler_does_not_block_others(mocker: MockerFixture, caplog):
    """Test that one handler raising does not stop delivery to the rest."""
    bus = EventBus()
    bus.subscribe(DATA_CHANGED, mocker.Mock(side_effect=RuntimeError("boom")))
    survivor = mocker.Mock()
    bus.subscribe(DATA_CHANGED, survivor)
    bus.notify_data_changed("x")
    survivor.assert_called_once()
    assert "Event handler failed" in caplog.text
