from concurrent.futures import ThreadPoolExecutor

import pytest

from lettr.analytics.engagement import (
    LEVEL_LABELS,
    EngagementSettings,
    EngagementStateMachine,
    level_label,
)


def add_read(storage, subscriber_id, depth=100, is_bot=False, event_type="scroll"):
    storage.append_event({
        "subscriber_id": subscriber_id,
        "event_type": event_type,
        "is_bot": is_bot,
        "scroll_depth": depth,
    })


@pytest.fixture
def engagement(storage):
    return EngagementStateMachine(storage)


@pytest.fixture
def subscriber_id(storage):
    return storage.save_subscriber({"email": "reader@example.com"})


def test_completed_reads_only_counts_human_full_scrolls(engagement, storage, subscriber_id):
    add_read(storage, subscriber_id, depth=90)
    add_read(storage, subscriber_id, depth=100)
    add_read(storage, subscriber_id, depth=89)
    add_read(storage, subscriber_id, depth=100, is_bot=True)
    add_read(storage, subscriber_id, depth=None, event_type="open")
    add_read(storage, "someone-else")

    assert engagement.completed_reads(subscriber_id) == 2


def test_verification_after_three_reads(engagement, storage, subscriber_id):
    add_read(storage, subscriber_id)
    add_read(storage, subscriber_id)
    assert engagement.on_scroll_completed(subscriber_id) is False

    add_read(storage, subscriber_id)
    assert engagement.on_scroll_completed(subscriber_id) is True

    subscriber = storage.get_subscriber(subscriber_id)
    assert subscriber["level"] == 2
    assert subscriber["human_verified_at"] is not None

    add_read(storage, subscriber_id)
    assert engagement.on_scroll_completed(subscriber_id) is False
    assert storage.get_subscriber(subscriber_id)["level"] == 2


def test_never_demotes_higher_levels(engagement, storage):
    subscriber_id = storage.save_subscriber({"email": "vip@example.com", "level": 4})
    for _ in range(3):
        add_read(storage, subscriber_id)

    assert engagement.on_scroll_completed(subscriber_id) is False
    subscriber = storage.get_subscriber(subscriber_id)
    assert subscriber["level"] == 4
    assert subscriber["human_verified_at"] is None


def test_custom_thresholds(storage, subscriber_id):
    engagement = EngagementStateMachine(
        storage, EngagementSettings(completion_scroll_depth=50, verification_reads=1)
    )
    add_read(storage, subscriber_id, depth=60)

    assert engagement.on_scroll_completed(subscriber_id) is True


def test_concurrent_promotion_happens_once(engagement, storage, subscriber_id):
    for _ in range(3):
        add_read(storage, subscriber_id)

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(engagement.on_scroll_completed, [subscriber_id] * 16))

    assert results.count(True) == 1
    assert storage.get_subscriber(subscriber_id)["level"] == 2


def test_assign_level(engagement, storage, subscriber_id):
    assert engagement.assign_level(subscriber_id, 3) is True
    subscriber = storage.get_subscriber(subscriber_id)
    assert subscriber["level"] == 3
    assert subscriber["human_verified_at"] is not None

    assert engagement.assign_level(subscriber_id, 3) is False
    assert engagement.assign_level(subscriber_id, 4) is True


@pytest.mark.parametrize("level", [0, 5, -1])
def test_assign_level_out_of_range(engagement, subscriber_id, level):
    with pytest.raises(ValueError):
        engagement.assign_level(subscriber_id, level)


def test_assign_level_rejects_demotion(engagement, storage, subscriber_id):
    engagement.assign_level(subscriber_id, 3)

    with pytest.raises(ValueError):
        engagement.assign_level(subscriber_id, 2)
    assert storage.get_subscriber(subscriber_id)["level"] == 3


def test_assign_level_unknown_subscriber(engagement):
    with pytest.raises(ValueError):
        engagement.assign_level("missing", 3)


def test_level_labels():
    assert set(LEVEL_LABELS) == {1, 2, 3, 4}
    assert level_label(2) == "Verified"
    assert level_label(4) == "Inner circle"
    assert level_label(9) == "Unknown"


def test_activity_is_written_below_threshold(engagement, storage, subscriber_id):
    add_read(storage, subscriber_id)

    assert engagement.on_scroll_completed(
        subscriber_id, activity_at="2030-01-01T00:00:00+00:00"
    ) is False
    subscriber = storage.get_subscriber(subscriber_id)
    assert subscriber["last_activity_at"] == "2030-01-01T00:00:00+00:00"
    assert subscriber["level"] == 1
