"""Tests for the latest-value snapshot publisher."""

import dataclasses
import threading

from nmeastat.publisher import SnapshotPublisher
from nmeastat.state import GnssState


def _state(satellites_used: int) -> GnssState:
    return dataclasses.replace(GnssState.initial(), satellites_used=satellites_used)


class TestSnapshotPublisher:
    def test_latest_before_publish_is_initial(self):
        publisher = SnapshotPublisher()
        assert publisher.latest() == GnssState.initial()

    def test_subscriber_receives_published_snapshot(self):
        publisher = SnapshotPublisher()
        subscription = publisher.subscribe()
        publisher.publish(_state(5))
        assert subscription.get(timeout=1.0).satellites_used == 5

    def test_intermediate_snapshots_coalesced(self):
        publisher = SnapshotPublisher()
        subscription = publisher.subscribe()
        for count in range(10):
            publisher.publish(_state(count))
        assert subscription.get(timeout=1.0).satellites_used == 9
        assert subscription.get(timeout=0.01) is None

    def test_subscribers_are_independent(self):
        publisher = SnapshotPublisher()
        slow = publisher.subscribe()
        fast = publisher.subscribe()
        publisher.publish(_state(1))
        assert fast.get(timeout=1.0).satellites_used == 1
        publisher.publish(_state(2))
        assert fast.get(timeout=1.0).satellites_used == 2
        assert slow.get(timeout=1.0).satellites_used == 2

    def test_get_times_out_without_publish(self):
        subscription = SnapshotPublisher().subscribe()
        assert subscription.get(timeout=0.01) is None
        assert not subscription.closed

    def test_close_releases_waiting_subscriber(self):
        publisher = SnapshotPublisher()
        subscription = publisher.subscribe()
        results = []
        waiter = threading.Thread(target=lambda: results.append(subscription.get()))
        waiter.start()
        publisher.close()
        waiter.join(timeout=2.0)
        assert results == [None]
        assert subscription.closed

    def test_final_snapshot_delivered_after_close(self):
        publisher = SnapshotPublisher()
        subscription = publisher.subscribe()
        publisher.publish(_state(7))
        publisher.close()
        assert subscription.get(timeout=1.0).satellites_used == 7
        assert subscription.get() is None

    def test_publish_after_close_ignored(self):
        publisher = SnapshotPublisher()
        publisher.close()
        publisher.publish(_state(3))
        assert publisher.latest().satellites_used is None

    def test_subscription_close_only_affects_itself(self):
        publisher = SnapshotPublisher()
        closed = publisher.subscribe()
        open_ = publisher.subscribe()
        closed.close()
        publisher.publish(_state(4))
        assert closed.get(timeout=0.01) is None
        assert open_.get(timeout=1.0).satellites_used == 4

    def test_subscription_close_releases_its_waiting_get(self):
        publisher = SnapshotPublisher()
        subscription = publisher.subscribe()
        results = []
        waiter = threading.Thread(target=lambda: results.append(subscription.get()))
        waiter.start()
        subscription.close()
        waiter.join(timeout=2.0)
        assert not waiter.is_alive()
        assert results == [None]
        assert not publisher.closed

    def test_wait_newer_returns_version_and_snapshot(self):
        publisher = SnapshotPublisher()
        publisher.publish(_state(1))
        publisher.publish(_state(2))
        version, snapshot = publisher.wait_newer(0, timeout=1.0)
        assert version == 2
        assert snapshot.satellites_used == 2
        assert publisher.wait_newer(version, timeout=0.01) is None

    def test_wait_newer_cancelled(self):
        publisher = SnapshotPublisher()
        publisher.publish(_state(1))
        assert publisher.wait_newer(0, timeout=1.0, cancelled=lambda: True) is None
