import gc

from vmprovider.contract import STATUS_CONTENT_URI
from vmprovider.core.notifications import ChangeEvent


def test_exact_uri_observer_is_notified(notifier):
    seen = []
    notifier.register_observer(f"{STATUS_CONTENT_URI}/1", seen.append, notify_for_descendants=False)

    assert notifier.notify_change(f"{STATUS_CONTENT_URI}/1", "changed") == 1
    assert seen == [ChangeEvent(uri=f"{STATUS_CONTENT_URI}/1", kind="changed")]


def test_collection_observer_hears_item_changes_only_with_descendants(notifier):
    with_desc, without_desc = [], []
    notifier.register_observer(STATUS_CONTENT_URI, with_desc.append)
    notifier.register_observer(STATUS_CONTENT_URI, without_desc.append, notify_for_descendants=False)

    notifier.notify_change(f"{STATUS_CONTENT_URI}/4")

    assert len(with_desc) == 1
    assert without_desc == []


def test_item_observer_hears_collection_changes(notifier):
    seen = []
    notifier.register_observer(f"{STATUS_CONTENT_URI}/4", seen.append, notify_for_descendants=False)

    notifier.notify_change(STATUS_CONTENT_URI)

    assert len(seen) == 1


def test_unrelated_uri_is_not_delivered(notifier):
    seen = []
    notifier.register_observer(f"{STATUS_CONTENT_URI}/4", seen.append)

    assert notifier.notify_change(f"{STATUS_CONTENT_URI}/5") == 0
    assert notifier.notify_change("content://other/status") == 0
    assert seen == []


def test_unregister_stops_delivery(notifier):
    seen = []
    handle = notifier.register_observer(STATUS_CONTENT_URI, seen.append)

    assert notifier.unregister_observer(handle)
    assert not notifier.unregister_observer(handle)
    notifier.notify_change(STATUS_CONTENT_URI)

    assert seen == []
    assert notifier.observer_count() == 0


def test_failing_observer_does_not_block_others(notifier, caplog):
    seen = []

    def _boom(event):
        raise RuntimeError("observer failure")

    notifier.register_observer(STATUS_CONTENT_URI, _boom)
    notifier.register_observer(STATUS_CONTENT_URI, seen.append)

    assert notifier.notify_change(STATUS_CONTENT_URI) == 2
    assert len(seen) == 1
    assert "Change observer failed" in caplog.text


class _Watcher:
    def __init__(self):
        self.seen = []

    def on_change(self, event):
        self.seen.append(event)


def test_weak_observer_is_dropped_with_its_owner(notifier):
    kept, dropped = _Watcher(), _Watcher()
    notifier.register_observer(STATUS_CONTENT_URI, kept.on_change, weak=True)
    notifier.register_observer(STATUS_CONTENT_URI, dropped.on_change, weak=True)
    del dropped
    gc.collect()

    assert notifier.notify_change(STATUS_CONTENT_URI) == 1
    assert len(kept.seen) == 1
    assert notifier.observer_count() == 1


def test_strong_observer_outlives_caller_reference(notifier):
    seen = []
    notifier.register_observer(STATUS_CONTENT_URI, lambda event: seen.append(event))
    gc.collect()

    assert notifier.notify_change(STATUS_CONTENT_URI) == 1
    assert len(seen) == 1
