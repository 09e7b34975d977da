import pytest

from vmprovider.contract import DIR_TYPE, ITEM_TYPE, STATUS_CONTENT_URI, Status
from vmprovider.provider.content_provider import UnknownUriError, VoicemailStatusProvider
from vmprovider.provider.helper import CallerIdentity, SourcePackageError
from vmprovider.provider.table import UnsupportedOperationError
from vmprovider.storage.query_builder import InvalidColumnError


class _Caller:
    """Mutable stand-in for the binder calling identity."""

    def __init__(self, identity: CallerIdentity):
        self.identity = identity

    def __call__(self) -> CallerIdentity:
        return self.identity


@pytest.fixture
def caller():
    return _Caller(CallerIdentity(package="com.admin", has_full_access=True))


@pytest.fixture
def provider(db_helper, notifier, caller):
    return VoicemailStatusProvider(db_helper, calling_identity=caller, notifier=notifier)


def _as(caller, package, *, full=False, own=True):
    caller.identity = CallerIdentity(package=package, has_own_access=own, has_full_access=full)


def _packages(cursor):
    return sorted(row[0] for row in cursor)


def test_insert_stamps_calling_package(provider, caller):
    _as(caller, "com.example")

    new_uri = provider.insert(STATUS_CONTENT_URI, {Status.CONFIGURATION_STATE: 0})

    assert new_uri == f"{STATUS_CONTENT_URI}/1"
    row = provider.query(new_uri, [Status.SOURCE_PACKAGE], None, None, None).fetchall()
    assert row == [("com.example",)]


def test_insert_uses_uri_source_package(provider):
    new_uri = provider.insert(f"{STATUS_CONTENT_URI}?source_package=com.vvm", {})

    assert new_uri == f"{STATUS_CONTENT_URI}/1?source_package=com.vvm"
    assert _packages(provider.query(STATUS_CONTENT_URI, [Status.SOURCE_PACKAGE])) == ["com.vvm"]


def test_insert_for_other_package_requires_full_access(provider, caller, notifier):
    seen = []
    notifier.register_observer(STATUS_CONTENT_URI, seen.append)
    _as(caller, "com.example")

    with pytest.raises(SourcePackageError):
        provider.insert(STATUS_CONTENT_URI, {Status.SOURCE_PACKAGE: "com.other"})

    assert seen == []


def test_insert_source_package_mismatch(provider):
    with pytest.raises(ValueError):
        provider.insert(
            f"{STATUS_CONTENT_URI}?source_package=com.a", {Status.SOURCE_PACKAGE: "com.b"}
        )


def test_insert_on_item_uri_is_unsupported(provider):
    with pytest.raises(UnsupportedOperationError):
        provider.insert(f"{STATUS_CONTENT_URI}/1", {Status.SOURCE_PACKAGE: "com.a"})


def test_caller_without_access_is_rejected(provider, caller):
    _as(caller, "com.nobody", own=False)

    with pytest.raises(SourcePackageError):
        provider.query(STATUS_CONTENT_URI)
    with pytest.raises(SourcePackageError):
        provider.delete(STATUS_CONTENT_URI)


@pytest.mark.parametrize(
    "uri",
    [
        "content://com.android.voicemail/voicemail",
        "content://com.android.voicemail/status/abc",
        "content://com.android.voicemail/status/1/2",
        "content://other.authority/status",
        "https://com.android.voicemail/status",
    ],
)
def test_unknown_uris(provider, uri):
    with pytest.raises(UnknownUriError):
        provider.get_type(uri)


def test_non_full_access_sees_only_own_rows(provider, caller):
    for pkg in ("com.a", "com.b"):
        provider.insert(STATUS_CONTENT_URI, {Status.SOURCE_PACKAGE: pkg})

    assert _packages(provider.query(STATUS_CONTENT_URI, [Status.SOURCE_PACKAGE])) == [
        "com.a",
        "com.b",
    ]

    _as(caller, "com.a")
    assert _packages(provider.query(STATUS_CONTENT_URI, [Status.SOURCE_PACKAGE])) == ["com.a"]
    assert provider.update(STATUS_CONTENT_URI, {Status.DATA_CHANNEL_STATE: 1}) == 1
    assert provider.delete(f"{STATUS_CONTENT_URI}/2") == 0
    assert provider.delete(STATUS_CONTENT_URI) == 1

    _as(caller, "com.admin", full=True)
    assert _packages(provider.query(STATUS_CONTENT_URI, [Status.SOURCE_PACKAGE])) == ["com.b"]


def test_uri_source_package_scopes_delete(provider):
    for pkg in ("com.a", "com.b"):
        provider.insert(STATUS_CONTENT_URI, {Status.SOURCE_PACKAGE: pkg})

    assert provider.delete(f"{STATUS_CONTENT_URI}?source_package=com.b") == 1
    assert _packages(provider.query(STATUS_CONTENT_URI, [Status.SOURCE_PACKAGE])) == ["com.a"]


def test_update_notifies_item_uri(provider, notifier):
    provider.insert(STATUS_CONTENT_URI, {Status.SOURCE_PACKAGE: "com.a"})
    seen = []
    notifier.register_observer(STATUS_CONTENT_URI, seen.append)

    assert provider.update(f"{STATUS_CONTENT_URI}/1", {Status.CONFIGURATION_STATE: 2}) == 1
    assert provider.update(f"{STATUS_CONTENT_URI}/9", {Status.CONFIGURATION_STATE: 2}) == 0

    assert [event.uri for event in seen] == [f"{STATUS_CONTENT_URI}/1"]


def test_query_rejects_hidden_columns(provider):
    with pytest.raises(InvalidColumnError):
        provider.query(STATUS_CONTENT_URI, ["_id", "sql"])


def test_get_type(provider):
    assert provider.get_type(STATUS_CONTENT_URI) == DIR_TYPE
    assert provider.get_type(f"{STATUS_CONTENT_URI}/3") == ITEM_TYPE


def test_unsupported_operations(provider):
    with pytest.raises(UnsupportedOperationError):
        provider.bulk_insert(STATUS_CONTENT_URI, [{Status.SOURCE_PACKAGE: "com.a"}])
    with pytest.raises(UnsupportedOperationError):
        provider.open_file(f"{STATUS_CONTENT_URI}/1", "r")


def test_selection_cannot_escape_package_restriction(provider, caller):
    for pkg in ("com.a", "com.b"):
        provider.insert(STATUS_CONTENT_URI, {Status.SOURCE_PACKAGE: pkg})
    _as(caller, "com.a")

    with pytest.raises(ValueError):
        provider.query(STATUS_CONTENT_URI, [Status.SOURCE_PACKAGE], "1) OR (1")
    with pytest.raises(ValueError):
        provider.update(STATUS_CONTENT_URI, {Status.DATA_CHANNEL_STATE: 1}, "1) OR (1")
    with pytest.raises(ValueError):
        provider.delete(STATUS_CONTENT_URI, "1) OR (1")

    _as(caller, "com.admin", full=True)
    rows = provider.query(STATUS_CONTENT_URI, [Status.SOURCE_PACKAGE, Status.DATA_CHANNEL_STATE])
    assert sorted(rows) == [("com.a", None), ("com.b", None)]


def test_unicode_digit_row_id_is_unknown(provider):
    with pytest.raises(UnknownUriError):
        provider.get_type(f"{STATUS_CONTENT_URI}/²")
    with pytest.raises(UnknownUriError):
        provider.delete(f"{STATUS_CONTENT_URI}/٣")
