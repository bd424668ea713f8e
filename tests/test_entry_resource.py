import copy

import pytest

from cfprovision.api import ApiError, ApiResponse
from cfprovision.entry import Entry, EntryField
from cfprovision.entry_resource import EntryResource


def _api_entry(entry_id, version=1, *, published=False, archived=False, fields=None):
    sys = {
        "id": entry_id,
        "version": version,
        "space": {"sys": {"id": "space"}},
        "environment": {"sys": {"id": "master"}},
        "contentType": {"sys": {"id": "tf_test_1"}},
    }
    if published:
        sys["publishedAt"] = "2024-01-01T00:00:00Z"
    if archived:
        sys["archivedAt"] = "2024-01-02T00:00:00Z"
    return {"sys": sys, "fields": fields or {}}


class FakeClient:
    def __init__(self, entries=None, statuses=None):
        self.entries = {item["sys"]["id"]: item for item in entries or []}
        self.statuses = statuses or {}
        self.calls = []

    def _record(self, name, *args):
        self.calls.append((name, *args))
        return self.statuses.get(name)

    def names(self):
        return [call[0] for call in self.calls]

    def get_entry(self, space_id, environment, entry_id):
        forced = self._record("get_entry", entry_id)
        if forced:
            return ApiResponse(forced)
        if entry_id not in self.entries:
            return ApiResponse(404)
        return ApiResponse(200, copy.deepcopy(self.entries[entry_id]))

    def create_entry(self, space_id, environment, content_type_id, body):
        forced = self._record("create_entry", content_type_id)
        if forced:
            return ApiResponse(forced)
        entry = _api_entry("generated", fields=copy.deepcopy(body["fields"]))
        entry["sys"]["contentType"]["sys"]["id"] = content_type_id
        self.entries["generated"] = entry
        return ApiResponse(201, copy.deepcopy(entry))

    def update_entry(self, space_id, environment, entry_id, version, content_type_id, body):
        forced = self._record("update_entry", entry_id, version)
        if forced:
            return ApiResponse(forced)
        existing = self.entries.get(entry_id)
        if existing is None:
            entry = _api_entry(entry_id, fields=copy.deepcopy(body["fields"]))
            self.entries[entry_id] = entry
            return ApiResponse(201, copy.deepcopy(entry))
        existing["fields"] = copy.deepcopy(body["fields"])
        existing["sys"]["version"] += 1
        return ApiResponse(200, copy.deepcopy(existing))

    def _transition(self, name, entry_id, version, change):
        forced = self._record(name, entry_id, version)
        if forced:
            return ApiResponse(forced)
        entry = self.entries[entry_id]
        change(entry["sys"])
        entry["sys"]["version"] += 1
        return ApiResponse(200, copy.deepcopy(entry))

    def publish_entry(self, space_id, environment, entry_id, version):
        return self._transition(
            "publish_entry", entry_id, version,
            lambda sys: sys.__setitem__("publishedAt", "2024-01-01T00:00:00Z"),
        )

    def unpublish_entry(self, space_id, environment, entry_id, version):
        return self._transition(
            "unpublish_entry", entry_id, version, lambda sys: sys.pop("publishedAt", None)
        )

    def archive_entry(self, space_id, environment, entry_id, version):
        return self._transition(
            "archive_entry", entry_id, version,
            lambda sys: sys.__setitem__("archivedAt", "2024-01-02T00:00:00Z"),
        )

    def unarchive_entry(self, space_id, environment, entry_id, version):
        return self._transition(
            "unarchive_entry", entry_id, version, lambda sys: sys.pop("archivedAt", None)
        )

    def delete_entry(self, space_id, environment, entry_id, version):
        forced = self._record("delete_entry", entry_id, version)
        if forced:
            return ApiResponse(forced)
        self.entries.pop(entry_id, None)
        return ApiResponse(204)


def _plan(entry_id="mytestentry", published=True, archived=False):
    return Entry(
        entry_id=entry_id,
        id=entry_id,
        space_id="space",
        environment="master",
        content_type_id="tf_test_1",
        fields=[EntryField(id="field1", content="Hello, World!", locale="en-US")],
        published=published,
        archived=archived,
    )


def test_create_with_entry_id_writes_and_publishes():
    client = FakeClient()
    plan = _plan()
    state = EntryResource(client).create(plan)
    assert client.names() == ["update_entry", "publish_entry"]
    assert state.id == "mytestentry"
    assert state.published is True
    assert state.fields == plan.fields
    assert "publishedAt" in client.entries["mytestentry"]["sys"]


def test_create_without_entry_id_uses_create_call():
    client = FakeClient()
    plan = _plan(entry_id=None, published=False)
    state = EntryResource(client).create(plan)
    assert client.names() == ["create_entry"]
    assert state.id == "generated"
    assert state.published is False


def test_create_failure_raises():
    client = FakeClient(statuses={"update_entry": 500})
    with pytest.raises(ApiError, match="Could not create entry") as info:
        EntryResource(client).create(_plan())
    assert info.value.status_code == 500


def test_create_state_failure_raises():
    client = FakeClient(statuses={"publish_entry": 409})
    with pytest.raises(ApiError, match="Error setting entry state"):
        EntryResource(client).create(_plan())


def test_read_refreshes_state():
    client = FakeClient([_api_entry("mytestentry", 7, published=True)])
    state = EntryResource(client).read(_plan(published=False))
    assert state is not None
    assert state.version == 7
    assert state.published is True


def test_read_missing_returns_none():
    assert EntryResource(FakeClient()).read(_plan()) is None


def test_read_unexpected_status_raises():
    client = FakeClient(statuses={"get_entry": 500})
    with pytest.raises(ApiError, match="Received unexpected status code: 500"):
        EntryResource(client).read(_plan())


def test_update_uses_state_version_and_unpublishes():
    client = FakeClient([_api_entry("mytestentry", 3, published=True)])
    state = Entry()
    state.apply(copy.deepcopy(client.entries["mytestentry"]))
    result = EntryResource(client).update(_plan(published=False), state)
    assert client.calls[0] == ("update_entry", "mytestentry", 3)
    assert client.names() == ["update_entry", "unpublish_entry"]
    assert result.published is False
    assert "publishedAt" not in client.entries["mytestentry"]["sys"]


def test_delete_unpublishes_then_deletes_latest_version():
    client = FakeClient([_api_entry("mytestentry", 2, published=True)])
    EntryResource(client).delete(_plan())
    assert client.names() == ["get_entry", "unpublish_entry", "delete_entry"]
    unpublished_version = client.calls[1][2]
    assert client.calls[2] == ("delete_entry", "mytestentry", unpublished_version + 1)
    assert "mytestentry" not in client.entries


def test_delete_missing_entry_does_nothing():
    client = FakeClient()
    EntryResource(client).delete(_plan())
    assert client.names() == ["get_entry"]


def test_delete_tolerates_not_found_on_delete():
    client = FakeClient([_api_entry("mytestentry")], statuses={"delete_entry": 404})
    EntryResource(client).delete(_plan())
    assert client.names() == ["get_entry", "delete_entry"]


def test_delete_unexpected_status_raises():
    client = FakeClient([_api_entry("mytestentry")], statuses={"delete_entry": 409})
    with pytest.raises(ApiError, match="Received unexpected status code: 409"):
        EntryResource(client).delete(_plan())


@pytest.mark.parametrize("import_id", ["mytestentry", "a:b", ":space:master", "a:b:c:d"])
def test_import_state_rejects_bad_identifier(import_id):
    with pytest.raises(ValueError, match="entry_id:space_id:environment"):
        EntryResource(FakeClient()).import_state(import_id)


def test_import_state_loads_entry():
    fields = {"field1": {"en-US": "Hello, World!"}}
    client = FakeClient([_api_entry("mytestentry", 5, fields=fields)])
    state = EntryResource(client).import_state("mytestentry:space:master")
    assert client.calls == [("get_entry", "mytestentry")]
    assert state.version == 5
    assert state.space_id == "space"
    assert state.environment == "master"
    assert state.fields == [EntryField(id="field1", content="Hello, World!", locale="en-US")]


def test_import_state_missing_keeps_identity_only():
    state = EntryResource(FakeClient()).import_state("mytestentry:space:master")
    assert state.entry_id == "mytestentry"
    assert state.version is None
    assert state.fields == []


def test_set_entry_state_archives_and_unarchives():
    client = FakeClient([_api_entry("mytestentry")])
    resource = EntryResource(client)
    state = Entry()
    state.apply(copy.deepcopy(client.entries["mytestentry"]))
    resource.set_entry_state(state, _plan(published=False, archived=True))
    assert state.archived is True
    resource.set_entry_state(state, _plan(published=False, archived=False))
    assert state.archived is False
    assert client.names() == ["archive_entry", "unarchive_entry"]


def test_set_entry_state_without_change_makes_no_calls():
    client = FakeClient([_api_entry("mytestentry", published=True)])
    state = Entry()
    state.apply(copy.deepcopy(client.entries["mytestentry"]))
    EntryResource(client).set_entry_state(state, _plan(published=True))
    assert client.calls == []
    assert state.published is True