import json

from cfprovision.entry import (
    Entry,
    EntryField,
    parse_content_value,
    sort_keys_recursively,
)


def _api_entry(fields, *, published=False, archived=False):
    sys = {
        "id": "mytestentry",
        "version": 4,
        "space": {"sys": {"id": "space"}},
        "environment": {"sys": {"id": "master"}},
        "contentType": {"sys": {"id": "tf_test_1"}},
    }
    if published:
        sys["publishedAt"] = "2024-01-01T00:00:00Z"
    if archived:
        sys["archivedAt"] = "2024-01-02T00:00:00Z"
    return {"sys": sys, "fields": fields}


def test_parse_content_value_string():
    assert parse_content_value('"hello"') == "hello"


def test_parse_content_value_json():
    parsed = parse_content_value('{"foo": "bar", "baz": [1, 2, 3]}')
    assert parsed == {"foo": "bar", "baz": [1.0, 2.0, 3.0]}


def test_parse_content_value_keeps_plain_text():
    assert parse_content_value("Hello, World!") == "Hello, World!"


def test_parse_content_value_sorts_keys():
    parsed = parse_content_value('{"z": {"b": 1, "a": 2}, "a": []}')
    assert list(parsed) == ["a", "z"]
    assert list(parsed["z"]) == ["a", "b"]


def test_sort_keys_recursively_reaches_into_lists():
    value = {"outer": [{"y": 1, "x": 2}]}
    result = sort_keys_recursively(value)
    assert list(result["outer"][0]) == ["x", "y"]
    assert result == value


def test_draft_groups_locales_under_field_id():
    entry = Entry(
        fields=[
            EntryField(id="field1", content="Hello, World!", locale="en-US"),
            EntryField(id="field1", content="Hallo", locale="de-DE"),
            EntryField(id="field2", content="Bacon is healthy!", locale="en-US"),
        ]
    )
    assert entry.draft() == {
        "fields": {
            "field1": {"en-US": "Hello, World!", "de-DE": "Hallo"},
            "field2": {"en-US": "Bacon is healthy!"},
        }
    }
    assert list(entry.draft()["fields"]) == ["field1", "field2"]


def test_apply_takes_identity_and_state():
    entry = Entry()
    entry.apply(_api_entry({}, published=True))
    assert entry.id == "mytestentry"
    assert entry.entry_id == "mytestentry"
    assert entry.version == 4
    assert entry.space_id == "space"
    assert entry.environment == "master"
    assert entry.content_type_id == "tf_test_1"
    assert entry.published is True
    assert entry.archived is False
    assert entry.fields == []


def test_apply_archived_flag():
    entry = Entry()
    entry.apply(_api_entry({}, archived=True))
    assert entry.archived is True
    assert entry.published is False


def test_build_fields_keeps_text_and_encodes_objects():
    document = {"nodeType": "document", "data": {}, "content": []}
    entry = Entry()
    entry.build_fields(
        _api_entry({"field1": {"en-US": "Hello, World!"}, "field3": {"en-US": document}})
    )
    assert entry.fields[0] == EntryField(
        id="field1", content="Hello, World!", locale="en-US"
    )
    assert entry.fields[1].id == "field3"
    assert entry.fields[1].content == '{"content":[],"data":{},"nodeType":"document"}'


def test_build_fields_escapes_html_characters():
    entry = Entry()
    entry.build_fields(_api_entry({"field1": {"en-US": {"html": "<b>&</b>"}}}))
    content = entry.fields[0].content
    assert "<" not in content and "&" not in content
    assert json.loads(content) == {"html": "<b>&</b>"}


def test_draft_and_build_fields_round_trip():
    fields = [
        EntryField(id="field1", content="Hello, World!", locale="en-US"),
        EntryField(
            id="field3",
            content='{"content":[{"nodeType":"paragraph"}],"data":{},"nodeType":"document"}',
            locale="en-US",
        ),
    ]
    entry = Entry(fields=list(fields))
    rebuilt = Entry()
    rebuilt.build_fields(_api_entry(entry.draft()["fields"]))
    assert rebuilt.fields == fields