# cfprovision

`cfprovision` keeps the content types, editor interfaces and entries of a
headless content-management space in step with a declared desired state.
It converts between Python dataclasses that describe those objects and the
JSON bodies of the management API. It also works out whether anything has
changed and takes a resource through create, read, update, delete and
import.

## Installation

```
pip install cfprovision
```

The package has no runtime dependencies. To run the test suite, install
the `test` extra and run `pytest`:

```
pip install "cfprovision[test]"
pytest
```

## Modules

### `cfprovision.validations`

Field validations: `Validation`, `Size`, `Regexp`, `Nodes`,
`NodeValidation`, `ResourceNodeValidation` and `AllowedResource`.

- `Validation.draft()` returns the API body for the first kind of rule
  that is set. If no rule is set it raises `UnsupportedValidationError`,
  which is a subclass of `ValueError`.
- `validation_from_api`, `validations_from_api` and `nodes_from_api` read
  API data back into these classes.
- `create_validations` drafts a whole list of validations.
- `compare_validations` reports whether local validations match the API's
  list, in order.
- `map_internal_allowed_resource` and `map_sdk_allowed_resource` convert
  allowed resources in both directions.

### `cfprovision.content_type`

`ContentType`, `Field`, `Items` and `DefaultValue`.

- `create_body()` and `update_body()` build the request bodies.
- `apply()` loads an API response into the object.
- `equal()` reports whether an update is needed. A field that has moved
  to a new position counts as a change.
- `default_value_type()` names the type of a default-value map: `"string"`,
  `"bool"` or `"float64"`. It raises `TypeError` for any other type.

### `cfprovision.content_type_resource`

`ContentTypeResource` handles the full lifecycle of a content type.

- `create` refuses to run if a content type with the planned id already
  exists. Otherwise it creates the content type and activates it.
- `read` returns `None` when the content type is gone.
- `update` first marks the fields that are no longer in the plan as
  omitted and publishes, then removes those fields and publishes again.
- `delete` deactivates the content type, with retries, and then deletes
  it.

### `cfprovision.editor_interface`

`EditorInterface`, `Control`, `Settings` and `Widget`. `Widget` is used
for both sidebar items and entry editors, and holds its settings as JSON
text. `to_update_body()` builds the request body and `apply()` loads an
API response.

### `cfprovision.editor_interface_resource`

`EditorInterfaceResource` writes the editor interface of a content type at
the current remote version. `current_version()` fetches that version.
`delete` only logs: editor interfaces are not deleted remotely.

### `cfprovision.entry`

`Entry` and `EntryField`.

- `draft()` groups field content by field id and then by locale.
- `apply()` and `build_fields()` load an API entry. Content that is not a
  string is stored as JSON text.
- `parse_content_value` reads content as JSON when it can, and otherwise
  keeps it as plain text.
- `sort_keys_recursively` sorts the keys of every mapping nested inside a
  value.

### `cfprovision.entry_resource`

`EntryResource` handles the entry lifecycle. `set_entry_state` publishes,
unpublishes, archives or unarchives an entry until it matches the plan.
`delete` unpublishes a published entry before it deletes it.

### `cfprovision.api`

`ApiResponse`, `ApiError` and `check_client_response`. These are the
status-code checks that every resource uses. Every failure in the resource
classes is raised as an `ApiError`, which carries the `status_code`. A
malformed import identifier raises `ValueError`.

## Example

```python
from cfprovision.entry import Entry, EntryField, parse_content_value

entry = Entry(
    entry_id="mytestentry",
    space_id="space",
    environment="master",
    content_type_id="article",
    fields=[EntryField(id="title", content="Hello, World!", locale="en-US")],
    published=True,
    archived=False,
)
body = entry.draft()
# {"fields": {"title": {"en-US": "Hello, World!"}}}

parse_content_value('{"foo": "bar", "baz": [1, 2, 3]}')
# {"baz": [1, 2, 3], "foo": "bar"}
```

## Clients

Each resource class takes a client object that makes the HTTP calls and
returns `ApiResponse` values. The client must provide these methods:

- `ContentTypeResource`: `get_content_type`, `update_content_type`,
  `activate_content_type`, `deactivate_content_type` and
  `delete_content_type`.
- `EditorInterfaceResource`: `get_editor_interface` and
  `update_editor_interface`.
- `EntryResource`: `get_entry`, `create_entry`, `update_entry`,
  `publish_entry`, `unpublish_entry`, `archive_entry`, `unarchive_entry`
  and `delete_entry`.

## Import identifiers

- Content type: `contentTypeId:environment:spaceId`
- Editor interface: `spaceId:environment:contentTypeId`
- Entry: `entryId:spaceId:environment`

## What the package does not do

- It includes no HTTP client. You supply the client, including
  authentication and the base URL.
- It has no command-line tool.
- It does not read configuration files.
- It does not store state between runs. Plans and states are the Python
  objects you pass in and get back.