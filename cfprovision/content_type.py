"""Content types and their fields, mapped to and from the API representation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from cfprovision.validations import (
    Validation,
    compare_validations,
    create_validations,
    validations_from_api,
)

__all__ = [
    "DefaultValue",
    "Items",
    "Field",
    "ContentType",
    "default_value_type",
]

_LINK_ITEM_TYPES = frozenset({"Link", "ResourceLink"})


@dataclass
class DefaultValue:
    """Per-locale default values of a field, either all strings or all booleans."""

    bool: dict[str, bool] | None = None
    string: dict[str, str] | None = None

    def draft(self) -> dict[str, Any] | None:
        """Return the API representation, or None when no value is set."""
        values: dict[str, Any] = {}
        if self.string is not None:
            values.update(self.string)
        if self.bool is not None:
            values.update(self.bool)
        return values or None


def default_value_type(values: dict[str, Any] | None) -> str | None:
    """Name the type of the values in a default-value map.

    Returns "string", "bool" or "float64" after the first value, or None for
    a missing or empty map.
    """
    if not values:
        return None
    value = next(iter(values.values()))
    if isinstance(value, str):
        return "string"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "float64"
    raise TypeError(
        f"The default type {type(value).__name__} is not supported by the provider"
    )


@dataclass
class Items:
    """The item definition of an Array field."""

    type: str
    link_type: str | None = None
    validations: list[Validation] = field(default_factory=list)

    def to_native(self) -> dict[str, Any]:
        """Return the API representation."""
        validations = create_validations(self.validations)
        if self.type == "Symbol":
            return {"type": "Symbol", "validations": validations}
        if self.type in _LINK_ITEM_TYPES:
            return {
                "type": self.type,
                "linkType": self.link_type or "",
                "validations": validations,
            }
        raise ValueError(f"unsupported item type used, {self.type}. Please implement")

    def equal(self, item: dict[str, Any] | None) -> bool:
        """Tell whether the API item definition matches this one."""
        if item is None:
            return False
        item_type = item.get("type")
        if item_type is None:
            raise ValueError("item has no type discriminator")
        if self.type != item_type:
            return False
        if item_type != "Symbol" and self.link_type != item.get("linkType", ""):
            return False
        return compare_validations(self.validations, item.get("validations"))

    @classmethod
    def _from_api(cls, data: dict[str, Any] | None) -> Items:
        if data is None or data.get("type") is None:
            raise ValueError("array field has no item type")
        return cls(
            type=data["type"],
            link_type=data.get("linkType") or None,
            validations=validations_from_api(data.get("validations")),
        )


def _default_value_from_api(values: dict[str, Any] | None) -> DefaultValue | None:
    kind = default_value_type(values)
    if kind is None or values is None:
        return None
    default = DefaultValue()
    if kind == "string":
        default.string = {key: str(value) for key, value in values.items()}
    elif kind == "bool":
        default.bool = {key: bool(value) for key, value in values.items()}
    return default


@dataclass
class Field:
    """One field of a content type."""

    id: str
    name: str
    type: str
    link_type: str | None = None
    required: bool = False
    localized: bool = False
    disabled: bool | None = None
    omitted: bool | None = None
    validations: list[Validation] = field(default_factory=list)
    items: Items | None = None
    default_value: DefaultValue | None = None

    def to_native(self) -> dict[str, Any]:
        """Return the API representation."""
        native: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "localized": bool(self.localized),
            "required": bool(self.required),
            "validations": create_validations(self.validations),
        }
        if self.disabled is not None:
            native["disabled"] = self.disabled
        if self.omitted is not None:
            native["omitted"] = self.omitted
        if self.link_type is not None:
            native["linkType"] = self.link_type
        if self.type == "Array":
            if self.items is None:
                raise ValueError(f"array field {self.id} has no items")
            native["items"] = self.items.to_native()
        if self.default_value is not None:
            default = self.default_value.draft()
            if default is not None:
                native["defaultValue"] = default
        return native

    def equal(self, other: dict[str, Any]) -> bool:
        """Tell whether the API field matches this one."""
        if other.get("type") != self.type:
            return False
        if other.get("id") != self.id:
            return False
        if other.get("name") != self.name:
            return False
        remote_link_type = other.get("linkType")
        if remote_link_type is not None and remote_link_type != (self.link_type or ""):
            return False
        if remote_link_type is None and self.link_type is not None:
            return False
        if bool(other.get("required", False)) != bool(self.required):
            return False
        if other.get("omitted") != self.omitted:
            return False
        if other.get("disabled") != self.disabled:
            return False
        if bool(other.get("localized", False)) != bool(self.localized):
            return False
        remote_items = other.get("items")
        if self.items is None and remote_items is not None:
            return False
        if self.items is not None and not self.items.equal(remote_items):
            return False
        if not compare_validations(self.validations, other.get("validations")):
            return False
        if (
            self.default_value is not None
            and self.default_value.draft() != other.get("defaultValue")
        ):
            return False
        return True

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Field:
        """Build a field from its API representation."""
        link_type = data.get("linkType")
        result = cls(
            id=data["id"],
            name=data["name"],
            type=data["type"],
            link_type=link_type,
            required=bool(data.get("required", False)),
            localized=bool(data.get("localized", False)),
            disabled=data.get("disabled"),
            omitted=data.get("omitted"),
            validations=validations_from_api(data.get("validations")),
            default_value=_default_value_from_api(data.get("defaultValue")),
        )
        if result.type == "Array":
            result.items = Items._from_api(data.get("items"))
        return result


@dataclass
class ContentType:
    """A content type with its fields and where it lives."""

    id: str | None = None
    space_id: str | None = None
    environment: str | None = None
    name: str = ""
    display_field: str | None = None
    description: str | None = None
    version: int | None = None
    fields: list[Field] = field(default_factory=list)

    def _body(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "name": self.name,
            "displayField": self.display_field or "",
            "fields": [item.to_native() for item in self.fields],
        }
        if self.description is not None:
            body["description"] = self.description
        return body

    def create_body(self) -> dict[str, Any]:
        """Return the request body that creates this content type."""
        return self._body()

    def update_body(self) -> dict[str, Any]:
        """Return the request body that updates this content type."""
        return self._body()

    def apply(self, data: dict[str, Any]) -> None:
        """Take over identity, version and definition from an API content type."""
        sys = data.get("sys", {})
        self.id = sys.get("id")
        self.version = sys.get("version")
        self.description = data.get("description")
        self.name = data.get("name", "")
        self.display_field = data.get("displayField", "")

        fields = []
        for item in data.get("fields") or []:
            try:
                fields.append(Field.from_api(item))
            except (ValueError, TypeError, KeyError) as err:
                raise ValueError(f"field import failed: {err}") from err
        self.fields = fields

    def equal(self, other: dict[str, Any]) -> bool:
        """Tell whether the API content type matches this one, field order included."""
        if self.description != other.get("description"):
            return False
        if self.name != other.get("name"):
            return False
        if (self.display_field or "") != other.get("displayField", ""):
            return False
        remote_fields = other.get("fields") or []
        if len(self.fields) != len(remote_fields):
            return False
        for position, local in enumerate(self.fields):
            index = next(
                (i for i, remote in enumerate(remote_fields) if remote.get("id") == local.id),
                -1,
            )
            if index == -1:
                return False
            if not local.equal(remote_fields[index]):
                return False
            if index != position:
                return False
        return True