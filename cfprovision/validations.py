"""Field validations of a content type and their mapping to and from the API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

__all__ = [
    "UnsupportedValidationError",
    "Size",
    "Regexp",
    "AllowedResource",
    "NodeValidation",
    "ResourceNodeValidation",
    "Nodes",
    "Validation",
    "map_internal_allowed_resource",
    "map_sdk_allowed_resource",
    "validation_from_api",
    "validations_from_api",
    "nodes_from_api",
    "create_validations",
    "compare_validations",
]

_NODE_LIST_KEYS = {
    "asset_hyperlink": "asset-hyperlink",
    "entry_hyperlink": "entry-hyperlink",
    "embedded_asset_block": "embedded-asset-block",
    "embedded_entry_block": "embedded-entry-block",
    "embedded_entry_inline": "embedded-entry-inline",
}

_NODE_RESOURCE_KEYS = {
    "embedded_resource_block": "embedded-resource-block",
    "embedded_resource_inline": "embedded-resource-inline",
    "resource_hyperlink": "resource-hyperlink",
}

_VALIDATION_KEYS = frozenset(
    {
        "unique",
        "size",
        "range",
        "assetFileSize",
        "regexp",
        "linkContentType",
        "linkMimetypeGroup",
        "in",
        "enabledMarks",
        "enabledNodeTypes",
        "message",
        "nodes",
    }
)


class UnsupportedValidationError(ValueError):
    """Raised when a validation has none of the supported kinds set."""


def _without_none(values: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


@dataclass
class Size:
    """A minimum/maximum pair, used for sizes, ranges and file sizes."""

    min: float | None = None
    max: float | None = None

    def draft(self) -> dict[str, Any]:
        """Return the API representation."""
        return _without_none({"min": self.min, "max": self.max})

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Size:
        """Build from an API range object."""
        return cls(min=data.get("min"), max=data.get("max"))


def _size_draft(size: Size | None) -> dict[str, Any] | None:
    return size.draft() if size is not None else None


def _size_from_api(data: dict[str, Any] | None) -> Size | None:
    return Size.from_api(data) if data is not None else None


@dataclass
class Regexp:
    """A regular expression validation."""

    pattern: str | None = None


@dataclass
class AllowedResource:
    """An entity that a cross-space reference may point to."""

    type: str | None = None
    source: str | None = None
    content_types: list[str] = field(default_factory=list)


@dataclass
class NodeValidation:
    """A validation on one rich-text node kind."""

    message: str | None = None
    size: Size | None = None
    link_content_type: list[str] | None = None

    def draft(self) -> dict[str, Any]:
        """Return the API representation."""
        return _without_none(
            {
                "message": self.message,
                "size": _size_draft(self.size),
                "linkContentType": (
                    list(self.link_content_type)
                    if self.link_content_type is not None
                    else None
                ),
            }
        )


@dataclass
class ResourceNodeValidation:
    """Validations and allowed resources of a resource-linking node kind."""

    validations: list[NodeValidation] | None = None
    allowed_resources: list[AllowedResource] | None = None

    def draft(self) -> dict[str, Any]:
        """Return the API representation."""
        result: dict[str, Any] = {}
        if self.validations is not None:
            result["validations"] = [
                _without_none(
                    {"message": item.message, "size": _size_draft(item.size)}
                )
                for item in self.validations
            ]
        if self.allowed_resources is not None:
            result["allowedResources"] = [
                map_internal_allowed_resource(item) for item in self.allowed_resources
            ]
        return result


@dataclass
class Nodes:
    """Per-node validations of a rich-text field."""

    asset_hyperlink: list[NodeValidation] | None = None
    entry_hyperlink: list[NodeValidation] | None = None
    embedded_asset_block: list[NodeValidation] | None = None
    embedded_entry_block: list[NodeValidation] | None = None
    embedded_entry_inline: list[NodeValidation] | None = None
    embedded_resource_block: ResourceNodeValidation | None = None
    embedded_resource_inline: ResourceNodeValidation | None = None
    resource_hyperlink: ResourceNodeValidation | None = None

    def draft(self) -> dict[str, Any]:
        """Return the API representation."""
        result: dict[str, Any] = {}
        for attribute, key in _NODE_LIST_KEYS.items():
            items = getattr(self, attribute)
            if items is not None:
                result[key] = [item.draft() for item in items]
        for attribute, key in _NODE_RESOURCE_KEYS.items():
            resource = getattr(self, attribute)
            if resource is not None:
                result[key] = resource.draft()
        return result


@dataclass
class Validation:
    """One field validation; exactly one kind is expected to be set."""

    unique: bool | None = None
    size: Size | None = None
    range: Size | None = None
    asset_file_size: Size | None = None
    regexp: Regexp | None = None
    link_content_type: list[str] | None = None
    link_mimetype_group: list[str] | None = None
    in_: list[str] | None = None
    enabled_marks: list[str] | None = None
    enabled_node_types: list[str] | None = None
    message: str | None = None
    nodes: Nodes | None = None

    def draft(self) -> dict[str, Any]:
        """Return the API representation of the first kind that is set."""
        base: dict[str, Any] = _without_none({"message": self.message})

        if self.unique is not None:
            base["unique"] = self.unique
        elif self.size is not None:
            base["size"] = self.size.draft()
        elif self.range is not None:
            base["range"] = self.range.draft()
        elif self.asset_file_size is not None:
            base["assetFileSize"] = self.asset_file_size.draft()
        elif self.regexp is not None:
            base["regexp"] = {"pattern": self.regexp.pattern or ""}
        elif self.link_content_type is not None:
            base["linkContentType"] = list(self.link_content_type)
        elif self.link_mimetype_group is not None:
            base["linkMimetypeGroup"] = list(self.link_mimetype_group)
        elif self.in_ is not None:
            base["in"] = list(self.in_)
        elif self.enabled_marks is not None:
            base["enabledMarks"] = list(self.enabled_marks)
        elif self.enabled_node_types is not None:
            base["enabledNodeTypes"] = list(self.enabled_node_types)
        elif self.nodes is not None:
            base["nodes"] = self.nodes.draft()
        else:
            raise UnsupportedValidationError(
                "unsupported validation used, Validation. Please implement"
            )
        return base


def map_internal_allowed_resource(allowed_resource: AllowedResource) -> dict[str, Any]:
    """Return the API representation of an allowed resource."""
    result = _without_none(
        {"type": allowed_resource.type, "source": allowed_resource.source}
    )
    if allowed_resource.content_types:
        result["contentTypes"] = list(allowed_resource.content_types)
    return result


def map_sdk_allowed_resource(allowed_resource: dict[str, Any]) -> AllowedResource:
    """Build an allowed resource from its API representation."""
    return AllowedResource(
        type=allowed_resource.get("type"),
        source=allowed_resource.get("source"),
        content_types=list(allowed_resource.get("contentTypes") or []),
    )


def _node_from_api(data: dict[str, Any]) -> NodeValidation:
    link_content_type = data.get("linkContentType")
    return NodeValidation(
        message=data.get("message"),
        size=_size_from_api(data.get("size")),
        link_content_type=(
            list(link_content_type) if link_content_type is not None else None
        ),
    )


def _resource_node_from_api(data: dict[str, Any]) -> ResourceNodeValidation:
    allowed = data.get("allowedResources")
    return ResourceNodeValidation(
        validations=[
            NodeValidation(
                message=item.get("message"), size=_size_from_api(item.get("size"))
            )
            for item in data.get("validations") or []
        ],
        allowed_resources=(
            [map_sdk_allowed_resource(item) for item in allowed]
            if allowed is not None
            else None
        ),
    )


def nodes_from_api(data: dict[str, Any]) -> Nodes:
    """Build per-node validations from their API representation."""
    nodes = Nodes()
    for attribute, key in _NODE_LIST_KEYS.items():
        items = data.get(key)
        if items is not None:
            setattr(nodes, attribute, [_node_from_api(item) for item in items])
    for attribute, key in _NODE_RESOURCE_KEYS.items():
        resource = data.get(key)
        if resource is not None:
            setattr(nodes, attribute, _resource_node_from_api(resource))
    return nodes


def validation_from_api(data: dict[str, Any]) -> Validation:
    """Build a validation from its API representation."""
    message = data.get("message")

    if data.get("assetFileSize") is not None:
        return Validation(asset_file_size=Size.from_api(data["assetFileSize"]), message=message)
    if data.get("range") is not None:
        return Validation(range=Size.from_api(data["range"]), message=message)
    if data.get("regexp") is not None:
        return Validation(
            regexp=Regexp(pattern=data["regexp"].get("pattern", "")), message=message
        )
    if data.get("linkContentType") is not None:
        return Validation(link_content_type=list(data["linkContentType"]), message=message)
    if data.get("linkMimetypeGroup") is not None:
        return Validation(
            link_mimetype_group=list(data["linkMimetypeGroup"]), message=message
        )
    if data.get("in") is not None:
        return Validation(in_=list(data["in"]), message=message)
    if data.get("enabledMarks") is not None:
        return Validation(enabled_marks=list(data["enabledMarks"]), message=message)
    if data.get("enabledNodeTypes") is not None:
        return Validation(
            enabled_node_types=list(data["enabledNodeTypes"]), message=message
        )
    if data.get("unique") is not None:
        return Validation(unique=data["unique"], message=message)
    if data.get("size") is not None:
        return Validation(size=Size.from_api(data["size"]), message=message)
    if data.get("nodes") is not None:
        return Validation(nodes=nodes_from_api(data["nodes"]), message=message)

    raise UnsupportedValidationError(
        "unsupported validation used, FieldValidation. Please implement"
    )


def validations_from_api(data: list[dict[str, Any]] | None) -> list[Validation]:
    """Build validations from their API representation; None gives an empty list."""
    if data is None:
        return []
    return [validation_from_api(item) for item in data]


def create_validations(validations: list[Validation] | None) -> list[dict[str, Any]]:
    """Draft every validation for the API."""
    return [validation.draft() for validation in validations or []]


def _known_keys(validation: dict[str, Any]) -> dict[str, Any]:
    return {
        key: value
        for key, value in validation.items()
        if key in _VALIDATION_KEYS and value is not None
    }


def compare_validations(
    validations: list[Validation] | None, other: list[dict[str, Any]] | None
) -> bool:
    """Tell whether local validations match the API's, in order."""
    local = validations or []
    if other is None:
        return len(local) == 0
    if len(local) != len(other):
        return False
    drafts = create_validations(local)
    return all(
        draft == _known_keys(remote) for draft, remote in zip(drafts, other)
    )