"""Editor interfaces: how the web app edits the fields of a content type."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any

__all__ = ["Settings", "Control", "Widget", "EditorInterface"]

_DEFAULT_CONTROL_NAMESPACE = "builtin"
_INTEGER = re.compile(r"[+-]?\d+")

_SETTINGS_KEYS = {
    "help_text": "helpText",
    "true_label": "trueLabel",
    "false_label": "falseLabel",
    "format": "format",
    "time_format": "ampm",
    "bulk_editing": "bulkEditing",
    "tracking_field_id": "trackingFieldId",
}


@dataclass
class Settings:
    """Widget settings of one field control."""

    help_text: str | None = None
    true_label: str | None = None
    false_label: str | None = None
    stars: int | None = None
    format: str | None = None
    time_format: str | None = None
    bulk_editing: bool | None = None
    tracking_field_id: str | None = None

    def draft(self) -> dict[str, Any]:
        """Return the API representation; the number of stars is sent as a string."""
        result: dict[str, Any] = {}
        if self.stars is not None:
            result["stars"] = str(self.stars)
        for attribute, key in _SETTINGS_KEYS.items():
            value = getattr(self, attribute)
            if value is not None:
                result[key] = value
        return result

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Settings:
        """Build from the API representation; unreadable star counts become 0."""
        settings = cls(
            **{attribute: data.get(key) for attribute, key in _SETTINGS_KEYS.items()}
        )
        stars = data.get("stars")
        if stars is not None:
            text = str(stars)
            settings.stars = int(text) if _INTEGER.fullmatch(text) else 0
        return settings


@dataclass
class Control:
    """The widget that edits one field."""

    field_id: str
    widget_id: str | None = None
    widget_namespace: str | None = None
    settings: Settings | None = None

    def _draft(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "fieldId": self.field_id,
            "widgetNamespace": (
                self.widget_namespace
                if self.widget_namespace is not None
                else _DEFAULT_CONTROL_NAMESPACE
            ),
        }
        if self.widget_id is not None:
            result["widgetId"] = self.widget_id
        if self.settings is not None:
            result["settings"] = self.settings.draft()
        return result

    @classmethod
    def _from_api(cls, data: dict[str, Any]) -> Control:
        settings = data.get("settings")
        return cls(
            field_id=data["fieldId"],
            widget_id=data.get("widgetId"),
            widget_namespace=data.get("widgetNamespace") or "",
            settings=Settings.from_api(settings) if settings is not None else None,
        )


@dataclass
class Widget:
    """A sidebar widget or an entry editor, with its settings as JSON text."""

    widget_id: str
    widget_namespace: str | None = None
    settings: str = "{}"
    disabled: bool | None = False

    def _draft(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "widgetNamespace": self.widget_namespace or "",
            "widgetId": self.widget_id,
            "disabled": self.disabled,
        }
        if not self.disabled:
            result["settings"] = json.loads(self.settings) if self.settings else {}
        return result

    @classmethod
    def _from_api(cls, data: dict[str, Any]) -> Widget:
        settings = data.get("settings")
        return cls(
            widget_id=data["widgetId"],
            widget_namespace=data["widgetNamespace"],
            settings=(
                json.dumps(settings, separators=(",", ":"))
                if settings is not None
                else "{}"
            ),
            disabled=data.get("disabled"),
        )


@dataclass
class EditorInterface:
    """The editor interface of one content type."""

    space_id: str | None = None
    environment: str | None = None
    content_type: str | None = None
    id: str | None = None
    version: int | None = None
    controls: list[Control] = field(default_factory=list)
    sidebar: list[Widget] | None = None
    editors: list[Widget] | None = None

    def to_update_body(self) -> dict[str, Any]:
        """Return the request body that updates the editor interface."""
        body: dict[str, Any] = {"controls": [control._draft() for control in self.controls]}
        sidebar = [widget._draft() for widget in self.sidebar or []]
        if sidebar:
            body["sidebar"] = sidebar
        editors = [widget._draft() for widget in self.editors or []]
        if editors:
            body["editors"] = editors
        return body

    def apply(self, data: dict[str, Any]) -> None:
        """Take over everything from an API editor interface."""
        sys = data["sys"]
        self.space_id = sys["space"]["sys"]["id"]
        self.environment = sys["environment"]["sys"]["id"]
        self.content_type = sys["contentType"]["sys"]["id"]
        self.id = f"{self.space_id}:{self.environment}:{self.content_type}"
        self.version = sys.get("version")

        self.controls = [Control._from_api(item) for item in data.get("controls") or []]

        sidebar = data.get("sidebar")
        self.sidebar = (
            [Widget._from_api(item) for item in sidebar] if sidebar is not None else None
        )
        editors = data.get("editors")
        self.editors = (
            [Widget._from_api(item) for item in editors] if editors is not None else None
        )