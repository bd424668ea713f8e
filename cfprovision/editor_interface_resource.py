"""Lifecycle of an editor interface: create, read, update, delete and import."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, Protocol

from cfprovision.api import ApiError, ApiResponse, check_client_response
from cfprovision.editor_interface import EditorInterface

__all__ = ["EditorInterfaceResource"]

logger = logging.getLogger(__name__)


class _EditorInterfaceClient(Protocol):
    def get_editor_interface(
        self, space_id: str, environment: str, content_type_id: str
    ) -> ApiResponse: ...

    def update_editor_interface(
        self,
        space_id: str,
        environment: str,
        content_type_id: str,
        version: int,
        body: dict[str, Any],
    ) -> ApiResponse: ...


def _failure(summary: str, detail: str, err: ApiError) -> ApiError:
    return ApiError(f"{summary}: {detail}: {err}", status_code=err.status_code)


class EditorInterfaceResource:
    """Manages the editor interface of a content type through an API client."""

    def __init__(self, client: _EditorInterfaceClient) -> None:
        self.client = client

    def create(self, plan: EditorInterface) -> EditorInterface:
        """Write the planned interface over the existing one and return the new state."""
        response = self.client.get_editor_interface(
            plan.space_id or "", plan.environment or "", plan.content_type or ""
        )
        try:
            current = check_client_response(response, HTTPStatus.OK)
        except ApiError as err:
            raise _failure(
                "Error fetching editor interface", "Could not fetch editor interface", err
            ) from err

        updated = self._put(plan, current["sys"]["version"])
        state = EditorInterface()
        state.apply(updated)
        return state

    def read(self, state: EditorInterface) -> EditorInterface | None:
        """Refresh the state from the API; None when the interface is gone."""
        response = self.client.get_editor_interface(
            state.space_id or "", state.environment or "", state.content_type or ""
        )
        try:
            body = check_client_response(response, HTTPStatus.OK)
        except ApiError as err:
            if response.status_code == HTTPStatus.NOT_FOUND:
                return None
            raise _failure(
                "Error importing editor interface", "Could not import editor interface", err
            ) from err
        state.apply(body)
        return state

    def update(self, plan: EditorInterface, state: EditorInterface) -> EditorInterface:
        """Write the plan at the latest remote version and return the refreshed state."""
        # The version may have moved on when the content type changed meanwhile.
        try:
            state.version = self.current_version(plan)
        except ApiError as err:
            raise _failure(
                "Error fetching editor interface version",
                "Could not fetch editor interface version",
                err,
            ) from err

        updated = self._put(plan, state.version)
        state.apply(updated)
        return state

    def delete(self, state: EditorInterface) -> None:
        """Forget the interface; editor interfaces cannot be deleted remotely."""
        logger.info(
            "Editor interface %s removed from state (but not deleted in Contentful)",
            state.id,
        )

    def import_state(self, import_id: str) -> EditorInterface:
        """Load an interface from an identifier of the form space_id:environment:content_type_id."""
        parts = import_id.split(":")
        if len(parts) != 3 or not all(parts):
            raise ValueError(
                "Expected import format: space_id:environment:content_type_id, "
                f"got: {import_id}"
            )
        space_id, environment, content_type_id = parts

        response = self.client.get_editor_interface(space_id, environment, content_type_id)
        try:
            body = check_client_response(response, HTTPStatus.OK)
        except ApiError as err:
            raise _failure(
                "Error importing editor interface", "Could not import editor interface", err
            ) from err

        state = EditorInterface()
        state.apply(body)
        return state

    def current_version(self, plan: EditorInterface) -> int:
        """Return the version the remote interface has now."""
        response = self.client.get_editor_interface(
            plan.space_id or "", plan.environment or "", plan.content_type or ""
        )
        try:
            body = check_client_response(response, HTTPStatus.OK)
        except ApiError as err:
            raise ApiError(
                f"Error fetching editor interface: {err}", status_code=err.status_code
            ) from err
        return body["sys"]["version"]

    def _put(self, plan: EditorInterface, version: int) -> dict[str, Any]:
        response = self.client.update_editor_interface(
            plan.space_id or "",
            plan.environment or "",
            plan.content_type or "",
            version,
            plan.to_update_body(),
        )
        try:
            return check_client_response(response, HTTPStatus.OK)
        except ApiError as err:
            raise _failure(
                "Error updating editor interface", "Could not update editor interface", err
            ) from err