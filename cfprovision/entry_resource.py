"""Lifecycle of an entry: create, read, update, delete, import, publish and archive."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, Callable, Protocol

from cfprovision.api import ApiError, ApiResponse, check_client_response
from cfprovision.entry import Entry

__all__ = ["EntryResource"]

logger = logging.getLogger(__name__)


class _EntryClient(Protocol):
    def get_entry(self, space_id: str, environment: str, entry_id: str) -> ApiResponse: ...

    def create_entry(
        self,
        space_id: str,
        environment: str,
        content_type_id: str,
        body: dict[str, Any],
    ) -> ApiResponse: ...

    def update_entry(
        self,
        space_id: str,
        environment: str,
        entry_id: str,
        version: int | None,
        content_type_id: str | None,
        body: dict[str, Any],
    ) -> ApiResponse: ...

    def publish_entry(
        self, space_id: str, environment: str, entry_id: str, version: int
    ) -> ApiResponse: ...

    def unpublish_entry(
        self, space_id: str, environment: str, entry_id: str, version: int
    ) -> ApiResponse: ...

    def archive_entry(
        self, space_id: str, environment: str, entry_id: str, version: int
    ) -> ApiResponse: ...

    def unarchive_entry(
        self, space_id: str, environment: str, entry_id: str, version: int
    ) -> ApiResponse: ...

    def delete_entry(
        self, space_id: str, environment: str, entry_id: str, version: int
    ) -> ApiResponse: ...


def _failure(summary: str, detail: str, err: ApiError) -> ApiError:
    return ApiError(f"{summary}: {detail}: {err}", status_code=err.status_code)


class EntryResource:
    """Manages entries through an API client."""

    def __init__(self, client: _EntryClient) -> None:
        self.client = client

    def create(self, plan: Entry) -> Entry:
        """Create the planned entry, bring it to the planned state and return it."""
        space_id = plan.space_id or ""
        environment = plan.environment or ""
        draft = plan.draft()

        if plan.entry_id is None:
            response = self.client.create_entry(
                space_id, environment, plan.content_type_id or "", draft
            )
        else:
            response = self.client.update_entry(
                space_id, environment, plan.entry_id, None, plan.content_type_id or "", draft
            )
        try:
            body = check_client_response(response, HTTPStatus.CREATED)
        except ApiError as err:
            raise _failure("Error creating entry", "Could not create entry", err) from err

        state = Entry()
        state.apply(body)
        self._set_state_or_raise(state, plan)
        return state

    def read(self, state: Entry) -> Entry | None:
        """Refresh the state from the API; None when the entry is gone."""
        return self._fetch(state)

    def update(self, plan: Entry, state: Entry) -> Entry:
        """Write the plan at the state's version, bring it to the planned state and return it."""
        response = self.client.update_entry(
            plan.space_id or "",
            plan.environment or "",
            plan.id or "",
            state.version or 0,
            None,
            plan.draft(),
        )
        try:
            body = check_client_response(response, HTTPStatus.OK)
        except ApiError as err:
            raise _failure("Error updating entry", "Could not update entry", err) from err

        state.apply(body)
        self._set_state_or_raise(state, plan)
        return state

    def delete(self, state: Entry) -> None:
        """Unpublish the entry when needed, then delete it at its latest version."""
        space_id = state.space_id or ""
        environment = state.environment or ""
        entry_id = state.id or ""

        response = self.client.get_entry(space_id, environment, entry_id)
        try:
            body = check_client_response(response, HTTPStatus.OK)
        except ApiError as err:
            if response.status_code == HTTPStatus.NOT_FOUND:
                return
            raise _failure(
                "Error deleting entry", "Could not get latest entry version", err
            ) from err
        state.apply(body)

        if state.published:
            response = self.client.unpublish_entry(
                space_id, environment, entry_id, state.version or 0
            )
            try:
                body = check_client_response(response, HTTPStatus.OK)
            except ApiError as err:
                raise _failure(
                    "Error deleting entry", "Could not unpublish entry before deletion", err
                ) from err
            state.apply(body)

        response = self.client.delete_entry(
            space_id, environment, entry_id, state.version or 0
        )
        if response.status_code not in (HTTPStatus.NO_CONTENT, HTTPStatus.NOT_FOUND):
            raise ApiError(
                "Error deleting entry: Received unexpected status code: "
                f"{response.status_code}",
                status_code=response.status_code,
            )

    def import_state(self, import_id: str) -> Entry:
        """Load an entry from an identifier of the form entry_id:space_id:environment."""
        parts = import_id.split(":")
        if len(parts) != 3 or not all(parts):
            raise ValueError(
                "Expected import format: entry_id:space_id:environment, "
                f"got: {import_id}"
            )
        entry_id, space_id, environment = parts
        entry = Entry(
            id=entry_id, entry_id=entry_id, space_id=space_id, environment=environment
        )
        self._fetch(entry)
        return entry

    def set_entry_state(self, state: Entry, plan: Entry) -> None:
        """Publish, unpublish, archive or unarchive until the state matches the plan."""
        transitions: list[Callable[[str, str, str, int], ApiResponse]] = []
        if plan.published and not state.published:
            transitions.append(self.client.publish_entry)
        elif not plan.published and state.published:
            transitions.append(self.client.unpublish_entry)
        if plan.archived and not state.archived:
            transitions.append(self.client.archive_entry)
        elif not plan.archived and state.archived:
            transitions.append(self.client.unarchive_entry)

        for transition in transitions:
            response = transition(
                state.space_id or "",
                state.environment or "",
                state.id or "",
                state.version or 0,
            )
            state.apply(check_client_response(response, HTTPStatus.OK))

    def _set_state_or_raise(self, state: Entry, plan: Entry) -> None:
        try:
            self.set_entry_state(state, plan)
        except ApiError as err:
            raise ApiError(
                f"Error setting entry state: {err}", status_code=err.status_code
            ) from err

    def _fetch(self, entry: Entry) -> Entry | None:
        response = self.client.get_entry(
            entry.space_id or "", entry.environment or "", entry.id or ""
        )
        if response.status_code == HTTPStatus.NOT_FOUND:
            logger.warning("Entry %s was not found, removing from state", entry.id)
            return None
        if response.status_code != HTTPStatus.OK:
            raise ApiError(
                "Error reading entry: Received unexpected status code: "
                f"{response.status_code}",
                status_code=response.status_code,
            )
        entry.apply(response.body)
        return entry