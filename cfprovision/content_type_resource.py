"""Lifecycle of a content type: create, read, update, delete and import."""

from __future__ import annotations

import random
import time
from http import HTTPStatus
from typing import Any, Protocol

from cfprovision.api import ApiError, ApiResponse, check_client_response
from cfprovision.content_type import ContentType

__all__ = ["ContentTypeResource"]

_MAX_TRIES = 3
_MAX_ELAPSED_SECONDS = 60.0
_RETRY_AFTER_SECONDS = 5.0
_INITIAL_INTERVAL = 0.5
_MULTIPLIER = 1.5
_RANDOMIZATION = 0.5


class _ContentTypeClient(Protocol):
    def get_content_type(
        self, space_id: str, environment: str, content_type_id: str
    ) -> ApiResponse: ...

    def update_content_type(
        self,
        space_id: str,
        environment: str,
        content_type_id: str,
        version: int | None,
        body: dict[str, Any],
    ) -> ApiResponse: ...

    def activate_content_type(
        self, space_id: str, environment: str, content_type_id: str, version: int
    ) -> ApiResponse: ...

    def deactivate_content_type(
        self, space_id: str, environment: str, content_type_id: str, version: int
    ) -> ApiResponse: ...

    def delete_content_type(
        self, space_id: str, environment: str, content_type_id: str, version: int
    ) -> ApiResponse: ...


def _failure(summary: str, detail: str, err: ApiError) -> ApiError:
    return ApiError(f"{summary}: {detail}, unexpected error: {err}", status_code=err.status_code)


class ContentTypeResource:
    """Creates, reads, updates and deletes content types through an API client."""

    def __init__(self, client: _ContentTypeClient) -> None:
        self.client = client

    def create(self, plan: ContentType) -> ContentType:
        """Create and activate the planned content type; return the plan with id and version."""
        space_id = plan.space_id or ""
        environment = plan.environment or ""

        if plan.id is not None:
            existing = self.client.get_content_type(space_id, environment, plan.id)
            if existing.status_code == HTTPStatus.OK:
                raise ApiError(
                    f"Error creating contenttype: Content type with id {plan.id} already "
                    "exists. Please import it and use the update resource to modify it, "
                    "or remove before retrying.",
                    status_code=existing.status_code,
                )
            target = plan.id
            detail = f"Could not create contenttype with id {plan.id}"
        else:
            target = plan.name
            detail = "Could not create contenttype with name"

        draft = plan.update_body()
        response = self.client.update_content_type(space_id, environment, target, None, draft)
        try:
            created = check_client_response(response, HTTPStatus.CREATED)
        except ApiError as err:
            raise _failure("Error creating contenttype", detail, err) from err

        try:
            activated = self._activate(
                space_id, environment, created["sys"]["id"], created["sys"]["version"]
            )
        except ApiError as err:
            raise _failure(
                "Error creating contenttype", "Could not activate contenttype", err
            ) from err

        plan.id = activated["sys"]["id"]
        plan.version = activated["sys"]["version"]
        return plan

    def read(self, state: ContentType) -> ContentType | None:
        """Refresh the state from the API; None when the content type is gone."""
        response = self.client.get_content_type(
            state.space_id or "", state.environment or "", state.id or ""
        )
        try:
            body = check_client_response(response, HTTPStatus.OK)
        except ApiError as err:
            if response.status_code == HTTPStatus.NOT_FOUND:
                return None
            raise _failure(
                "Error reading contenttype", "Could not retrieve contenttype", err
            ) from err
        state.apply(body)
        return state

    def update(self, plan: ContentType, state: ContentType) -> ContentType:
        """Bring the remote content type in line with the plan and return the refreshed plan."""
        remote = self._get(plan)
        plan.version = remote["sys"]["version"]

        planned_ids = {item.id for item in plan.fields}
        deleted_fields = [
            {**remote_field, "omitted": True}
            for remote_field in remote.get("fields") or []
            if remote_field.get("id") not in planned_ids
        ]

        draft = plan.update_body()
        draft["fields"].extend(deleted_fields)

        # Removing a field takes two rounds: omit it and publish, then drop it and publish.
        if not plan.equal(remote):
            try:
                updated = self._do_update(plan, draft)
                plan.version = updated["sys"]["version"]
                if deleted_fields:
                    updated = self._do_update(plan, plan.update_body())
                    plan.version = updated["sys"]["version"]
            except ApiError as err:
                raise _failure(
                    "Error updating contenttype", "Could not update contenttype", err
                ) from err

        refreshed = self._get(plan)
        plan.apply(refreshed)
        return plan

    def delete(self, state: ContentType) -> None:
        """Deactivate and then delete the content type."""
        space_id = state.space_id or ""
        environment = state.environment or ""
        content_type_id = state.id or ""

        try:
            deactivated = self._deactivate_with_retry(
                space_id, environment, content_type_id, state.version or 0
            )
            response = self.client.delete_content_type(
                space_id, environment, content_type_id, deactivated["sys"]["version"]
            )
            check_client_response(response, HTTPStatus.NO_CONTENT)
        except ApiError as err:
            raise _failure(
                "Error deleting contenttype", "Could not delete contenttype", err
            ) from err

    def import_state(self, import_id: str) -> ContentType:
        """Load a content type from an identifier of the form contentTypeId:env:spaceId."""
        parts = import_id.split(":", 2)
        if len(parts) != 3 or not all(parts):
            raise ValueError(
                "Expected import identifier with format: contentTypeId:env:spaceId. "
                f'Got: "{import_id}"'
            )
        content_type_id, environment, space_id = parts

        response = self.client.get_content_type(space_id, environment, content_type_id)
        try:
            body = check_client_response(response, HTTPStatus.OK)
        except ApiError as err:
            raise _failure(
                "Error reading contenttype", "Could not retrieve contenttype", err
            ) from err

        state = ContentType()
        state.apply(body)
        state.space_id = space_id
        state.environment = environment
        return state

    def _get(self, content_type: ContentType) -> dict[str, Any]:
        response = self.client.get_content_type(
            content_type.space_id or "",
            content_type.environment or "",
            content_type.id or "",
        )
        if response.status_code != HTTPStatus.OK:
            raise ApiError(
                "Error reading contenttype: Could not retrieve contenttype, unexpected "
                f"error: unexpected status code: {response.status}",
                status_code=response.status_code,
            )
        return response.body

    def _activate(
        self, space_id: str, environment: str, content_type_id: str, version: int
    ) -> dict[str, Any]:
        response = self.client.activate_content_type(
            space_id, environment, content_type_id, version
        )
        return check_client_response(response, HTTPStatus.OK)

    def _do_update(self, plan: ContentType, draft: dict[str, Any]) -> dict[str, Any]:
        space_id = plan.space_id or ""
        environment = plan.environment or ""
        content_type_id = plan.id or ""
        response = self.client.update_content_type(
            space_id, environment, content_type_id, plan.version or 0, draft
        )
        updated = check_client_response(response, HTTPStatus.OK)
        return self._activate(
            space_id, environment, content_type_id, updated["sys"]["version"]
        )

    def _deactivate_with_retry(
        self, space_id: str, environment: str, content_type_id: str, version: int
    ) -> dict[str, Any]:
        start = time.monotonic()
        interval = _INITIAL_INTERVAL
        last_error: ApiError | None = None
        for attempt in range(1, _MAX_TRIES + 1):
            response = self.client.deactivate_content_type(
                space_id, environment, content_type_id, version
            )
            try:
                return check_client_response(response, HTTPStatus.OK)
            except ApiError as err:
                last_error = err
            if attempt == _MAX_TRIES:
                break
            if response.status_code == HTTPStatus.BAD_REQUEST:
                wait = _RETRY_AFTER_SECONDS
            else:
                spread = interval * _RANDOMIZATION
                wait = random.uniform(interval - spread, interval + spread)
                interval *= _MULTIPLIER
            if time.monotonic() - start + wait > _MAX_ELAPSED_SECONDS:
                break
            time.sleep(wait)
        assert last_error is not None
        raise last_error