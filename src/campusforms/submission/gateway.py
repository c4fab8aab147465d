"""Submission gateway: turns a valid form snapshot into one backend request."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from campusforms.core.config import GatewayConfig
from campusforms.core.types import SubmitStatus
from campusforms.forms.catalog import FormCatalog
from campusforms.forms.controller import FormStateController
from campusforms.forms.models import FormSnapshot, SubmitResult
from campusforms.forms.schema import ValidationSchema

logger = logging.getLogger(__name__)


class SubmissionGateway:
    """Posts form payloads to the backend.

    One request per submit action, no retries. The gateway re-validates
    every snapshot it is given and never sends an invalid payload.
    """

    def __init__(
        self,
        catalog: FormCatalog,
        config: GatewayConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._catalog = catalog
        self.config = config or GatewayConfig()
        self._http = http_client or httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=httpx.Timeout(self.config.timeout_seconds),
        )

    async def close(self) -> None:
        await self._http.aclose()

    def build_payload(self, schema: ValidationSchema, snapshot: FormSnapshot) -> dict[str, str]:
        """Assemble the JSON body from the form's payload fields, in declared order."""
        names = schema.definition.payload_fields or schema.field_names
        values = snapshot.values
        return {name: values.get(name, "") for name in names}

    async def submit(self, snapshot: FormSnapshot) -> SubmitResult:
        """Validate ``snapshot`` again and send it to its form's endpoint."""
        schema = self._catalog.schema(snapshot.form_id)
        definition = schema.definition
        result = schema.validate_all(snapshot.values, only=schema.required_fields)
        if not result.valid:
            logger.warning(
                "Refusing to submit %s: invalid fields %s", definition.id, sorted(result.errors)
            )
            return SubmitResult(
                status=SubmitStatus.VALIDATION_ERROR,
                reason="Please correct the highlighted fields.",
                errors=result.errors,
            )
        if not definition.endpoint:
            raise ValueError(f"Form {definition.id!r} has no submission endpoint")

        payload = self.build_payload(schema, snapshot)
        try:
            resp = await self._http.post(definition.endpoint, json=payload)
        except httpx.HTTPError as exc:
            logger.warning("Submission of %s to %s failed: %s", definition.id, definition.endpoint, exc)
            return SubmitResult(
                status=SubmitStatus.TRANSPORT_ERROR,
                reason="Could not reach the server. Please try again.",
            )

        data = _json_or_none(resp)
        if resp.is_success:
            logger.info("Submitted %s to %s (%d)", definition.id, definition.endpoint, resp.status_code)
            return SubmitResult(
                status=SubmitStatus.SUCCEEDED,
                navigate_to=definition.success_route,
                data=data,
            )

        reason = _error_reason(data) or f"{resp.status_code} {resp.reason_phrase}".strip()
        logger.warning(
            "Submission of %s rejected by %s (%d): %s",
            definition.id, definition.endpoint, resp.status_code, reason,
        )
        return SubmitResult(status=SubmitStatus.REJECTED, reason=reason, data=data)

    async def submit_form(self, controller: FormStateController) -> SubmitResult:
        """Run one user-initiated submit: guard, send, record the outcome.

        Raises:
            FormSubmissionBlocked: If the form is not submittable.
        """
        snapshot = controller.begin_submission()
        try:
            result = await self.submit(snapshot)
        except Exception:
            controller.finish_submission(
                SubmitResult(status=SubmitStatus.TRANSPORT_ERROR, reason="Submission failed")
            )
            raise
        controller.finish_submission(result)
        return result


def _json_or_none(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return None


def _error_reason(data: Any) -> str | None:
    if not isinstance(data, dict):
        return None
    for key in ("message", "error", "detail"):
        value = data.get(key)
        if isinstance(value, str) and value:
            return value
    return None
