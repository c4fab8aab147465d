"""FastAPI router forwarding presentation events into form controllers."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Request, Response
from pydantic import BaseModel

from campusforms.core.types import FormKind
from campusforms.forms.controller import FormStateController, FormSubmissionBlocked
from campusforms.forms.event_request import EventRequestForm
from campusforms.forms.models import FormSnapshot
from campusforms.submission.mail import EventRequestSender

router = APIRouter()


# --- Request/Response models ---


class FieldChangeRequest(BaseModel):
    value: str = ""


class SendMailRequest(BaseModel):
    email: str = ""


class SnapshotResponse(BaseModel):
    instance_id: str
    form_id: str
    is_valid: bool
    submittable: bool
    status: str
    values: dict[str, str]
    errors: dict[str, str]
    read_only: list[str]
    submission_error: str | None = None
    navigate_to: str | None = None


class SubmitResponse(SnapshotResponse):
    result: dict[str, Any]


class SendMailResponse(BaseModel):
    sent: bool
    message: str | None = None


def _snapshot_response(controller: FormStateController, snapshot: FormSnapshot) -> SnapshotResponse:
    return SnapshotResponse(
        instance_id=controller.id,
        form_id=snapshot.form_id,
        is_valid=snapshot.is_valid,
        submittable=controller.is_submittable(),
        status=snapshot.status.value,
        values=snapshot.values,
        errors=snapshot.errors,
        read_only=[name for name, f in snapshot.fields.items() if f.read_only],
        submission_error=snapshot.submission_error,
        navigate_to=snapshot.navigate_to,
    )


def _get_controller(request: Request, instance_id: str) -> FormStateController:
    controller = request.app.state.form_store.get(instance_id)
    if controller is None:
        raise HTTPException(status_code=404, detail=f"Form instance {instance_id!r} not found")
    return controller


def _get_event_form(request: Request, instance_id: str) -> EventRequestForm:
    form = request.app.state.form_store.get_event_form(instance_id)
    if form is None:
        raise HTTPException(
            status_code=404, detail=f"Event request instance {instance_id!r} not found"
        )
    return form


# --- Form endpoints ---


@router.get("/api/forms")
async def list_forms(request: Request) -> list[dict[str, Any]]:
    catalog = request.app.state.form_catalog
    return [
        {
            "id": defn.id,
            "title": defn.title,
            "fields": [f.name for f in defn.fields],
            "endpoint": defn.endpoint,
        }
        for defn in catalog.definitions.values()
        if defn.standalone
    ]


@router.post("/api/forms/{form_id}/instances", status_code=201)
async def create_instance(form_id: str, request: Request) -> SnapshotResponse:
    catalog = request.app.state.form_catalog
    store = request.app.state.form_store
    try:
        if not catalog.definition(form_id).standalone:
            raise KeyError(f"Form {form_id!r} cannot be instantiated on its own")
        controller = catalog.create_controller(form_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))

    if form_id == FormKind.EVENT_REQUEST:
        sender = EventRequestSender(
            catalog.schema(FormKind.SEND_MAIL), request.app.state.mail_sender
        )
        store.save_event_form(EventRequestForm(controller, sender))
    else:
        store.save(controller)
    return _snapshot_response(controller, controller.get_snapshot())


@router.get("/api/forms/instances/{instance_id}")
async def get_instance(instance_id: str, request: Request) -> SnapshotResponse:
    controller = _get_controller(request, instance_id)
    return _snapshot_response(controller, controller.get_snapshot())


@router.delete("/api/forms/instances/{instance_id}", status_code=204)
async def delete_instance(instance_id: str, request: Request) -> Response:
    _get_controller(request, instance_id)
    request.app.state.form_store.remove(instance_id)
    return Response(status_code=204)


@router.put("/api/forms/instances/{instance_id}/fields/{field}")
async def change_field(
    instance_id: str, field: str, body: FieldChangeRequest, request: Request
) -> SnapshotResponse:
    controller = _get_controller(request, instance_id)
    try:
        snapshot = controller.on_field_change(field, body.value)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except FormSubmissionBlocked as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _snapshot_response(controller, snapshot)


@router.post("/api/forms/instances/{instance_id}/submit")
async def submit_instance(instance_id: str, request: Request) -> SubmitResponse:
    controller = _get_controller(request, instance_id)
    gateway = request.app.state.submission_gateway
    try:
        result = await gateway.submit_form(controller)
    except FormSubmissionBlocked as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    snapshot = controller.get_snapshot()
    base = _snapshot_response(controller, snapshot)
    return SubmitResponse(**base.model_dump(), result=result.model_dump(mode="json"))


# --- Event request endpoints ---


@router.post("/api/forms/instances/{instance_id}/save")
async def save_event_request(instance_id: str, request: Request) -> SnapshotResponse:
    form = _get_event_form(request, instance_id)
    try:
        snapshot = form.save()
    except FormSubmissionBlocked as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _snapshot_response(form.controller, snapshot)


@router.get("/api/forms/instances/{instance_id}/download")
async def download_event_request(instance_id: str, request: Request) -> Response:
    form = _get_event_form(request, instance_id)
    try:
        letter = form.download()
    except FormSubmissionBlocked as e:
        raise HTTPException(status_code=409, detail=str(e))
    return Response(
        content=letter,
        media_type="text/plain",
        headers={"Content-Disposition": 'attachment; filename="event_request.txt"'},
    )


@router.post("/api/forms/instances/{instance_id}/send")
async def send_event_request(
    instance_id: str, body: SendMailRequest, request: Request
) -> SendMailResponse:
    form = _get_event_form(request, instance_id)
    result = form.send(body.email)
    return SendMailResponse(sent=result.sent, message=result.message)
