"""Wizard API endpoints: GET /wizard and POST /wizard/events."""

from __future__ import annotations

from fastapi import APIRouter

from asman.api.dependencies import WizardDep
from asman.schemas.session import WizardEventRequest, WizardSnapshot

router = APIRouter(prefix="/wizard", tags=["wizard"])


@router.get("", response_model=WizardSnapshot, summary="Current wizard state")
async def get_wizard_state(wizard: WizardDep) -> WizardSnapshot:
    return wizard.snapshot()


@router.post(
    "/events",
    response_model=WizardSnapshot,
    summary="Send an event to the wizard",
    responses={409: {"description": "Event not allowed now, or its inputs are missing"}},
)
async def post_wizard_event(payload: WizardEventRequest, wizard: WizardDep) -> WizardSnapshot:
    """
    Drive the wizard one step.

    Examples: ``{"event": "NEW_CHAT"}``, ``{"event": "SELECT_CLASS", "classLevel": 3}``,
    ``{"event": "SELECT_STYLE", "teachingStyle": "japanese", "variant": "global-enhanced"}``.
    """
    return await wizard.dispatch(payload)
