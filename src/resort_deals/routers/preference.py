"""Preference endpoints."""

from fastapi import APIRouter

from resort_deals.dependencies import DB
from resort_deals.schemas.preference import (
    DealActionRequest,
    PreferenceLearnRequest,
    PreferenceResponse,
)
from resort_deals.services.preference import (
    PreferenceUpdate,
    get_preferences,
    learn_preference,
    record_deal_action,
)

router = APIRouter(prefix="/preferences", tags=["preferences"])


@router.get("/{owner_id}", response_model=PreferenceResponse)
async def read_preferences(db: DB, owner_id: str) -> PreferenceResponse:
    prefs = await get_preferences(db, owner_id)
    return PreferenceResponse.model_validate(prefs)


@router.post("/{owner_id}", response_model=PreferenceResponse)
async def learn(db: DB, owner_id: str, payload: PreferenceLearnRequest) -> PreferenceResponse:
    """Record one learned preference; returns the preferences at their new version."""
    update = PreferenceUpdate(preference_type=payload.preference_type, value=payload.value)
    prefs = await learn_preference(db, owner_id, update, payload.expected_version)
    return PreferenceResponse.model_validate(prefs)


@router.post("/{owner_id}/actions", response_model=PreferenceResponse)
async def track_action(db: DB, owner_id: str, payload: DealActionRequest) -> PreferenceResponse:
    """Count a viewed, saved or booked deal."""
    prefs = await record_deal_action(db, owner_id, payload.action, payload.expected_version)
    return PreferenceResponse.model_validate(prefs)
