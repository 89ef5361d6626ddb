# src/slapboard/api/v1/endpoints/actions.py
"""Action-related endpoints for the Slapboard API."""

from fastapi import APIRouter, status

from slapboard.api.v1.dependencies import CatalogDep, ClientAddressDep, RateLimiterDep
from slapboard.models import Action
from slapboard.schemas.action import ActionCreate, ActionResponse
from slapboard.services.rate_limit import RateLimitCategory

router = APIRouter(prefix="/actions", tags=["actions"])


@router.get("/", response_model=list[ActionResponse])
async def list_actions(catalog: CatalogDep) -> list[Action]:
    """Return approved actions, defaults first."""
    return catalog.list_actions(approved=True)


@router.post("/", response_model=ActionResponse, status_code=status.HTTP_201_CREATED)
async def suggest_action(
    action_data: ActionCreate,
    catalog: CatalogDep,
    limiter: RateLimiterDep,
    client_address: ClientAddressDep,
) -> Action:
    """Suggest a custom action; it stays hidden until an admin approves it."""
    with limiter.guard(client_address, RateLimitCategory.ACTION_SUGGESTION):
        action = catalog.submit_action(action_data.name)
    return action
