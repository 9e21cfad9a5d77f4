from fastapi import APIRouter, HTTPException

from app.exceptions import PersonaNotFoundError
from app.personas.catalog import get_persona, list_personas, summarize
from app.personas.models import PersonaListResponse, PersonaProfile

router = APIRouter(prefix="/api/personas", tags=["personas"])


@router.get("", response_model=PersonaListResponse)
async def list_all():
    """All personas a user can negotiate against."""
    personas = [summarize(persona) for persona in list_personas()]
    return PersonaListResponse(personas=personas, total=len(personas))


@router.get("/{persona_id}", response_model=PersonaProfile)
async def detail(persona_id: str):
    """Full persona profile, including negotiation parameters and coaching tips."""
    try:
        return get_persona(persona_id)
    except PersonaNotFoundError:
        raise HTTPException(status_code=404, detail="Persona not found")
