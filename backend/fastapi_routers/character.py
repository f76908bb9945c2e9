"""Character router - session lifecycle and editing endpoints
Every edit is in-memory only; use the save endpoint to get a save file
"""

import json

from fastapi import APIRouter, HTTPException, status
from loguru import logger

from fastapi_routers.dependencies import CharacterManagerDep, CharacterSessionDep
from fastapi_models import (
    AttributeUpdateRequest,
    CharacterStateResponse,
    DeflectUpdateRequest,
    LoadRequest,
    LoadResponse,
    PathToggleRequest,
    SaveResponse,
    SkillRankRequest,
    SkillRankResponse,
    TalentListResponse,
    TalentRequest,
)
from fastapi_core.exceptions import CharacterLoadException, CharacterNotFoundException

router = APIRouter(tags=["character"])


def _state_response(character_id: int, session) -> CharacterStateResponse:
    state = session.character_manager.get_character_state()
    return CharacterStateResponse(
        character_id=character_id,
        version=state['version'],
        character=state['character'],
        has_radiant_path=state['hasRadiantPath'],
        available_talents=state['availableTalents'],
        has_unsaved_changes=session.has_unsaved_changes(),
    )


def _bad_request(e: ValueError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


def _server_error(action: str, character_id: int, e: Exception) -> HTTPException:
    logger.error(f"Failed to {action} for character {character_id}: {e}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}: {str(e)}"
    )


@router.post("/characters", status_code=status.HTTP_201_CREATED, response_model=CharacterStateResponse)
def create_character():
    """Start a new editing session with a default character"""
    from fastapi_core.session_registry import create_character_session

    character_id, session = create_character_session()
    return _state_response(character_id, session)


@router.get("/characters/{character_id}/state", response_model=CharacterStateResponse)
def get_character_state(character_id: int, char_session: CharacterSessionDep):
    """Get the finalized character snapshot"""
    return _state_response(character_id, char_session)


@router.delete("/characters/{character_id}")
def close_character(character_id: int):
    """Close the editing session; unsaved changes are discarded"""
    from fastapi_core.session_registry import close_character_session, has_active_session

    if not has_active_session(character_id):
        raise CharacterNotFoundException(character_id)
    close_character_session(character_id)
    return {"success": True, "character_id": character_id}


@router.post("/characters/{character_id}/new", response_model=CharacterStateResponse)
def new_character(character_id: int, char_session: CharacterSessionDep):
    """Discard the current character and start over in the same session"""
    char_session.new_character()
    return _state_response(character_id, char_session)


@router.put("/characters/{character_id}/attributes/{attribute}", response_model=CharacterStateResponse)
def set_attribute(
    character_id: int,
    attribute: str,
    request: AttributeUpdateRequest,
    char_session: CharacterSessionDep
):
    """Set one attribute; every derived stat is recomputed"""
    try:
        attribute_manager = char_session.character_manager.get_manager('attribute')
        attribute_manager.set_attribute(attribute, request.value)
        return _state_response(character_id, char_session)
    except ValueError as e:
        raise _bad_request(e)
    except Exception as e:
        raise _server_error("set attribute", character_id, e)


@router.put("/characters/{character_id}/deflect", response_model=CharacterStateResponse)
def set_deflect(character_id: int, request: DeflectUpdateRequest, char_session: CharacterSessionDep):
    try:
        char_session.character_manager.get_manager('attribute').set_deflect(request.value)
        return _state_response(character_id, char_session)
    except ValueError as e:
        raise _bad_request(e)


@router.post("/characters/{character_id}/paths/toggle", response_model=CharacterStateResponse)
def toggle_path(character_id: int, request: PathToggleRequest, char_session: CharacterSessionDep):
    """Select or deselect a path; surge skills and key talents follow"""
    try:
        identity_manager = char_session.character_manager.get_manager('identity')
        if request.radiant:
            identity_manager.toggle_radiant_path(request.path)
        else:
            identity_manager.toggle_heroic_path(request.path)
        return _state_response(character_id, char_session)
    except ValueError as e:
        raise _bad_request(e)
    except Exception as e:
        raise _server_error("toggle path", character_id, e)


@router.put("/characters/{character_id}/skills/{skill_name}", response_model=SkillRankResponse)
def set_skill_rank(
    character_id: int,
    skill_name: str,
    request: SkillRankRequest,
    char_session: CharacterSessionDep
):
    """Set a skill rank (clamped to 0-5); surge skills refresh their surge view"""
    try:
        manager = char_session.character_manager
        skill = manager.get_manager('skill').set_skill_rank(skill_name, request.rank)
        return SkillRankResponse(
            skill=skill.model_dump(),
            surges=[surge.model_dump() for surge in manager.character.surges],
            has_unsaved_changes=char_session.has_unsaved_changes(),
        )
    except ValueError as e:
        raise _bad_request(e)
    except Exception as e:
        raise _server_error("set skill rank", character_id, e)


@router.post("/characters/{character_id}/talents", response_model=TalentListResponse)
def add_talent(character_id: int, request: TalentRequest, manager: CharacterManagerDep):
    try:
        talent_manager = manager.get_manager('talent')
        talent_manager.add_talent(request.path, request.talent)
        return TalentListResponse(
            talents=[t.model_dump(by_alias=True) for t in talent_manager.get_talents()],
            available_talents=talent_manager.available_talents(),
        )
    except ValueError as e:
        raise _bad_request(e)


@router.post("/characters/{character_id}/talents/remove", response_model=TalentListResponse)
def remove_talent(character_id: int, request: TalentRequest, manager: CharacterManagerDep):
    """Remove a picked talent; key talents are granted by paths and stay"""
    try:
        talent_manager = manager.get_manager('talent')
        talent_manager.remove_talent(request.path, request.talent)
        return TalentListResponse(
            talents=[t.model_dump(by_alias=True) for t in talent_manager.get_talents()],
            available_talents=talent_manager.available_talents(),
        )
    except ValueError as e:
        raise _bad_request(e)


@router.get("/characters/{character_id}/inventory")
def get_inventory(character_id: int, manager: CharacterManagerDep):
    """Carried weapons, armor and equipment plus the current deflect"""
    return manager.get_manager('inventory').get_inventory_summary()


@router.get("/characters/{character_id}/save", response_model=SaveResponse)
def save_character(character_id: int, char_session: CharacterSessionDep):
    """Serialize the character to a compact save and mark it saved"""
    try:
        filename, text = char_session.save_json()
        return SaveResponse(filename=filename, content=json.loads(text))
    except Exception as e:
        raise _server_error("save character", character_id, e)


@router.post("/characters/{character_id}/load", response_model=LoadResponse)
def load_character(character_id: int, request: LoadRequest, char_session: CharacterSessionDep):
    """Replace the character with the contents of a save file"""
    from services.character_serializer import CharacterLoadError

    try:
        loaded = char_session.load_json(request.content)
    except CharacterLoadError as e:
        logger.warning(f"Load failed for character {character_id}: {e}")
        raise CharacterLoadException(
            "Failed to load character file. Please check the file format.",
            character_id=character_id,
        )

    return LoadResponse(
        message=f"Successfully loaded {loaded.display_name}!",
        character_name=loaded.character.character_name,
        save_version=loaded.version,
    )
