import logging
from fastapi import APIRouter, HTTPException, Query
from campuseats.schemas.catalog import to_outlet_menu_response, to_outlet_response
from campuseats.schemas.response import SuccessResponse
from campuseats.services import catalog_service
from typing import Optional
from uuid import UUID

router = APIRouter()
log = logging.getLogger("uvicorn")


@router.get("", response_model=SuccessResponse)
async def list_outlets_endpoint(q: Optional[str] = Query(None, description="Outlet name, cuisine or dish")):
    """Home listing, best rated first, optionally filtered by a search term."""
    try:
        outlets = await catalog_service.list_outlets(q)
        return SuccessResponse(data=[to_outlet_response(o).model_dump() for o in outlets])
    except Exception as e:
        log.error(f"Error listing outlets: {e}")
        raise HTTPException(status_code=500, detail="Server failed to fetch outlets.")


@router.get("/{outlet_id}", response_model=SuccessResponse)
async def get_outlet_endpoint(outlet_id: UUID):
    try:
        outlet = await catalog_service.get_outlet(outlet_id)
        if not outlet:
            raise HTTPException(status_code=404, detail="Outlet not found")
        return SuccessResponse(data=to_outlet_response(outlet).model_dump())
    except HTTPException:
        raise
    except Exception as e:
        log.error(f"Error fetching outlet {outlet_id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to fetch the outlet.")


@router.get("/{outlet_id}/menu", response_model=SuccessResponse)
async def get_menu_endpoint(outlet_id: UUID, category: Optional[str] = None):
    """Available dishes grouped by category, with per-dish ratings."""
    try:
        menu = await catalog_service.get_outlet_menu(outlet_id, category)
        if not menu:
            raise HTTPException(status_code=404, detail="Outlet not found")
        return SuccessResponse(data=to_outlet_menu_response(menu).model_dump())
    except HTTPException:
        raise
    except Exception as e:
        log.error(f"Error fetching menu for outlet {outlet_id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to fetch the menu.")
