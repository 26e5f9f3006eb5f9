import logging
from fastapi import APIRouter, Depends, HTTPException, Query, status
from campuseats.api.deps import require_role
from campuseats.models.auth import Role
from campuseats.models.order import OrderStatus
from campuseats.schemas.admin import (
    AdminOutletResponse,
    DeliveryPartnerStatusUpdate,
    MenuItemCreate,
    MenuItemUpdate,
    OutletCreate,
    OutletUpdate,
    PartnersResponse,
    RestaurantPartnerStatusUpdate,
)
from campuseats.schemas.catalog import to_menu_item_response
from campuseats.schemas.order import to_order_response
from campuseats.schemas.profile import DeliveryPartnerResponse, RestaurantPartnerResponse
from campuseats.schemas.response import SuccessResponse
from campuseats.services import admin_service, order_service
from typing import Optional
from uuid import UUID

# Every route here requires the admin role
router = APIRouter(dependencies=[Depends(require_role(Role.ADMIN))])
log = logging.getLogger("uvicorn")


# ----------- Outlets -----------

@router.get("/outlets", response_model=SuccessResponse)
async def list_outlets_endpoint():
    outlets = await admin_service.list_outlets()
    return SuccessResponse(data=[AdminOutletResponse.model_validate(o).model_dump() for o in outlets])


@router.post("/outlets", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_outlet_endpoint(payload: OutletCreate):
    """New outlets open immediately with the default listed rating."""
    try:
        outlet = await admin_service.create_outlet(payload.model_dump())
        return SuccessResponse(data=AdminOutletResponse.model_validate(outlet).model_dump())
    except Exception as e:
        log.error(f"Error creating outlet: {e}")
        raise HTTPException(status_code=500, detail="Server failed to create the outlet.")


@router.patch("/outlets/{outlet_id}", response_model=SuccessResponse)
async def update_outlet_endpoint(outlet_id: UUID, payload: OutletUpdate):
    outlet = await admin_service.update_outlet(outlet_id, payload.model_dump(exclude_unset=True))
    if not outlet:
        raise HTTPException(status_code=404, detail="Outlet not found")
    return SuccessResponse(data=AdminOutletResponse.model_validate(outlet).model_dump())


@router.delete("/outlets/{outlet_id}", response_model=SuccessResponse)
async def delete_outlet_endpoint(outlet_id: UUID):
    """Also removes the outlet's menu."""
    if not await admin_service.delete_outlet(outlet_id):
        raise HTTPException(status_code=404, detail="Outlet not found")
    return SuccessResponse(data={"deleted": str(outlet_id)})


# ----------- Menu items -----------

@router.get("/outlets/{outlet_id}/menu", response_model=SuccessResponse)
async def list_menu_endpoint(outlet_id: UUID):
    """Includes unavailable dishes, unlike the public menu."""
    items = await admin_service.list_menu_items(outlet_id)
    return SuccessResponse(data=[to_menu_item_response(i).model_dump() for i in items])


@router.post("/outlets/{outlet_id}/menu", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_menu_item_endpoint(outlet_id: UUID, payload: MenuItemCreate):
    try:
        item = await admin_service.create_menu_item(outlet_id, payload.model_dump())
        return SuccessResponse(data=to_menu_item_response(item).model_dump())
    except LookupError:
        raise HTTPException(status_code=404, detail="Outlet not found")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/menu/{item_id}", response_model=SuccessResponse)
async def update_menu_item_endpoint(item_id: UUID, payload: MenuItemUpdate):
    try:
        item = await admin_service.update_menu_item(item_id, payload.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not item:
        raise HTTPException(status_code=404, detail="Menu item not found")
    return SuccessResponse(data=to_menu_item_response(item).model_dump())


@router.delete("/menu/{item_id}", response_model=SuccessResponse)
async def delete_menu_item_endpoint(item_id: UUID):
    if not await admin_service.delete_menu_item(item_id):
        raise HTTPException(status_code=404, detail="Menu item not found")
    return SuccessResponse(data={"deleted": str(item_id)})


# ----------- Orders & partners -----------

@router.get("/orders", response_model=SuccessResponse)
async def list_orders_endpoint(order_status: Optional[OrderStatus] = Query(None, alias="status")):
    try:
        orders = await order_service.list_all_orders(order_status)
        return SuccessResponse(data=[to_order_response(o).model_dump() for o in orders])
    except Exception as e:
        log.error(f"Error listing orders: {e}")
        raise HTTPException(status_code=500, detail="Server failed to fetch orders.")


@router.get("/partners", response_model=SuccessResponse)
async def list_partners_endpoint():
    restaurant, delivery = await admin_service.list_partners()
    data = PartnersResponse(
        restaurant_partners=[RestaurantPartnerResponse.model_validate(p) for p in restaurant],
        delivery_partners=[DeliveryPartnerResponse.model_validate(p) for p in delivery],
    ).model_dump()
    return SuccessResponse(data=data)


@router.patch("/partners/restaurant/{partner_id}", response_model=SuccessResponse)
async def restaurant_partner_status_endpoint(partner_id: UUID, payload: RestaurantPartnerStatusUpdate):
    """Approve or reject an application, optionally linking it to an outlet."""
    try:
        partner = await admin_service.set_restaurant_partner_status(partner_id, payload.status, payload.outlet_id)
    except LookupError:
        raise HTTPException(status_code=404, detail="Outlet not found")
    if not partner:
        raise HTTPException(status_code=404, detail="Restaurant partner not found")
    return SuccessResponse(data=RestaurantPartnerResponse.model_validate(partner).model_dump())


@router.patch("/partners/delivery/{partner_id}", response_model=SuccessResponse)
async def delivery_partner_status_endpoint(partner_id: UUID, payload: DeliveryPartnerStatusUpdate):
    partner = await admin_service.set_delivery_partner_status(partner_id, payload.status)
    if not partner:
        raise HTTPException(status_code=404, detail="Delivery partner not found")
    return SuccessResponse(data=DeliveryPartnerResponse.model_validate(partner).model_dump())
