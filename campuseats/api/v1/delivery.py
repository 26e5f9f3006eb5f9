import logging
from fastapi import APIRouter, Depends, HTTPException, status
from campuseats.api.deps import current_delivery_partner, current_user
from campuseats.models.auth import User
from campuseats.models.partner import DeliveryPartner
from campuseats.schemas.order import to_order_response
from campuseats.schemas.profile import AvailabilityUpdate, DeliveryPartnerRegistration, DeliveryPartnerResponse
from campuseats.schemas.response import SuccessResponse
from campuseats.services import order_service, profile_service
from campuseats.services.order_service import OrderNotFound
from uuid import UUID

router = APIRouter()
log = logging.getLogger("uvicorn")


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def register_endpoint(payload: DeliveryPartnerRegistration, user: User = Depends(current_user)):
    """Signs the caller up as a courier. They start offline and not accepting orders."""
    try:
        partner = await profile_service.register_delivery_partner(
            user.id, payload.name, payload.phone, payload.vehicle_type
        )
        return SuccessResponse(data=DeliveryPartnerResponse.model_validate(partner).model_dump())
    except ValueError as e:
        log.error(f"Value error registering delivery partner: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        log.error(f"Error registering delivery partner: {e}")
        raise HTTPException(status_code=500, detail="Server failed to register the delivery partner.")


@router.get("/me", response_model=SuccessResponse)
async def me_endpoint(user: User = Depends(current_user)):
    """The caller's courier record, or null when they have not registered."""
    try:
        partner = await profile_service.get_delivery_partner(user.id)
        data = DeliveryPartnerResponse.model_validate(partner).model_dump() if partner else None
        return SuccessResponse(data=data)
    except Exception as e:
        log.error(f"Error fetching delivery partner for user {user.id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to fetch the delivery partner.")


@router.patch("/me/availability", response_model=SuccessResponse)
async def availability_endpoint(
    payload: AvailabilityUpdate, partner: DeliveryPartner = Depends(current_delivery_partner)
):
    try:
        partner = await profile_service.set_accepting_orders(partner, payload.is_accepting_orders)
        return SuccessResponse(data=DeliveryPartnerResponse.model_validate(partner).model_dump())
    except Exception as e:
        log.error(f"Error updating availability for partner {partner.id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to update availability.")


@router.get("/orders/available", response_model=SuccessResponse)
async def available_orders_endpoint(partner: DeliveryPartner = Depends(current_delivery_partner)):
    """Pending orders nobody has taken yet. Empty while the partner is offline."""
    try:
        orders = await order_service.list_available_orders(partner)
        return SuccessResponse(data=[to_order_response(o).model_dump() for o in orders])
    except Exception as e:
        log.error(f"Error listing available orders: {e}")
        raise HTTPException(status_code=500, detail="Server failed to fetch available orders.")


@router.get("/orders/mine", response_model=SuccessResponse)
async def my_orders_endpoint(partner: DeliveryPartner = Depends(current_delivery_partner)):
    try:
        orders = await order_service.list_partner_orders(partner)
        return SuccessResponse(data=[to_order_response(o).model_dump() for o in orders])
    except Exception as e:
        log.error(f"Error listing orders for partner {partner.id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to fetch your orders.")


async def _transition(action, order_id: UUID, partner: DeliveryPartner, verb: str):
    try:
        order = await action(order_id, partner)
        return SuccessResponse(data=to_order_response(order).model_dump())
    except OrderNotFound:
        raise HTTPException(status_code=404, detail="Order not found")
    except ValueError as e:
        log.error(f"Value error trying to {verb} order {order_id}: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        log.error(f"Error trying to {verb} order {order_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Server failed to {verb} the order.")


@router.post("/orders/{order_id}/accept", response_model=SuccessResponse)
async def accept_endpoint(order_id: UUID, partner: DeliveryPartner = Depends(current_delivery_partner)):
    """Claims a pending order: it becomes confirmed and the kitchen is notified."""
    return await _transition(order_service.accept_order, order_id, partner, "accept")


@router.post("/orders/{order_id}/pickup", response_model=SuccessResponse)
async def pickup_endpoint(order_id: UUID, partner: DeliveryPartner = Depends(current_delivery_partner)):
    return await _transition(order_service.mark_out_for_delivery, order_id, partner, "pick up")


@router.post("/orders/{order_id}/deliver", response_model=SuccessResponse)
async def deliver_endpoint(order_id: UUID, partner: DeliveryPartner = Depends(current_delivery_partner)):
    return await _transition(order_service.mark_delivered, order_id, partner, "deliver")
