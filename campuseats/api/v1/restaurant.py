import logging
from fastapi import APIRouter, Depends, HTTPException, status
from campuseats.api.deps import current_restaurant_partner, current_user
from campuseats.models.auth import User
from campuseats.models.partner import RestaurantPartner
from campuseats.schemas.order import RestaurantOrdersResponse, to_order_response
from campuseats.schemas.profile import RestaurantPartnerRegistration, RestaurantPartnerResponse
from campuseats.schemas.response import SuccessResponse
from campuseats.services import order_service, profile_service
from campuseats.services.order_service import OrderNotFound
from uuid import UUID

router = APIRouter()
log = logging.getLogger("uvicorn")


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def register_endpoint(payload: RestaurantPartnerRegistration, user: User = Depends(current_user)):
    """Submits a partner application for admin approval."""
    try:
        partner = await profile_service.register_restaurant_partner(
            user.id, payload.restaurant_name, payload.contact_phone
        )
        return SuccessResponse(data=RestaurantPartnerResponse.model_validate(partner).model_dump())
    except ValueError as e:
        log.error(f"Value error registering restaurant partner: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        log.error(f"Error registering restaurant partner: {e}")
        raise HTTPException(status_code=500, detail="Server failed to register the restaurant partner.")


@router.get("/me", response_model=SuccessResponse)
async def me_endpoint(user: User = Depends(current_user)):
    try:
        partner = await profile_service.get_restaurant_partner(user.id)
        data = RestaurantPartnerResponse.model_validate(partner).model_dump() if partner else None
        return SuccessResponse(data=data)
    except Exception as e:
        log.error(f"Error fetching restaurant partner for user {user.id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to fetch the restaurant partner.")


@router.get("/orders", response_model=SuccessResponse)
async def orders_endpoint(partner: RestaurantPartner = Depends(current_restaurant_partner)):
    """Accepted orders for the partner's outlet, split into active and history."""
    try:
        orders = await order_service.list_restaurant_orders(partner)
        summary = order_service.restaurant_summary(orders)
        data = RestaurantOrdersResponse(
            active=[to_order_response(o) for o in summary["active"]],
            history=[to_order_response(o) for o in summary["history"]],
            revenue=summary["revenue"],
        ).model_dump()
        return SuccessResponse(data=data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        log.error(f"Error listing restaurant orders for partner {partner.id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to fetch orders.")


async def _transition(action, order_id: UUID, partner: RestaurantPartner, verb: str):
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


@router.post("/orders/{order_id}/prepare", response_model=SuccessResponse)
async def prepare_endpoint(order_id: UUID, partner: RestaurantPartner = Depends(current_restaurant_partner)):
    return await _transition(order_service.start_preparing, order_id, partner, "prepare")


@router.post("/orders/{order_id}/cancel", response_model=SuccessResponse)
async def cancel_endpoint(order_id: UUID, partner: RestaurantPartner = Depends(current_restaurant_partner)):
    return await _transition(order_service.cancel_order, order_id, partner, "cancel")
