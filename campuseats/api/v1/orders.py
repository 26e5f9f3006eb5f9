import logging
from fastapi import APIRouter, Depends, HTTPException, status
from campuseats.api.deps import current_user, require_token
from campuseats.models.auth import User
from campuseats.schemas.order import CheckoutRequest, RatingRequest, RatingResponse, to_order_response
from campuseats.schemas.response import SuccessResponse
from campuseats.services import order_service, rating_service
from campuseats.services.cart import CartStore, get_cart_store
from uuid import UUID

router = APIRouter()
log = logging.getLogger("uvicorn")


@router.post("/checkout", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def checkout_endpoint(
    payload: CheckoutRequest,
    user: User = Depends(current_user),
    token: str = Depends(require_token),
    store: CartStore = Depends(get_cart_store),
):
    """
    Places the session's cart as a pending order. The cart is emptied only
    once the order and its lines are stored.
    """
    try:
        order = await order_service.place_order(
            user_id=user.id,
            cart=store.get(token),
            customer_name=payload.customer_name,
            customer_phone=payload.customer_phone,
            delivery_address=payload.delivery_address,
        )
        log.info(f"Order {order.id} placed successfully for user {user.id}.")
        return SuccessResponse(data=to_order_response(order).model_dump())
    except ValueError as e:
        log.error(f"Value error placing order: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        log.error(f"Error placing order: {e}")
        raise HTTPException(status_code=500, detail="Server failed to place order.")


@router.get("", response_model=SuccessResponse)
async def list_orders_endpoint(user: User = Depends(current_user)):
    """The caller's own orders, newest first."""
    try:
        orders = await order_service.list_customer_orders(user.id)
        return SuccessResponse(data=[to_order_response(o).model_dump() for o in orders])
    except Exception as e:
        log.error(f"Error listing orders for user {user.id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to fetch orders.")


@router.get("/{order_id}", response_model=SuccessResponse)
async def get_order_endpoint(order_id: UUID, user: User = Depends(current_user)):
    """Fetches details for a specific order."""
    try:
        order = await order_service.get_order(order_id)
        if not order or order.user_id != user.id:
            raise HTTPException(status_code=404, detail="Order not found")
        return SuccessResponse(data=to_order_response(order).model_dump())
    except HTTPException:
        raise
    except Exception as e:
        log.error(f"Error fetching order {order_id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to fetch order details.")


@router.post("/{order_id}/ratings", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def rate_order_endpoint(order_id: UUID, payload: RatingRequest, user: User = Depends(current_user)):
    """Overall stars for a delivered order, plus optional stars per dish."""
    try:
        ratings = await rating_service.rate_order(user.id, order_id, payload.rating, payload.review, payload.items)
        data = [
            RatingResponse(
                id=r.id,
                order_id=r.order_id,
                outlet_id=r.outlet_id,
                menu_item_id=r.menu_item_id,
                rating=r.rating,
                review=r.review,
            ).model_dump()
            for r in ratings
        ]
        return SuccessResponse(data=data)
    except LookupError:
        raise HTTPException(status_code=404, detail="Order not found")
    except ValueError as e:
        log.error(f"Value error rating order {order_id}: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        log.error(f"Error rating order {order_id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to save the rating.")
