from fastapi import APIRouter, Depends, HTTPException
from campuseats.api.deps import require_token
from campuseats.models.catalog import MenuItem
from campuseats.schemas.cart import AddCartItemRequest, UpdateCartItemRequest, to_cart_response
from campuseats.schemas.response import SuccessResponse
from campuseats.services.cart import CartItem, CartStore, get_cart_store
from uuid import UUID

router = APIRouter()


@router.get("", response_model=SuccessResponse)
async def get_cart_endpoint(token: str = Depends(require_token), store: CartStore = Depends(get_cart_store)):
    return SuccessResponse(data=to_cart_response(store.get(token)).model_dump())


@router.post("/items", response_model=SuccessResponse)
async def add_item_endpoint(
    payload: AddCartItemRequest,
    token: str = Depends(require_token),
    store: CartStore = Depends(get_cart_store),
):
    """Adds one of a dish; adding a dish already in the cart bumps its quantity."""
    item = await MenuItem.get_or_none(id=payload.menu_item_id).prefetch_related("outlet")
    if not item or not item.is_available:
        raise HTTPException(status_code=404, detail="Menu item not found or unavailable")
    cart = store.get(token)
    cart.add_item(CartItem.from_menu_item(item, item.outlet.name))
    return SuccessResponse(data=to_cart_response(cart).model_dump())


@router.patch("/items/{menu_item_id}", response_model=SuccessResponse)
async def update_item_endpoint(
    menu_item_id: UUID,
    payload: UpdateCartItemRequest,
    token: str = Depends(require_token),
    store: CartStore = Depends(get_cart_store),
):
    cart = store.get(token)
    try:
        cart.update_quantity(menu_item_id, payload.quantity)
    except KeyError:
        raise HTTPException(status_code=404, detail="Item is not in the cart")
    return SuccessResponse(data=to_cart_response(cart).model_dump())


@router.delete("/items/{menu_item_id}", response_model=SuccessResponse)
async def remove_item_endpoint(
    menu_item_id: UUID, token: str = Depends(require_token), store: CartStore = Depends(get_cart_store)
):
    cart = store.get(token)
    cart.remove_item(menu_item_id)
    return SuccessResponse(data=to_cart_response(cart).model_dump())


@router.delete("", response_model=SuccessResponse)
async def clear_cart_endpoint(token: str = Depends(require_token), store: CartStore = Depends(get_cart_store)):
    cart = store.get(token)
    cart.clear()
    return SuccessResponse(data=to_cart_response(cart).model_dump())
