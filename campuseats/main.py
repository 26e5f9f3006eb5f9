import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, status
from campuseats.core.db import init_db, close_db
from campuseats.api.v1.admin import router as admin_router
from campuseats.api.v1.auth import router as auth_router
from campuseats.api.v1.cart import router as cart_router
from campuseats.api.v1.catalog import router as catalog_router
from campuseats.api.v1.delivery import router as delivery_router
from campuseats.api.v1.notifications import router as notifications_router
from campuseats.api.v1.orders import router as orders_router
from campuseats.api.v1.profile import router as profile_router
from campuseats.api.v1.realtime import router as realtime_router
from campuseats.api.v1.restaurant import router as restaurant_router
from campuseats.api.v1.session import router as session_router
from campuseats.core.config import LOG_LEVEL, PROJECT_NAME, VERSION
from campuseats.core.exception_handlers import setup_exception_handlers
from campuseats.events.change_feed import feed
from campuseats.models import (
    DeliveryPartner,
    MenuItem,
    Notification,
    Order,
    Outlet,
    Rating,
    RestaurantPartner,
)
from campuseats.services.cart import cart_store
from campuseats.services.session_service import provider

logging.basicConfig(level=LOG_LEVEL, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
log = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handles startup and shutdown events."""
    log.info(f"Starting {PROJECT_NAME} v{VERSION}...")
    await init_db() # Connect to DB and generate schemas
    feed.connect(Order, Outlet, MenuItem, DeliveryPartner, RestaurantPartner, Rating, Notification)
    stop_cart_listener = provider.on_auth_change(cart_store.on_auth_change)
    yield
    stop_cart_listener()
    await close_db()
    log.info(f"{PROJECT_NAME} stopped.")

app = FastAPI(
    title=PROJECT_NAME,
    version=VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Include routers for modular API structure
app.include_router(auth_router, prefix="/api/v1/auth", tags=["Auth"])
app.include_router(session_router, prefix="/api/v1/session", tags=["Session"])
app.include_router(catalog_router, prefix="/api/v1/outlets", tags=["Catalog"])
app.include_router(cart_router, prefix="/api/v1/cart", tags=["Cart"])
app.include_router(orders_router, prefix="/api/v1/orders", tags=["Orders"])
app.include_router(delivery_router, prefix="/api/v1/delivery", tags=["Delivery Partner"])
app.include_router(restaurant_router, prefix="/api/v1/restaurant", tags=["Restaurant Partner"])
app.include_router(notifications_router, prefix="/api/v1/notifications", tags=["Notifications"])
app.include_router(profile_router, prefix="/api/v1/profile", tags=["Profile"])
app.include_router(admin_router, prefix="/api/v1/admin", tags=["Admin"])
app.include_router(realtime_router, prefix="/api/v1/realtime", tags=["Realtime"])


setup_exception_handlers(app)

@app.get("/health", status_code=status.HTTP_200_OK)
async def health_check():
    """Simple health check endpoint."""
    return {"status": "ok", "app_name": PROJECT_NAME}
