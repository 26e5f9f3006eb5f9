# campuseats/models/__init__.py
from .auth import Role, Session, User, UserRole
from .catalog import MenuItem, Outlet
from .notification import Notification, NotificationType
from .order import Order, OrderItem, OrderStatus
from .partner import ApprovalStatus, DeliveryPartner, DeliveryPartnerStatus, RestaurantPartner
from .profile import CustomerProfile
from .rating import Rating

# Export all models
__all__ = [
    "ApprovalStatus",
    "CustomerProfile",
    "DeliveryPartner",
    "DeliveryPartnerStatus",
    "MenuItem",
    "Notification",
    "NotificationType",
    "Order",
    "OrderItem",
    "OrderStatus",
    "Outlet",
    "Rating",
    "RestaurantPartner",
    "Role",
    "Session",
    "User",
    "UserRole",
]
