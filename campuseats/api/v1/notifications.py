import logging
from fastapi import APIRouter, Depends, HTTPException
from campuseats.api.deps import current_user
from campuseats.models.auth import User
from campuseats.schemas.notification import NotificationFeed, NotificationResponse
from campuseats.schemas.response import SuccessResponse
from campuseats.services import notification_service
from uuid import UUID

router = APIRouter()
log = logging.getLogger("uvicorn")


@router.get("", response_model=SuccessResponse)
async def list_notifications_endpoint(user: User = Depends(current_user)):
    try:
        notifications = await notification_service.list_notifications(user.id)
        data = NotificationFeed(
            notifications=[NotificationResponse.model_validate(n) for n in notifications],
            unread_count=await notification_service.unread_count(user.id),
        ).model_dump()
        return SuccessResponse(data=data)
    except Exception as e:
        log.error(f"Error fetching notifications for user {user.id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to fetch notifications.")


@router.post("/read-all", response_model=SuccessResponse)
async def read_all_endpoint(user: User = Depends(current_user)):
    try:
        updated = await notification_service.mark_all_read(user.id)
        return SuccessResponse(data={"updated": updated})
    except Exception as e:
        log.error(f"Error marking notifications read for user {user.id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to update notifications.")


@router.post("/{notification_id}/read", response_model=SuccessResponse)
async def read_endpoint(notification_id: UUID, user: User = Depends(current_user)):
    """Only the recipient can mark a notification read; anyone else sees 404."""
    try:
        notification = await notification_service.mark_read(user.id, notification_id)
        if not notification:
            raise HTTPException(status_code=404, detail="Notification not found")
        return SuccessResponse(data=NotificationResponse.model_validate(notification).model_dump())
    except HTTPException:
        raise
    except Exception as e:
        log.error(f"Error marking notification {notification_id} read: {e}")
        raise HTTPException(status_code=500, detail="Server failed to update the notification.")
