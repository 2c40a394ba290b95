# app/api/api.py

import logging
from fastapi import APIRouter
from app.api.endpoints import (
    auth,
    blog_posts,
    feed,
    notifications,
    users,
)

# Set up logging
logger = logging.getLogger(__name__)

api_router = APIRouter()


# Include router for auth
try:
    api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
    logger.info("Auth router included successfully")
except Exception as e:
    logger.error(f"Failed to include auth router: {str(e)}", exc_info=True)

try:
    api_router.include_router(
        blog_posts.router,
        prefix="/blog",
        tags=["blog"]
    )
    logger.info("Blog posts router included successfully")
except Exception as e:
    logger.error(f"Failed to include blog posts router: {str(e)}", exc_info=True)

# Include router for feeds
try:
    api_router.include_router(feed.router, prefix="/feed", tags=["feed"])
    logger.info("Feed router included successfully")
except Exception as e:
    logger.error(f"Failed to include feed router: {str(e)}", exc_info=True)

# Include router for notifications
try:
    api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
    logger.info("Notifications router included successfully")
except Exception as e:
    logger.error(f"Failed to include notifications router: {str(e)}", exc_info=True)

# Include router for users
try:
    api_router.include_router(users.router, prefix="/users", tags=["users"])
    logger.info("Users router included successfully")
except Exception as e:
    logger.error(f"Failed to include users router: {str(e)}", exc_info=True)

logger.info(f"API routes configured: {[route.path for route in api_router.routes]}")
