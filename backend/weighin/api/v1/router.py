"""
API v1 Main Router
Aggregates all v1 API endpoints into a single router.

Structure:
- /auth/*          - Authentication endpoints (register, login, refresh)
- /users/*         - User profile, height and health summary
- /weights/*       - Weight entries
- /groups/*        - Groups, memberships, teams, progress and settlement
- /reminders/*     - Inactivity reminders (admin)
- /notifications/* - In-app notifications
"""

from fastapi import APIRouter

from weighin.api.v1 import auth, users, weights, groups, progress, reminders, notifications


# Create main v1 router
# This router will be included in main.py with prefix /api/v1
api_router = APIRouter()


# Endpoints: POST /auth/register, /auth/login, /auth/refresh
# No authentication required for these endpoints
api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["Authentication"],
)


# Endpoints: GET/PUT /users/me, PUT /users/me/height, GET /users/me/health
api_router.include_router(
    users.router,
    prefix="/users",
    tags=["Users"],
)


# Endpoints: POST/GET /weights, DELETE /weights/{id}
# prefix is already defined in weights.router
api_router.include_router(weights.router)


# Endpoints: POST/GET /groups, POST /groups/join, GET/PUT/DELETE /groups/{id},
# teams and team assignment under /groups/{id}
api_router.include_router(groups.router)


# Endpoints: GET /groups/{id}/progress, GET /groups/{id}/settlement
api_router.include_router(progress.router)


# Endpoints: GET /reminders/eligible, POST /reminders/dispatch (admin only)
api_router.include_router(reminders.router)


# Endpoints: GET /notifications, GET /notifications/unread-count,
# POST /notifications/{id}/read, POST /notifications/read-all
api_router.include_router(notifications.router)
