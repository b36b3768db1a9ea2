"""
Back-office endpoints: authentication, account management, dashboard,
analytics and maintenance.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import (
    get_admin_user_service,
    get_analytics_service,
    get_auth_service,
    get_cleanup_service,
    get_current_admin,
    get_pagination,
    get_settings,
    require_permission,
)
from app.config.settings import Settings
from app.models.admin.admin_user import AdminUser
from app.models.base.enums import AdminRole, Permission
from app.repositories.admin.admin_user_repository import AdminUserSearchCriteria
from app.schemas.admin import (
    AdminCreate,
    AdminLogin,
    AdminProfileUpdate,
    AdminResponse,
    PasswordChange,
    TokenResponse,
)
from app.schemas.analytics import (
    BookingAnalytics,
    CleanupReport,
    DashboardStats,
    RevenueAnalytics,
    RevenuePeriod,
)
from app.schemas.common.pagination import PaginationParams
from app.schemas.common.response import ListResponse, SuccessResponse, paginated
from app.services.admin import AdminAuthenticationService, AdminUserService
from app.services.analytics.analytics_service import MAX_REVENUE_YEAR, MIN_REVENUE_YEAR, AnalyticsService
from app.services.background import CleanupService

router = APIRouter(prefix="/admin")

view_analytics = require_permission(Permission.VIEW_ANALYTICS)


# ==================== AUTHENTICATION ====================

@router.post("/login", response_model=SuccessResponse[TokenResponse])
def login(
    payload: AdminLogin,
    auth_service: AdminAuthenticationService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
):
    admin, token = auth_service.login(payload.email, payload.password)
    return SuccessResponse(
        message="Login successful",
        data=TokenResponse(
            access_token=token,
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            user=AdminResponse.model_validate(admin),
        ),
    )


@router.get("/me", response_model=SuccessResponse[AdminResponse])
def read_me(admin: AdminUser = Depends(get_current_admin)):
    return SuccessResponse(message="Profile retrieved", data=AdminResponse.model_validate(admin))


@router.put("/profile", response_model=SuccessResponse[AdminResponse])
def update_profile(
    payload: AdminProfileUpdate,
    service: AdminUserService = Depends(get_admin_user_service),
    admin: AdminUser = Depends(get_current_admin),
):
    admin = service.update_profile(admin, payload)
    return SuccessResponse(message="Profile updated successfully", data=AdminResponse.model_validate(admin))


@router.put("/password", response_model=SuccessResponse)
def change_password(
    payload: PasswordChange,
    auth_service: AdminAuthenticationService = Depends(get_auth_service),
    admin: AdminUser = Depends(get_current_admin),
):
    auth_service.change_password(admin.id, payload.current_password, payload.new_password)
    return SuccessResponse(message="Password changed successfully")


@router.post("/users", response_model=SuccessResponse[AdminResponse], status_code=status.HTTP_201_CREATED)
def create_admin_user(
    payload: AdminCreate,
    service: AdminUserService = Depends(get_admin_user_service),
    admin: AdminUser = Depends(require_permission(Permission.MANAGE_USERS)),
):
    created = service.create_admin(payload, created_by=admin.id)
    return SuccessResponse(message="Admin user created successfully", data=AdminResponse.model_validate(created))


@router.get("/users", response_model=ListResponse[AdminResponse])
def list_admin_users(
    role: Optional[AdminRole] = None,
    is_active: Optional[bool] = None,
    search: Optional[str] = Query(None, min_length=1, description="Name or email"),
    pagination: PaginationParams = Depends(get_pagination),
    service: AdminUserService = Depends(get_admin_user_service),
    _admin=Depends(require_permission(Permission.MANAGE_USERS)),
):
    criteria = AdminUserSearchCriteria(role=role, is_active=is_active, search=search)
    page = service.list_users(criteria, pagination.page, pagination.limit)
    return paginated(page, AdminResponse, message="Admin users retrieved")


# ==================== DASHBOARD & ANALYTICS ====================

@router.get("/dashboard/stats", response_model=SuccessResponse[DashboardStats])
def dashboard_stats(
    service: AnalyticsService = Depends(get_analytics_service),
    _admin=Depends(get_current_admin),
):
    return SuccessResponse(message="Dashboard statistics retrieved", data=service.dashboard())


@router.get("/analytics/revenue", response_model=SuccessResponse[RevenueAnalytics])
def revenue_analytics(
    period: RevenuePeriod = RevenuePeriod.MONTHLY,
    year: Optional[int] = Query(
        None, ge=MIN_REVENUE_YEAR, le=MAX_REVENUE_YEAR, description="Defaults to the current year"
    ),
    service: AnalyticsService = Depends(get_analytics_service),
    _admin=Depends(view_analytics),
):
    return SuccessResponse(message="Revenue analytics retrieved", data=service.revenue(period, year))


@router.get("/analytics/bookings", response_model=SuccessResponse[BookingAnalytics])
def booking_analytics(
    service: AnalyticsService = Depends(get_analytics_service),
    _admin=Depends(view_analytics),
):
    return SuccessResponse(message="Booking analytics retrieved", data=service.booking_analytics())


# ==================== MAINTENANCE ====================

@router.post("/maintenance/cleanup", response_model=SuccessResponse[CleanupReport])
def run_cleanup(
    service: CleanupService = Depends(get_cleanup_service),
    _admin=Depends(require_permission(Permission.MANAGE_SETTINGS)),
):
    return SuccessResponse(message="Cleanup completed", data=service.run())
