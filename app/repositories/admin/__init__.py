from app.repositories.admin.admin_user_repository import AdminUserRepository, AdminUserSearchCriteria

__all__ = ["AdminUserRepository", "AdminUserSearchCriteria"]
