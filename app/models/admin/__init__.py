from app.models.admin.admin_user import AdminUser

__all__ = ["AdminUser"]
