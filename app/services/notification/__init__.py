from app.services.notification.email_service import EmailService, TemplateEngine

__all__ = ["EmailService", "TemplateEngine"]
