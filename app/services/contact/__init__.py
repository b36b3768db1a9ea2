from app.services.contact.contact_service import ContactService, derive_priority

__all__ = ["ContactService", "derive_priority"]
