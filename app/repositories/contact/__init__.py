from app.repositories.contact.contact_repository import ContactRepository, ContactSearchCriteria

__all__ = ["ContactRepository", "ContactSearchCriteria"]
