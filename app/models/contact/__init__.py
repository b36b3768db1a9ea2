from app.models.contact.contact import Contact, INQUIRY_TYPE_LABELS

__all__ = ["Contact", "INQUIRY_TYPE_LABELS"]
