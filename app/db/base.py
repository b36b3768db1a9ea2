"""SQLAlchemy Base class for all models."""
from app.models.base.base_model import Base


def import_models() -> None:
    """Import all models so they are registered on ``Base.metadata``."""
    import app.models  # noqa: F401


import_models()

__all__ = ["Base", "import_models"]
