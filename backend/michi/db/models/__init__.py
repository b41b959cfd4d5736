"""ORM models exposed for metadata discovery."""
from michi.db.models.user_metadata import UserMetadata

__all__ = ["UserMetadata"]
