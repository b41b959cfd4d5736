"""Database utilities and models."""

from michi.db.base import Base
from michi.db import models  # noqa: F401  (imported for side effects)

__all__ = ["Base"]
