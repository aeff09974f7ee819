"""Infrastructure layer."""

from slackvault.infrastructure.persistence import Database

__all__ = ["Database"]
