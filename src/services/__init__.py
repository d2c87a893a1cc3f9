"""Services package."""
from src.services import (
    permission_preset_service,
    permission_service,
    preset_store,
    user_permission_service,
)

__all__ = [
    "permission_preset_service",
    "permission_service",
    "preset_store",
    "user_permission_service",
]
