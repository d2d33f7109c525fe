from easyclean.services import (
    analytics_service,
    backup_service,
    inventory_service,
    scheduler,
    session_service,
    session_state_machine,
)


__all__ = [
    "analytics_service",
    "backup_service",
    "inventory_service",
    "scheduler",
    "session_service",
    "session_state_machine",
]
