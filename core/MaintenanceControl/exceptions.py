class MaintenanceTransitionError(Exception):
    """Raised when a status change is not allowed by the maintenance workflow."""


class MaintenanceLockedError(Exception):
    """Raised when a completed or cancelled maintenance is edited."""


class InsufficientStockError(Exception):
    """Raised when a part consumption exceeds the available stock."""
