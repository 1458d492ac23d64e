class AuditLogImmutableError(Exception):
    """Raised on any attempt to modify or delete an audit log row."""


class AssetDisposalError(Exception):
    """Raised when an asset cannot be disposed (already disposed, inactive...)."""
