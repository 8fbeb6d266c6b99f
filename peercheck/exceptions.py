"""Custom exceptions for peercheck."""


class PeercheckError(Exception):
    """Base exception for all peercheck errors."""


class StoreRootNotFoundError(PeercheckError):
    """Raised when the package store root does not exist."""

    def __init__(self, store_root: str):
        self.store_root = store_root
        super().__init__(f"Package store root not found: {store_root}")


class UnknownPackageManagerError(PeercheckError):
    """Raised when a remediation command is requested for an unsupported manager."""
