"""Application tracking and worker wallets."""
from .application_service import ApplicationService, ReviewOutcome
from .wallet_service import WalletService, WalletSummary

__all__ = ["ApplicationService", "ReviewOutcome", "WalletService", "WalletSummary"]
