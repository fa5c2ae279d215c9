from shop.services.account import AccountService
from shop.services.wallet import WalletService
from shop.services.catalog import CatalogService
from shop.services.reporting import ReportingService

__all__ = [
    "AccountService",
    "WalletService",
    "CatalogService",
    "ReportingService",
]
