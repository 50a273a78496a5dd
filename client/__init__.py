from .api import VaultApiClient
from .entry_manager import EntryManager

__all__ = ['VaultApiClient', 'EntryManager']
