"""
Integration layer: service shell, custody collaborators, persistence and config
"""

from .config import ServiceConfig, load_config
from .custody import PoolLedger, execute_instructions
from .service import PoolService
from .store import JsonFileStore

__all__ = [
    "ServiceConfig",
    "load_config",
    "PoolLedger",
    "execute_instructions",
    "PoolService",
    "JsonFileStore",
]
