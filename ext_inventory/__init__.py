"""ExtInventory - browser extension inventory for the interactive Windows user"""

from .config import APP_NAME, APP_VERSION

__version__ = APP_VERSION

__all__ = ['APP_NAME', 'APP_VERSION', '__version__']
