"""
存储适配器模块
"""

from app.core.storage.adapters.local import LocalStorage
from app.core.storage.adapters.google_drive import GoogleDriveStorage

__all__ = [
    'LocalStorage',
    'GoogleDriveStorage',
]
