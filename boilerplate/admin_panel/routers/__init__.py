"""Admin Panel Routers Package"""
from . import dashboard, logs, users

__all__ = [
    'dashboard',
    'logs',
    'users',
]
