"""Settings store on Supabase"""
from .client import get_supabase_client, reset_supabase_client
from .repositories import SettingsRepository

__all__ = ["SettingsRepository", "get_supabase_client", "reset_supabase_client"]
