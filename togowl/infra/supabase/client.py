"""Supabase connection backing the Togowl settings store"""
import logging
import os
from typing import Optional

from dotenv import load_dotenv
from supabase import Client, create_client  # type: ignore

load_dotenv(dotenv_path=".env")

logger = logging.getLogger(__name__)

_settings_store: Optional[Client] = None


def get_supabase_client() -> Client:
    """
    設定ストア用のSupabaseクライアントを返します（初回のみ接続）

    Raises:
        ValueError: SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY が未設定の場合
    """
    global _settings_store

    if _settings_store is not None:
        return _settings_store

    url = os.getenv("SUPABASE_URL")
    key = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
    if not url or not key:
        raise ValueError("Togowl settings need SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY")

    _settings_store = create_client(url, key)
    logger.info(f"Settings store connected: {url}")
    return _settings_store


def reset_supabase_client() -> None:
    """Forget the connection; the next get_supabase_client() reconnects"""
    global _settings_store
    _settings_store = None
