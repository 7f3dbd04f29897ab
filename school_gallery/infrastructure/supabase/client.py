"""Supabase client construction."""
from typing import Optional

from supabase import Client, ClientOptions, create_client

from ... import config

# Anonymous client shared by public pages
_anon_client: Optional[Client] = None


def _options(access_token: Optional[str] = None) -> ClientOptions:
    headers = {"Authorization": f"Bearer {access_token}"} if access_token else {}
    return ClientOptions(
        headers=headers,
        auto_refresh_token=False,
        persist_session=False
    )


def get_supabase_client(access_token: Optional[str] = None) -> Client:
    """Return a Supabase client.

    Without a token the shared anonymous client is returned. With a token a
    new client is created whose requests run as that user, so row-level
    security policies for authenticated admins apply.
    """
    global _anon_client

    if not config.SUPABASE_URL or not config.SUPABASE_KEY:
        raise ValueError("SUPABASE_URL and SUPABASE_KEY are required for the supabase backend")

    if access_token:
        return create_client(config.SUPABASE_URL, config.SUPABASE_KEY, options=_options(access_token))

    if _anon_client is None:
        _anon_client = create_client(config.SUPABASE_URL, config.SUPABASE_KEY, options=_options())
    return _anon_client


def reset_supabase_client():
    """Drop the cached anonymous client (useful for testing)."""
    global _anon_client
    _anon_client = None


def new_anonymous_client() -> Client:
    """A fresh, unshared anonymous client (used for sign-in)."""
    if not config.SUPABASE_URL or not config.SUPABASE_KEY:
        raise ValueError("SUPABASE_URL and SUPABASE_KEY are required for the supabase backend")
    return create_client(config.SUPABASE_URL, config.SUPABASE_KEY, options=_options())
