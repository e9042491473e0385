"""
Supabase client for quote-form data.

Uses the official Supabase Python client. Question definitions and service
categories are read from the hosted tables; quote submissions are written
back. Accessors log failures and return `None` so routes can answer with the
standard error envelope.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional, Tuple

from supabase import create_client, Client

logger = logging.getLogger("api.supabase")

_client: Optional[Client] = None


def _credentials() -> Tuple[Optional[str], Optional[str]]:
    # Try NEXT_PUBLIC_SUPABASE_URL first (for consistency with Next.js), then SUPABASE_URL
    url = os.getenv("NEXT_PUBLIC_SUPABASE_URL") or os.getenv("SUPABASE_URL")
    # Use service role key for backend (has full access), else the anon key
    key = os.getenv("SUPABASE_SERVICE_ROLE_KEY") or os.getenv("NEXT_PUBLIC_SUPABASE_ANON_KEY")
    return url, key


def supabase_configured() -> bool:
    url, key = _credentials()
    return bool(url and key)


def get_supabase_client() -> Optional[Client]:
    """Get or create Supabase client (singleton)."""
    global _client

    if _client is not None:
        return _client

    url, key = _credentials()

    if not url or not key:
        logger.warning("[Supabase] URL or key not configured")
        return None

    try:
        _client = create_client(url, key)
        return _client
    except Exception as e:
        logger.error("[Supabase] Failed to create client: %s", e)
        return None


def fetch_service_category_id(slug: str) -> Optional[str]:
    """Resolve an active service category slug (e.g. `boiler`) to its id."""
    client = get_supabase_client()
    if not client or not slug:
        return None

    try:
        result = (
            client.table("ServiceCategories")
            .select("service_category_id")
            .eq("slug", slug)
            .eq("is_active", True)
            .limit(1)
            .execute()
        )
    except Exception as e:
        logger.error("[Supabase] Error fetching service category %s: %s", slug, e)
        return None

    rows = result.data or []
    if not rows or not isinstance(rows[0], dict):
        return None
    value = rows[0].get("service_category_id")
    return str(value) if value else None


def fetch_form_questions(service_category_id: str) -> Optional[List[Dict[str, Any]]]:
    """
    Active, non-deleted questions of a category, ordered by step then display order.

    Returns None when the query itself failed (as opposed to an empty form).
    """
    client = get_supabase_client()
    if not client:
        return None
    if not service_category_id:
        return []

    try:
        result = (
            client.table("FormQuestions")
            .select("*")
            .eq("service_category_id", service_category_id)
            .eq("status", "active")
            .eq("is_deleted", False)
            .order("step_number")
            .order("display_order_in_step")
            .execute()
        )
    except Exception as e:
        logger.error("[Supabase] Error fetching form questions for %s: %s", service_category_id, e)
        return None

    return [row for row in (result.data or []) if isinstance(row, dict)]


def fetch_question_texts(question_ids: List[str]) -> Dict[str, str]:
    """Map question ids to their question text; unknown ids are simply absent."""
    client = get_supabase_client()
    ids = [str(q) for q in (question_ids or []) if q]
    if not client or not ids:
        return {}

    try:
        result = (
            client.table("FormQuestions")
            .select("question_id, question_text")
            .in_("question_id", ids)
            .execute()
        )
    except Exception as e:
        logger.error("[Supabase] Error fetching question texts: %s", e)
        return {}

    out: Dict[str, str] = {}
    for row in result.data or []:
        if not isinstance(row, dict):
            continue
        qid = row.get("question_id")
        if qid:
            out[str(qid)] = str(row.get("question_text") or "")
    return out


def insert_quote_submission(row: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Insert a `QuoteSubmissions` row and return it as stored (with `submission_id`)."""
    client = get_supabase_client()
    if not client:
        return None
    try:
        result = client.table("QuoteSubmissions").insert(row).execute()
    except Exception as e:
        logger.error("[Supabase] Error inserting into QuoteSubmissions: %s", e)
        return None
    rows = result.data or []
    if rows and isinstance(rows[0], dict):
        return rows[0]
    return None
