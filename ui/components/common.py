"""Helpers shared by the Streamlit pages."""

from __future__ import annotations

from typing import Any, Callable

import requests
import streamlit as st


def safe_fetch(fn: Callable[..., Any], default: Any, *args: Any, **kwargs: Any) -> Any:
    """Call an API function, showing an error and returning default on failure."""
    try:
        return fn(*args, **kwargs)
    except requests.ConnectionError:
        st.error(
            "Cannot reach the backend API. "
            "Make sure the FastAPI server is running on port 8000."
        )
    except requests.RequestException as e:
        st.error(f"Request failed: {e}")
    return default


def submit(fn: Callable[..., Any], *args: Any, success: str = "") -> bool:
    """Run a mutating API call. Returns True on success."""
    try:
        fn(*args)
    except requests.HTTPError as e:
        st.error(_detail(e))
        return False
    except requests.RequestException as e:
        st.error(f"Request failed: {e}")
        return False
    if success:
        st.toast(success)
    return True


def _detail(error: requests.HTTPError) -> str:
    """Human message from a FastAPI error response."""
    try:
        detail = error.response.json().get("detail")
    except ValueError:
        return str(error)
    if isinstance(detail, list):
        # Validation errors: show the first message
        return str(detail[0].get("msg", detail[0])) if detail else str(error)
    return str(detail or error)


def badge(label: str, color: str) -> str:
    """Small colored label (Streamlit markdown color syntax)."""
    palette = {"indigo": "violet", "purple": "violet", "yellow": "orange"}
    return f":{palette.get(color, color)}[{label}]"
