"""Shared utilities for the dashboard: API access and result formatting."""

import math
import os

import requests
import streamlit as st
from dotenv import load_dotenv

load_dotenv()

_API_URL = os.getenv("API_URL", "http://localhost:8000")
_API_KEY = os.getenv("API_KEY_USER1", "")


def _key() -> str:
    return st.session_state.get("api_key", _API_KEY)


def _headers() -> dict:
    return {"X-API-Key": _key()}


def _detail(exc: requests.HTTPError) -> str:
    """Pull the API's explanatory message out of an error response."""
    try:
        body = exc.response.json()
    except ValueError:
        return str(exc)
    return body.get("message") or str(body.get("detail", exc))


def api_get(endpoint: str, params: dict = None):
    try:
        r = requests.get(f"{_API_URL}{endpoint}", headers=_headers(), params=params, timeout=15)
        r.raise_for_status()
        return r.json()
    except requests.HTTPError as exc:
        st.error(_detail(exc))
        return None
    except requests.RequestException as exc:
        st.error(f"API error: {exc}")
        return None


def api_post(endpoint: str, payload: dict):
    try:
        r = requests.post(
            f"{_API_URL}{endpoint}",
            headers={**_headers(), "Content-Type": "application/json"},
            json=payload,
            timeout=30,
        )
        r.raise_for_status()
        return r.json()
    except requests.HTTPError as exc:
        st.error(_detail(exc))
        return None
    except requests.RequestException as exc:
        st.error(f"Request failed: {exc}")
        return None


def sidebar_api_key() -> None:
    """Show API key input in sidebar if the key is not yet set."""
    if not _key():
        with st.sidebar:
            key_input = st.text_input("API Key", type="password", key="api_key_sidebar")
            if key_input:
                st.session_state["api_key"] = key_input
                st.rerun()


def probability_text(result: dict) -> str:
    prob = result["probability"]
    return f"The probability for TRB >= {prob['threshold']} is {prob['probability']:.4f}"


def american_odds_text(result: dict) -> str:
    return f"American Odds: {result['odds']['american_odds']:.2f}"


def quarter_kelly_text(result: dict):
    stake = result.get("stake")
    if not stake:
        return None
    return f"Quarter Kelly Criterion: {stake['quarter_kelly_percent']:.2f}"


def parse_odds(raw: str):
    """Parse the free-text odds box; blank means "no quote"."""
    raw = (raw or "").strip()
    if not raw:
        return None
    odds = float(raw)
    if not math.isfinite(odds) or odds == 0:
        raise ValueError(f"not a usable quote: {raw!r}")
    return odds
