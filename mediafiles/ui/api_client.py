"""HTTP client wrapper for the Media Files FastAPI backend."""

from __future__ import annotations

import os

import httpx
import streamlit as st

API_URL = os.getenv("API_URL", "http://localhost:8000")


def check_health() -> bool:
    """Return True if the API server responds to /health."""
    try:
        r = httpx.get(f"{API_URL}/health", timeout=5.0)
        return r.status_code == 200
    except httpx.ConnectError:
        return False


def get_files() -> dict:  # type: ignore[type-arg]
    """Fetch the file catalog and any notices produced while listing."""
    try:
        r = httpx.get(f"{API_URL}/api/files", timeout=60.0)
        r.raise_for_status()
        return r.json()  # type: ignore[no-any-return]
    except httpx.HTTPError as e:
        st.error(f"Could not get file list: {e}")
        return {"files": [], "notices": []}


def delete_files(keys: list[str]) -> dict:  # type: ignore[type-arg]
    """Delete the given files and their derived artifacts."""
    try:
        r = httpx.post(f"{API_URL}/api/files/delete", json={"keys": keys}, timeout=60.0)
        r.raise_for_status()
        return r.json()  # type: ignore[no-any-return]
    except httpx.HTTPError as e:
        st.error(f"Could not delete files: {e}")
        return {}


def get_preview(key: str) -> dict:  # type: ignore[type-arg]
    """Fetch preview data (transcript, metadata, labels) for one file."""
    try:
        r = httpx.get(f"{API_URL}/api/files/preview", params={"key": key}, timeout=60.0)
        r.raise_for_status()
        return r.json()  # type: ignore[no-any-return]
    except httpx.HTTPError as e:
        st.error(f"Could not open file: {e}")
        return {}


def upload_files(files: list[tuple[str, bytes, str | None]]) -> dict:  # type: ignore[type-arg]
    """Start uploading (filename, content, content type) triples."""
    try:
        r = httpx.post(
            f"{API_URL}/api/files/upload",
            files=[("files", (name, content, content_type)) for name, content, content_type in files],
            timeout=300.0,
        )
        r.raise_for_status()
        return r.json()  # type: ignore[no-any-return]
    except httpx.HTTPError as e:
        st.error(f"Upload failed: {e}")
        return {}


def get_upload_progress() -> dict:  # type: ignore[type-arg]
    try:
        r = httpx.get(f"{API_URL}/api/files/uploads", timeout=10.0)
        r.raise_for_status()
        return r.json()  # type: ignore[no-any-return]
    except httpx.HTTPError:
        return {}


def dismiss_uploads() -> dict:  # type: ignore[type-arg]
    try:
        r = httpx.post(f"{API_URL}/api/files/uploads/dismiss", timeout=60.0)
        r.raise_for_status()
        return r.json()  # type: ignore[no-any-return]
    except httpx.HTTPError:
        return {}
