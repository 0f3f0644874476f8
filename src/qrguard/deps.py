"""FastAPI dependencies for qrguard routes."""

from __future__ import annotations

from fastapi import Request

from qrguard.codec import Codec
from qrguard.resolver import Resolver
from qrguard.store import MemberStore


def get_store(request: Request) -> MemberStore:
    """Get the member store from app state."""
    return request.app.state.store


def get_codec(request: Request) -> Codec:
    """Get the token codec from app state."""
    return request.app.state.codec


def get_resolver(request: Request) -> Resolver:
    """Get the scan resolver from app state."""
    return request.app.state.resolver
