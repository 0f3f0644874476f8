"""Scan endpoint: resolve scanned QR text to a member.

A scan that resolves to an unknown key is a 404 "Member not found",
whether the code was corrupted, encrypted under another passphrase or
belongs to a deleted member.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from qrguard.deps import get_resolver, get_store
from qrguard.models import ScanRequest, ScanResult
from qrguard.resolver import Resolver
from qrguard.store import MemberStore

router = APIRouter(prefix="/api/v1", tags=["scan"])


@router.post("/scan", response_model=ScanResult)
def scan(
    body: ScanRequest,
    resolver: Resolver = Depends(get_resolver),
    store: MemberStore = Depends(get_store),
):
    resolution = resolver.resolve_with_stage(body.text)
    member = store.get_member(resolution.key)
    return ScanResult(
        lookup_key=resolution.key,
        stage=resolution.stage.value,
        member=member,
    )
