"""Meta endpoints: health, version, member counts."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from qrguard.codec import Codec
from qrguard.deps import get_codec, get_store
from qrguard.store import MemberStore

router = APIRouter(prefix="/api/v1", tags=["meta"])


@router.get("/health")
def health():
    return {"status": "ok", "service": "qrguard"}


@router.get("/version")
def version(codec: Codec = Depends(get_codec)):
    return {
        "gateway": "0.1.0",
        "encryption": codec.enabled,
    }


@router.get("/counts")
def counts(store: MemberStore = Depends(get_store)):
    return {"members": store.count_members()}
