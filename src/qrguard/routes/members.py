"""Member endpoints: store, read, and issue QR tokens."""

from __future__ import annotations

from urllib.parse import quote

from fastapi import APIRouter, Depends, Response

from qrguard.codec import Codec
from qrguard.deps import get_codec, get_store
from qrguard.models import Member, MemberInput, TokenResponse
from qrguard.payload import member_token, qr_filename, render_qr_png
from qrguard.store import MemberStore

router = APIRouter(prefix="/api/v1/members", tags=["members"])


@router.post("", status_code=201)
def store_member(body: MemberInput, store: MemberStore = Depends(get_store)):
    member = Member(**body.model_dump())
    store.store_member(member)
    return {"id_number": member.id_number}


@router.get("")
def list_members(store: MemberStore = Depends(get_store)):
    return [m.model_dump(mode="json") for m in store.list_members()]


@router.get("/{id_number}")
def get_member(id_number: str, store: MemberStore = Depends(get_store)):
    return store.get_member(id_number).model_dump(mode="json")


@router.delete("/{id_number}", status_code=204)
def delete_member(id_number: str, store: MemberStore = Depends(get_store)):
    store.delete_member(id_number)
    return Response(status_code=204)


@router.get("/{id_number}/token", response_model=TokenResponse)
def get_token(
    id_number: str,
    store: MemberStore = Depends(get_store),
    codec: Codec = Depends(get_codec),
):
    member = store.get_member(id_number)
    return TokenResponse(token=member_token(member, codec), encrypted=codec.enabled)


@router.get("/{id_number}/qr.png")
def get_qr_png(
    id_number: str,
    store: MemberStore = Depends(get_store),
    codec: Codec = Depends(get_codec),
):
    member = store.get_member(id_number)
    png = render_qr_png(member_token(member, codec))
    return Response(
        content=png,
        media_type="image/png",
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(qr_filename(member))}"
        },
    )
