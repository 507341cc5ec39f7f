from structlog import get_logger
from fastapi import APIRouter, Depends

from keydash.core import (
    KeydashContext,
    issue_referral_tokens,
    list_referral_tokens,
    list_resellers,
    add_credits,
    delete_reseller,
    get_admin_stats,
)
from keydash.datatypes import AddCreditsRequest, GenerateTokensRequest, ResellerPublic
from ..dependencies import keydash_context, require_admin

logger = get_logger(__name__)


router = APIRouter(prefix="/admin", dependencies=[Depends(require_admin)])


@router.post("/generate-tokens", status_code=201)
def generate_tokens(request: GenerateTokensRequest, g: KeydashContext = Depends(keydash_context)):
    tokens = issue_referral_tokens(g, request.count)
    return {"status": "success", "tokens": [{"token": t.token, "used": t.used} for t in tokens]}


@router.get("/tokens")
def list_tokens(g: KeydashContext = Depends(keydash_context)):
    tokens = list_referral_tokens(g)
    return {
        "status": "success",
        "tokens": [{"id": t.id, "token": t.token, "used": t.used, "createdAt": t.created_at} for t in tokens],
    }


@router.get("/resellers")
def list_resellers_(g: KeydashContext = Depends(keydash_context)):
    return {"status": "success", "resellers": [ResellerPublic.from_in_db(r) for r in list_resellers(g)]}


@router.post("/add-credits")
def add_credits_(request: AddCreditsRequest, g: KeydashContext = Depends(keydash_context)):
    reseller = add_credits(g, request.reseller_id, request.amount)
    return {
        "status": "success",
        "reseller": {
            "id": reseller.id,
            "username": reseller.username,
            "email": reseller.email,
            "credits": reseller.credits,
        },
    }


@router.delete("/resellers/{reseller_id}")
def delete_reseller_(reseller_id: int, g: KeydashContext = Depends(keydash_context)):
    delete_reseller(g, reseller_id)
    return {"status": "success", "message": "Reseller deleted successfully"}


@router.get("/stats")
def admin_stats(g: KeydashContext = Depends(keydash_context)):
    return {"status": "success", "stats": get_admin_stats(g)}
