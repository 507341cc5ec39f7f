from fastapi import APIRouter, Depends

from keydash.core import (
    KeydashContext,
    create_key,
    list_keys_for_reseller,
    delete_key,
    get_reseller_stats,
    get_api_usage_stats,
)
from keydash.datatypes import GenerateKeyRequest, KeyPublic, ResellerInDB
from ..dependencies import keydash_context, require_reseller


router = APIRouter(prefix="/reseller")


@router.post("/generate-key", status_code=201)
def generate_key(
    request: GenerateKeyRequest,
    reseller: ResellerInDB = Depends(require_reseller),
    g: KeydashContext = Depends(keydash_context),
):
    key = create_key(g, reseller.id, request)
    return {"status": "success", "key": KeyPublic.from_in_db(key)}


@router.get("/keys")
def list_keys(reseller: ResellerInDB = Depends(require_reseller), g: KeydashContext = Depends(keydash_context)):
    keys = list_keys_for_reseller(g, reseller.id)
    return {"status": "success", "keys": [KeyPublic.from_in_db(k) for k in keys]}


@router.delete("/keys/{key_id}")
def delete_key_(
    key_id: int, reseller: ResellerInDB = Depends(require_reseller), g: KeydashContext = Depends(keydash_context)
):
    delete_key(g, key_id, reseller.id)
    return {"status": "success", "message": "Key deleted successfully"}


@router.get("/stats")
def reseller_stats(reseller: ResellerInDB = Depends(require_reseller), g: KeydashContext = Depends(keydash_context)):
    return {"status": "success", "stats": get_reseller_stats(g, reseller.id)}


@router.get("/api-usage")
def api_usage(reseller: ResellerInDB = Depends(require_reseller), g: KeydashContext = Depends(keydash_context)):
    return {"status": "success", "stats": get_api_usage_stats(g, reseller.id)}
