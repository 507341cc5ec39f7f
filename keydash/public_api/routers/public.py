from fastapi import APIRouter, Depends

from keydash.core import KeydashContext, verify_key, check_key_status
from keydash.datatypes import VerifyRequest
from ..dependencies import keydash_context


router = APIRouter()


@router.post("/verify")
def verify(request: VerifyRequest, g: KeydashContext = Depends(keydash_context)):
    result = verify_key(g, request.key, request.hwid)
    return {"status": "success", "message": "Key verified successfully", "data": result}


@router.get("/key-status/{key}")
def key_status(key: str, g: KeydashContext = Depends(keydash_context)):
    report = check_key_status(g, key)
    return {"status": "success", "data": report.model_dump(by_alias=True, exclude_none=True, mode="json")}
