"""
Address Book Routes
=====================
Saved shipping addresses (list, create, update, delete) for the checkout page.
"""

from typing import Dict, Any

import httpx
from fastapi import APIRouter, Request, Depends
from fastapi.responses import JSONResponse

from config.api import get_api
from common.exceptions import StorefrontError, error_json
from common.security import csrf_check
from modules.auth.deps import require_customer
from modules.customer.service import address_service

router = APIRouter(prefix="/api/addresses", tags=["addresses"])


@router.get("")
def list_addresses(
    api: httpx.Client = Depends(get_api),
    me=Depends(require_customer),
):
    try:
        addresses = address_service.list_addresses(api)
    except StorefrontError as e:
        return error_json(e)
    return JSONResponse({"addresses": [a.to_payload() for a in addresses]})


@router.post("")
def create_address(
    data: Dict[str, Any],
    request: Request,
    api: httpx.Client = Depends(get_api),
    me=Depends(require_customer),
):
    csrf_check(request, request.headers.get("X-CSRF-Token"))
    try:
        address = address_service.create_address(api, data)
    except StorefrontError as e:
        return error_json(e)
    return JSONResponse({"status": "success", "address": address.to_payload()}, status_code=201)


@router.put("/{address_id}")
def update_address(
    address_id: int,
    data: Dict[str, Any],
    request: Request,
    api: httpx.Client = Depends(get_api),
    me=Depends(require_customer),
):
    csrf_check(request, request.headers.get("X-CSRF-Token"))
    try:
        address = address_service.update_address(api, address_id, data)
    except StorefrontError as e:
        return error_json(e)
    return JSONResponse({"status": "success", "address": address.to_payload()})


@router.delete("/{address_id}")
def delete_address(
    address_id: int,
    request: Request,
    api: httpx.Client = Depends(get_api),
    me=Depends(require_customer),
):
    csrf_check(request, request.headers.get("X-CSRF-Token"))
    try:
        address_service.delete_address(api, address_id)
    except StorefrontError as e:
        return error_json(e)
    return JSONResponse({"status": "success"})
