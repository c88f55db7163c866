"""
Customer Module - Address Book Service
========================================
Saved shipping addresses, stored by the user service.
Addresses are validated locally before they are sent.
"""

import logging
from typing import List, Optional

import httpx

from config.api import request_json
from modules.checkout.models import Address
from modules.checkout.validation import validate_address

logger = logging.getLogger("storefront.customer")


class AddressService:

    def list_addresses(self, api: httpx.Client) -> List[Address]:
        data = request_json(api, "GET", "/address") or []
        return [Address.from_api(d) for d in data if isinstance(d, dict)]

    def get_address(self, api: httpx.Client, address_id: int) -> Optional[Address]:
        return next((a for a in self.list_addresses(api) if a.id == address_id), None)

    def create_address(self, api: httpx.Client, values: dict) -> Address:
        clean = validate_address(values)
        payload = Address(**clean).to_payload()
        payload.pop("id")
        data = request_json(api, "POST", "/address/create", json=payload)
        address = Address.from_api(data) if isinstance(data, dict) else Address(**clean)
        logger.info(f"Address created: {address.id}")
        return address

    def update_address(self, api: httpx.Client, address_id: int, values: dict) -> Address:
        clean = validate_address(values)
        payload = Address(id=address_id, **clean).to_payload()
        data = request_json(api, "PUT", f"/address/{address_id}", json=payload)
        logger.info(f"Address updated: {address_id}")
        return Address.from_api(data) if isinstance(data, dict) else Address(id=address_id, **clean)

    def delete_address(self, api: httpx.Client, address_id: int):
        request_json(api, "DELETE", f"/address/{address_id}")
        logger.info(f"Address deleted: {address_id}")


# Singleton
address_service = AddressService()
