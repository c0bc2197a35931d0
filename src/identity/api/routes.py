"""FastAPI endpoints for the Identity domain: the address book."""

from fastapi import APIRouter, Depends

from identity.api.schemas import AddressRequest, AddressResponse
from identity.customer.addresses import AddressDetails, address_for_user
from identity.customer.reconciliation import attach_address, create_guest_address
from shared.api import get_database, require_caller
from shared.database import Database
from shared.exceptions import ObjectNotFoundError

address_router = APIRouter(prefix="/addresses", tags=["addresses"])


@address_router.get("/me", response_model=AddressResponse)
def my_address(
    user_id: str = Depends(require_caller),
    database: Database = Depends(get_database),
) -> AddressResponse:
    with database.transaction() as session:
        address = address_for_user(session, user_id)
        if address is None:
            raise ObjectNotFoundError({"address": ["No address on file"]})
        return AddressResponse.model_validate(address)


@address_router.put("/me", response_model=AddressResponse)
def upsert_my_address(
    body: AddressRequest,
    user_id: str = Depends(require_caller),
    database: Database = Depends(get_database),
) -> AddressResponse:
    details = AddressDetails.from_payload(body.model_dump())
    address = database.run_in_transaction(attach_address, user_id, details)
    return AddressResponse.model_validate(address)


@address_router.post("", status_code=201, response_model=AddressResponse)
def create_address(
    body: AddressRequest,
    user_id: str = Depends(require_caller),
    database: Database = Depends(get_database),
) -> AddressResponse:
    details = AddressDetails.from_payload(body.model_dump())
    address = database.run_in_transaction(attach_address, user_id, details)
    return AddressResponse.model_validate(address)


@address_router.post("/guest", status_code=201, response_model=AddressResponse)
def create_guest(body: AddressRequest, database: Database = Depends(get_database)) -> AddressResponse:
    details = AddressDetails.from_payload(body.model_dump())
    address = database.run_in_transaction(create_guest_address, details)
    return AddressResponse.model_validate(address)
