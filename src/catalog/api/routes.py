"""FastAPI endpoints for the Catalog domain."""

from fastapi import APIRouter, Depends, Query

from catalog.api.schemas import CreateProductRequest, ProductResponse, UpdateProductRequest
from catalog.product.management import (
    CreateProduct,
    ProductManagementHandler,
    UpdateProduct,
    get_product,
    search_by_sku,
)
from shared.api import Caller, get_database, get_state, require_admin
from shared.database import Database

product_router = APIRouter(prefix="/products", tags=["products"])

_handler = get_state("product_management")


# --- Product endpoints ---


@product_router.post("", status_code=201, response_model=ProductResponse)
def create_product(
    body: CreateProductRequest,
    _: Caller = Depends(require_admin),
    handler: ProductManagementHandler = Depends(_handler),
) -> ProductResponse:
    command = CreateProduct(
        title=body.title,
        price=body.price,
        discounted_price=body.discounted_price,
        stock=body.stock,
        stock_status=body.stock_status,
        category_id=body.category_id,
        default_color=body.default_color,
        default_size=body.default_size,
        variants=[variant.model_dump() for variant in body.variants],
    )
    product = handler.create_product(command)
    return ProductResponse.model_validate(product)


@product_router.get("/search", response_model=list[ProductResponse])
def search_products(
    sku: str = Query(..., min_length=1),
    database: Database = Depends(get_database),
) -> list[ProductResponse]:
    with database.transaction() as session:
        return [ProductResponse.model_validate(product) for product in search_by_sku(session, sku)]


@product_router.get("/{product_id}", response_model=ProductResponse)
def product_detail(product_id: str, database: Database = Depends(get_database)) -> ProductResponse:
    with database.transaction() as session:
        return ProductResponse.model_validate(get_product(session, product_id))


@product_router.put("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: str,
    body: UpdateProductRequest,
    _: Caller = Depends(require_admin),
    handler: ProductManagementHandler = Depends(_handler),
) -> ProductResponse:
    changes = body.model_dump(exclude_unset=True)
    if "variants" in changes:
        changes["variants"] = changes["variants"] or []
    product = handler.update_product(UpdateProduct(product_id=product_id, **changes))
    return ProductResponse.model_validate(product)
