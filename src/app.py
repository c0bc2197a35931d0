"""Storefront Orders FastAPI application.

Builds the database, handlers and notification dispatcher once per process and
exposes them to the routers through ``app.state``. Endpoints are synchronous, so
FastAPI runs each request in its worker thread pool with its own session.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

import asyncio
from contextlib import asynccontextmanager, suppress

import structlog
from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from catalog.api import product_router
from catalog.product.management import ProductManagementHandler
from identity.api import address_router
from identity.customer.reconciliation import IdentityReconciler
from notifications.api import notification_router
from notifications.notification.dispatch import NotificationDispatcher
from ordering.api.routes import checkout_router, order_router
from ordering.checkout.checkout import CheckoutHandler
from ordering.order.errors import OrderFailed
from ordering.order.placement import PlaceOrderHandler
from ordering.order.status import OrderStatusHandler
from shared.config import load_config
from shared.database import Database
from shared.exceptions import (
    InsufficientStock,
    InvalidOperationError,
    ObjectNotFoundError,
    ValidationError,
)
from shared.logging import configure_logging

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------
def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError):  # noqa: ARG001
        return JSONResponse(status_code=400, content={"error": exc.messages})

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):  # noqa: ARG001
        messages: dict[str, list[str]] = {}
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"] if part != "body")
            messages.setdefault(field or "body", []).append(error["msg"])
        return JSONResponse(status_code=400, content={"error": messages})

    @app.exception_handler(ObjectNotFoundError)
    async def not_found(request: Request, exc: ObjectNotFoundError):  # noqa: ARG001
        return JSONResponse(status_code=404, content={"error": exc.messages})

    @app.exception_handler(InsufficientStock)
    async def insufficient_stock(request: Request, exc: InsufficientStock):  # noqa: ARG001
        return JSONResponse(
            status_code=409,
            content={"error": exc.messages, "product_id": exc.product_id},
        )

    @app.exception_handler(InvalidOperationError)
    async def invalid_operation(request: Request, exc: InvalidOperationError):  # noqa: ARG001
        return JSONResponse(status_code=409, content={"error": exc.messages})

    @app.exception_handler(OrderFailed)
    async def order_failed(request: Request, exc: OrderFailed):  # noqa: ARG001
        return JSONResponse(status_code=503, content={"error": {"order": [exc.reason]}})


# ---------------------------------------------------------------------------
# Notification retries
# ---------------------------------------------------------------------------
async def retry_notifications(dispatcher: NotificationDispatcher, interval: float) -> None:
    """Re-send failed notifications every ``interval`` seconds until cancelled."""
    while True:
        await asyncio.sleep(interval)
        try:
            await run_in_threadpool(dispatcher.retry_failed)
        except Exception:
            logger.exception("Notification retry pass failed")


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
def create_app(
    config: dict | None = None,
    database: Database | None = None,
    dispatcher: NotificationDispatcher | None = None,
) -> FastAPI:
    config = config or load_config()

    log_conf = config["logging"]
    configure_logging(
        level=log_conf.get("level"),
        log_dir=log_conf.get("log_dir") or None,
        log_file_prefix=log_conf.get("log_file_prefix", "storefront"),
        env=config["env"],
    )

    database = database or Database.from_config(config)
    notify_conf = config["notifications"]
    dispatcher = dispatcher or NotificationDispatcher(
        store_email=notify_conf["store_email"],
        max_failed=notify_conf["max_failed"],
        max_attempts=notify_conf["max_attempts"],
    )
    reconciler = IdentityReconciler(
        database,
        require_verified_email=config["identity"]["require_verified_email"],
    )
    placement = PlaceOrderHandler(
        database,
        dispatcher=dispatcher,
        reconciler=reconciler,
        flat_shipping_fee=config["ordering"]["flat_shipping_fee"],
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):  # noqa: ARG001
        retry_task = None
        if notify_conf["retry_interval"] > 0:
            retry_task = asyncio.create_task(retry_notifications(dispatcher, notify_conf["retry_interval"]))
        yield
        if retry_task is not None:
            retry_task.cancel()
            with suppress(asyncio.CancelledError):
                await retry_task
        database.dispose()

    app = FastAPI(
        title="Storefront Orders API",
        description="Order placement, stock consistency and guest checkout",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.database = database
    app.state.dispatcher = dispatcher
    app.state.placement = placement
    app.state.checkout = CheckoutHandler(placement)
    app.state.order_status = OrderStatusHandler(database, dispatcher=dispatcher)
    app.state.product_management = ProductManagementHandler(database)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _register_error_handlers(app)

    # -----------------------------------------------------------------------
    # Routers
    # -----------------------------------------------------------------------
    app.include_router(checkout_router)
    app.include_router(order_router)
    app.include_router(address_router)
    app.include_router(product_router)
    app.include_router(notification_router)

    # -----------------------------------------------------------------------
    # Health
    # -----------------------------------------------------------------------
    @app.get("/health")
    def health():
        return JSONResponse(
            content={
                "status": "ok",
                "env": config["env"],
                "failed_notifications": len(dispatcher.failed),
            }
        )

    logger.info("Application configured", env=config["env"], database=database.engine.url.render_as_string())
    return app


app = create_app()
