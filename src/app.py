"""Takeaway FastAPI application.

Processes commands synchronously via HTTP inside the takeaway domain
context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay is applied:
#   - "test"       → event_processing = "sync"  (cart/coupon reactions fire after commit)
#   - "production" → event_processing = "async" (reactions fire via Engine)
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from takeaway.domain import takeaway  # noqa: E402
from takeaway.utils.logging import bind_request_context, clear_request_context

takeaway.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Takeaway API",
    description="Restaurant ordering — cart, orders, coupons and menu",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the Protean domain context and bind the request to the log context."""
    bind_request_context(request.method, request.url.path, request.headers.get("X-Session-Id"))
    try:
        with takeaway.domain_context():
            response = await call_next(request)
    finally:
        clear_request_context()
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from takeaway.api import (  # noqa: E402
    cart_router,
    coupon_router,
    menu_router,
    order_router,
    register_exception_handlers,
)

app.include_router(cart_router)
app.include_router(order_router)
app.include_router(coupon_router)
app.include_router(menu_router)
register_exception_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": takeaway.name})
