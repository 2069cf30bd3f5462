"""HTTP mapping of domain errors.

- ``ValidationError``       → 400 (bad input)
- ``BusinessRuleViolation`` → 422 (well-formed, but the restaurant says no)
- ``ObjectNotFoundError``   → 404 (stale client state)

Starlette picks the most specific registered class, so the business-rule
handler wins over the generic validation one.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError
from protean.integrations.fastapi import register_exception_handlers as register_protean_handlers

from takeaway.exceptions import BusinessRuleViolation


async def business_rule_handler(request: Request, exc: BusinessRuleViolation) -> JSONResponse:
    return JSONResponse(status_code=422, content={"error": exc.messages})


async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    messages = getattr(exc, "messages", None) or {"_entity": [str(exc.args[0]) if exc.args else "Not found"]}
    return JSONResponse(status_code=404, content={"error": messages})


def register_exception_handlers(app: FastAPI) -> None:
    register_protean_handlers(app)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(BusinessRuleViolation, business_rule_handler)
