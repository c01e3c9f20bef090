import logging

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.catch_error_middleware import (
    ErrorHandlerMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from core.exception_handler import HTTPErrorHandler, ValidationErrorHandler
from core.lifespan import lifespan
from core.settings import settings
from routes.application_routes import router as application_router
from routes.lease_routes import router as lease_router
from routes.manager_routes import router as manager_router
from routes.notification_routes import router as notification_router
from routes.payment_routes import router as payment_router
from routes.property_routes import router as property_router
from routes.tenant_routes import router as tenant_router

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(
    lifespan=lifespan,
    title=settings.PROJECT_NAME,
    version="1.0.0",
)

app.include_router(property_router, prefix="/properties")
app.include_router(manager_router, prefix="/managers")
app.include_router(tenant_router, prefix="/tenants")
app.include_router(application_router, prefix="/applications")
app.include_router(lease_router, prefix="/leases")
app.include_router(payment_router, prefix="/payments")
app.include_router(notification_router, prefix="/notifications")


@app.get("/", tags=["System"])
async def home():
    return {"message": "This is home route"}


@app.get("/health", tags=["System"])
async def health_check():
    return {"status": "ok"}


app.add_exception_handler(RequestValidationError, ValidationErrorHandler())
app.add_exception_handler(StarletteHTTPException, HTTPErrorHandler())

app.add_middleware(ErrorHandlerMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


if __name__ == "__main__":
    uvicorn.run(app, host="127.0.0.1", port=8001)
