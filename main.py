# main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import LOG_LEVEL
from app.core.db import init_models
from app.core.logging import setup_logging
from app.routers import (
    activity_router,
    auth_router,
    customers_router,
    discount_router,
    discount_validate_router,
    orders_router,
    settings_router,
    tax_rules_router,
)


app = FastAPI(
    title="Restaurant Ordering API",
    description="FastAPI backend for menu checkout, tax rules and discount codes",
    version="0.1.0",
)
# CORS setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # adjust for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Health check endpoint
@app.get("/", tags=["Health"])
async def health_check():
    return {"status": "ok", "message": "Backend is running"}

# Register routers
app.include_router(auth_router)
app.include_router(tax_rules_router)
app.include_router(discount_router)
app.include_router(discount_validate_router)
app.include_router(customers_router)
app.include_router(settings_router)
app.include_router(orders_router)
app.include_router(activity_router)


@app.on_event("startup")
async def on_startup():
    setup_logging(LOG_LEVEL)
    await init_models()
