# storefront/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .logging_config import RequestLoggingMiddleware, setup_logging
from .routes import currencies, pricing, promos
from .settings import settings

logger = setup_logging(settings.service_name, settings.log_level)

app = FastAPI(title="Storefront Pricing API")

app.add_middleware(RequestLoggingMiddleware, service_name=settings.service_name)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(pricing.router)
app.include_router(promos.router)
app.include_router(currencies.router)

@app.get("/")
def root():
    return {"message": "Storefront pricing API is running", "baseCurrency": settings.base_currency}

@app.on_event("startup")
def _startup_log_config():
    logger.info(
        "pricing config loaded: base=%s service_fee=%s tax=%s tiers=%s currencies=%d",
        settings.base_currency,
        settings.service_fee_rate,
        settings.tax_rate,
        sorted(settings.delivery_fees),
        len(settings.exchange_rates),
    )
