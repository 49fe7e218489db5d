import os
from decimal import Decimal, InvalidOperation
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from dotenv import load_dotenv

load_dotenv()


def _get_decimal(key: str, default: str) -> Decimal:
    # Non-numeric or non-finite values fall back to the default
    try:
        value = Decimal(os.getenv(key, default))
    except InvalidOperation:
        return Decimal(default)
    return value if value.is_finite() else Decimal(default)


def _get_timezone(key: str, default: str) -> str:
    name = os.getenv(key, default)
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown {key}: {name}")
    return name


def _get_bool(key: str, default: bool = False) -> bool:
    value = os.getenv(key, str(default)).lower()
    return value in ("true", "1", "yes", "on")


# -----------------------
# Database Config
# -----------------------
DB_TYPE = os.getenv("DB_TYPE", "sqlite").lower()

if DB_TYPE == "postgres":
    DATABASE_URL = os.getenv("DATABASE_URL")
    if not DATABASE_URL:
        raise ValueError("DATABASE_URL is required for Postgres setup")
elif DB_TYPE == "sqlite":
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./restaurant.db")
else:
    raise ValueError(f"Unsupported DB_TYPE: {DB_TYPE}")

# -----------------------
# JWT Config
# -----------------------
JWT_SECRET = os.getenv("JWT_SECRET")
if not JWT_SECRET:
    raise ValueError("JWT_SECRET environment variable must be set")

JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "15"))
ADMIN_ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ADMIN_ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

# -----------------------
# Pricing Config
# -----------------------
DEFAULT_TAX_RATE = _get_decimal("DEFAULT_TAX_RATE", "15")       # percent
SERVICE_CHARGE_RATE = _get_decimal("SERVICE_CHARGE_RATE", "0")  # fraction of the discounted total
SERVICE_CHARGE_FIXED = _get_decimal("SERVICE_CHARGE_FIXED", "0")
TAX_INCLUDES_SERVICE_CHARGE = _get_bool("TAX_INCLUDES_SERVICE_CHARGE", default=False)
STORE_TIMEZONE = _get_timezone("STORE_TIMEZONE", "UTC")

# -----------------------
# Logging
# -----------------------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
