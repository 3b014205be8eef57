# storefront/utils/settings.py
import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./storefront.db")

# local | remote
STORE_BACKEND = os.getenv("STORE_BACKEND", "local")
REMOTE_API_URL = os.getenv("REMOTE_API_URL", "http://localhost:3000")
REMOTE_TIMEOUT = float(os.getenv("REMOTE_TIMEOUT", 5))

# pusty REDIS_URL wylacza blokady rekordow
REDIS_URL = os.getenv("REDIS_URL", "")
CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", REDIS_URL or "memory://")
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", "cache+memory://")
CELERY_TASK_ALWAYS_EAGER = _flag("CELERY_TASK_ALWAYS_EAGER", "true")
RECONCILE_INTERVAL_SECONDS = float(os.getenv("RECONCILE_INTERVAL_SECONDS", 60))
# 0 = wylicz z REMOTE_TIMEOUT (patrz lock_service.orders_lock_ttl)
ORDERS_LOCK_TTL_SECONDS = int(os.getenv("ORDERS_LOCK_TTL_SECONDS", 0))
LOCK_TTL_MARGIN_SECONDS = int(os.getenv("LOCK_TTL_MARGIN_SECONDS", 5))

CATALOG_SEED = int(os.getenv("CATALOG_SEED", 42))
MAX_BANNERS = int(os.getenv("MAX_BANNERS", 10))

ADMIN_DEFAULT_USERNAME = os.getenv("ADMIN_DEFAULT_USERNAME", "admin")
ADMIN_DEFAULT_PASSWORD = os.getenv("ADMIN_DEFAULT_PASSWORD", "admin123")
ALLOW_TERMINAL_STATUS_CHANGE = _flag("ALLOW_TERMINAL_STATUS_CHANGE")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
