# noqa: E402
import os
import sys
from pathlib import Path
from dotenv import load_dotenv

# Under pytest only tests/.env.test is read
if "pytest" in sys.modules or os.environ.get("TESTING") == "True":
    env_test = Path(__file__).resolve().parent.parent / "tests" / ".env.test"
    if env_test.exists():
        load_dotenv(env_test, override=True)
        print(f" Test settings loaded from {env_test}")

TESTING = os.environ.get("TESTING") == "True" or "pytest" in sys.modules
FLASK_ENV = os.environ.get("FLASK_ENV")

PRODUCTION_HOST_MARKERS = (
    "rlwy.net",
    "railway.internal",
    "amazonaws.com",
    "azure.com",
    "supabase.co",
    "production",
    "live",
)
TEST_HOST_MARKERS = ("sqlite://", "localhost", "127.0.0.1", "test")

DEV_DATABASE_URL = "sqlite:///sniprewards_dev.db"


def is_production_database(db_url: str) -> bool:
    """True when the URL points at a hosted/production database."""
    lowered = (db_url or "").lower()
    return any(marker in lowered for marker in PRODUCTION_HOST_MARKERS)


def is_test_database(db_url: str) -> bool:
    lowered = (db_url or "").lower()
    return any(marker in lowered for marker in TEST_HOST_MARKERS)


def mask_database_url(db_url: str) -> str:
    """Hide credentials before a URL is printed."""
    if not db_url:
        return "not configured"
    if "@" not in db_url:
        return db_url
    scheme, _, rest = db_url.partition("://")
    return f"{scheme}://****:****@{rest.split('@', 1)[1]}"


def _test_database_url() -> str:
    url = os.environ.get("DATABASE_TEST_URL") or "sqlite://"

    if is_production_database(url):
        print(f" Refusing to run tests against {mask_database_url(url)}")
        sys.exit(1)
    if not is_test_database(url):
        print(f"  DATABASE_TEST_URL={mask_database_url(url)} is not obviously a test database")

    # Tests must never reach the live database through DATABASE_URL either
    if is_production_database(os.environ.get("DATABASE_URL", "")):
        os.environ.pop("DATABASE_URL")
        print("  DATABASE_URL points at production; removed for this test run")
    return url


def _app_database_url() -> str:
    url = os.environ.get("DATABASE_URL")
    if url:
        if is_production_database(url):
            print(f"  Connected to production database {mask_database_url(url)}")
        return url
    if FLASK_ENV == "development":
        print(f"  DATABASE_URL not set, falling back to {DEV_DATABASE_URL}")
        return DEV_DATABASE_URL
    raise ValueError("DATABASE_URL must be set outside development and testing")


url = _test_database_url() if TESTING or FLASK_ENV == "testing" else _app_database_url()

# PyMySQL is the only MySQL driver installed
if url.startswith("mysql://"):
    url = "mysql+pymysql://" + url[len("mysql://"):]

FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://localhost:3000")

print(
    f" {FLASK_ENV or ('testing' if TESTING else 'production')} mode | "
    f"database: {mask_database_url(url)} | frontend: {FRONTEND_URL}"
)


class Config:
    SQLALCHEMY_DATABASE_URI = url
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = os.environ.get("SECRET_KEY", "sniprewards-dev-secret")
    TESTING = TESTING

    # Bearer tokens
    TOKEN_TTL_HOURS = int(os.environ.get("TOKEN_TTL_HOURS", 1))

    # Origin baked into salon QR payloads
    FRONTEND_URL = FRONTEND_URL
    RECENT_VISITS_LIMIT = int(os.environ.get("RECENT_VISITS_LIMIT", 5))
