import os
from dotenv import load_dotenv
load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./taskdesk.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Bearer-token check is off unless a secret is configured
JWT_SECRET = os.getenv("TASKDESK_JWT_SECRET", "")
JWT_AUDIENCE = os.getenv("TASKDESK_JWT_AUDIENCE") or None
JWT_ALGORITHMS = ["HS256"]

ALLOWED_ORIGINS = [o.strip() for o in os.getenv("ALLOWED_ORIGINS","").split(",") if o.strip()]
