import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./vetcare.db")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Frontend origins allowed to call the API with cookies
ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    "http://localhost:3000,http://localhost:5173",
).split(",")

# Clients may cancel a pending appointment only this many hours ahead of its start
CANCELLATION_NOTICE_HOURS = int(os.getenv("CANCELLATION_NOTICE_HOURS", "24"))

# Payment methods that never carry an uploaded receipt
CASH_PAYMENT_METHODS = {
    method.strip().lower()
    for method in os.getenv("CASH_PAYMENT_METHODS", "cash,cash_on_delivery").split(",")
    if method.strip()
}
