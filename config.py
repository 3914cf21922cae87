import os

from dotenv import load_dotenv

load_dotenv()

# Storage
DATABASE_URL = os.getenv("DATABASE_URL")
DATABASE_NAME = os.getenv("DATABASE_NAME")
STORAGE_DIR = os.getenv("STORAGE_DIR", ".texpress")

# Auth
ADMIN_PASSCODE = os.getenv("ADMIN_PASSCODE", "1212")
JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change")
ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24 * 7  # 7 days

# Description generation
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

# Checkout hand-off
CHECKOUT_HANDLE = os.getenv("CHECKOUT_HANDLE", "khaled.et.9")

PLACEHOLDER_IMAGE = os.getenv("PLACEHOLDER_IMAGE", "https://picsum.photos/id/1/600/600")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
PORT = int(os.getenv("PORT", 8000))
