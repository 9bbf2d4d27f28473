import os
from dotenv import load_dotenv

# =========================================================
# .env LOADING
# Real environment variables win over the .env file
# =========================================================
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
ENV_PATH = os.path.join(PROJECT_ROOT, ".env")

load_dotenv(dotenv_path=ENV_PATH, override=False)

# =========================================================
# LLM BACKEND SELECTION
# =========================================================
# Options:
#   "gemini" → Google Generative Language REST API (RECOMMENDED)
#   "api"    → OpenAI-compatible server (local GGUF, no grounding)
#   "mock"   → canned lesson, no network
LLM_BACKEND = os.getenv("LLM_BACKEND", "gemini").strip().lower()

MOCK_LLM = LLM_BACKEND == "mock"

if LLM_BACKEND not in ("gemini", "api", "mock"):
    raise RuntimeError(
        f"Unknown LLM_BACKEND={LLM_BACKEND!r} (expected gemini, api or mock)"
    )

# =========================================================
# GEMINI CONFIG (PRIMARY MODE)
# =========================================================
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "").strip()
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash").strip()

# Google Search grounding → citations shown under the lesson
ENABLE_GROUNDING = os.getenv("ENABLE_GROUNDING", "1").strip() == "1"

if LLM_BACKEND == "gemini" and not GEMINI_API_KEY:
    raise RuntimeError("LLM_BACKEND=gemini but GEMINI_API_KEY is missing")

# =========================================================
# OPENAI-COMPATIBLE CONFIG (SECONDARY MODE)
# =========================================================
LOCAL_LLM_API_KEY = os.getenv("LOCAL_LLM_API_KEY", "").strip()
LOCAL_LLM_BASE_URL = os.getenv("LOCAL_LLM_BASE_URL", "").strip()
LOCAL_LLM_MODEL = os.getenv("LOCAL_LLM_MODEL", "gguf-local").strip()

if LLM_BACKEND == "api":
    if not LOCAL_LLM_API_KEY or not LOCAL_LLM_BASE_URL:
        raise RuntimeError(
            "LLM_BACKEND=api but LOCAL_LLM_API_KEY or LOCAL_LLM_BASE_URL is missing"
        )

# =========================================================
# GENERATION LIMITS
# =========================================================
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.7"))
# 0 = no output cap
LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "0"))
LLM_TIMEOUT = int(os.getenv("LLM_TIMEOUT", "120"))

# =========================================================
# WEB APP
# =========================================================
SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
PORT = int(os.getenv("PORT", "5000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper()


def summary() -> dict:
    """Non-secret settings, logged once at startup."""
    return {
        "LLM_BACKEND": LLM_BACKEND,
        "MOCK_LLM": MOCK_LLM,
        "GEMINI_MODEL": GEMINI_MODEL if LLM_BACKEND == "gemini" else "N/A",
        "ENABLE_GROUNDING": ENABLE_GROUNDING if LLM_BACKEND == "gemini" else "N/A",
        "LOCAL_LLM_BASE_URL": LOCAL_LLM_BASE_URL if LLM_BACKEND == "api" else "N/A",
        "LLM_TIMEOUT": LLM_TIMEOUT,
        "LOG_LEVEL": LOG_LEVEL,
    }
