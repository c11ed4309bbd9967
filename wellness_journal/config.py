import os

# ================================
# ENV VARIABLES
# ================================
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY")

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

# Optional external advice endpoint; when set it replaces the OpenAI call.
ADVICE_API_URL = os.getenv("ADVICE_API_URL")
ADVICE_TIMEOUT = float(os.getenv("ADVICE_TIMEOUT", "30"))

JOURNAL_TIMEZONE = os.getenv("JOURNAL_TIMEZONE", "UTC")

PORT = int(os.getenv("PORT", "10000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s %(levelname)s:%(message)s"
