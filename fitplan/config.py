import os
from dotenv import load_dotenv

load_dotenv()

SUPABASE_URL = os.getenv("SUPABASE_URL")
# service role key bypasses row level security; the anon key works for a
# single signed-in client
SUPABASE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY") or os.getenv("SUPABASE_ANON_KEY")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

MAX_ADVANCE_ATTEMPTS = int(os.getenv("FITPLAN_MAX_ADVANCE_ATTEMPTS", "5"))

# completed sessions remembered per process to drop duplicate submits
HANDLED_SESSION_TTL = int(os.getenv("FITPLAN_HANDLED_SESSION_TTL", "3600"))
HANDLED_SESSION_MAX = int(os.getenv("FITPLAN_HANDLED_SESSION_MAX", "10000"))
