"""
Runtime settings, read once from the environment (and a local .env file).

- METRIC_BACKEND: "simulated" (heuristic stand-in) or "agent" (vision LLM)
- AGENT_*: model name and retry policy of the vision LLM backend
- SIMULATED_*: latency of the stand-in extractor, in seconds
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

METRIC_BACKEND = os.getenv("GLOW_METRIC_BACKEND", "simulated").lower()

AGENT_MODEL = os.getenv("GLOW_AGENT_MODEL", "google-gla:gemini-2.5-pro")
AGENT_MAX_RETRIES = int(os.getenv("GLOW_AGENT_MAX_RETRIES", "2"))
AGENT_RETRY_DELAY = float(os.getenv("GLOW_AGENT_RETRY_DELAY", "60"))

SIMULATED_LATENCY_MIN = float(os.getenv("GLOW_SIMULATED_LATENCY_MIN", "1.5"))
SIMULATED_LATENCY_MAX = float(os.getenv("GLOW_SIMULATED_LATENCY_MAX", "2.5"))
MODEL_LOAD_DELAY = float(os.getenv("GLOW_MODEL_LOAD_DELAY", "0.8"))

CATALOG_PATH = Path(
    os.getenv("GLOW_CATALOG_PATH", str(Path(__file__).parent / "data" / "products.json"))
)

CORS_ORIGINS = [origin.strip() for origin in os.getenv("GLOW_CORS_ORIGINS", "*").split(",")]
