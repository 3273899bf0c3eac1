# config.py
import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

# Engine timing, in seconds
TICK_SECONDS = float(os.getenv("TICK_SECONDS", 5))
DELIVERY_DELAY_SECONDS = float(os.getenv("DELIVERY_DELAY_SECONDS", 2.5))
BANNER_TIMEOUT_SECONDS = float(os.getenv("BANNER_TIMEOUT_SECONDS", 7))

# Booking rules
FINE_PER_DAY = int(os.getenv("FINE_PER_DAY", 50))
MAX_BOOKING_DAYS = int(os.getenv("MAX_BOOKING_DAYS", 7))

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite://")

# Assistant
ASSISTANT_MODEL = os.getenv("ASSISTANT_MODEL", "gemini-2.5-flash")
ASSISTANT_TEMPERATURE = float(os.getenv("ASSISTANT_TEMPERATURE", 0.7))


@lru_cache(maxsize=1)
def get_model_client():
    """Model client configuration, built on first use."""
    from autogen_ext.models.openai import OpenAIChatCompletionClient

    return OpenAIChatCompletionClient(
        model=ASSISTANT_MODEL,
        api_key=os.getenv("GEMINI_API_KEY"),
        temperature=ASSISTANT_TEMPERATURE,
    )
