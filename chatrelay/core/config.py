# chatrelay/core/config.py
import os
from typing import List
from dotenv import load_dotenv

class Settings:
    """
    Setup environment variables.
        - HOST / PORT where uvicorn binds the relay
        - CORS_ORIGINS comma separated list of allowed origins ("*" for any)
        - HISTORY_LIMIT how many recent messages each room keeps for backfill
    """

    # Load environment variables from the .env file
    load_dotenv()

    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "5000"))

    CORS_ORIGINS: List[str] = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "*").split(",")
        if origin.strip()
    ]

    HISTORY_LIMIT: int = int(os.getenv("HISTORY_LIMIT", "100"))

settings = Settings()
