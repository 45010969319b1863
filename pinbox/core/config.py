
import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv(override=True)

@dataclass
class Settings:
    UPLOADS_DIR: str = os.getenv("UPLOADS_DIR", "uploads")
    PINS_FILE: str = os.getenv("PINS_FILE", "pins.json")
    MIN_PIN_LENGTH: int = int(os.getenv("MIN_PIN_LENGTH", "4"))
    LOG_DIR: str = os.getenv("LOG_DIR", "logs")
    STATIC_DIR: str = os.getenv("STATIC_DIR", "static")
    CHUNK_SIZE: int = int(os.getenv("CHUNK_SIZE", "65536"))

settings = Settings()
