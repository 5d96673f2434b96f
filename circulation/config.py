import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

@dataclass
class Settings:
    # State log settings
    db_file: str = os.getenv("LIBRARY_DB_FILE", "state.db")

    # Output settings: 'plain' (default) or 'rich'
    output_mode: str = os.getenv("LIBRARY_OUTPUT", "plain")

    # Logging settings
    log_level: str = os.getenv("LOG_LEVEL", "WARNING")
    debug: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "yes")


settings = Settings()
