"""
Server Configuration

Settings come from the environment (a .env file is honoured) and may be
overridden on the command line.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load environment variables
load_dotenv()

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000


class ServerSettings(BaseModel):
    """Runtime settings for the tool server."""

    host: str = DEFAULT_HOST
    port: int = Field(DEFAULT_PORT, ge=0, le=65535, description="0 binds an ephemeral port")
    log_level: str = "INFO"
    shutdown_grace_seconds: float = Field(5.0, ge=0, description="Wait for open connections on shutdown")

    @classmethod
    def from_env(cls) -> "ServerSettings":
        return cls(
            host=os.getenv("TOOL_SERVER_HOST", DEFAULT_HOST),
            port=int(os.getenv("TOOL_SERVER_PORT", DEFAULT_PORT)),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            shutdown_grace_seconds=float(os.getenv("SHUTDOWN_GRACE_SECONDS", "5")),
        )
