import os
from pathlib import Path

import yaml


class Config:
    def __init__(self, filepath):
        parsed = {}
        if Path(filepath).exists():
            with open(filepath) as f:
                parsed = yaml.full_load(f).get("config") or {}

        # Essential
        self.PREFIX: str = parsed.get("prefix", "!")
        self.DISCORD_TOKEN: str = parsed.get("discord_token")
        self.DATABASE_CONNECTION: str = parsed.get(
            "database_connection", "sqlite:///voidling.db"
        )

        # Optional
        self.GUILD_ID: int = parsed.get("guild_id")
        self.COORDINATOR_ROLE_ID: int = parsed.get("coordinator_role_id")
        self.WOM_BASE_URL: str = parsed.get(
            "wom_base_url", "https://api.wiseoldman.net/v2"
        )
        self.WOM_USER_AGENT: str = parsed.get("wom_user_agent", "voidling")

        # Configuration
        self.LOG_LEVEL: str = parsed.get("log_level", "INFO")
        self.SQL_LOGGING: bool = parsed.get("log_sql", False)
        self.WOM_TIMEOUT: int = parsed.get("wom_timeout", 10)
        self.DISCORD_TIMEOUT: int = parsed.get("discord_timeout", 10)


CONFIG = Config(os.environ.get("VOIDLING_CONFIG", "config.yaml"))
