import os
import logging
import yaml
import pytz
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from dotenv import load_dotenv

from .errors import ConfigError

CONFIG_PATH = os.environ.get(
    "NT_CONFIG",
    os.path.join(os.path.dirname(os.path.dirname(__file__)), "..", "config.yaml")
)

TOKEN_PREFIXES = ("secret_", "ntn_")

load_dotenv()

APP_DEFAULTS = {"timezone": "UTC", "log_level": "INFO"}
NOTION_DEFAULTS = {
    "api_version": "2022-06-28",
    "page_size": 100,
    "company_property": "Company",
    "timeout": 30,
    "notes_database_query": "Leetcode",
    "notes_property": "Notes",
}

@dataclass
class Settings:
    app: Dict[str, Any]
    notion: Dict[str, Any]
    review: Dict[str, Any] = field(default_factory=dict)
    notion_token: Optional[str] = None

def is_log_level(name: Any) -> bool:
    # getLevelName maps unknown names to "Level <name>" instead of an int
    return isinstance(name, str) and isinstance(logging.getLevelName(name.upper()), int)

def _validate(cfg: Settings) -> List[str]:
    problems = []
    token = cfg.notion_token or ""
    if not token:
        problems.append("NOTION_TOKEN: required")
    elif not token.startswith(TOKEN_PREFIXES):
        problems.append(f"NOTION_TOKEN: must start with one of {', '.join(TOKEN_PREFIXES)}")
    if not cfg.notion.get("application_database_id"):
        problems.append("notion.application_database_id: required")
    page_size = cfg.notion.get("page_size")
    if not isinstance(page_size, int) or not 1 <= page_size <= 100:
        problems.append("notion.page_size: must be an integer between 1 and 100")
    if cfg.app.get("timezone") not in pytz.all_timezones_set:
        problems.append(f"app.timezone: unknown timezone {cfg.app.get('timezone')!r}")
    if not is_log_level(cfg.app.get("log_level")):
        problems.append(f"app.log_level: unknown level {cfg.app.get('log_level')!r}")
    return problems

def load_settings(path: Optional[str] = None) -> Settings:
    path = path or CONFIG_PATH
    try:
        with open(path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except FileNotFoundError:
        raise ConfigError(f"Configuration file missing: {path}") from None
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in configuration file: {path}") from exc

    # optional blocks fall back to defaults
    app = {**APP_DEFAULTS, **(cfg.get("app") or {})}
    notion = {**NOTION_DEFAULTS, **(cfg.get("notion") or {})}
    # environment wins over the yaml file for database ids
    for key, env_name in (
        ("application_database_id", "APPLICATION_DATABASE_ID"),
        ("subscription_database_id", "SUBSCRIPTION_DATABASE_ID"),
        ("notes_database_id", "NOTES_DATABASE_ID"),
    ):
        if os.environ.get(env_name):
            notion[key] = os.environ[env_name]

    settings = Settings(
        app=app,
        notion=notion,
        review=cfg.get("review") or {},
        notion_token=os.environ.get("NOTION_TOKEN", "").strip() or None,
    )
    problems = _validate(settings)
    if problems:
        raise ConfigError("Invalid configuration:\n" + "\n".join(problems))
    return settings
