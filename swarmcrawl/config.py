import os
import logging
from pathlib import Path
from typing import Optional

try:
	from dotenv import load_dotenv
except ImportError:
	logging.warning("python-dotenv not available; using environment variables only")
else:
	loaded = load_dotenv()
	if not loaded and Path(".env").exists():
		raise RuntimeError(".env file present but failed to load")


def get_str_env(name: str, default: str) -> str:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return default
	return raw


def get_optional_str_env(name: str) -> Optional[str]:
	raw = os.getenv(name)
	if raw is None or raw.strip() == "":
		return None
	return raw


def get_int_env(name: str, default: int) -> int:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return default
	try:
		return int(raw)
	except ValueError:
		logging.exception("Invalid %s: %r", name, raw)
		return default


def get_float_env(name: str, default: float) -> float:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return default
	try:
		return float(raw)
	except ValueError:
		logging.exception("Invalid %s: %r", name, raw)
		return default


DATABASE_URL = get_str_env("DATABASE_URL", "sqlite:///swarmcrawl.db")
USER_AGENT = get_str_env("USER_AGENT", "SwarmCrawl/0.1")


def store_retry_attempts() -> int:
	return get_int_env("SWARMCRAWL_STORE_RETRIES", 3)


def store_retry_delay_seconds() -> float:
	return get_float_env("SWARMCRAWL_STORE_RETRY_DELAY", 0.2)


def log_level() -> str:
	return get_str_env("SWARMCRAWL_LOG_LEVEL", "INFO").strip().upper()
