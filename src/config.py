"""Runtime settings.

Decisions:
- Priority: real environment variable > project .env file > default.
- Malformed .env lines and unknown keys are skipped.
- Numbers that fail to parse fall back to their default with a warning.
"""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent
ENV_FILE = PROJECT_ROOT / '.env'

DEFAULT_DATA_FILE = PROJECT_ROOT / 'data' / 'tasks.json'
DEFAULT_MODEL = 'gpt-4o-mini'
DEFAULT_API_URL = 'https://api.openai.com/v1/chat/completions'
DEFAULT_API_TIMEOUT = 60.0
DEFAULT_PIXELS_PER_DAY = 50
MIN_PIXELS_PER_DAY = 20

KNOWN_KEYS = {
    'GANTT_DATA_FILE', 'GANTT_STORAGE', 'GANTT_PIXELS_PER_DAY', 'GANTT_FIT',
    'GANTT_MODEL', 'GANTT_API_URL', 'GANTT_API_TIMEOUT', 'GANTT_LOG_LEVEL',
    'GANTT_ALT_SCREEN', 'GANTT_PRIMARY', 'OPENAI_API_KEY',
}


@dataclass(frozen=True)
class Settings:
    data_file: Path = DEFAULT_DATA_FILE
    storage: str = 'file'
    pixels_per_day: int = DEFAULT_PIXELS_PER_DAY
    fit: bool = False
    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    api_url: str = DEFAULT_API_URL
    api_timeout: float = DEFAULT_API_TIMEOUT
    log_level: str = 'WARNING'
    alt_screen: bool = True


def truthy(value: Optional[str], default: bool = True) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off", ""}


def read_env_file(path: Path) -> Dict[str, str]:
    """Parse KEY=VALUE lines from a .env file; unknown keys are ignored."""
    overrides: Dict[str, str] = {}
    if not path.exists():
        return overrides
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        k, v = line.split('=', 1)
        k = k.strip()
        v = v.strip().strip('"').strip("'")
        if k in KNOWN_KEYS:
            overrides[k] = v
    return overrides


def _number(raw: Optional[str], default, cast, key: str):
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning('Ignoring %s=%r (not a number).', key, raw)
        return default


def load_settings(environ: Optional[Mapping[str, str]] = None,
                  env_file: Optional[Path] = None) -> Settings:
    environ = os.environ if environ is None else environ
    file_values = read_env_file(ENV_FILE if env_file is None else env_file)

    def get(key: str) -> Optional[str]:
        return environ.get(key) or file_values.get(key)

    storage = (get('GANTT_STORAGE') or 'file').strip().lower()
    if storage not in {'file', 'none'}:
        logger.warning('Unknown GANTT_STORAGE=%r; using file storage.', storage)
        storage = 'file'
    data_file = get('GANTT_DATA_FILE')
    pixels = _number(get('GANTT_PIXELS_PER_DAY'), DEFAULT_PIXELS_PER_DAY, int, 'GANTT_PIXELS_PER_DAY')
    return Settings(
        data_file=Path(data_file).expanduser() if data_file else DEFAULT_DATA_FILE,
        storage=storage,
        pixels_per_day=max(MIN_PIXELS_PER_DAY, pixels),
        fit=truthy(get('GANTT_FIT'), False),
        api_key=get('OPENAI_API_KEY') or None,
        model=get('GANTT_MODEL') or DEFAULT_MODEL,
        api_url=get('GANTT_API_URL') or DEFAULT_API_URL,
        api_timeout=_number(get('GANTT_API_TIMEOUT'), DEFAULT_API_TIMEOUT, float, 'GANTT_API_TIMEOUT'),
        log_level=(get('GANTT_LOG_LEVEL') or 'WARNING').upper(),
        alt_screen=truthy(get('GANTT_ALT_SCREEN'), True),
    )
