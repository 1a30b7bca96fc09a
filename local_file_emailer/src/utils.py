import os
import logging
from email.utils import parseaddr
from typing import Any, Dict, Optional

from .errors import ConfigError
from .models import Settings


def valid_field(value: Optional[str]) -> bool:
    return value is not None and value != ""


def is_valid_address(addr: Optional[str]) -> bool:
    if not valid_field(addr):
        return False
    _, email = parseaddr(addr)
    if not email or "@" not in email:
        return False
    local, domain = email.rsplit("@", 1)
    return bool(local) and bool(domain)


def read_config(path: str) -> Dict[str, Any]:
    import yaml
    try:
        with open(path, 'r', encoding='utf-8') as f:
            cfg = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e.strerror or e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(cfg, dict):
        raise ConfigError(f"Config {path} must be a mapping, got {type(cfg).__name__}")
    return cfg


def load_settings(env: Optional[Dict[str, str]] = None) -> Settings:
    """Build settings from the optional YAML file named by EMAILER_CONFIG,
    then EMAILER_* environment overrides.

    SMTP host and credentials are never taken from here. Raises ConfigError
    on an unreadable config or an unusable value.
    """
    if env is None:
        from dotenv import load_dotenv
        load_dotenv()
        env = dict(os.environ)

    cfg: Dict[str, Any] = {}
    cfg_path = env.get("EMAILER_CONFIG")
    if cfg_path:
        cfg = read_config(cfg_path)
    run_cfg = cfg.get('run', {}) or {}
    smtp_cfg = cfg.get('smtp', {}) or {}

    defaults = Settings()
    log_level = str(env.get("EMAILER_LOG_LEVEL", run_cfg.get('log_level', defaults.log_level))).upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigError(f"Unknown log level: {log_level!r}")
    timeout = env.get("EMAILER_SMTP_TIMEOUT", smtp_cfg.get('timeout', defaults.smtp_timeout))
    try:
        smtp_timeout = float(timeout)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"SMTP timeout must be a number, got {timeout!r}") from e
    return Settings(
        log_level=log_level,
        log_file=env.get("EMAILER_LOG_FILE", run_cfg.get('log_file', defaults.log_file)),
        smtp_timeout=smtp_timeout,
        charset=str(smtp_cfg.get('charset', defaults.charset)),
    )


def setup_logging(level: str, log_file: Optional[str] = None):
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level.upper())

    sh = logging.StreamHandler()
    sh.setFormatter(formatter)
    root.addHandler(sh)

    if log_file:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(formatter)
        root.addHandler(fh)
