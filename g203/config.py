"""
G203 LED — runtime settings.

Resolved from defaults, then ``G203_*`` environment variables, then CLI
flags (applied by ``g203.cli``).
"""

import logging
import os
from dataclasses import dataclass, replace
from typing import Optional

from g203.errors import ValidationError
from g203.protocol import G203_PID, G203_VID

ENV_VID = "G203_VID"
ENV_PID = "G203_PID"
ENV_LED_PATH = "G203_LED_PATH"
ENV_CONFIG_PATH = "G203_CONFIG_PATH"
ENV_LOG_LEVEL = "G203_LOG_LEVEL"


def parse_int(text):
    """Parse '0x046D' or '1133'."""
    try:
        value = int(str(text).strip(), 0)
    except ValueError:
        raise ValidationError(f"Not an integer: '{text}'") from None
    if not 0 <= value <= 0xFFFF:
        raise ValidationError(f"USB id out of range: '{text}'")
    return value


def parse_log_level(text):
    level = logging.getLevelName(str(text).strip().upper())
    if not isinstance(level, int):
        raise ValidationError(f"Unknown log level: '{text}'")
    return level


@dataclass(frozen=True)
class Settings:
    vendor_id: int = G203_VID
    product_id: int = G203_PID
    led_path: Optional[str] = None
    config_path: Optional[str] = None
    log_level: int = logging.WARNING

    @classmethod
    def from_env(cls, environ=None):
        env = os.environ if environ is None else environ
        s = cls()
        if env.get(ENV_VID):
            s = replace(s, vendor_id=parse_int(env[ENV_VID]))
        if env.get(ENV_PID):
            s = replace(s, product_id=parse_int(env[ENV_PID]))
        if env.get(ENV_LED_PATH):
            s = replace(s, led_path=env[ENV_LED_PATH])
        if env.get(ENV_CONFIG_PATH):
            s = replace(s, config_path=env[ENV_CONFIG_PATH])
        if env.get(ENV_LOG_LEVEL):
            s = replace(s, log_level=parse_log_level(env[ENV_LOG_LEVEL]))
        return s

    def override(self, **kwargs):
        """Return a copy with every non-None keyword applied."""
        return replace(self, **{k: v for k, v in kwargs.items() if v is not None})
