"""Настройки приложения: константы окна и параметры запуска."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

APP_TITLE = "PNM Viewer"
APPEARANCE_MODE = "system"
COLOR_THEME = "blue"

ENV_LOG_LEVEL = "PNMVIEW_LOG_LEVEL"
ENV_STRICT = "PNMVIEW_STRICT"
DEFAULT_LOG_LEVEL = "WARNING"

_TRUTHY = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class ViewerConfig:
    """Параметры одного запуска.

    Fields:
        path: Путь к файлу изображения.
        strict: Поднимать ошибки вместо подстановки нулей.
        log_level: Имя уровня логирования.
    """
    path: Path
    strict: bool = False
    log_level: str = DEFAULT_LOG_LEVEL
    title: str = APP_TITLE
    appearance_mode: str = APPEARANCE_MODE
    color_theme: str = COLOR_THEME

    @classmethod
    def from_args(
        cls,
        path: str,
        strict: bool = False,
        log_level: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "ViewerConfig":
        """Собирает конфигурацию из аргументов CLI; пустые значения берутся из окружения."""
        env = os.environ if environ is None else environ
        if not strict:
            strict = env.get(ENV_STRICT, "").strip().lower() in _TRUTHY
        level = (log_level or env.get(ENV_LOG_LEVEL) or DEFAULT_LOG_LEVEL).upper()
        return cls(path=Path(path), strict=strict, log_level=level)
