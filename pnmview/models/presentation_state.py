"""Состояние показа статичного кадра."""
from __future__ import annotations

from enum import Enum


class PresentationState(Enum):
    NOT_PRESENTED = "not_presented"
    PRESENTED = "presented"
