"""Настройки кодека.

Настройки передаются в сервисы явно; переменных окружения и сохраняемого состояния нет.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CodecSettings:
    """Параметры чтения и записи файлов.

    Fields:
        comment: Текст комментария, записываемого после magic number (None: без комментария).
        strict_rows: Если True, короткая строка P1 считается ошибкой, а не дополняется нулями.
        threshold: Порог для `to_bitmap`; None означает `max_value // 2`.
    """
    comment: Optional[str] = None
    strict_rows: bool = False
    threshold: Optional[int] = None


DEFAULT_SETTINGS = CodecSettings()
