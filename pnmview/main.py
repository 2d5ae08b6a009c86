"""Точка входа в приложение."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from pnmview.config import ViewerConfig
from pnmview.errors import PnmError
from pnmview.services.decode_service import DecodeService

logger = logging.getLogger(__name__)

MISSING_FILE_MESSAGE = "Требуется имя файла."


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="pnmview", description="Просмотр изображений PBM/PGM/PPM (P1-P6).")
    ap.add_argument("path", nargs="?", default="", help="файл изображения")
    ap.add_argument("--strict", action="store_true", help="ошибка вместо подстановки нулей для повреждённых файлов")
    ap.add_argument("--log-level", default=None, help="уровень логирования (DEBUG, INFO, WARNING, ...)")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    """Декодирует файл и открывает окно просмотра.

    Коды возврата: 0 при успехе и при отсутствии имени файла, 1 при ошибке
    декодирования или пустом изображении.
    """
    args = build_parser().parse_args(argv)
    if not args.path:
        print(MISSING_FILE_MESSAGE)
        return 0

    config = ViewerConfig.from_args(args.path, strict=args.strict, log_level=args.log_level)
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        image = DecodeService(strict=config.strict).load_image(config.path)
    except PnmError as exc:
        logger.error("Cannot decode %s: %s", config.path, exc)
        print(exc, file=sys.stderr)
        return 1

    if image.width <= 0 or image.height <= 0:
        logger.error("Nothing to display: %s has size %dx%d", config.path, image.width, image.height)
        print(f"Пустое изображение: {config.path}", file=sys.stderr)
        return 1

    # GUI stack is imported only once there is something to show
    from pnmview.app import PnmViewerApp

    app = PnmViewerApp(image, config)
    app.mainloop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
