"""Точка входа в приложение просмотра."""
import logging
import sys

from pnmkit.app import PnmViewerApp


def main() -> None:
    """Создаёт и запускает главное окно; первый аргумент задаёт файл для открытия."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    app = PnmViewerApp()
    if len(sys.argv) > 1:
        app.open_path(sys.argv[1])
    app.mainloop()


if __name__ == "__main__":
    main()
