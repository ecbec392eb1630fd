from typing import Optional, Sequence

import uvicorn

from fibserver.app.main import create_app
from fibserver.core.config import load_settings
from fibserver.core.logger import configure_logging


def main(argv: Optional[Sequence[str]] = None) -> None:
    settings = load_settings(argv)
    configure_logging(settings.log_level)

    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
