import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Union


def setup_logging(
    level=logging.INFO, log_dir: Optional[Union[str, Path]] = None
) -> logging.Logger:
    """Setup basic logging configuration

    Args:
        level: Root log level
        log_dir: Optional directory for a dated log file (console only if omitted)

    Returns:
        Logger for this module
    """
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.FileHandler(
                log_dir / f"cocart_transform_{datetime.now().strftime('%Y-%m-%d')}.log"
            )
        )

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        handlers=handlers,
    )
    return logging.getLogger(__name__)
