
import logging
import os

def configure_logging(log_dir: str = "logs"):
    logger = logging.getLogger()
    if logger.hasHandlers():
        return
    os.makedirs(log_dir, exist_ok=True)
    logger.setLevel(logging.INFO)

    fmt = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")

    fh = logging.FileHandler(os.path.join(log_dir, "app.log"))
    fh.setFormatter(fmt)
    fh.setLevel(logging.INFO)

    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    ch.setLevel(logging.INFO)

    logger.addHandler(fh)
    logger.addHandler(ch)
