import logging
from pathlib import Path
from datetime import datetime

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

class EngineLogger:
    def __init__(self, base_path: str, client: str = "UNKNOWN", level: str = "INFO"):
        self.base_path = Path(base_path)
        self.client = client

        self.level_name = level.upper()
        self.level = LOG_LEVELS.get(self.level_name, logging.INFO)

        self.run_dt = datetime.now()
        self.run_date = self.run_dt.strftime("%d-%m-%Y")
        self.run_ts = self.run_dt.strftime("%Y-%m-%d_%H%M%S")

        self.log_dir = self.base_path / "logs"
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.normal_log_file = self.log_dir / f"usage_allocator_{self.run_ts}.log"
        self.error_log_file = self.log_dir / f"Error_{self.run_ts}.log"

        self.logger = self._setup_logger()

        self._write_run_header()

    # ---------------- SETUP ----------------
    def _setup_logger(self):
        logger = logging.getLogger(f"usage_allocator.run.{self.base_path.resolve()}.{self.run_ts}")
        logger.setLevel(self.level)
        logger.propagate = False

        # Same run key twice in one second: start clean
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)

        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

        normal_handler = logging.FileHandler(self.normal_log_file, mode="a")
        normal_handler.setLevel(self.level)
        normal_handler.setFormatter(formatter)

        error_handler = logging.FileHandler(self.error_log_file, mode="a")
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)

        console_handler = logging.StreamHandler()
        console_handler.setLevel(self.level)
        console_handler.setFormatter(formatter)

        logger.addHandler(normal_handler)
        logger.addHandler(error_handler)
        logger.addHandler(console_handler)

        return logger

    # ---------------- HEADER / FOOTER ----------------
    def _write_run_header(self):
        header = (
            f"Today's Date : {self.run_date}\n"
            f"Client : {self.client}\n"
            f"Run Started At : {self.run_dt.strftime('%H:%M:%S')}\n"
            f"{'-'*100}"
        )
        self.logger.info(header)

    def write_run_footer(self):
        footer = (
            f"Run Ended At : {datetime.now().strftime('%H:%M:%S')}\n"
            f"{'-'*100}"
        )
        self.logger.info(footer)

    def close(self):
        for handler in list(self.logger.handlers):
            handler.close()
            self.logger.removeHandler(handler)

    # ---------------- PUBLIC METHODS ----------------
    def info(self, msg: str, *args):
        self.logger.info(msg, *args)

    def warning(self, msg: str, *args):
        self.logger.warning(msg, *args)

    def error(self, msg: str, *args, exc_info=False):
        self.logger.error(msg, *args, exc_info=exc_info)

    def debug(self, msg: str, *args):
        self.logger.debug(msg, *args)

    def critical(self, msg: str, *args, exc_info=False):
        self.logger.critical(msg, *args, exc_info=exc_info)

    def exception(self, msg: str, *args):
        self.logger.exception(msg, *args)
