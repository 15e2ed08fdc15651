"""Logging setup for batch jobs: JSON lines to a file, plain text to the console."""
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Union


class JSONFormatter(logging.Formatter):
    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName
        }
        if hasattr(record, "duration"):
            log_entry["duration_seconds"] = record.duration
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


JOB_HANDLER_NAMES = ("job_file", "job_console")


def setup_job_logging(job_name: str, log_dir: Union[str, Path] = "./logs", level: int = logging.INFO) -> Path:
    """
    Configure the root logger for a batch job.

    Handlers from an earlier call are closed and replaced, so a job run
    twice in one process logs each record once.

    Args:
        job_name: Used for the log file name (<log_dir>/<job_name>.log)
        log_dir: Directory for JSON log files
        level: Root log level

    Returns:
        Path of the JSON log file
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{job_name}.log"

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if handler.get_name() in JOB_HANDLER_NAMES:
            root_logger.removeHandler(handler)
            handler.close()

    file_handler = logging.FileHandler(log_file)
    file_handler.set_name("job_file")
    file_handler.setFormatter(JSONFormatter())

    console_handler = logging.StreamHandler()
    console_handler.set_name("job_console")
    console_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))

    root_logger.setLevel(level)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    return log_file
