"""File I/O for crew, schedule and job exports."""
import logging
from datetime import datetime
from pathlib import Path
from typing import Union

import pandas as pd

logger = logging.getLogger(__name__)


def read_data_file(file_path: Union[str, Path]) -> pd.DataFrame:
    """
    Read a CSV or Excel export into a DataFrame.

    Args:
        file_path: Path to CSV, XLSX or XLS file

    Returns:
        DataFrame with file contents

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If file format is not supported
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    suffix = file_path.suffix.lower()

    if suffix == ".csv":
        # Ids stay text so "007" and "7" remain distinct
        df = pd.read_csv(file_path, dtype=str, keep_default_na=True)
    elif suffix == ".xlsx":
        df = pd.read_excel(file_path, engine="openpyxl", dtype=str)
    elif suffix == ".xls":
        df = pd.read_excel(file_path, engine="xlrd", dtype=str)
    else:
        raise ValueError(f"Unsupported file format: {suffix}")

    logger.info(f"Loaded {len(df)} rows from {file_path}")
    return df


def write_output_csv(df: pd.DataFrame, out_dir: Union[str, Path], prefix: str) -> Path:
    """
    Write a timestamped CSV such as out/crew_suggestions_20250114_0630.csv.

    Args:
        df: DataFrame to write
        out_dir: Output directory (created if missing)
        prefix: File name prefix

    Returns:
        Path of the written file
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M")
    output_path = out_dir / f"{prefix}_{timestamp}.csv"
    df.to_csv(output_path, index=False, encoding="utf-8")
    logger.info(f"Wrote {len(df)} rows to {output_path}")
    return output_path
