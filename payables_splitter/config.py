"""Configuration management for payables-splitter.

This module centralizes file-system paths, environment variables, and the
split configuration loader used by the splitting pipeline.

Configuration file
------------------
``config/config.json`` holds the sheet and column names that drive the split,
the output filename pattern, and the writer retry settings.

Environment variables
---------------------
``DATA_DIR`` and ``LOGS_DIR`` override default directories.
``PAYABLES_SOURCE_PATH`` points at the source ``.xls`` workbook and
``PAYABLES_DEST_DIR`` at the folder receiving the two split workbooks (often a
network share). The logs directory is created eagerly on import; the
destination folder is created by the orchestrator right before writing.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, cast

from dotenv import load_dotenv

from payables_splitter.exceptions import ConfigurationError

# Load environment variables from .env file
load_dotenv()

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"
DATA_DIR = Path(os.getenv("DATA_DIR", PROJECT_ROOT / "data"))
LOGS_DIR = Path(os.getenv("LOGS_DIR", PROJECT_ROOT / "logs"))

DEFAULT_SOURCE_FILENAME = "RL_NEW_PAYABLES_TLC_TM.XLS"
SOURCE_PATH = Path(os.getenv("PAYABLES_SOURCE_PATH", DATA_DIR / "input" / DEFAULT_SOURCE_FILENAME))
DEST_DIR = Path(os.getenv("PAYABLES_DEST_DIR", DATA_DIR / "output"))

# Ensure directories exist
LOGS_DIR.mkdir(parents=True, exist_ok=True)


def get_config() -> dict[str, Any]:
    """Load the project configuration.

    Returns
    -------
    dict[str, Any]
        Parsed contents of ``config/config.json``.

    Raises
    ------
    FileNotFoundError
        If ``config/config.json`` is missing.
    json.JSONDecodeError
        If the file exists but is not valid JSON.
    """
    config_path = CONFIG_DIR / "config.json"
    if not config_path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise FileNotFoundError(msg)

    with Path(config_path).open(encoding="utf-8") as f:
        return json.load(f)  # type: ignore[no-any-return]


def run_timestamp() -> datetime:
    """Return the current time on the clock shared by log file names and run stamps (UTC)."""
    return datetime.now(UTC)


def log_filename(stamp: datetime | None = None) -> str:
    """Return the dated log file name for ``stamp`` (defaults to now, UTC)."""
    stamp = stamp if stamp is not None else run_timestamp()
    return f"{stamp.strftime('%Y-%m-%d')}_split.log"


def setup_logging(name: str = "payables_splitter") -> logging.Logger:
    """Configure a console+file logger if not already present.

    Parameters
    ----------
    name : str, optional
        Logger namespace; reused to avoid duplicate handlers.

    Returns
    -------
    logging.Logger
        Logger with INFO-level console handler and DEBUG-level file handler
        under ``LOGS_DIR``.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        logger.setLevel(logging.DEBUG)

        # Console handler
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.INFO)
        console_format = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
        console_handler.setFormatter(console_format)
        logger.addHandler(console_handler)

        # File handler
        file_handler = logging.FileHandler(LOGS_DIR / log_filename(), encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_format = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        file_handler.setFormatter(file_format)
        logger.addHandler(file_handler)

    return logger


# =============================================================================
# Split Configuration Loaders
# =============================================================================


def _require(section: dict[str, Any], key: str, section_name: str) -> Any:
    """Return ``section[key]`` or raise a configuration error naming it."""
    if key not in section:
        msg = f"Missing '{key}' in '{section_name}' section of config.json"
        raise ConfigurationError(msg)
    return section[key]


def get_split_settings(config: dict[str, Any] | None = None) -> dict[str, Any]:
    """Return the sheet and column names that drive the split.

    Parameters
    ----------
    config : dict[str, Any], optional
        Pre-loaded configuration; loaded from disk when omitted.

    Returns
    -------
    dict[str, Any]
        Keys ``invoice_sheet``, ``detail_sheet``, ``id_column``,
        ``join_column`` and ``preserve_formatting``.

    Raises
    ------
    ConfigurationError
        If the ``split`` section or any required key is absent.
    """
    config = config if config is not None else get_config()
    if "split" not in config:
        msg = "Missing 'split' section in config.json"
        raise ConfigurationError(msg)

    split = config["split"]
    return {
        "invoice_sheet": _require(split, "invoice_sheet", "split"),
        "detail_sheet": _require(split, "detail_sheet", "split"),
        "id_column": _require(split, "id_column", "split"),
        "join_column": _require(split, "join_column", "split"),
        "preserve_formatting": bool(split.get("preserve_formatting", True)),
    }


def get_retry_settings(config: dict[str, Any] | None = None) -> dict[str, Any]:
    """Return writer retry settings (``max_attempts`` and ``delay_seconds``).

    Falls back to five attempts one second apart when the section is absent.
    """
    config = config if config is not None else get_config()
    retry = config.get("writer", {}).get("retry", {})
    return {
        "max_attempts": int(retry.get("max_attempts", 5)),
        "delay_seconds": float(retry.get("delay_seconds", 1.0)),
    }


def get_output_paths(
    dest_dir: Path | None = None,
    source_path: Path | None = None,
    config: dict[str, Any] | None = None,
) -> dict[str, Path]:
    """Render destination paths for each partition.

    Parameters
    ----------
    dest_dir : Path, optional
        Output folder; defaults to ``DEST_DIR``.
    source_path : Path, optional
        Source workbook whose stem names the outputs; defaults to ``SOURCE_PATH``.
    config : dict[str, Any], optional
        Pre-loaded configuration; loaded from disk when omitted.

    Returns
    -------
    dict[str, Path]
        Mapping from partition label (``"P1"``, ``"P2"``) to destination path,
        e.g. ``RL_NEW_PAYABLES_TLC_TM_P1.xls``.

    Examples
    --------
    >>> paths = get_output_paths(Path("/out"), Path("/in/BOOK.XLS"))
    >>> paths["P1"].name
    'BOOK_P1.xls'
    """
    config = config if config is not None else get_config()
    output = config.get("output", {})
    pattern = cast("str", output.get("file_pattern", "{stem}_{partition}.xls"))
    partitions = cast("list[str]", output.get("partitions", ["P1", "P2"]))

    folder = dest_dir if dest_dir is not None else DEST_DIR
    stem = (source_path if source_path is not None else SOURCE_PATH).stem

    return {label: folder / pattern.format(stem=stem, partition=label) for label in partitions}
