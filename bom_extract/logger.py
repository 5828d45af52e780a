#!/usr/bin/env python3
"""
Logging for command-line runs: one log file per output directory plus stdout
"""

import logging
import sys
from pathlib import Path
from typing import Optional


def setup_logger(log_level: str = 'INFO', log_dir: Optional[Path] = None) -> logging.Logger:
    """
    Route all bom_extract log records to bom_extract.log and stdout

    Replaces any handlers installed by an earlier call, so repeated runs in
    one process write to the newest directory only.

    Args:
        log_level: Level name; unknown names fall back to INFO
        log_dir: Where bom_extract.log is written (created if missing, 'logs' when omitted)

    Returns:
        The package-level 'bom_extract' logger
    """
    log_dir = Path(log_dir) if log_dir else Path('logs')
    log_dir.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_dir / 'bom_extract.log'),
            logging.StreamHandler(sys.stdout)
        ],
        force=True,
    )

    return logging.getLogger('bom_extract')
