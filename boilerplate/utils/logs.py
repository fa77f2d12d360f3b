"""
Log reader for the daily channel

Files look like boilerplate.log (today) and boilerplate.log.2026-10-17
(rotated). Entries follow the panel log format; continuation lines such
as tracebacks are attached to the entry above.
"""
import re
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Dict, List, Optional

import aiofiles

from boilerplate.core.log import LOG_FILENAME

logger = logging.getLogger(__name__)

LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

ENTRY_RE = re.compile(
    r'^(?P<time>\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}(?:,\d{3})?) - (?P<name>.+?) - '
    r'(?P<level>DEBUG|INFO|WARNING|ERROR|CRITICAL) - (?P<message>.*)$'
)
DATE_RE = re.compile(r'^\d{4}-\d{2}-\d{2}$')


def list_log_files(log_dir: Path, tz=None) -> Dict[str, Path]:
    """date string -> file, newest first. The live file is dated in tz (local time if None)."""
    files: Dict[str, Path] = {}
    if not log_dir.exists():
        return files

    for f in log_dir.glob(f"{LOG_FILENAME}*"):
        if f.name == LOG_FILENAME:
            day = datetime.fromtimestamp(f.stat().st_mtime, tz).date().isoformat()
        else:
            suffix = f.name[len(LOG_FILENAME) + 1:]
            if not DATE_RE.match(suffix):
                continue
            day = suffix
        # The live file wins over a rotated file of the same day
        if day not in files or f.name == LOG_FILENAME:
            files[day] = f

    return dict(sorted(files.items(), reverse=True))


def parse_lines(lines: List[str]) -> List[Dict[str, str]]:
    entries: List[Dict[str, str]] = []
    for line in lines:
        line = line.rstrip("\n")
        match = ENTRY_RE.match(line)
        if match:
            entries.append(match.groupdict())
        elif entries and line:
            entries[-1]["message"] += "\n" + line
    return entries


async def read_entries(path: Path, level: Optional[str] = None) -> List[Dict[str, str]]:
    """Entries of a log file, newest first, optionally filtered by level"""
    async with aiofiles.open(path, "r", encoding="utf-8", errors="replace") as f:
        lines = await f.readlines()
    entries = parse_lines(lines)
    if level:
        level = level.upper()
        entries = [e for e in entries if e["level"] == level]
    entries.reverse()
    return entries


async def level_counts(path: Path) -> Dict[str, int]:
    counts = {lvl: 0 for lvl in LEVELS}
    for entry in await read_entries(path):
        counts[entry["level"]] += 1
    return counts


def is_valid_day(value: str) -> bool:
    if not DATE_RE.match(value or ""):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True
