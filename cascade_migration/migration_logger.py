"""
Per-page migration log.

One MigrationLogger is created for each page being assembled and handed
down to every builder, so concurrent runs never share entries.

Log Levels:
- ERROR: the page could not be assembled
- WARNING: a value was skipped or trimmed
- INFO: notable decisions (special block merged, etc.)
"""

from collections import Counter
from datetime import datetime, timezone
from enum import Enum
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import List, Optional
import json


class LogLevel(Enum):
    ERROR = 1
    WARNING = 2
    INFO = 3

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class LogEntry:
    level: LogLevel
    message: str
    context: Optional[str] = None  # XPath or block id the entry is about
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def __str__(self) -> str:
        if self.context:
            return f"[{self.level}] {self.message} ({self.context})"
        return f"[{self.level}] {self.message}"

    def to_dict(self) -> dict:
        record = asdict(self)
        record['level'] = str(self.level)
        return record


class MigrationLogger:
    """
    Append-only sink for the skipped, trimmed and merged values of one page.

    Entries are never removed. They can be rendered as a plain-text summary
    or appended to a JSONL file shared by a batch of pages.
    """

    def __init__(self, page_path: str = None, file_path: str = None):
        self.page_path = page_path      # CMS path, e.g. /about/index
        self.file_path = file_path      # source document on disk
        self.entries: List[LogEntry] = []
        self._global_log_file: Optional[Path] = None

    def set_global_log_file(self, path):
        self._global_log_file = Path(path)

    def log(self, level: LogLevel, message: str, context: str = None) -> LogEntry:
        entry = LogEntry(level, message, context)
        self.entries.append(entry)
        return entry

    def error(self, message: str, context: str = None) -> LogEntry:
        return self.log(LogLevel.ERROR, message, context)

    def warning(self, message: str, context: str = None) -> LogEntry:
        return self.log(LogLevel.WARNING, message, context)

    def info(self, message: str, context: str = None) -> LogEntry:
        return self.log(LogLevel.INFO, message, context)

    def get_entries_by_level(self, level: LogLevel) -> List[LogEntry]:
        return [e for e in self.entries if e.level is level]

    @property
    def warnings(self) -> List[LogEntry]:
        return self.get_entries_by_level(LogLevel.WARNING)

    def has_errors(self) -> bool:
        return bool(self.get_entries_by_level(LogLevel.ERROR))

    def get_stats(self) -> dict:
        """Entry counts: errors, warnings, info and total."""
        counts = Counter(entry.level for entry in self.entries)
        return {
            'errors': counts[LogLevel.ERROR],
            'warnings': counts[LogLevel.WARNING],
            'info': counts[LogLevel.INFO],
            'total': len(self.entries),
        }

    def format_summary(self) -> str:
        """Entries under a page header, errors first, then warnings, then info."""
        header = self.page_path or self.file_path or "page"
        if not self.entries:
            return f"{header}: no migration log entries."

        ordered = sorted(self.entries, key=lambda e: e.level.value)
        return "\n".join([f"{header}:"] + [f"  {entry}" for entry in ordered])

    def write_to_global_log(self):
        """Append entries to the global log file, one JSON object per line."""
        if self._global_log_file is None:
            return

        self._global_log_file.parent.mkdir(parents=True, exist_ok=True)
        with self._global_log_file.open('a', encoding='utf-8') as f:
            for entry in self.entries:
                record = {'file_path': self.file_path, 'page_path': self.page_path}
                record.update(entry.to_dict())
                f.write(json.dumps(record) + '\n')
