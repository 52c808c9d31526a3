"""
History Manager for KeyCalc
Keeps the ordered, pinnable record of past calculations
"""
import json
import logging
import sqlite3
import uuid
from dataclasses import dataclass, field
from datetime import datetime

import config
from errors import HistoryEntryNotFound
from number_format import format_number

logger = logging.getLogger(__name__)


@dataclass
class HistoryEntry:
    expression_text: str
    result: float
    timestamp: datetime
    is_pinned: bool = False
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def formatted_result(self):
        return format_number(self.result)

    def to_record(self):
        """Serializable form used in the history blob"""
        return {
            'id': self.id,
            'expression_text': self.expression_text,
            'result': self.result,
            'timestamp': self.timestamp.isoformat(),
            'is_pinned': self.is_pinned,
        }

    @classmethod
    def from_record(cls, record):
        return cls(
            id=str(record['id']),
            expression_text=str(record['expression_text']),
            result=float(record['result']),
            timestamp=datetime.fromisoformat(record['timestamp']),
            is_pinned=bool(record.get('is_pinned', False)),
        )

    def to_dict(self):
        """Entry as shown to the presentation layer"""
        data = self.to_record()
        data['formatted_result'] = self.formatted_result
        return data


def serialize_entries(entries):
    return json.dumps([e.to_record() for e in entries]).encode('utf-8')


def deserialize_entries(blob):
    records = json.loads(blob.decode('utf-8'))
    return [HistoryEntry.from_record(r) for r in records]


class HistoryManager:
    def __init__(self, db, clock=datetime.now, max_items=config.MAX_HISTORY_ITEMS):
        self.db = db
        self.clock = clock
        self.max_items = max_items
        self._entries = []
        self.load()

    @property
    def entries(self):
        """Entries in display order: pinned first, newest first"""
        return list(self._entries)

    def load(self):
        """Load entries from the persistence collaborator"""
        try:
            blob = self.db.load_history_blob()
        except (sqlite3.Error, OSError):
            logger.exception("Could not read calculation history, starting empty")
            blob = None
        if not blob:
            self._entries = []
            return
        try:
            self._entries = deserialize_entries(blob)
        except (ValueError, KeyError, TypeError, AttributeError):
            logger.error("Calculation history is corrupt, starting empty")
            self._entries = []
        self._sort()

    def record(self, expression_text, result):
        """Add a calculation to history"""
        entry = HistoryEntry(expression_text=expression_text,
                             result=float(result),
                             timestamp=self.clock())
        self._entries.insert(0, entry)
        self._sort()
        self._trim()
        self.flush()
        return entry

    def toggle_pin(self, entry_id):
        """Pin or unpin an entry"""
        entry = self.get(entry_id)
        entry.is_pinned = not entry.is_pinned
        self._sort()
        self.flush()
        return entry

    def delete(self, entry_ids):
        """Delete entries by id; unknown ids are ignored"""
        ids = set(entry_ids)
        before = len(self._entries)
        self._entries = [e for e in self._entries if e.id not in ids]
        removed = before - len(self._entries)
        if removed:
            self.flush()
        return removed

    def clear(self):
        """Clear all calculation history"""
        self._entries = []
        self.flush()

    def reuse(self, entry_id):
        """Return the stored result so a new calculation can start from it"""
        return self.get(entry_id).result

    def get(self, entry_id):
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        raise HistoryEntryNotFound(f"No history entry with id {entry_id}")

    def search(self, query):
        """Filter by expression text or formatted result, case-insensitive"""
        keyword = (query or "").strip().lower()
        if not keyword:
            return self.entries
        return [
            e for e in self._entries
            if keyword in e.expression_text.lower() or keyword in e.formatted_result.lower()
        ]

    def flush(self):
        """Persist the history; failures are logged and never raised"""
        try:
            self.db.save_history_blob(serialize_entries(self._entries))
        except (sqlite3.Error, OSError):
            logger.warning("Could not save calculation history", exc_info=True)

    def _sort(self):
        # Stable sort keeps insertion order among equal timestamps
        self._entries.sort(key=lambda e: e.timestamp, reverse=True)
        self._entries.sort(key=lambda e: not e.is_pinned)

    def _trim(self):
        unpinned = [e for e in self._entries if not e.is_pinned]
        if len(unpinned) <= self.max_items:
            return
        dropped = {e.id for e in unpinned[self.max_items:]}
        self._entries = [e for e in self._entries if e.id not in dropped]
