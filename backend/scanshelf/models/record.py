"""
ScanShelf Backend: Inventory Record Model
==========================================

What:  The domain types: a Record and the Inventory mapping of code → Record.
How:   Records are frozen dataclasses so a stored value can be shared
       between the store, the scan workflow and responses without copying.

Persisted shape of one record (the "des" key is the on-disk name):
    {"title": "Stapler", "des": "Office use"}
"""

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class Record:
    """Title and description associated with one scanned code."""

    title: str
    description: str

    @property
    def label(self) -> str:
        """Row text used by list views: "<title> - <description>"."""
        return f"{self.title} - {self.description}"

    def to_json(self) -> Dict[str, str]:
        return {"title": self.title, "des": self.description}


# Code → Record. Keys are the raw scanner payloads.
Inventory = Dict[str, Record]
