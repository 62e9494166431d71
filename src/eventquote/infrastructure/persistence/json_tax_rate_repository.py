"""JSON-file-backed implementation of TaxRateRepository.

Lookup order for a free-text event location:
  1. a 5-digit ZIP code found in the text (city/county rates);
  2. the US state named last in the text, by full name or two-letter
     abbreviation, matched as whole words so "ca" matches "San Jose, CA"
     but not "Africa", and "Nevada City, CA" resolves to California;
  3. the table's default rate, if it has one.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from eventquote.domain.repository.tax_rate_repository import TaxRateRepository
from eventquote.domain.service.tax import FlatRateTax

logger = logging.getLogger(__name__)

_ZIP = re.compile(r"\b(\d{5})\b")


class JsonTaxRateRepository(TaxRateRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    # --- TaxRateRepository interface ------------------------------------------

    def get_by_location(self, location: str) -> FlatRateTax | None:
        table = self._load()
        normalized = location.strip().lower()
        if not normalized:
            return self._default(table)

        zip_match = _ZIP.search(normalized)
        if zip_match:
            entry = table.get("zip", {}).get(zip_match.group(1))
            if entry is not None:
                logger.debug("Tax rate for ZIP %s: %s", zip_match.group(1), entry["rate"])
                return FlatRateTax(
                    rate=entry["rate"],
                    description=f"{entry['city']} Tax ({entry['county']} County)",
                    jurisdiction=f"{entry['city']}, {entry['county']} County",
                )

        state = self._last_state_mentioned(normalized, table.get("states", {}))
        if state is not None:
            return self._state_tax(*state)

        return self._default(table)

    # --- Lookup helpers ------------------------------------------------------

    @staticmethod
    def _last_state_mentioned(location: str, states: dict) -> tuple[str, dict] | None:
        """State whose name or abbreviation appears last, as whole words.

        Addresses end with the state, so "Nevada City, CA" is California.
        """
        best: tuple[int, str, dict] | None = None
        for state_name, entry in states.items():
            names = [state_name, entry.get("abbreviation")]
            for name in filter(None, names):
                for match in re.finditer(rf"\b{re.escape(name)}\b", location):
                    if best is None or match.end() > best[0]:
                        best = (match.end(), state_name, entry)
        if best is None:
            return None
        return best[1], best[2]

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> dict:
        if not self._file_path.exists():
            logger.warning("Tax rate table %s not found", self._file_path)
            return {}
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    @staticmethod
    def _state_tax(state_name: str, entry: dict) -> FlatRateTax:
        return FlatRateTax(
            rate=entry["rate"],
            description=entry.get("description", "State Tax"),
            jurisdiction=state_name.title(),
        )

    @staticmethod
    def _default(table: dict) -> FlatRateTax | None:
        entry = table.get("default")
        if entry is None:
            return None
        return FlatRateTax(
            rate=entry["rate"],
            description=entry.get("description", "Default Tax"),
            jurisdiction=entry.get("jurisdiction", ""),
        )
