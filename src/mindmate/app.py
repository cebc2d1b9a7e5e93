"""Top-level application state.

Holds the current view, the entry collection, and the editor draft, and
runs the load → mutate → persist cycle against an EntryStore.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from mindmate.client import AnalysisClient
from mindmate.errors import AnalysisError, EmptyEntryError
from mindmate.models import Analysis, JournalEntry, View, new_entry
from mindmate.store import EntryStore, sort_entries

logger = logging.getLogger(__name__)


@dataclass
class Draft:
    """The entry currently being written in the editor."""

    text: str = ""
    analysis: Analysis | None = None
    error: str | None = None
    is_loading: bool = False


@dataclass
class AppState:
    store: EntryStore
    entries: list[JournalEntry] = field(default_factory=list)
    view: View = View.DASHBOARD
    draft: Draft = field(default_factory=Draft)

    @classmethod
    def start(cls, store: EntryStore) -> AppState:
        """Load the saved entries and open on the dashboard."""
        entries = store.load()
        logger.debug("Loaded %d entries", len(entries))
        return cls(store=store, entries=entries)

    def set_view(self, view: View) -> None:
        self.view = View(view)

    async def analyze_draft(self, client: AnalysisClient) -> Analysis:
        """Run the analysis for the draft text.

        Blank text is rejected without touching the network. Analysis
        failures are recorded on the draft as a readable message and
        re-raised.

        Raises:
            EmptyEntryError: The draft is blank.
            AnalysisError: The analysis call failed.
        """
        if not self.draft.text.strip():
            err = EmptyEntryError()
            self.draft.error = str(err)
            raise err

        self.draft.error = None
        self.draft.analysis = None
        self.draft.is_loading = True
        try:
            analysis = await client.analyze(self.draft.text)
        except AnalysisError as exc:
            self.draft.error = exc.user_message
            raise
        finally:
            self.draft.is_loading = False

        self.draft.analysis = analysis
        return analysis

    def save_draft(self, now: datetime | None = None) -> JournalEntry:
        """Turn the analyzed draft into an entry, persist, and go to the dashboard."""
        if self.draft.analysis is None:
            raise ValueError("Draft has not been analyzed yet")

        entry = new_entry(self.draft.text, self.draft.analysis, now=now)
        self.entries = self.store.add(entry, self.entries)
        self.store.persist(self.entries)
        self.draft = Draft()
        self.set_view(View.DASHBOARD)
        return entry

    def replace_entries(self, entries: list[JournalEntry]) -> None:
        """Swap in a new collection (e.g. an import), keeping order and snapshot in sync."""
        self.entries = sort_entries(entries)
        self.store.persist(self.entries)
