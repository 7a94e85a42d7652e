"""On-disk layout of an event capture."""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from pathlib import Path

from traffic_replay._constants import CAPTURE_SUFFIX, CAPTURES_DIRNAME, EVENTS_INDEX_FILENAME
from traffic_replay.models.event import EventConfig

_NON_SLUG = re.compile(r"[^a-z0-9]+")
_VERSION_KEY = re.compile(r"[A-Za-z0-9_-]+")


def slugify(text: str) -> str:
    """Lowercase ASCII slug with runs of other characters collapsed to ``-``."""
    normalized = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    return _NON_SLUG.sub("-", normalized.lower()).strip("-")


def event_slug(event: EventConfig) -> str:
    """``YYYY-MM-DD-<name-slug>`` from the advertised start date."""
    return f"{event.advertised_start_time:%Y-%m-%d}-{slugify(event.name)}"


@dataclass(frozen=True)
class CaptureLayout:
    """Paths for one event below an output root.

    ``<root>/<slug>/captures/<version>.json`` holds one file per snapshot and
    ``<root>/<slug>/<slug>.json`` the consolidated artifact.
    """

    root: Path
    slug: str

    @classmethod
    def for_event(cls, root: Path, event: EventConfig) -> CaptureLayout:
        return cls(root=Path(root), slug=event_slug(event))

    @property
    def event_dir(self) -> Path:
        return self.root / self.slug

    @property
    def captures_dir(self) -> Path:
        return self.event_dir / CAPTURES_DIRNAME

    @property
    def output_path(self) -> Path:
        return self.event_dir / f"{self.slug}{CAPTURE_SUFFIX}"

    @property
    def index_path(self) -> Path:
        return self.root / EVENTS_INDEX_FILENAME

    @property
    def output_url(self) -> str:
        """Output path relative to the index, with forward slashes."""
        return f"{self.slug}/{self.slug}{CAPTURE_SUFFIX}"

    def capture_path(self, version_key: str) -> Path:
        """Capture file for *version_key*.

        Raises
        ------
        ValueError
            If the key is not a single plain file name component.
        """
        if not _VERSION_KEY.fullmatch(version_key):
            raise ValueError(f"unusable version key {version_key!r}")
        return self.captures_dir / f"{version_key}{CAPTURE_SUFFIX}"

    def ensure_captures_dir(self) -> Path:
        """Create the captures directory (idempotent)."""
        self.captures_dir.mkdir(parents=True, exist_ok=True)
        return self.captures_dir
