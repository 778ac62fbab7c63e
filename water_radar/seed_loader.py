"""
Seed dataset loader.

The bundled seed set lives in ``config/seed/waters.json`` and goes through
the same JSON importer as user uploads, so seed rows get exactly the same
normalization (flags, defaults, loose numbers) as imported ones.

Usage
-----
    from water_radar.seed_loader import load_seed_waters

    waters = load_seed_waters(Path("config/seed/waters.json"))
"""

from __future__ import annotations

import logging
from pathlib import Path

from water_radar.ingestion.importer import merge_by_id, parse_json
from water_radar.models.water import Water

log = logging.getLogger(__name__)


def load_seed_waters(path: Path) -> list[Water]:
    """Load and normalize the seed dataset.

    Duplicate ids inside the seed file collapse to the last occurrence.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ImportParseError: If the file is not valid JSON.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Seed file not found: {path}")

    waters = merge_by_id([], parse_json(path.read_text(encoding="utf-8-sig")))
    if not waters:
        log.warning("Seed file contains no usable waters: %s", path)
    else:
        log.info("Loaded %d seed water(s) from %s", len(waters), path.name)
    return waters
