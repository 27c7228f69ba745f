"""Auto-update marker in playlist descriptions.

A playlist is auto-managed when its description contains
``[Auto-update: id1,id2,id3]``. Older playlists were tagged with
``ARTISTS:id1,id2`` - still honoured when no bracketed marker is present.
"""

import re
from collections.abc import Iterable

AUTO_UPDATE_PATTERN = re.compile(r"\[Auto-update:\s*([^\]]+)\]")
LEGACY_PATTERN = re.compile(r"ARTISTS:([a-zA-Z0-9,]+)")


def parse_artist_ids_from_description(description: str | None) -> list[str]:
    """Extract the artist IDs of an auto-update marker.

    IDs are not validated - a bogus ID just yields no tracks later.

    Args:
        description: Playlist description (may be None)

    Returns:
        Artist IDs in marker order, empty if there is no marker
    """
    if not description:
        return []

    match = AUTO_UPDATE_PATTERN.search(description)
    if match:
        return [piece.strip() for piece in match.group(1).split(",") if piece.strip()]

    legacy = LEGACY_PATTERN.search(description)
    if legacy:
        return [piece for piece in legacy.group(1).split(",") if piece]

    return []


def build_auto_update_marker(artist_ids: Iterable[str]) -> str:
    """Render the marker for a set of artist IDs."""
    ids = [artist_id.strip() for artist_id in artist_ids if artist_id and artist_id.strip()]
    return f"[Auto-update: {','.join(ids)}]"


def with_auto_update_marker(description: str | None, artist_ids: Iterable[str]) -> str:
    """Add the marker to a description, replacing an existing one."""
    marker = build_auto_update_marker(artist_ids)
    text = AUTO_UPDATE_PATTERN.sub("", description or "").strip()
    return f"{text} {marker}" if text else marker
