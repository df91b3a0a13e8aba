"""Axis-aligned envelopes of coordinate sequences."""

from ..models.geometry import Coordinate

Envelope = tuple[float, float, float, float]  # (min_x, min_y, max_x, max_y)


def ring_envelope(coords: list[Coordinate]) -> Envelope:
    """Get the bounding box of a non-empty coordinate list."""
    xs = [c[0] for c in coords]
    ys = [c[1] for c in coords]
    return (min(xs), min(ys), max(xs), max(ys))


def envelope_covers(outer: Envelope, inner: Envelope) -> bool:
    """Test if one envelope covers another (boundaries may coincide)."""
    return (
        outer[0] <= inner[0]
        and outer[1] <= inner[1]
        and outer[2] >= inner[2]
        and outer[3] >= inner[3]
    )
