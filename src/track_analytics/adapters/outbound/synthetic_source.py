"""Deterministic synthetic track generator.

Produces records shaped like the published dataset export so that the
catalog and the scan/index comparison can run without a fixture file.
The same (count, seed) pair always yields the same records.
"""

from __future__ import annotations

import random
from typing import Any, Iterator, Mapping

_ALBUM_TYPES = ("album", "album", "album", "single", "single", "compilation")
_PLATFORMS = ("Spotify", "Spotify", "Spotify", "Youtube")


class SyntheticTrackSource:
    """Track source that generates pseudo-random tracks."""

    def __init__(self, count: int, seed: int = 42) -> None:
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        self._count = count
        self._seed = seed

    def describe(self) -> str:
        return f"synthetic(count={self._count}, seed={self._seed})"

    def records(self) -> Iterator[Mapping[str, Any]]:
        rng = random.Random(self._seed)
        num_artists = max(1, self._count // 10)

        for n in range(self._count):
            artist_no = rng.randrange(num_artists)
            album_no = rng.randrange(4)
            track_no = rng.randrange(12)
            energy = round(rng.random(), 3)
            liveness = round(rng.random() * 0.8, 4)
            views = rng.randrange(0, 2_000_000_000)
            yield {
                "Artist": f"Artist {artist_no:05d}",
                "Track": f"Track {artist_no:05d}-{album_no}-{track_no:02d}",
                "Album": f"Album {artist_no:05d}-{album_no}",
                "Album_type": rng.choice(_ALBUM_TYPES),
                "Danceability": round(rng.random(), 3),
                "Energy": energy,
                "Loudness": round(rng.uniform(-30.0, 0.0), 3),
                "Speechiness": round(rng.random() * 0.5, 4),
                "Acousticness": round(rng.random(), 4),
                "Instrumentalness": round(rng.random() * 0.3, 5),
                "Liveness": liveness,
                "Valence": round(rng.random(), 3),
                "Tempo": round(rng.uniform(60.0, 200.0), 3),
                "Duration_min": round(rng.uniform(1.5, 7.0), 4),
                "Title": f"Video {n}",
                "Channel": f"Channel {artist_no:05d}",
                "Views": views,
                "Likes": views // rng.randrange(50, 200),
                "Comments": views // rng.randrange(2_000, 20_000),
                "Licensed": rng.random() < 0.7,
                "official_video": rng.random() < 0.75,
                "Stream": rng.randrange(0, 3_000_000_000),
                "EnergyLiveness": round(energy / liveness, 4) if liveness else 0.0,
                "most_playedon": rng.choice(_PLATFORMS),
            }
