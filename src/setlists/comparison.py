"""Compare the fan-predicted setlist of a show against what was actually played."""

import logging
from dataclasses import asdict, dataclass, field
from typing import List, Optional

from .models import PlayedSetlist
from .tally import ranked_setlist

logger = logging.getLogger(__name__)


@dataclass
class PredictedSong:
    setlist_song_id: int
    name: str
    votes: int
    position: int
    matched: bool = False
    matched_actual_position: Optional[int] = None


@dataclass
class ActualSong:
    name: str
    position: int
    matched: bool = False
    matched_setlist_song_id: Optional[int] = None


@dataclass
class SongMatch:
    setlist_song_id: int
    predicted_name: str
    actual_name: str
    predicted_position: int
    actual_position: int
    position_diff: int


@dataclass
class ComparisonResult:
    show_id: int
    predicted_songs: List[PredictedSong] = field(default_factory=list)
    actual_songs: List[ActualSong] = field(default_factory=list)
    matches: List[SongMatch] = field(default_factory=list)
    accuracy_score: float = 0.0
    total_predicted: int = 0
    total_actual: int = 0
    correct_predictions: int = 0

    def to_dict(self):
        return asdict(self)


def _normalize(name):
    return (name or "").strip().lower()


def accuracy_score(correct, total_predicted, total_actual):
    """Percentage of correct predictions over the longer of the two lists."""
    if total_predicted == 0:
        return 0.0
    return round(correct / max(total_predicted, total_actual) * 100, 2)


def get_setlist_comparison(show_id) -> Optional[ComparisonResult]:
    """
    Build the prediction/actual comparison for a show.

    Returns None when no played setlist has been imported for the show.
    Predicted songs are ranked by votes; an actual song matches a
    predicted one by song id, falling back to a case-insensitive name match.
    Each predicted song matches at most once.
    """
    try:
        played = PlayedSetlist.objects.get(show_id=show_id)
    except PlayedSetlist.DoesNotExist:
        return None

    predicted = []
    song_ids = {}
    for rank, entry in enumerate(ranked_setlist(show_id), start=1):
        predicted.append(
            PredictedSong(
                setlist_song_id=entry.id,
                name=entry.song.name,
                votes=entry.vote_count,
                position=rank,
            )
        )
        song_ids[entry.id] = entry.song_id

    result = ComparisonResult(show_id=show_id, predicted_songs=predicted)
    unmatched = list(predicted)

    for played_song in played.songs.all().order_by("position"):
        actual = ActualSong(name=played_song.name, position=played_song.position)
        hit = next(
            (
                p for p in unmatched
                if (played_song.song_id and song_ids[p.setlist_song_id] == played_song.song_id)
                or _normalize(p.name) == _normalize(played_song.name)
            ),
            None,
        )
        if hit is not None:
            unmatched.remove(hit)
            hit.matched = True
            hit.matched_actual_position = actual.position
            actual.matched = True
            actual.matched_setlist_song_id = hit.setlist_song_id
            result.matches.append(
                SongMatch(
                    setlist_song_id=hit.setlist_song_id,
                    predicted_name=hit.name,
                    actual_name=actual.name,
                    predicted_position=hit.position,
                    actual_position=actual.position,
                    position_diff=abs(hit.position - actual.position),
                )
            )
        result.actual_songs.append(actual)

    result.total_predicted = len(predicted)
    result.total_actual = len(result.actual_songs)
    result.correct_predictions = len(result.matches)
    result.accuracy_score = accuracy_score(
        result.correct_predictions, result.total_predicted, result.total_actual
    )
    logger.info(
        f"Setlist comparison for show {show_id}: "
        f"{result.correct_predictions}/{result.total_actual} played songs predicted"
    )
    return result
