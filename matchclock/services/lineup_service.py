"""
Lineup reconstruction for the match timeline engine.

The current on-field lineup is never edited directly: it is always the
result of replaying the substitution history, ordered by match time, on top
of the stored starting lineup. Deleting a substitution therefore means
removing it from the history and replaying the rest from the start.
"""
from collections import Counter
from typing import Iterable, List, Sequence, Tuple, Union

from ..models import MatchPlayer, Substitution
from ..models.errors import (
    ErrorKind, ValidationError, player_already_on_field, player_not_on_field
)

Lineup = Tuple[MatchPlayer, ...]


def replay_order(substitutions: Iterable[Substitution]) -> List[Substitution]:
    """Substitutions sorted by ``(minute, second)``; ties keep recording order."""
    return sorted(substitutions, key=lambda s: (s.minute, s.second))


def validate_lineup(lineup: Sequence[MatchPlayer]) -> Union[Lineup, ValidationError]:
    """
    Check a lineup snapshot for duplicate players and jersey numbers.

    Returns:
        The lineup as a tuple, or the first violation found
    """
    player_counts = Counter(p.player_id for p in lineup)
    duplicates = sorted(pid for pid, count in player_counts.items() if count > 1)
    if duplicates:
        return ValidationError(
            ErrorKind.DUPLICATE_PLAYER,
            f"Player {duplicates[0]} appears more than once in the lineup",
        )

    jersey_counts = Counter(p.jersey_number for p in lineup)
    clashes = sorted(num for num, count in jersey_counts.items() if count > 1)
    if clashes:
        return ValidationError(
            ErrorKind.DUPLICATE_JERSEY_NUMBER,
            f"Jersey number {clashes[0]} is assigned to more than one player",
        )
    return tuple(lineup)


def reconstruct(
    initial_lineup: Sequence[MatchPlayer],
    substitutions: Iterable[Substitution],
) -> Union[Lineup, ValidationError]:
    """
    Replay the substitution history on the starting lineup.

    Each substitution must take off a player who is on the field and bring
    on one who is not; the first violation rejects the whole replay. The
    incoming player inherits the outgoing player's jersey number and
    position slot.

    Args:
        initial_lineup: Starting lineup
        substitutions: Substitution history in any order

    Returns:
        The resulting lineup, or the validation error that stopped the replay
    """
    working: List[MatchPlayer] = list(initial_lineup)

    for sub in replay_order(substitutions):
        on_field = {p.player_id: idx for idx, p in enumerate(working)}
        if sub.player_out not in on_field:
            return player_not_on_field(sub.player_out)
        if sub.player_in in on_field:
            return player_already_on_field(sub.player_in)

        slot = working[on_field[sub.player_out]]
        working[on_field[sub.player_out]] = MatchPlayer(
            player_id=sub.player_in,
            jersey_number=slot.jersey_number,
            position=slot.position,
        )

    result = tuple(working)
    if len({p.player_id for p in result}) != len(result):
        # Unreachable through the checks above; a duplicate means corrupted input
        return ValidationError(
            ErrorKind.DUPLICATE_PLAYER, "Lineup replay produced a duplicate player"
        )
    return result


def derive_initial_lineup(
    lineup: Sequence[MatchPlayer],
    substitutions: Iterable[Substitution],
) -> Lineup:
    """
    Walk the substitution history backwards from a current lineup.

    Used to rehydrate saves that stored only the current lineup. Steps that
    do not fit the lineup are skipped, since the result is re-validated by
    :func:`reconstruct` before it is ever used.
    """
    working: List[MatchPlayer] = list(lineup)
    for sub in reversed(replay_order(substitutions)):
        for idx, slot in enumerate(working):
            if slot.player_id == sub.player_in:
                working[idx] = MatchPlayer(sub.player_out, slot.jersey_number, slot.position)
                break
    return tuple(working)


def is_on_field(lineup: Sequence[MatchPlayer], player_id: str) -> bool:
    return any(p.player_id == player_id for p in lineup)
