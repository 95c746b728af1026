"""Match reports for the timeline engine: per-period grouping, statistics and CSV export."""

import csv
import io
from collections import Counter
from typing import Dict, Iterable, List, Optional, Protocol

from ..models import (
    MatchEvent, MatchReport, MatchState, MatchStatus, PeriodReport,
    PlayerMatchStats, SideStatistics, TeamSide
)
from ..models.events import EventType
from ..utils import fmt_mmss, now_ts
from .event_mapper import group_by_period, period_windows
from .period_sequence import PeriodSequence
from .score_ledger import ScoreLedger


class ExportServiceInterface(Protocol):
    """Interface for report export - supports ISP."""

    def export_to_csv(self, report: MatchReport) -> str:
        """Export report to CSV format."""
        ...


CSV_HEADER = ["Period", "Time", "Type", "Side", "Player", "Details"]


class MatchReportExporter:
    """Writes a match report as one CSV row per event and substitution."""

    def export_to_csv(self, report: MatchReport) -> str:
        """Export match report to CSV format, periods in order."""
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADER)

        for period in report.periods:
            rows = []
            for event in period.events:
                rows.append((
                    event.minute, event.second,
                    [period.label, _fmt_stamp(event.minute, event.second), event.type.value,
                     event.team_type.value, event.player_id, event.description],
                ))
            for sub in period.substitutions:
                rows.append((
                    sub.minute, sub.second,
                    [period.label, _fmt_stamp(sub.minute, sub.second), "substitution",
                     TeamSide.OWN.value, sub.player_in, f"{sub.player_out} -> {sub.player_in}"],
                ))
            rows.sort(key=lambda row: (row[0], row[1]))
            for _, _, values in rows:
                writer.writerow(values)

        return buffer.getvalue()


def _fmt_stamp(minute: int, second: int) -> str:
    return f"{minute}:{second:02d}"


def side_statistics(state: MatchState, side: TeamSide) -> SideStatistics:
    """Counters for one side; goals come from the event log, not the scoreboard."""
    events = [e for e in state.events if e.team_type is side]
    return SideStatistics(
        goals=sum(1 for e in events if e.is_goal),
        cards=sum(1 for e in events if e.type.is_card),
        substitutions=len(state.substitutions) if side is TeamSide.OWN else 0,
        fouls=sum(1 for e in events if e.type is EventType.FOUL),
        corners=sum(1 for e in events if e.type is EventType.CORNER),
    )


class ReportService:
    """
    Build post-match (or live) reports for one match.

    Events and substitutions are grouped by the period they resolve to; each
    period carries its clock-derived duration and time label.
    """

    def __init__(
        self,
        state: MatchState,
        export_service: Optional[ExportServiceInterface] = None,
    ) -> None:
        self.state = state
        self.export_service = export_service or MatchReportExporter()

    def generate_match_report(self, now: Optional[float] = None) -> MatchReport:
        """Build a :class:`MatchReport` snapshot for the match."""
        now = now_ts() if now is None else now
        state = self.state
        sequence = PeriodSequence.from_state(state)
        periods = sequence.live_periods(now)

        events_by_period = group_by_period(periods, state.events)
        subs_by_period = group_by_period(periods, state.substitutions)

        period_reports: List[PeriodReport] = []
        for window, period in zip(period_windows(periods), periods):
            period_reports.append(
                PeriodReport(
                    index=window.index,
                    label=period.label,
                    period_type=period.type.value,
                    duration_seconds=period.duration,
                    start_seconds=window.start,
                    end_seconds=window.end,
                    duration_label=fmt_mmss(period.duration),
                    events=events_by_period.get(window.index, []),
                    substitutions=subs_by_period.get(window.index, []),
                )
            )

        return MatchReport(
            generated_ts=now,
            match_id=state.match_id,
            opponent=state.opponent,
            home_away=state.home_away.value,
            status=state.status.value,
            home_score=state.home_score,
            away_score=state.away_score,
            total_seconds=sequence.total_elapsed(now),
            starting_lineup=list(state.initial_lineup),
            final_lineup=list(state.lineup),
            periods=period_reports,
            unassigned_events=events_by_period.get(None, []),
            own=side_statistics(state, TeamSide.OWN),
            opponent_stats=side_statistics(state, TeamSide.OPPONENT),
            score_consistent=ScoreLedger.from_state(state).is_consistent(),
        )

    def export_match_report_csv(self, now: Optional[float] = None) -> str:
        return self.export_service.export_to_csv(self.generate_match_report(now))


def compute_player_stats(
    matches: Iterable[MatchState], player_ids: Optional[Iterable[str]] = None
) -> Dict[str, PlayerMatchStats]:
    """
    Season statistics per player over finished matches.

    Appearances count every player who took the field, starters and
    substitutes alike. Goals and cards only count our own side's events.

    Args:
        matches: Matches to aggregate; unfinished ones are ignored
        player_ids: Players to always include, even without appearances
    """
    stats: Dict[str, PlayerMatchStats] = {
        pid: PlayerMatchStats(player_id=pid) for pid in (player_ids or [])
    }

    def _entry(pid: str) -> PlayerMatchStats:
        if pid not in stats:
            stats[pid] = PlayerMatchStats(player_id=pid)
        return stats[pid]

    for match in matches:
        if match.status is not MatchStatus.FINISHED:
            continue

        appeared = [p.player_id for p in match.initial_lineup]
        appeared += [s.player_in for s in match.substitutions]
        for pid in dict.fromkeys(appeared):
            _entry(pid).matches_played += 1
        for slot in match.lineup:
            _entry(slot.player_id).last_jersey_number = slot.jersey_number

        own_events: List[MatchEvent] = [e for e in match.events if e.team_type is TeamSide.OWN]
        for event in own_events:
            entry = _entry(event.player_id)
            counts = Counter(entry.events_by_type)
            counts[event.type.value] += 1
            entry.events_by_type = dict(counts)
            if event.is_goal:
                entry.goals += 1
            elif event.type.is_caution:
                entry.yellow_cards += 1
            elif event.type.is_sending_off:
                entry.red_cards += 1

    return stats
