"""Formatter for shooting schedules."""

from __future__ import annotations

from typing import Any

from rich.table import Table

from stripboard.cli.formatters.base import OutputFormat, OutputFormatter, render_to_text
from stripboard.cli.formatters.json_formatter import JsonFormatter
from stripboard.cli.formatters.table_formatter import TableFormatter
from stripboard.models import (
    DaySource,
    RehearsalSession,
    SchedulingMode,
    ShootingDay,
    ShootingSchedule,
)

MAX_SCENES_PER_CELL = 6


def _scene_cell(day: ShootingDay) -> str:
    labels = [
        f"{scene.episode_number}x{scene.scene_number} {scene.scene_title}".strip()
        for scene in day.scenes[:MAX_SCENES_PER_CELL]
    ]
    hidden = len(day.scenes) - MAX_SCENES_PER_CELL
    if hidden > 0:
        labels.append(f"... +{hidden} more")
    return "\n".join(labels)


def _minutes(total: int) -> str:
    hours, minutes = divmod(total, 60)
    return f"{hours}h{minutes:02d}"


class ScheduleFormatter(OutputFormatter[ShootingSchedule]):
    """Render a schedule as rich tables, Markdown or JSON."""

    def title(self, schedule: ShootingSchedule) -> str:
        if schedule.scheduling_mode is SchedulingMode.SINGLE_EPISODE:
            label = f"Episode {schedule.episode_number}"
            if schedule.episode_title:
                label += f": {schedule.episode_title}"
        else:
            episodes = ", ".join(str(n) for n in schedule.episode_numbers or [])
            label = f"Episodes {episodes}"
        return f"Shooting Schedule - {label}"

    def days_table(self, schedule: ShootingSchedule) -> Table:
        table = Table(
            title=self.title(schedule), show_header=True, header_style="bold magenta"
        )
        table.add_column("Day", justify="right", style="cyan")
        table.add_column("Location")
        table.add_column("Call")
        table.add_column("Wrap")
        table.add_column("Scenes")
        table.add_column("Time", justify="right")
        table.add_column("Cast")
        table.add_column("Source")
        for day in schedule.days:
            cast = ", ".join(member.character_name for member in day.cast_required)
            table.add_row(
                str(day.day_number),
                day.location,
                day.call_time,
                day.estimated_wrap_time,
                _scene_cell(day),
                _minutes(day.total_minutes),
                cast or "-",
                "fallback" if day.source is DaySource.FALLBACK else "generated",
            )
        return table

    def summary_data(self, schedule: ShootingSchedule) -> dict[str, Any]:
        summary = schedule.summary()
        data: dict[str, Any] = {
            "total_days": summary.total_days,
            "total_scenes": summary.total_scenes,
            "scene_time": _minutes(summary.total_scene_minutes),
            "location_moves": summary.location_moves,
            "fallback_days": summary.fallback_days,
            "venue_cost": f"${summary.total_location_cost:,.2f}",
            "batches": schedule.batch_count,
        }
        if schedule.fallback_batches:
            data["fallback_batches"] = ", ".join(
                str(index + 1) for index in schedule.fallback_batches
            )
        caps = schedule.day_caps
        if caps is not None:
            data["day_ceiling"] = (
                f"arc {caps.arc_max_days} / series {caps.series_max_days}"
            )
            if caps.exceeds_series_cap:
                data["warning"] = "exceeds the series day ceiling"
            elif caps.exceeds_arc_cap:
                data["note"] = "longer than a single arc"
        return data

    def rehearsals_table(self, sessions: list[RehearsalSession]) -> Table:
        table = Table(title="Suggested Rehearsals", header_style="bold magenta")
        table.add_column("Type")
        table.add_column("When")
        table.add_column("Length", justify="right")
        table.add_column("Scenes")
        table.add_column("Actors")
        table.add_column("Goals")
        for session in sessions:
            when = f"{session.date or 'TBD'} {session.time}"
            if session.linked_to_shoot_day:
                when += f" (before day {session.linked_to_shoot_day})"
            table.add_row(
                session.rehearsal_type.value,
                when,
                f"{session.duration} min",
                ", ".join(
                    f"{s.episode_number}x{s.scene_number}" for s in session.scenes
                ),
                ", ".join(session.actors),
                "; ".join(session.goals),
            )
        return table

    def format(
        self,
        data: ShootingSchedule,
        format_type: OutputFormat = OutputFormat.TABLE,
    ) -> str:
        if format_type == OutputFormat.JSON:
            return JsonFormatter().format(data)
        if format_type == OutputFormat.MARKDOWN:
            return self._format_markdown(data)

        renderables: list[Any] = [self.days_table(data)]
        renderables.append(
            TableFormatter().create_summary_table("Summary", self.summary_data(data))
        )
        if data.rehearsals:
            renderables.append(self.rehearsals_table(data.rehearsals))
        return render_to_text(*renderables)

    def _format_markdown(self, schedule: ShootingSchedule) -> str:
        lines = [f"# {self.title(schedule)}", ""]
        for day in schedule.days:
            lines.append(
                f"## Day {day.day_number}: {day.location} "
                f"({day.call_time}-{day.estimated_wrap_time})"
            )
            for scene in day.scenes:
                lines.append(
                    f"- {scene.episode_number}x{scene.scene_number} "
                    f"{scene.scene_title} ({scene.estimated_duration} min)"
                )
            if day.special_notes:
                lines.append(f"\n_{day.special_notes}_")
            lines.append("")
        return "\n".join(lines)
