"""CLI interface using Typer."""

from __future__ import annotations

import json
import sqlite3
from datetime import date
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from calpoint.config import get_settings
from calpoint.db import get_db
from calpoint.log import setup_logging

app = typer.Typer(
    help="Calpoint: turn calories into points and project time to goal",
    no_args_is_help=True,
)
console = Console()

# Subcommand groups
profile_app = typer.Typer(help="Manage your profile and goal")
log_app = typer.Typer(help="Log daily calories, workouts and weight")
tdee_app = typer.Typer(help="Maintenance calorie calculations")

app.add_typer(profile_app, name="profile")
app.add_typer(log_app, name="log")
app.add_typer(tdee_app, name="tdee")


# ============================================================================
# Helpers
# ============================================================================


def output_json(response: dict, file=None) -> None:
    """Output JSON response to stdout or file."""
    json_str = json.dumps(response, indent=2)
    if file:
        file.write(json_str)
    else:
        print(json_str)


def use_json(json_output: bool) -> bool:
    """JSON when requested by flag or by the configured default."""
    return json_output or get_settings().defaults.output_format == "json"


def fail(
    command: str,
    message: str,
    json_output: bool,
    suggestions: Optional[list[str]] = None,
) -> None:
    """Report an error and exit with status 1."""
    if json_output:
        response = {"success": False, "command": command, "errors": [message]}
        if suggestions:
            response["suggestions"] = suggestions
        output_json(response)
    else:
        console.print(f"[red]{message}[/red]")
        for suggestion in suggestions or []:
            console.print(suggestion)
    raise typer.Exit(1)


def parse_date(value: Optional[str], default: Optional[date] = None) -> Optional[date]:
    """Parse a YYYY-MM-DD option."""
    if value is None:
        return default
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"Invalid date '{value}', expected YYYY-MM-DD")


def load_profile(conn: sqlite3.Connection, user_id: Optional[int], command: str, json_output: bool):
    """Load a profile by id (or the default one), exiting if missing."""
    from calpoint.tracking.queries import UserQueries

    if user_id:
        profile = UserQueries.get_profile(conn, user_id)
    else:
        profile = UserQueries.get_default_profile(conn)

    if profile is None:
        fail(
            command,
            "No user profile found",
            json_output,
            ["Create one with: calpoint profile create --height 175 --age 30 "
             "--sex male --weight 85 --goal 75 --target-calories 1800"],
        )
    return profile


def ensure_tables() -> None:
    """Ensure tables exist (idempotent)."""
    db = get_db()
    db.initialize_schema()


def format_points(points: float) -> str:
    return f"{points:+.3f}"


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Calpoint: turn calories into points and project time to goal."""
    setup_logging(verbose)


# Callbacks for sub-apps to auto-create tables on first use
@profile_app.callback()
def profile_callback() -> None:
    """Ensure tables exist before any profile command."""
    ensure_tables()


@log_app.callback()
def log_callback() -> None:
    """Ensure tables exist before any log command."""
    ensure_tables()


# ============================================================================
# TDEE Commands
# ============================================================================


@tdee_app.command("calc")
def tdee_calc(
    weight: float = typer.Option(..., "--weight", min=1, help="Weight in kg"),
    height: float = typer.Option(..., "--height", min=1, help="Height in cm"),
    age: int = typer.Option(..., "--age", min=1, help="Age in years"),
    sex: str = typer.Option(..., "--sex", help="Sex (male/female)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Calculate BMR and sedentary TDEE (Mifflin-St Jeor)."""
    from calpoint.profiles.body_calc import calculate_bmr, calculate_tdee

    json_output = use_json(json_output)
    if sex.lower() not in ("male", "female"):
        fail("tdee calc", f"sex must be 'male' or 'female', got '{sex}'", json_output)

    bmr = calculate_bmr(weight, height, age, sex)
    tdee = calculate_tdee(weight, height, age, sex)

    if json_output:
        output_json({
            "success": True,
            "command": "tdee calc",
            "data": {"bmr": round(bmr, 1), "tdee": tdee},
            "human_summary": f"BMR {bmr:.0f} kcal/day, TDEE {tdee} kcal/day",
        })
    else:
        console.print(f"BMR: {bmr:.0f} kcal/day")
        console.print(f"[bold]TDEE:[/bold] {tdee} kcal/day (sedentary x1.2)")


# ============================================================================
# Profile Commands
# ============================================================================


def profile_to_dict(profile) -> dict:
    return {
        "user_id": profile.user_id,
        "height_cm": profile.height_cm,
        "age": profile.age,
        "sex": profile.sex,
        "starting_weight": profile.starting_weight,
        "goal_weight": profile.goal_weight,
        "current_weight": profile.current_weight,
        "tdee": profile.tdee,
        "target_calories": profile.target_calories,
        "start_date": profile.start_date.isoformat(),
    }


@profile_app.command("create")
def profile_create(
    height: float = typer.Option(..., "--height", help="Height in cm"),
    age: int = typer.Option(..., "--age", help="Age in years"),
    sex: str = typer.Option(..., "--sex", help="Sex (male/female)"),
    weight: float = typer.Option(..., "--weight", help="Starting weight in kg"),
    goal: float = typer.Option(..., "--goal", help="Goal weight in kg"),
    target_calories: int = typer.Option(
        ..., "--target-calories", help="Planned daily intake in kcal"
    ),
    tdee: Optional[int] = typer.Option(
        None, "--tdee", help="Override maintenance calories (default: calculated)"
    ),
    start_date_str: Optional[str] = typer.Option(
        None, "--start-date", help="Start date (YYYY-MM-DD, default: today)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Create a profile with goal and calorie target."""
    from calpoint.profiles.body_calc import calculate_tdee
    from calpoint.tracking.models import UserProfile
    from calpoint.tracking.queries import UserQueries

    json_output = use_json(json_output)
    start_date = parse_date(start_date_str, get_settings().today())

    try:
        profile = UserProfile(
            user_id=None,
            height_cm=height,
            age=age,
            sex=sex.lower(),
            starting_weight=weight,
            goal_weight=goal,
            current_weight=weight,
            tdee=tdee if tdee is not None else calculate_tdee(weight, height, age, sex.lower()),
            target_calories=target_calories,
            start_date=start_date,
        )
    except ValueError as e:
        fail("profile create", str(e), json_output)

    db = get_db()
    with db.get_connection() as conn:
        user_id = UserQueries.create_profile(conn, profile)

    if json_output:
        output_json({
            "success": True,
            "command": "profile create",
            "data": profile_to_dict(profile),
            "human_summary": f"Created profile (ID: {user_id}), TDEE {profile.tdee} kcal/day",
        })
    else:
        console.print(f"[green]Created profile (ID: {user_id})[/green]")
        console.print(f"  TDEE: {profile.tdee} kcal/day, target: {target_calories} kcal/day")


@profile_app.command("show")
def profile_show(
    user_id: Optional[int] = typer.Option(None, "--id", help="User ID (default: first user)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show profile."""
    json_output = use_json(json_output)

    db = get_db()
    with db.get_connection() as conn:
        profile = load_profile(conn, user_id, "profile show", json_output)

    if json_output:
        output_json({
            "success": True,
            "command": "profile show",
            "data": profile_to_dict(profile),
            "human_summary": (
                f"User {profile.user_id}: {profile.current_weight} kg, "
                f"goal {profile.goal_weight} kg"
            ),
        })
    else:
        console.print(f"[bold]Profile (ID: {profile.user_id})[/bold]")
        console.print(f"  Height: {profile.height_cm} cm")
        console.print(f"  Age: {profile.age}")
        console.print(f"  Sex: {profile.sex}")
        console.print(f"  Starting weight: {profile.starting_weight} kg")
        console.print(f"  Current weight: {profile.current_weight} kg")
        console.print(f"  Goal weight: {profile.goal_weight} kg")
        console.print(f"  TDEE: {profile.tdee} kcal/day")
        console.print(f"  Target: {profile.target_calories} kcal/day")
        console.print(f"  Start date: {profile.start_date.isoformat()}")


@profile_app.command("update")
def profile_update(
    user_id: Optional[int] = typer.Option(None, "--id", help="User ID (default: first user)"),
    height: Optional[float] = typer.Option(None, "--height", help="Height in cm"),
    age: Optional[int] = typer.Option(None, "--age", help="Age in years"),
    sex: Optional[str] = typer.Option(None, "--sex", help="Sex (male/female)"),
    starting_weight: Optional[float] = typer.Option(
        None, "--starting-weight", help="Starting weight in kg"
    ),
    current_weight: Optional[float] = typer.Option(
        None, "--current-weight", help="Current weight in kg"
    ),
    goal: Optional[float] = typer.Option(None, "--goal", help="Goal weight in kg"),
    target_calories: Optional[int] = typer.Option(
        None, "--target-calories", help="Planned daily intake in kcal"
    ),
    tdee: Optional[int] = typer.Option(None, "--tdee", help="Maintenance calories"),
    start_date_str: Optional[str] = typer.Option(
        None, "--start-date", help="Start date (YYYY-MM-DD)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Update profile settings. TDEE is not recalculated (see refresh-tdee)."""
    from calpoint.tracking.models import UserProfile
    from calpoint.tracking.queries import UserQueries

    json_output = use_json(json_output)
    start_date = parse_date(start_date_str)

    db = get_db()
    with db.get_connection() as conn:
        profile = load_profile(conn, user_id, "profile update", json_output)

        updates = {
            "height_cm": height,
            "age": age,
            "sex": sex.lower() if sex else None,
            "starting_weight": starting_weight,
            "current_weight": current_weight,
            "goal_weight": goal,
            "target_calories": target_calories,
            "tdee": tdee,
            "start_date": start_date,
        }
        fields = profile_to_dict(profile)
        fields["start_date"] = profile.start_date
        fields.update({k: v for k, v in updates.items() if v is not None})

        try:
            updated = UserProfile(**fields)
        except ValueError as e:
            fail("profile update", str(e), json_output)

        UserQueries.update_profile(conn, updated)

    if json_output:
        output_json({
            "success": True,
            "command": "profile update",
            "data": profile_to_dict(updated),
            "human_summary": "Profile updated",
        })
    else:
        console.print("[green]Profile updated[/green]")


@profile_app.command("refresh-tdee")
def profile_refresh_tdee(
    user_id: Optional[int] = typer.Option(None, "--id", help="User ID (default: first user)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Recalculate TDEE from current weight. Existing logs keep their points."""
    from calpoint.tracking.queries import UserQueries

    json_output = use_json(json_output)

    db = get_db()
    with db.get_connection() as conn:
        profile = load_profile(conn, user_id, "profile refresh-tdee", json_output)
        old_tdee = profile.tdee
        new_tdee = UserQueries.refresh_tdee(conn, profile)

    if json_output:
        output_json({
            "success": True,
            "command": "profile refresh-tdee",
            "data": {"old_tdee": old_tdee, "tdee": new_tdee},
            "human_summary": f"TDEE {old_tdee} -> {new_tdee} kcal/day",
        })
    else:
        console.print(f"[green]TDEE updated:[/green] {old_tdee} -> {new_tdee} kcal/day")


# ============================================================================
# Daily Log Commands
# ============================================================================


def log_to_dict(entry, running_total: Optional[float] = None) -> dict:
    result = {
        "log_id": entry.log_id,
        "date": entry.date.isoformat(),
        "calories_consumed": entry.calories_consumed,
        "workout_calories": entry.workout_calories,
        "weight": entry.weight,
        "notes": entry.notes,
        "diet_points": entry.diet_points,
        "workout_points": entry.workout_points,
        "total_points": entry.total_points,
    }
    if running_total is not None:
        result["running_total"] = running_total
    return result


@log_app.command("add")
def log_add(
    calories: int = typer.Argument(..., min=0, help="Calories consumed"),
    workout: int = typer.Option(0, "--workout", "-w", min=0, help="Workout calories burned"),
    weight: Optional[float] = typer.Option(None, "--weight", min=1, help="Weight in kg"),
    notes: Optional[str] = typer.Option(None, "--notes", "-n", help="Optional notes"),
    date_str: Optional[str] = typer.Option(
        None, "--date", "-d", help="Date (YYYY-MM-DD, default: today)"
    ),
    user_id: Optional[int] = typer.Option(None, "--user", help="User ID (default: first user)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Log a day (points computed from current TDEE)."""
    from calpoint.tracking.queries import DuplicateLogError, LogQueries

    json_output = use_json(json_output)
    log_date = parse_date(date_str, get_settings().today())

    db = get_db()
    with db.get_connection() as conn:
        profile = load_profile(conn, user_id, "log add", json_output)
        try:
            entry = LogQueries.create_log(
                conn, profile, log_date, calories, workout, weight, notes
            )
        except DuplicateLogError as e:
            fail("log add", str(e), json_output, ["Use: calpoint log edit <id> ..."])

    if json_output:
        output_json({
            "success": True,
            "command": "log add",
            "data": log_to_dict(entry),
            "human_summary": f"Logged {log_date}: {format_points(entry.total_points)} points",
        })
    else:
        console.print(
            f"[green]Logged:[/green] {log_date} "
            f"{format_points(entry.total_points)} points "
            f"(diet {format_points(entry.diet_points)}, "
            f"workout {format_points(entry.workout_points)})"
        )


@log_app.command("edit")
def log_edit(
    log_id: int = typer.Argument(..., help="Log ID"),
    calories: Optional[int] = typer.Argument(
        None, min=0, help="Calories consumed (default: keep stored value)"
    ),
    workout: Optional[int] = typer.Option(
        None, "--workout", "-w", min=0, help="Workout calories burned"
    ),
    weight: Optional[float] = typer.Option(None, "--weight", min=1, help="Weight in kg"),
    clear_weight: bool = typer.Option(
        False, "--clear-weight", help="Remove the weight from this entry"
    ),
    notes: Optional[str] = typer.Option(None, "--notes", "-n", help="Optional notes"),
    user_id: Optional[int] = typer.Option(None, "--user", help="User ID (default: first user)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Edit a log. Fields not given keep their stored values; points use current TDEE."""
    from calpoint.tracking.queries import LogNotFoundError, LogQueries

    json_output = use_json(json_output)
    if clear_weight and weight is not None:
        fail("log edit", "Use either --weight or --clear-weight, not both", json_output)

    db = get_db()
    with db.get_connection() as conn:
        profile = load_profile(conn, user_id, "log edit", json_output)
        existing = LogQueries.get_log(conn, profile.user_id, log_id)
        if existing is None:
            fail("log edit", f"Log {log_id} not found", json_output)

        if clear_weight:
            new_weight = None
        else:
            new_weight = weight if weight is not None else existing.weight

        try:
            entry = LogQueries.update_log(
                conn,
                profile,
                log_id,
                calories if calories is not None else existing.calories_consumed,
                workout if workout is not None else existing.workout_calories,
                new_weight,
                notes if notes is not None else existing.notes,
            )
        except LogNotFoundError as e:
            fail("log edit", str(e), json_output)

    if json_output:
        output_json({
            "success": True,
            "command": "log edit",
            "data": log_to_dict(entry),
            "human_summary": f"Updated {entry.date}: {format_points(entry.total_points)} points",
        })
    else:
        console.print(
            f"[green]Updated:[/green] {entry.date} {format_points(entry.total_points)} points"
        )


@log_app.command("delete")
def log_delete(
    log_id: int = typer.Argument(..., help="Log ID"),
    user_id: Optional[int] = typer.Option(None, "--user", help="User ID (default: first user)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Delete a log."""
    from calpoint.tracking.queries import LogNotFoundError, LogQueries

    json_output = use_json(json_output)

    db = get_db()
    with db.get_connection() as conn:
        profile = load_profile(conn, user_id, "log delete", json_output)
        try:
            LogQueries.delete_log(conn, profile.user_id, log_id)
        except LogNotFoundError as e:
            fail("log delete", str(e), json_output)

    if json_output:
        output_json({
            "success": True,
            "command": "log delete",
            "data": {"log_id": log_id},
            "human_summary": f"Deleted log {log_id}",
        })
    else:
        console.print(f"[green]Deleted log {log_id}[/green]")


@log_app.command("list")
def log_list(
    start_str: Optional[str] = typer.Option(None, "--start", help="From date (YYYY-MM-DD)"),
    end_str: Optional[str] = typer.Option(None, "--end", help="To date (YYYY-MM-DD)"),
    user_id: Optional[int] = typer.Option(None, "--user", help="User ID"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List logs newest first with running point totals."""
    from calpoint.tracking.models import with_running_totals
    from calpoint.tracking.queries import LogQueries

    json_output = use_json(json_output)
    start = parse_date(start_str)
    end = parse_date(end_str)

    db = get_db()
    with db.get_connection() as conn:
        profile = load_profile(conn, user_id, "log list", json_output)
        logs = LogQueries.get_logs(conn, profile.user_id, start_date=start, end_date=end)

    rows = with_running_totals(logs)

    if json_output:
        output_json({
            "success": True,
            "command": "log list",
            "data": {"logs": [log_to_dict(r.entry, r.running_total) for r in rows]},
            "human_summary": f"{len(rows)} log entries",
        })
        return

    if not rows:
        console.print("No log entries found")
        return

    table = Table(title="Daily Logs")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Date", style="cyan")
    table.add_column("Eaten", justify="right")
    table.add_column("Workout", justify="right")
    table.add_column("Weight", justify="right")
    table.add_column("Points", justify="right")
    table.add_column("Total", justify="right", style="blue")

    for row in rows:
        entry = row.entry
        style = "green" if entry.total_points >= 0 else "red"
        table.add_row(
            str(entry.log_id),
            entry.date.isoformat(),
            str(entry.calories_consumed),
            str(entry.workout_calories),
            f"{entry.weight:.1f}" if entry.weight is not None else "",
            f"[{style}]{format_points(entry.total_points)}[/{style}]",
            f"{row.running_total:.3f}",
        )

    console.print(table)


# ============================================================================
# Reporting Commands
# ============================================================================


@app.command()
def stats(
    user_id: Optional[int] = typer.Option(None, "--user", help="User ID"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show progress, pace and projected completion."""
    from calpoint.tracking.queries import LogQueries
    from calpoint.tracking.stats import compute_stats

    json_output = use_json(json_output)
    ensure_tables()

    db = get_db()
    with db.get_connection() as conn:
        profile = load_profile(conn, user_id, "stats", json_output)
        logs = LogQueries.get_logs(conn, profile.user_id)

    report = compute_stats(profile, logs, get_settings().today())

    pace = report.pace
    if pace.projected_completion_date:
        projection = f"goal by {pace.projected_completion_date.isoformat()}"
    else:
        projection = "no projection yet"

    if json_output:
        output_json({
            "success": True,
            "command": "stats",
            "data": report.to_dict(),
            "human_summary": (
                f"{report.points.collected:.2f}/{report.points.total_needed:.2f} points "
                f"({report.points.progress_percent:.1f}%), {projection}"
            ),
        })
        return

    summary = report.summary
    if report.mode.value == "maintenance":
        console.print(Panel(
            "Maintenance mode: goal weight equals starting weight. "
            "Keep logging to hold your weight.",
            style="blue",
        ))

    console.print(f"[bold]Progress[/bold] ({report.mode.value})")
    console.print(
        f"  {summary.starting_weight} -> {summary.goal_weight} kg, "
        f"now {summary.current_weight} kg "
        f"({summary.weight_change.direction} {summary.weight_change.value:.1f} kg)"
    )
    console.print(
        f"  Days: {summary.days_logged} logged / {summary.days_elapsed} since start"
    )
    console.print(
        f"  Points: {report.points.collected:.2f} of {report.points.total_needed:.2f} "
        f"({report.points.progress_percent:.1f}%), {report.points.remaining:.2f} remaining"
    )

    console.print("\n[bold]Pace[/bold]")
    console.print(f"  Target: {pace.target_points_per_day:.3f} points/day")
    console.print(f"  Actual: {pace.actual_avg_points_per_day:.3f} points/day")
    if pace.on_track is not None:
        status = "[green]On track[/green]" if pace.on_track else "[yellow]Behind[/yellow]"
        console.print(f"  {status} ({pace.pace_difference_percent:+.1f}%)")
    if pace.days_to_goal is not None:
        console.print(f"  {pace.days_to_goal} days to go, {projection}")
    else:
        console.print(f"  {projection.capitalize()}")

    calories = report.calories
    console.print("\n[bold]Calories[/bold]")
    console.print(
        f"  TDEE {calories.tdee}, target {calories.target_calories} "
        f"(planned {calories.planned_daily_deficit:+.0f}/day)"
    )
    console.print(
        f"  Deficit: {calories.deficit_created} of {calories.total_deficit_needed} kcal, "
        f"avg {calories.avg_daily_deficit}/day"
    )


@app.command()
def charts(
    user_id: Optional[int] = typer.Option(None, "--user", help="User ID"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show chart series (weekly averages and activity levels)."""
    from calpoint.tracking.charts import compute_chart_series
    from calpoint.tracking.queries import LogQueries

    json_output = use_json(json_output)
    ensure_tables()

    db = get_db()
    with db.get_connection() as conn:
        profile = load_profile(conn, user_id, "charts", json_output)
        logs = LogQueries.get_logs(conn, profile.user_id)

    series = compute_chart_series(profile, logs)

    if json_output:
        output_json({
            "success": True,
            "command": "charts",
            "data": series.to_dict(),
            "human_summary": f"{len(series.progress_data)} days, {len(series.weekly_data)} weeks",
        })
        return

    if not series.progress_data:
        console.print("No log entries found")
        return

    table = Table(title="Weekly Averages")
    table.add_column("Week of", style="cyan")
    table.add_column("Avg points", justify="right")
    table.add_column("Status")
    for week in series.weekly_data:
        if week["on_track"] is None:
            status = "-"
        else:
            status = "[green]on track[/green]" if week["on_track"] else "[yellow]behind[/yellow]"
        table.add_row(week["week"], f"{week['avg_points']:+.2f}", status)
    console.print(table)

    levels = ".:-=#"
    heatmap = "".join(levels[day["level"]] for day in series.heatmap_data)
    console.print(f"\nActivity: [bold]{heatmap}[/bold]")
    console.print(
        f"Breakdown: diet {series.points_breakdown['diet']:+.2f}, "
        f"workout {series.points_breakdown['workout']:+.2f}"
    )


if __name__ == "__main__":
    app()
