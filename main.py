"""Practical Exam Scheduler: main CLI.

Usage:
  python main.py config init                    Write the default configuration
  python main.py config show                    Show the active configuration
  python main.py requirements 260 --available 2 Exam days needed for 260 students
  python main.py select-dates 01-01-24 05-01-24 --students 200 --min-gap 3
  python main.py validate request.json          Check a request without scheduling
  python main.py generate request.json          Build the schedule
  python main.py demo                           Write a sample request
"""

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()

DEFAULT_REQUEST_JSON = Path("output/sample_request.json")
DEFAULT_SCHEDULE_JSON = Path("output/schedule.json")


def _load_config(config_path):
    """Loads the YAML config, or the defaults when there is none."""
    from config.manager import ConfigManager
    mgr = ConfigManager(config_path)
    try:
        return mgr.load_or_default()
    except ValueError as e:
        console.print(f"[red bold]Configuration error:[/red bold]\n{e}")
        sys.exit(1)


def _load_request(path: Path):
    from pydantic import ValidationError
    from models.api import ScheduleRequest
    try:
        return ScheduleRequest.load_json(path)
    except (ValidationError, json.JSONDecodeError) as e:
        console.print(f"[red bold]Invalid request file {path}:[/red bold]\n{e}")
        sys.exit(1)


def _print_schedule(schedule) -> None:
    """Prints one table per (date, lab)."""
    meta = schedule.exam_metadata
    console.print(Panel(
        f"[bold]{meta.exam_name or 'Exam Schedule'}[/bold]\n"
        f"Department: {meta.department or 'N/A'}  |  "
        f"Semester: {meta.semester or 'N/A'}  |  "
        f"Academic year: {meta.academic_year or 'N/A'}",
        border_style="cyan",
    ))
    for entry in schedule.schedule:
        title = f"{entry.date}  {entry.lab}"
        if entry.subject:
            title += f"  {entry.subject}"
        if entry.batch:
            title += f"  | {entry.batch}"
        caption = " | ".join(
            f"{kind}: {e.name}"
            for kind, e in (("Int", entry.internal_examiner), ("Ext", entry.external_examiner))
            if e is not None
        )
        table = Table(title=title, caption=caption or None, box=box.ROUNDED)
        table.add_column("Time")
        table.add_column("Session")
        table.add_column("Count", justify="right")
        table.add_column("Register Numbers")
        for slot in entry.slots:
            table.add_row(
                slot.time,
                slot.session.capitalize(),
                str(len(slot.register_numbers)),
                ", ".join(slot.register_numbers),
            )
        console.print(table)


def _print_messages(errors, warnings) -> None:
    for e in errors:
        console.print(f"[red]✗ {e.field}: {e.message}[/red]")
    for w in warnings:
        console.print(f"[yellow]! {w}[/yellow]")


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Show or create the engine configuration."""


@cmd_config.command("init")
@click.option("--force", is_flag=True, default=False,
              help="Overwrite an existing configuration.")
@click.pass_context
def config_init(ctx, force: bool):
    """Writes the default configuration as YAML."""
    from config.defaults import default_engine_config
    from config.manager import ConfigManager

    mgr = ConfigManager(ctx.obj["config_path"])
    if not mgr.first_run_check() and not force:
        console.print(
            f"[yellow]A configuration already exists: {mgr.path}[/yellow]\n"
            "Use [bold]--force[/bold] to overwrite it."
        )
        return
    mgr.save(default_engine_config())


@cmd_config.command("show")
@click.pass_context
def config_show(ctx):
    """Shows the active configuration."""
    config = _load_config(ctx.obj["config_path"])

    cap = config.capacity
    console.print(Panel(
        f"[bold]{config.institution_name}[/bold]  |  "
        f"{cap.daily_capacity} students/day  |  "
        f"{cap.slot_capacity} per slot  |  "
        f"minimum cohort {cap.min_students}",
        title="Engine configuration",
        border_style="cyan",
    ))

    table = Table(title="Time slots", box=box.ROUNDED)
    table.add_column("Time")
    table.add_column("Session")
    table.add_column("Capacity", justify="right")
    for slot in config.schedule.time_slots:
        table.add_row(slot.time, slot.session, str(config.slot_capacity_of(slot)))
    console.print(table)

    console.print(f"[bold]Default labs:[/bold] {', '.join(config.schedule.default_labs)}")
    console.print(f"[bold]Default minimum gap:[/bold] {config.schedule.min_gap_days} day(s)")


# ─── REQUIREMENTS ─────────────────────────────────────────────────────────────

@click.command("requirements")
@click.argument("students", type=int)
@click.option("--available", default=0, type=int,
              help="Number of dates already available.")
@click.pass_context
def cmd_requirements(ctx, students: int, available: int):
    """Calculates how many exam days STUDENTS need."""
    from engine.errors import InvalidInput
    from service.schedule_service import calculate_requirements

    config = _load_config(ctx.obj["config_path"])
    try:
        result = calculate_requirements(students, available, config)
    except InvalidInput as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    console.print(
        f"[bold]{result.student_count}[/bold] students at "
        f"{result.daily_capacity}/day → [bold]{result.required_days}[/bold] day(s)"
    )
    if result.dates_sufficient is not None:
        if result.dates_sufficient:
            console.print(f"[green]✓[/green] {result.available_dates} date(s) are enough.")
        else:
            console.print(
                f"[red]✗[/red] {result.available_dates} date(s) given, "
                f"{result.additional_dates_needed} more needed."
            )


# ─── SELECT-DATES ─────────────────────────────────────────────────────────────

@click.command("select-dates")
@click.argument("dates", nargs=-1, required=True)
@click.option("--students", "-n", required=True, type=int, help="Number of students.")
@click.option("--min-gap", default=None, type=int,
              help="Minimum gap in days between selected dates.")
@click.option("--subject", "subjects", multiple=True,
              help="Subject for the n-th selected date (repeatable).")
@click.pass_context
def cmd_select_dates(ctx, dates, students: int, min_gap, subjects):
    """Selects exam dates (DD-MM-YY) from the candidate DATES."""
    from models.api import AutoSelectDatesRequest
    from service.schedule_service import auto_select_dates

    config = _load_config(ctx.obj["config_path"])
    gap = min_gap if min_gap is not None else config.schedule.min_gap_days
    result = auto_select_dates(AutoSelectDatesRequest(
        available_dates=list(dates),
        student_count=students,
        min_gap_days=gap,
        subjects=list(subjects),
    ), config)

    if not result.success:
        console.print(f"[red]✗ {result.error}[/red]")
        if result.selected_dates:
            console.print(f"[dim]Selectable: {', '.join(result.selected_dates)}[/dim]")
        sys.exit(1)

    console.print(f"[green]✓[/green] {result.message}")
    table = Table(box=box.SIMPLE)
    table.add_column("Date")
    table.add_column("Subject")
    for ed in result.exam_dates:
        table.add_row(ed.date, ed.subject or "")
    console.print(table)
    info = result.schedule_info
    console.print(
        f"Days needed: {info.days_needed} | Days selected: {info.days_selected} | "
        f"Capacity: {result.students_per_day}/day"
    )


# ─── VALIDATE ─────────────────────────────────────────────────────────────────

@click.command("validate")
@click.argument("request_file", type=click.Path(exists=True, path_type=Path))
@click.pass_context
def cmd_validate(ctx, request_file: Path):
    """Validates a schedule request without allocating."""
    from engine.intake import build_plan
    from engine.validator import ScheduleValidator

    config = _load_config(ctx.obj["config_path"])
    request = _load_request(request_file)
    report = ScheduleValidator(config).validate(build_plan(request, config))
    report.print_rich()
    sys.exit(0 if report.is_valid else 1)


# ─── GENERATE ─────────────────────────────────────────────────────────────────

@click.command("generate")
@click.argument("request_file", type=click.Path(exists=True, path_type=Path))
@click.option("--output", "-o", default=str(DEFAULT_SCHEDULE_JSON),
              help="Where to write the schedule JSON.")
@click.option("--check/--no-check", default=True,
              help="Re-check the finished schedule.")
@click.option("--quiet", "-q", is_flag=True, default=False,
              help="Do not print the schedule tables.")
@click.pass_context
def cmd_generate(ctx, request_file: Path, output: str, check: bool, quiet: bool):
    """Generates a schedule from a request JSON file."""
    from analysis.schedule_checker import ScheduleChecker
    from service.schedule_service import generate_with_plan

    config = _load_config(ctx.obj["config_path"])
    request = _load_request(request_file)
    plan, response = generate_with_plan(request, config)

    _print_messages(response.errors, response.warnings)
    if not response.success:
        console.print("[red bold]No schedule generated.[/red bold]")
        sys.exit(1)

    schedule = response.data
    if not quiet:
        _print_schedule(schedule)

    if check:
        expected = [s.register_number for s in plan.students]
        report = ScheduleChecker(config.day_capacity_for(len(plan.labs))).check(schedule, expected)
        report.print_rich()
        if not report.is_valid:
            sys.exit(1)

    out_path = Path(output)
    schedule.save_json(out_path)
    console.print(f"[green]✓[/green] Schedule saved: {out_path}")


# ─── DEMO ─────────────────────────────────────────────────────────────────────

@click.command("demo")
@click.option("--seed", default=42, help="Random seed for reproducible data.")
@click.option("--semesters", default=1, help="Number of semesters.")
@click.option("--batches", default=3, help="Batches per semester.")
@click.option("--duplicates", default=0, help="Register numbers to repeat.")
@click.option("--subjects", "with_subjects", is_flag=True, default=False,
              help="Attach a subject to every date.")
@click.option("--output", "-o", default=str(DEFAULT_REQUEST_JSON),
              help="Where to write the request JSON.")
def cmd_demo(seed: int, semesters: int, batches: int, duplicates: int,
             with_subjects: bool, output: str):
    """Writes a sample schedule request."""
    from data.fake_data import FakeCohortGenerator

    request = FakeCohortGenerator(seed=seed).generate(
        num_semesters=semesters,
        batches_per_semester=batches,
        duplicates=duplicates,
        with_subjects=with_subjects,
    )
    out_path = Path(output)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        f.write(request.model_dump_json(indent=2))

    total = sum(s.student_count for s in request.semesters)
    console.print(f"[green]✓[/green] Sample request ({total} students) saved: {out_path}")
    console.print(f"Continue with [bold]python main.py generate {out_path}[/bold]")


# ─── MAIN CLI ─────────────────────────────────────────────────────────────────

@click.group()
@click.option("--config", "config_path", default=None,
              type=click.Path(path_type=Path),
              help="Path of the YAML configuration (default: config/engine_config.yaml).")
@click.option("--verbose", "-v", is_flag=True, default=False,
              help="Show engine log output.")
@click.pass_context
def cli(ctx, config_path, verbose: bool):
    """Practical exam scheduler for engineering colleges."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


cli.add_command(cmd_config)
cli.add_command(cmd_requirements)
cli.add_command(cmd_select_dates)
cli.add_command(cmd_validate)
cli.add_command(cmd_generate)
cli.add_command(cmd_demo)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
