# ABOUTME: Provides a CLI that profiles learners and predicts risks from a records table.
# ABOUTME: Also runs the in-session trigger for a single just-finished practice session.

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from src.learner_model.config import DEFAULT_CONFIG, load_engine_config
from src.learner_model.interventions import check_real_time_intervention
from src.learner_model.narrative import narrative_from_env
from src.learner_model.schemas import LearningRecord, User, to_dict
from src.learner_model.service import LearnerInsightService
from src.learner_model.store import FrameRecordStore

console = Console()
app = typer.Typer(help="Learner profiles, short-term predictions and in-session interventions.")

RISK_COLORS = {"low": "green", "medium": "yellow", "high": "red"}


def _service(records_path: Path, config_path: Optional[Path]) -> LearnerInsightService:
    if not records_path.exists():
        console.print(f"[red]Missing records table at {records_path}[/red]")
        raise typer.Exit(code=1)
    config = load_engine_config(config_path) if config_path else DEFAULT_CONFIG
    store = FrameRecordStore.from_path(records_path)
    return LearnerInsightService(store, narrative=narrative_from_env(), config=config)


def _write_json(payload: dict, json_out: Optional[Path]) -> None:
    if json_out is None:
        return
    json_out.parent.mkdir(parents=True, exist_ok=True)
    json_out.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    console.print(f"[bold]Saved JSON to {json_out}[/bold]")


@app.command()
def profile(
    user_id: str = typer.Option(..., "--user-id", help="Learner identifier in the records table."),
    records: Path = typer.Option(Path("data/learning_records.parquet"), "--records", help="Records table (parquet, csv or json)."),
    declared_style: str = typer.Option("视觉型", "--declared-style", help="Style declared at registration, used for new learners."),
    config_path: Optional[Path] = typer.Option(None, "--config", help="YAML file with an engine section."),
    json_out: Optional[Path] = typer.Option(None, "--json-out", help="Optional path for the profile as JSON."),
) -> None:
    """Print the learner profile and its narrative summary."""
    service = _service(records, config_path)
    user = User(user_id=user_id, declared_style=declared_style)
    learner = service.profile(user)
    logger.info("Built profile for {}", user_id)

    console.rule(f"[bold blue]Learner Profile: {user_id}[/bold blue]")
    style = learner.learning_style
    console.print(f"[bold]Style:[/] {style.primary_style.value} / {style.secondary_style.value} ({style.pace.value})")
    console.print(f"[bold]Records:[/] {learner.record_count} used, {learner.skipped_records} skipped")
    console.print()

    mastery_table = Table(show_header=True, header_style="bold magenta")
    mastery_table.add_column("Subject")
    mastery_table.add_column("Mastery", justify="right")
    mastery_table.add_column("Weak Topics")
    for subject in learner.knowledge_map.learning_sequence:
        mastery = learner.knowledge_map.subject_mastery[subject]
        mastery_table.add_row(subject, f"{mastery.overall_mastery:.2f}", ", ".join(mastery.common_mistakes) or "-")
    console.print(mastery_table)

    console.print()
    console.print(service.narrative.explain(learner))
    _write_json(to_dict(learner), json_out)


@app.command()
def predict(
    user_id: str = typer.Option(..., "--user-id", help="Learner identifier in the records table."),
    records: Path = typer.Option(Path("data/learning_records.parquet"), "--records", help="Records table (parquet, csv or json)."),
    declared_style: str = typer.Option("视觉型", "--declared-style", help="Style declared at registration, used for new learners."),
    config_path: Optional[Path] = typer.Option(None, "--config", help="YAML file with an engine section."),
    json_out: Optional[Path] = typer.Option(None, "--json-out", help="Optional path for the prediction as JSON."),
) -> None:
    """Print the expected score, risks and ranked interventions."""
    service = _service(records, config_path)
    prediction = service.predict(User(user_id=user_id, declared_style=declared_style))

    console.rule(f"[bold blue]Learning Prediction: {user_id}[/bold blue]")
    perf = prediction.performance
    low, high = perf.score_range
    console.print(f"[bold]Expected score:[/] {perf.expected_score:.1f} ({low:.1f} - {high:.1f})")
    console.print(f"[bold]Improvement probability:[/] {perf.improvement_probability:.0%}")
    level = prediction.risk.overall_level.value
    color = RISK_COLORS.get(level, "white")
    console.print(f"[bold]Risk level:[/] [{color}]{level}[/{color}]")
    console.print(f"[bold]Confidence:[/] {prediction.confidence:.2f}")
    console.print()

    risk_table = Table(show_header=True, header_style="bold magenta")
    risk_table.add_column("Risk")
    risk_table.add_column("Probability", justify="right")
    risk_table.add_column("Included")
    included = {r.type.value for r in prediction.risk.risks}
    for name, probability in prediction.risk.risk_factors.items():
        risk_table.add_row(name, f"{probability:.2f}", "yes" if name in included else "")
    console.print(risk_table)

    console.print()
    console.print("[bold yellow]Interventions[/bold yellow]")
    rec_table = Table(show_header=True, header_style="bold magenta")
    rec_table.add_column("Priority")
    rec_table.add_column("Type")
    rec_table.add_column("Target")
    rec_table.add_column("Timeline")
    for rec in prediction.interventions:
        rec_table.add_row(rec.priority.value, rec.type.value, rec.target_area, rec.timeline)
    console.print(rec_table)
    _write_json(to_dict(prediction), json_out)


@app.command("check-session")
def check_session(
    user_id: str = typer.Option(..., "--user-id", help="Learner whose stored history precedes this session."),
    score: float = typer.Option(..., "--score", help="Score of the session just completed (0-100)."),
    duration_seconds: int = typer.Option(..., "--duration-seconds", help="Length of the session in seconds."),
    subject: str = typer.Option("数学", "--subject", help="Subject of the session."),
    topic: str = typer.Option("", "--topic", help="Topic of the session."),
    difficulty: str = typer.Option("基础", "--difficulty", help="Difficulty label of the session."),
    records: Path = typer.Option(Path("data/learning_records.parquet"), "--records", help="Records table (parquet, csv or json)."),
    config_path: Optional[Path] = typer.Option(None, "--config", help="YAML file with an engine section."),
) -> None:
    """Check whether the session just completed calls for an immediate nudge."""
    if not records.exists():
        console.print(f"[red]Missing records table at {records}[/red]")
        raise typer.Exit(code=1)
    config = load_engine_config(config_path) if config_path else DEFAULT_CONFIG
    history = FrameRecordStore.from_path(records).get_history(user_id)

    session = LearningRecord(
        timestamp=datetime.now(timezone.utc),
        subject=subject,
        topic=topic,
        difficulty=difficulty,
        score=score,
        duration_seconds=duration_seconds,
    )
    recommendation = check_real_time_intervention(session, history, config)
    if recommendation is None:
        console.print(f"[green]✅ No intervention needed for {user_id}[/green]")
        return

    color = RISK_COLORS.get(recommendation.priority.value, "white")
    console.print(f"[{color}]{recommendation.target_area} ({recommendation.priority.value})[/{color}]")
    for action in recommendation.actions:
        console.print(f"  → {action}")


if __name__ == "__main__":
    app()
