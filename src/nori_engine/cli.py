"""CLI entry point for the Nori dialogue engine."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from nori_engine.config import AssistantConfig
from nori_engine.skill.base import Permission

if TYPE_CHECKING:
    from nori_engine.eval.handler import SkillHandler
    from nori_engine.skill.context import SkillContext

app = typer.Typer(
    name="nori",
    help="Nori dialogue engine: route utterances to skills and follow up on them.",
    no_args_is_help=True,
)
console = Console()


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_config(path: Path | None) -> AssistantConfig:
    if path is None:
        return AssistantConfig.default()
    try:
        return AssistantConfig.from_yaml(path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Invalid config {path}: {escape(str(e))}[/red]")
        raise typer.Exit(1) from e


def _build_handler(config: AssistantConfig) -> tuple[SkillContext, SkillHandler]:
    from nori_engine.eval.handler import SkillHandler
    from nori_engine.io.speech import ConsoleSpeechDevice
    from nori_engine.skill.context import SkillContext
    from nori_engine.skills import all_skill_infos, fallback_skill_info

    ctx = SkillContext(config=config, speech_output_device=ConsoleSpeechDevice(console))
    handler = SkillHandler(ctx, all_skill_infos(config), fallback_skill_info())
    handler.apply_settings(config.enabled_skills)
    return ctx, handler


@app.command()
def chat(
    config_path: Path | None = typer.Option(None, "--config", help="YAML configuration file"),
    allow_all: bool = typer.Option(False, help="Grant every permission without asking"),
    log_level: str = typer.Option("WARNING", help="Logging level"),
) -> None:
    """Talk to the assistant by typing, one utterance per line."""
    from nori_engine.eval.evaluator import SkillEvaluator
    from nori_engine.io.stt import TextInputDevice
    from nori_engine.models.events import Final

    _setup_logging(log_level)
    config = _load_config(config_path)

    async def _request_permissions(permissions: Sequence[Permission]) -> bool:
        if allow_all:
            return True
        names = ", ".join(p.value.replace("_", " ") for p in permissions)
        return typer.confirm(f"Allow access to: {names}?", default=False)

    async def _chat() -> None:
        ctx, handler = _build_handler(config)
        stt = TextInputDevice()
        evaluator = SkillEvaluator(ctx, handler, stt, permission_requester=_request_permissions)

        console.print("\n[bold]Nori[/bold]")
        console.print("[dim]Type 'quit' to leave.[/dim]")
        try:
            while True:
                console.print("")
                try:
                    user_input = input("You: ")
                except (EOFError, KeyboardInterrupt):
                    break

                if user_input.strip().lower() in ("quit", "exit", "q"):
                    break
                if not user_input.strip():
                    continue

                event = Final.of(user_input)
                # An answer asked for by the last output goes to the reopened microphone
                if not stt.deliver(event):
                    evaluator.process_input_event(event)
                await evaluator.join()

                answer = evaluator.state.value.get_last_answer()
                if answer is not None:
                    rendered = answer.render(ctx)
                    if rendered and rendered != answer.get_speech_output(ctx):
                        console.print(f"[dim]{escape(rendered)}[/dim]")
        finally:
            await evaluator.aclose()
        console.print("[dim]Bye.[/dim]")

    asyncio.run(_chat())


@app.command()
def rank(
    text: str = typer.Argument(help="Utterance to rank"),
    config_path: Path | None = typer.Option(None, "--config", help="YAML configuration file"),
    log_level: str = typer.Option("WARNING", help="Logging level"),
) -> None:
    """Show how each enabled skill scores an utterance, and which one wins."""
    from nori_engine.eval.ranker import score_and_wrap

    _setup_logging(log_level)
    config = _load_config(config_path)
    ctx, handler = _build_handler(config)
    ranker = handler.skill_ranker

    results = [score_and_wrap(skill, ctx, text) for skill in ranker.default_batch]
    results.sort(key=lambda r: r.skill.specificity, reverse=True)

    console.print(f"\n[bold]Scores for[/bold] {escape(repr(text))}")
    for result in results:
        acceptable = result.score.is_acceptable(ranker.acceptance_threshold)
        color = "green" if acceptable else "dim"
        console.print(
            f"  [{color}]{str(result.score):>12}[/{color}] "
            f"{result.skill.specificity.name:<6} {result.skill.skill_info.id}"
        )

    best = ranker.get_best(ctx, text)
    if best is None:
        best = ranker.get_fallback_skill(ctx, text)
        console.print(f"\n[yellow]No skill understood, fallback:[/yellow] {best.skill.skill_info.id}")
    else:
        console.print(f"\n[green]Chosen:[/green] {best.skill.skill_info.id} ({best.score})")


@app.command()
def skills(
    config_path: Path | None = typer.Option(None, "--config", help="YAML configuration file"),
) -> None:
    """List the bundled skills and whether they are enabled."""
    config = _load_config(config_path)
    ctx, handler = _build_handler(config)
    enabled = {info.id for info in handler.enabled_skills_info.value or []}

    console.print("\n[bold]Skills[/bold]")
    for info in handler.all_skill_infos:
        if info.id in enabled:
            status = "[green]enabled[/green]"
        elif not config.enabled_skills.get(info.id, True):
            status = "[yellow]disabled[/yellow]"
        else:
            status = "[red]unavailable[/red]"
        example = info.sentence_example()
        console.print(f"  {info.id:<14} {status}  [dim]{escape(example)}[/dim]")
    console.print(f"\n[bold]Fallback:[/bold] {handler.fallback_skill_info.id}")


@app.command()
def auto(
    seconds: float = typer.Option(5.0, help="How long to keep refreshing"),
    config_path: Path | None = typer.Option(None, "--config", help="YAML configuration file"),
    log_level: str = typer.Option("WARNING", help="Logging level"),
) -> None:
    """Run the auto-refreshing skills for a while, printing what they show."""
    from nori_engine.eval.auto_runner import AutoSkillRunner

    _setup_logging(log_level)
    config = _load_config(config_path)

    async def _auto() -> None:
        ctx, handler = _build_handler(config)
        runner = AutoSkillRunner(handler, ctx)
        runner.start()

        async def _print_outputs() -> None:
            async for outputs in runner.outputs.subscribe():
                for skill_id, output in outputs.items():
                    console.print(f"[cyan]{skill_id}[/cyan] {escape(output.render(ctx))}")

        printer = asyncio.create_task(_print_outputs())
        try:
            await asyncio.sleep(seconds)
        finally:
            printer.cancel()
            await asyncio.gather(printer, return_exceptions=True)
            await runner.aclose()

    asyncio.run(_auto())
