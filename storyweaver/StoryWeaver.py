"""
Story Weaver: CLI for writing illustrated, narrated short stories with Google Gemini.
"""

from datetime import datetime
from pathlib import Path

import typer
from rich.prompt import Confirm

from .audio import wav_duration_seconds
from .config import Config, load_config
from .console import console, setup_logging
from .controller import StoryController
from .export import DEFAULT_PDF_FILENAME
from .flows import (
    AdjustStoryLengthInput,
    AdjustStoryRandomnessInput,
    adjust_story_length,
    adjust_story_randomness,
)
from .form import validate_form
from .formatters import (
    display_error,
    display_history,
    display_notification,
    display_story,
    display_success,
    run_sync,
    spinner,
)
from .history import HistoryStore
from .llm_backend import LLMBackend, get_backend
from .media import image_file_to_data_uri, parse_data_uri, save_data_uri
from .schema.cli_integration import (
    generate_boolean_cli_option,
    generate_cli_option,
    validate_cli_arguments,
)
from .share import ShareTarget
from .shared.errors import BackendUnavailableError, ConfigError, FormValidationError, StoryWeaverError
from .shared.types import Notification
from .story_picker import pick_story

app = typer.Typer(
    help="Story Weaver: continue a story from a prompt or a photo, with an illustration and narration.\n\n"
    "Configuration: Use 'storyweaver config init' to create a config file with default values.\n"
    "Environment: Set GEMINI_API_KEY for the Gemini backend, STORYWEAVER_CONFIG for a custom config file "
    "and STORYWEAVER_HISTORY for a custom history file.\n\n"
    "History: The last 20 stories are kept and can be listed, re-read, narrated, exported or shared.",
    epilog="Examples:\n\n"
    "  # Continue a story\n"
    "  storyweaver 'The old lighthouse keeper saw a strange light'\n\n"
    "  # Write in French, 120 words at most\n"
    "  storyweaver 'The old lighthouse keeper saw a strange light' --language French --max-length 120\n\n"
    "  # Build a story around the people in a photo, then narrate it\n"
    "  storyweaver --image family.jpg --listen\n\n"
    "  # Export the newest story to PDF\n"
    "  storyweaver export --output story.pdf",
)
config_app = typer.Typer(help="Configuration management commands")
history_app = typer.Typer(help="Browse and manage the story history")
app.add_typer(config_app, name="config")
app.add_typer(history_app, name="history")

ILLUSTRATION_FILENAME = "story_illustration"
NARRATION_FILENAME = "story_narration.wav"


def generate_default_output_dir() -> str:
    """Generate a timestamped output directory name."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"storyweaver_output_{timestamp}"


def _load_settings(verbose: bool | None, debug: bool | None) -> tuple[Config, bool, bool]:
    """Load the config file, merge the logging flags and set up logging."""
    try:
        config = load_config(verbose=bool(verbose))
    except ConfigError as e:
        console.print(f"[red]Configuration Error:[/red] {e}", style="bold")
        raise typer.Exit(1) from None

    verbose = verbose if verbose is not None else config.get_field_value("system", "verbose")
    debug = debug if debug is not None else config.get_field_value("system", "debug")
    if debug:
        verbose = True  # Ensure verbose is enabled in debug mode

    setup_logging(verbose=bool(verbose), debug=bool(debug))
    return config, bool(verbose), bool(debug)


def _create_backend(config: Config, debug: bool) -> LLMBackend:
    try:
        return get_backend(
            "debug" if debug else None,
            text_model=config.get_field_value("system", "text_model"),
            image_model=config.get_field_value("images", "image_model"),
            tts_model=config.get_field_value("audio", "tts_model"),
            voice=config.get_field_value("audio", "voice"),
        )
    except BackendUnavailableError as e:
        display_error(e, e.recovery_hint)
        raise typer.Exit(1) from None


def _open_session(
    config: Config,
    debug: bool,
    needs_backend: bool = True,
    generate_images: bool = True,
) -> StoryController:
    backend = _create_backend(config, debug) if needs_backend else None
    return StoryController(backend, HistoryStore(), notify=display_notification, generate_images=generate_images)


def _select(controller: StoryController, index: int) -> str:
    """Select history position ``index`` (1 is the newest story) or exit."""
    try:
        return controller.select_story(index - 1)
    except IndexError:
        count = len(controller.state.history)
        if count == 0:
            console.print("[yellow]No stories in your history yet.[/yellow]")
        else:
            console.print(f"[red]Error:[/red] No story at position {index}; the history holds {count} stories.")
        raise typer.Exit(1) from None


def _validate_or_exit(**cli_args) -> None:
    provided_args = {k: v for k, v in cli_args.items() if v is not None}
    validation_errors = validate_cli_arguments(**provided_args)
    if validation_errors:
        console.print("[red]CLI Argument Validation Errors:[/red]", style="bold")
        for error in validation_errors:
            console.print(f"  - {error}", style="red")
        raise typer.Exit(1)


def _save_narration(controller: StoryController, target: Path) -> Path | None:
    narration = controller.state.narration
    if narration is None:
        return None
    path = save_data_uri(narration.audio_data_uri, target)
    seconds = wav_duration_seconds(parse_data_uri(narration.audio_data_uri).data)
    display_success("Narration saved", {"File": path, "Length": f"{seconds:.1f}s"})
    return path


@config_app.command(name="init", help="Create a default configuration file in the XDG config directory.")
def init_config(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing config file"),
    config_path: str | None = typer.Option(None, "--path", "-p", help="Custom config file path"),
) -> None:
    """Create a default configuration file."""
    try:
        config = Config()
        target_path = config.get_default_config_path() if config_path is None else Path(config_path)

        if target_path.exists() and not force:
            console.print(f"[yellow]Configuration file already exists:[/yellow] {target_path}")
            console.print("[dim]Use --force to overwrite the existing configuration file[/dim]")
            raise typer.Exit(0)

        created_path = config.create_default_config(target_path)
        console.print(f"[bold green]✅ Configuration file created:[/bold green] {created_path}")
        console.print()
        console.print(
            "[bold]You can override the configuration location with the STORYWEAVER_CONFIG environment variable.[/bold]"
        )
        console.print()
        console.print("[bold]Configuration file locations (in priority order):[/bold]")
        for i, search_path in enumerate(config.get_config_paths(), 1):
            if search_path == created_path:
                console.print(f"  {i}. {search_path} [bold green](created here)[/bold green]")
            else:
                console.print(f"  {i}. {search_path}")
    except typer.Exit:
        raise
    except OSError as e:
        console.print(f"[red]Error creating configuration file:[/red] {e}", style="bold")
        raise typer.Exit(1) from None


@app.command(
    "main",  # Default command via cli_entry
    context_settings={"help_option_names": ["-h", "--help"]},
    help="Write a story from a prompt and/or a photo",
)
def main(
    ctx: typer.Context,
    prompt: str | None = typer.Argument(
        None,
        help="How the story starts (at least 10 characters unless --image is given, at most 500)",
    ),
    image: Path | None = typer.Option(
        None, "--image", "-i", help="Photo to build the story around", exists=True, dir_okay=False
    ),
    language: str | None = generate_cli_option("language"),
    max_length: int | None = generate_cli_option("max_length"),
    temperature: float | None = generate_cli_option("temperature"),
    generate_images: bool | None = generate_boolean_cli_option("generate_images", "--images/--no-images"),
    listen: bool = typer.Option(False, "--listen", help="Narrate the story once it is written"),
    edit: bool = typer.Option(False, "--edit", help="Open the story in your editor before exporting or sharing"),
    pdf: Path | None = typer.Option(None, "--pdf", help="Export the story to this PDF file"),
    share: ShareTarget | None = typer.Option(None, "--share", help="Share the story when done"),
    output_dir: str | None = generate_cli_option("output_dir"),
    verbose: bool | None = generate_cli_option("verbose"),
    debug: bool | None = generate_cli_option("debug"),
):
    _validate_or_exit(
        language=language,
        max_length=max_length,
        temperature=temperature,
        generate_images=generate_images,
        output_dir=output_dir,
        verbose=verbose,
        debug=debug,
    )

    config, verbose, debug = _load_settings(verbose, debug)

    # CLI takes precedence over the config file
    language = language if language is not None else config.get_field_value("story", "language")
    max_length = max_length if max_length is not None else config.get_field_value("story", "max_length")
    temperature = temperature if temperature is not None else config.get_field_value("story", "temperature")
    generate_images = (
        generate_images if generate_images is not None else config.get_field_value("images", "generate_images")
    )
    output_dir = output_dir if output_dir is not None else (config.get_field_value("output", "output_dir") or None)

    if prompt is None and image is None:
        console.print(ctx.get_help())
        raise typer.Exit(0)

    image_data_uri = None
    if image is not None:
        try:
            image_data_uri = image_file_to_data_uri(image)
        except ValueError as e:
            console.print(f"[red]image:[/red] {e}", style="bold")
            raise typer.Exit(1) from None

    try:
        request = validate_form(prompt, image_data_uri, max_length, temperature, language)
    except FormValidationError as e:
        console.print(f"[red]{e.field}:[/red] {e.message}", style="bold")
        raise typer.Exit(1) from None

    controller = _open_session(config, debug, generate_images=bool(generate_images))
    target_dir = Path(output_dir or generate_default_output_dir())

    # One event loop for the whole session; the async client is bound to it
    async def weave() -> bool:
        with spinner("Weaving your story..."):
            produced = await controller.submit(request)
        if not produced:
            return False

        display_story(controller.story_text)

        illustration = controller.state.illustration
        if illustration:
            path = save_data_uri(illustration.image_data_uri, target_dir / ILLUSTRATION_FILENAME)
            display_success("Illustration saved", {"File": path})

        if edit:
            edited = typer.edit(controller.story_text)
            if edited is not None and edited.strip() and edited.strip() != controller.story_text:
                controller.edit_story(edited.strip())
                display_story(controller.story_text, title="Your Edited Story")

        if listen:
            with spinner("Recording narration..."):
                narrated = await controller.listen()
            if narrated:
                _save_narration(controller, target_dir / NARRATION_FILENAME)
        return True

    if not run_sync(weave()):
        raise typer.Exit(1)

    if pdf is not None:
        controller.export_pdf(pdf)

    if share is not None and controller.share(share) and share in (ShareTarget.WHATSAPP, ShareTarget.EMAIL):
        display_success(f"Opened {share.value} to share your story")


@history_app.command("list", help="List the saved stories, newest first")
def history_list() -> None:
    display_history(HistoryStore().load())


@history_app.command("show", help="Print one saved story")
def history_show(
    index: int = typer.Argument(1, min=1, help="History position (1 is the newest story)"),
) -> None:
    history = HistoryStore().load()
    if not 1 <= index <= len(history):
        console.print(f"[red]Error:[/red] No story at position {index}.")
        raise typer.Exit(1)
    display_story(history[index - 1], title=f"Story {index}")


@history_app.command("pick", help="Browse the history interactively")
def history_pick() -> None:
    history = HistoryStore().load()
    if not history:
        console.print("[yellow]No stories in your history yet.[/yellow]")
        raise typer.Exit(0)

    selected = pick_story(history)
    if selected is None:
        console.print("[yellow]No story selected.[/yellow]")
        raise typer.Exit(0)

    display_story(history[selected], title=f"Story {selected + 1}")
    console.print(
        f"[dim]Use 'storyweaver listen --index {selected + 1}', 'storyweaver export --index {selected + 1}' "
        f"or 'storyweaver share <target> --index {selected + 1}' with this story.[/dim]"
    )


@history_app.command("clear", help="Delete every saved story")
def history_clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    store = HistoryStore()
    if not yes and not Confirm.ask("[bold red]Delete your whole story history?[/bold red]"):
        raise typer.Exit(0)

    store.clear()
    display_notification(Notification("History Cleared", "Your story history has been cleared."))


@app.command("listen", help="Narrate a story from your history")
def listen_command(
    index: int = typer.Option(1, "--index", "-n", min=1, help="History position (1 is the newest story)"),
    output: Path | None = typer.Option(None, "--output", "-o", help="WAV file to write"),
    verbose: bool | None = generate_cli_option("verbose"),
    debug: bool | None = generate_cli_option("debug"),
) -> None:
    config, verbose, debug = _load_settings(verbose, debug)
    controller = _open_session(config, debug)
    _select(controller, index)

    with spinner("Recording narration..."):
        narrated = run_sync(controller.listen())
    if not narrated:
        raise typer.Exit(1)

    if output is None:
        output_dir = config.get_field_value("output", "output_dir") or generate_default_output_dir()
        output = Path(output_dir) / NARRATION_FILENAME
    _save_narration(controller, output)


@app.command("export", help="Export a story from your history to PDF")
def export_command(
    index: int = typer.Option(1, "--index", "-n", min=1, help="History position (1 is the newest story)"),
    image: Path | None = typer.Option(
        None, "--image", exists=True, dir_okay=False, help="Illustration to place above the text"
    ),
    illustrate: bool = typer.Option(False, "--illustrate", help="Generate a new illustration for the story first"),
    output: Path = typer.Option(Path(DEFAULT_PDF_FILENAME), "--output", "-o", help="PDF file to write"),
    font: Path | None = typer.Option(
        None, "--font", exists=True, dir_okay=False, help="TrueType font for text outside Latin-1"
    ),
    verbose: bool | None = generate_cli_option("verbose"),
    debug: bool | None = generate_cli_option("debug"),
) -> None:
    config, verbose, debug = _load_settings(verbose, debug)
    controller = _open_session(config, debug, needs_backend=illustrate)
    _select(controller, index)

    if image is not None:
        try:
            controller.attach_illustration(image_file_to_data_uri(image))
        except ValueError as e:
            console.print(f"[red]image:[/red] {e}", style="bold")
            raise typer.Exit(1) from None
    elif illustrate:
        with spinner("Painting an illustration..."):
            run_sync(controller.illustrate())

    report = controller.export_pdf(output, font_path=font)
    if report is None:
        raise typer.Exit(1)
    if verbose:
        console.print(f"[dim]{report.pages} page(s), illustration included: {report.image_embedded}[/dim]")


@app.command("share", help="Share a story from your history")
def share_command(
    target: ShareTarget = typer.Argument(..., help="Where to share the story"),
    index: int = typer.Option(1, "--index", "-n", min=1, help="History position (1 is the newest story)"),
    verbose: bool | None = generate_cli_option("verbose"),
) -> None:
    config, verbose, _ = _load_settings(verbose, None)
    controller = _open_session(config, debug=False, needs_backend=False)
    _select(controller, index)

    if not controller.share(target):
        raise typer.Exit(1)
    if target in (ShareTarget.WHATSAPP, ShareTarget.EMAIL):
        display_success(f"Opened {target.value} to share your story")


@app.command("adjust-length", help="Rewrite a story to a word limit without cutting it off")
def adjust_length_command(
    max_length: int = typer.Option(100, "--max-length", "-l", min=1, help="Maximum length in words"),
    index: int | None = typer.Option(
        None, "--index", "-n", min=1, help="History position (1 is the newest story, the default)"
    ),
    file: Path | None = typer.Option(
        None, "--file", "-f", exists=True, dir_okay=False, help="Read the story from a text file instead"
    ),
    verbose: bool | None = generate_cli_option("verbose"),
    debug: bool | None = generate_cli_option("debug"),
) -> None:
    if index is not None and file is not None:
        console.print("[red]Error:[/red] Use either --index or --file, not both.", style="bold")
        raise typer.Exit(1)

    config, verbose, debug = _load_settings(verbose, debug)
    backend = _create_backend(config, debug)

    if file is not None:
        story = file.read_text(encoding="utf-8").strip()
    else:
        history = HistoryStore().load()
        position = index or 1
        if not 1 <= position <= len(history):
            console.print(f"[red]Error:[/red] No story at position {position}.")
            raise typer.Exit(1)
        story = history[position - 1]

    try:
        with spinner(f"Trimming the story to {max_length} words..."):
            result = run_sync(adjust_story_length(backend, AdjustStoryLengthInput(story=story, max_length=max_length)))
    except StoryWeaverError as e:
        display_error(e, e.recovery_hint)
        raise typer.Exit(1) from None

    display_story(result.adjusted_story, title=f"Adjusted Story (≤{max_length} words)")


@app.command("riff", help="Continue a story start at a chosen randomness")
def riff_command(
    prompt: str = typer.Argument(..., help="The start of the story"),
    temperature: float | None = generate_cli_option("temperature"),
    max_length: int | None = generate_cli_option("max_length"),
    verbose: bool | None = generate_cli_option("verbose"),
    debug: bool | None = generate_cli_option("debug"),
) -> None:
    config, verbose, debug = _load_settings(verbose, debug)
    temperature = temperature if temperature is not None else config.get_field_value("story", "temperature")
    max_length = max_length if max_length is not None else config.get_field_value("story", "max_length")

    try:
        data = AdjustStoryRandomnessInput(prompt=prompt, temperature=temperature, max_length=max_length)
    except FormValidationError as e:
        console.print(f"[red]{e.field}:[/red] {e.message}", style="bold")
        raise typer.Exit(1) from None

    backend = _create_backend(config, debug)
    try:
        with spinner("Riffing on your story..."):
            result = run_sync(adjust_story_randomness(backend, data))
    except StoryWeaverError as e:
        display_error(e, e.recovery_hint)
        raise typer.Exit(1) from None

    display_story(result.story, title=f"Riff (temperature {temperature:g})")


COMMANDS = ["main", "config", "history", "listen", "export", "share", "adjust-length", "riff"]


def cli_entry() -> None:
    """Entry point for the CLI that handles default command routing."""
    import sys

    # Show help if no arguments provided
    if len(sys.argv) == 1:
        sys.argv.append("--help")
    # If first argument doesn't look like a subcommand or flag, assume it's a prompt for main command
    elif not sys.argv[1].startswith("-") and sys.argv[1] not in COMMANDS:
        sys.argv.insert(1, "main")
    # Options for the main command (e.g. --image) also route to it, unless a subcommand follows them
    elif (
        sys.argv[1].startswith("-")
        and sys.argv[1] not in ("--help", "-h", "--install-completion", "--show-completion")
        and not any(arg in COMMANDS for arg in sys.argv[2:])
    ):
        sys.argv.insert(1, "main")
    app()


if __name__ == "__main__":
    cli_entry()
