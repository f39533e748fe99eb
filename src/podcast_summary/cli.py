"""CLI interface for podcast-summary"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import click
from click.core import ParameterSource

from podcast_summary.application.summary_service import SummaryService
from podcast_summary.domain.models.summary_result import SummaryResult
from podcast_summary.domain.prompts.summary_prompts import SummaryPromptBuilder
from podcast_summary.infrastructure.config.config_manager import ConfigManager
from podcast_summary.infrastructure.llm.base import LLMProvider
from podcast_summary.infrastructure.llm.factory import LLMProviderFactory
from podcast_summary.infrastructure.markdown_renderer import render_markdown
from podcast_summary.infrastructure.web import WebClient

logger = logging.getLogger(__name__)

VERSION = "1.0.0"

EXAMPLES = """\b
Examples:
  podcast-summary --help
  podcast-summary --transcription https://example.com/episode-42/transcript
  podcast-summary --audio episode.mp3 --metadata https://example.com/episode-42
  podcast-summary --audio https://example.com/episode.mp3 --save --output-dir notes

\b
Progress and retry messages are logged to stderr; the summary is printed to stdout.
"""


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    logging.getLogger().setLevel(level)
    # SDK and HTTP client internals stay quiet unless verbose
    for noisy in ("httpx", "urllib3", "google_genai"):
        logging.getLogger(noisy).setLevel(logging.DEBUG if verbose else logging.WARNING)


def _die(message: str, verbose: bool = False, exc: Optional[Exception] = None) -> None:
    """Exit with a user-friendly error message"""
    if exc is not None:
        logger.error(message, exc_info=verbose)
    else:
        logger.error(message)
    raise click.ClickException(message)


def _no_arguments(ctx: click.Context) -> bool:
    """Check if the command was invoked without any option"""
    return all(
        ctx.get_parameter_source(name) in (ParameterSource.DEFAULT, None)
        for name in ctx.params
    )


def _create_provider_config(
    config_manager: ConfigManager, model_override: Optional[str]
) -> Dict[str, Any]:
    """Create provider configuration dictionary

    Args:
        config_manager: Configuration manager
        model_override: Optional model name from CLI

    Returns:
        Provider configuration dictionary
    """
    llm_config = config_manager.get_llm_config()
    provider_config = {
        "model": model_override or llm_config.model,
        "temperature": llm_config.temperature,
    }
    provider_config.update(config_manager.get_retry_config().model_dump())
    return provider_config


def _create_llm_provider(
    config_manager: ConfigManager,
    provider_override: Optional[str],
    model_override: Optional[str],
    verbose: bool,
) -> LLMProvider:
    """Create LLM provider from config, CLI overrides win"""
    provider_type = provider_override or config_manager.get_llm_config().provider
    logger.info(f"Using LLM provider: {provider_type}")

    provider_config = _create_provider_config(config_manager, model_override)
    try:
        return LLMProviderFactory.create(provider_type, provider_config)
    except ValueError as e:
        _die(str(e), verbose=verbose, exc=e)


def _create_summary_service(
    config_manager: ConfigManager, llm_provider: LLMProvider
) -> SummaryService:
    prompts_config = config_manager.get_prompts_config()
    web_client = WebClient(
        http_config=config_manager.get_http_config(),
        retry_config=config_manager.get_retry_config(),
    )
    return SummaryService(
        llm_provider,
        prompt_builder=SummaryPromptBuilder(
            summary_prompt=prompts_config.summary,
            transcription_prompt=prompts_config.transcription,
            filename_prompt=prompts_config.filename,
        ),
        content_extractor=web_client.scrape,
        downloader=web_client.download,
    )


def _save_summary(
    service: SummaryService, result: SummaryResult, output_dir: Optional[Path]
) -> Path:
    """Write the summary to a model-named markdown file

    Returns:
        Path of the written file
    """
    result.filename = service.generate_filename(result.summary)
    directory = output_dir or Path.cwd()
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / result.filename
    path.write_text(result.summary, encoding="utf-8")
    return path


@click.command(
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog=EXAMPLES,
)
@click.option(
    "--transcription",
    metavar="URL",
    help="URL of a podcast transcription to be summarized",
)
@click.option(
    "--audio",
    metavar="PATH",
    help="Path or URL of an audio file to be transcribed",
)
@click.option(
    "--metadata",
    metavar="URL",
    help="URL for extra metadata to use when transcribing (only valid with --audio)",
)
@click.option("--model", type=str, help="Model to use for transcription and summarization")
@click.option(
    "--provider",
    type=click.Choice(["gemini", "mock"], case_sensitive=False),
    help="LLM provider to use. Overrides config.",
)
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to .podcast-summary.yml config file",
)
@click.option("--save", is_flag=True, help="Also save the summary to a markdown file")
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory for saved summaries (implies --save)",
)
@click.option("--raw", is_flag=True, help="Print the summary without markdown rendering")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.version_option(VERSION, prog_name="podcast-summary")
@click.pass_context
def cli(
    ctx,
    transcription: Optional[str],
    audio: Optional[str],
    metadata: Optional[str],
    model: Optional[str],
    provider: Optional[str],
    config: Optional[Path],
    save: bool,
    output_dir: Optional[Path],
    raw: bool,
    verbose: bool,
):
    """Summarize a podcast out of a transcription or audio file."""
    if _no_arguments(ctx):
        click.echo(ctx.get_help())
        ctx.exit(0)

    setup_logging(verbose)

    if not transcription and not audio:
        _die("you must pass either --transcription or --audio")
    if metadata and not audio:
        _die("--metadata can only be used when you also pass --audio")

    try:
        config_manager = ConfigManager(config_path=config)
        llm_provider = _create_llm_provider(config_manager, provider, model, verbose)
        service = _create_summary_service(config_manager, llm_provider)
        model_name = model or config_manager.get_llm_config().model

        if audio:
            logger.info(
                f"Transcribing audio file {audio} with {model_name}, this can take a while..."
            )
            result = service.summarize_audio(audio, metadata_url=metadata)
        else:
            logger.info(f"Extracting transcription from the URL... {transcription}")
            result = service.summarize_transcription(transcription)
        logger.info(f"Summarized {result.content_length} chars of content with {model_name}")

        output_config = config_manager.get_output_config()
        if save or output_dir:
            directory = output_dir or (
                Path(output_config.directory) if output_config.directory else None
            )
            path = _save_summary(service, result, directory)
            logger.info(f"Summary saved to {path}")

        render_markdown(result.summary, raw=raw or not output_config.markdown)

    except click.ClickException:
        raise
    except Exception as e:
        _die(f"Fatal error: {e}", verbose=verbose, exc=e)


def main():
    """Main entry point"""
    cli()


if __name__ == "__main__":
    main()
