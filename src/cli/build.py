"""`build` command: neutral models -> platform files, or the reverse.

Examples:
    voice-model --locale en-US
    voice-model --stage prod --clean
    voice-model --reverse --locale en --force
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from pathlib import Path

from dotenv import load_dotenv

from src.config.logging import configure_logging
from src.config.settings import load_settings
from src.dialogflow.agent import DialogflowAgent
from src.dialogflow.files import AgentFileError
from src.dialogflow.forward import DialogflowBuildError
from src.project.config import ProjectConfigError, load_project_config
from src.project.locales import InvalidLocaleError, MissingDefaultLocaleError, validate_locale
from src.project.models import ModelExistsError, ModelFileError
from src.project.paths import ProjectPaths

logger = logging.getLogger(__name__)

PLATFORMS: dict[str, type[DialogflowAgent]] = {
    DialogflowAgent.platform_id: DialogflowAgent,
}

_BUILD_ERRORS: tuple[type[Exception], ...] = (
    AgentFileError,
    DialogflowBuildError,
    InvalidLocaleError,
    MissingDefaultLocaleError,
    ModelExistsError,
    ModelFileError,
    ProjectConfigError,
)


class BuildCommandError(RuntimeError):
    """Raised for invalid command-line combinations."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="voice-model",
        description="Build platform-specific language models from the project's models folder.",
    )
    parser.add_argument("--project-dir", help="Project root (default: PROJECT_DIR or '.').")
    parser.add_argument(
        "-l",
        "--locale",
        action="append",
        help="Locale of the language model; repeat for several (default: all model files).",
    )
    parser.add_argument("--stage", help="Take configuration from the given stage.")
    parser.add_argument(
        "-p",
        "--platform",
        choices=sorted(PLATFORMS),
        default=DialogflowAgent.platform_id,
        help="Platform to build.",
    )
    parser.add_argument(
        "-r",
        "--reverse",
        action="store_true",
        help="Build the neutral language model from the platform files.",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite existing model files on reverse build.",
    )
    parser.add_argument(
        "--clean",
        action="store_true",
        help="Delete the platform folder before building (destructive).",
    )
    return parser


def run_build(
        *,
        project_dir: Path,
        config_name: str,
        platform: str,
        locales: Sequence[str] | None,
        stage: str | None,
        reverse: bool,
        force: bool,
        clean: bool,
) -> list[Path]:
    """Run a forward or reverse build and return the written files."""

    if force and not reverse:
        raise BuildCommandError("--force can only be used with --reverse")
    for locale in locales or ():
        validate_locale(locale)

    config = load_project_config(project_dir / config_name)
    agent = PLATFORMS[platform](ProjectPaths(root=project_dir, config=config))

    if reverse:
        written: list[Path] = []
        for locale in locales or agent.reverse_locales(stage):
            model = agent.reverse_build(locale)
            written.append(agent.loader.save_model(locale, model, overwrite=force))
        if not written:
            logger.warning("nothing to reverse path=%s", agent.files.root)
        return written

    if clean:
        agent.clean()

    build_locales = list(locales or agent.loader.locales())
    if not build_locales:
        logger.warning("no language models found path=%s", agent.loader.models_dir)
        return []

    results = agent.build(build_locales, stage)
    return [path for result in results for path in result.written]


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point for the build command."""

    args = build_parser().parse_args(argv)
    if args.project_dir:
        # The project's own `.env` (e.g. STAGE) applies before settings are read.
        load_dotenv(Path(args.project_dir) / ".env")
    settings = load_settings()
    configure_logging(settings.log_level)

    project_dir = Path(args.project_dir or settings.project_dir)

    try:
        written = run_build(
            project_dir=project_dir,
            config_name=settings.project_config,
            platform=args.platform,
            locales=args.locale,
            stage=args.stage or settings.stage,
            reverse=args.reverse,
            force=args.force,
            clean=args.clean,
        )
    except (BuildCommandError, *_BUILD_ERRORS) as exc:
        logger.error("build failed reason=%s", exc)
        return 1

    logger.info("build completed files=%d", len(written))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
