import argparse
import asyncio

from pydantic import ValidationError

from deploy_wait.core.config import Settings
from deploy_wait.core.exceptions import error_message
from deploy_wait.core.logging import configure_logging, get_logger
from deploy_wait.services.github import resolve_commit_sha
from deploy_wait.services.outputs import ActionOutputs
from deploy_wait.workers.deploy_watcher import watch_deploy


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deploy-wait",
        description="Wait for a Netlify deploy of the current commit and its preview URL.",
    )
    parser.add_argument("--site-id", dest="site_id", help="Netlify site id (default: $INPUT_SITE_ID)")
    parser.add_argument("--context", help="Only match deploys with this context, e.g. deploy-preview")
    parser.add_argument(
        "--max-timeout",
        dest="max_timeout",
        type=float,
        help="Seconds to wait for the preview URL to answer (default: $INPUT_MAX_TIMEOUT or 60)",
    )
    parser.add_argument("--sha", dest="commit_sha", help="Commit to wait for instead of the one from the event")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    overrides = {key: value for key, value in vars(args).items() if value is not None}
    try:
        settings = Settings(**overrides)
    except ValidationError as exc:
        ActionOutputs().set_failed(f"Invalid configuration: {exc}")
        return 1

    configure_logging(settings.log_level, settings.log_format)
    logger = get_logger("deploy_wait")
    outputs = ActionOutputs(settings.github_output, logger=logger)

    try:
        config = settings.to_watch_config(resolve_commit_sha(settings))
        result = asyncio.run(watch_deploy(config, outputs=outputs, logger=logger))
    except Exception as exc:  # noqa: BLE001
        logger.exception("deploy_wait.unexpected_error")
        outputs.set_failed(error_message(exc))
        return 1

    if not result.success:
        outputs.set_failed(result.error or "Deploy wait failed")
        return 1
    return 0
