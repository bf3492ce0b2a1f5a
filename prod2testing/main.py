import argparse
from pathlib import Path

from prod2testing.anonymization.exceptions import AnonymizationError
from prod2testing.config.settings import Settings
from prod2testing.database.connection import close_pool, init_pool
from prod2testing.logging.logger import Log
from prod2testing.runner.anonymization_runner import build_runner


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="prod2testing",
        description="Anonymize a copy of a production database for testing.",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Configuration json file used instead of the default config.",
    )
    parser.add_argument(
        "-a",
        "--additional-config",
        type=Path,
        action="append",
        default=[],
        help="Configuration json file merged onto the config. Repeatable.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Entry point: parse args -> initialize pool -> run anonymization."""
    args = parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)

    try:
        build_runner(settings).run(args.config, args.additional_config)
    except AnonymizationError as exc:
        Log.error(str(exc))
        return 1
    finally:
        close_pool()

    Log.info("Success!")
    return 0
