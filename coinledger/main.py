"""Main module entrypoint for local runtime execution.

This module validates startup configuration and either converts the
configured export into a ledger file or launches the FastAPI service.
"""

import argparse
import logging
import sys

import uvicorn

from coinledger.bootstrap import bootstrap_create_application, bootstrap_create_conversion_orchestrator
from coinledger.config import SettingsLoadError, config_load_settings

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    """Run selected runtime command with validated startup configuration.

    Args:
        argv: Optional argument list; defaults to process arguments.

    Returns:
        None: This function does not return a runtime value.

    Raises:
        SystemExit: Raised with a non-zero code when the command fails.
    """

    argument_parser = argparse.ArgumentParser(description="Coinbase export to ledger converter")
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="convert",
        choices=("convert", "api"),
        help="Runtime command: `convert` writes the ledger file once, `api` starts the HTTP server",
        type=str,
    )
    argument_parser.add_argument(
        "--input",
        dest="input_path",
        type=str,
        help="Optional export path override for `convert`",
    )
    argument_parser.add_argument(
        "--output",
        dest="output_path",
        type=str,
        help="Optional ledger path override for `convert`",
    )
    parsed_arguments = argument_parser.parse_args(argv)

    try:
        settings = config_load_settings()
    except SettingsLoadError as error:
        print(f"error: {error}", file=sys.stderr)
        raise SystemExit(2) from error

    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    if parsed_arguments.command == "api":
        application = bootstrap_create_application(settings=settings)
        uvicorn.run(
            application,
            host=settings.application_host,
            port=settings.application_port,
        )
        return

    conversion_orchestrator = bootstrap_create_conversion_orchestrator(
        settings=settings,
        input_path=parsed_arguments.input_path,
        output_path=parsed_arguments.output_path,
    )
    try:
        execution_result = conversion_orchestrator.job_execute(job_name="conversion_run")
    except OSError as error:
        logger.error("Conversion failed writing output: %s", error)
        raise SystemExit(1) from error

    if execution_result.status != "success":
        print(f"error: [{execution_result.error_code}] {execution_result.detail}", file=sys.stderr)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
