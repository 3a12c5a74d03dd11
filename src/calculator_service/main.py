"""
Main entrypoint used by CI and Docker.

Two commands:
- ``serve`` runs the calculator service until interrupted
- ``check`` starts the service in a child process, runs a client against it
  with an operations file provided as argument, then stops the service

Exit status is 0 on success, 1 on startup failure or failed operations.
"""

import argparse
from multiprocessing import Process
from pathlib import Path
import sys
import time
from typing import List, Optional

from pydantic import BaseModel, FilePath, ValidationError

from calculator_service.client.client import CalculatorClient
from calculator_service.common.config import ServiceSettings
from calculator_service.common.logger import logger, set_log_level
from calculator_service.server.server import CalculatorServer, ServerStartupError


class CheckArgs(BaseModel):
    """
    Pydantic model used to validate the ``check`` arguments.

    Attributes
    ----------
    file_path : FilePath
        Path to the file containing calculator operations.
    startup_timeout : float
        Seconds to wait for the server to answer its health probe.
    """

    file_path: FilePath
    startup_timeout: float = 10.0


def run_server(settings: ServiceSettings) -> None:
    """
    Start the calculator server.

    The server runs in its own process when launched by ``check``.
    """
    set_log_level(settings.log_level)
    CalculatorServer.from_settings(settings).start()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="calculator-service",
        description="Four-operation arithmetic HTTP service",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP service")
    check = subparsers.add_parser("check", help="Smoke-run an operations file against a local service")
    check.add_argument("file_path", help="Path to the file containing calculator operations")
    check.add_argument(
        "--startup-timeout",
        type=float,
        default=10.0,
        help="Seconds to wait for the service to come up",
    )

    for sub in (serve, check):
        sub.add_argument("--host", default=None, help="Bind address (env CALCULATOR_HOST)")
        sub.add_argument("--port", type=int, default=None, help="TCP port (env CALCULATOR_PORT)")
        sub.add_argument(
            "--log-level",
            type=str.upper,
            default=None,
            help="Logging level (env CALCULATOR_LOG_LEVEL)",
        )
    serve.add_argument(
        "--no-threads",
        dest="threaded",
        action="store_const",
        const=False,
        default=None,
        help="Handle requests one at a time",
    )
    return parser


def parse_settings(parser: argparse.ArgumentParser, args: argparse.Namespace) -> ServiceSettings:
    """
    Merge CLI options over the environment and validate them.

    :return: Validated settings
    :rtype: ServiceSettings
    """
    try:
        return ServiceSettings.from_env(
            host=args.host,
            port=args.port,
            log_level=args.log_level,
            threaded=getattr(args, "threaded", None),
        )
    except ValidationError as exc:
        parser.error(str(exc))


def build_output_path(input_path: Path) -> Path:
    """
    Construct a safe output file path based on the input file.

    - Preserves the original folder
    - Replaces dots in extensions with underscores
    - Appends '_results.txt' at the end

    Examples
    --------
    input: resources/operations.txt
    output: resources/operations_txt_results.txt

    :param input_path: Path to the input file
    :return: Path to the output file
    """
    suffixes = "".join(input_path.suffixes)
    stem = input_path.name[: -len(suffixes)] if suffixes else input_path.name
    suffix_safe = suffixes.replace(".", "_")
    return input_path.with_name(f"{stem}{suffix_safe}_results.txt")


def wait_until_healthy(
    client: CalculatorClient,
    timeout: float,
    interval: float = 0.1,
    server_process: Optional[Process] = None,
) -> bool:
    """
    Poll the health probe until it answers or the timeout expires.

    Gives up early once ``server_process`` has exited, e.g. on a bind failure.
    """
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if server_process is not None and not server_process.is_alive():
            return False
        if client.health():
            return True
        time.sleep(interval)
    return False


def serve(settings: ServiceSettings) -> int:
    try:
        run_server(settings)
    except ServerStartupError as exc:
        logger.error(f"🔌❌ {exc}")
        return 1
    return 0


def check(settings: ServiceSettings, check_args: CheckArgs) -> int:
    """
    Run an operations file against a freshly started server.

    :return: Process exit status
    :rtype: int
    """
    input_path: Path = Path(check_args.file_path)
    output_path: Path = build_output_path(input_path)

    server_process = Process(target=run_server, args=(settings,))
    server_process.start()

    try:
        client = CalculatorClient(host=settings.host, port=settings.port)
        if not wait_until_healthy(client, check_args.startup_timeout, server_process=server_process):
            logger.error("🔌❌ Server did not become healthy")
            return 1
        failures = client.run_file(input_path, output_path)
        logger.info(f"📄 Results written to {output_path}")
        return 1 if failures else 0
    finally:
        # Ensure the server is always stopped
        server_process.terminate()
        server_process.join()


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function executed by CI or Docker.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = parse_settings(parser, args)
    set_log_level(settings.log_level)

    if args.command == "serve":
        return serve(settings)

    try:
        check_args = CheckArgs(file_path=args.file_path, startup_timeout=args.startup_timeout)
    except ValidationError as exc:
        parser.error(str(exc))
    return check(settings, check_args)


if __name__ == "__main__":
    sys.exit(main())
