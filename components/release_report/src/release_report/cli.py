"""Command line entry point: print every ticket of one release."""
from __future__ import annotations

import argparse
import logging
import sys

from jira_client_impl.jira_impl import get_client
from release_report.config import ReportConfig, load_config
from release_report.report import fetch_release_tickets, render_json, render_report
from work_mgmt_client_interface.client import IssueTrackerClient, IssueTrackerError

logger = logging.getLogger(__name__)

ERROR_PREFIX = "[ERROR]"


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="release-report",
        description="List the Jira issues whose fixVersion matches a release.",
    )
    parser.add_argument("--project", dest="project_key", help="project key (env JIRA_PROJECT_KEY)")
    parser.add_argument("--fix-version", dest="fix_version", help="release label (env JIRA_FIX_VERSION)")
    parser.add_argument("--max-results", type=int, help="result cap, at most 100 (env JIRA_MAX_RESULTS)")
    parser.add_argument("--timeout", type=float, help="request timeout in seconds (env JIRA_TIMEOUT)")
    parser.add_argument("--format", choices=("text", "json"), default="text", help="output format")
    parser.add_argument("--interactive", action="store_true", help="prompt for missing credentials")
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug details to stderr")
    return parser


def print_report(client: IssueTrackerClient, config: ReportConfig, output_format: str = "text") -> None:
    """Fetch the release tickets and write them to stdout."""
    tickets = fetch_release_tickets(client, config)
    if output_format == "json":
        print(render_json(tickets, config.fix_version, config.extension_fields))
        return
    for line in render_report(tickets, config.fix_version, config.extension_fields):
        print(line)


def main(argv: list[str] | None = None) -> int:
    args = _parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = load_config(
            interactive=args.interactive,
            project_key=args.project_key,
            fix_version=args.fix_version,
            max_results=args.max_results,
            timeout=args.timeout,
        )
        client = get_client(
            base_url=config.base_url,
            user_email=config.user_email,
            api_token=config.api_token,
            timeout=config.timeout,
        )
        print_report(client, config, args.format)
    except (IssueTrackerError, EnvironmentError, ValueError) as e:
        logger.debug("Report failed", exc_info=True)
        print(f"{ERROR_PREFIX} {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
