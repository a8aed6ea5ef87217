import argparse
import json
import logging
import os
import signal
import sys
import threading
from typing import Any, Dict, List

import yaml

from approvalgate import __version__
from approvalgate.config import ENV_OUTPUT_FILE, ConfigError, GateConfig, split_list
from approvalgate.consensus import ApprovalStatus, ApprovalVerdict, Comment, evaluate_approvals

logger = logging.getLogger(__name__)

EXIT_APPROVED = 0
EXIT_FAILED = 1
EXIT_PENDING = 2


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="approvalgate")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("run", help="Open an approval issue for this workflow run and wait for the vote.")

    eval_p = sub.add_parser("evaluate", help="Evaluate a saved comment thread offline.")
    eval_p.add_argument("--comments", required=True, help="JSON/YAML file with the issue comments")
    eval_p.add_argument("--approvers", required=True, help="Comma separated approver logins")
    eval_p.add_argument("--minimum", type=int, default=0, help="Minimum approvals (0 = all approvers)")
    eval_p.add_argument("--deployment-names", default="", help="Comma separated allowed deployment names")
    eval_p.add_argument("--format", default="text", choices=["text", "json"])

    sub.add_parser("version", help="Print version.")
    return p


def exit_code_for(verdict: ApprovalVerdict) -> int:
    if verdict.error is not None or verdict.status == ApprovalStatus.DENIED:
        return EXIT_FAILED
    if verdict.status == ApprovalStatus.APPROVED:
        return EXIT_APPROVED
    return EXIT_PENDING


def verdict_payload(verdict: ApprovalVerdict) -> Dict[str, Any]:
    return {
        "status": verdict.status.value,
        "deployment_names": list(verdict.deployment_names),
        "error": (
            {"kind": verdict.error.kind.value, "message": verdict.error.message}
            if verdict.error is not None
            else None
        ),
    }


def load_comments(path: str) -> List[Comment]:
    """
    Accepts either [{"author": ..., "body": ...}] or the raw GitHub API shape
    [{"user": {"login": ...}, "body": ...}]. YAML is a superset of JSON.

    Authors and bodies must be strings: unquoted YAML `no`/`yes` load as
    booleans and would silently lose the vote, so they are rejected.
    """
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or []
    if not isinstance(raw, list):
        raise ValueError(f"{path}: expected a list of comments")

    comments = []
    for idx, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ValueError(f"{path}: comment #{idx} is not an object")
        author = item.get("author")
        if author is None:
            user = item.get("user") or {}
            author = user.get("login") if isinstance(user, dict) else None
        body = item.get("body")
        for field_name, value in (("author", author), ("body", body)):
            if value is not None and not isinstance(value, str):
                raise ValueError(
                    f"{path}: comment #{idx} {field_name} must be a string, got {value!r} "
                    "(quote it in YAML)"
                )
        comments.append(Comment(author=author or "", body=body or ""))
    return comments


def write_step_outputs(verdict: ApprovalVerdict) -> None:
    output_path = os.getenv(ENV_OUTPUT_FILE)
    if not output_path:
        return
    with open(output_path, "a", encoding="utf-8") as f:
        f.write(f"status={verdict.status.value.lower()}\n")
        f.write(f"approved={'true' if verdict.status == ApprovalStatus.APPROVED else 'false'}\n")
        f.write(f"deployment-names={','.join(verdict.deployment_names)}\n")


def _run_gate() -> int:
    from approvalgate.environment import ApprovalEnvironment
    from approvalgate.integrations.github import GitHubClientError, GitHubIssueClient
    from approvalgate.poller import ApprovalPoller

    try:
        config = GateConfig.from_env()
    except ConfigError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return EXIT_FAILED

    client = GitHubIssueClient(config.repo_full_name, config.token, base_url=config.api_url)
    environment = ApprovalEnvironment(config, client)
    try:
        environment.create_approval_issue()
    except GitHubClientError as e:
        print(f"Error creating approval issue: {e}", file=sys.stderr)
        return EXIT_FAILED

    stop_event = threading.Event()

    def _cancel(signum, _frame):
        logger.warning("Received signal %s, stopping approval polling", signum)
        stop_event.set()

    signal.signal(signal.SIGINT, _cancel)
    signal.signal(signal.SIGTERM, _cancel)

    poller = ApprovalPoller(
        environment,
        interval_seconds=config.polling_interval_seconds,
        timeout_seconds=config.timeout_minutes * 60 if config.timeout_minutes else None,
    )
    verdict = poller.run(stop_event)

    try:
        environment.finalize(verdict)
    except GitHubClientError:
        logger.exception("Failed to close approval issue #%s", environment.issue_number)

    write_step_outputs(verdict)
    if verdict.error is not None:
        print(f"Error: {verdict.error}", file=sys.stderr)
    elif verdict.status == ApprovalStatus.APPROVED:
        print("Workflow manually approved, continuing")
    elif verdict.status == ApprovalStatus.DENIED:
        print("Workflow denied by approver, failing")
    else:
        print("Workflow approval still pending, stopping", file=sys.stderr)
    return exit_code_for(verdict)


def main() -> int:
    # If no arguments provided, show help
    if len(sys.argv) == 1:
        sys.argv.append("--help")

    p = build_parser()
    args = p.parse_args()

    if args.cmd == "version":
        print(f"approvalgate {__version__}")
        return 0

    from approvalgate.logging_setup import configure_logging
    configure_logging()

    if args.cmd == "run":
        return _run_gate()

    if args.cmd == "evaluate":
        try:
            comments = load_comments(args.comments)
        except (OSError, ValueError, yaml.YAMLError) as e:
            print(f"Error reading comments {args.comments}: {e}", file=sys.stderr)
            return EXIT_FAILED

        approvers = split_list(args.approvers)
        if not approvers:
            print("Error: at least one approver is required", file=sys.stderr)
            return EXIT_FAILED
        if args.minimum < 0 or args.minimum > len(approvers):
            print(f"Error: --minimum must be between 0 and {len(approvers)}", file=sys.stderr)
            return EXIT_FAILED

        verdict = evaluate_approvals(
            comments,
            approvers,
            args.minimum,
            split_list(args.deployment_names),
        )

        if args.format == "json":
            print(json.dumps(verdict_payload(verdict), indent=2))
        else:
            print(f"Status: {verdict.status.value}")
            if verdict.deployment_names:
                print(f"Deployments: {', '.join(verdict.deployment_names)}")
            if verdict.error is not None:
                print(f"Error: {verdict.error}")
        return exit_code_for(verdict)

    return 2


if __name__ == "__main__":
    sys.exit(main())
