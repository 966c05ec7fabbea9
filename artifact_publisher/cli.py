"""Command line entry point: ``artifact-publisher publish``."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Optional

import httpx

from .bootstrap import PublisherContainer
from .logging_config import configure_logging
from .modules.publishing.exceptions import INTERRUPTED_EXIT_CODE, PublishError
from .settings import load_settings

log = logging.getLogger(__name__)


def cmd_publish(args: argparse.Namespace, http_client: Optional[httpx.Client] = None) -> int:
    overrides = {}
    if args.project_dir:
        overrides["project_dir"] = Path(args.project_dir)
    if args.version:
        overrides["version"] = args.version
    if args.repository_url:
        overrides["repository_url"] = args.repository_url
    settings = load_settings(args.env_file, **overrides)
    configure_logging(args.log_level or settings.log_level)

    container = PublisherContainer(settings, http_client=http_client)
    receipt = container.publisher.run(
        settings.coordinates(),
        settings.signing_key_ref(),
        settings.target(),
        settings.credentials(),
        dry_run=args.dry_run,
    )
    print(json.dumps(receipt.as_dict(), indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser("artifact-publisher")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_pub = sub.add_parser("publish", help="assemble, sign and upload the library")
    p_pub.add_argument("--env-file", dest="env_file", help="read PUBLISH_* settings from this file")
    p_pub.add_argument("--project-dir", dest="project_dir")
    p_pub.add_argument("--version", help="override PUBLISH_VERSION")
    p_pub.add_argument("--repository-url", dest="repository_url", help="override PUBLISH_REPOSITORY_URL")
    p_pub.add_argument("--dry-run", dest="dry_run", action="store_true", help="stop after signing")
    p_pub.add_argument("--log-level", dest="log_level")
    p_pub.set_defaults(func=cmd_publish)
    return p


def main(argv: list[str] | None = None, http_client: Optional[httpx.Client] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.func(args, http_client=http_client)
    except PublishError as exc:
        log.error("%s: %s", exc.kind, exc)
        return exc.exit_code
    except KeyboardInterrupt:
        log.error("Interrupted")
        return INTERRUPTED_EXIT_CODE


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
