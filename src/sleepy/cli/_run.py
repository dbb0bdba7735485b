"""``sleepy run`` — resolve an API and start it."""

import argparse
import dataclasses
import sys

from sleepy.cli._resolve import resolve_api
from sleepy.errors import ConfigurationError


def run_api(args: argparse.Namespace) -> None:
    """Start the API named by ``args.api``.

    ``--host``, ``--port`` and ``--workers`` override the API's config.
    An API that cannot be found or has no resources is reported on
    stderr and exits with status 1; transport errors propagate.
    """
    try:
        api = resolve_api(args.api)
    except (ModuleNotFoundError, AttributeError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if args.workers is not None:
        api.config = dataclasses.replace(api.config, workers=args.workers)

    api.start(args.port, host=args.host)
