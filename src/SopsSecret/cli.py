"""CLI entrypoint: ``SopsSecret FILE`` (kustomize exec generator plugin)."""

from __future__ import annotations

import sys
from typing import Optional, Sequence

from .config import Settings
from .errors import SopsSecretError
from .generator import generate_secret
from .logging_utils import configure_logging, get_logger
from .sops_manager import SopsManager

logger = get_logger(__name__)

USAGE = "usage: SopsSecret FILE"


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        print(USAGE, file=sys.stderr)
        return 1

    settings = Settings()
    configure_logging(settings.log_level)

    try:
        output = generate_secret(args[0], SopsManager.from_settings(settings))
    except SopsSecretError as exc:
        logger.debug("Generation failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    sys.stdout.write(output)
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":  # pragma: no cover
    run()
