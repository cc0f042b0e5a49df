from __future__ import annotations

import logging
from typing import Optional

from cmsgraph.constants import REPORTER_TEMPLATE

log = logging.getLogger("cmsgraph")


def format_report(repository_name: Optional[str], text: str) -> str:
    return REPORTER_TEMPLATE.format(repository=repository_name or "local", text=text)


def report_info(repository_name: Optional[str], text: str, *, logger: Optional[logging.Logger] = None) -> None:
    """Emit an informational build message tagged with the repository name."""
    (logger or log).info(format_report(repository_name, text))


def report_verbose(repository_name: Optional[str], text: str, *, logger: Optional[logging.Logger] = None) -> None:
    (logger or log).debug(format_report(repository_name, text))
