"""Fan a batch of canonical rules out to one or more target dialects."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from crossrule.dialects import get_profile, resolve_dialect
from crossrule.errors import SerializationError, UnknownDialectError
from crossrule.models import CanonicalRule, ConversionOutcome
from crossrule.serializers import write_rules

logger = logging.getLogger(__name__)


def convert(
    rules: Iterable[CanonicalRule],
    target_dialect_names: Iterable[str],
    output_root: Path = Path("."),
    dry_run: bool = False,
) -> ConversionOutcome:
    """Serialize *rules* once per target and collect what happened.

    Targets may be given by identifier or display name. An unknown name is
    recorded and skipped; a failing target is recorded, marks the outcome
    unsuccessful and does not stop the others.
    """
    rules = list(rules)
    outcome = ConversionOutcome()
    done: set[str] = set()

    for name in target_dialect_names:
        dialect = resolve_dialect(name)
        if dialect is None:
            outcome.errors.append(str(UnknownDialectError(name)))
            outcome.skipped += len(rules)
            continue
        if dialect in done:
            outcome.warnings.append(f"{name} already converted in this run, skipping")
            continue
        done.add(dialect)

        profile = get_profile(dialect)
        try:
            report = write_rules(rules, profile, output_root, dry_run=dry_run)
        except SerializationError as exc:
            logger.warning("%s", exc)
            outcome.errors.append(str(exc))
            outcome.success = False
            outcome.skipped += len(rules)
            outcome.output_files[dialect] = []
            continue

        outcome.output_files[dialect] = report.files
        outcome.converted += report.converted
        outcome.skipped += report.skipped
        outcome.warnings.extend(report.warnings)
        if report.errors:
            outcome.errors.extend(report.errors)
            outcome.success = False
        logger.debug("%s: %d rule(s) -> %d file(s)", profile.display_name,
                     report.converted, len(report.files))

    return outcome
