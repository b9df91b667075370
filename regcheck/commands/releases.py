"""
Handles the 'releases' command: release checks for changed registry entries.

Runs only the release stage of the pipeline, for one or both registries,
without the exclusivity rule or labeling.
"""

import click

from ..cli_utils import standard_command, add_common_options
from ..domain import RegistryKind, ValidationVerdict
from ..exit_codes import ValidationFailedError
from ..render import render_entry_table, render_summary_line
from ..services import PipelineOrchestrator


@click.command(name='releases')
@click.argument('kinds', nargs=-1, type=click.Choice([k.value for k in RegistryKind]))
@add_common_options('root', 'base_ref', 'json_output', 'verbose')
@standard_command
def releases_cmd(kinds, root, base_ref, json_output, verbose, config):
    """Check the GitHub releases of new or re-versioned entries.

    KINDS selects the registries to check (default: both). A registry
    whose file does not exist is skipped.

    Examples:

    \b
        regcheck releases                    # plugins and themes
        regcheck releases themes
        regcheck releases --base-ref HEAD~1 --json
    """
    orchestrator = PipelineOrchestrator(root, config=config)
    selected = [RegistryKind(k) for k in kinds] or list(RegistryKind)

    reports = []
    for kind in selected:
        snapshot = orchestrator.snapshot(kind)
        if not snapshot.exists():
            continue
        entries = orchestrator.changed_entries(kind, base_ref)
        reports.extend(orchestrator.validate_releases(kind, entries))

    verdict = ValidationVerdict.combine(r.verdict for r in reports)
    failed = sum(1 for r in reports if not r.verdict.ok)

    if json_output:
        return _stream(reports, verdict, failed)

    render_entry_table(reports)
    render_summary_line(verdict.ok)
    if not verdict.ok:
        raise ValidationFailedError("Validation Suite FAILED.", failed=failed)


def _stream(reports, verdict, failed):
    for report in reports:
        yield report.to_dict()
    yield {
        "type": "summary",
        "ok": verdict.ok,
        "checked": len(reports),
        "failed": failed,
    }
    if not verdict.ok:
        raise ValidationFailedError("Validation Suite FAILED.", failed=failed)
