"""
Handles the 'scan' command: forbidden-content scan of changed plugins.
"""

import click

from ..cli_utils import standard_command, add_common_options
from ..domain import RegistryKind, ValidationVerdict
from ..exit_codes import ValidationFailedError
from ..render import render_verdict
from ..services import PipelineOrchestrator, SCAN_FIELDS


@click.command(name='scan')
@add_common_options('root', 'base_ref', 'json_output', 'verbose')
@standard_command
def scan_cmd(root, base_ref, json_output, verbose, config):
    """Scan the repositories of new, re-versioned or re-pointed plugins.

    Each changed plugin's repository is shallow-cloned into a temporary
    directory and checked for forbidden file types and forbidden tokens.

    Examples:

    \b
        regcheck scan
        regcheck scan --base-ref HEAD~1 --json
    """
    orchestrator = PipelineOrchestrator(root, config=config)
    entries = orchestrator.changed_entries(RegistryKind.PLUGINS, base_ref, fields=SCAN_FIELDS)

    verdicts = [(entry, orchestrator.scanner.scan_entry(entry)) for entry in entries]
    overall = ValidationVerdict.combine(v for _, v in verdicts)
    failed = sum(1 for _, v in verdicts if not v.ok)

    if json_output:
        return _stream(verdicts, overall, failed)

    if not verdicts:
        click.echo("No plugin version changes detected. Nothing to scan.")
    for entry, verdict in verdicts:
        render_verdict(verdict, title=f"{entry.display_name} ({entry.repo})")
    if not overall.ok:
        raise ValidationFailedError("Content scan FAILED.", failed=failed)


def _stream(verdicts, overall, failed):
    for entry, verdict in verdicts:
        yield {"type": "scan", "id": entry.id, "repo": entry.repo, **verdict.to_dict()}
    if not overall.ok:
        raise ValidationFailedError("Content scan FAILED.", failed=failed)
