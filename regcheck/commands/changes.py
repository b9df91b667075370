"""
Handles the 'changes' command: list new or re-versioned registry entries.
"""

import click

from ..cli_utils import standard_command, add_common_options
from ..domain import RegistryKind
from ..services import PipelineOrchestrator


@click.command(name='changes')
@click.argument('kinds', nargs=-1, type=click.Choice([k.value for k in RegistryKind]))
@add_common_options('root', 'base_ref', 'verbose')
@standard_command
def changes_cmd(kinds, root, base_ref, verbose, config):
    """List entries that are new or whose version differs from the base.

    Outputs one JSON object per changed entry (JSONL). Entries are
    compared by id; the version comparison is textual.

    Examples:

    \b
        regcheck changes
        regcheck changes plugins --base-ref HEAD~3
    """
    orchestrator = PipelineOrchestrator(root, config=config)
    selected = [RegistryKind(k) for k in kinds] or list(RegistryKind)

    for kind in selected:
        if not orchestrator.snapshot(kind).exists():
            continue
        for entry in orchestrator.changed_entries(kind, base_ref):
            yield {"type": kind.label, **entry.to_dict()}
