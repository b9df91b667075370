"""
Handles the 'pr' command: the full pull request validation pipeline.

Default output is a human-readable report; --json streams one JSON object
per checked entry followed by a summary object.
"""

import click

from ..cli_utils import standard_command, add_common_options
from ..exceptions import PolicyViolation
from ..exit_codes import ValidationFailedError
from ..render import render_pipeline_result
from ..services import PipelineOrchestrator


def stream_result(result):
    """Yield entry reports and the summary; fail the command afterwards if needed."""
    for report in result.entries:
        yield report.to_dict()
    yield result.to_dict()
    if not result.ok:
        raise ValidationFailedError(
            "Validation Suite FAILED.",
            failed=sum(1 for r in result.entries if not r.verdict.ok),
        )


@click.command(name='pr')
@add_common_options('root', 'base_ref')
@click.option('--head-ref', default=None, help='Head reference (default: git.head_ref, HEAD)')
@click.option('--pr', 'pr_number', envvar='PR_NUMBER', default=None,
              help='Pull request number to label (default: $PR_NUMBER)')
@click.option('--fetch/--no-fetch', default=None, help='Fetch the base branch before diffing')
@click.option('--label/--no-label', default=True, help='Label the pull request with the verdict')
@add_common_options('no_format', 'json_output', 'verbose')
@standard_command
def pr_cmd(root, base_ref, head_ref, pr_number, fetch, label, no_format, json_output, verbose, config):
    """Validate a pull request against the plugin and theme registries.

    \b
    Rejects a change that touches both plugins.json and themes.json.
    Otherwise runs, for the touched registry:
      1. schema/format check of the registry file
      2. forbidden-content scan of changed plugin repositories
      3. release checks for every new or re-versioned entry

    Examples:

    \b
        regcheck pr                          # diff origin/main...HEAD
        regcheck pr --pr 42                  # also label PR #42
        regcheck pr --base-ref origin/dev --no-fetch
        regcheck pr --json                   # JSONL for automation
    """
    if no_format:
        config['schema']['format'] = False

    orchestrator = PipelineOrchestrator(root, config=config)

    try:
        result = orchestrator.run(
            base_ref=base_ref,
            head_ref=head_ref,
            pr=pr_number,
            fetch=fetch,
            label=label,
        )
    except PolicyViolation as e:
        if not json_output and e.result is not None:
            render_pipeline_result(e.result)
        raise

    if json_output:
        return stream_result(result)

    render_pipeline_result(result)
    if not result.ok:
        raise ValidationFailedError("Validation Suite FAILED.")
