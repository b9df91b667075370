"""
Handles the 'schema' command: structural check of registry files.
"""

from pathlib import Path

import click

from ..cli_utils import standard_command, add_common_options
from ..domain import RegistryKind, ValidationVerdict
from ..exit_codes import ValidationFailedError
from ..render import render_verdict
from ..services import SchemaValidator


def kind_for_file(path: str, registry_files) -> RegistryKind:
    """
    Map a registry file to its kind by base name.

    Args:
        path: File path as given on the command line
        registry_files: Mapping of kind -> configured file name

    Raises:
        click.UsageError: If the file is neither registry.
    """
    name = Path(path).name
    for kind, configured in registry_files.items():
        if name == Path(configured).name:
            return kind
    raise click.UsageError(f"Unknown registry file: {path}")


@click.command(name='schema')
@click.argument('files', nargs=-1)
@add_common_options('root', 'no_format', 'json_output', 'verbose')
@standard_command
def schema_cmd(files, root, no_format, json_output, verbose, config):
    """Validate the structure of registry files.

    FILES are paths relative to --root (default: every registry file that
    exists). Files are rewritten with canonical formatting unless
    --no-format is given.

    Examples:

    \b
        regcheck schema
        regcheck schema plugins.json --no-format
    """
    fix_format = config.get('schema', {}).get('format', True) and not no_format
    validator = SchemaValidator(root, fix_format=fix_format)
    registries = config.get('registries', {})
    registry_files = {
        kind: registries.get(kind.value, {}).get('file', kind.default_file)
        for kind in RegistryKind
    }

    if files:
        targets = [(kind_for_file(f, registry_files), f) for f in files]
    else:
        targets = [
            (kind, path) for kind, path in registry_files.items()
            if (Path(root) / path).is_file()
        ]

    verdicts = []
    for kind, path in targets:
        verdict = validator.validate(kind, path)
        verdicts.append((path, verdict))

    overall = ValidationVerdict.combine(v for _, v in verdicts)

    if json_output:
        return _stream(verdicts, overall)

    for path, verdict in verdicts:
        render_verdict(verdict, title=path)
    if not overall.ok:
        raise ValidationFailedError("Schema validation FAILED.", failed=len(overall.errors))


def _stream(verdicts, overall):
    for path, verdict in verdicts:
        yield {"type": "file", "file": path, **verdict.to_dict()}
    if not overall.ok:
        raise ValidationFailedError("Schema validation FAILED.", failed=len(overall.errors))
