"""
Registry file schema and format checks for regcheck.

Runs against a whole registry file, before any per-entry release check:
- Rewrites the file with canonical formatting (2-space indent, trailing
  newline) when it parses but is formatted differently
- Requires a JSON array root
- Requires every schema field on every item, non-empty when a string
- Requires unique ids
"""

import json
import logging
from pathlib import Path
from typing import Optional, Union

from ..domain import RegistryKind, SUPPORTED_MODES, ValidationVerdict

logger = logging.getLogger(__name__)


def format_registry_text(data) -> str:
    """Canonical text of a registry document."""
    return json.dumps(data, indent=2, ensure_ascii=False) + '\n'


class SchemaValidator:
    """
    Validates the structure of a registry file.

    Example:
        validator = SchemaValidator("/repo")
        verdict = validator.validate(RegistryKind.PLUGINS, "plugins.json")
        print(verdict.ok)
    """

    def __init__(self, root: Union[str, Path] = ".", fix_format: bool = True):
        """
        Initialize SchemaValidator.

        Args:
            root: Registry repository root
            fix_format: Rewrite the file when its formatting is not canonical
        """
        self.root = Path(root)
        self.fix_format = fix_format

    def _error(self, verdict: ValidationVerdict, message: str) -> None:
        logger.error(f"[ERROR] {message}")
        verdict.error(message)

    def format_file(self, path: Path) -> bool:
        """
        Rewrite `path` with canonical formatting.

        Returns:
            True if the file was rewritten; unparseable files are left alone
        """
        try:
            content = path.read_text(encoding='utf-8')
            parsed = json.loads(content)
        except (UnicodeDecodeError, json.JSONDecodeError):
            return False

        formatted = format_registry_text(parsed)
        if content == formatted:
            return False

        logger.info(f"Formatting {path.name}...")
        path.write_text(formatted, encoding='utf-8')
        return True

    def validate(self, kind: RegistryKind, path: Optional[str] = None) -> ValidationVerdict:
        """
        Validate one registry file.

        Args:
            kind: Which schema applies
            path: File path relative to root (defaults to the kind's file name)

        Returns:
            Verdict listing every defect found
        """
        path = path or kind.default_file
        file_path = self.root / path
        name = Path(path).name
        verdict = ValidationVerdict(subject=name)

        logger.info(f"Validating {name}...")

        if not file_path.is_file():
            self._error(verdict, f"File not found: {path}")
            return verdict

        if self.fix_format:
            self.format_file(file_path)

        try:
            content = file_path.read_text(encoding='utf-8')
        except UnicodeDecodeError as e:
            self._error(verdict, f"Invalid encoding in {name} (expected UTF-8): {e}")
            return verdict

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            self._error(verdict, f"Invalid JSON in {name}: {e}")
            return verdict

        if not isinstance(data, list):
            self._error(verdict, f"Root element in {name} must be an array.")
            return verdict

        ids = set()
        for index, item in enumerate(data):
            if not isinstance(item, dict):
                self._error(verdict, f"Item at index {index} must be an object")
                continue

            for field in kind.required_fields:
                if field not in item:
                    self._error(verdict, f'Item at index {index} missing required field: "{field}"')
                elif isinstance(item[field], str) and item[field].strip() == '':
                    self._error(verdict, f'Item at index {index} has empty field: "{field}"')

            if kind is RegistryKind.THEMES and 'modes' in item:
                self._check_modes(verdict, index, item['modes'])

            item_id = item.get('id')
            if item_id and isinstance(item_id, (str, int, float)):
                # Keyed like RegistryEntry ids, so 1 and "1" collide
                key = str(item_id)
                if key in ids:
                    self._error(verdict, f'Duplicate ID found: "{item_id}"')
                ids.add(key)

        if verdict.ok:
            verdict.info(f"{name} is valid ({len(data)} entries)")
            logger.info(f"{name} is valid ({len(data)} entries)")
        return verdict

    def _check_modes(self, verdict: ValidationVerdict, index: int, modes) -> None:
        if not isinstance(modes, list):
            self._error(verdict, f'Item at index {index} field "modes" must be an array')
            return
        for mode in modes:
            if mode not in SUPPORTED_MODES:
                self._error(
                    verdict,
                    f'Item at index {index} has unsupported mode "{mode}" '
                    f'(expected one of: {", ".join(SUPPORTED_MODES)})',
                )
