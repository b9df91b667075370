"""
Common CLI utilities and decorators for consistent command behavior.
"""

import json
import logging
import sys
import click
from functools import wraps
from typing import Generator
from .config import load_config, setup_logging
from .exit_codes import (
    SUCCESS, INTERRUPTED,
    get_exit_code_for_exception, CommandError
)

logger = logging.getLogger("regcheck")


def standard_command(func):
    """
    Decorator that provides standard CLI behavior:
    - Configuration loaded for the --root the command runs against
    - Logging configured on stderr (DEBUG with --verbose)
    - JSONL streamed on stdout when the command yields dicts
    - Consistent error handling and exit codes

    The wrapped command receives the loaded configuration as `config`.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        verbose = kwargs.get('verbose', False)
        json_output = kwargs.get('json_output', False)
        root = kwargs.get('root', '.')

        config = load_config(root)
        logging_config = config.get('logging', {})
        setup_logging(
            'DEBUG' if verbose else logging_config.get('level', 'INFO'),
            logging_config.get('format', '%(levelname)s: %(message)s'),
        )
        kwargs['config'] = config

        try:
            result = func(*args, **kwargs)

            if isinstance(result, Generator):
                for item in result:
                    if isinstance(item, dict):
                        print(json.dumps(item, ensure_ascii=False), flush=True)

            sys.exit(SUCCESS)

        except KeyboardInterrupt:
            logger.error("Interrupted by user")
            sys.exit(INTERRUPTED)
        except click.ClickException:
            raise
        except CommandError as e:
            logger.error(str(e))
            if json_output:
                error_obj = {
                    "error": str(e),
                    "type": type(e).__name__,
                    "exit_code": e.exit_code
                }
                result = getattr(e, 'result', None)
                if result is not None:
                    error_obj['result'] = result.to_dict()
                print(json.dumps(error_obj, ensure_ascii=False), flush=True)
            sys.exit(e.exit_code)
        except Exception as e:
            logger.error(f"Command failed: {e}")
            if json_output:
                error_obj = {
                    "error": str(e),
                    "type": type(e).__name__
                }
                print(json.dumps(error_obj, ensure_ascii=False), flush=True)
            sys.exit(get_exit_code_for_exception(e))

    return wrapper


# Standard options that many commands share
common_options = {
    'root': click.option('--root', type=click.Path(file_okay=False, exists=True), default='.',
                         show_default=True, help='Root of the registry repository'),
    'base_ref': click.option('--base-ref', default=None,
                             help='Base reference to compare against (default: git.base_ref, origin/main)'),
    'verbose': click.option('-v', '--verbose', is_flag=True,
                            help='Show debug output (probed URLs, git commands)'),
    'json_output': click.option('--json', 'json_output', is_flag=True,
                                help='Stream results as JSONL on stdout instead of tables'),
    'no_format': click.option('--no-format', is_flag=True,
                              help='Do not rewrite registry files with canonical formatting'),
}


def add_common_options(*option_names):
    """
    Decorator to add common options to a command.

    Example:
        @add_common_options('root', 'verbose')
        def my_command(root, verbose):
            ...
    """
    def decorator(func):
        for name in reversed(option_names):
            if name in common_options:
                func = common_options[name](func)
        return func
    return decorator
