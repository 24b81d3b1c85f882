"""Error boundary handling for CLI commands.

Catches well-known exceptions at the CLI entry point and displays clean
error messages without stack traces.
"""

import functools
from collections.abc import Callable
from typing import Any, TypeVar

import click

T = TypeVar("T", bound=Callable[..., Any])


def cli_error_boundary(func: T) -> T:
    """Decorator that catches well-known exceptions and displays clean error messages.

    Catches:
        - FileNotFoundError: Missing source root or home directory
        - ValueError: Malformed dotinstall.toml or invalid option values
        - PermissionError: Permission denied outside an individual step

    Failures inside a provisioning step never reach this boundary; they are
    recorded in the step's result. All other exceptions bubble up normally
    with full stack traces.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except FileNotFoundError as e:
            click.echo(f"Error: {e}", err=True)
            raise SystemExit(1) from None
        except ValueError as e:
            click.echo(f"Error: {e}", err=True)
            raise SystemExit(1) from None
        except PermissionError as e:
            click.echo(f"Error: {e}", err=True)
            raise SystemExit(1) from None

    return wrapper  # type: ignore[return-value]
