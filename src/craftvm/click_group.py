"""Custom Click group with automatic help display on errors.

This module provides a custom Click Group class that automatically
displays contextual help when syntax errors occur.
"""

from typing import Any

import click


class CraftVMGroup(click.Group):
    """Custom Click group that auto-displays help on usage errors."""

    def invoke(self, ctx: click.Context) -> Any:
        """Show the failing command's help on usage errors."""
        try:
            return super().invoke(ctx)
        except click.exceptions.UsageError as e:
            click.echo(f"Error: {e.format_message()}", err=True)

            # Get the most specific context for help (the subcommand context if available)
            error_ctx = e.ctx if e.ctx else ctx
            click.echo("")
            click.echo(error_ctx.get_help())
            error_ctx.exit(e.exit_code)
            return None  # Explicit return for code clarity (never reached)

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        """Override to show help when command is not found."""
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError as e:
            # Let parameter errors propagate with their own messages
            if isinstance(e, click.exceptions.MissingParameter | click.exceptions.BadParameter):
                raise
            click.echo(f"Error: {e.format_message()}", err=True)
            click.echo("")
            click.echo(ctx.get_help())
            ctx.exit(2)
            return None, None, []  # Explicit return for code clarity (never reached)


# Subgroups created with @main.group() also use CraftVMGroup
CraftVMGroup.group_class = CraftVMGroup
