"""
Main CLI entry point for AdLauncher
"""

import click

from .ad_batch import classify_command, create_command, template_command
from .accounts import accounts_group


@click.group()
@click.version_option(version='0.1.0')
def cli():
    """
    AdLauncher - Batch-create Meta ads from a template ad

    Clone a template ad's ad set and fill it with one paused ad per
    group of creative files.
    """
    pass


# Register commands
cli.add_command(classify_command)
cli.add_command(template_command)
cli.add_command(create_command)
cli.add_command(accounts_group)


if __name__ == '__main__':
    cli()
