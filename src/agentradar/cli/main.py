"""AgentRadar CLI -- Which AI agents are on this machine?

Entry point for the ``agentradar`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    scan     -- Discover installed and running agents.
    targets  -- List the agents discovery knows about.

Usage::

    agentradar scan                      # Table of detected agents
    agentradar scan --json               # JSON payload
    agentradar scan --no-processes       # Skip the process table
    agentradar targets
"""

from __future__ import annotations

import click

from agentradar import __version__
from agentradar.cli.scan import scan_command
from agentradar.cli.targets_cmd import targets_command


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """AgentRadar: Weighted discovery of local AI agents.

    Combines filesystem, environment, binary, app-path and process
    evidence into a confidence score for each known agent.
    """


# Register all subcommands
cli.add_command(scan_command)
cli.add_command(targets_command)
