"""``agentradar targets`` -- List the agents discovery knows about.

Exit Codes:
    0 -- Always (informational command).
"""

from __future__ import annotations

import json

import click

from agentradar.discovery import AGENT_TARGETS


@click.command("targets")
@click.option("--json", "as_json", is_flag=True, default=False,
              help="Print the targets as JSON.")
def targets_command(as_json: bool) -> None:
    """List every built-in agent and the signal categories it uses."""
    from agentradar.cli.output import print_targets, target_categories

    if as_json:
        payload = [
            {"id": t.id, "name": t.name, "signals": target_categories(t)}
            for t in AGENT_TARGETS
        ]
        click.echo(json.dumps(payload, indent=2))
        return
    print_targets(AGENT_TARGETS)
