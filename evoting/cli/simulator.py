#!/usr/bin/env python3
"""
eVoting Simulator CLI

Replays governance calls against an in-memory engine, the way a host chain
would deliver them.

Usage:
    evoting-sim run <script.json> [--config FILE] [--dump-state FILE]
    evoting-sim config [--config FILE]

Script format (a list, or an object with a "steps" list):

    [
      {"caller": "alice", "height": 1000, "op": "create_proposal",
       "args": {"description": "Fund docs", "deadline": 3000, "reward_pool": 1000}},
      {"caller": "bob", "height": 1200, "op": "vote",
       "args": {"proposal_id": 1, "weight": 50, "vote_for": true}},
      {"caller": "bob", "height": 3001, "op": "claim_reward",
       "args": {"proposal_id": 1}, "expect": "err"}
    ]
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import click

from evoting import __version__
from evoting.config import GovernanceConfig, load_config
from evoting.logger import configure_logging
from evoting.governance import CallContext, CallResult, GovernanceContract


# Contract calls a script may use
OPERATIONS = (
    "create_proposal",
    "get_proposal",
    "vote",
    "vote_on_behalf",
    "finalize",
    "claim_reward",
    "delegate",
    "get_delegate",
    "set_category",
    "get_category",
    "lock_proposal",
    "is_unlocked",
    "add_reputation",
    "get_reputation",
)


def load_script(path: Path) -> List[Dict[str, Any]]:
    """Read and shape-check a simulation script."""
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise click.ClickException(f"Script is not valid JSON: {e}")
    steps = data.get("steps") if isinstance(data, dict) else data
    if not isinstance(steps, list):
        raise click.ClickException("Script must be a list of steps or {\"steps\": [...]}")
    for i, step in enumerate(steps, 1):
        if not isinstance(step, dict):
            raise click.ClickException(f"Step {i} is not an object")
        missing = {"caller", "height", "op"} - step.keys()
        if missing:
            raise click.ClickException(f"Step {i} is missing {sorted(missing)}")
        if step["op"] not in OPERATIONS:
            raise click.ClickException(f"Step {i}: unknown op '{step['op']}'")
    return steps


def run_step(contract: GovernanceContract, step: Dict[str, Any]) -> CallResult:
    ctx = CallContext(caller=str(step["caller"]), height=int(step["height"]))
    method = getattr(contract, step["op"])
    try:
        return method(ctx, **step.get("args", {}))
    except TypeError as e:
        raise click.ClickException(f"Bad arguments for {step['op']}: {e}")


def format_result(result: CallResult) -> str:
    payload = result.to_dict()
    if result.ok:
        return click.style("ok ", fg="green") + json.dumps(payload["value"])
    return click.style(payload["error"], fg="red") + f" {payload['message']}"


def _load(config_file: Optional[str]) -> GovernanceConfig:
    try:
        config = load_config(config_file)
    except ValueError as e:
        raise click.ClickException(f"Invalid configuration: {e}")
    configure_logging(config.logging.level, config.logging.file_output)
    return config


@click.group()
@click.version_option(version=__version__, prog_name="evoting-sim")
def cli():
    """eVoting governance engine simulator."""
    pass


@cli.command("run")
@click.argument("script", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--config", "-c",
    "config_file",
    type=click.Path(dir_okay=False),
    help="TOML configuration file (default: $EVOTING_CONFIG or ./evoting.toml)"
)
@click.option(
    "--dump-state",
    type=click.Path(dir_okay=False),
    help="Write the final engine state as JSON to this file"
)
def run_cmd(script: str, config_file: Optional[str], dump_state: Optional[str]):
    """Replay a JSON script of contract calls.

    Exits with status 1 when a step's outcome differs from its
    "expect" field ("ok" or "err").

    Examples:

        evoting-sim run scenario.json

        evoting-sim run scenario.json --dump-state state.json
    """
    steps = load_script(Path(script))
    contract = GovernanceContract.from_config(_load(config_file))

    mismatches = 0
    for i, step in enumerate(steps, 1):
        result = run_step(contract, step)
        line = f"[{i:>3}] h={step['height']:<6} {step['caller']:<12} {step['op']:<16} {format_result(result)}"
        expect = step.get("expect")
        if expect is not None and (expect == "ok") != result.ok:
            mismatches += 1
            line += click.style(f"  (expected {expect})", fg="yellow")
        click.echo(line)

    if dump_state:
        Path(dump_state).write_text(
            json.dumps(contract.to_dict(), indent=2, default=str), encoding="utf-8",
        )
        click.echo(f"State written to {dump_state}")

    if mismatches:
        raise click.ClickException(f"{mismatches} step(s) did not match expectations")
    click.echo(click.style(f"✓ {len(steps)} step(s) replayed", fg="green"))


@cli.command("config")
@click.option("--config", "-c", "config_file", type=click.Path(dir_okay=False))
def config_cmd(config_file: Optional[str]):
    """Print the resolved configuration."""
    click.echo(json.dumps(_load(config_file).to_dict(), indent=2))


if __name__ == "__main__":
    cli()
