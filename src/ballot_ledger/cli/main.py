"""
Ballot Ledger CLI

Command-line interface for deploying ballots and submitting operations.

Usage:
    ballot init --db ballots.db
    ballot deploy P1 P2 P3 --chairperson alice
    ballot give-right --ballot <id> --caller alice --to bob
    ballot delegate --ballot <id> --caller bob --to carol
    ballot vote --ballot <id> --caller carol --proposal 2
    ballot winner --ballot <id>
    ballot log --ballot <id> --type VoteCast
"""

import json
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from ballot_ledger.election.models import DEFAULT_MAX_NAME_LENGTH
from ballot_ledger.kernel.errors import BallotError
from ballot_ledger.kernel.logging import configure_logging
from ballot_ledger.kernel.metrics import start_metrics_server
from ballot_ledger.ledger import BallotLedger

app = typer.Typer(
    name="ballot",
    help="Ballot Ledger - weighted voting with delegation",
    add_completion=False,
)

DEFAULT_DB = Path(".ballot.db")

DbOption = Annotated[Optional[Path], typer.Option("--db", help="Database path")]
BallotOption = Annotated[str, typer.Option("--ballot", help="Ballot ID")]
CallerOption = Annotated[str, typer.Option("--caller", help="Identity submitting the operation")]


@app.callback()
def main_callback(
    json_logs: Annotated[
        bool,
        typer.Option("--json-logs", help="Emit JSON logs to stderr"),
    ] = False,
    log_level: Annotated[
        str,
        typer.Option("--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)"),
    ] = "WARNING",
) -> None:
    """Ballot Ledger - weighted voting with delegation"""
    configure_logging(json_output=json_logs, log_level=log_level)


def get_ledger(db_path: Optional[Path] = None) -> BallotLedger:
    """Open the ledger, failing if the database was never initialized"""
    db = db_path or DEFAULT_DB
    if not db.exists():
        typer.echo(f"Error: Database not found: {db}", err=True)
        typer.echo(f"Run 'ballot init --db {db}' to initialize", err=True)
        raise typer.Exit(1)
    return BallotLedger(db)


@contextmanager
def rejected_as_exit() -> Iterator[None]:
    """Turn a rejected ballot operation into an error message and exit code 1"""
    try:
        yield
    except BallotError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e


# Initialization


@app.command()
def init(
    db: Annotated[Path, typer.Option(help="Database path")] = DEFAULT_DB,
) -> None:
    """Initialize a new ballot ledger database"""
    if db.exists():
        typer.echo(f"Error: Database already exists: {db}", err=True)
        raise typer.Exit(1)

    BallotLedger(db)
    typer.echo(f"✓ Initialized ballot ledger: {db}")


@app.command()
def deploy(
    proposals: Annotated[
        Optional[list[str]],
        typer.Argument(help="Proposal names, in index order"),
    ] = None,
    chairperson: Annotated[
        str, typer.Option("--chairperson", help="Chairperson identity")
    ] = "",
    max_name_length: Annotated[
        int,
        typer.Option("--max-name-length", help="Maximum proposal name length in bytes"),
    ] = DEFAULT_MAX_NAME_LENGTH,
    db: DbOption = None,
) -> None:
    """Deploy a ballot with the given proposals"""
    if not proposals:
        typer.echo("Error: Missing proposals", err=True)
        raise typer.Exit(1)
    if not chairperson:
        typer.echo("Error: Missing chairperson", err=True)
        raise typer.Exit(1)

    ledger = get_ledger(db)

    typer.echo("Proposals:")
    for index, name in enumerate(proposals):
        typer.echo(f"Proposal {index + 1}: {name}")

    with rejected_as_exit():
        ballot_id = ledger.create_ballot(chairperson, proposals, max_name_length)

    typer.echo(f"✓ Deployed ballot: {ballot_id}")
    typer.echo(f"  Chairperson: {chairperson}")


@app.command("list")
def list_ballots(db: DbOption = None) -> None:
    """List all ballots"""
    ledger = get_ledger(db)
    ballots = ledger.list_ballots()

    if not ballots:
        typer.echo("No ballots")
        return

    stats = ledger.stats()
    typer.echo(f"Ballots ({stats['ballots']}, {stats['events']} events):")
    for summary in ballots:
        typer.echo(
            f"  {summary.ballot_id}: {summary.proposal_count} proposals, "
            f"{summary.total_votes} votes, leading: {summary.winner_name}"
        )


@app.command()
def show(
    ballot_id: BallotOption,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
    db: DbOption = None,
) -> None:
    """Show proposals, vote counts and the current winner"""
    ledger = get_ledger(db)

    with rejected_as_exit():
        ballot = ledger.get_ballot(ballot_id)

    if json_output:
        typer.echo(json.dumps(ballot.to_dict(), indent=2, default=str))
        return

    typer.echo(f"Ballot: {ballot.ballot_id}")
    typer.echo(f"  Chairperson: {ballot.chairperson}")
    for index, proposal in enumerate(ballot.proposals):
        typer.echo(f"  [{index}] {proposal.name}: {proposal.vote_count}")
    typer.echo(f"  Winner: {ballot.winner_name()} (#{ballot.winning_proposal()})")


# Election operations


@app.command("give-right")
def give_right(
    ballot_id: BallotOption,
    caller: CallerOption,
    to: Annotated[str, typer.Option("--to", help="Voter receiving the right to vote")],
    db: DbOption = None,
) -> None:
    """Give a voter the right to vote (chairperson only)"""
    ledger = get_ledger(db)

    with rejected_as_exit():
        voter = ledger.give_right_to_vote(ballot_id, caller, to)

    typer.echo(f"✓ Granted right to vote: {to}")
    typer.echo(f"  Weight: {voter.weight}")


@app.command()
def delegate(
    ballot_id: BallotOption,
    caller: CallerOption,
    to: Annotated[str, typer.Option("--to", help="Voter to delegate to")],
    db: DbOption = None,
) -> None:
    """Delegate your vote to another voter"""
    ledger = get_ledger(db)

    with rejected_as_exit():
        voter = ledger.delegate(ballot_id, caller, to)
        delegate_state = ledger.voter(ballot_id, voter.delegate)

    typer.echo(f"✓ Delegated vote: {caller} -> {voter.delegate}")
    if delegate_state.voted:
        typer.echo(f"  Counted for proposal #{delegate_state.vote}")
    else:
        typer.echo(f"  Delegate weight: {delegate_state.weight}")


@app.command()
def vote(
    ballot_id: BallotOption,
    caller: CallerOption,
    proposal: Annotated[int, typer.Option("--proposal", help="Proposal index")],
    db: DbOption = None,
) -> None:
    """Vote for a proposal"""
    ledger = get_ledger(db)

    with rejected_as_exit():
        result = ledger.vote(ballot_id, caller, proposal)

    typer.echo(f"✓ Voted for proposal #{proposal}: {result.name}")
    typer.echo(f"  Vote count: {result.vote_count}")


# Queries


@app.command()
def winner(
    ballot_id: BallotOption,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
    db: DbOption = None,
) -> None:
    """Show the winning proposal"""
    ledger = get_ledger(db)

    with rejected_as_exit():
        index = ledger.winning_proposal(ballot_id)
        proposal = ledger.proposal(ballot_id, index)

    if json_output:
        typer.echo(
            json.dumps(
                {"winning_proposal": index, "winner_name": proposal.name, "vote_count": proposal.vote_count}
            )
        )
    else:
        typer.echo(f"Winning proposal: #{index} {proposal.name} ({proposal.vote_count} votes)")


@app.command("voter")
def voter_show(
    ballot_id: BallotOption,
    address: Annotated[str, typer.Option("--address", help="Voter identity")],
    db: DbOption = None,
) -> None:
    """Show a voter's weight and voting state"""
    ledger = get_ledger(db)

    with rejected_as_exit():
        state = ledger.voter(ballot_id, address)

    typer.echo(f"Voter: {address}")
    typer.echo(f"  Weight: {state.weight}")
    typer.echo(f"  Voted: {state.voted}")
    typer.echo(f"  Delegate: {state.delegate or '-'}")
    typer.echo(f"  Vote: {'-' if state.vote is None else state.vote}")


@app.command("log")
def event_log(
    ballot_id: Annotated[
        Optional[str], typer.Option("--ballot", help="Only this ballot's events")
    ] = None,
    event_type: Annotated[
        Optional[str], typer.Option("--type", help="Only events of this type")
    ] = None,
    actor: Annotated[
        Optional[str], typer.Option("--actor", help="Only events submitted by this identity")
    ] = None,
    limit: Annotated[int, typer.Option("--limit", help="Most recent N events")] = 20,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
    db: DbOption = None,
) -> None:
    """Show the recorded event history"""
    ledger = get_ledger(db)

    with rejected_as_exit():
        events = ledger.event_log(ballot_id, event_type=event_type, actor_id=actor, limit=limit)

    if json_output:
        typer.echo(json.dumps([e.model_dump(mode="json") for e in events], indent=2))
        return

    if not events:
        typer.echo("No events")
        return

    for event in events:
        typer.echo(
            f"{event.occurred_at.isoformat()} {event.stream_id} "
            f"v{event.version} {event.event_type} by {event.actor_id or '-'}"
        )


@app.command("metrics-server")
def metrics_server(
    port: Annotated[int, typer.Option("--port", help="Port to serve metrics on")] = 9090,
) -> None:
    """Serve Prometheus metrics until interrupted"""
    import time

    start_metrics_server(port)
    typer.echo(f"Serving metrics on :{port}/metrics")
    while True:
        time.sleep(3600)


def main() -> None:
    """Main entry point"""
    app()


if __name__ == "__main__":
    main()
