"""
API.AI CLI - Command-line interface.

This layer provides the user-facing CLI commands, using the SDK layer
for all operations. It handles:
- Argument parsing
- TTY detection for human vs machine output
- Pretty formatting for human output
- JSON output for piping/automation
"""

import argparse
import json
import logging
import sys
from typing import Any

from apiai_client.core.config import ClientConfig
from apiai_client.core.errors import ApiAiError, ValidationError
from apiai_client.core.types import Entity, Entry, QueryResponse
from apiai_client.sdk import ApiAiClient

# =============================================================================
# Output Helpers
# =============================================================================


def is_tty() -> bool:
    """Check if stdout is a TTY (human) or pipe (machine)."""
    return sys.stdout.isatty()


def json_output(data: Any, pretty: bool = False) -> None:
    """Print JSON output."""
    indent = 2 if pretty or is_tty() else None
    print(json.dumps(data, indent=indent, default=str))


def error_output(error: ApiAiError) -> None:
    """Print error and exit."""
    json_output(error.to_dict())
    sys.exit(1)


def table_output(
    headers: list[str],
    rows: list[list[str]],
    widths: list[int],
) -> None:
    """Print a formatted table for human output."""
    header_line = "  ".join(h.ljust(w) for h, w in zip(headers, widths))
    print(header_line)
    print("-" * len(header_line))

    for row in rows:
        print("  ".join(str(v)[:w].ljust(w) for v, w in zip(row, widths)))


def load_json_arg(value: str, name: str) -> Any:
    """Parse a JSON argument, reading stdin when value is '-'."""
    try:
        if value == "-":
            return json.load(sys.stdin)
        return json.loads(value)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError(f"Invalid JSON in {name}: {e}")


def parse_entries(value: str, name: str = "entries") -> list[Entry]:
    """Parse a JSON array of entries."""
    data = load_json_arg(value, name)
    if not isinstance(data, list):
        raise ValidationError(f"{name} must be a JSON array of entries")
    try:
        return [Entry.from_dict(item) for item in data]
    except (KeyError, TypeError) as e:
        raise ValidationError(f"Invalid entry in {name}: {e!r}")


def parse_entity(data: Any, name: str) -> Entity:
    """Build an Entity from decoded JSON input."""
    try:
        return Entity.from_dict(data)
    except (KeyError, TypeError) as e:
        raise ValidationError(f"Invalid entity in {name}: {e!r}")


def query_output(response: QueryResponse) -> None:
    """Print a query response."""
    if is_tty():
        result = response.result
        print(f"Speech: {response.speech}")
        if result is not None:
            if result.action:
                print(f"Action: {result.action}")
            if result.intent_name:
                print(f"Intent: {result.intent_name}")
            if result.parameters:
                print(f"Parameters: {json.dumps(result.parameters)}")
        print(f"Session: {response.session_id}")
    else:
        json_output(response.raw)


def status_output(response: QueryResponse, message: str) -> None:
    """Print the outcome of an entity write."""
    output: dict[str, Any] = {"success": response.status.is_success, "message": message}
    if response.id:
        output["id"] = response.id
    json_output(output)


# =============================================================================
# CLI Commands
# =============================================================================


def cmd_query(client: ApiAiClient, args: argparse.Namespace) -> None:
    """Send a text query."""
    query_output(client.text_query(args.text))


def cmd_event(client: ApiAiClient, args: argparse.Namespace) -> None:
    """Trigger an event."""
    data = load_json_arg(args.data, "--data") if args.data else {}
    if not isinstance(data, dict):
        raise ValidationError("--data must be a JSON object")
    query_output(client.event_query(args.name, data))


def cmd_entities_list(client: ApiAiClient, _args: argparse.Namespace) -> None:
    """List entities."""
    entities = client.entities.list()

    if is_tty():
        if not entities:
            print("No entities found.")
            return
        table_output(
            ["ID", "Name", "Entries"],
            [[e.id or "", e.name, str(e.count or 0)] for e in entities],
            [36, 30, 8],
        )
    else:
        json_output({"data": [e.to_dict() for e in entities], "total_count": len(entities)})


def cmd_entities_get(client: ApiAiClient, args: argparse.Namespace) -> None:
    """Get an entity by ID or name."""
    entity = client.entities.get(args.entity_id)

    if is_tty():
        print(f"Entity: {entity.name} ({entity.id})")
        if not entity.entries:
            print("No entries.")
            return
        table_output(
            ["Value", "Synonyms"],
            [[e.value, ", ".join(e.synonyms)] for e in entity.entries],
            [30, 60],
        )
    else:
        json_output(entity.to_dict())


def cmd_entities_create(client: ApiAiClient, args: argparse.Namespace) -> None:
    """Create an entity."""
    entries = parse_entries(args.entries, "--entries") if args.entries else []
    response = client.entities.create(Entity(args.name, entries))
    status_output(response, f"Entity {args.name} created")


def cmd_entities_update(client: ApiAiClient, args: argparse.Namespace) -> None:
    """Update an entity."""
    entity = parse_entity(load_json_arg(args.entity, "entity"), "entity")
    response = client.entities.update(args.entity_id, entity)
    status_output(response, f"Entity {args.entity_id} updated")


def cmd_entities_upsert(client: ApiAiClient, args: argparse.Namespace) -> None:
    """Create or update several entities."""
    data = load_json_arg(args.entities, "entities")
    if not isinstance(data, list):
        raise ValidationError("entities must be a JSON array")
    entities = [parse_entity(item, "entities") for item in data]
    response = client.entities.upsert(entities)
    status_output(response, f"{len(entities)} entities saved")


def cmd_entities_add_entries(client: ApiAiClient, args: argparse.Namespace) -> None:
    """Add entries to an entity."""
    entries = parse_entries(args.entries)
    response = client.entities.add_entries(args.entity_id, entries)
    status_output(response, f"{len(entries)} entries added to {args.entity_id}")


def cmd_entities_replace_entries(client: ApiAiClient, args: argparse.Namespace) -> None:
    """Update the entries of an entity."""
    entries = parse_entries(args.entries)
    response = client.entities.replace_entries(args.entity_id, entries)
    status_output(response, f"Entries of {args.entity_id} updated")


def cmd_entities_delete(client: ApiAiClient, args: argparse.Namespace) -> None:
    """Delete an entity."""
    response = client.entities.delete(args.entity_id)
    status_output(response, f"Entity {args.entity_id} deleted")


def cmd_entities_delete_entries(client: ApiAiClient, args: argparse.Namespace) -> None:
    """Delete entries of an entity."""
    response = client.entities.delete_entries(args.entity_id, args.values)
    status_output(response, f"{len(args.values)} entries deleted from {args.entity_id}")


# =============================================================================
# Main CLI
# =============================================================================


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="apiai",
        description="API.AI CLI - Command-line interface for the API.AI API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Output Modes:
  TTY (human):  Speech summaries and tables
  Pipe:         Full JSON

Examples:
  apiai query "I want a large pizza"
  apiai event WELCOME --data '{"name": "Sam"}'
  apiai entities list | jq '.data[].name'
  apiai entities add-entries pizza_type '[{"value": "margherita", "synonyms": ["margherita"]}]'
""",
    )
    parser.add_argument("--token", "-t", help="Client access token (overrides APIAI_ACCESS_TOKEN)")
    parser.add_argument("--lang", help="Query language (overrides APIAI_LANG)")
    parser.add_argument("--session-id", "-s", help="Session ID (overrides APIAI_SESSION_ID)")
    parser.add_argument("--base-url", help="API base URL (overrides APIAI_BASE_URL)")
    parser.add_argument("--api-version", help="API version (overrides APIAI_VERSION)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log HTTP requests to stderr")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # ========== Queries ==========
    query = subparsers.add_parser("query", help="Send a text query")
    query.add_argument("text", help="User utterance")
    query.set_defaults(func=cmd_query)

    event = subparsers.add_parser("event", help="Trigger an event")
    event.add_argument("name", help="Event name")
    event.add_argument("--data", "-d", help="JSON object with event parameters (or - for stdin)")
    event.set_defaults(func=cmd_event)

    # ========== Entities ==========
    ent = subparsers.add_parser("entities", help="Manage entities")
    ent.set_defaults(func=lambda _c, _a: ent.print_help())
    ent_sub = ent.add_subparsers(dest="subcommand")

    e_list = ent_sub.add_parser("list", help="List entities")
    e_list.set_defaults(func=cmd_entities_list)

    e_get = ent_sub.add_parser("get", help="Get entity with entries")
    e_get.add_argument("entity_id", help="Entity ID or name")
    e_get.set_defaults(func=cmd_entities_get)

    e_create = ent_sub.add_parser("create", help="Create an entity")
    e_create.add_argument("name", help="Entity name")
    e_create.add_argument("--entries", "-e", help="JSON array of entries (or - for stdin)")
    e_create.set_defaults(func=cmd_entities_create)

    e_update = ent_sub.add_parser("update", help="Update an entity")
    e_update.add_argument("entity_id", help="Entity ID or name")
    e_update.add_argument("entity", help="JSON entity object (or - for stdin)")
    e_update.set_defaults(func=cmd_entities_update)

    e_upsert = ent_sub.add_parser("upsert", help="Create or update several entities")
    e_upsert.add_argument("entities", help="JSON array of entities (or - for stdin)")
    e_upsert.set_defaults(func=cmd_entities_upsert)

    e_add = ent_sub.add_parser("add-entries", help="Add entries to an entity")
    e_add.add_argument("entity_id", help="Entity ID or name")
    e_add.add_argument("entries", help="JSON array of entries (or - for stdin)")
    e_add.set_defaults(func=cmd_entities_add_entries)

    e_replace = ent_sub.add_parser("replace-entries", help="Update the entries of an entity")
    e_replace.add_argument("entity_id", help="Entity ID or name")
    e_replace.add_argument("entries", help="JSON array of entries (or - for stdin)")
    e_replace.set_defaults(func=cmd_entities_replace_entries)

    e_delete = ent_sub.add_parser("delete", help="Delete an entity")
    e_delete.add_argument("entity_id", help="Entity ID or name")
    e_delete.set_defaults(func=cmd_entities_delete)

    e_del_entries = ent_sub.add_parser("delete-entries", help="Delete entries by value")
    e_del_entries.add_argument("entity_id", help="Entity ID or name")
    e_del_entries.add_argument("values", nargs="+", help="Reference values to delete")
    e_del_entries.set_defaults(func=cmd_entities_delete_entries)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(0)

    # Command groups without a subcommand only print their help
    if hasattr(args, "subcommand") and not args.subcommand:
        args.func(None, args)
        sys.exit(0)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        config = ClientConfig.from_env(
            access_token=args.token,
            api_lang=args.lang,
            api_version=args.api_version,
            api_base_url=args.base_url,
            session_id=args.session_id,
        )
        args.func(ApiAiClient(config=config), args)
    except ApiAiError as e:
        error_output(e)


if __name__ == "__main__":
    main()
