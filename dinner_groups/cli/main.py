from __future__ import annotations

import argparse
import os
import sys
from typing import Dict, List

import yaml

from ..engine.editing import validate_group_composition
from ..engine.formation import INSUFFICIENT
from ..engine.roster import import_bookings_as_guests
from ..engine.service import MatchingService
from ..errors import CapacityShortfallError, MatchingError, NoVenuesError
from ..io.config_loader import load_config
from ..io.constraint_loader import load_constraints
from ..io.groups_loader import load_groups
from ..io.guest_loader import load_guests
from ..io.venue_loader import load_venues
from ..reporting.export import (
    distribution_to_dict,
    export_assignments_csv,
    export_csv,
    export_yaml,
    group_to_dict,
)
from ..store.yaml_store import YamlPairingStore

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_TOO_FEW = 2
EXIT_NO_CAPACITY = 3


# ---------------------------------------------------------------------------
# Shared utilities
# ---------------------------------------------------------------------------

def _service(args: argparse.Namespace) -> MatchingService:
    return MatchingService(YamlPairingStore(args.store), load_config(args.config))


def _load_members(path: str) -> Dict[str, List[str]]:
    """Map group name to member ids from a groups YAML file."""
    return {g.name: g.member_ids() for g in load_groups(path)}


# ---------------------------------------------------------------------------
# Command implementations
# ---------------------------------------------------------------------------

def cmd_import_guests(args: argparse.Namespace) -> int:
    store = YamlPairingStore(args.store)
    guests = load_guests(args.guests, args.event)
    constraints = load_constraints(args.constraints) if args.constraints else []
    with store.transaction():
        for guest in guests:
            store.add_guest(guest)
        for constraint in constraints:
            store.add_constraint(constraint, event_id=args.event)
    print(f"Imported {len(guests)} guest(s) and {len(constraints)} constraint(s) into {args.store}")
    return EXIT_OK


def cmd_import_bookings(args: argparse.Namespace) -> int:
    store = YamlPairingStore(args.store)
    count = import_bookings_as_guests(store, args.event)
    print(f"Imported {count} booking(s) as guests")
    return EXIT_OK


def cmd_generate(args: argparse.Namespace) -> int:
    service = _service(args)
    result = service.generate(args.event, target_size=args.target_size)
    if result.status == INSUFFICIENT:
        print("Not enough participants to form groups; the event should be postponed")
        return EXIT_TOO_FEW

    os.makedirs(args.output, exist_ok=True)
    if args.format == "csv":
        groups_file = os.path.join(args.output, "groups.csv")
        rationale_file = os.path.join(args.output, "rationale.csv")
        export_csv(result, groups_file, rationale_file)
    else:
        groups_file = os.path.join(args.output, "groups.yaml")
        rationale_file = os.path.join(args.output, "rationale.yaml")
        export_yaml(result, groups_file, rationale_file)

    for warning in result.warnings:
        print(f"warning: {warning}")
    print(
        f"Formed {len(result.groups)} group(s) ({result.status}); "
        f"wrote groups to {groups_file} and rationale to {rationale_file}"
    )
    return EXIT_OK


def cmd_distribute(args: argparse.Namespace) -> int:
    service = _service(args)
    groups = load_groups(args.groups)
    venues = load_venues(args.venues)
    result = service.distribute(args.event, groups, venues)
    if args.output:
        export_assignments_csv(result.assignments, args.output)
    yaml.safe_dump(distribution_to_dict(result), sys.stdout, sort_keys=False)
    return EXIT_OK


def cmd_clear(args: argparse.Namespace) -> int:
    service = _service(args)
    service.clear(args.event)
    print(f"Cleared venues, tables and seat assignments of event {args.event}")
    return EXIT_OK


def cmd_recompute(args: argparse.Namespace) -> int:
    groups = MatchingService.recompute(load_groups(args.groups))
    constraints = load_constraints(args.constraints) if args.constraints else []
    warnings = []
    for group in groups:
        for warning in validate_group_composition(group, constraints):
            warnings.append(f"{group.name}: {warning}")
            print(f"warning: {group.name}: {warning}")

    output = args.output or args.groups
    data = {"groups": [group_to_dict(g) for g in groups], "warnings": warnings}
    with open(output, "w", encoding="utf8") as handle:
        yaml.safe_dump(data, handle, sort_keys=False, allow_unicode=True)
    print(f"Recomputed {len(groups)} group(s) into {output}")
    return EXIT_OK


def cmd_compare(args: argparse.Namespace) -> int:
    groups1 = _load_members(os.path.join(args.dir1, "groups.yaml"))
    groups2 = _load_members(os.path.join(args.dir2, "groups.yaml"))

    for name in sorted(set(groups1) | set(groups2)):
        members1 = set(groups1.get(name, []))
        members2 = set(groups2.get(name, []))
        added = sorted(members2 - members1)
        removed = sorted(members1 - members2)
        if added or removed:
            print(f"{name}:")
            if added:
                print(f"  + {'; '.join(added)}")
            if removed:
                print(f"  - {'; '.join(removed)}")
    return EXIT_OK


# ---------------------------------------------------------------------------
# Argument parser setup
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dinner-groups")
    sub = parser.add_subparsers(dest="command", required=True)

    store_args = argparse.ArgumentParser(add_help=False)
    store_args.add_argument("--store", required=True, help="Pairing store YAML path")
    config_args = argparse.ArgumentParser(add_help=False)
    config_args.add_argument("--config", help="Matching configuration YAML path")

    # import-guests
    p_guests = sub.add_parser("import-guests", parents=[store_args], help="Import guests from CSV")
    p_guests.add_argument("event", help="Event id")
    p_guests.add_argument("--guests", required=True, help="Guests CSV path")
    p_guests.add_argument("--constraints", help="Avoid constraints CSV path")
    p_guests.set_defaults(func=cmd_import_guests)

    # import-bookings
    p_bookings = sub.add_parser(
        "import-bookings", parents=[store_args], help="Create guests from confirmed bookings"
    )
    p_bookings.add_argument("event", help="Event id")
    p_bookings.set_defaults(func=cmd_import_bookings)

    # generate
    p_gen = sub.add_parser("generate", parents=[store_args, config_args], help="Form dinner groups")
    p_gen.add_argument("event", help="Event id")
    p_gen.add_argument("--output", required=True, help="Output directory")
    p_gen.add_argument(
        "--target-size",
        type=int,
        choices=[5, 6],
        help="Target group size (default: from config, else 6)",
    )
    p_gen.add_argument(
        "--format",
        choices=["yaml", "csv"],
        default="yaml",
        help="Output format (default: yaml)",
    )
    p_gen.set_defaults(func=cmd_generate)

    # distribute
    p_dist = sub.add_parser(
        "distribute", parents=[store_args, config_args], help="Seat groups at venues"
    )
    p_dist.add_argument("event", help="Event id")
    p_dist.add_argument("--groups", required=True, help="Groups YAML path")
    p_dist.add_argument("--venues", required=True, help="Venues CSV path")
    p_dist.add_argument("--output", help="Seat assignments CSV path")
    p_dist.set_defaults(func=cmd_distribute)

    # clear
    p_clear = sub.add_parser("clear", parents=[store_args, config_args], help="Remove an event's seating")
    p_clear.add_argument("event", help="Event id")
    p_clear.set_defaults(func=cmd_clear)

    # recompute
    p_recompute = sub.add_parser("recompute", help="Recompute metrics of edited groups")
    p_recompute.add_argument("groups", help="Groups YAML path")
    p_recompute.add_argument("--constraints", help="Avoid constraints CSV path")
    p_recompute.add_argument("--output", help="Output path (default: overwrite input)")
    p_recompute.set_defaults(func=cmd_recompute)

    # compare
    p_compare = sub.add_parser("compare", help="Compare two generated group directories")
    p_compare.add_argument("dir1", help="First output directory")
    p_compare.add_argument("dir2", help="Second output directory")
    p_compare.set_defaults(func=cmd_compare)

    return parser


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except (NoVenuesError, CapacityShortfallError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_NO_CAPACITY
    except MatchingError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
