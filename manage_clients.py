#!/usr/bin/env python3
"""
Client management CLI for the Client Registry.
Run this script to inspect, add, or remove clients without the HTTP API.

Usage:
    python manage_clients.py list
    python manage_clients.py add <name> <cpf> <income> <birth_date> <children>
    python manage_clients.py delete <id>
    python manage_clients.py seed
"""

import sys

from pydantic import ValidationError

from client_api.database import init_db, get_db, seed_clients
from client_api.infrastructure.repositories import ClientRepository
from client_api.schemas import ClientInput


def print_usage():
    print(__doc__)


def _repo() -> ClientRepository:
    return ClientRepository(get_db())


def cmd_list(args):
    rows, total = _repo().find_all("id", "ASC", limit=-1, offset=0)
    if not total:
        print("No clients found. Create one with: python manage_clients.py add ...")
        return 0

    print(f"{'ID':<5} {'Name':<30} {'CPF':<12} {'Income':>10} {'Children':>9}  {'Birth date'}")
    print("-" * 90)
    for row in rows:
        print(
            f"{row['id']:<5} {row['name']:<30} {row['cpf']:<12} "
            f"{row['income']:>10.2f} {row['children']:>9}  {row['birth_date'].isoformat()}"
        )
    return 0


def cmd_add(args):
    if len(args) < 5:
        print("Error: add requires <name> <cpf> <income> <birth_date> <children>")
        print("Example: python manage_clients.py add \"Ana Souza\" 12345678900 5000 2003-08-20T07:50:00Z 1")
        return 1

    name, cpf, income, birth_date, children = args[:5]
    try:
        data = ClientInput(
            name=name, cpf=cpf, income=income, birth_date=birth_date, children=children
        )
    except ValidationError as e:
        for err in e.errors():
            print(f"Error: {err['loc'][-1]}: {err['msg']}")
        return 1

    client_id = _repo().create(**data.to_fields())
    print(f"Client '{data.name}' created successfully (ID: {client_id})")
    return 0


def cmd_delete(args):
    if len(args) < 1:
        print("Error: delete requires <id>")
        return 1

    try:
        client_id = int(args[0])
    except ValueError:
        print(f"Error: '{args[0]}' is not a valid id")
        return 1

    repo = _repo()
    client = repo.get_by_id(client_id)
    if not client:
        print(f"Error: Client {client_id} not found")
        return 1

    # Confirm deletion
    confirm = input(f"Delete client {client_id} ({client['name']})? [y/N]: ")
    if confirm.lower() != 'y':
        print("Cancelled")
        return 0

    repo.delete(client_id)
    print(f"Client {client_id} deleted")
    return 0


def cmd_seed(args):
    inserted = seed_clients()
    if inserted:
        print(f"Inserted {inserted} sample clients")
    else:
        print("Clients table is not empty, nothing inserted")
    return 0


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print_usage()
        return 1

    # Initialize database
    init_db()

    command = argv[0].lower()
    args = argv[1:]

    commands = {
        'list': cmd_list,
        'add': cmd_add,
        'delete': cmd_delete,
        'seed': cmd_seed,
        'help': lambda _: (print_usage(), 0)[1],
    }

    if command not in commands:
        print(f"Unknown command: {command}")
        print_usage()
        return 1

    return commands[command](args)


if __name__ == "__main__":
    sys.exit(main())
