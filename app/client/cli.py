"""
Command-line client. Examples:
  folio login root@example.com 'your-password'
  folio projects --search chat --type "Mobile App"
  folio logout
Server URL and session file come from FOLIO_API_URL and FOLIO_SESSION_FILE.
"""
import argparse
import json
import logging
import os
import sys

import httpx

from app.client.api import DEFAULT_API_URL, ApiError, FolioClient, SessionExpired
from app.client.session import DEFAULT_SESSION_FILE, ClientSession, SessionStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="folio", description="Folio portfolio client.")
    parser.add_argument("--api-url", default=os.environ.get("FOLIO_API_URL", DEFAULT_API_URL))
    parser.add_argument(
        "--session-file",
        default=os.environ.get("FOLIO_SESSION_FILE", str(DEFAULT_SESSION_FILE)),
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    login = sub.add_parser("login", help="Authenticate and store the session")
    login.add_argument("email")
    login.add_argument("password")

    signup = sub.add_parser("signup", help="Create an account")
    signup.add_argument("name")
    signup.add_argument("email")
    signup.add_argument("password")
    signup.add_argument("--role", choices=["user", "admin"])

    sub.add_parser("logout", help="Clear the stored session")
    sub.add_parser("whoami", help="Show the identity in the stored token")
    sub.add_parser("categories", help="List project categories with counts")

    projects = sub.add_parser("projects", help="Browse projects")
    projects.add_argument("--search")
    projects.add_argument("--type", action="append", default=[], dest="types")

    project = sub.add_parser("project", help="Show one project")
    project.add_argument("project_id", type=int)

    delete = sub.add_parser("delete", help="Delete a project (admin)")
    delete.add_argument("project_id", type=int)
    return parser


def _print(data: object) -> None:
    print(json.dumps(data, indent=2, default=str))


def run(args: argparse.Namespace, client: FolioClient) -> int:
    if args.command == "login":
        user = client.authenticate(args.email, args.password)
        print(f"Welcome back, {user['name']}!")
    elif args.command == "signup":
        _print(client.signup(args.name, args.email, args.password, args.role))
    elif args.command == "logout":
        client.logout()
        print("Logged out.")
    elif args.command == "whoami":
        _print(client.whoami())
    elif args.command == "categories":
        _print(client.categories())
    elif args.command == "projects":
        _print(client.list_projects(search=args.search, types=args.types))
    elif args.command == "project":
        _print(client.get_project(args.project_id))
    elif args.command == "delete":
        decision = client.session.navigate("/manage-projects")
        if not decision.allowed:
            print(decision.notice, file=sys.stderr)
            return 1
        _print(client.delete_project(args.project_id))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    session = ClientSession(SessionStore(args.session_file))
    with FolioClient(session, base_url=args.api_url) as client:
        try:
            return run(args, client)
        except SessionExpired as e:
            print(f"{e.message} Please login to continue.", file=sys.stderr)
            return 1
        except ApiError as e:
            print(f"Error ({e.status_code}): {e.message}", file=sys.stderr)
            return 1
        except httpx.HTTPError as e:
            print(f"Could not reach {args.api_url}: {e}", file=sys.stderr)
            return 1


if __name__ == "__main__":
    sys.exit(main())
