#!/usr/bin/env python
"""Create the demo calendar event (or a SharePoint list item) through Microsoft Graph.

Flow: obtain token -> list tenant users -> create the event for the target user.

Examples:
  python scripts/create_calendar_event.py --user-id 86ce0077-bf25-4063-a722-e9d143490b34
  python scripts/create_calendar_event.py --for-each --timeout 60
  python scripts/create_calendar_event.py --list-item --site-id <site> --list-id <list>

Environment:
  GRAPH_ACCESS_TOKEN (required), GRAPH_BASE_URL, GRAPH_TIMEOUT,
  GRAPH_TARGET_USER_ID, GRAPH_SITE_ID, GRAPH_LIST_ID

"""
from __future__ import annotations
import argparse
import logging
import os
import sys
from pathlib import Path

# Load a local .env if present (no python-dotenv dependency)
def _load_env_file(env_path: Path) -> None:
    if not env_path.exists():
        return
    for line in env_path.read_text(encoding='utf-8').splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        k, v = line.split('=', 1)
        k = k.strip(); v = v.strip().strip('"').strip("'")
        existing = os.environ.get(k)
        if existing is None or existing.strip() == '':
            os.environ[k] = v

_load_env_file(Path('.env'))

from graph_api import (
    ApiError,
    EnvTokenProvider,
    EventPayload,
    GraphRequestError,
    ResourceFetcher,
    ResourceMutator,
    create_for_each,
    describe,
)
from graph_api.base_client import BaseClient

logger = logging.getLogger('create_calendar_event')


def parse_args(argv=None):
    p = argparse.ArgumentParser(description='Create a calendar event via Microsoft Graph')
    p.add_argument('--user-id', default=os.getenv('GRAPH_TARGET_USER_ID'))
    p.add_argument('--for-each', action='store_true', help='Create the event for every tenant user')
    p.add_argument('--subject', default='Microsoft Graph API discussion')
    p.add_argument('--location', default="Joe's office")
    p.add_argument('--body', default="Let's discuss this awesome API.")
    p.add_argument('--time-zone', default='Pacific Standard Time')
    p.add_argument('--list-item', action='store_true', help='Create a SharePoint list item instead')
    p.add_argument('--site-id', default=os.getenv('GRAPH_SITE_ID'))
    p.add_argument('--list-id', default=os.getenv('GRAPH_LIST_ID'))
    p.add_argument('--workers', type=int, default=4)
    p.add_argument('--timeout', type=float, help='Deadline (seconds) for --for-each')
    p.add_argument('--verbose', action='store_true')
    return p.parse_args(argv)


def _message(err: Exception, subject: str) -> str:
    if isinstance(err, ApiError):
        return describe(err, subject)
    return f"Error creating an event for {subject}. {err}"


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING, format='[%(levelname)s] %(message)s')
    tokens = EnvTokenProvider()

    try:
        mutator = ResourceMutator.from_env()
        if args.list_item:
            site_id = args.site_id or BaseClient.env('GRAPH_SITE_ID')
            list_id = args.list_id or BaseClient.env('GRAPH_LIST_ID')
            mutator.create_list_item(tokens.get_token(), site_id, list_id)
            print('List item created!')
            return 0

        users = ResourceFetcher.from_env().list_users(tokens.get_token())
        logger.info('Tenant has %d user(s)', len(users))
    except (GraphRequestError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    event = EventPayload.tomorrow(args.subject, location=args.location, body=args.body, time_zone=args.time_zone)

    if args.for_each:
        try:
            credential = tokens.get_token()
        except GraphRequestError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        result = create_for_each(
            mutator, credential, users,
            build=lambda u: (f"users/{u.id}/events", event.to_api()),
            max_workers=args.workers, timeout=args.timeout,
        )
        for user, _ in result.succeeded:
            print(f"Successfully created an event on {user.display_name}'s calendar.")
        for user, err in result.failed:
            print(_message(err, user.display_name), file=sys.stderr)
        return 0 if result.ok else 1

    if not args.user_id:
        print('Error: --user-id (or GRAPH_TARGET_USER_ID) required', file=sys.stderr)
        return 2
    names = {u.id: u.display_name for u in users}
    subject = names.get(args.user_id, args.user_id)
    try:
        mutator.create_event(tokens.get_token(), args.user_id, event)
    except GraphRequestError as e:
        print(_message(e, subject), file=sys.stderr)
        return 1
    print(f"Successfully created an event on {subject}'s calendar.")
    return 0


if __name__ == '__main__':
    sys.exit(main())
