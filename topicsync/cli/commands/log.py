"""Topic log commands for the topicsync CLI."""

import json
import sys
from dataclasses import asdict
from typing import TYPE_CHECKING

from topicsync.protocols import NotFoundError, ValidationError
from topicsync.types import TopicType
from topicsync.validation import sanitize_string

if TYPE_CHECKING:
    from topicsync import TopicSync

TOPIC_TYPE_CHOICES = [t.name.lower() for t in TopicType]


def cmd_log(args, ts: "TopicSync"):
    """Handle log subcommands."""
    if args.log_action == "add":
        content = sanitize_string(args.content, "content", max_length=20000)
        topic_type = TopicType[args.type.upper()]
        try:
            log = ts.create_log(args.topic_id, content, topic_type=topic_type)
        except (NotFoundError, ValidationError) as e:
            print(f"✗ {e}")
            sys.exit(1)
        print(f"✓ Log created: {log.id} (topic {log.topic_id})")

    elif args.log_action == "list":
        topic_type = TopicType[args.type.upper()]
        items = ts.list_logs(
            args.topic_id, topic_types=[topic_type], offset=args.offset, size=args.size
        )
        items.sort(key=lambda item: item.create_time, reverse=True)
        if args.json:
            print(json.dumps([asdict(item) for item in items], indent=2))
            return
        if not items:
            print(f"No logs for topic {args.topic_id}.")
            return
        for item in items:
            print(f"  {item.id}  {item.preview}")

    elif args.log_action == "rm":
        try:
            ts.delete_log(args.id)
        except NotFoundError as e:
            print(f"✗ {e}")
            sys.exit(1)
        print(f"✓ Log deleted: {args.id}")
