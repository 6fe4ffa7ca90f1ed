"""Topic commands for the topicsync CLI."""

import json
import sys
from typing import TYPE_CHECKING

from topicsync.protocols import NotFoundError, ValidationError
from topicsync.validation import sanitize_string

if TYPE_CHECKING:
    from topicsync import TopicSync


def cmd_topic(args, ts: "TopicSync"):
    """Handle topic subcommands."""
    if args.topic_action == "add":
        name = sanitize_string(args.name, "name", max_length=200)
        description = sanitize_string(
            args.description, "description", max_length=5000, required=False
        )
        try:
            topic = ts.create_topic(name, description=description or None, pin_weight=args.pin)
        except ValidationError as e:
            print(f"✗ {e}")
            sys.exit(1)
        print(f"✓ Topic created: {topic.id} ({topic.name})")

    elif args.topic_action == "list":
        topics = ts.load_topics()
        if args.json:
            print(json.dumps([t.to_dict() for t in topics], indent=2))
            return
        if not topics:
            print("No topics yet.")
            return
        print(f"Topics ({ts.mode}):")
        for topic in topics:
            pin = f" [pin {topic.pin_weight}]" if topic.pin_weight else ""
            print(f"  {topic.id}  {topic.name}{pin}")
            if topic.description:
                print(f"      {topic.description[:80]}")

    elif args.topic_action == "update":
        fields = {}
        if args.name is not None:
            fields["name"] = sanitize_string(args.name, "name", max_length=200)
        if args.description is not None:
            fields["description"] = sanitize_string(
                args.description, "description", max_length=5000, required=False
            )
        if args.pin is not None:
            fields["pin_weight"] = args.pin
        if not fields:
            print("Nothing to update.")
            return
        try:
            topic = ts.update_topic(args.id, **fields)
        except (NotFoundError, ValidationError) as e:
            print(f"✗ {e}")
            sys.exit(1)
        print(f"✓ Topic updated: {topic.id}")

    elif args.topic_action == "rm":
        try:
            ts.delete_topic(args.id)
        except NotFoundError as e:
            print(f"✗ {e}")
            sys.exit(1)
        print(f"✓ Topic deleted: {args.id}")
