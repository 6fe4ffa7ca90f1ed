"""One-time migration of local-mode data into the remote store.

The coordinator drains the local topic and log collections into the
backend exactly once per login:

1. Read both local collections. A read failure aborts the pass with local
   data untouched.
2. Create remote topics in ascending ``create_time`` order, recording a
   local id -> remote id mapping for each success.
3. Create remote logs in ascending ``create_time`` order, grouped by their
   local topic, with ``topic_id`` rewritten through the mapping. Groups
   whose topic failed to migrate are skipped whole; a log is never created
   without its remote parent.
4. Only after every create has been attempted, clear both local
   collections, logs before topics. Records that failed to migrate are lost
   at this point. A pass in which every attempted create failed clears
   nothing and skips the reload.

Individual create failures are logged and counted, never raised. Remote
calls run strictly one after another so the backend assigns ids in the
user's original authoring order.
"""

import logging
from typing import Callable, Dict, List, Optional

from topicsync.protocols import RecordMigrationError, TopicLogRepository, TopicRepository
from topicsync.storage import LocalTopicLogRepo, LocalTopicRepo
from topicsync.types import MigrationResult, Topic, TopicLog

logger = logging.getLogger(__name__)


class SyncCoordinator:
    """Runs the local-to-remote migration pass.

    Args:
        local_topics: Source of local topics.
        local_logs: Source of local topic logs.
        remote_topics: Destination for topics; assigns remote ids.
        remote_logs: Destination for topic logs.
        on_complete: Called with the MigrationResult after a pass that made
            remote calls, so the caller can reload from the remote store.
    """

    def __init__(
        self,
        local_topics: LocalTopicRepo,
        local_logs: LocalTopicLogRepo,
        remote_topics: TopicRepository,
        remote_logs: TopicLogRepository,
        on_complete: Optional[Callable[[MigrationResult], None]] = None,
    ):
        self.local_topics = local_topics
        self.local_logs = local_logs
        self.remote_topics = remote_topics
        self.remote_logs = remote_logs
        self.on_complete = on_complete

    def run(self) -> MigrationResult:
        """Migrate all local data to the remote store.

        Only call this once the session is authenticated.

        Returns:
            MigrationResult with per-kind counts and error strings.

        Raises:
            StoreReadError: If either local collection cannot be read. Nothing
                has been created remotely or cleared locally in that case.
        """
        result = MigrationResult()

        topics = self.local_topics.get_all(strict=True)
        logs = self.local_logs.get_all(strict=True)

        if not topics and not logs:
            logger.debug("No local data to migrate")
            return result

        logger.info(f"Migrating {len(topics)} local topics and {len(logs)} local logs")

        # Mapping table: local topic id -> remote topic id, scoped to this pass
        id_map = self._migrate_topics(topics, result)
        self._migrate_logs(logs, id_map, result)

        if result.topics_failed + result.logs_failed and not (
            result.topics_migrated or result.logs_migrated
        ):
            # Every create failed: keep the only copy for the next pass
            logger.warning(
                f"Migration made no progress ({len(result.errors)} failed creates); "
                f"local data kept",
                extra={"error_count": len(result.errors)},
            )
            return result

        # Logs before topics: a log left behind always keeps its parent
        self.local_logs.clear_all()
        self.local_topics.clear_all()
        result.local_cleared = True

        logger.info(
            f"Migration finished: topics {result.topics_migrated} ok / "
            f"{result.topics_failed} failed, logs {result.logs_migrated} ok / "
            f"{result.logs_failed} failed / {result.logs_skipped} skipped"
        )

        if self.on_complete is not None:
            self.on_complete(result)
        return result

    def _migrate_topics(self, topics: List[Topic], result: MigrationResult) -> Dict[int, int]:
        id_map: Dict[int, int] = {}
        # sorted() is stable: equal create_time keeps stored order
        for topic in sorted(topics, key=lambda t: t.create_time):
            try:
                remote = self.remote_topics.create(
                    {
                        "name": topic.name,
                        "description": topic.description,
                        "pin_weight": topic.pin_weight,
                    }
                )
            except Exception as e:
                self._record_failure(RecordMigrationError("topic", topic.id, e), result)
                result.topics_failed += 1
                continue
            id_map[topic.id] = remote.id
            result.topics_migrated += 1
            logger.debug(f"Migrated topic {topic.id} -> {remote.id}")
        return id_map

    def _migrate_logs(
        self, logs: List[TopicLog], id_map: Dict[int, int], result: MigrationResult
    ) -> None:
        for local_topic_id, group in group_by_topic(logs).items():
            remote_topic_id = id_map.get(local_topic_id)
            if remote_topic_id is None:
                logger.warning(
                    f"Skipping {len(group)} logs of topic {local_topic_id}: "
                    f"topic was not migrated",
                    extra={"entity": "topic_log", "local_topic_id": local_topic_id},
                )
                result.logs_skipped += len(group)
                continue

            for log in group:
                try:
                    self.remote_logs.create(
                        {
                            "topic_id": remote_topic_id,
                            "topic_type": log.topic_type,
                            "content": log.content,
                            "extra_data": log.extra_data,
                            "mark": log.mark,
                        }
                    )
                except Exception as e:
                    self._record_failure(RecordMigrationError("topic_log", log.id, e), result)
                    result.logs_failed += 1
                    continue
                result.logs_migrated += 1

    @staticmethod
    def _record_failure(error: RecordMigrationError, result: MigrationResult) -> None:
        result.errors.append(str(error))
        logger.warning(
            str(error),
            extra={
                "entity": error.entity,
                "local_id": error.local_id,
                "error_type": type(error.cause).__name__,
            },
        )


def group_by_topic(logs: List[TopicLog]) -> Dict[int, List[TopicLog]]:
    """Sort logs by create_time, then group them by local topic id.

    Grouping after the stable sort keeps each group chronological; groups
    appear in the order their first log was written.
    """
    groups: Dict[int, List[TopicLog]] = {}
    for log in sorted(logs, key=lambda entry: entry.create_time):
        groups.setdefault(log.topic_id, []).append(log)
    return groups
