"""Tests for topicsync.types records and MigrationResult."""

from topicsync.types import (
    DEFAULT_LOG_MARK,
    PREVIEW_LENGTH,
    MigrationResult,
    Topic,
    TopicLog,
    TopicLogListItem,
    TopicType,
)


class TestTopic:
    def test_dict_round_trip(self):
        topic = Topic(id=7, name="Reading", description="books", pin_weight=2, create_time=10)
        assert Topic.from_dict(topic.to_dict()) == topic

    def test_from_dict_fills_defaults(self):
        topic = Topic.from_dict({"id": "3", "name": "x"})
        assert topic.id == 3
        assert topic.pin_weight == 0
        assert topic.description is None
        assert topic.openid == ""


class TestTopicLog:
    def test_defaults(self):
        log = TopicLog(id=1, topic_id=2, content="hello")
        assert log.topic_type == TopicType.TOPIC
        assert log.mark == DEFAULT_LOG_MARK == 1

    def test_from_dict_keeps_zero_mark(self):
        """A stored mark of 0 is a real value, not a missing one."""
        log = TopicLog.from_dict({"id": 1, "topic_id": 2, "content": "c", "mark": 0})
        assert log.mark == 0

    def test_from_dict_missing_mark_uses_default(self):
        log = TopicLog.from_dict({"id": 1, "topic_id": 2, "content": "c"})
        assert log.mark == DEFAULT_LOG_MARK


class TestTopicLogListItem:
    def test_short_content_preview_unchanged(self):
        item = TopicLogListItem.from_log(TopicLog(id=1, topic_id=2, content="short"))
        assert item.preview == "short"

    def test_long_content_truncated_with_ellipsis(self):
        content = "a" * (PREVIEW_LENGTH + 20)
        item = TopicLogListItem.from_log(TopicLog(id=1, topic_id=2, content=content))
        assert item.preview == "a" * PREVIEW_LENGTH + "..."
        assert item.content == content

    def test_exact_length_not_truncated(self):
        content = "b" * PREVIEW_LENGTH
        item = TopicLogListItem.from_log(TopicLog(id=1, topic_id=2, content=content))
        assert item.preview == content


class TestMigrationResult:
    def test_empty_result(self):
        result = MigrationResult()
        assert result.success is True
        assert result.attempted is False

    def test_errors_mean_failure(self):
        result = MigrationResult(topics_failed=1, errors=["boom"])
        assert result.success is False
        assert result.attempted is True

    def test_to_dict_includes_success(self):
        data = MigrationResult(topics_migrated=2, local_cleared=True).to_dict()
        assert data["topics_migrated"] == 2
        assert data["local_cleared"] is True
        assert data["success"] is True
        assert data["errors"] == []
