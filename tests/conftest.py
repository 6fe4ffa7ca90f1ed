"""
Pytest fixtures and test configuration for topicsync tests.
"""

from typing import Any, Dict, List

import pytest

from topicsync.protocols import ApiError
from topicsync.storage import (
    LOCAL_TOPIC_LOGS_KEY,
    LOCAL_TOPICS_KEY,
    LocalTopicLogRepo,
    LocalTopicRepo,
    MemoryKeyValueStore,
    SQLiteKeyValueStore,
)
from topicsync.types import DEFAULT_LOG_MARK, Topic, TopicLog, TopicLogListItem, TopicType


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point the data dir at a temp directory and clear backend env vars."""
    home = tmp_path / "home"
    monkeypatch.setenv("TOPICSYNC_DATA_DIR", str(home))
    monkeypatch.delenv("TOPICSYNC_BACKEND_URL", raising=False)
    monkeypatch.delenv("TOPICSYNC_AUTH_TOKEN", raising=False)
    return home


@pytest.fixture
def memory_store():
    return MemoryKeyValueStore()


@pytest.fixture
def sqlite_store(tmp_path):
    return SQLiteKeyValueStore(tmp_path / "local.db")


@pytest.fixture
def local_topics(memory_store):
    return LocalTopicRepo(memory_store)


@pytest.fixture
def local_logs(memory_store):
    return LocalTopicLogRepo(memory_store)


@pytest.fixture
def seed_local(memory_store):
    """Write topics and logs straight into the store with chosen ids/timestamps.

    Usage: ``seed_local(topics=[(id, name, create_time)], logs=[(id, topic_id,
    content, create_time)])``. Records are stored in the order given.
    """

    def _seed(topics=(), logs=()):
        stored_topics = memory_store.get(LOCAL_TOPICS_KEY, [])
        for topic_id, name, created in topics:
            stored_topics.append(
                Topic(
                    id=topic_id, name=name, create_time=created, update_time=created
                ).to_dict()
            )
        memory_store.set(LOCAL_TOPICS_KEY, stored_topics)

        stored_logs = memory_store.get(LOCAL_TOPIC_LOGS_KEY, [])
        for log_id, topic_id, content, created in logs:
            stored_logs.append(
                TopicLog(
                    id=log_id,
                    topic_id=topic_id,
                    content=content,
                    create_time=created,
                    update_time=created,
                ).to_dict()
            )
        memory_store.set(LOCAL_TOPIC_LOGS_KEY, stored_logs)

    return _seed


class FakeRemoteTopicRepo:
    """In-memory stand-in for RemoteTopicRepo; ids are assigned on create."""

    def __init__(self, first_id: int = 1):
        self.records: Dict[int, Topic] = {}
        self.calls: List[Dict[str, Any]] = []
        self.fail_names = set()
        self._next_id = first_id

    def get_all(self) -> List[Topic]:
        return list(self.records.values())

    def get_by_id(self, topic_id):
        return self.records.get(topic_id)

    def create(self, data):
        self.calls.append(dict(data))
        if data["name"] in self.fail_names:
            raise ApiError(f"create failed for {data['name']}", err_code=500)
        topic = Topic(
            id=self._next_id,
            name=data["name"],
            description=data.get("description"),
            pin_weight=data.get("pin_weight") or 0,
        )
        self._next_id += 1
        self.records[topic.id] = topic
        return topic

    def update(self, topic_id, data):
        raise NotImplementedError

    def delete(self, topic_id):
        self.records.pop(topic_id, None)


class FakeRemoteTopicLogRepo:
    """In-memory stand-in for RemoteTopicLogRepo."""

    def __init__(self, topics: FakeRemoteTopicRepo, first_id: int = 1):
        self.topics = topics
        self.records: Dict[int, TopicLog] = {}
        self.calls: List[Dict[str, Any]] = []
        self.fail_contents = set()
        self._next_id = first_id

    def create(self, data):
        self.calls.append(dict(data))
        if data["content"] in self.fail_contents:
            raise ApiError(f"create failed for {data['content']}", err_code=500)
        if data["topic_id"] not in self.topics.records:
            raise ApiError("parent topic does not exist", err_code=404)
        mark = data.get("mark")
        log = TopicLog(
            id=self._next_id,
            topic_id=data["topic_id"],
            topic_type=int(data.get("topic_type") or TopicType.TOPIC),
            content=data["content"],
            extra_data=data.get("extra_data"),
            mark=DEFAULT_LOG_MARK if mark is None else mark,
        )
        self._next_id += 1
        self.records[log.id] = log
        return log

    def get_by_topic_ids_and_types(self, topic_ids, topic_types):
        types = {int(t) for t in topic_types}
        return [
            log
            for log in self.records.values()
            if log.topic_id in topic_ids and log.topic_type in types
        ]

    def get_list_items_by_topic_ids_and_types(self, topic_ids, topic_types, offset=0, size=1000):
        logs = self.get_by_topic_ids_and_types(topic_ids, topic_types)
        return [TopicLogListItem.from_log(log) for log in logs[offset : offset + size]]

    def get_by_id(self, log_id):
        return self.records.get(log_id)

    def update(self, log_id, data):
        raise NotImplementedError

    def delete(self, log_id):
        self.records.pop(log_id, None)


@pytest.fixture
def remote_topics():
    # Server ids start far from the temporary local id space
    return FakeRemoteTopicRepo(first_id=501)


@pytest.fixture
def remote_logs(remote_topics):
    return FakeRemoteTopicLogRepo(remote_topics, first_id=9001)
