"""topicsync core: the TopicSync application interface.

    from topicsync.core import TopicSync
"""

from topicsync.core.topicsync_class import MODE_LOCAL, MODE_REMOTE, TopicSync

__all__ = ["MODE_LOCAL", "MODE_REMOTE", "TopicSync"]
