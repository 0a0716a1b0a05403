"""Registry of publishers, subscribers and which subscribers want which message."""

from __future__ import annotations

from dataclasses import dataclass, field

MAX_PUBLISHED_MSG = 10
MAX_SUBSCRIBED_MSG = 10
NAME_MAX_LEN = 64


@dataclass
class PublisherEntry:
    """A registered publisher and the message ids it publishes."""

    publisher_id: int
    name: str = ""
    published_msg_ids: list[int] = field(default_factory=list)


@dataclass
class SubscriberEntry:
    """A registered subscriber and the message ids it subscribes to."""

    subscriber_id: int
    name: str = ""
    subscribed_msg_ids: list[int] = field(default_factory=list)


@dataclass
class PubSubEntry:
    """The subscribers interested in one published message."""

    publish_msg_code: int
    subscribers: list[SubscriberEntry] = field(default_factory=list)


class DispatcherDB:
    """In-memory tables of publishers, subscribers and subscriptions."""

    def __init__(self) -> None:
        self.publishers: dict[int, PublisherEntry] = {}
        self.subscribers: dict[int, SubscriberEntry] = {}
        self.pubsub: dict[int, PubSubEntry] = {}

    # Publishers

    def create_publisher(self, pub_id: int, name: str) -> PublisherEntry:
        """Register a publisher; raises ValueError if the id is taken."""
        if pub_id in self.publishers:
            raise ValueError("Publisher already exists")
        entry = PublisherEntry(publisher_id=pub_id, name=name[:NAME_MAX_LEN])
        self.publishers[pub_id] = entry
        return entry

    def delete_publisher(self, pub_id: int) -> None:
        """Remove a publisher; raises KeyError if there is none with this id."""
        if pub_id not in self.publishers:
            raise KeyError("There is no such a publisher")
        del self.publishers[pub_id]

    def publish_msg(self, pub_id: int, msg_id: int) -> bool:
        """Record that a publisher publishes ``msg_id``.

        Returns False if the publisher is unknown or already publishes the
        maximum number of messages.
        """
        publisher = self.publishers.get(pub_id)
        if publisher is None:
            return False
        if msg_id in publisher.published_msg_ids:
            return True
        if len(publisher.published_msg_ids) >= MAX_PUBLISHED_MSG:
            return False
        publisher.published_msg_ids.append(msg_id)
        return True

    def unpublish_msg(self, pub_id: int, msg_id: int) -> bool:
        """Withdraw ``msg_id`` from a publisher; False if the publisher is unknown."""
        publisher = self.publishers.get(pub_id)
        if publisher is None:
            return False
        if msg_id in publisher.published_msg_ids:
            publisher.published_msg_ids.remove(msg_id)
        return True

    # Subscribers

    def create_subscriber(self, sub_id: int, name: str) -> SubscriberEntry:
        """Register a subscriber; raises ValueError if the id is taken."""
        if sub_id in self.subscribers:
            raise ValueError("Subscriber already exists")
        entry = SubscriberEntry(subscriber_id=sub_id, name=name[:NAME_MAX_LEN])
        self.subscribers[sub_id] = entry
        return entry

    def delete_subscriber(self, sub_id: int) -> None:
        """Remove a subscriber and all its subscriptions; unknown ids are ignored."""
        if self.subscribers.pop(sub_id, None) is None:
            return
        for msg_id in list(self.pubsub):
            self.pubsub_delete(msg_id, sub_id)

    def subscribe_msg(self, sub_id: int, msg_id: int) -> bool:
        """Subscribe a subscriber to ``msg_id``.

        Returns False if the subscriber is unknown or already holds the
        maximum number of subscriptions.
        """
        subscriber = self.subscribers.get(sub_id)
        if subscriber is None:
            return False
        if msg_id not in subscriber.subscribed_msg_ids:
            if len(subscriber.subscribed_msg_ids) >= MAX_SUBSCRIBED_MSG:
                return False
            subscriber.subscribed_msg_ids.append(msg_id)
        self.pubsub_create(msg_id, subscriber)
        return True

    def unsubscribe_msg(self, sub_id: int, msg_id: int) -> bool:
        """Cancel a subscription; False if the subscriber is unknown."""
        subscriber = self.subscribers.get(sub_id)
        if subscriber is None:
            return False
        if msg_id in subscriber.subscribed_msg_ids:
            subscriber.subscribed_msg_ids.remove(msg_id)
        self.pubsub_delete(msg_id, sub_id)
        return True

    # Message to subscribers table

    def pubsub_create(self, msg_id: int, subscriber: SubscriberEntry) -> PubSubEntry:
        """Add ``subscriber`` to the list for ``msg_id``, creating it if needed."""
        entry = self.pubsub.setdefault(msg_id, PubSubEntry(publish_msg_code=msg_id))
        if all(s.subscriber_id != subscriber.subscriber_id for s in entry.subscribers):
            entry.subscribers.append(subscriber)
        return entry

    def pubsub_delete(self, msg_id: int, sub_id: int) -> None:
        """Drop a subscriber from the list for ``msg_id``; empty lists are removed."""
        entry = self.pubsub.get(msg_id)
        if entry is None:
            return
        entry.subscribers = [s for s in entry.subscribers if s.subscriber_id != sub_id]
        if not entry.subscribers:
            del self.pubsub[msg_id]

    def pubsub_get(self, msg_id: int) -> PubSubEntry | None:
        """Return the subscriber list for ``msg_id``, or None."""
        return self.pubsub.get(msg_id)

    def display(self) -> str:
        """Return a text listing of all three tables."""
        lines = ["Publisher DB"]
        lines.extend(
            f"Publisher ID : {p.publisher_id}, Publisher Name : {p.name}"
            for p in self.publishers.values()
        )
        lines.append("Subscriber DB")
        lines.extend(
            f"Subscriber ID : {s.subscriber_id}, Subscriber Name : {s.name}"
            for s in self.subscribers.values()
        )
        lines.append("Pub-Sub DB")
        for entry in self.pubsub.values():
            lines.append(f"Message ID : {entry.publish_msg_code}")
            lines.extend(f"Subscriber ID : {s.subscriber_id}" for s in entry.subscribers)
        return "\n".join(lines) + "\n"