# app/services/change_publisher.py
"""
Change publication: one message per top-level field of a written document,
on topic "<root>/<kind>/<id>/<field>".

The broker client is an external collaborator: it is handed to the commit
step as a ChangePublisher. LoggingChangePublisher is the default sink.
Publication is best-effort: a failing sink is logged, never raised.
"""

import json
from abc import ABC, abstractmethod

from app.config import settings
from app.utils.logger import get_logger

logger = get_logger(__name__)


class ChangePublisher(ABC):
    def __init__(self, root: str = None):
        self.root = (root if root is not None else settings.PUBLISH_TOPIC).rstrip("/")

    def topic(self, path: str) -> str:
        return f"{self.root}/{path.lstrip('/')}" if self.root else path

    @abstractmethod
    def publish(self, topic: str, payload: str) -> None:
        """Deliver one encoded payload on a topic relative to the root."""


class LoggingChangePublisher(ChangePublisher):
    def publish(self, topic: str, payload: str) -> None:
        logger.info(f"[PUB] {self.topic(topic)} = {payload}")


def encode(value) -> str:
    return json.dumps(value, default=lambda v: v.isoformat() if hasattr(v, "isoformat") else str(v))


def publish_document(publisher: ChangePublisher, kind, doc: dict) -> int:
    """Publish every field except the identifier. Returns the number sent."""
    entity_id = doc.get(kind.id_field)
    sent = 0
    for key, value in doc.items():
        if key == kind.id_field:
            continue
        try:
            publisher.publish(f"{kind.topic}/{entity_id}/{key}", encode(value))
            sent += 1
        except Exception as e:
            logger.warning(f"publish {kind.topic}/{entity_id}/{key} failed: {e}")
    return sent
