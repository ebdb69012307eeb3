from __future__ import annotations

import json
import logging
from typing import Any, Mapping

from google.cloud import pubsub_v1

logger = logging.getLogger(__name__)


class PubSubClient:
    """Wrapper for Google Cloud Pub/Sub operations."""

    def __init__(
        self,
        project_id: str,
        *,
        requests_topic: str = "site-generation-requests",
        completed_topic: str = "site-generation-completed",
        publisher: pubsub_v1.PublisherClient | None = None,
    ) -> None:
        self.project_id = project_id
        self.requests_topic = requests_topic
        self.completed_topic = completed_topic
        self.publisher = publisher or pubsub_v1.PublisherClient()

    def publish(
        self,
        topic_id: str,
        message: Mapping[str, Any],
        *,
        attributes: dict[str, str] | None = None,
    ) -> str:
        """Publish a message to a Pub/Sub topic.

        Args:
            topic_id: The topic ID (e.g., "site-generation-requests")
            message: The message payload as a dictionary
            attributes: Optional message attributes

        Returns:
            Message ID from Pub/Sub
        """
        topic_path = self.publisher.topic_path(self.project_id, topic_id)

        data = json.dumps(message).encode("utf-8")

        future = self.publisher.publish(topic_path, data, **(attributes or {}))

        message_id = future.result()

        logger.info(
            "Published message to Pub/Sub",
            extra={
                "topic_id": topic_id,
                "message_id": message_id,
                "attributes": attributes,
            },
        )

        return message_id

    def publish_generation_request(
        self,
        *,
        job_id: str,
        kind: str,
        request: Mapping[str, Any],
    ) -> str:
        """Publish a generate or edit request for the worker.

        Args:
            job_id: Job ID for tracking
            kind: "GENERATE" or "EDIT"
            request: The request body, JSON-serializable

        Returns:
            Message ID from Pub/Sub
        """
        message = {"job_id": job_id, "kind": kind, "request": dict(request)}
        attributes = {"job_id": job_id, "kind": kind}
        return self.publish(self.requests_topic, message, attributes=attributes)

    def publish_generation_completed(
        self,
        *,
        job_id: str,
        site_id: str | None,
        image_status: str | None,
        should_regenerate: bool | None,
        file_count: int,
    ) -> str:
        """Publish a completion notification; files stay in the job store."""
        message = {
            "job_id": job_id,
            "site_id": site_id,
            "image_status": image_status,
            "should_regenerate": should_regenerate,
            "file_count": file_count,
        }
        attributes = {"job_id": job_id, "event_type": "site_generation_completed"}
        return self.publish(self.completed_topic, message, attributes=attributes)


__all__ = ["PubSubClient"]
