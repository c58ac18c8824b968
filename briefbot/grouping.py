"""Group digest entries by their upstream topic cluster."""
from __future__ import annotations

from typing import Sequence

from .models import ArticleEntry, TopicGroup


def group_by_topic(entries: Sequence[ArticleEntry], sort_by_confidence: bool = True) -> list[TopicGroup]:
    """Partition entries into topic groups.

    Groups are created in order of first appearance and keep their articles in
    input order. Entries without a cluster label land in ``"General"``. With
    ``sort_by_confidence`` the groups are ordered by descending average
    confidence; ties keep first-appearance order.
    """

    if not entries:
        return []

    buckets: dict[str, list[ArticleEntry]] = {}
    for entry in entries:
        buckets.setdefault(entry.cluster_name, []).append(entry)

    groups = [
        TopicGroup(
            topic_cluster=cluster,
            articles=articles,
            avg_confidence=sum(item.topic_confidence for item in articles) / len(articles),
        )
        for cluster, articles in buckets.items()
    ]
    if sort_by_confidence:
        groups.sort(key=lambda group: group.avg_confidence, reverse=True)
    return groups
