from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from hubmesh.models import IssueCategory, IssueReport, NotificationConfig

logger = logging.getLogger(__name__)


@dataclass
class NotificationResult:
    category: IssueCategory
    url: str
    ok: bool
    error: str | None = None


def webhook_url(config: NotificationConfig, category: IssueCategory) -> str | None:
    """Category webhook if enabled and set, else the global one, else None."""
    hook = config.categories.get(category)
    if hook is not None and hook.enabled and hook.url:
        return hook.url
    if config.global_url_enabled and config.global_url:
        return config.global_url
    return None


def notify_issues(
    report: IssueReport, config: NotificationConfig, client: httpx.Client
) -> list[NotificationResult]:
    """Call the webhook of every category with at least one unsuppressed hit.

    Failures are logged and returned; they never stop the remaining calls.
    """
    if not config.enabled:
        return []

    results: list[NotificationResult] = []
    for category in report.triggered_categories():
        url = webhook_url(config, category)
        if url is None:
            logger.debug("No webhook configured for %s", category.value)
            continue

        try:
            response = client.get(url, timeout=config.timeout)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Webhook for %s failed (%s): %s", category.value, url, exc)
            results.append(NotificationResult(category, url, ok=False, error=str(exc)))
            continue

        logger.info("Notified %s via %s", category.value, url)
        results.append(NotificationResult(category, url, ok=True))
    return results
