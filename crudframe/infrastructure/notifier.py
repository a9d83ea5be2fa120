"""Webhook Notifier — outbound adapter posting publication events, with retry and error mapping.

Invariants:
    - Transient failures (timeouts, connection errors, 429, 5xx): retried up to max_retries
      with exponential backoff and jitter
    - Other 4xx: immediate failure, no retry
    - All failures mapped to StructuredError — no httpx type escapes this module
    - Batches larger than MAX_BATCH_SIZE rejected before any network call

Design Decisions:
    - One AsyncClient per delivery: no long-lived connection state in the process
    - ±25% jitter on backoff: prevents thundering herd against the receiver
    - NullNotifier when no webhook is configured: services never branch on config
"""

import asyncio
import logging
import random
from typing import Sequence

import httpx

from crudframe.core.errors import bad_request, internal
from crudframe.infrastructure.observability import layer_logger

logger = layer_logger(__name__, "adapter", operation="webhook")

MAX_BATCH_SIZE = 100
NOTIFIER_UNAVAILABLE = "NOTIFIER_UNAVAILABLE"
NOTIFIER_REJECTED = "NOTIFIER_REJECTED"
BATCH_LIMIT_EXCEEDED = "NOTIFICATION_BATCH_LIMIT_EXCEEDED"


def _is_transient_status(status_code: int) -> bool:
    return status_code == 429 or status_code >= 500


class WebhookNotifier:
    """Posts {"events": [...]} to a webhook endpoint."""

    def __init__(
        self,
        webhook_url: str,
        timeout_seconds: float = 10.0,
        max_retries: int = 2,
        base_delay_ms: int = 200,
        max_delay_ms: int = 5_000,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.webhook_url = webhook_url
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms
        self._transport = transport

    async def notify(self, event: str, payload: dict) -> None:
        await self._deliver([{"event": event, "payload": payload}])

    async def notify_many(self, events: Sequence[tuple[str, dict]]) -> None:
        if len(events) > MAX_BATCH_SIZE:
            raise bad_request(
                f"At most {MAX_BATCH_SIZE} notifications per batch",
                code=BATCH_LIMIT_EXCEEDED,
            )
        if not events:
            return
        await self._deliver(
            [{"event": event, "payload": payload} for event, payload in events],
        )

    async def _deliver(self, events: list[dict]) -> None:
        async with httpx.AsyncClient(
            timeout=self.timeout_seconds, transport=self._transport,
        ) as client:
            for attempt in range(self.max_retries + 1):
                try:
                    response = await client.post(
                        self.webhook_url, json={"events": events},
                    )
                    response.raise_for_status()
                    logger.info(
                        f"Delivered {len(events)} notification(s)",
                        extra={"attempt": attempt},
                    )
                    return

                except httpx.HTTPStatusError as e:
                    status_code = e.response.status_code
                    if not _is_transient_status(status_code):
                        logger.error(
                            f"Webhook rejected notification: HTTP {status_code}",
                            extra={"error_code": NOTIFIER_REJECTED},
                        )
                        raise internal(
                            "Notification was rejected by the receiver",
                            code=NOTIFIER_REJECTED,
                        ) from e
                    await self._backoff_or_raise(e, attempt)

                except httpx.TransportError as e:
                    await self._backoff_or_raise(e, attempt)

                except Exception as e:
                    logger.error(
                        f"Unexpected notifier error: {e}", exc_info=True,
                    )
                    raise internal(
                        "Notification service unavailable",
                        code=NOTIFIER_UNAVAILABLE,
                    ) from e

    async def _backoff_or_raise(self, error: Exception, attempt: int) -> None:
        if attempt >= self.max_retries:
            logger.error(
                f"Notification failed after {attempt + 1} attempt(s): "
                f"{type(error).__name__}",
                extra={"attempt": attempt, "error_code": NOTIFIER_UNAVAILABLE},
            )
            raise internal(
                "Notification service unavailable", code=NOTIFIER_UNAVAILABLE,
            ) from error
        delay = self._calculate_delay(attempt)
        logger.warning(
            f"Transient notifier failure ({type(error).__name__}), "
            f"retrying in {delay:.2f}s",
            extra={"attempt": attempt},
        )
        await asyncio.sleep(delay)

    def _calculate_delay(self, attempt: int) -> float:
        """Exponential backoff with ±25% jitter, in seconds."""
        delay_ms = min(self.base_delay_ms * (2 ** attempt), self.max_delay_ms)
        jitter = delay_ms * 0.25 * (2 * random.random() - 1)
        return max(0.0, (delay_ms + jitter) / 1000)


class NullNotifier:
    """Used when no webhook is configured."""

    async def notify(self, event: str, payload: dict) -> None:
        logger.debug(f"Notifications disabled, dropping {event}")

    async def notify_many(self, events: Sequence[tuple[str, dict]]) -> None:
        if len(events) > MAX_BATCH_SIZE:
            raise bad_request(
                f"At most {MAX_BATCH_SIZE} notifications per batch",
                code=BATCH_LIMIT_EXCEEDED,
            )
