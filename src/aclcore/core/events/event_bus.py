"""Event bus - delivery of ACL audit events to subscribers.

The AclService publishes an AclEvent after every committed mutation.
Delivery is fire-and-forget: a subscriber that raises is logged and
skipped, and the committed operation is never affected.
"""

import inspect
import uuid
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Union

from aclcore.core.logging import get_logger
from aclcore.domain.entities.acl_event import AclEvent

logger = get_logger(__name__)

EventHandler = Callable[[AclEvent], Union[Awaitable[None], None]]

ALL_EVENTS = "*"


@dataclass
class Subscription:
    """Internal representation of a registered subscriber.

    Attributes:
        id: Unique identifier for this subscription.
        event_type: Event type subscribed to, or "*" for every event.
        handler: Sync or async callable receiving the AclEvent.
        priority: Delivery priority (higher = earlier).
        is_builtin: Whether this is a built-in subscriber.
        registration_order: Order in which this subscriber was registered.
    """

    id: str
    event_type: str
    handler: EventHandler
    priority: int = 0
    is_builtin: bool = False
    registration_order: int = 0


class EventBus:
    """Registry and dispatcher for ACL audit events.

    Example:
        bus = EventBus()

        async def forward(event: AclEvent) -> None:
            await audit_client.send(event)

        sub_id = bus.subscribe(AclEventType.ROLE_GRANT, forward)
        await bus.publish(event)
        bus.unsubscribe(sub_id)
    """

    def __init__(self) -> None:
        self._subscriptions: dict[str, Subscription] = {}
        self._registration_counter: int = 0

    def subscribe(
        self,
        event_type: str,
        handler: EventHandler,
        priority: int = 0,
        is_builtin: bool = False,
    ) -> str:
        """Register a handler for an event type.

        Args:
            event_type: AclEventType name, or "*" for every event.
            handler: Callable receiving the AclEvent. May be sync or async.
            priority: Higher priority handlers are called first.
            is_builtin: If True, the subscription cannot be removed.

        Returns:
            Unique subscription ID for later removal.
        """
        subscription_id = f"sub_{uuid.uuid4().hex[:12]}"
        self._registration_counter += 1
        self._subscriptions[subscription_id] = Subscription(
            id=subscription_id,
            event_type=event_type,
            handler=handler,
            priority=priority,
            is_builtin=is_builtin,
            registration_order=self._registration_counter,
        )

        logger.debug(
            "Event subscriber registered",
            subscription_id=subscription_id,
            event_type=event_type,
            priority=priority,
            is_builtin=is_builtin,
        )
        return subscription_id

    def unsubscribe(self, subscription_id: str) -> bool:
        """Remove a subscription.

        Returns:
            True if removed, False if not found or built-in.
        """
        subscription = self._subscriptions.get(subscription_id)
        if subscription is None:
            logger.warning("Subscription not found", subscription_id=subscription_id)
            return False
        if subscription.is_builtin:
            logger.warning(
                "Cannot unsubscribe built-in subscriber",
                subscription_id=subscription_id,
            )
            return False

        del self._subscriptions[subscription_id]
        return True

    def get_subscriptions(self, event_type: str) -> list[Subscription]:
        """Get subscriptions that receive the given event type, in delivery order."""
        matching = [
            s
            for s in self._subscriptions.values()
            if s.event_type in (event_type, ALL_EVENTS)
        ]
        return sorted(matching, key=lambda s: (-s.priority, s.registration_order))

    def get_subscription(self, subscription_id: str) -> Optional[Subscription]:
        return self._subscriptions.get(subscription_id)

    async def publish(self, event: AclEvent) -> list[str]:
        """Deliver an event to every matching subscriber.

        Args:
            event: The event to deliver.

        Returns:
            Error messages from subscribers that failed (empty on full success).
        """
        errors: list[str] = []
        for subscription in self.get_subscriptions(event.event_type):
            try:
                result = subscription.handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(
                    "Event subscriber failed",
                    subscription_id=subscription.id,
                    event_type=event.event_type,
                    error=str(e),
                )
                errors.append(f"Subscriber {subscription.id} failed: {e}")
        return errors

    def clear(self, include_builtin: bool = False) -> int:
        """Remove subscriptions.

        Args:
            include_builtin: If True, also remove built-in subscribers.

        Returns:
            Number of subscriptions removed.
        """
        to_remove = [
            sid
            for sid, s in self._subscriptions.items()
            if include_builtin or not s.is_builtin
        ]
        for sid in to_remove:
            del self._subscriptions[sid]
        return len(to_remove)


async def log_acl_event(event: AclEvent) -> None:
    """Built-in subscriber writing every ACL event to the structured log."""
    logger.info(
        event.description,
        event_type=event.event_type,
        actor_id=event.actor_id,
        target_type=event.target_type,
        target_id=event.target_id,
        request_id=event.request_id,
        **event.details,
    )


def register_builtin_subscribers(bus: EventBus) -> None:
    """Register built-in subscribers on an event bus."""
    bus.subscribe(ALL_EVENTS, log_acl_event, priority=-100, is_builtin=True)
