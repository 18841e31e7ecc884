# app/errors.py


class NotifierError(Exception):
    """Base class for goal-notifier errors."""


class TransientFetchError(NotifierError):
    """Network, status or parse failure talking to the NHL web API."""


class NotificationDeliveryError(NotifierError):
    """A push to a single ntfy topic failed."""

    def __init__(self, topic: str, reason: str):
        super().__init__(f"{topic}: {reason}")
        self.topic = topic
        self.reason = reason


class SubscriptionError(NotifierError):
    pass


class InvalidSubscriptionError(SubscriptionError):
    pass


class DuplicateSubscriptionError(SubscriptionError):
    pass


class SubscriptionNotFoundError(SubscriptionError):
    pass
