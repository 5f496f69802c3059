"""Exception types raised by the debate core."""


class ArgumentorError(Exception):
    """Base class for all debate core errors."""


class StoreUnavailableError(ArgumentorError):
    """A store read or write failed; transient, the caller may retry."""

    def __init__(self, operation: str, detail: str = ""):
        self.operation = operation
        self.detail = detail
        message = f"Store unavailable during {operation}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class UnrecognizedValueError(ArgumentorError):
    """A stored enum string does not map to any known member."""

    def __init__(self, type_name: str, value: str):
        self.type_name = type_name
        self.value = value
        super().__init__(f"Unrecognized {type_name} value: {value!r}")


class DebateNotFoundError(ArgumentorError, LookupError):
    """No debate exists with the requested id."""

    def __init__(self, debate_id: str):
        self.debate_id = debate_id
        super().__init__(f"Debate {debate_id} not found")


class UnknownTopicError(ArgumentorError, LookupError):
    """A stance referenced a topic that is not in the topic catalogue."""

    def __init__(self, topic_name: str):
        self.topic_name = topic_name
        super().__init__(f"Unknown topic: {topic_name}")


class SlotAlreadyFilledError(ArgumentorError):
    """An argument already exists for this (debate, stage, position)."""

    def __init__(self, debate_id: str, stage: str, position: str):
        self.debate_id = debate_id
        self.stage = stage
        self.position = position
        super().__init__(
            f"Debate {debate_id} already has a {position} argument for {stage}"
        )


class NotificationFailedError(ArgumentorError):
    """Delivering a notification failed. Callers log and continue."""
