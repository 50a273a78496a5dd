from dataclasses import dataclass


@dataclass(frozen=True)
class Notice:
    # A transient, user-facing message ("toast")
    level: str
    message: str


class NoticeSubject:
    def __init__(self):
        # Everyone who wants to hear about successes and failures
        self.observers = []

    def attach(self, obs):
        self.observers.append(obs)

    def detach(self, obs):
        if obs in self.observers:
            self.observers.remove(obs)

    def publish(self, level, message):
        # Notify every observer about the update
        notice = Notice(level, message)
        for o in self.observers:
            o.update(notice)
        return notice

    def info(self, message):
        return self.publish('info', message)

    def error(self, message):
        return self.publish('error', message)


class NoticeLog:
    """Observer that keeps the notices it receives, newest last."""

    def __init__(self, limit=50):
        self.limit = limit
        self.notices = []

    def update(self, notice):
        self.notices.append(notice)
        # Notices are transient; only keep the most recent ones
        overflow = len(self.notices) - max(self.limit, 0)
        if overflow > 0:
            del self.notices[:overflow]

    @property
    def last(self):
        return self.notices[-1] if self.notices else None
