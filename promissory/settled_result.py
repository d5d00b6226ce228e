from promissory.status import Status


class SettledResult:
    def __init__(self, status, value=None, reason=None):
        if status == Status.Pending:
            raise ValueError('a settled result cannot be pending')
        self.status = status
        self.value = value
        self.reason = reason

    @classmethod
    def fulfilled(cls, value):
        return cls(Status.Fulfilled, value=value)

    @classmethod
    def rejected(cls, reason):
        return cls(Status.Rejected, reason=reason)

    def as_dict(self):
        if self.status == Status.Fulfilled:
            return {'status': self.status.value, 'value': self.value}
        return {'status': self.status.value, 'reason': self.reason}

    def __repr__(self):
        if self.status == Status.Fulfilled:
            return 'SettledResult(fulfilled, value={0!r})'.format(self.value)
        return 'SettledResult(rejected, reason={0!r})'.format(self.reason)
