from enum import Enum


class Status(Enum):
    Pending = 'pending'
    Fulfilled = 'fulfilled'
    Rejected = 'rejected'
