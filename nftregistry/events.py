from nftregistry.db.driver import LedgerDriver
from nftregistry.db.orm import Hash, Variable
from nftregistry import config

TRANSFER = 'Transfer'
APPROVAL = 'Approval'
APPROVAL_FOR_ALL = 'ApprovalForAll'


class Event:
    def __init__(self, name, data, index=None):
        self.name = name
        self.data = data
        self.index = index

    def to_dict(self):
        return {'event': self.name, 'data': dict(self.data)}

    @classmethod
    def from_dict(cls, d, index=None):
        return cls(d['event'], d['data'], index=index)

    def __getitem__(self, item):
        return self.data[item]

    def __eq__(self, other):
        if not isinstance(other, Event):
            return NotImplemented
        return self.name == other.name and self.data == other.data

    def __repr__(self):
        return '<Event {} {}>'.format(self.name, self.data)


class EventLog:
    """
    Append-only log kept in the ledger next to the state it describes, so an
    event is only visible once the call that emitted it has been committed.
    """
    def __init__(self, namespace, driver: LedgerDriver):
        self._events = Hash(namespace, config.EVENTS_KEY, driver=driver)
        self._count = Variable(namespace, config.EVENT_COUNT_KEY, driver=driver, default_value=0)

    def emit(self, name, **data):
        index = self._count.get()
        self._events[index] = Event(name, data).to_dict()
        self._count.set(index + 1)
        return index

    def since(self, index=0):
        return [Event.from_dict(self._events[i], index=i) for i in range(index, len(self))]

    def all(self):
        return self.since(0)

    def filter(self, name):
        return [e for e in self.all() if e.name == name]

    def last(self):
        if len(self) == 0:
            return None
        index = len(self) - 1
        return Event.from_dict(self._events[index], index=index)

    def __len__(self):
        return self._count.get()
