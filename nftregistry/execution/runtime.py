from nftregistry import config

RECURSION_LIMIT = 1024


class Context:
    def __init__(self, base_state, maxlen=RECURSION_LIMIT):
        self._state = []
        self._base_state = base_state
        self._maxlen = maxlen

    def _context_changed(self, namespace):
        if self._get_state()['this'] == namespace:
            return False
        return True

    def _get_state(self):
        if len(self._state) == 0:
            return self._base_state
        return self._state[-1]

    def _add_state(self, state: dict):
        if self._context_changed(state['this']) and len(self._state) < self._maxlen:
            self._state.append(state)

    def _pop_state(self):
        if len(self._state) > 0:
            self._state.pop(-1)

    def _reset(self):
        self._state = []

    @property
    def this(self):
        return self._get_state()['this']

    @property
    def caller(self):
        return self._get_state()['caller']

    @property
    def signer(self):
        return self._get_state()['signer']


_context = Context({
        'this': None,
        'caller': config.DEFAULT_SIGNER,
        'signer': config.DEFAULT_SIGNER
    })


class Runtime:
    context = _context

    @classmethod
    def set_up(cls, signer, namespace):
        cls.context._reset()
        cls.context._base_state = {
            'signer': signer,
            'caller': signer,
            'this': namespace
        }

    @classmethod
    def in_call(cls):
        return cls.context._base_state['this'] is not None

    @classmethod
    def clean_up(cls):
        cls.context._reset()
        cls.context._base_state = {
            'this': None,
            'caller': config.DEFAULT_SIGNER,
            'signer': config.DEFAULT_SIGNER
        }


rt = Runtime()
