""" Endpoint clock for note history timestamps. Values are whole seconds
    since the UNIX epoch, and the same value is never handed out twice
    within the lifetime of this process.
"""

import threading
import time


_last = 0
_lock = threading.Lock()


def now():
    """ Return the current time in whole seconds, or one second past the
        previously returned value, whichever is larger.
    """

    global _last

    current = int(time.time())

    with _lock:
        if current <= _last:
            current = _last + 1
        _last = current

    return current


def last():
    """ Return the most recently issued timestamp, or zero if :func:`now`
        has not yet been called.
    """

    return _last


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
