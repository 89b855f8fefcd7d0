import threading
import time

import notelink


def test_never_repeats():

    values = [notelink.clock.now() for count in range(1000)]
    assert len(set(values)) == len(values)
    assert values == sorted(values)
    assert notelink.clock.last() == values[-1]


def test_close_to_wall_clock():

    value = notelink.clock.now()
    assert value >= int(time.time())


def test_threads():

    values = list()
    lock = threading.Lock()

    def collect():
        mine = [notelink.clock.now() for count in range(200)]
        with lock:
            values.extend(mine)

    threads = [threading.Thread(target=collect) for count in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(set(values)) == len(values)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
