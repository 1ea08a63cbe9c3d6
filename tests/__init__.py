import logging
import sys
import threading
import unittest

from mockito import unstub

import orion.output  # unused but we need it to add the `bot` log level

logging.raiseExceptions = False  # get rid of 'No handlers could be found for logger output' message
log = logging.getLogger("output")
log.setLevel(logging.WARNING)

testcase_lock = threading.Lock()  # together with flush_console_streams, helps getting logging output related to the
# correct test in test runners such as the one in PyCharm IDE.


class logging_disabled:
    """
    context manager that temporarily disable logging.

    USAGE:
        with logging_disabled():
            # do stuff
    """

    DISABLED = False

    def __init__(self):
        self.nested = logging_disabled.DISABLED

    def __enter__(self):
        if not self.nested:
            logging.getLogger("output").propagate = False
            logging_disabled.DISABLED = True

    def __exit__(self, exc_type, exc_val, exc_tb):
        if not self.nested:
            logging.getLogger("output").propagate = True
            logging_disabled.DISABLED = False


def flush_console_streams():
    sys.stderr.flush()
    sys.stdout.flush()


class OrionTestCase(unittest.TestCase):

    def setUp(self):
        testcase_lock.acquire()
        flush_console_streams()

    def tearDown(self):
        flush_console_streams()
        unstub()
        testcase_lock.release()


class InstantThread(threading.Thread):
    """Makes threading.Thread behaves synchronously

    Usage:

        @patch("threading.Thread", new_callable=lambda: InstantThread)
        def test_my_code_using_threading_Thread(instant_thread):
            t = threading.Thread(target=some_func)
            t.start()
    """

    def start(self):
        self.run()
