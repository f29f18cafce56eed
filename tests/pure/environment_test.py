import threading
import unittest

from lambdadsl.pure.environment import Environment, ReadWriteLock
from lambdadsl.pure.term import Abstraction, Variable


I = Abstraction("x", Variable("x"))


class EnvironmentTestCase(unittest.TestCase):

    def test_define(self):
        environment = Environment()
        self.assertEqual(0, len(environment))

        environment.define("id", I)
        self.assertIn("id", environment)
        self.assertEqual(I, environment.get("id"))
        self.assertIsNone(environment.get("k"))

    def test_last_write_wins(self):
        environment = Environment()
        environment.define("x", Variable("a"))
        environment.define("y", Variable("b"))
        environment.define("x", Variable("c"))

        self.assertEqual(Variable("c"), environment.get("x"))
        self.assertEqual(["x", "y"], environment.names())

    def test_snapshot(self):
        environment = Environment({"id": I})
        snapshot = environment.snapshot()

        environment.define("later", Variable("a"))
        snapshot["mutated"] = Variable("b")

        self.assertEqual({"id": I, "mutated": Variable("b")}, snapshot)
        self.assertNotIn("mutated", environment)

    def test_names_of(self):
        environment = Environment()
        environment.define("id", I)
        environment.define("k", Abstraction("a", Abstraction("b", Variable("a"))))
        environment.define("ident", Abstraction("q", Variable("q")))

        self.assertEqual(["id", "ident"], environment.names_of(Abstraction("z", Variable("z"))))
        self.assertEqual(["k"], environment.names_of(Abstraction("x", Abstraction("y", Variable("x")))))
        self.assertEqual([], environment.names_of(Variable("x")))

    def test_concurrent_defines(self):
        environment = Environment()

        def define_all(prefix):
            for idx in range(100):
                environment.define(f"{prefix}{idx}", Variable(prefix))

        threads = [threading.Thread(target=define_all, args=(prefix,)) for prefix in "abcd"]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(400, len(environment))


class ReadWriteLockTestCase(unittest.TestCase):

    def test_readers_share(self):
        lock = ReadWriteLock()
        barrier = threading.Barrier(2, timeout=5)
        errors = []

        def reader():
            with lock.read():
                try:
                    barrier.wait()  # only passes if both readers hold the lock at once
                except threading.BrokenBarrierError as error:
                    errors.append(error)

        threads = [threading.Thread(target=reader) for __ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual([], errors)

    def test_writer_excludes_readers(self):
        lock = ReadWriteLock()
        entered = threading.Event()

        def reader():
            with lock.read():
                entered.set()

        with lock.write():
            thread = threading.Thread(target=reader)
            thread.start()
            self.assertFalse(entered.wait(0.1))

        thread.join(5)
        self.assertTrue(entered.is_set())


if __name__ == '__main__':
    unittest.main()
