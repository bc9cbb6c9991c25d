import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest import mock

import fact_ingest_worker
from factvault.scheduling.process_lock import ProcessLock
from factvault.storage.memory_facts import MemoryFactStore

from fact_fakes import FakeResponse, FakeSession


class TestWorkerCli(unittest.TestCase):
    def setUp(self):
        env = mock.patch.dict(os.environ, {"FACT_STORE": "memory", "INGEST_MODE": "once", "LOG_LEVEL": "WARNING"})
        env.start()
        self.addCleanup(env.stop)
        dotenv = mock.patch("factvault.config.load_dotenv")
        dotenv.start()
        self.addCleanup(dotenv.stop)

    def test_list_sources(self):
        out = io.StringIO()
        with redirect_stdout(out):
            code = fact_ingest_worker.main(["--list-sources"])
        self.assertEqual(code, 0)
        lines = out.getvalue().strip().splitlines()
        self.assertEqual(len(lines), 6)
        self.assertTrue(lines[0].startswith("Reddit r/TodayILearned\tstructured-api\tmixed"))

    def test_unknown_source_is_rejected(self):
        self.assertEqual(fact_ingest_worker.main(["--source", "Nope"]), 2)

    def test_manual_single_source_pass(self):
        url = "https://api.aakhilv.me/fun/facts"
        session = FakeSession({url: FakeResponse(["A group of flamingos is called a flamboyance."])})
        out = io.StringIO()
        with mock.patch.object(fact_ingest_worker, "build_session", return_value=session), redirect_stdout(out):
            code = fact_ingest_worker.main(["--source", "Random Knowledge API"])
        self.assertEqual(code, 0)
        self.assertEqual(session.calls, [url])
        self.assertIn("new_facts=1", out.getvalue())

    def test_scheduled_mode_refuses_second_instance(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "fact_ingest.lock")
            holder = ProcessLock(path)
            self.assertTrue(holder.acquire())
            try:
                with mock.patch.object(fact_ingest_worker, "LOCK_FILE", path), \
                        mock.patch.object(fact_ingest_worker, "build_orchestrator") as build:
                    self.assertEqual(fact_ingest_worker.run_scheduled(mock.Mock()), 1)
                build.assert_not_called()
            finally:
                holder.release()

    def test_memory_store_backend(self):
        settings = mock.Mock(fact_store="memory")
        self.assertIsInstance(fact_ingest_worker.build_store(settings), MemoryFactStore)


if __name__ == "__main__":
    unittest.main()
