import tempfile
import threading
import unittest
from unittest.mock import patch, MagicMock
from datetime import date, timedelta
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from calendar_bot.config import Settings
from calendar_bot.models import SourceEvent
from calendar_bot.services.builders import BASELINE_TAGS, KIND_PICTURE, KIND_TEXT_NOTE
from calendar_bot.services.discovery import FetchError
from calendar_bot.services.metrics import RunMetrics
from calendar_bot.workflows.event_pipeline import PacingPolicy, run


class TestEventPipeline(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.settings = Settings(
            api_endpoint="https://api.example/api",
            api_key="secret",
            private_key="unused",
            language="en",
            relays=["wss://one.example", "wss://two.example"],
            metrics_dir=self.tmp.name,
        )
        self.today = date(2025, 1, 3)
        self.genesis = SourceEvent(
            id=1,
            date=date(2009, 1, 3),
            title="Genesis Block",
            description="Bitcoin launched",
            tags='["btc","history"]',
            media="https://example.com/genesis.jpg",
            references=None,
        )
        self.second = SourceEvent(
            id=2,
            date=date(2014, 1, 3),
            title="Second Event",
            description="Something else",
        )
        self.other_day = SourceEvent(id=3, date=date(2010, 5, 22), title="Pizza Day")
        self.identity = MagicMock()
        self.pacing = MagicMock(spec=PacingPolicy)
        self.pacing.should_wait.side_effect = lambda text_ok, picture_ok: text_ok
        self.pacing.wait.return_value = True

    def tearDown(self):
        self.tmp.cleanup()

    def _run(self, **kwargs):
        return run(
            self.settings,
            identity=self.identity,
            today=self.today,
            pacing=self.pacing,
            **kwargs,
        )

    @patch('calendar_bot.workflows.event_pipeline.publish_event')
    @patch('calendar_bot.workflows.event_pipeline.fetch_events')
    def test_genesis_block_end_to_end(self, mock_fetch_events, mock_publish_event):
        mock_fetch_events.return_value = [self.genesis, self.second]
        mock_publish_event.return_value = (2, None)

        metrics = self._run()

        mock_fetch_events.assert_called_once_with("https://api.example/api", "secret", "01", "03", "en")
        # text + picture for the first event, text only for the second
        self.assertEqual(mock_publish_event.call_count, 3)

        note = mock_publish_event.call_args_list[0][0][0]
        self.assertEqual(note.kind, KIND_TEXT_NOTE)
        self.assertEqual(note.content, "Genesis Block\n\nBitcoin launched\n\nhttps://example.com/genesis.jpg")
        topics = [t[1] for t in note.tags if t[0] == "t"]
        self.assertEqual(topics, list(BASELINE_TAGS))
        self.assertIn(["d", "2009-01-03"], note.tags)

        picture = mock_publish_event.call_args_list[1][0][0]
        self.assertEqual(picture.kind, KIND_PICTURE)
        self.assertIn(["imeta", "url https://example.com/genesis.jpg"], picture.tags)
        self.assertIn(["m", "image/jpeg"], picture.tags)
        self.assertEqual([t[1] for t in picture.tags if t[0] == "t"], list(BASELINE_TAGS))

        self.assertEqual(mock_publish_event.call_args_list[0][1]["label"], "kind1")
        self.assertEqual(mock_publish_event.call_args_list[1][1]["label"], "kind20")

        # paused once, between the two events, not after the last one
        self.pacing.wait.assert_called_once()
        self.assertEqual(metrics["kind1_posted"], 2)
        self.assertEqual(metrics["kind20_posted"], 1)
        self.assertEqual(metrics["kind20_skipped"], 1)
        self.assertEqual(metrics["image_validation_fails"], 0)

    @patch('calendar_bot.workflows.event_pipeline.publish_event')
    @patch('calendar_bot.workflows.event_pipeline.fetch_events')
    def test_no_pause_after_failed_text_note(self, mock_fetch_events, mock_publish_event):
        mock_fetch_events.return_value = [self.genesis, self.second]
        # kind1 fails everywhere, kind20 succeeds, second kind1 fails
        mock_publish_event.side_effect = [(0, None), (1, None), (0, None)]

        metrics = self._run()

        self.pacing.wait.assert_not_called()
        self.assertEqual(metrics["kind1_failed"], 2)
        self.assertEqual(metrics["kind20_posted"], 1)

    @patch('calendar_bot.workflows.event_pipeline.publish_event')
    @patch('calendar_bot.workflows.event_pipeline.fetch_events')
    def test_signing_error_counts_as_failed_and_picture_still_attempted(self, mock_fetch_events, mock_publish_event):
        mock_fetch_events.return_value = [self.genesis]
        mock_publish_event.side_effect = [(0, ValueError("bad key")), (0, ValueError("bad key"))]

        metrics = self._run()

        self.assertEqual(mock_publish_event.call_count, 2)
        self.assertEqual(metrics["kind1_failed"], 1)
        self.assertEqual(metrics["kind20_failed"], 1)

    @patch('calendar_bot.workflows.event_pipeline.publish_event')
    @patch('calendar_bot.workflows.event_pipeline.fetch_events')
    def test_other_dates_are_skipped(self, mock_fetch_events, mock_publish_event):
        mock_fetch_events.return_value = [self.other_day]

        metrics = self._run()

        mock_publish_event.assert_not_called()
        self.assertEqual(metrics["events_skipped"], 1)

    @patch('calendar_bot.workflows.event_pipeline.publish_event')
    @patch('calendar_bot.workflows.event_pipeline.fetch_events')
    def test_unsupported_media_counts_image_validation_failure(self, mock_fetch_events, mock_publish_event):
        event = SourceEvent(id=4, date=date(2009, 1, 3), title="Whitepaper", media="https://example.com/paper.pdf")
        mock_fetch_events.return_value = [event]
        mock_publish_event.return_value = (1, None)

        metrics = self._run()

        self.assertEqual(mock_publish_event.call_count, 1)
        self.assertEqual(metrics["kind20_skipped"], 1)
        self.assertEqual(metrics["image_validation_fails"], 1)

    @patch('calendar_bot.workflows.event_pipeline.publish_event')
    @patch('calendar_bot.workflows.event_pipeline.fetch_events')
    def test_metrics_exported_at_end_of_run(self, mock_fetch_events, mock_publish_event):
        mock_fetch_events.return_value = []

        self._run()

        files = os.listdir(self.tmp.name)
        self.assertEqual(len(files), 1)
        self.assertTrue(files[0].startswith("metrics_run_"))

    @patch('calendar_bot.workflows.event_pipeline.publish_event')
    @patch('calendar_bot.workflows.event_pipeline.fetch_events')
    def test_fetch_failure_aborts_and_exports(self, mock_fetch_events, mock_publish_event):
        mock_fetch_events.side_effect = FetchError("down")

        with self.assertRaises(FetchError):
            self._run()

        mock_publish_event.assert_not_called()
        files = os.listdir(self.tmp.name)
        self.assertTrue(files and files[0].startswith("metrics_error_"))

    @patch('calendar_bot.workflows.event_pipeline.publish_event')
    @patch('calendar_bot.workflows.event_pipeline.fetch_events')
    def test_stop_during_pause_ends_run(self, mock_fetch_events, mock_publish_event):
        mock_fetch_events.return_value = [self.genesis, self.second]
        mock_publish_event.return_value = (1, None)
        self.pacing.wait.return_value = False

        metrics = self._run()

        self.assertEqual(mock_publish_event.call_count, 2)
        self.assertEqual(metrics["kind1_posted"], 1)

    @patch('calendar_bot.workflows.event_pipeline.publish_event')
    @patch('calendar_bot.workflows.event_pipeline.fetch_events')
    def test_stop_requested_before_start(self, mock_fetch_events, mock_publish_event):
        mock_fetch_events.return_value = [self.genesis]
        stop_event = threading.Event()
        stop_event.set()

        self._run(stop_event=stop_event, metrics=RunMetrics())

        mock_publish_event.assert_not_called()


class TestPacingPolicy(unittest.TestCase):

    def test_text_trigger(self):
        policy = PacingPolicy()
        self.assertEqual(policy.delay, timedelta(minutes=30))
        self.assertTrue(policy.should_wait(True, False))
        self.assertFalse(policy.should_wait(False, True))

    def test_any_trigger(self):
        policy = PacingPolicy(trigger="any")
        self.assertTrue(policy.should_wait(False, True))
        self.assertFalse(policy.should_wait(False, False))

    def test_unknown_trigger(self):
        with self.assertRaises(ValueError):
            PacingPolicy(trigger="never")

    def test_wait_is_cancellable(self):
        stop_event = threading.Event()
        stop_event.set()
        self.assertFalse(PacingPolicy(delay=timedelta(hours=1)).wait(stop_event))

    def test_wait_full_delay(self):
        self.assertTrue(PacingPolicy(delay=timedelta(seconds=0.01)).wait(threading.Event()))


if __name__ == '__main__':
    unittest.main()
