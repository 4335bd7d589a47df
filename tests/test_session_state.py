import os
import sys
import unittest

# Ensure valid import paths
cwd = os.getcwd()
if cwd not in sys.path:
    sys.path.append(cwd)

from lyricsync.sync.session_state import SessionState, SessionPhase, UNSET, NO_LINE_YET, ANNOUNCED
from lyricsync.types.config_type import SessionConfig, DEFAULT_NO_LYRICS_MESSAGE, DEFAULT_UNSYNCED_MESSAGE, DEFAULT_NO_LINE_MARKER
from lyricsync.types.error_type import UnknownSongVariantError
from lyricsync.types.lyric_type import LyricLine, SyncedSong, UnsyncedLyricLine, UnsyncedSong, Word


def line(timestamp, *words):
    return LyricLine(timestamp=timestamp, words=tuple(Word(w) for w in words))


THREE_LINES = SyncedSong(lines=(
    line(0, "first", "line"),
    line(5, "second", "line"),
    line(10, "third", "line"),
))


class TestSessionState(unittest.TestCase):
    def setUp(self):
        self.state = SessionState()

    def test_initial_state_behaves_as_no_lyrics(self):
        self.assertEqual(self.state.phase, SessionPhase.NO_SONG_LOADED)
        self.assertEqual(self.state.advance(0), DEFAULT_NO_LYRICS_MESSAGE)
        self.assertIsNone(self.state.advance(10))

    def test_synced_scenario(self):
        self.state.load(THREE_LINES)
        self.assertEqual(self.state.phase, SessionPhase.SYNCED_WITH_LINES)
        self.assertEqual(self.state.advance(3), "first line")
        self.assertEqual(self.state.advance(7), "second line")
        self.assertIsNone(self.state.advance(7))
        self.assertEqual(self.state.advance(20), "third line")
        self.assertEqual(self.state.last_emitted_index, 2)

    def test_same_time_twice_emits_once(self):
        self.state.load(THREE_LINES)
        for t in [0, 4, 5, 9, 10, 100]:
            self.state.advance(t)
            self.assertIsNone(self.state.advance(t))

    def test_seeking_backwards(self):
        self.state.load(THREE_LINES)
        self.assertEqual(self.state.advance(12), "third line")
        self.assertEqual(self.state.advance(1), "first line")

    def test_no_lyrics_announced_once(self):
        self.state.load(SyncedSong(lines=None))
        self.assertEqual(self.state.phase, SessionPhase.SYNCED_NO_LINES)
        self.assertEqual(self.state.advance(0), DEFAULT_NO_LYRICS_MESSAGE)
        self.assertIsNone(self.state.advance(1))
        self.assertIs(self.state.last_emitted_index, ANNOUNCED)

    def test_unsynced_announced_once(self):
        song = UnsyncedSong(lines=(UnsyncedLyricLine(words=(Word("la"), Word("la"))),))
        self.state.load(song)
        self.assertEqual(self.state.phase, SessionPhase.UNSYNCED)
        self.assertEqual(self.state.advance(42), DEFAULT_UNSYNCED_MESSAGE)
        self.assertIsNone(self.state.advance(43))
        self.assertIsNone(self.state.advance(0))

    def test_before_first_line_emits_marker(self):
        self.state.load(SyncedSong(lines=(line(5, "late", "start"),)))
        self.assertEqual(self.state.advance(0), DEFAULT_NO_LINE_MARKER)
        self.assertIs(self.state.last_emitted_index, NO_LINE_YET)
        self.assertIsNone(self.state.advance(2))
        self.assertEqual(self.state.advance(5), "late start")
        self.assertEqual(self.state.advance(1), DEFAULT_NO_LINE_MARKER)

    def test_empty_line_list_emits_marker_once(self):
        self.state.load(SyncedSong(lines=()))
        self.assertEqual(self.state.phase, SessionPhase.SYNCED_WITH_LINES)
        self.assertEqual(self.state.advance(0), DEFAULT_NO_LINE_MARKER)
        self.assertIsNone(self.state.advance(50))

    def test_load_resets_emission_state(self):
        self.state.load(THREE_LINES)
        self.assertEqual(self.state.advance(7), "second line")
        self.state.load(THREE_LINES)
        self.assertIs(self.state.last_emitted_index, UNSET)
        self.assertEqual(self.state.advance(7), "second line")

        self.state.load(SyncedSong(lines=None))
        self.assertEqual(self.state.advance(7), DEFAULT_NO_LYRICS_MESSAGE)
        self.state.load(SyncedSong(lines=None))
        self.assertEqual(self.state.advance(7), DEFAULT_NO_LYRICS_MESSAGE)

    def test_load_returns_separator_only_when_enabled(self):
        self.assertIsNone(self.state.load(THREE_LINES))
        state = SessionState(SessionConfig(blank_line_on_load=True))
        self.assertEqual(state.load(THREE_LINES), "")

    def test_display_width_applies_to_lines_and_marker(self):
        state = SessionState(SessionConfig(display_width=8))
        state.load(SyncedSong(lines=(line(5, "hello", "wonderful", "world"),)))
        self.assertEqual(state.advance(0), f"   {DEFAULT_NO_LINE_MARKER}    ")
        self.assertEqual(state.advance(5), "hello wo")

    def test_messages_are_not_formatted(self):
        state = SessionState(SessionConfig(display_width=4, no_lyrics_message="nothing here"))
        self.assertEqual(state.advance(0), "nothing here")

    def test_suppress_no_line(self):
        state = SessionState(SessionConfig(suppress_no_line=True))
        state.load(SyncedSong(lines=(line(5, "hi"),)))
        self.assertIsNone(state.advance(0))
        self.assertEqual(state.advance(5), "hi")
        self.assertIsNone(state.advance(3))
        self.assertEqual(state.advance(6), "hi")

    def test_custom_messages(self):
        state = SessionState(SessionConfig(no_lyrics_message="none", unsynced_message="untimed", no_line_marker="..."))
        self.assertEqual(state.advance(0), "none")
        state.load(UnsyncedSong())
        self.assertEqual(state.advance(0), "untimed")
        state.load(SyncedSong(lines=(line(1, "x"),)))
        self.assertEqual(state.advance(0), "...")

    def test_words_are_joined_and_trimmed(self):
        self.state.load(SyncedSong(lines=(line(0, " hey", "there "),)))
        self.assertEqual(self.state.advance(0), "hey there")

    def test_unknown_song_variant(self):
        with self.assertRaises(UnknownSongVariantError):
            self.state.load({"lyrics": None})
        self.assertEqual(self.state.phase, SessionPhase.NO_SONG_LOADED)

    def test_sessions_are_independent(self):
        other = SessionState()
        self.state.load(THREE_LINES)
        self.assertEqual(self.state.advance(0), "first line")
        self.assertEqual(other.advance(0), DEFAULT_NO_LYRICS_MESSAGE)
        self.assertIsNone(self.state.advance(0))


if __name__ == "__main__":
    unittest.main()
