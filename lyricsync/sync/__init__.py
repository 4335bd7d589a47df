from .line_formatter import format_line
from .lyric_index import resolve
from .session_state import SessionState, SessionPhase, UNSET, NO_LINE_YET, ANNOUNCED
