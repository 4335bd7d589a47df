from .message_classifier import classify_frame, classify_payload, classify_text
from .session_driver import LyricSession
