"""
Fixed speech and card text.

Single-locale table. Anything fancier (localization, SSML) belongs to the
voice platform, not the playback core.
"""

from __future__ import annotations

ASK_FOR_TRACK: str = "Try asking for a track by number or by name."

WELCOME: str = "Welcome. " + ASK_FOR_TRACK
HELP: str = (
    "You can ask me for a track by name or by number, for example: "
    "play number 12. While listening you can say next, previous or pause."
)
HELP_CARD_TITLE: str = "Help"

GOODBYE: str = "Goodbye!"
PLEASE_REPEAT: str = "Sorry, I didn't catch that. Please say it again."
NO_AUDIO_PLAYER: str = "Sorry, this device does not have an audio player."

END_OF_LIST: str = "You have reached the end of the list."
START_OF_LIST: str = "You are at the start of the list."
NOTHING_PLAYABLE: str = "There is nothing left that I can play."

LOOP_ON: str = "Loop on."
LOOP_OFF: str = "Loop off."


def track_not_found(slot_value: str | None) -> str:
    if not slot_value:
        return "Sorry, that track does not exist. " + ASK_FOR_TRACK
    return f"I could not find {slot_value}. " + ASK_FOR_TRACK


def track_unavailable(track_id: int) -> str:
    return f"Track {track_id} cannot be played for copyright reasons. " + ASK_FOR_TRACK


def resume_question(track_name: str) -> str:
    return f"You were listening to {track_name}. Would you like to resume?"


RESUME_REPROMPT: str = "You can say yes to resume or no to start from the beginning."


def now_playing_title(track_id: int) -> str:
    return f"Now playing track {track_id}"
