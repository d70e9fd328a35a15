"""
BEHAVIORAL CONSTANTS
--------------------
Single source of truth for wire names and playback defaults.

Rules:
- If changing a value changes runtime behavior, it belongs here.
- No magic strings for request types or intent names elsewhere.
- Other modules MUST import from this file.
"""

from __future__ import annotations

from typing import Final

# =============================================================================
# Request types (voice platform envelope `request.type`)
# =============================================================================

REQUEST_LAUNCH: Final[str] = "LaunchRequest"
REQUEST_INTENT: Final[str] = "IntentRequest"
REQUEST_SESSION_ENDED: Final[str] = "SessionEndedRequest"
REQUEST_SYSTEM_EXCEPTION: Final[str] = "System.ExceptionEncountered"

AUDIO_PLAYER_STARTED: Final[str] = "AudioPlayer.PlaybackStarted"
AUDIO_PLAYER_STOPPED: Final[str] = "AudioPlayer.PlaybackStopped"
AUDIO_PLAYER_NEARLY_FINISHED: Final[str] = "AudioPlayer.PlaybackNearlyFinished"
AUDIO_PLAYER_FINISHED: Final[str] = "AudioPlayer.PlaybackFinished"
AUDIO_PLAYER_FAILED: Final[str] = "AudioPlayer.PlaybackFailed"

CONTROLLER_PLAY: Final[str] = "PlaybackController.PlayCommandIssued"
CONTROLLER_PAUSE: Final[str] = "PlaybackController.PauseCommandIssued"
CONTROLLER_NEXT: Final[str] = "PlaybackController.NextCommandIssued"
CONTROLLER_PREVIOUS: Final[str] = "PlaybackController.PreviousCommandIssued"

# =============================================================================
# Intent names (`request.intent.name`)
# =============================================================================

INTENT_PLAY_BY_NAME_OR_NUMBER: Final[str] = "PlaySongByName"
INTENT_RESUME: Final[str] = "AMAZON.ResumeIntent"
INTENT_PAUSE: Final[str] = "AMAZON.PauseIntent"
INTENT_STOP: Final[str] = "AMAZON.StopIntent"
INTENT_CANCEL: Final[str] = "AMAZON.CancelIntent"
INTENT_NEXT: Final[str] = "AMAZON.NextIntent"
INTENT_PREVIOUS: Final[str] = "AMAZON.PreviousIntent"
INTENT_LOOP_ON: Final[str] = "AMAZON.LoopOnIntent"
INTENT_LOOP_OFF: Final[str] = "AMAZON.LoopOffIntent"
INTENT_SHUFFLE_ON: Final[str] = "AMAZON.ShuffleOnIntent"
INTENT_SHUFFLE_OFF: Final[str] = "AMAZON.ShuffleOffIntent"
INTENT_START_OVER: Final[str] = "AMAZON.StartOverIntent"
INTENT_YES: Final[str] = "AMAZON.YesIntent"
INTENT_NO: Final[str] = "AMAZON.NoIntent"
INTENT_HELP: Final[str] = "AMAZON.HelpIntent"

SLOT_NAME_OR_NUMBER: Final[str] = "NameOrNumber"

# =============================================================================
# Response envelope
# =============================================================================

RESPONSE_VERSION: Final[str] = "1.0"
DIRECTIVE_PLAY: Final[str] = "AudioPlayer.Play"
DIRECTIVE_STOP: Final[str] = "AudioPlayer.Stop"

# =============================================================================
# Catalog / persistence defaults
# =============================================================================

# Tracks that can never be streamed (rights restrictions). Used when the
# catalog file does not carry its own `unavailable` list.
DEFAULT_UNAVAILABLE_TRACK_IDS: Final[frozenset[int]] = frozenset(
    {41, 46, 137, 172, 204}
)

ATTR_PLAYBACK_SETTING: Final[str] = "playbackSetting"
ATTR_PLAYBACK_INFO: Final[str] = "playbackInfo"
