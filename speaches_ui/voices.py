"""Canonical model/voice vocabularies and selector normalization."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Literal

SpeechFamily = Literal["kokoro", "piper"]

KOKORO_MODEL_ID: Final[str] = "tts-1"
PIPER_MODEL_KEYWORD: Final[str] = "tts-1-piper"
PIPER_MODEL_PREFIX: Final[str] = "speaches-ai/piper-"
WHISPER_MODEL_ID: Final[str] = "whisper-1"

DEFAULT_KOKORO_VOICE: Final[str] = "af_nova"
DEFAULT_PIPER_VOICE: Final[str] = "en_US-ryan-medium"
DEFAULT_LANGUAGE: Final[str] = "en"
DEFAULT_QUALITY: Final[str] = "standard"

KOKORO_VOICES: Final[frozenset[str]] = frozenset(
    {
        # American female
        "af_nova",
        "af_sarah",
        "af_bella",
        "af_heart",
        "af_aoede",
        "af_jessica",
        "af_kore",
        "af_nicole",
        "af_river",
        "af_sky",
        "af_alloy",
        # American male
        "am_adam",
        "am_echo",
        "am_liam",
        "am_onyx",
        "am_michael",
        "am_eric",
        "am_fenrir",
        "am_puck",
        "am_santa",
        # British female
        "bf_alice",
        "bf_emma",
        "bf_isabella",
        "bf_lily",
        # British male
        "bm_fable",
        "bm_george",
        "bm_daniel",
        "bm_lewis",
    }
)

PIPER_VOICES: Final[frozenset[str]] = frozenset(
    {
        "en_US-ryan-high",
        "en_US-ryan-low",
        "en_US-ryan-medium",
        "en_US-amy-low",
        "en_US-amy-medium",
        "en_US-hfc_female-medium",
        "en_US-kathleen-low",
        "en_US-kristin-medium",
        "en_US-ljspeech-high",
        "en_US-ljspeech-medium",
        "en_US-hfc_male-medium",
        "en_US-lessac-high",
        "en_US-lessac-low",
        "en_US-lessac-medium",
        "en_US-danny-low",
        "en_US-joe-medium",
        "en_US-john-medium",
        "en_US-bryce-medium",
        "en_US-kusal-medium",
        "en_US-norman-medium",
        "en_US-libritts-high",
        "en_US-libritts_r-medium",
        "en_US-arctic-medium",
        "en_US-l2arctic-medium",
        "en_GB-alan-low",
        "en_GB-alan-medium",
        "en_GB-southern_english_female-low",
        "en_GB-alba-medium",
        "en_GB-aru-medium",
        "en_GB-cori-high",
        "en_GB-cori-medium",
        "en_GB-jenny_dioco-medium",
        "en_GB-northern_english_male-medium",
        "en_GB-semaine-medium",
        "en_GB-vctk-medium",
    }
)

VOICES_BY_FAMILY: Final[dict[str, frozenset[str]]] = {
    "kokoro": KOKORO_VOICES,
    "piper": PIPER_VOICES,
}

DEFAULT_VOICES: Final[dict[str, str]] = {
    "kokoro": DEFAULT_KOKORO_VOICE,
    "piper": DEFAULT_PIPER_VOICE,
}

MODEL_ALIASES: Final[dict[str, SpeechFamily]] = {
    KOKORO_MODEL_ID: "kokoro",
    "kokoro": "kokoro",
    PIPER_MODEL_KEYWORD: "piper",
    "piper": "piper",
}

# Families whose models the backend can download on demand.
AUTO_INSTALL_FAMILIES: Final[frozenset[str]] = frozenset({"piper"})

SUPPORTED_LANGUAGES: Final[frozenset[str]] = frozenset(
    {"en", "es", "fr", "de", "it", "pt", "ja", "ko", "zh"}
)

QUALITY_TIERS: Final[tuple[str, ...]] = ("fast", "standard", "accurate")


@dataclass(frozen=True, slots=True)
class ResolvedSpeechModel:
    """Backend model reference derived from a client (model, voice) pair."""

    family: SpeechFamily
    model_id: str
    voice: str

    @property
    def auto_installable(self) -> bool:
        return self.family in AUTO_INSTALL_FAMILIES


def speech_family(model: str | None) -> SpeechFamily:
    """Map a client model name to a family; unknown names are kokoro."""
    key = (model or "").strip().lower()
    return MODEL_ALIASES.get(key, "kokoro")


def resolve_speech_model(
    model: str | None, voice: str | None
) -> ResolvedSpeechModel:
    """Resolve the canonical backend model id and voice.

    Never fails: an unknown model falls back to kokoro and a voice outside
    the family's allow-list falls back to the family default.
    """
    family = speech_family(model)
    requested = (voice or "").strip()
    if requested in VOICES_BY_FAMILY[family]:
        resolved = requested
    else:
        resolved = DEFAULT_VOICES[family]

    if family == "piper":
        model_id = f"{PIPER_MODEL_PREFIX}{resolved}"
    else:
        model_id = KOKORO_MODEL_ID
    return ResolvedSpeechModel(family=family, model_id=model_id, voice=resolved)


def normalize_language(language: str | None) -> str:
    """Return ``language`` if it is a supported code, else the default.

    Codes are matched exactly; ``"FR"`` or ``" fr "`` fall back to ``"en"``.
    """
    return language if language in SUPPORTED_LANGUAGES else DEFAULT_LANGUAGE


def normalize_quality(quality: str | None) -> str:
    return quality if quality in QUALITY_TIERS else DEFAULT_QUALITY
