from dataclasses import dataclass
import os
from dotenv import load_dotenv

from livescribe.constants import (
    DEFAULT_API_BASE_URL,
    DEFAULT_FINALIZE_GRACE,
    DEFAULT_LANGUAGE,
    DEFAULT_MAX_RECONNECT_ATTEMPTS,
    DEFAULT_MODEL_ID,
    DEFAULT_REALTIME_URL,
    DEFAULT_SAMPLE_RATE,
    DEFAULT_TOKEN_TIMEOUT,
)


@dataclass(frozen=True)
class Config:
    elevenlabs_api_key: str
    model_id: str
    language_code: str
    sample_rate: int
    max_reconnect_attempts: int
    finalize_grace_seconds: float
    token_timeout: float
    api_base_url: str
    realtime_url: str
    log_level: str

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv()

        api_key = os.getenv("ELEVENLABS_API_KEY")
        model_id = os.getenv("SCRIBE_MODEL_ID", DEFAULT_MODEL_ID)
        language = os.getenv("SCRIBE_LANGUAGE", DEFAULT_LANGUAGE)
        sample_rate = os.getenv("SCRIBE_SAMPLE_RATE", str(DEFAULT_SAMPLE_RATE))
        attempts = os.getenv(
            "SCRIBE_MAX_RECONNECT_ATTEMPTS", str(DEFAULT_MAX_RECONNECT_ATTEMPTS)
        )
        grace = os.getenv("SCRIBE_FINALIZE_GRACE", str(DEFAULT_FINALIZE_GRACE))
        token_timeout = os.getenv("SCRIBE_TOKEN_TIMEOUT", str(DEFAULT_TOKEN_TIMEOUT))
        api_base_url = os.getenv("SCRIBE_API_BASE_URL", DEFAULT_API_BASE_URL)
        realtime_url = os.getenv("SCRIBE_REALTIME_URL", DEFAULT_REALTIME_URL)
        log_level = os.getenv("LOG_LEVEL", "INFO")

        return cls._validate(
            elevenlabs_api_key=api_key,
            model_id=model_id,
            language_code=language,
            sample_rate=int(sample_rate),
            max_reconnect_attempts=int(attempts),
            finalize_grace_seconds=float(grace),
            token_timeout=float(token_timeout),
            api_base_url=api_base_url.rstrip("/"),
            realtime_url=realtime_url,
            log_level=log_level,
        )

    @staticmethod
    def _validate(
        elevenlabs_api_key: str | None,
        model_id: str,
        language_code: str,
        sample_rate: int,
        max_reconnect_attempts: int,
        finalize_grace_seconds: float,
        token_timeout: float,
        api_base_url: str,
        realtime_url: str,
        log_level: str,
    ) -> "Config":
        match elevenlabs_api_key:
            case None | "":
                raise ValueError("ELEVENLABS_API_KEY must be set in .env")
            case _:
                pass

        match sample_rate:
            case n if n <= 0:
                raise ValueError("SCRIBE_SAMPLE_RATE must be positive")
            case _:
                pass

        match max_reconnect_attempts:
            case n if n <= 0:
                raise ValueError("SCRIBE_MAX_RECONNECT_ATTEMPTS must be positive")
            case _:
                pass

        match finalize_grace_seconds:
            case g if g < 0:
                raise ValueError("SCRIBE_FINALIZE_GRACE must not be negative")
            case _:
                pass

        return Config(
            elevenlabs_api_key=elevenlabs_api_key,
            model_id=model_id,
            language_code=language_code,
            sample_rate=sample_rate,
            max_reconnect_attempts=max_reconnect_attempts,
            finalize_grace_seconds=finalize_grace_seconds,
            token_timeout=token_timeout,
            api_base_url=api_base_url,
            realtime_url=realtime_url,
            log_level=log_level,
        )
