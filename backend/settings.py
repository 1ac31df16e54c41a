import os

# Basic settings helper to read environment configuration.


def _as_bool(val: str | None, default: bool = False) -> bool:
    if val is None:
        return default
    return val.lower() in ("1", "true", "yes", "on")


def _as_float(val: str | None, default: float) -> float:
    if val is None or not val.strip():
        return default
    try:
        return float(val)
    except ValueError:
        return default


class Settings:
    def __init__(self) -> None:
        self.MEDIA_ROOT: str = os.getenv("MEDIA_ROOT", "media")
        self.DATABASE_URL: str | None = os.getenv("DATABASE_URL") or None
        self.COLORBLOCK_FONT_PATH: str | None = os.getenv("COLORBLOCK_FONT_PATH") or None
        self.COLORBLOCK_BOLD_FONT_PATH: str | None = os.getenv("COLORBLOCK_BOLD_FONT_PATH") or None
        self.BACKGROUND_FETCH_TIMEOUT: float = _as_float(os.getenv("BACKGROUND_FETCH_TIMEOUT"), 10.0)
        self.BACKGROUND_USER_AGENT: str = os.getenv(
            "BACKGROUND_USER_AGENT", "colorblock-studio/0.1 (background-fetch)"
        )
        # Origin used for relative background URLs when rendering outside a request.
        self.PUBLIC_BASE_URL: str | None = os.getenv("PUBLIC_BASE_URL") or None
        self.RENDER_ON_REVIEW: bool = _as_bool(os.getenv("RENDER_ON_REVIEW"), True)


settings = Settings()
