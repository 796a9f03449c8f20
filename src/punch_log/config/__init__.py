import os


def get_settings_module() -> str:
    # Settings module is picked from APP_ENV, defaulting to development
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "punch_log.config.production"

    if env in {"test", "testing"}:
        return "punch_log.config.testing"

    return "punch_log.config.development"
