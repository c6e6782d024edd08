"""Centralized branding constants: single source of truth for version."""


class PluginBranding:
    """Plugin identity constants."""

    PLUGIN_NAME = "PermaCanonical"
    AUTHOR = "Webfor Agency"
    AUTHOR_URI = "https://webfor.com"
    VERSION = "1.0.1"

    # Host compatibility declared in every update record
    REQUIRES = "5.0"
    TESTED = "6.8"
    REQUIRES_PHP = "7.2"

    DESCRIPTION = (
        "Forces canonical URLs to match WordPress permalinks exactly, "
        "overriding any SEO plugins."
    )

    @classmethod
    def author_markup(cls) -> str:
        return f'<a href="{cls.AUTHOR_URI}">{cls.AUTHOR}</a>'

    @classmethod
    def user_agent(cls) -> str:
        return f"{cls.PLUGIN_NAME}/{cls.VERSION}"
