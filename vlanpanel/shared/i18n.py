import gettext
from typing import Optional

TEXT_DOMAIN = "vlanpanel"


def init_translations(localedir: Optional[str] = None) -> None:
    """Binds the vlanpanel text domain; call once before building any menu."""
    gettext.bindtextdomain(TEXT_DOMAIN, localedir)
    gettext.textdomain(TEXT_DOMAIN)


def _(message: str) -> str:
    return gettext.dgettext(TEXT_DOMAIN, message)
