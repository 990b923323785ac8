"""Find and highlight a left-view element's counterpart in another view."""

from ..browser import RenderedView
from ..models import IdentityMethod, ScrapedElement
from ..scripts import CLEAR_HIGHLIGHT_SCRIPT, build_get_element_styles_script, build_highlight_script


async def find_element_styles(
    view: RenderedView,
    key: str,
    method: IdentityMethod,
) -> ScrapedElement | None:
    """Return the element with ``key`` and its full computed style, or None if absent."""
    raw = await view.run_script(build_get_element_styles_script(key, method.value))
    if not raw:
        return None
    return ScrapedElement.from_dict({
        "tag": raw.get("tag"),
        "key": key,
        "method": method.value,
        "styles": raw.get("styles"),
    })


async def highlight_element(
    view: RenderedView,
    key: str,
    method: IdentityMethod | None = None,
) -> bool:
    """Outline the element with ``key``, replacing any previous outline."""
    found = await view.run_script(build_highlight_script(key, method.value if method else None))
    return bool(found)


async def clear_highlight(view: RenderedView) -> None:
    await view.run_script(CLEAR_HIGHLIGHT_SCRIPT)
