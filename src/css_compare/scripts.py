"""JavaScript injected into rendered pages.

Every script is a self-invoking expression so it can be handed to any
``run_script`` implementation as a plain string. Parameters are passed as a
JSON-encoded argument object rather than spliced into the source text.
"""

import json

# Console prefix for messages emitted by the inspect script
CSS_INSPECT_PREFIX = "__css_compare__"

EXCLUDED_TAGS = (
    "SCRIPT", "STYLE", "META", "LINK", "TITLE", "HEAD", "BR", "HR", "NOSCRIPT", "BASE",
)

HIGHLIGHT_ID = "__css_compare_right_highlight"

_EXCLUDED_TAGS_JS = json.dumps(list(EXCLUDED_TAGS))

# Identity key helpers shared by the collection and inspect scripts.
_IDENTITY_HELPERS = """
  const EXCLUDED_TAGS = %s;

  // Overlays injected by this tool
  const isOwnNode = (el) => Boolean(el.id) && el.id.startsWith('__css_compare_');

  const getDomPath = (el) => {
    if (el === document.body) return 'body';
    const parent = el.parentElement;
    const tag = el.tagName.toLowerCase();
    if (!parent) return tag;
    const siblings = Array.from(parent.children).filter(
      (c) => c.tagName === el.tagName && !isOwnNode(c)
    );
    if (siblings.length === 1) return getDomPath(parent) + ' > ' + tag;
    return getDomPath(parent) + ' > ' + tag + ':nth-of-type(' + (siblings.indexOf(el) + 1) + ')';
  };

  const getMatchKey = (el) => {
    if (el.id) return { method: 'id', key: '#' + el.id };
    const testId = el.getAttribute('data-testid');
    if (testId) {
      return { method: 'data-testid', key: '[data-testid="' + testId.replace(/["\\\\]/g, '\\\\$&') + '"]' };
    }
    for (const cls of Array.from(el.classList)) {
      try {
        if (document.querySelectorAll('.' + CSS.escape(cls)).length === 1) {
          return { method: 'unique-class', key: '.' + cls };
        }
      } catch (e) {
        // Not a usable selector, try the next class
      }
    }
    return { method: 'dom-path', key: getDomPath(el) };
  };

  const getStyles = (el) => {
    const computed = window.getComputedStyle(el);
    const styles = {};
    for (let i = 0; i < computed.length; i++) {
      const prop = computed[i];
      styles[prop] = computed.getPropertyValue(prop);
    }
    return styles;
  };
""" % _EXCLUDED_TAGS_JS

# Resolves an identity key back to an element. Returns null on a miss or an
# unusable selector.
_RESOLVE_HELPER = """
  const resolveElement = (key, method) => {
    try {
      if (method === 'id') return document.getElementById(key.slice(1));
      if (method === 'unique-class') return document.querySelector('.' + CSS.escape(key.slice(1)));
      return document.querySelector(key);
    } catch (e) {
      return null;
    }
  };
"""

CSS_COLLECTION_SCRIPT = """(() => {
%s
  const elements = [];
  for (const el of document.body.querySelectorAll('*')) {
    if (EXCLUDED_TAGS.includes(el.tagName)) continue;
    if (isOwnNode(el)) continue;
    if (window.getComputedStyle(el).display === 'none') continue;
    const match = getMatchKey(el);
    elements.push({
      tag: el.tagName.toLowerCase(),
      key: match.key,
      method: match.method,
      styles: getStyles(el),
    });
  }
  return elements;
})()""" % _IDENTITY_HELPERS

CSS_INSPECT_SCRIPT = """(() => {
  if (window.__cssCompareInspectActive) return false;
  window.__cssCompareInspectActive = true;

  const PREFIX = %s;
  const send = (type, data) => console.log(PREFIX + JSON.stringify({ type: type, data: data }));
%s
  const overlay = document.createElement('div');
  overlay.id = '__css_compare_inspect_overlay';
  overlay.style.cssText = 'position:fixed;pointer-events:none;border:2px solid #58a6ff;' +
    'background:rgba(88,166,255,0.1);z-index:999999;display:none;transition:all 0.1s ease;';
  document.body.appendChild(overlay);

  const tooltip = document.createElement('div');
  tooltip.id = '__css_compare_inspect_tooltip';
  tooltip.style.cssText = 'position:fixed;pointer-events:none;background:#161b22;color:#e6edf3;' +
    'padding:4px 8px;border-radius:4px;font-size:11px;font-family:monospace;z-index:1000000;' +
    'display:none;border:1px solid #30363d;white-space:nowrap;';
  document.body.appendChild(tooltip);

  const isInspectable = (el) =>
    el && el !== overlay && el !== tooltip && el.tagName && !EXCLUDED_TAGS.includes(el.tagName);

  let lastTarget = null;

  const onHover = (e) => {
    const el = e.target;
    if (!isInspectable(el)) return;
    const rect = el.getBoundingClientRect();
    overlay.style.display = 'block';
    overlay.style.left = rect.left + 'px';
    overlay.style.top = rect.top + 'px';
    overlay.style.width = rect.width + 'px';
    overlay.style.height = rect.height + 'px';

    if (el !== lastTarget) {
      lastTarget = el;
      tooltip.textContent = el.tagName.toLowerCase() + '  ' + getMatchKey(el).key;
    }
    tooltip.style.display = 'block';
    tooltip.style.left = Math.max(0, Math.min(e.clientX + 12, window.innerWidth - 240)) + 'px';
    tooltip.style.top = Math.max(0, e.clientY - 28) + 'px';
  };

  const onClick = (e) => {
    e.preventDefault();
    e.stopPropagation();
    e.stopImmediatePropagation();

    const el = e.target;
    if (!isInspectable(el)) return;

    const match = getMatchKey(el);
    send('inspect-click', {
      tag: el.tagName.toLowerCase(),
      key: match.key,
      method: match.method,
      styles: getStyles(el),
    });
    overlay.style.background = 'rgba(88,166,255,0.15)';
  };

  const onKeyDown = (e) => {
    if (e.key === 'Escape') send('inspect-cancel', {});
  };

  document.addEventListener('mousemove', onHover, true);
  document.addEventListener('click', onClick, true);
  document.addEventListener('keydown', onKeyDown, true);

  window.__cssCompareInspectCleanup = () => {
    document.removeEventListener('mousemove', onHover, true);
    document.removeEventListener('click', onClick, true);
    document.removeEventListener('keydown', onKeyDown, true);
    overlay.remove();
    tooltip.remove();
    window.__cssCompareInspectActive = false;
    delete window.__cssCompareInspectCleanup;
  };
  return true;
})()""" % (json.dumps(CSS_INSPECT_PREFIX), _IDENTITY_HELPERS)

CSS_INSPECT_CLEANUP_SCRIPT = """(() => {
  if (typeof window.__cssCompareInspectCleanup === 'function') {
    window.__cssCompareInspectCleanup();
    return true;
  }
  return false;
})()"""

CLEAR_HIGHLIGHT_SCRIPT = """(() => {
  const prev = document.getElementById(%s);
  if (prev) prev.remove();
})()""" % json.dumps(HIGHLIGHT_ID)


def _with_params(body: str, params: dict) -> str:
    """Wrap a script body in a function called with JSON-encoded params."""
    return "((params) => {%s})(%s)" % (body, json.dumps(params, ensure_ascii=True))


def build_get_element_styles_script(key: str, method: str | None = None) -> str:
    """Build a script returning ``{tag, styles}`` for the element with ``key``, or null."""
    body = _RESOLVE_HELPER + """
  const el = resolveElement(params.key, params.method);
  if (!el) return null;
  const computed = window.getComputedStyle(el);
  const styles = {};
  for (let i = 0; i < computed.length; i++) {
    const prop = computed[i];
    styles[prop] = computed.getPropertyValue(prop);
  }
  return { tag: el.tagName.toLowerCase(), styles: styles };
"""
    return _with_params(body, {"key": key, "method": method})


def build_highlight_script(key: str, method: str | None = None) -> str:
    """Build a script that outlines the element with ``key`` and returns whether it was found."""
    body = _RESOLVE_HELPER + """
  const prev = document.getElementById(params.highlightId);
  if (prev) prev.remove();

  const el = resolveElement(params.key, params.method);
  if (!el) return false;

  const rect = el.getBoundingClientRect();
  const overlay = document.createElement('div');
  overlay.id = params.highlightId;
  overlay.style.cssText = 'position:fixed;pointer-events:none;border:2px solid #f0883e;' +
    'background:rgba(240,136,62,0.1);z-index:999999;';
  overlay.style.left = rect.left + 'px';
  overlay.style.top = rect.top + 'px';
  overlay.style.width = rect.width + 'px';
  overlay.style.height = rect.height + 'px';
  document.body.appendChild(overlay);
  return true;
"""
    return _with_params(body, {"key": key, "method": method, "highlightId": HIGHLIGHT_ID})
