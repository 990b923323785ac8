"""HTML report generator for self-contained, interactive CSS scan reports."""

import html
import json
from pathlib import Path

from ..models import CssScanResult

NO_DIFFERENCES_TEXT = "No differences found: both pages have identical CSS"
NO_FILTER_MATCH_TEXT = "No differences match the current filters"

# No remote script, style, font or object sources may load
CONTENT_SECURITY_POLICY = (
    "default-src 'none'; script-src 'unsafe-inline'; style-src 'unsafe-inline'; "
    "img-src data:; object-src 'none'; base-uri 'none'; form-action 'none'"
)

_STYLES = """
* { margin: 0; padding: 0; box-sizing: border-box; }
:root {
  --bg-primary: #0d1117;
  --bg-secondary: #161b22;
  --bg-tertiary: #21262d;
  --accent-blue: #58a6ff;
  --text-primary: #e6edf3;
  --text-secondary: #8b949e;
  --border-default: #30363d;
  --status-passed: #3fb950;
  --status-failed: #f85149;
  --status-new: #d29922;
  --status-deleted: #8b949e;
  --radius-md: 6px;
}
body {
  font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
  background: var(--bg-primary);
  color: var(--text-primary);
  padding: 20px;
  line-height: 1.5;
}
h1 { font-size: 20px; margin-bottom: 8px; }
.scan-meta { font-size: 12px; color: var(--text-secondary); margin-bottom: 16px; font-family: monospace; }
.scan-meta span { margin-right: 16px; }
.description {
  margin-bottom: 16px; padding: 12px 16px; background: var(--bg-secondary);
  border: 1px solid var(--border-default); border-radius: var(--radius-md);
  font-size: 13px; color: var(--text-secondary); line-height: 1.7;
}
.description .legend span { margin-right: 12px; }
.changed-label { color: var(--status-failed); }
.added-label { color: var(--status-new); }
.deleted-label { color: var(--status-deleted); }
.summary { display: flex; gap: 12px; margin-bottom: 20px; flex-wrap: wrap; }
.summary-card {
  padding: 12px 20px; background: var(--bg-secondary);
  border: 1px solid var(--border-default); border-radius: var(--radius-md); text-align: center;
}
.summary-card .value { font-size: 24px; font-weight: 700; }
.summary-card .label { font-size: 11px; color: var(--text-secondary); text-transform: uppercase; letter-spacing: 0.3px; }
.summary-card.changed .value { color: var(--status-failed); }
.summary-card.added .value { color: var(--status-new); }
.summary-card.deleted .value { color: var(--status-deleted); }
.filters { display: flex; gap: 8px; margin-bottom: 16px; flex-wrap: wrap; align-items: center; }
.filter-group { display: flex; gap: 4px; align-items: center; }
.filter-label { font-size: 11px; color: var(--text-secondary); text-transform: uppercase; margin-right: 4px; }
.filter-btn {
  height: 26px; padding: 0 10px; border: 1px solid var(--border-default);
  border-radius: 13px; background: var(--bg-tertiary); color: var(--text-primary);
  font-size: 11px; cursor: pointer; transition: all 0.15s ease;
}
.filter-btn:hover { background: #2d333b; }
.filter-btn.active { background: var(--accent-blue); border-color: var(--accent-blue); color: #fff; }
.search-input {
  height: 28px; padding: 0 10px; border: 1px solid var(--border-default);
  border-radius: var(--radius-md); background: var(--bg-primary); color: var(--text-primary);
  font-size: 12px; outline: none; min-width: 200px;
}
.search-input:focus { border-color: var(--accent-blue); }
.actions { margin-left: auto; display: flex; gap: 6px; }
.action-btn {
  height: 28px; padding: 0 12px; border: 1px solid var(--border-default);
  border-radius: var(--radius-md); background: var(--bg-tertiary); color: var(--text-primary);
  font-size: 11px; cursor: pointer;
}
.action-btn:hover { background: #2d333b; }
.card {
  background: var(--bg-secondary); border: 1px solid var(--border-default);
  border-radius: var(--radius-md); margin-bottom: 8px; overflow: hidden;
}
.card-header {
  display: flex; align-items: center; gap: 8px; padding: 10px 14px;
  cursor: pointer; user-select: none;
}
.card-header:hover { background: var(--bg-tertiary); }
.card-arrow { font-size: 10px; color: var(--text-secondary); transition: transform 0.2s ease; width: 16px; }
.card-arrow.open { transform: rotate(90deg); }
.card-tag { font-family: monospace; font-size: 12px; color: var(--accent-blue); }
.card-key {
  font-family: monospace; font-size: 11px; color: var(--text-secondary);
  flex: 1; overflow: hidden; text-overflow: ellipsis; white-space: nowrap;
}
.card-method {
  font-size: 10px; padding: 2px 6px; border-radius: 10px; background: var(--bg-tertiary);
  color: var(--text-secondary); border: 1px solid var(--border-default);
}
.card-count { font-size: 11px; font-weight: 600; }
.card-count.changed { color: var(--status-failed); }
.card-count.added { color: var(--status-new); }
.card-count.deleted { color: var(--status-deleted); }
.card-body { display: none; border-top: 1px solid var(--border-default); }
.card-body.open { display: block; }
table { width: 100%; border-collapse: collapse; font-size: 12px; }
th {
  text-align: left; padding: 8px 14px; font-size: 10px; color: var(--text-secondary);
  text-transform: uppercase; background: var(--bg-tertiary); border-bottom: 1px solid var(--border-default);
}
td { padding: 6px 14px; border-bottom: 1px solid var(--border-default); font-family: monospace; font-size: 11px; }
td.prop { color: var(--accent-blue); }
td.expected { color: var(--status-passed); font-weight: 700; }
td.actual { color: var(--status-failed); font-weight: 700; }
.cat-badge { font-size: 9px; padding: 1px 5px; border-radius: 8px; text-transform: uppercase; display: inline-block; }
.cat-layout { background: rgba(88,166,255,0.15); color: var(--accent-blue); }
.cat-text { background: rgba(63,185,80,0.15); color: var(--status-passed); }
.cat-visual { background: rgba(210,153,34,0.15); color: var(--status-new); }
.cat-other { background: rgba(139,148,158,0.15); color: var(--text-secondary); }
.empty-state { text-align: center; padding: 40px; color: var(--text-secondary); font-size: 14px; }
"""

_SCRIPT = """
var activeTypeFilter = 'all';
var activeCategoryFilter = 'all';
var searchQuery = '';

var TYPE_FILTERS = [['all', 'All'], ['changed', 'Changed'], ['added', 'Added'], ['deleted', 'Deleted']];
var CATEGORY_FILTERS = [['all', 'All'], ['layout', 'Layout'], ['text', 'Text'], ['visual', 'Visual'], ['other', 'Other']];

function escapeHtml(value) {
  return String(value)
    .replace(/&/g, '&amp;').replace(/</g, '&lt;').replace(/>/g, '&gt;')
    .replace(/"/g, '&quot;').replace(/'/g, '&#39;');
}

function summaryCard(cls, value, label) {
  return '<div class="summary-card ' + cls + '"><div class="value">' + value +
    '</div><div class="label">' + label + '</div></div>';
}

function renderSummary() {
  var s = data.summary;
  document.getElementById('summary').innerHTML =
    summaryCard('', data.leftCount, 'Left Elements') +
    summaryCard('', data.rightCount, 'Right Elements') +
    summaryCard('changed', s.changedElements, 'Changed') +
    summaryCard('added', s.addedElements, 'Added') +
    summaryCard('deleted', s.deletedElements, 'Deleted') +
    summaryCard('', s.totalDiffProperties, 'Diff Properties');
}

function filterButtons(attr, filters, active) {
  return filters.map(function(f) {
    return '<button class="filter-btn' + (active === f[0] ? ' active' : '') + '" data-' + attr +
      '="' + f[0] + '">' + f[1] + '</button>';
  }).join('');
}

function renderFilters() {
  document.getElementById('filters').innerHTML =
    '<div class="filter-group"><span class="filter-label">Type</span>' +
      filterButtons('type', TYPE_FILTERS, activeTypeFilter) + '</div>' +
    '<div class="filter-group"><span class="filter-label">Category</span>' +
      filterButtons('cat', CATEGORY_FILTERS, activeCategoryFilter) + '</div>' +
    '<input class="search-input" id="search" placeholder="Search element or property..." value="' +
      escapeHtml(searchQuery) + '" />' +
    '<div class="actions">' +
      '<button class="action-btn" id="export-json">Export JSON</button>' +
      '<button class="action-btn" id="copy-clipboard">Copy</button>' +
    '</div>';

  document.querySelectorAll('[data-type]').forEach(function(btn) {
    btn.addEventListener('click', function() { activeTypeFilter = this.dataset.type; renderFilters(); renderResults(); });
  });
  document.querySelectorAll('[data-cat]').forEach(function(btn) {
    btn.addEventListener('click', function() { activeCategoryFilter = this.dataset.cat; renderFilters(); renderResults(); });
  });
  var search = document.getElementById('search');
  search.addEventListener('input', function() { searchQuery = this.value.toLowerCase(); renderResults(); });
  document.getElementById('export-json').addEventListener('click', exportJson);
  document.getElementById('copy-clipboard').addEventListener('click', copyToClipboard);
}

function filterDiffs(diffs) {
  if (activeCategoryFilter === 'all') return diffs;
  return diffs.filter(function(d) { return d.category === activeCategoryFilter; });
}

function matchesSearch(item) {
  if (!searchQuery) return true;
  if (item.tag.toLowerCase().indexOf(searchQuery) !== -1) return true;
  if (item.key.toLowerCase().indexOf(searchQuery) !== -1) return true;
  return (item.diffs || []).some(function(d) { return d.property.toLowerCase().indexOf(searchQuery) !== -1; });
}

function visibleItems() {
  var items = [];
  ['changed', 'added', 'deleted'].forEach(function(type) {
    if (activeTypeFilter !== 'all' && activeTypeFilter !== type) return;
    data[type].forEach(function(item) {
      if (!matchesSearch(item)) return;
      // A category filter hides changed elements with no diffs in that category
      if (type === 'changed' && activeCategoryFilter !== 'all' && filterDiffs(item.diffs).length === 0) return;
      items.push(item);
    });
  });
  return items;
}

function renderCard(item, idx) {
  var diffs = item.diffs ? filterDiffs(item.diffs) : [];
  var countLabel = item.type === 'changed' ? diffs.length + ' props' : item.type;
  var html = '<div class="card">' +
    '<div class="card-header" data-idx="' + idx + '">' +
    '<span class="card-arrow" id="arrow-' + idx + '">&#9654;</span>' +
    '<span class="card-tag">&lt;' + escapeHtml(item.tag) + '&gt;</span>' +
    '<span class="card-key" title="' + escapeHtml(item.key) + '">' + escapeHtml(item.key) + '</span>' +
    '<span class="card-method">' + escapeHtml(item.method) + '</span>' +
    '<span class="card-count ' + escapeHtml(item.type) + '">' + countLabel + '</span>' +
    '</div>';

  if (item.type === 'changed' && diffs.length > 0) {
    html += '<div class="card-body" id="body-' + idx + '"><table><thead><tr>' +
      '<th>Property</th><th>Category</th><th>Left (Expected)</th><th>Right (Actual)</th>' +
      '</tr></thead><tbody>';
    diffs.forEach(function(d) {
      html += '<tr>' +
        '<td class="prop">' + escapeHtml(d.property) + '</td>' +
        '<td><span class="cat-badge cat-' + escapeHtml(d.category) + '">' + escapeHtml(d.category) + '</span></td>' +
        '<td class="expected">' + escapeHtml(d.expected) + '</td>' +
        '<td class="actual">' + escapeHtml(d.actual) + '</td>' +
        '</tr>';
    });
    html += '</tbody></table></div>';
  }
  return html + '</div>';
}

function renderResults() {
  var container = document.getElementById('results');
  var items = visibleItems();

  if (items.length === 0) {
    var total = data.changed.length + data.added.length + data.deleted.length;
    var message = total === 0 ? MESSAGES.noDifferences : MESSAGES.noFilterMatch;
    container.innerHTML = '<div class="empty-state">' + escapeHtml(message) + '</div>';
    return;
  }

  container.innerHTML = items.map(renderCard).join('');

  document.querySelectorAll('.card-header').forEach(function(header) {
    header.addEventListener('click', function() {
      var idx = this.dataset.idx;
      var body = document.getElementById('body-' + idx);
      if (body) {
        body.classList.toggle('open');
        document.getElementById('arrow-' + idx).classList.toggle('open');
      }
    });
  });
}

function exportJson() {
  var blob = new Blob([JSON.stringify(data, null, 2)], { type: 'application/json' });
  var a = document.createElement('a');
  a.href = URL.createObjectURL(blob);
  a.download = 'css-scan-report.json';
  a.click();
  setTimeout(function() { URL.revokeObjectURL(a.href); }, 0);
}

function copyToClipboard() {
  var btn = document.getElementById('copy-clipboard');
  navigator.clipboard.writeText(JSON.stringify(data, null, 2)).then(function() {
    btn.textContent = 'Copied!';
    setTimeout(function() { btn.textContent = 'Copy'; }, 1500);
  }, function() {
    btn.textContent = 'Copy failed';
    setTimeout(function() { btn.textContent = 'Copy'; }, 1500);
  });
}

renderSummary();
renderFilters();
renderResults();
"""


def _embed_json(value) -> str:
    """Serialize a value for an inline script block."""
    return json.dumps(value, ensure_ascii=False).replace("</", "<\\/").replace("<!--", "<\\!--")


def _generate_meta(result: CssScanResult) -> str:
    parts = [f"<span>Scanned: {result.scanned_at.strftime('%Y-%m-%d %H:%M:%S')}</span>"]
    if result.left_url:
        parts.append(f"<span>Left: {html.escape(result.left_url)}</span>")
    if result.right_url:
        parts.append(f"<span>Right: {html.escape(result.right_url)}</span>")
    return "".join(parts)


def generate_report(result: CssScanResult) -> str:
    """Render a scan result as one self-contained HTML document."""
    messages = {"noDifferences": NO_DIFFERENCES_TEXT, "noFilterMatch": NO_FILTER_MATCH_TEXT}

    # Shown until the script renders, and as the no-script fallback
    initial_results = ""
    if not result.has_differences:
        initial_results = f'<div class="empty-state">{html.escape(NO_DIFFERENCES_TEXT)}</div>'

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<meta http-equiv="Content-Security-Policy" content="{CONTENT_SECURITY_POLICY}">
<title>CSS Scan Report</title>
<style>{_STYLES}</style>
</head>
<body>
<h1>CSS Scan Report</h1>
<div class="scan-meta">{_generate_meta(result)}</div>
<div class="description">
  <p>Computed CSS of every visible element, compared between the left and right pages.</p>
  <p class="legend"><span class="changed-label">Changed</span> = styles differ
  <span class="added-label">Added</span> = right page only
  <span class="deleted-label">Deleted</span> = left page only</p>
</div>
<div id="summary" class="summary"></div>
<div id="filters" class="filters"></div>
<div id="results">{initial_results}</div>
<script>
var data = {_embed_json(result.to_dict())};
var MESSAGES = {_embed_json(messages)};
{_SCRIPT}
</script>
</body>
</html>"""


def write_report(result: CssScanResult, output_path: Path) -> Path:
    """Generate the report and write it to ``output_path``."""
    output_path.write_text(generate_report(result), encoding="utf-8")
    return output_path
