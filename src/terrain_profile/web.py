"""Web interface: map page plus a JSON API driving one ProfileSession per browser."""

import logging
import os
import uuid
from collections import OrderedDict
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from threading import Lock

from flask import Flask, Response, jsonify, render_template_string, request, session

from terrain_profile import version_label
from terrain_profile.charts import chart_distances, nearest_index, render_profile_png
from terrain_profile.config import get_settings
from terrain_profile.elevation_api import fetch_elevations
from terrain_profile.errors import InvalidArgument, LookupFailure
from terrain_profile.export import profile_to_gpx
from terrain_profile.formatters import step_label
from terrain_profile.geocoding import search_places
from terrain_profile.models import GeoPoint
from terrain_profile.selector import step_number
from terrain_profile.session import LookupRunner, ProfileSession

logger = logging.getLogger(__name__)

_settings = get_settings()

app = Flask(__name__)
app.secret_key = _settings["secret_key"]

# Shared by all sessions; completions still go to each session's own queue
_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="elevation")


def _lookup(locations: list[tuple[float, float]]) -> list[float | None]:
    return fetch_elevations(locations, api=_settings["elevation_api"], timeout=_settings["request_timeout"])


@dataclass
class SessionEntry:
    session: ProfileSession
    runner: LookupRunner
    lock: Lock = field(default_factory=Lock)


class SessionStore:
    """Thread-safe LRU store of profile sessions keyed by browser session id."""

    def __init__(self, max_size: int = 500):
        self.max_size = max_size
        self.entries: OrderedDict[str, SessionEntry] = OrderedDict()
        self.lock = Lock()

    def get_or_create(self, sid: str) -> SessionEntry:
        with self.lock:
            if sid in self.entries:
                self.entries.move_to_end(sid)
                return self.entries[sid]
            runner = LookupRunner(_lookup, executor=_executor)
            entry = SessionEntry(
                session=ProfileSession(dispatch=runner.submit, sample_count=_settings["sample_count"]),
                runner=runner,
            )
            self.entries[sid] = entry
            # Evict oldest if over limit
            while len(self.entries) > self.max_size:
                self.entries.popitem(last=False)
            return entry

    def clear(self) -> None:
        with self.lock:
            self.entries.clear()

    def __len__(self) -> int:
        with self.lock:
            return len(self.entries)


_sessions = SessionStore()


def _current_entry() -> SessionEntry:
    sid = session.get("sid")
    if sid is None:
        sid = uuid.uuid4().hex
        session["sid"] = sid
    return _sessions.get_or_create(sid)


def _state_response(entry: SessionEntry):
    entry.runner.drain(entry.session)
    state = entry.session.to_dict()
    state["step_label"] = step_label(state["step"])
    return jsonify(state)


def _bad_request(message: str):
    return jsonify({"error": message}), 400


INDEX_TEMPLATE = """<!doctype html>
<html>
<head>
  <meta charset="utf-8">
  <title>Terrain Profile</title>
  <link rel="stylesheet" href="https://unpkg.com/leaflet@1.9.4/dist/leaflet.css">
  <script src="https://unpkg.com/leaflet@1.9.4/dist/leaflet.js"></script>
  <style>
    body { margin: 0; display: flex; height: 100vh; font-family: sans-serif; }
    #map { width: 66%; height: 100%; }
    #panel { width: 34%; padding: 20px; overflow-y: auto; background: #f8f9fa; }
    #chart { width: 100%; cursor: crosshair; }
  </style>
</head>
<body>
  <div id="map"></div>
  <div id="panel">
    <h2>Terrain Profile</h2>
    <form id="searchForm"><input id="q" name="q" placeholder="Search for a place..."> <button>Search</button></form>
    <ul id="results"></ul>
    <h3 id="step">{{ step_label }}</h3>
    <p id="status">{{ status }}</p>
    <button id="reset">New measurement</button>
    <img id="chart" alt="">
    <p><small>Version {{ version }}</small></p>
  </div>
  <script>
    const map = L.map('map').setView([21.0285, 105.8542], 10);
    L.tileLayer('https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png').addTo(map);
    let layers = [];
    let state = null;
    async function post(url, body) {
      const r = await fetch(url, {method: 'POST', headers: {'Content-Type': 'application/json'}, body: JSON.stringify(body || {})});
      return r.json();
    }
    function render(s) {
      state = s;
      layers.forEach(l => map.removeLayer(l)); layers = [];
      s.points.forEach(p => layers.push(L.marker([p.lat, p.lon]).addTo(map)));
      if (s.points.length === 2) layers.push(L.polyline(s.points.map(p => [p.lat, p.lon]), {color: '#ff4444'}).addTo(map));
      if (s.highlighted) layers.push(L.circleMarker([s.highlighted.lat, s.highlighted.lon], {radius: 8, color: '#1e88e5'}).addTo(map));
      document.getElementById('step').textContent = s.step_label;
      document.getElementById('status').textContent = s.status.message;
      const chart = document.getElementById('chart');
      chart.src = s.profile.length ? '/profile.png?g=' + s.generation + '&c=' + s.cursor : '';
      if (s.computing) setTimeout(refresh, 500);
    }
    async function refresh() { render(await (await fetch('/api/state')).json()); }
    map.on('click', async e => render(await post('/api/click', {lat: e.latlng.lat, lon: e.latlng.lng})));
    document.getElementById('reset').onclick = async () => render(await post('/api/reset'));
    document.getElementById('chart').onclick = async e => {
      if (!state || !state.profile.length) return;
      const box = e.target.getBoundingClientRect();
      const ratio = (e.clientX - box.left) / box.width;
      render(await post('/api/chart-click', {distance: ratio * state.distance}));
    };
    document.getElementById('searchForm').onsubmit = async e => {
      e.preventDefault();
      const r = await (await fetch('/api/search?q=' + encodeURIComponent(document.getElementById('q').value))).json();
      const ul = document.getElementById('results'); ul.innerHTML = '';
      (r.places || []).forEach(p => {
        const li = document.createElement('li'); li.textContent = p.display_name;
        li.onclick = () => map.setView([p.lat, p.lon], Math.max(map.getZoom(), 13));
        ul.appendChild(li);
      });
    };
    refresh();
  </script>
</body>
</html>
"""


@app.route("/")
def index():
    entry = _current_entry()
    with entry.lock:
        entry.runner.drain(entry.session)
        profile_session = entry.session
        return render_template_string(
            INDEX_TEMPLATE,
            step_label=step_label(step_number(profile_session.state)),
            status=profile_session.status.message,
            version=version_label(),
        )


@app.route("/api/state")
def api_state():
    entry = _current_entry()
    with entry.lock:
        return _state_response(entry)


@app.route("/api/click", methods=["POST"])
def api_click():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return _bad_request("JSON object required")
    try:
        point = GeoPoint(lat=float(data["lat"]), lon=float(data["lon"]))
    except (KeyError, TypeError, ValueError) as e:
        # InvalidArgument is a ValueError
        return _bad_request(f"Invalid point: {e}")

    entry = _current_entry()
    with entry.lock:
        entry.runner.drain(entry.session)
        entry.session.click(point)
        return _state_response(entry)


@app.route("/api/chart-click", methods=["POST"])
def api_chart_click():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return _bad_request("JSON object required")
    entry = _current_entry()
    with entry.lock:
        entry.runner.drain(entry.session)
        profile_session = entry.session
        if "index" in data:
            index = data["index"]
            if isinstance(index, bool) or not isinstance(index, int):
                return _bad_request("index must be an integer")
        elif "distance" in data:
            try:
                x = float(data["distance"])
            except (TypeError, ValueError):
                return _bad_request("distance must be a number")
            index = nearest_index(chart_distances(len(profile_session.profile), profile_session.distance), x)
            if index is None:
                return _state_response(entry)
        else:
            return _bad_request("index or distance is required")
        profile_session.select_from_chart(index)
        return _state_response(entry)


@app.route("/api/cursor/clear", methods=["POST"])
def api_cursor_clear():
    entry = _current_entry()
    with entry.lock:
        entry.session.clear_cursor()
        return _state_response(entry)


@app.route("/api/reset", methods=["POST"])
def api_reset():
    entry = _current_entry()
    with entry.lock:
        entry.runner.drain(entry.session)
        entry.session.reset()
        return _state_response(entry)


@app.route("/api/search")
def api_search():
    query = request.args.get("q", "")
    try:
        places = search_places(
            query,
            limit=_settings["search_limit"],
            min_chars=_settings["search_min_chars"],
            url=_settings["nominatim_url"],
            user_agent=_settings["user_agent"],
        )
    except LookupFailure as e:
        return jsonify({"error": str(e), "places": []}), 502
    return jsonify({"places": [p.to_dict() for p in places]})


@app.route("/profile.png")
def profile_png():
    entry = _current_entry()
    with entry.lock:
        entry.runner.drain(entry.session)
        profile_session = entry.session
        if not profile_session.profile:
            return Response("No elevation profile", status=404, mimetype="text/plain")
        img = render_profile_png(profile_session.profile, profile_session.distance, profile_session.cursor)
    return Response(img, mimetype="image/png", headers={"Cache-Control": "no-store"})


@app.route("/profile.gpx")
def profile_gpx():
    entry = _current_entry()
    with entry.lock:
        entry.runner.drain(entry.session)
        if not entry.session.profile:
            return Response("No elevation profile", status=404, mimetype="text/plain")
        xml = profile_to_gpx(entry.session.profile)
    return Response(
        xml,
        mimetype="application/gpx+xml",
        headers={"Content-Disposition": "attachment; filename=terrain-profile.gpx"},
    )


@app.errorhandler(InvalidArgument)
def handle_invalid_argument(e):
    return _bad_request(str(e))


def main():
    """Run the web server."""
    port = int(os.environ.get("PORT", 5060))
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    print("Starting Terrain Profile web server...")
    print(f"Open http://localhost:{port} in your browser")
    app.run(host="0.0.0.0", port=port, debug=True)


if __name__ == "__main__":
    main()
