"""
Flask web application for the tournament sheet viewer.
"""
import os
import logging
import yaml
from datetime import datetime
from flask import Flask, render_template, request, jsonify, redirect, url_for, flash
from tournament.assembler import parse_workbook, SHEET_ALIASES, SKIP_SHEETS
from tournament.qualification import QUALIFICATION_GROUPS
from tournament import display
from workbook import WorkbookUnavailable, CACHE_FILENAME, decode_workbook, load_remote_workbook

app = Flask(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(__file__))
DATA_DIR = os.environ.get('TOURNAMENT_DATA_DIR', os.path.join(BASE_DIR, 'data'))

SETTINGS_FILE = os.path.join(DATA_DIR, 'settings.yaml')
MAX_UPLOAD_SIZE = 10 * 1024 * 1024  # 10 MB
ALLOWED_UPLOAD_EXTENSIONS = {'.xlsx', '.xlsm'}


def _get_or_create_secret_key() -> bytes:
    """Get SECRET_KEY from env, or generate and persist to file."""
    env_key = os.environ.get('SECRET_KEY')
    if env_key:
        return env_key.encode() if isinstance(env_key, str) else env_key
    key_file = os.path.join(DATA_DIR, '.secret_key')
    if os.path.exists(key_file):
        with open(key_file, 'rb') as f:
            return f.read()
    key = os.urandom(24)
    os.makedirs(os.path.dirname(key_file), exist_ok=True)
    with open(key_file, 'wb') as f:
        f.write(key)
    return key


app.secret_key = _get_or_create_secret_key()
app.config['MAX_CONTENT_LENGTH'] = MAX_UPLOAD_SIZE
app.json.sort_keys = False


def get_default_settings():
    """Return default settings."""
    return {
        'tournament_name': 'Tournament',
        'sheet_url': '',
        'request_timeout_seconds': 15,
        'refresh_seconds': 0,
        'qualification_groups': list(QUALIFICATION_GROUPS),
        'sheet_aliases': dict(SHEET_ALIASES),
        'skip_sheets': list(SKIP_SHEETS),
        'default_tab': 'groupa',
    }


def load_settings():
    """Load settings from YAML file, merging with defaults.

    The SHEET_URL environment variable takes precedence over the file.
    """
    settings = get_default_settings()
    if os.path.exists(SETTINGS_FILE):
        try:
            with open(SETTINGS_FILE, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
            if data:
                settings.update(data)
        except Exception as e:
            app.logger.warning(f'Failed to parse {SETTINGS_FILE}: {e}')
    env_url = os.environ.get('SHEET_URL')
    if env_url:
        settings['sheet_url'] = env_url
    return settings


class TournamentState:
    """The model currently on display and where it came from.

    A reload builds a complete new model before replacing the old one, so
    readers never see a half-built model.
    """

    def __init__(self):
        self.model = None
        self.source = None
        self.error = None
        self.updated = None
        self.fetched = None

    def is_stale(self, refresh_seconds):
        """True when the next page view should fetch the spreadsheet again.

        An uploaded workbook stays until the next explicit reload.
        """
        if self.model is None:
            return True
        if (self.source or {}).get('source') == 'local':
            return False
        if self.fetched is None:
            return True
        return (datetime.now() - self.fetched).total_seconds() >= refresh_seconds

    def replace(self, model, source):
        self.model = model
        self.source = source
        self.error = None
        self.updated = datetime.now()

    def __repr__(self):
        return f"TournamentState(model={self.model}, source={self.source}, error={self.error})"


_state = TournamentState()


def build_model(workbook, settings):
    """Parse a workbook using the configured sheet mapping."""
    return parse_workbook(
        workbook,
        group_order=settings['qualification_groups'],
        aliases=settings['sheet_aliases'],
        skip_sheets=settings['skip_sheets'],
    )


def reload_tournament():
    """Fetch the spreadsheet and swap in a freshly parsed model.

    On failure the previous model stays in place and the error is recorded.
    """
    settings = load_settings()
    cache_path = os.path.join(DATA_DIR, CACHE_FILENAME)
    _state.fetched = datetime.now()
    try:
        workbook, source = load_remote_workbook(
            settings['sheet_url'], cache_path, settings['request_timeout_seconds'])
    except WorkbookUnavailable as e:
        app.logger.error(f'Tournament data unavailable: {e}')
        _state.error = str(e)
        return False

    _state.replace(build_model(workbook, settings), source)
    if source.get('error'):
        _state.error = source['error']
    app.logger.info(f'Tournament loaded from {source["name"]}: {list(_state.model.keys())}')
    return True


def _ensure_loaded():
    # refresh_seconds: 0 fetches on every page view
    if _state.is_stale(load_settings()['refresh_seconds']):
        reload_tournament()


def last_updated_text(state):
    """Timestamp plus a short description of the data source."""
    if state.updated is None:
        return ''
    text = state.updated.strftime('%B %d, %Y %H:%M')
    source = state.source or {}
    if source.get('source') == 'cloud':
        text += f" | Source: {source['name']}"
    elif source.get('source') == 'local':
        text += f" | Source: {source['name']} (uploaded)"
    elif source.get('modified'):
        text += f" | File: {source['name']} (Modified: {source['modified']})"
    return text


def _get_view_data():
    """Build the template context for the tournament page."""
    settings = load_settings()
    tab = request.args.get('tab') or settings['default_tab']
    return dict(
        model=_state.model,
        current_tab=tab,
        error=_state.error,
        last_updated=last_updated_text(_state),
        tournament_name=settings['tournament_name'],
        display=display,
    )


@app.route('/')
def index():
    """Tabbed standings, matches and knockout bracket."""
    _ensure_loaded()
    return render_template('index.html', **_get_view_data())


@app.route('/api/tournament-html')
def api_tournament_html():
    """Return only the inner HTML of the tab content (partial template)."""
    _ensure_loaded()
    return render_template('tournament_content.html', **_get_view_data())


@app.route('/api/tournament')
def api_tournament():
    """Return the parsed tournament as JSON."""
    _ensure_loaded()
    if _state.model is None:
        return jsonify({'error': _state.error or 'No tournament data loaded'}), 503
    return jsonify({
        'tabs': _state.model.to_dict(),
        'source': _state.source,
        'updated': _state.updated.isoformat() if _state.updated else None,
    })


@app.route('/reload', methods=['POST'])
def reload():
    """Re-fetch the spreadsheet."""
    if reload_tournament():
        if _state.error:
            flash(f'Spreadsheet not reachable, showing cached copy: {_state.error}', 'warning')
        else:
            flash('Tournament data reloaded.', 'success')
    else:
        flash(f'Could not load tournament data: {_state.error}', 'error')
    return redirect(url_for('index', tab=request.form.get('tab') or None))


@app.route('/upload', methods=['POST'])
def upload():
    """Load the tournament from an uploaded xlsx file instead of the published sheet."""
    file = request.files.get('file')
    if not file or not file.filename:
        flash('No file selected.', 'error')
        return redirect(url_for('index'))

    ext = os.path.splitext(file.filename)[1].lower()
    if ext not in ALLOWED_UPLOAD_EXTENSIONS:
        flash('Please upload an .xlsx file.', 'error')
        return redirect(url_for('index'))

    try:
        workbook = decode_workbook(file.read())
    except WorkbookUnavailable as e:
        app.logger.warning(f'Upload rejected: {e}')
        flash(str(e), 'error')
        return redirect(url_for('index'))

    source = {'name': file.filename, 'source': 'local',
              'modified': datetime.now().strftime('%Y-%m-%d %H:%M')}
    _state.replace(build_model(workbook, load_settings()), source)
    app.logger.info(f'Tournament loaded from upload {file.filename}')
    flash(f'Loaded "{file.filename}".', 'success')
    return redirect(url_for('index'))


if __name__ == '__main__':
    app.run(debug=True, port=5000)
