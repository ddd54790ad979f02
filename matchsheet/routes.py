from flask import Blueprint, request, jsonify, send_file, current_app
from pydantic import ValidationError
import io

from .assets import AssetResolver
from .document import build_document
from .exporter import run_export, encode_png
from .formations import iter_formations
from .layout import positioned_lineup
from .models import SheetState
from .rasterizer import ExportError, capture
from .state import (
    SheetStore, update_lineup, add_substitute, remove_substitute, update_substitute,
    update_staff, select_formation, update_metadata, set_notes, NEW_SUBSTITUTE_NAME,
    EDITABLE_METADATA_FIELDS
)

# Create blueprint
bp = Blueprint('main', __name__)


def get_store() -> SheetStore:
    return current_app.extensions['matchsheet']['store']


def get_assets() -> AssetResolver:
    return current_app.extensions['matchsheet']['assets']


def serialize_state(state: SheetState) -> dict:
    data = state.model_dump(mode='json')
    data['positioned'] = [p.model_dump(mode='json') for p in positioned_lineup(state)]
    return data


def _error(message: str, status: int = 400):
    return jsonify({'success': False, 'errors': [message]}), status


def _apply(operation, *args, **kwargs):
    """Apply a state operation and answer with the new sheet"""
    try:
        state = get_store().apply(operation, *args, **kwargs)
    except IndexError as e:
        return _error(str(e), 404)
    except (ValueError, ValidationError) as e:
        return _error(str(e))
    return jsonify({'success': True, 'sheet': serialize_state(state)})


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


@bp.route('/api/health')
def health():
    """Health check endpoint"""
    return jsonify({'status': 'healthy', 'service': 'MatchSheet'}), 200


@bp.route('/api/sheet', methods=['GET'])
def get_sheet():
    return jsonify({'success': True, 'sheet': serialize_state(get_store().get())})


@bp.route('/api/sheet', methods=['DELETE'])
def reset_sheet():
    """Start over from the default sheet"""
    state = get_store().reset()
    return jsonify({'success': True, 'sheet': serialize_state(state)})


@bp.route('/api/formations', methods=['GET'])
def list_formations():
    formations = [
        {
            'id': formation.value,
            'positions': [p.model_dump() for p in positions]
        }
        for formation, positions in iter_formations()
    ]
    return jsonify({'success': True, 'formations': formations})


@bp.route('/api/sheet/formation', methods=['PUT'])
def put_formation():
    data = _json_body()
    if not data.get('formation'):
        return _error("Formation is required")
    return _apply(select_formation, data['formation'])


@bp.route('/api/sheet/lineup/<int:index>', methods=['PUT'])
def put_lineup_player(index):
    data = _json_body()
    return _apply(update_lineup, index, data.get('field', ''), str(data.get('value', '')))


@bp.route('/api/sheet/substitutes', methods=['POST'])
def post_substitute():
    data = _json_body()
    return _apply(add_substitute, str(data.get('name') or NEW_SUBSTITUTE_NAME))


@bp.route('/api/sheet/substitutes/<int:index>', methods=['PUT'])
def put_substitute(index):
    data = _json_body()
    return _apply(update_substitute, index, data.get('field', ''), str(data.get('value', '')))


@bp.route('/api/sheet/substitutes/<int:index>', methods=['DELETE'])
def delete_substitute(index):
    return _apply(remove_substitute, index)


@bp.route('/api/sheet/staff/<int:index>', methods=['PUT'])
def put_staff(index):
    data = _json_body()
    return _apply(update_staff, index, str(data.get('name', '')))


@bp.route('/api/sheet/metadata', methods=['PUT'])
def put_metadata():
    data = _json_body()
    unknown = [k for k in data if k not in EDITABLE_METADATA_FIELDS]
    if unknown:
        return _error(f"Unknown metadata fields: {', '.join(sorted(unknown))}")
    # null clears a field
    return _apply(update_metadata, **{k: '' if v is None else str(v) for k, v in data.items()})


@bp.route('/api/sheet/notes', methods=['PUT'])
def put_notes():
    data = _json_body()
    return _apply(set_notes, str(data.get('notes', '')))


@bp.route('/preview.png')
def preview():
    """On-screen rendering of the current sheet at scale 1"""
    assets = get_assets()
    document = build_document(get_store().get(), emblem_available=assets.has('emblem'))
    try:
        content = encode_png(capture(document, 1, assets))
    except ExportError as e:
        current_app.logger.error(f"Preview error: {e}", exc_info=True)
        return _error('Could not render the sheet preview.', 500)
    return send_file(io.BytesIO(content), mimetype='image/png')


@bp.route('/export/<kind>')
def export_sheet(kind):
    """Download the current sheet as PNG or PDF"""
    if kind not in ('png', 'pdf'):
        return _error(f"Unsupported export format: {kind}", 404)

    state = get_store().get()
    current_app.logger.info(f"{kind.upper()} export requested for opponent '{state.metadata.opponent}'")
    artifact = run_export(kind, state, get_assets())
    if artifact is None:
        return _error(f"Could not generate the {kind.upper()} file. Please try again.", 500)

    return send_file(
        io.BytesIO(artifact.content),
        as_attachment=True,
        download_name=artifact.filename,
        mimetype=artifact.mimetype
    )
