from flask import Blueprint, current_app, g, jsonify, request

from routes.auth import login_required
from utils.errors import ValidationFailure

entries_bp = Blueprint('entries', __name__, url_prefix='/entries')


def entry_store():
    return current_app.extensions['entry_store']


@entries_bp.route('', methods=['GET'])
@login_required
def list_entries():
    entries = entry_store().list_for(g.user.id)
    return jsonify([e.to_dict() for e in entries])


@entries_bp.route('', methods=['POST'])
@login_required
def create_entry():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationFailure('Request body must be a JSON object')
    # Older clients send "type" instead of "kind"
    kind = body.get('kind', body.get('type'))
    entry = entry_store().create(g.user.id, kind=kind, content=body.get('content'), title=body.get('title'))
    return jsonify(entry.to_dict()), 201


@entries_bp.route('/<entry_id>', methods=['DELETE'])
@login_required
def delete_entry(entry_id):
    entry_store().delete(g.user.id, entry_id)
    return jsonify({'message': 'Entry deleted successfully'})
