from flask import Blueprint, request, jsonify
from services.config_service import ConfigService
from utils.auth import current_identity

config_bp = Blueprint('config', __name__)

@config_bp.route('/<config_type>', methods=['GET'])
def get_config(config_type):
    """Read client (public) or server (admin) settings"""
    store = ConfigService(config_type)
    _, admin = current_identity()
    if config_type == 'server' and not admin:
        return 'Permission denied', 403

    return jsonify(store.all()), 200

@config_bp.route('/<config_type>', methods=['POST'])
def update_config(config_type):
    """Merge a JSON object into the stored settings (admin only)"""
    store = ConfigService(config_type)
    _, admin = current_identity()
    if not admin:
        return 'Permission denied', 403

    store.update(request.get_json(silent=True))
    return 'Updated', 200
