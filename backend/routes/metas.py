from flask import Blueprint, request, jsonify
from services.meta_service import MetaService
from utils.auth import current_identity

metas_bp = Blueprint('metas', __name__)

@metas_bp.route('', methods=['GET'])
def list_metas():
    """List tags and categories with feed counts; query param type"""
    meta_type = request.args.get('type') or None
    return jsonify(MetaService().list_metas(meta_type)), 200

@metas_bp.route('/<name>', methods=['GET'])
def get_meta(name):
    """Get a tag or category by alias or name, with its feeds"""
    _, admin = current_identity()
    return jsonify(MetaService().get_meta(name, admin=admin)), 200
