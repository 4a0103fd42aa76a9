import logging
import os
import uuid

from flask import Blueprint, request, jsonify, send_from_directory, url_for
from werkzeug.utils import secure_filename
from config import Config
from utils.auth import admin_required

logger = logging.getLogger(__name__)

storage_bp = Blueprint('storage', __name__)

@storage_bp.route('', methods=['POST'])
@admin_required
def upload_file():
    """Save an uploaded file under STORAGE_PATH and return its URL"""
    file = request.files.get('file')
    if file is None or not file.filename:
        return 'File is required', 400

    filename = secure_filename(file.filename) or 'upload'
    stored_name = f'{uuid.uuid4().hex[:12]}-{filename}'

    os.makedirs(Config.STORAGE_PATH, exist_ok=True)
    file.save(os.path.join(Config.STORAGE_PATH, stored_name))
    logger.info("Stored upload %s", stored_name)

    return jsonify({'url': url_for('storage.get_file', filename=stored_name)}), 201

@storage_bp.route('/<path:filename>', methods=['GET'])
def get_file(filename):
    """Serve a previously uploaded file"""
    return send_from_directory(Config.STORAGE_PATH, filename)
