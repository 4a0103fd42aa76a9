from flask import Blueprint, jsonify
from services.user_service import UserService
from utils.payload import json_body
from utils.auth import current_user, login_required

users_bp = Blueprint('users', __name__)

@users_bp.route('/register', methods=['POST'])
def register():
    """Register a new user"""
    data = json_body()

    result = UserService().register(data.get('username'), data.get('password'), data.get('avatar'))
    return jsonify(result), 201

@users_bp.route('/login', methods=['POST'])
def login():
    """Login existing user"""
    data = json_body()

    result = UserService().login(data.get('username'), data.get('password'))
    return jsonify(result), 200

@users_bp.route('/profile', methods=['GET'])
@login_required
def profile():
    """Current user"""
    return jsonify(current_user().to_dict()), 200
