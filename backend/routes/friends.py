from flask import Blueprint, jsonify
from services.friend_service import FriendService
from utils.payload import json_body
from utils.auth import admin_required, current_identity, login_required

friends_bp = Blueprint('friends', __name__)

@friends_bp.route('', methods=['GET'])
def list_friends():
    """Accepted friend links, plus pending ones for admins"""
    uid, admin = current_identity()
    return jsonify(FriendService().list_friends(uid, admin=admin)), 200

@friends_bp.route('', methods=['POST'])
@login_required
def create_friend():
    """Apply for (or, as admin, add) a friend link"""
    uid, admin = current_identity()
    data = json_body()

    friend = FriendService().create_friend(data, uid, admin=admin)
    return jsonify(friend), 201

@friends_bp.route('/<int:friend_id>', methods=['PUT'])
@login_required
def update_friend(friend_id):
    """Edit a friend link (owner or admin)"""
    uid, admin = current_identity()
    data = json_body()

    friend = FriendService().update_friend(friend_id, data, uid, admin=admin)
    return jsonify(friend), 200

@friends_bp.route('/<int:friend_id>', methods=['DELETE'])
@login_required
def delete_friend(friend_id):
    """Remove a friend link (owner or admin)"""
    uid, admin = current_identity()

    FriendService().delete_friend(friend_id, uid, admin=admin)
    return 'Deleted', 200

@friends_bp.route('/health', methods=['POST'])
@admin_required
def check_health():
    """Probe every friend URL and store the result"""
    results = FriendService().check_health()
    return jsonify({str(friend_id): health for friend_id, health in results.items()}), 200
