from flask import Blueprint, jsonify
from services.comment_service import CommentService
from utils.payload import json_body
from utils.auth import current_identity, login_required

comments_bp = Blueprint('comments', __name__)

@comments_bp.route('/<int:feed_id>', methods=['GET'])
def list_comments(feed_id):
    """List comments of a feed, newest first"""
    return jsonify(CommentService().list_comments(feed_id)), 200

@comments_bp.route('/<int:feed_id>', methods=['POST'])
@login_required
def create_comment(feed_id):
    """Comment on a feed"""
    uid, _ = current_identity()
    data = json_body()

    comment = CommentService().create_comment(feed_id, uid, data.get('content'))
    return jsonify(comment), 201

@comments_bp.route('/<int:comment_id>', methods=['DELETE'])
@login_required
def delete_comment(comment_id):
    """Delete a comment (author or admin)"""
    uid, admin = current_identity()

    CommentService().delete_comment(comment_id, uid, admin=admin)
    return 'Deleted', 200
