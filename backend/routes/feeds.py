from flask import Blueprint, request, jsonify
from services.feed_service import FeedService, FeedError
from utils.payload import json_body
from utils.auth import current_identity

feeds_bp = Blueprint('feeds', __name__)

@feeds_bp.route('', methods=['GET'])
def list_feeds():
    """List feeds; query params page, limit, type (publish/draft/private)"""
    _, admin = current_identity()

    data = FeedService().list_feeds(
        page=request.args.get('page'),
        limit=request.args.get('limit'),
        feed_type=request.args.get('type'),
        admin=admin
    )
    return jsonify(data), 200

@feeds_bp.route('/timeline', methods=['GET'])
def timeline():
    """All published posts, titles only"""
    return jsonify(FeedService().timeline()), 200

@feeds_bp.route('', methods=['POST'])
def create_feed():
    """Create a feed (admin only)"""
    uid, admin = current_identity()
    data = json_body()

    result = FeedService().create_feed(data, uid=uid, admin=admin)
    return jsonify(result), 200

@feeds_bp.route('/<key>', methods=['GET'])
def get_feed(key):
    """Get a feed by id or alias"""
    uid, admin = current_identity()

    feed = FeedService().get_feed(key, uid=uid, admin=admin)
    return jsonify(feed), 200

@feeds_bp.route('/<int:feed_id>', methods=['POST'])
def update_feed(feed_id):
    """Update a feed (owner or admin)"""
    uid, admin = current_identity()
    data = json_body()

    FeedService().update_feed(feed_id, data, uid=uid, admin=admin)
    return 'Updated', 200

@feeds_bp.route('/top/<int:feed_id>', methods=['POST'])
def set_top(feed_id):
    """Pin or unpin a feed; body {"top": int}"""
    uid, admin = current_identity()
    data = json_body()
    if 'top' not in data:
        raise FeedError('top is required', 400)

    FeedService().set_top(feed_id, data['top'], uid=uid, admin=admin)
    return 'Updated', 200

@feeds_bp.route('/<int:feed_id>', methods=['DELETE'])
def delete_feed(feed_id):
    """Delete a feed (owner or admin)"""
    uid, admin = current_identity()

    FeedService().delete_feed(feed_id, uid=uid, admin=admin)
    return 'Deleted', 200

@feeds_bp.route('/search/<keyword>', methods=['GET'])
def search_feeds(keyword):
    """Search feeds by keyword; query params page, limit"""
    _, admin = current_identity()

    data = FeedService().search(
        keyword,
        page=request.args.get('page'),
        limit=request.args.get('limit'),
        admin=admin
    )
    return jsonify(data), 200
