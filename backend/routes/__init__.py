def init_routes(app):
    """Initialize all routes"""
    from .users import users_bp
    from .feeds import feeds_bp
    from .comments import comments_bp
    from .metas import metas_bp
    from .friends import friends_bp
    from .site_config import config_bp
    from .storage import storage_bp

    app.register_blueprint(users_bp, url_prefix='/user')
    app.register_blueprint(feeds_bp, url_prefix='/feed')
    app.register_blueprint(comments_bp, url_prefix='/comment')
    app.register_blueprint(metas_bp, url_prefix='/meta')
    app.register_blueprint(friends_bp, url_prefix='/friend')
    app.register_blueprint(config_bp, url_prefix='/config')
    app.register_blueprint(storage_bp, url_prefix='/storage')
