"""
MatchSheet - Flask Application

Copyright (c) 2025 [Your Name]. All Rights Reserved.
This software is proprietary and confidential. Unauthorized copying, modification,
distribution, or use of this software, via any medium, is strictly prohibited.
"""

from flask import Flask, request, jsonify
import logging
import os
import sys

# Load environment variables from .env file
try:
    from dotenv import load_dotenv
    load_dotenv()
except ImportError:
    pass  # python-dotenv not installed, skip

from .routes import bp
from .assets import AssetResolver, create_default_resolver
from .state import SheetStore
from . import config


def create_app(store: SheetStore = None, assets: AssetResolver = None):
    """Create and configure the Flask application"""
    app = Flask(__name__)

    app.json.ensure_ascii = False
    app.config['MAX_CONTENT_LENGTH'] = 1 * 1024 * 1024  # Sheet edits are small JSON bodies

    if not app.debug:
        logging.basicConfig(
            level=os.environ.get('LOG_LEVEL', 'INFO'),
            format='%(asctime)s %(levelname)s %(name)s: %(message)s'
        )

    # One sheet per application session
    app.extensions['matchsheet'] = {
        'store': store if store is not None else SheetStore(),
        'assets': assets if assets is not None else create_default_resolver(),
    }

    app.register_blueprint(bp)

    @app.errorhandler(500)
    def handle_500_error(e):
        """Return JSON for API errors - sanitized to prevent information leakage"""
        if request.path.startswith('/api/') or request.path.startswith('/export/'):
            app.logger.error(f"500 error on {request.path}: {e}", exc_info=True)
            return jsonify({
                'success': False,
                'errors': ['An internal error occurred. Please try again later.']
            }), 500
        return e

    return app


def main():
    """Main entry point - Development only"""
    flask_env = os.environ.get('FLASK_ENV', '').strip().lower()
    if flask_env == 'production':
        print("ERROR: Flask development server cannot run in production mode.")
        print("Use gunicorn or another production WSGI server instead:")
        print("  gunicorn wsgi:app")
        sys.exit(1)

    app = create_app()

    print("MatchSheet starting in DEVELOPMENT mode...")
    print(f"Preview at http://{config.HOST}:{config.PORT}/preview.png")
    print("Press Ctrl+C to stop the application")

    try:
        app.run(host=config.HOST, port=config.PORT, debug=False)
    except KeyboardInterrupt:
        print("\nShutting down MatchSheet...")


if __name__ == '__main__':
    main()
