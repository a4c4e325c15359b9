"""Flask web application for GiftGenie."""

import logging
import os

from flask import Flask, jsonify, request

from config import LOG_LEVEL
from giftgenie.models import GiftRecommendation, UserProfile, ViewMode
from giftgenie.services import AppService


logger = logging.getLogger(__name__)


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def create_app(app_service: AppService | None = None) -> Flask:
    """Build the Flask app around one AppService (one per process)."""
    app = Flask(__name__)
    app.json.ensure_ascii = False
    service = app_service if app_service is not None else AppService()
    app.extensions['giftgenie'] = service

    @app.route('/api/state', methods=['GET'])
    def get_state():
        """Return the full client state."""
        return jsonify(service.state.to_dict())

    @app.route('/api/recommendations', methods=['POST'])
    def submit_profile():
        """Fetch gift recommendations for a recipient profile."""
        data = _json_body()
        profile = UserProfile.from_dict(data)

        missing = profile.missing_fields()
        if missing:
            return jsonify({'error': f"Missing required fields: {', '.join(missing)}"}), 400

        state = service.submit(profile)
        if state.error:
            return jsonify({
                'success': False,
                'error': state.error,
                'state': state.to_dict(),
            }), 502

        return jsonify({
            'success': True,
            'recommendations': [r.to_dict() for r in state.recommendations],
            'state': state.to_dict(),
        })

    @app.route('/api/recommendations', methods=['GET'])
    def get_recommendations():
        state = service.state
        return jsonify({'recommendations': [r.to_dict() for r in state.recommendations]})

    @app.route('/api/favorites', methods=['GET'])
    def get_favorites():
        state = service.state
        return jsonify({'favorites': [f.to_dict() for f in state.favorites.values()]})

    @app.route('/api/favorites/toggle', methods=['POST'])
    def toggle_favorite():
        """Save or unsave a gift."""
        data = _json_body()
        gift_data = data.get('gift', data)

        try:
            gift = GiftRecommendation.from_dict(gift_data)
        except ValueError as e:
            return jsonify({'error': f'Invalid gift: {e}'}), 400

        favorited = service.toggle_favorite(gift)
        state = service.state
        return jsonify({
            'success': True,
            'favorited': favorited,
            'favorites': [f.to_dict() for f in state.favorites.values()],
        })

    @app.route('/api/view-mode', methods=['POST'])
    def change_view_mode():
        """Switch between results and saved gifts. An empty body flips the mode."""
        data = _json_body()
        mode = data.get('mode')

        if mode is None:
            state = service.toggle_view_mode()
        else:
            try:
                state = service.set_view_mode(ViewMode(mode))
            except ValueError:
                return jsonify({'error': f'Unknown view mode: {mode}'}), 400

        return jsonify(state.to_dict())

    return app


# Served with `flask --app app run` or `gunicorn "app:create_app()"`; both call the factory.
if __name__ == '__main__':
    logging.basicConfig(level=LOG_LEVEL, format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    if not os.environ.get('GEMINI_API_KEY') and not os.environ.get('GOOGLE_API_KEY'):
        logger.warning("GEMINI_API_KEY or GOOGLE_API_KEY environment variable not set")

    app = create_app()
    port = int(os.environ.get('PORT', 5000))
    app.run(debug=False, host='0.0.0.0', port=port)
