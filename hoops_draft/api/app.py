"""Flask API for the hoops draft game."""
import logging
from datetime import datetime
from typing import Callable, Optional
from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
from hoops_draft.services.draft_service import DraftService
from hoops_draft.services.draft_store import DraftStore
from hoops_draft.services.errors import DraftGameError, NotFoundError
from hoops_draft.services.game_config import GameConfig, LEADERBOARD_LIMIT
from hoops_draft.services.reference_data import ReferenceData
from hoops_draft.services.rng import RandomSource
from hoops_draft.services.run_service import RunService
from hoops_draft.api.validators import validate_pick_request, validate_start_request

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = 'nba_draft_session'
SESSION_COOKIE_MAX_AGE = 12 * 60 * 60


def create_app(
    config: Optional[GameConfig] = None,
    reference: Optional[ReferenceData] = None,
    store: Optional[DraftStore] = None,
    clock: Optional[Callable[[], datetime]] = None,
    rng: Optional[RandomSource] = None
) -> Flask:
    """
    Build the Flask app and its services.

    Anything not passed in is built from config (GameConfig.from_env() by default).
    """
    if config is None:
        config = GameConfig.from_env()
    if reference is None:
        reference = ReferenceData.from_directory(config.resolved_data_dir())
    if store is None:
        store = DraftStore(config.resolved_store_dir())

    draft_service = DraftService(reference, store, config=config, clock=clock, rng=rng)
    run_service = RunService(store)

    app = Flask(__name__)
    CORS(app, supports_credentials=True)

    # Global error handlers to ensure all errors return JSON
    @app.errorhandler(DraftGameError)
    def handle_game_error(error):
        return jsonify({
            'success': False,
            'error': type(error).__name__,
            'message': str(error)
        }), error.status_code

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({
            'success': False,
            'error': 'Not found',
            'message': 'The requested resource was not found'
        }), 404

    @app.errorhandler(Exception)
    def handle_exception(error):
        if isinstance(error, HTTPException):
            return jsonify({
                'success': False,
                'error': error.name,
                'message': error.description
            }), error.code
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({
            'success': False,
            'error': type(error).__name__,
            'message': 'An internal error occurred'
        }), 500

    def _session_token() -> Optional[str]:
        return request.cookies.get(SESSION_COOKIE_NAME)

    @app.route('/api/game/start', methods=['POST'])
    def start_game():
        """Start a new game and hand its token back in the session cookie."""
        group_code, seed = validate_start_request(request.get_json(silent=True))
        session = draft_service.create_session(group_code=group_code, seed=seed)
        view = draft_service.get_view(session.session_token)

        response = jsonify({
            'success': True,
            'draft': view.to_dict()
        })
        response.set_cookie(
            SESSION_COOKIE_NAME,
            session.session_token,
            max_age=SESSION_COOKIE_MAX_AGE,
            httponly=True,
            samesite='Lax'
        )
        return response

    @app.route('/api/draft', methods=['GET'])
    def get_draft():
        """Get the current session, catching up any expired shot clocks."""
        token = _session_token()
        view = draft_service.get_view(token) if token else None
        if view is None:
            raise NotFoundError('No active draft. Start a new game.')
        return jsonify({
            'success': True,
            'draft': view.to_dict()
        })

    @app.route('/api/draft/pick', methods=['POST'])
    def make_pick():
        """Lock a player from the current team into a slot."""
        token = _session_token()
        if not token:
            raise NotFoundError('No active draft. Start a new game.')

        player_name, slot = validate_pick_request(request.get_json(silent=True))
        result = draft_service.submit_pick(token, player_name, slot)
        return jsonify({
            'success': True,
            **result.to_dict()
        })

    @app.route('/api/game/reset', methods=['POST'])
    def reset_game():
        response = jsonify({'success': True})
        response.delete_cookie(SESSION_COOKIE_NAME, httponly=True, samesite='Lax')
        return response

    @app.route('/api/results/<share_code>', methods=['GET'])
    def get_results(share_code):
        run = run_service.get_run_by_share_code(share_code)
        if run is None:
            raise NotFoundError(f'No run found for share code {share_code}.')
        return jsonify({
            'success': True,
            'run': run.to_dict()
        })

    @app.route('/api/leaderboard', methods=['GET'])
    def get_leaderboard():
        """Top runs, optionally for one group."""
        group_code = request.args.get('group')
        runs = run_service.list_leaderboard(group_code=group_code, limit=LEADERBOARD_LIMIT)
        return jsonify({
            'success': True,
            'group_code': group_code or None,
            'runs': [run.to_dict() for run in runs]
        })

    @app.route('/api/teams', methods=['GET'])
    def get_teams():
        return jsonify({
            'success': True,
            'teams': [
                {**team.to_dict(), 'logo_url': reference.get_team_logo_url(team.abbr)}
                for team in reference.get_all_teams()
            ]
        })

    return app


if __name__ == '__main__':
    create_app().run(debug=True, port=5001)
