from flask import Flask, jsonify, render_template, request

import wallet
from config import Config
from generation import ImageGenerator
from mint_tracker import MintTracker
from minter import NFTMinter
from models import ErrorKind
from orchestrator import MintOrchestrator
from pinning import PinataClient

STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.INSUFFICIENT_FUNDS: 402,
    ErrorKind.BUSY: 409,
    ErrorKind.GENERATION: 502,
    ErrorKind.UPLOAD: 502,
    ErrorKind.CONNECTIVITY: 503,
    ErrorKind.REJECTED: 400,
    ErrorKind.TRANSACTION: 500,
}


def build_orchestrator(config, logger, tracker=None):
    generator = ImageGenerator(
        api_key=config.HUGGING_FACE_API_KEY,
        model_url=config.HUGGING_FACE_MODEL_URL,
        timeout=config.GENERATION_TIMEOUT,
        log=logger
    )
    pinner = PinataClient(
        api_key=config.PINATA_API_KEY,
        secret_api_key=config.PINATA_SECRET_API_KEY,
        pin_file_url=config.PINATA_PIN_FILE_URL,
        gateway_url=config.PINATA_GATEWAY_URL,
        timeout=config.PINNING_TIMEOUT,
        log=logger
    )
    return MintOrchestrator(generator, pinner, NFTMinter(log=logger), tracker=tracker or MintTracker(), log=logger)


def create_app(config=None, orchestrator=None, session_loader=None):
    config = config or Config()

    app = Flask(__name__)
    app.config.from_object(config)

    for key in config.missing_keys():
        app.logger.warning(f'WARNING: {key} not found. Minting will not work until it is set.')

    orchestrator = orchestrator or build_orchestrator(config, app.logger)

    # Session is derived lazily and replaced whole on refresh
    state = {'session': None}
    session_loader = session_loader or (lambda: wallet.refresh(state['session'], config, log=app.logger))

    def current_session():
        if state['session'] is None:
            state['session'] = session_loader()
        return state['session']

    @app.route('/')
    def index():
        # Every page load re-detects the wallet and network
        state['session'] = session_loader()
        session = state['session']
        return render_template(
            'index.html',
            session=session.to_dict(),
            network_name=config.network_name
        )

    @app.route('/api/session', methods=['GET'])
    def get_session():
        return jsonify(current_session().to_dict())

    @app.route('/api/session/refresh', methods=['POST'])
    def refresh_session():
        try:
            state['session'] = session_loader()
            app.logger.info(f"Session refreshed: {state['session'].to_dict()}")
            return jsonify(state['session'].to_dict())
        except Exception as e:
            app.logger.error(f'Error refreshing session: {str(e)}')
            return jsonify({'error': str(e)}), 500

    @app.route('/api/mint', methods=['POST'])
    def mint():
        data = request.get_json(silent=True) if request.is_json else request.form
        data = data or {}
        name = data.get('name', '')
        description = data.get('description', '')

        app.logger.info(f'Mint requested: {name!r}')
        try:
            outcome = orchestrator.submit(name, description, current_session())
        except Exception as e:
            app.logger.error(f'Error minting NFT: {str(e)}')
            return jsonify({'error': str(e)}), 500

        if outcome.success:
            return jsonify(outcome.to_dict())
        return jsonify(outcome.to_dict()), STATUS_CODES.get(outcome.kind, 500)

    @app.route('/api/mint/<mint_id>', methods=['GET'])
    def mint_status(mint_id):
        status = orchestrator.tracker.get_status(mint_id)
        if 'error' in status:
            return jsonify(status), 404
        return jsonify(status)

    @app.route('/api/status', methods=['GET'])
    def status():
        return jsonify(orchestrator.tracker.current())

    return app


if __name__ == '__main__':
    settings = Config()
    app = create_app(settings)
    app.run(host='0.0.0.0', port=settings.PORT, debug=settings.DEBUG)
