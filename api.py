"""
Flask REST API for KeyCalc Web Portal
Exposes the calculator controller and its history as JSON endpoints
"""
import logging
import socket
import threading

from flask import Flask, jsonify, request
from flask_cors import CORS

import config
from calculator import Calculator
from database import Database
from errors import HistoryEntryNotFound, HistoryUnavailable, UnknownAction
from history_manager import HistoryManager

logger = logging.getLogger(__name__)

HISTORY_ERROR_STATUS = {
    HistoryEntryNotFound.code: 404,
    HistoryUnavailable.code: 409,
}


def build_calculator(db_path=config.DB_PATH):
    """Wire a calculator to its SQLite-backed history"""
    db = Database(db_path)
    return Calculator(history=HistoryManager(db))


def create_app(calculator=None):
    app = Flask(__name__)
    CORS(app)  # Enable CORS for all routes

    calc = calculator if calculator is not None else build_calculator()
    # The controller is not safe under interleaving; one lock guards all of it
    lock = threading.Lock()
    app.config['CALCULATOR'] = calc

    def respond(state):
        return jsonify({'success': True, 'data': state})

    def respond_history(state):
        # Missing entries and a missing history are client errors, not 500s
        status = HISTORY_ERROR_STATUS.get(state['error_code'])
        if status:
            return jsonify({'success': False, 'error': state['error_message'],
                            'code': state['error_code']}), status
        return respond(state)

    @app.route('/api')
    def api_info():
        """API information"""
        return jsonify({
            'success': True,
            'data': {
                'name': config.APP_NAME,
                'version': config.VERSION,
                'endpoints': [
                    'GET /api/state',
                    'POST /api/actions',
                    'POST /api/evaluate',
                    'GET /api/history',
                    'DELETE /api/history',
                    'POST /api/history/<id>/pin',
                    'POST /api/history/<id>/reuse',
                    'POST /api/history/clear',
                    'GET /api/memory',
                ],
            }
        })

    @app.route('/api/state')
    def get_state():
        """Get the current display, equation and history"""
        try:
            with lock:
                return respond(calc.state())
        except Exception as e:
            logger.exception("Failed to read state")
            return jsonify({'success': False, 'error': str(e)}), 500

    @app.route('/api/actions', methods=['POST'])
    def post_action():
        """Send one key press"""
        payload = request.get_json(silent=True) or {}
        action = payload.get('action')
        if action is None:
            return jsonify({'success': False, 'error': "Missing 'action'"}), 400
        try:
            with lock:
                return respond(calc.handle(action))
        except UnknownAction as e:
            return jsonify({'success': False, 'error': e.message, 'code': e.code}), 400
        except Exception as e:
            logger.exception("Action %r failed", action)
            return jsonify({'success': False, 'error': str(e)}), 500

    @app.route('/api/evaluate', methods=['POST'])
    def post_evaluate():
        """Evaluate the current expression"""
        try:
            with lock:
                return respond(calc.evaluate())
        except Exception as e:
            logger.exception("Evaluation failed")
            return jsonify({'success': False, 'error': str(e)}), 500

    @app.route('/api/history')
    def get_history():
        """Get calculation history, optionally filtered with ?q="""
        try:
            query = request.args.get('q', '')
            with lock:
                entries = calc.search_history(query)
            return jsonify({'success': True, 'data': entries, 'count': len(entries)})
        except Exception as e:
            logger.exception("Failed to read history")
            return jsonify({'success': False, 'error': str(e)}), 500

    @app.route('/api/history', methods=['DELETE'])
    def delete_history():
        """Delete history entries by id"""
        payload = request.get_json(silent=True) or {}
        ids = payload.get('ids')
        if not isinstance(ids, list):
            return jsonify({'success': False, 'error': "Expected a list of 'ids'"}), 400
        try:
            with lock:
                state = calc.delete_history(ids)
        except Exception as e:
            logger.exception("Failed to delete history")
            return jsonify({'success': False, 'error': str(e)}), 500
        return respond_history(state)

    def history_entry_action(entry_id, operation):
        try:
            with lock:
                state = operation(entry_id)
        except Exception as e:
            logger.exception("History operation failed for %s", entry_id)
            return jsonify({'success': False, 'error': str(e)}), 500
        return respond_history(state)

    @app.route('/api/history/clear', methods=['POST'])
    def clear_history():
        """Delete every history entry"""
        try:
            with lock:
                state = calc.clear_history()
        except Exception as e:
            logger.exception("Failed to clear history")
            return jsonify({'success': False, 'error': str(e)}), 500
        return respond_history(state)

    @app.route('/api/history/<entry_id>/pin', methods=['POST'])
    def pin_history(entry_id):
        """Pin or unpin a history entry"""
        return history_entry_action(entry_id, calc.toggle_pin)

    @app.route('/api/history/<entry_id>/reuse', methods=['POST'])
    def reuse_history(entry_id):
        """Load a stored result into the calculator"""
        return history_entry_action(entry_id, calc.reuse_history_entry)

    @app.route('/api/memory')
    def get_memory():
        with lock:
            return jsonify({'success': True, 'data': {'memory_value': calc.memory}})

    return app


def get_local_ip():
    try:
        s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        # doesn't even have to be reachable
        s.connect(('10.255.255.255', 1))
        ip = s.getsockname()[0]
        s.close()
    except OSError:
        ip = '127.0.0.1'
    return ip


def main():
    config.setup_logging()
    app = create_app()

    print("\n" + "="*60)
    print(f"{config.APP_NAME} Web Portal API Server")
    print("="*60)
    print(f"Server starting on http://{config.WEB_HOST}:{config.WEB_PORT}")
    print(f"Access from this device: http://localhost:{config.WEB_PORT}")
    if config.WEB_HOST == '0.0.0.0':
        print(f"Access from network: http://{get_local_ip()}:{config.WEB_PORT}")
    print("="*60 + "\n")

    try:
        app.run(host=config.WEB_HOST, port=config.WEB_PORT, debug=False)
    finally:
        app.config['CALCULATOR'].close()


if __name__ == '__main__':
    main()
