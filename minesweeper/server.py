"""Flask server for Minesweeper game."""
import asyncio
import logging
from datetime import datetime
from flask import Flask, request, jsonify
from flask_cors import CORS
from temporalio.client import Client
import uuid

from minesweeper.activities import build_view, open_leaderboard
from minesweeper.config import get_port, get_store, get_task_queue, get_temporal_client
from minesweeper.display import format_counter
from minesweeper.leaderboard import LeaderboardStore
from minesweeper.settings import load_settings, update_settings
from minesweeper.types import Difficulty, GameConfig, MoveRequest, config_for, custom_config
from minesweeper.workflows import MOVE_ACTIONS, MinesweeperWorkflow

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app)

# Global client reference
temporal_client: Client | None = None


def get_attr(obj, key):
    """Get attribute from either dict or object."""
    if isinstance(obj, dict):
        return obj.get(key)
    return getattr(obj, key, None)


def enum_value(value):
    return value.value if hasattr(value, 'value') else value


def serialize_game_state(game_state):
    """Convert a game snapshot to JSON-serializable format."""
    if not game_state:
        return None

    cells = []
    board = get_attr(game_state, 'board')
    board_cells = get_attr(board, 'cells') if board else None
    for row in board_cells or []:
        cells.append([{
            'isMine': get_attr(cell, 'is_mine'),
            'isOpen': get_attr(cell, 'is_open'),
            'isFlagged': get_attr(cell, 'is_flagged'),
            'isWrongFlag': get_attr(cell, 'is_wrong_flag'),
            'adjacent': get_attr(cell, 'adjacent'),
        } for cell in row])

    config = get_attr(game_state, 'config')
    outcome = get_attr(game_state, 'last_outcome')
    mines_left = get_attr(game_state, 'mines_left') or 0
    elapsed = get_attr(game_state, 'elapsed') or 0

    return {
        'id': get_attr(game_state, 'id'),
        'config': {
            'rows': get_attr(config, 'rows'),
            'cols': get_attr(config, 'cols'),
            'mines': get_attr(config, 'mines'),
        } if config else None,
        'configKey': get_attr(game_state, 'config_key'),
        'difficulty': enum_value(get_attr(game_state, 'difficulty')),
        'board': {'cells': cells},
        'status': str(enum_value(get_attr(game_state, 'status')) or 'READY').upper(),
        'statusLabel': get_attr(game_state, 'status_label'),
        'minesLeft': mines_left,
        'minesLeftDisplay': format_counter(mines_left),
        'elapsed': elapsed,
        'timerDisplay': format_counter(elapsed),
        'hintsUsed': get_attr(game_state, 'hints_used'),
        'activeCell': [get_attr(game_state, 'active_row'), get_attr(game_state, 'active_col')],
        'lastOutcome': {
            'changed': get_attr(outcome, 'changed'),
            'sound': get_attr(outcome, 'sound'),
            'message': get_attr(outcome, 'message'),
            'hint': get_attr(outcome, 'hint'),
        } if outcome else None,
    }


def serialize_leaderboard(view):
    return {
        'key': view.key,
        'label': view.label,
        'entries': [{'name': entry.name, 'time': entry.time} for entry in view.entries],
        'lines': view.lines,
        'empty': not view.entries,
    }


def parse_config(data) -> GameConfig:
    """Build a config from a preset name or explicit dimensions.

    Raises ValueError when the request does not describe a valid board.
    """
    data = data or {}
    if not isinstance(data, dict):
        raise ValueError('Invalid game configuration')
    difficulty = data.get('difficulty')
    config_data = data.get('config') or {}
    if not isinstance(config_data, dict):
        raise ValueError('Invalid game configuration')

    if difficulty == Difficulty.CUSTOM.value:
        return custom_config(config_data.get('cols'), config_data.get('rows'), config_data.get('mines'))
    if difficulty:
        return config_for(Difficulty(difficulty))

    if not all(isinstance(config_data.get(key), int) for key in ('rows', 'cols', 'mines')):
        raise ValueError('Invalid game configuration')
    config = GameConfig(rows=config_data['rows'], cols=config_data['cols'], mines=config_data['mines'])
    config.validate()
    return config


async def query_with_retry(handle, query, max_retries=5):
    """Query with retry logic for workflow initialization."""
    for i in range(max_retries):
        try:
            result = await handle.query(query)
            if result is not None or i == max_retries - 1:
                return result
        except Exception as error:
            if i == max_retries - 1:
                raise error
        logger.info(f"Query not ready yet, retrying in {(i + 1) * 100}ms...")
        await asyncio.sleep((i + 1) * 0.1)


@app.route('/api/games', methods=['POST'])
def create_game():
    """Create a new game."""
    try:
        config = parse_config(request.get_json(silent=True))
    except ValueError as error:
        return jsonify({'error': str(error)}), 400

    try:
        game_id = str(uuid.uuid4())

        async def start_workflow():
            await temporal_client.start_workflow(
                MinesweeperWorkflow.run,
                args=[game_id, config],
                id=game_id,
                task_queue=get_task_queue()
            )

            handle = temporal_client.get_workflow_handle(game_id)
            return await query_with_retry(handle, MinesweeperWorkflow.get_game_state_query)

        game_state = asyncio.run(start_workflow())
        return jsonify({'gameState': serialize_game_state(game_state)})

    except Exception as error:
        logger.error(f"Error creating game: {error}")
        return jsonify({'error': 'Failed to create game'}), 500


@app.route('/api/games/<game_id>', methods=['GET'])
def get_game_state(game_id):
    """Get game state."""
    try:
        async def query_game():
            handle = temporal_client.get_workflow_handle(game_id)
            return await query_with_retry(handle, MinesweeperWorkflow.get_game_state_query)

        game_state = asyncio.run(query_game())
        return jsonify({'gameState': serialize_game_state(game_state)})

    except Exception as error:
        logger.error(f"Error getting game state: {error}")
        return jsonify({'error': 'Game not found'}), 404


@app.route('/api/games/<game_id>/moves', methods=['POST'])
def make_move(game_id):
    """Make a move."""
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict) or \
       data.get('action') not in MOVE_ACTIONS or \
       not isinstance(data.get('row', 0), int) or \
       not isinstance(data.get('col', 0), int):
        return jsonify({'error': 'Invalid move request'}), 400

    move_request = MoveRequest(
        action=data['action'],
        row=data.get('row', 0),
        col=data.get('col', 0),
    )

    try:
        async def execute_move():
            handle = temporal_client.get_workflow_handle(game_id)
            return await handle.execute_update(MinesweeperWorkflow.make_move_update, move_request)

        game_state = asyncio.run(execute_move())
        return jsonify({'gameState': serialize_game_state(game_state)})

    except Exception as error:
        logger.error(f"Error making move: {error}")
        return jsonify({'error': 'Failed to make move'}), 500


@app.route('/api/games/<game_id>/restart', methods=['POST'])
def restart_game(game_id):
    """Start a new game on the same workflow."""
    try:
        config = parse_config(request.get_json(silent=True))
    except ValueError as error:
        return jsonify({'error': str(error)}), 400

    try:
        async def execute_restart():
            handle = temporal_client.get_workflow_handle(game_id)
            return await handle.execute_update(MinesweeperWorkflow.restart_game_update, config)

        game_state = asyncio.run(execute_restart())
        return jsonify({'gameState': serialize_game_state(game_state)})

    except Exception as error:
        logger.error(f"Error restarting game: {error}")
        return jsonify({'error': 'Failed to restart game'}), 500


@app.route('/api/games/<game_id>/close', methods=['POST'])
def close_game(game_id):
    try:
        async def send_close():
            handle = temporal_client.get_workflow_handle(game_id)
            await handle.signal(MinesweeperWorkflow.close_game_signal)

        asyncio.run(send_close())
        return jsonify({'closed': True})

    except Exception as error:
        logger.error(f"Error closing game: {error}")
        return jsonify({'error': 'Failed to close game'}), 500


@app.route('/api/leaderboard', methods=['GET'])
def get_leaderboard():
    """Ranked best times for one configuration."""
    args = request.args
    try:
        if args.get('difficulty'):
            config = parse_config({'difficulty': args['difficulty'], 'config': {
                key: args.get(key, type=int) for key in ('rows', 'cols', 'mines')
            }})
        else:
            config = parse_config({'config': {
                key: args.get(key, type=int) for key in ('rows', 'cols', 'mines')
            }})
    except ValueError as error:
        return jsonify({'error': str(error)}), 400

    return jsonify({'leaderboard': serialize_leaderboard(build_view(config, open_leaderboard()))})


@app.route('/api/leaderboard', methods=['DELETE'])
def clear_leaderboard():
    LeaderboardStore(get_store()).clear()
    logger.info("Leaderboard cleared")
    return jsonify({'cleared': True})


@app.route('/api/settings', methods=['GET'])
def get_settings():
    settings = load_settings(get_store())
    return jsonify({'soundEnabled': settings.sound_enabled, 'nickname': settings.nickname})


@app.route('/api/settings', methods=['PUT'])
def put_settings():
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Invalid settings'}), 400
    store = get_store()
    settings = update_settings(
        store,
        load_settings(store),
        sound_enabled=data.get('soundEnabled'),
        nickname=data.get('nickname'),
    )
    return jsonify({'soundEnabled': settings.sound_enabled, 'nickname': settings.nickname})


@app.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({
        'status': 'OK',
        'timestamp': datetime.now().isoformat()
    })


async def initialize_client():
    """Initialize Temporal client."""
    global temporal_client
    temporal_client = await get_temporal_client()
    logger.info("Connected to Temporal server")


def main():
    """Start the Flask server."""
    try:
        asyncio.run(initialize_client())

        port = get_port()
        logger.info(f"Minesweeper server running on http://localhost:{port}")
        logger.info("Make sure to start the Temporal worker in another terminal: python -m minesweeper.worker")

        app.run(host='0.0.0.0', port=port, debug=False)

    except Exception as error:
        logger.error(f"Failed to start server: {error}")
        exit(1)


if __name__ == "__main__":
    main()
