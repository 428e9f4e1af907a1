#The code is according to PEP 8 coding styles standards
import logging
from threading import Lock
from typing import Any, Dict, List, Tuple

from flask import Flask, jsonify, request

from fitness_ai import config
from fitness_ai.exercises import Difficulty
from fitness_ai.processor import ExerciseAnalyzer
from fitness_ai.thresholds import ThresholdTable

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger("FitnessAIApp")

# Threshold table shared by new sessions until a client uploads its own
default_thresholds = ThresholdTable.load(config.THRESHOLDS_PATH)

# Flask app initialization
app = Flask(__name__)

# Thread-safe dictionary to store session-specific analyzers
sessions: Dict[str, ExerciseAnalyzer] = {}
session_lock = Lock()


def _session_id() -> str:
    return request.headers.get('X-Session-ID', 'default')


def _get_analyzer(session_id: str) -> ExerciseAnalyzer:
    """Get or create the analyzer for a session. Caller holds session_lock."""
    if session_id not in sessions:
        sessions[session_id] = ExerciseAnalyzer(thresholds=default_thresholds)
    return sessions[session_id]


def _bad_request(message: str):
    return jsonify({'error': 'Bad request', 'message': message}), 400


def _json_body() -> Dict[str, Any]:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValueError("Expected a JSON object body")
    return body


def _parse_landmarks(body: Dict[str, Any]) -> Tuple[List[Tuple[float, float]], float, float]:
    """
    Convert the posted landmark list into pixel (x, y) tuples.

    Accepts [[x, y], ...] or [{"x": .., "y": ..}, ...]. When 'normalized' is
    true the coordinates are in [0, 1] and are scaled by width/height.
    """
    raw = body.get('landmarks')
    if not isinstance(raw, list):
        raise ValueError("'landmarks' must be a list of points")

    width = float(body.get('width', config.FRAME_WIDTH))
    height = float(body.get('height', config.FRAME_HEIGHT))
    scale_x, scale_y = (width, height) if body.get('normalized') else (1.0, 1.0)

    points = []
    for point in raw:
        if isinstance(point, dict):
            x, y = point.get('x'), point.get('y')
        elif isinstance(point, (list, tuple)) and len(point) >= 2:
            x, y = point[0], point[1]
        else:
            raise ValueError(f"Invalid landmark: {point!r}")
        points.append((float(x) * scale_x, float(y) * scale_y))
    return points, width, height


@app.route('/session/start', methods=['POST'])
def start_session():
    """
    Configure (or create) the caller's session in one call.

    Expects:
        JSON with 'exercise', optional 'difficulty' and optional 'thresholds'
        (object in the threshold table wire format).
    """
    try:
        body = _json_body()
        exercise = body.get('exercise', config.DEFAULT_EXERCISE)
        if not isinstance(exercise, str):
            raise ValueError("'exercise' must be a string")
        difficulty = Difficulty(body.get('difficulty', config.DEFAULT_DIFFICULTY))
        table = ThresholdTable(body['thresholds']) if body.get('thresholds') is not None else None
    except ValueError as e:
        return _bad_request(str(e))

    # Nothing is applied until the whole request is valid
    with session_lock:
        analyzer = _get_analyzer(_session_id())
        analyzer.set_exercise(exercise)
        analyzer.set_difficulty(difficulty)
        if table is not None:
            analyzer.load_thresholds(table)
        return jsonify({'exercise': analyzer.exercise, 'difficulty': analyzer.difficulty.value})


@app.route('/exercise', methods=['POST'])
def set_exercise():
    """Switch exercise; this resets the session."""
    try:
        exercise = _json_body().get('exercise')
        if not isinstance(exercise, str):
            raise ValueError("'exercise' must be a string")
    except ValueError as e:
        return _bad_request(str(e))

    with session_lock:
        _get_analyzer(_session_id()).set_exercise(exercise)
    return jsonify({'exercise': exercise})


@app.route('/difficulty', methods=['POST'])
def set_difficulty():
    """Change difficulty; the session keeps its counters."""
    try:
        difficulty = _json_body().get('difficulty')
        with session_lock:
            analyzer = _get_analyzer(_session_id())
            analyzer.set_difficulty(difficulty)
            return jsonify({'difficulty': analyzer.difficulty.value})
    except ValueError as e:
        return _bad_request(str(e))


@app.route('/thresholds', methods=['POST'])
def load_thresholds():
    """Replace the session's threshold table with the posted one."""
    try:
        table = ThresholdTable(_json_body())
    except ValueError as e:
        return _bad_request(str(e))

    with session_lock:
        _get_analyzer(_session_id()).load_thresholds(table)
    return jsonify({'exercises': table.exercises()})


@app.route('/reset', methods=['POST'])
def reset_session():
    with session_lock:
        analyzer = _get_analyzer(_session_id())
        analyzer.reset()
        session = analyzer.session
        return jsonify({'repCount': session.rep_count, 'correctReps': session.correct_rep_count})


@app.route('/exercises', methods=['GET'])
def list_exercises():
    return jsonify(ExerciseAnalyzer.available_exercises())


@app.route('/difficulties', methods=['GET'])
def list_difficulties():
    return jsonify(ExerciseAnalyzer.available_difficulties())


@app.route('/analyze_frame', methods=['POST'])
def analyze_frame():
    """
    Analyze one landmark frame sent via POST request.

    Expects:
        JSON with 'landmarks' (33 points), optional 'width', 'height' and
        'normalized'. Optional session ID in 'X-Session-ID' header.

    Returns:
        JSON containing:
        - frame width/height and pixel landmarks for overlays
        - message, repCount, correctReps, isCorrect
    """
    try:
        points, width, height = _parse_landmarks(_json_body())
    except (TypeError, ValueError) as e:
        return _bad_request(str(e))

    with session_lock:
        feedback = _get_analyzer(_session_id()).analyze_frame(points, frame_width=width)

    response = {
        'width': width,
        'height': height,
        'landmarks': [{'x': x, 'y': y} for x, y in points],
    }
    response.update(feedback.to_dict())
    return jsonify(response)


@app.errorhandler(500)
def handle_server_error(e):
    """
    Global error handler for unhandled internal server errors (HTTP 500).
    """
    logger.error(f"Unhandled error: {e}")
    return jsonify({
        'error': 'Internal server error',
        'message': str(e)
    }), 500


# App entry point
if __name__ == '__main__':
    # Run server on 0.0.0.0 to allow external access (e.g., mobile testing)
    app.run(host='0.0.0.0', port=config.PORT)
