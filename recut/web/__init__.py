"""Flask application factory for the recut web API."""

from flask import Flask, jsonify

from recut.interpreter import Interpreter
from recut.manifest import InterpreterConfig, SessionConfig


def create_app(
    interpreter: Interpreter | None = None,
    session_config: SessionConfig | None = None,
    interpreter_config: InterpreterConfig | None = None,
) -> Flask:
    app = Flask(__name__)
    app.config["INTERPRETER"] = interpreter
    app.config["SESSION_CONFIG"] = session_config or SessionConfig()
    app.config["INTERPRETER_CONFIG"] = interpreter_config or InterpreterConfig()

    from recut.web.routes import bp
    app.register_blueprint(bp)

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({"error": "Not found"}), 404

    return app
