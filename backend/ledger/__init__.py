from flask import Flask, jsonify
from flask_cors import CORS

from ledger.config import Config
from ledger.extensions import init_mongo


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Disable strict slashes to prevent 308 redirects that break CORS preflight
    app.url_map.strict_slashes = False

    CORS(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}})

    init_mongo(app)

    from ledger.expenses.routes import expenses_bp
    from ledger.settlements.routes import settlements_bp

    app.register_blueprint(expenses_bp, url_prefix='/api/v1/expenses')
    app.register_blueprint(settlements_bp, url_prefix='/api/v1/settlements')

    @app.route("/health")
    def health():
        return jsonify({"status": "ok"})

    return app
