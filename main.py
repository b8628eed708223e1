from sniprewards.api.checkin.visits import checkin_bp
from sniprewards.api.loyalty.customer_loyalty import loyalty_bp
from sniprewards.routes.auth import auth_bp
from sniprewards.routes.salons import salons_bp
from flask import Flask, jsonify
from flask_cors import CORS
from dotenv import load_dotenv
from flasgger import Swagger
from swagger__config import SWAGGER_CONFIG, SWAGGER_TEMPLATE
import click
import os

load_dotenv()
from sniprewards.config import Config, mask_database_url  # noqa: E402
from sniprewards.exceptions import SnipRewardsError  # noqa: E402
from sniprewards.extensions import db  # noqa: E402
from sniprewards.models import Base  # noqa: E402

BLUEPRINTS = (auth_bp, salons_bp, checkin_bp, loyalty_bp)


def register_error_handlers(app):
    # require_auth raises before a view's own try/except can run
    @app.errorhandler(SnipRewardsError)
    def handle_snip_rewards_error(e):
        return jsonify(e.to_dict()), e.status_code


def register_commands(app):
    @app.cli.command("init-db")
    def init_db():
        """Create all tables."""
        Base.metadata.create_all(bind=db.engine)
        click.echo("Database tables created")


def create_app(test_config=None):
    app = Flask(__name__)
    try:
        app.config.from_object(Config)
        if test_config:
            app.config.update(test_config)

        # The scanner and dashboards live on the frontend origin
        CORS(app, resources={r"/api/*": {"origins": app.config["FRONTEND_URL"]}})
        db.init_app(app)

        swagger_template = dict(SWAGGER_TEMPLATE)
        swagger_template["host"] = os.environ.get("API_HOST", "127.0.0.1:5000")
        Swagger(app, config=SWAGGER_CONFIG, template=swagger_template)

        for bp in BLUEPRINTS:
            app.register_blueprint(bp)

        register_error_handlers(app)
        register_commands(app)

        @app.route("/")
        def home():
            """
            Health check
            ---
            tags:
              - Utility
            responses:
              200:
                description: SnipRewards API is up
                schema:
                  type: object
                  properties:
                    status:
                      type: string
                    message:
                      type: string
            """
            return {"status": "ok", "message": "SnipRewards API is running"}, 200

        print(
            f"SnipRewards app ready: {len(BLUEPRINTS)} blueprints, "
            f"{len(list(app.url_map.iter_rules()))} routes, "
            f"db {mask_database_url(app.config['SQLALCHEMY_DATABASE_URI'])}"
        )

    except Exception as e:
        import traceback

        print(f"SnipRewards app failed to start: {e}")
        print(traceback.format_exc())
        raise

    return app


app = create_app()


if __name__ == "__main__":
    app.run(
        host="0.0.0.0",
        port=int(os.environ.get("PORT", 5000)),
        debug=os.environ.get("FLASK_ENV") != "production",
    )
