import logging
import os
from datetime import date, datetime

from dotenv import load_dotenv
from flask import Flask, jsonify, request
from flask_migrate import Migrate

load_dotenv()

from models import db
from services.allocator import InvalidPriorityError
from services.clockify import SourceUnavailableError
from services.earnings import (
    daily_reports_for_week,
    get_day,
    get_month,
    get_summary,
    get_week,
    get_year,
    monthly_reports_for_year,
    threshold_series,
)
from services.goals import list_goals, process_goals_with_progress, replace_goals, seed_goals

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(config: dict | None = None) -> Flask:
    app = Flask(__name__)

    database_url = os.environ.get("DATABASE_URL", "sqlite:///dashboard.db")
    # Railway uses postgres:// but SQLAlchemy needs postgresql://
    if database_url.startswith("postgres://"):
        database_url = database_url.replace("postgres://", "postgresql://", 1)

    app.config["SQLALCHEMY_DATABASE_URI"] = database_url
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    if config:
        app.config.update(config)

    db.init_app(app)
    Migrate(app, db)

    register_routes(app)
    register_commands(app)
    return app


def _reference_date():
    """The ?date=YYYY-MM-DD query parameter, or now."""
    raw = request.args.get("date")
    if not raw:
        return datetime.now()
    return date.fromisoformat(raw)


def register_routes(app: Flask):

    @app.errorhandler(SourceUnavailableError)
    def source_unavailable(e):
        logger.error("Earnings source unavailable: %s", e)
        return jsonify({"error": str(e)}), 502

    # ── Earnings ─────────────────────────────────────────────────────────

    @app.route("/api/earnings/day")
    def earnings_day():
        """Earnings for a single day."""
        try:
            moment = _reference_date()
        except ValueError:
            return jsonify({"error": "date must be YYYY-MM-DD"}), 400
        return jsonify(get_day(moment))

    @app.route("/api/earnings/week")
    def earnings_week():
        """Week total plus a Monday-to-Sunday breakdown and daily ceilings."""
        try:
            moment = _reference_date()
        except ValueError:
            return jsonify({"error": "date must be YYYY-MM-DD"}), 400

        days = daily_reports_for_week(moment)
        return jsonify({
            "total_earnings": sum(d["total_earnings"] for d in days),
            "days": days,
            "thresholds": threshold_series()["daily"],
        })

    @app.route("/api/earnings/month")
    def earnings_month():
        """Month total against monthly ceilings."""
        try:
            moment = _reference_date()
        except ValueError:
            return jsonify({"error": "date must be YYYY-MM-DD"}), 400

        report = get_month(moment)
        report["thresholds"] = threshold_series()["monthly"]
        return jsonify(report)

    @app.route("/api/earnings/year")
    def earnings_year():
        """Yearly metrics plus a month-by-month breakdown."""
        try:
            moment = _reference_date()
        except ValueError:
            return jsonify({"error": "date must be YYYY-MM-DD"}), 400

        report = get_year(moment)
        report["months"] = monthly_reports_for_year(moment)
        report["thresholds"] = threshold_series()["monthly"]
        return jsonify(report)

    @app.route("/api/summary")
    def summary():
        """Today's earnings and days since the last day with earnings."""
        return jsonify(get_summary())

    @app.route("/api/thresholds")
    def thresholds():
        """Benefit-eligibility ceilings per period."""
        return jsonify(threshold_series())

    # ── Goals ────────────────────────────────────────────────────────────

    @app.route("/api/goals")
    def get_goals():
        """Return the goal catalog in order."""
        return jsonify([g.to_dict() for g in list_goals()])

    @app.route("/api/goals", methods=["PUT"])
    def save_goals():
        """Replace the goal catalog."""
        data = request.get_json(silent=True)
        goals = data.get("goals") if isinstance(data, dict) else None
        if not isinstance(goals, list):
            return jsonify({"error": "Body must be {\"goals\": [...]}"}), 400

        try:
            saved = replace_goals(goals)
        except ValueError as e:
            # InvalidPriorityError is a ValueError too
            return jsonify({"error": str(e)}), 400

        return jsonify({"message": f"Saved {len(saved)} goals", "count": len(saved)})

    @app.route("/api/goals/progress")
    def goals_progress():
        """Fund goals from cumulative earnings, highest priority first."""
        try:
            return jsonify(process_goals_with_progress())
        except InvalidPriorityError as e:
            return jsonify({"error": str(e)}), 400


def register_commands(app: Flask):

    @app.cli.command("seed-goals")
    def seed_goals_command():
        """Populate an empty goal catalog from services/goals.json."""
        db.create_all()
        count = seed_goals()
        print(f"Seeded {count} goals")


app = create_app()


# ── Run ──────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app.run(
        debug=True,
        port=int(os.environ.get("PORT", 5002)),
    )
