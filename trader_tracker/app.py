"""
app.py
------

Flask web application that provides the user interface of the tracker.
Traders log in, fill in their profile, upload a CSV of trades, sort,
search and undo, view statistics and export CSV or PDF reports. All
business logic lives in the ledger, analytics, validation and storage
modules; the routes only translate requests into calls on them and
errors into flashed messages.

To run the application:
    1. Install the package (``pip install -e .``).
    2. Execute ``trader-tracker`` or ``python -m trader_tracker``.
    3. Navigate to http://127.0.0.1:5004 in your web browser.

The server binds to the loopback interface and handles one request at a
time; it is meant as a local, single-user application.
"""
import logging
import os
from functools import wraps
from typing import Any, Mapping, Optional

from flask import (
    Flask, render_template, request, redirect, url_for,
    flash, g, session, Response
)
from fpdf.errors import FPDFException
from werkzeug.utils import secure_filename

from .analytics import compute_statistics, summarize
from .auth import AuthGate, GateState
from .csv_io import decode_upload, export_csv, read_trade_rows
from .database import TrackerDB
from .errors import EmptyStateError, TrackerError, UnknownUserError
from .report import build_report
from .validation import FORM_HINTS, validate_profile

ALLOWED_CSV = {"csv"}
OPEN_ENDPOINTS = {"login", "signup", "cancel", "static"}


def allowed_file(filename: str) -> bool:
    return "." in filename and filename.rsplit(".", 1)[1].lower() in ALLOWED_CSV


def _download_name(username: str) -> str:
    return secure_filename(username) or "trader"


def requires_profile(view):
    """Block the action until a validated profile is on record."""
    @wraps(view)
    def wrapped(*args, **kwargs):
        if not g.tracker.has_valid_profile:
            flash("Please complete and save a valid trader profile first.", "error")
            return redirect(url_for("index"))
        return view(*args, **kwargs)
    return wrapped


def create_app(config: Optional[Mapping[str, Any]] = None) -> Flask:
    app = Flask(__name__)
    app.config["SECRET_KEY"] = os.getenv("SECRET_KEY", "dev-secret")
    app.config["TRACKER_DB"] = os.getenv("TRACKER_DB", "trader_tracker.db")
    if config:
        app.config.update(config)

    db = TrackerDB(app.config["TRACKER_DB"])
    gate = AuthGate(db)
    app.extensions["trader_tracker"] = gate

    def _render_index(form: Optional[Mapping[str, str]] = None):
        tracker = g.tracker
        query = request.args.get("q", "").strip()
        trades = tracker.ledger.search(query) if query else tracker.ledger.trades
        if form is None:
            profile = tracker.profile
            form = {
                "email": profile.email if profile else "",
                "dob": profile.dob if profile else "",
                "phone": profile.phone if profile else "",
                "country": profile.country if profile else "",
                "account_id": profile.account_id if profile else "",
            }
        return render_template(
            "index.html",
            title="Smart Trader Tracker",
            tracker=tracker,
            trades=trades,
            query=query,
            summary=summarize(tracker.ledger),
            form=form,
            hints=FORM_HINTS,
            undo_depth=tracker.ledger.undo_depth,
        )

    # ---------- gate ----------
    @app.before_request
    def guard():
        if gate.state is GateState.TERMINATED:
            return render_template("closed.html", title="Closed"), 403
        if request.endpoint in OPEN_ENDPOINTS:
            return None
        tracker = gate.current
        if tracker is None or session.get("username") != tracker.username:
            return redirect(url_for("login"))
        g.tracker = tracker
        return None

    @app.route("/login", methods=["GET", "POST"])
    def login():
        if request.method == "POST":
            username = request.form.get("username", "")
            password = request.form.get("password", "")
            try:
                tracker = gate.login(username, password)
            except UnknownUserError as e:
                session["pending_signup"] = e.username
                return redirect(url_for("signup"))
            except TrackerError as e:
                flash(str(e), "error")
                return redirect(url_for("login"))
            session.clear()
            session["username"] = tracker.username
            return redirect(url_for("index"))

        session.pop("pending_signup", None)
        return render_template("login.html", title="Login")

    @app.route("/signup", methods=["GET", "POST"])
    def signup():
        username = session.get("pending_signup")
        if not username:
            return redirect(url_for("login"))
        if request.method == "POST":
            try:
                tracker = gate.register(username, request.form.get("password", ""))
            except TrackerError as e:
                flash(str(e), "error")
                return redirect(url_for("login"))
            session.clear()
            session["username"] = tracker.username
            flash("Account created.", "success")
            return redirect(url_for("index"))
        return render_template("signup.html", title="Create Account", username=username)

    @app.route("/cancel", methods=["POST"])
    def cancel():
        gate.cancel()
        session.clear()
        return render_template("closed.html", title="Closed")

    @app.route("/logout", methods=["POST"])
    def logout():
        gate.logout()
        session.clear()
        flash("Logged out.", "success")
        return redirect(url_for("login"))

    # ---------- main page ----------
    @app.route("/")
    def index():
        return _render_index()

    @app.route("/profile", methods=["POST"])
    def save_profile():
        tracker = g.tracker
        form = {name: request.form.get(name, "") for name in FORM_HINTS}
        try:
            profile = validate_profile(**form, placeholders=FORM_HINTS)
            db.save_profile(tracker.username, profile)
        except TrackerError as e:
            flash(str(e), "error")
            return _render_index(form=form)
        tracker.profile = profile
        flash("Profile saved.", "success")
        return redirect(url_for("index"))

    # ---------- ledger actions ----------
    @app.route("/upload", methods=["POST"])
    @requires_profile
    def upload():
        f = request.files.get("file")
        if not f or f.filename == "":
            flash("Please choose a CSV file.", "error")
            return redirect(url_for("index"))
        if not allowed_file(f.filename):
            flash("Only .csv files are supported.", "error")
            return redirect(url_for("index"))

        content = decode_upload(f.read())
        try:
            count = g.tracker.ledger.import_rows(read_trade_rows(content))
        except TrackerError as e:
            flash(f"Import aborted, trades unchanged. {e}", "error")
            return redirect(url_for("index"))
        flash(f"Imported {count} trades.", "success")
        return redirect(url_for("index"))

    @app.route("/sort", methods=["POST"])
    def sort_trades():
        g.tracker.ledger.sort_by_profit_descending()
        return redirect(url_for("index"))

    @app.route("/undo", methods=["POST"])
    def undo():
        removed = g.tracker.ledger.undo_last()
        if removed is not None:
            flash(f"Removed {removed.symbol} {removed.side} ({removed.date}).", "success")
        return redirect(url_for("index"))

    @app.route("/save", methods=["POST"])
    @requires_profile
    def save_trades():
        tracker = g.tracker
        try:
            db.save_ledger(tracker.username, tracker.ledger.trades)
        except TrackerError as e:
            flash(f"Save error: {e}", "error")
            return redirect(url_for("index"))
        flash("Trades saved.", "success")
        return redirect(url_for("index"))

    @app.route("/load", methods=["POST"])
    def load_trades():
        tracker = g.tracker
        try:
            trades = db.load_ledger(tracker.username)
        except TrackerError as e:
            flash(f"Load error: {e}", "error")
            return redirect(url_for("index"))
        tracker.ledger.replace(trades)
        flash(f"Loaded {len(trades)} trades.", "success")
        return redirect(url_for("index"))

    @app.route("/stats")
    def stats():
        try:
            s = compute_statistics(g.tracker.ledger)
        except EmptyStateError as e:
            flash(str(e), "error")
            return redirect(url_for("index"))
        return render_template("stats.html", title="Advanced Stats", stats=s)

    # ---------- exports ----------
    @app.route("/export/csv", methods=["GET"])
    @requires_profile
    def export_trades_csv():
        tracker = g.tracker
        app.logger.info("CSV export for %s", tracker.username)
        return Response(
            export_csv(tracker.ledger),
            mimetype="text/csv",
            headers={
                "Content-Disposition":
                    f"attachment; filename={_download_name(tracker.username)}_trades_export.csv"
            },
        )

    @app.route("/export/pdf", methods=["GET"])
    @requires_profile
    def export_trades_pdf():
        tracker = g.tracker
        try:
            data = build_report(tracker.username, tracker.profile, tracker.ledger)
        except (FPDFException, ValueError) as e:
            app.logger.exception("PDF export failed")
            flash(f"Export failed: {e}", "error")
            return redirect(url_for("index"))
        app.logger.info("PDF export for %s", tracker.username)
        return Response(
            data,
            mimetype="application/pdf",
            headers={
                "Content-Disposition":
                    f"attachment; filename={_download_name(tracker.username)}_report.pdf"
            },
        )

    return app


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app()
    host = os.getenv("TRACKER_HOST", "127.0.0.1")
    port = int(os.getenv("TRACKER_PORT", "5004"))
    app.run(host=host, port=port, debug=False, use_reloader=False, threaded=False)


# Run directly
if __name__ == "__main__":
    main()
