import logging

from flask import Flask, abort, jsonify, request
from werkzeug.exceptions import HTTPException

from analytics import Analytics
from calendar_date import CalendarDate, InvalidDate
from config import Config
from controller import CalendarController
from events import EventCSVCodec, EventStore, ParseError

app = Flask(__name__)
app.config.from_object(Config)

logger = logging.getLogger(__name__)


def get_controller() -> CalendarController:
    """Controller for this app, created and loaded on first use."""
    controller = app.extensions.get("calendar_controller")
    if controller is None:
        store = EventStore(app.config["EVENTS_PATH"])
        store.load()
        controller = CalendarController(store, analytics=Analytics(app.config["ANALYTICS_LOG"]))
        app.extensions["calendar_controller"] = controller
    return controller


def event_to_dict(event):
    return {"date": EventCSVCodec.format_date(event.date), "description": event.description}


def cell_to_dict(cell):
    if cell is None:
        return None
    return {
        "day": cell.day,
        "date": str(cell),
        "weekday": cell.weekday,
        "is_selected": cell.is_selected,
        "is_today": cell.is_today,
        "has_events": cell.has_events,
    }


def parse_day(text):
    """Date from the URL or form; it must be one an event can be stored on."""
    try:
        day = CalendarDate.parse(text)
        day.to_date()
    except InvalidDate as exc:
        abort(400, description=str(exc))
    return day


def calendar_state(controller):
    return {
        "selected": str(controller.selected),
        "header": controller.header(),
        "month_label": controller.month_label(),
        "weeks": [[cell_to_dict(cell) for cell in week] for week in controller.month_grid()],
        "events": [event_to_dict(e) for e in controller.events_for_selected()],
    }


@app.errorhandler(HTTPException)
def handle_http_error(error):
    return jsonify(error=error.description), error.code


@app.errorhandler(ParseError)
def handle_parse_error(error):
    logger.error("Event file could not be parsed: %s", error)
    return jsonify(error=f"Event file is corrupted: {error}"), 500


@app.route("/")
def home():
    controller = get_controller()
    return jsonify(header=controller.header(), today=str(CalendarDate()))


@app.route("/calendar")
def calendar_view():
    return jsonify(calendar_state(get_controller()))


@app.route("/calendar/<action>", methods=["POST"])
def navigate(action):
    controller = get_controller()
    try:
        controller.navigate(action)
    except ValueError as exc:
        abort(404, description=str(exc))
    return jsonify(calendar_state(controller))


@app.route("/events")
def all_events():
    return jsonify(events=[event_to_dict(e) for e in get_controller().store.all_events()])


@app.route("/day/<day>")
def events_by_day(day):
    day_date = parse_day(day)
    events = get_controller().store.events_for_date(day_date)
    return jsonify(date=str(day_date), events=[event_to_dict(e) for e in events])


@app.route("/add", methods=["POST"])
def add_event():
    controller = get_controller()
    event_date = parse_day(request.form.get("date") or str(controller.selected))
    try:
        saved = controller.add_event(event_date, request.form.get("title", ""))
    except ValueError as exc:
        abort(400, description=str(exc))
    if not saved:
        abort(500, description="Event could not be saved")
    return jsonify(date=str(event_date), title=request.form["title"].strip()), 201


@app.route("/edit/<day>", methods=["POST"])
def edit_event(day):
    controller = get_controller()
    old_date = parse_day(day)
    new_date = parse_day(request.form.get("date") or day)
    try:
        saved = controller.save_event(old_date, new_date, request.form.get("title", ""))
    except ValueError as exc:
        abort(400, description=str(exc))
    if not saved:
        abort(500, description="Event could not be updated")
    return jsonify(date=str(new_date), events=[event_to_dict(e) for e in controller.store.events_for_date(new_date)])


@app.route("/delete/<day>", methods=["POST"])
def delete_event(day):
    day_date = parse_day(day)
    removed = get_controller().remove_event(day_date)
    return jsonify(date=str(day_date), removed=removed)


if __name__ == "__main__":
    logging.basicConfig(level=app.config["LOG_LEVEL"])
    app.run(debug=True)
