import logging

from flask import (
    Flask, request, render_template,
    redirect, url_for, jsonify, abort
)

# =============================
# IMPORT PROJECT MODULES
# =============================
import config
from logger import setup_logging
from agents import LessonOrchestrator
from state import LessonSession, Tab, TabSelected, Phase, to_view

setup_logging(config.LOG_LEVEL)
logger = logging.getLogger(__name__)
logger.info("Config loaded: %s", config.summary())

# =============================
# FLASK INITIALIZATION
# =============================
app = Flask(__name__)
app.secret_key = config.SECRET_KEY

# one page, one state container
lesson_session = LessonSession()
orchestrator = LessonOrchestrator(lesson_session)

ERROR_STATUS = {
    "validation": 400,
    "parse": 422,
    "transport": 502,
    "unknown": 500,
}


def _json_view(state):
    status = 200
    if state.phase == Phase.ERROR:
        status = ERROR_STATUS.get(state.error_code, 500)
    return jsonify(to_view(state)), status


# =============================
# PAGE ROUTES
# =============================
@app.get("/")
def home():
    return render_template("index.html", view=to_view(lesson_session.state))


@app.post("/generate")
async def generate():
    await orchestrator.generate(request.form.get("word", ""))
    return redirect(url_for("home"))


@app.get("/tab/<name>")
def select_tab(name):
    try:
        tab = Tab(name)
    except ValueError:
        abort(404)
    lesson_session.dispatch(TabSelected(tab))
    return redirect(url_for("home"))


# =============================
# API ROUTES
# =============================
@app.post("/api/lesson")
async def api_lesson():
    data = request.get_json(silent=True)
    # any JSON that is not an object carries no word
    word = data.get("word", "") if isinstance(data, dict) else ""
    state = await orchestrator.generate(word)
    return _json_view(state)


@app.get("/api/state")
def api_state():
    return jsonify(to_view(lesson_session.state))


@app.get("/health")
def health():
    return {"ok": True}


# =============================
# ENTRY POINT
# =============================
if __name__ == "__main__":
    app.run(host="0.0.0.0", port=config.PORT, debug=False)
