import os
import time
from datetime import date
import streamlit as st
from learnlog.client import ApiClient, ApiError
from learnlog.services.tasks import timer_seconds

STATUSES = ["todo", "in-progress", "completed", "skipped"]
CODE_LANGUAGES = ["python", "javascript", "typescript", "java", "cpp", "go", "rust"]
PRESET_COLORS = ["#3b82f6", "#10b981", "#8b5cf6", "#f59e0b", "#ef4444",
                 "#06b6d4", "#84cc16", "#f97316", "#ec4899", "#6366f1"]

st.set_page_config(page_title="LearnLog", layout="wide")

with st.sidebar:
    st.title("LearnLog")
    api_url = st.text_input("API URL", value=os.getenv("API_URL", "http://localhost:8000/api"))
    token = st.text_input("Access token", value=os.getenv("API_TOKEN", ""), type="password")
    page = st.radio("Page", ["Tasks", "Task", "Progress"], key="page")

api = ApiClient(api_url, token)


def run(action, *args, **kwargs):
    """Call the API; show failures and leave local state untouched."""
    try:
        return action(*args, **kwargs)
    except ApiError as e:
        st.error(f"Request failed ({e.status}): {e.message}")
    except Exception as e:
        st.error(f"Request failed: {e}")
    return None


def open_task(task_id: str):
    st.session_state["task_id"] = task_id
    st.session_state["page"] = "Task"


@st.fragment(run_every=1)
def task_timer(task):
    """Countdown for an in-progress task; completes the task when it reaches zero."""
    key = f"timer-{task['id']}"
    timer = st.session_state.setdefault(key, {"left": timer_seconds(task["time_estimate"]), "started": None})
    left = timer["left"]
    if timer["started"] is not None:
        left = max(0.0, left - (time.time() - timer["started"]))
    minutes, seconds = divmod(int(left), 60)
    t1, t2 = st.columns([1, 1])
    t1.markdown(f"Timer `{minutes:02d}:{seconds:02d}`")
    if timer["started"] is None:
        if t2.button("Start timer", key=f"{key}-start"):
            timer["started"] = time.time()
    elif t2.button("Pause", key=f"{key}-pause"):
        timer.update(left=left, started=None)
    if timer["started"] is not None and left <= 0:
        st.session_state.pop(key)
        if run(api.set_status, task["id"], "completed"):
            st.rerun()


def tasks_page():
    st.header("Tasks")
    categories = run(api.list_categories) or []
    names = [c["name"] for c in categories]

    c1, c2, c3, c4 = st.columns(4)
    q = c1.text_input("Search")
    status = c2.selectbox("Status", ["all"] + STATUSES)
    area = c3.selectbox("Focus area", ["all"] + names)
    when = c4.selectbox("Date", ["all", "today", "week", "overdue"])
    tasks = run(api.list_tasks, q=q, status=status, focus_area=area, when=when) or []

    counts = run(api.task_counts, q=q, status=status, focus_area=area, when=when)
    if counts:
        m1, m2, m3, m4 = st.columns(4)
        m1.metric("Total", counts["total"])
        m2.metric("Completed", counts["completed"])
        m3.metric("In progress", counts["in_progress"])
        m4.metric("Overdue", counts["overdue"])

    selected = st.multiselect("Select tasks", [t["id"] for t in tasks],
                              format_func=lambda i: next(t["title"] for t in tasks if t["id"] == i))
    if selected and st.button(f"Delete {len(selected)} selected"):
        if run(api.delete_tasks, selected) is not None:
            st.rerun()

    for t in tasks:
        with st.container(border=True):
            left, right = st.columns([3, 2])
            left.markdown(f"**{t['title']}**  \n{t['date']} · {t['focus_area']} · {t['time_estimate']} · `{t['status']}`")
            if t["details"]:
                left.caption(t["details"])
            if t["status"] == "in-progress":
                with left:
                    task_timer(t)
            b1, b2, b3, b4 = right.columns(4)
            new_status = None
            if t["status"] == "todo" and b1.button("Start", key=f"start-{t['id']}"):
                new_status = "in-progress"
            if t["status"] in ("todo", "in-progress") and b2.button("Done", key=f"done-{t['id']}"):
                new_status = "completed"
            if t["status"] in ("todo", "in-progress") and b3.button("Skip", key=f"skip-{t['id']}"):
                new_status = "skipped"
            if t["status"] in ("completed", "skipped") and b3.button("Reset", key=f"reset-{t['id']}"):
                new_status = "todo"
            b4.button("Open", key=f"open-{t['id']}", on_click=open_task, args=(t["id"],))
            if new_status and run(api.set_status, t["id"], new_status):
                st.rerun()

    with st.expander("Add task"):
        with st.form("add-task", clear_on_submit=True):
            when_d = st.date_input("Date", value=date.today())
            focus = st.selectbox("Focus area", names or [""])
            title = st.text_input("Title")
            details = st.text_area("Details")
            estimate = st.text_input("Time estimate", value="30 min")
            is_dsa = st.checkbox("DSA task")
            if st.form_submit_button("Add") and title.strip():
                payload = {"date": when_d.isoformat(), "focus_area": focus, "title": title,
                           "details": details, "time_estimate": estimate, "is_dsa": is_dsa}
                if run(api.create_task, payload):
                    st.rerun()

    with st.expander("Import"):
        upload = st.file_uploader("CSV or JSON file", type=["csv", "json"])
        pasted = st.text_area("...or paste CSV")
        i1, i2 = st.columns(2)
        if i1.button("Import"):
            if upload is not None:
                result = run(api.import_file, upload.name, upload.getvalue())
            else:
                result = run(api.import_text, pasted)
            if result:
                st.success(f"Imported {result['categories']} categories and {result['tasks']} tasks")
        if i2.button("Load sample data"):
            result = run(api.import_sample)
            if result:
                st.success(f"Imported {result['tasks']} sample tasks")

    with st.expander("Categories"):
        for c in categories:
            n1, n2, n3 = st.columns([3, 1, 1])
            n1.markdown(f"<span style='color:{c['color']}'>●</span> {c['name']}", unsafe_allow_html=True)
            color = n2.color_picker("Color", c["color"], key=f"color-{c['id']}", label_visibility="collapsed")
            if color != c["color"]:
                run(api.update_category, c["id"], {"color": color})
            if n3.button("Delete", key=f"cat-del-{c['id']}"):
                if run(api.delete_category, c["id"]):
                    st.rerun()
        with st.form("add-category", clear_on_submit=True):
            name = st.text_input("New category")
            color = st.selectbox("Color", PRESET_COLORS)
            if st.form_submit_button("Add category") and name.strip():
                if run(api.create_category, name.strip(), color):
                    st.rerun()


def task_page():
    task_id = st.session_state.get("task_id")
    if not task_id:
        st.info("Open a task from the task list.")
        return
    task = run(api.get_task, task_id)
    if not task:
        return
    st.header(task["title"])
    st.caption(f"{task['date']} · {task['focus_area']} · {task['status']}")

    with st.form("edit-task"):
        title = st.text_input("Title", task["title"])
        details = st.text_area("Details", task["details"])
        estimate = st.text_input("Time estimate", task["time_estimate"])
        status = st.selectbox("Status", STATUSES, index=STATUSES.index(task["status"]))
        notes = st.text_area("Notes (markdown)", task["notes"] or "", height=200)
        links = st.text_area("Links (one per line)", "\n".join(task["links"] or []))
        code = language = None
        if task["is_dsa"]:
            lang = task["code_language"] or "python"
            language = st.selectbox("Language", CODE_LANGUAGES,
                                    index=CODE_LANGUAGES.index(lang) if lang in CODE_LANGUAGES else 0)
            code = st.text_area("Code", task["code"] or "", height=300)
        if st.form_submit_button("Save"):
            updates = {"title": title, "details": details, "time_estimate": estimate,
                       "notes": notes or None,
                       "links": [l.strip() for l in links.splitlines() if l.strip()] or None}
            if status != task["status"]:
                updates["status"] = status
            if task["is_dsa"]:
                updates.update(code=code or None, code_language=language)
            if run(api.update_task, task_id, updates):
                st.rerun()

    if task["notes"]:
        st.subheader("Notes")
        st.markdown(task["notes"])
    for link in task["links"] or []:
        st.markdown(f"- [{link}]({link})")
    if task["code"]:
        st.code(task["code"], language=task["code_language"] or "python")

    st.subheader("Audio")
    if task["audio_path"]:
        audio = run(api.get_audio, task["audio_path"])
        if audio:
            st.audio(audio)
    recording = st.audio_input("Record a note")
    if recording is not None and st.button("Save recording"):
        if run(api.upload_audio, task_id, recording.getvalue(), recording.type or "audio/wav",
               filename=recording.name or "recording.wav"):
            st.rerun()


def progress_page():
    st.header("Progress")
    stats = run(api.progress)
    if not stats:
        return
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total progress", f"{stats['completion_rate']}%", f"{stats['completed']} of {stats['total']}")
    c2.metric("Current streak", f"{stats['current_streak']} days")
    c3.metric("Time invested", f"{stats['completed_time_estimate']}m",
              f"of {stats['total_time_estimate']}m planned")
    c4.metric("Active tasks", stats["in_progress"])

    st.subheader("Status distribution")
    st.bar_chart({"tasks": {"completed": stats["completed"], "in progress": stats["in_progress"],
                            "to do": stats["todo"], "skipped": stats["skipped"]}})
    if stats["focus_area_stats"]:
        st.subheader("Focus areas")
        st.bar_chart({
            "completed": {a: s["completed"] for a, s in stats["focus_area_stats"].items()},
            "total": {a: s["total"] for a, s in stats["focus_area_stats"].items()},
        })
    if stats["daily_progress"]:
        st.subheader("Daily progress")
        st.line_chart({
            "completed": {d["date"]: d["completed"] for d in stats["daily_progress"]},
            "total": {d["date"]: d["total"] for d in stats["daily_progress"]},
        })

    dump = run(api.export)
    if dump:
        st.download_button("Export JSON", dump, file_name=f"learning-progress-{date.today().isoformat()}.json",
                           mime="application/json")


{"Tasks": tasks_page, "Task": task_page, "Progress": progress_page}[page]()
