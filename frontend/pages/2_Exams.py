"""2_Exams.py: list exams, take one against the clock, submit answers."""
import time

import streamlit as st

from components.session import require_auth, run_call
from exam_client.services import exams, sections

st.set_page_config(page_title="Exams", page_icon="📝", layout="wide")

client = require_auth()


@st.cache_data(ttl=300, show_spinner=False)
def _sections():
    return [s.model_dump() for s in sections.list_sections(client)]


# ── Taking an exam ───────────────────────────────────────────────────────────
active_id = st.session_state.get("active_exam")

if active_id:
    exam = run_call(exams.get_exam, client, active_id)
    if exam is None:
        st.session_state.pop("active_exam", None)
        st.stop()

    started = st.session_state.setdefault("exam_started_at", time.time())
    elapsed = time.time() - started
    limit = (exam.duration or 0) * 60
    st.title(exam.title)
    if limit:
        remaining = max(0, int(limit - elapsed))
        st.progress(min(1.0, elapsed / limit), text=f"{remaining // 60}:{remaining % 60:02d} left")

    with st.form("exam_form"):
        answers = []
        for i, q in enumerate(exam.questions, start=1):
            labels = [o if isinstance(o, str) else o.get("text", "") for o in q.options]
            choice = st.radio(f"{i}. {q.text}", range(len(labels)), format_func=lambda k, l=labels: l[k],
                              index=None, key=f"q_{q.id}")
            if choice is not None:
                option = q.options[choice]
                answer = {"questionId": q.id, "selectedOption": choice}
                if isinstance(option, dict) and option.get("id"):
                    answer["selectedOptionId"] = option["id"]
                answers.append(answer)
        done = st.form_submit_button("Submit")

    if done or (limit and elapsed >= limit):
        submitted = run_call(exams.submit_exam, client, exam.id, answers, round(elapsed))
        if submitted:
            result, result_id = submitted
            st.session_state.pop("active_exam", None)
            st.session_state.pop("exam_started_at", None)
            st.session_state["last_result_id"] = result_id
            st.success(f"Score: {result.score:g}/{result.total_questions}")
            st.page_link("pages/3_Results.py", label="See details →")
    st.stop()

# ── Exam list ────────────────────────────────────────────────────────────────
st.title("📝 Exams")

section_list = run_call(_sections) or []
names = {s["id"]: s["name"] for s in section_list}
section = st.selectbox("Section", [None, *names], format_func=lambda k: names.get(k, "All sections"))

for exam in run_call(exams.list_exams, client, section=section) or []:
    with st.container(border=True):
        st.markdown(f"**{exam.title}**")
        st.caption(f"{exam.questions_count or len(exam.questions)} questions · {exam.duration or '?'} min")
        if st.button("Start", key=f"start_{exam.id}"):
            st.session_state["active_exam"] = exam.id
            st.session_state.pop("exam_started_at", None)
            st.rerun()
