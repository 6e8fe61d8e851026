"""3_Results.py: past attempts and per-question review."""
import streamlit as st

from components.session import require_auth, run_call
from exam_client.services import results

st.set_page_config(page_title="Results", page_icon="📊", layout="wide")

client = require_auth()

st.title("📊 Results")

selected = st.session_state.pop("last_result_id", None)

for r in run_call(results.list_results, client) or []:
    row = results.normalize_result(r.model_dump(by_alias=True))
    with st.expander(f"{row['examTitle']} · {row['date']} · {row['percentage']}%", expanded=r.id == selected):
        st.write(f"Grade: {results.grade_for(row['percentage'])}")
        st.write(f"Score: {row['score']:g} / {row['totalQuestions']:g}")
        if st.button("Show answers", key=f"detail_{r.id}"):
            details = run_call(results.get_result, client, r.id)
            if details:
                for a in details.answers:
                    mark = "✅" if a.is_correct else "❌"
                    st.markdown(f"{mark} {a.question_text}")
                    if a.explanation:
                        st.caption(a.explanation)
        if st.button("Share", key=f"share_{r.id}"):
            url = run_call(results.share_result, client, r.id)
            if url:
                st.code(url)
