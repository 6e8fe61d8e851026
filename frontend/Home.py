"""
Home.py: entry point of the exam portal Streamlit app.
Checks for a valid session; redirects to login if missing.
Shows the dashboard when authenticated.
"""
import streamlit as st

from components.session import configure_logging, get_client, require_auth, run_call
from exam_client.services import auth, results, user as user_service

configure_logging()

st.set_page_config(
    page_title="ACS Exams",
    page_icon="📝",
    layout="wide",
)

# ── Custom CSS ───────────────────────────────────────────────────────────────
st.markdown(
    """
    <style>
    .dash-card {
        background: #f1f5f9;
        border: 1px solid #cbd5e1;
        border-radius: 12px;
        padding: 1.4rem 1.6rem;
    }
    .dash-card h3 { color: #0e7490; margin-bottom: 0.4rem; }
    .dash-card p  { color: #475569; margin: 0; font-size: 0.9rem; }
    div.stButton > button {
        background: #00bcd4;
        color: #ffffff;
        border: none;
        border-radius: 8px;
        font-weight: 600;
    }
    </style>
    """,
    unsafe_allow_html=True,
)

# ── Auth guard ───────────────────────────────────────────────────────────────
client = require_auth()
session = client.session

if session.is_admin():
    profile = session.admin or {}
    display_name = profile.get("username", "admin")
else:
    profile = session.user or {}
    display_name = profile.get("fullName") or profile.get("phone", "")

# ── Sidebar ──────────────────────────────────────────────────────────────────
with st.sidebar:
    st.markdown(f"Signed in as **{display_name}**")
    st.divider()
    if st.button("Sign Out", key="sidebar-logout"):
        auth.logout(get_client())
        st.rerun()

# ── Dashboard ────────────────────────────────────────────────────────────────
st.markdown(f"## 👋 Welcome back, **{display_name}**")
st.divider()

if session.is_admin():
    st.page_link("pages/5_Admin.py", label="Open the admin dashboard →")
    st.stop()

col1, col2, col3 = st.columns(3)

with col1:
    st.markdown(
        '<div class="dash-card"><h3>📝 Exams</h3><p>Pick an exam and start the timer.</p></div>',
        unsafe_allow_html=True,
    )
    st.page_link("pages/2_Exams.py", label="Browse exams →")

with col2:
    st.markdown(
        '<div class="dash-card"><h3>📊 Results</h3><p>Review your past attempts.</p></div>',
        unsafe_allow_html=True,
    )
    st.page_link("pages/3_Results.py", label="View results →")

with col3:
    st.markdown(
        '<div class="dash-card"><h3>👤 Profile</h3><p>Update your details and password.</p></div>',
        unsafe_allow_html=True,
    )
    st.page_link("pages/4_Profile.py", label="Edit profile →")

recent = run_call(user_service.get_results, client)
if recent:
    st.subheader("Recent results")
    for r in recent[:5]:
        row = results.normalize_result(r.model_dump(by_alias=True))
        st.write(f"{row['examTitle'] or row['examId']}: {row['score']:g}/{row['totalQuestions']:g} ({row['percentage']:g}%)")
